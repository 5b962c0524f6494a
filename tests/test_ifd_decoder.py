from __future__ import annotations

import io
import logging
import struct

import pytest

from conftest import Ref, build_tiff
from exifstream.binary_reader import ExifStreamReader
from exifstream.exceptions import MetadataReadError
from exifstream.ifd_decoder import IFDDecoder

MAKE = (0x010F, 2, 3, b'ABC')
MODEL = (0x0110, 2, 4, b'X10\x00')
EXIF_VERSION = (0x9000, 7, 4, b'0230')


def _decoder(tiff: bytes, endian: str = '<') -> IFDDecoder:
    return IFDDecoder(ExifStreamReader(io.BytesIO(tiff), endian))


def test_single_entry():
    decoder = _decoder(build_tiff([[MAKE]]))
    assert decoder.decode_root(8) == 0
    assert len(decoder.entries) == 1
    entry = decoder.entries[0]
    assert (entry.name, entry.directory, entry.format, entry.count) == ("Make", "IFD0", 2, 3)
    assert decoder.values[0x010F].text == "ABC"


def test_sub_directories_resolved_after_parent_entries():
    tiff = build_tiff(
        [
            [MAKE, (0x8769, 13, 1, Ref(1)), MODEL],
            [EXIF_VERSION],
            [(0x0103, 3, 1, struct.pack('<H', 6))],
        ],
        links={0: 2},
    )
    decoder = _decoder(tiff)
    next_offset = decoder.decode_root(8)

    assert [(e.directory, e.name) for e in decoder.entries] == [
        ("IFD0", "Make"),
        ("IFD0", "Model"),
        ("ExifIFD", "ExifVersion"),
    ]
    assert decoder.values[0x9000].text == "0230"
    assert 0x8769 not in decoder.values

    thumbnail_values = decoder.decode_thumbnail_directory(next_offset)
    assert thumbnail_values[0x0103].integer == 6
    assert 0x0103 not in decoder.values
    assert decoder.entries[-1].directory == "IFD1"


def test_gps_and_interop_directories_big_endian():
    tiff = build_tiff(
        [
            [(0x8825, 4, 1, Ref(1)), (0x8769, 4, 1, Ref(2))],
            [(0x0001, 2, 2, b'N\x00')],
            [(0xA005, 4, 1, Ref(3))],
            [(0x0001, 2, 4, b"R98\x00"), (0x0002, 7, 4, b"0100")],
        ],
        endian=">",
    )
    decoder = _decoder(tiff, ">")
    decoder.decode_root(8)
    assert [e.directory for e in decoder.entries] == ["GPS", "InteropIFD", "InteropIFD"]
    assert decoder.values[0x0001].text == "N\x00"
    assert 0x0002 not in decoder.values
    assert decoder.interop_values[0x0001].text == "R98\x00"
    assert not decoder.interop_values[0x0002].is_present


def test_interop_values_do_not_shadow_gps_codes():
    tiff = build_tiff(
        [
            [MAKE, (0x8769, 4, 1, Ref(1))],
            [EXIF_VERSION, (0xA005, 4, 1, Ref(2))],
            [(0x0001, 2, 4, b"R98\x00")],
        ]
    )
    decoder = _decoder(tiff)
    decoder.decode_root(8)
    assert 0x0001 not in decoder.values
    assert decoder.interop_values == {0x0001: decoder.entries[-1].value}
    assert decoder.entries[-1].directory == "InteropIFD"


def test_pointer_back_to_root_is_skipped(caplog):
    caplog.set_level(logging.WARNING, logger="exifstream")
    decoder = _decoder(build_tiff([[MAKE, (0x8769, 4, 1, Ref(0))]]))
    decoder.decode_root(8)
    assert [e.name for e in decoder.entries] == ["Make"]
    assert "already visited" in caplog.text


def test_self_referencing_sub_directory_terminates(caplog):
    tiff = build_tiff(
        [
            [MAKE, (0x8769, 13, 1, Ref(1))],
            [EXIF_VERSION, (0xA005, 4, 1, Ref(1))],
        ]
    )
    decoder = _decoder(tiff)
    decoder.decode_root(8)
    assert [e.name for e in decoder.entries] == ["Make", "ExifVersion"]
    assert "already visited" in caplog.text


def test_thumbnail_directory_revisit_is_skipped(caplog):
    decoder = _decoder(build_tiff([[MAKE]], links={0: 0}))
    assert decoder.decode_root(8) == 8
    assert decoder.decode_thumbnail_directory(8) is None
    assert "already visited" in caplog.text


def test_format_out_of_range_is_fatal():
    with pytest.raises(MetadataReadError, match="format 14"):
        _decoder(build_tiff([[(0x010F, 14, 1, 0)]])).decode_root(8)
    with pytest.raises(MetadataReadError):
        _decoder(build_tiff([[(0x010F, 0, 1, 0)]])).decode_root(8)


@pytest.mark.parametrize(
    "entry",
    [
        (0x8769, 3, 1, 0),
        (0x8825, 2, 4, b'abc\x00'),
        (0x927C, 4, 1, 0),
    ],
)
def test_pointer_with_wrong_format_is_fatal(entry):
    with pytest.raises(MetadataReadError, match="must have format"):
        _decoder(build_tiff([[entry]])).decode_root(8)


def test_maker_note_is_reported_and_skipped(caplog):
    tiff = build_tiff(
        [
            [MAKE, MODEL, (0x8769, 4, 1, Ref(1))],
            [(0x927C, 7, 6, Ref(2)), EXIF_VERSION],
            b'Nikon\x00',
        ]
    )
    decoder = _decoder(tiff)
    decoder.decode_root(8)
    assert [e.name for e in decoder.entries] == ["Make", "Model", "ExifVersion"]
    assert "MakerNote" in caplog.text
    assert "'ABC'" in caplog.text
    assert "'X10'" in caplog.text


def test_truncated_directory_is_fatal():
    tiff = b'II\x2a\x00\x08\x00\x00\x00' + struct.pack('<H', 3) + b'\x0f\x01\x02\x00' + b'\x00' * 8
    with pytest.raises(MetadataReadError):
        _decoder(tiff).decode_root(8)


def test_unknown_tags_are_kept():
    decoder = _decoder(build_tiff([[(0xFEED, 3, 1, struct.pack('<H', 7))]]))
    decoder.decode_root(8)
    assert decoder.entries[0].name == "Unknown_FEED"
    assert decoder.values[0xFEED].integer == 7
