from __future__ import annotations

import io
import logging
import struct

import pytest

from exifstream.binary_reader import ExifStreamReader
from exifstream.exif_tags import DEFAULT_CATALOG
from exifstream.value_decoder import DirectoryEntry, ExifFormat, ValueDecoder, format_name
from exifstream.values import Rational, ValueKind


def _decode(tag, format_code, count, raw_field, data=b'', endian='<'):
    decoder = ValueDecoder(ExifStreamReader(io.BytesIO(data), endian))
    entry = DirectoryEntry(tag, format_code, count, raw_field)
    return decoder.decode(entry, DEFAULT_CATALOG.describe(tag))


def _offset(value, endian='<'):
    return struct.pack(f'{endian}I', value)


def test_long_follows_byte_order():
    raw = b'\x00\x01\x00\x00'
    assert _decode(0x0201, ExifFormat.LONG, 1, raw).integer == 256
    assert _decode(0x0201, ExifFormat.LONG, 1, raw, endian='>').integer == 65536
    assert _decode(0x0201, ExifFormat.LONG, 1, b'\x01\x00\x00\x00', endian='>').integer == 16777216


def test_short_reads_first_two_bytes():
    assert _decode(0x0112, ExifFormat.SHORT, 1, b'\x06\x00\x00\x00').integer == 6
    assert _decode(0x0112, ExifFormat.SHORT, 1, b'\x00\x06\x00\x00', endian='>').integer == 6


def test_short_with_count_above_one_is_absent(caplog):
    value = _decode(0x0102, ExifFormat.SHORT, 3, _offset(0))
    assert value.kind is ValueKind.ABSENT
    assert "unable to decode" in caplog.text


def test_inline_ascii_keeps_padding():
    assert _decode(0x010F, ExifFormat.ASCII, 3, b'ABC\x00').text == "ABC"
    assert _decode(0x010F, ExifFormat.ASCII, 4, b'AB\x00\x00').text == "AB\x00\x00"


def test_out_of_line_ascii():
    data = b'\x00' * 8 + b'Hello World\x00'
    value = _decode(0x010F, ExifFormat.ASCII, 12, _offset(8), data)
    assert value.text == "Hello World\x00"


def test_out_of_line_ascii_respects_base():
    data = b'junk' + b'\x00' * 8 + b'Nikon\x00'
    decoder = ValueDecoder(ExifStreamReader(io.BytesIO(data), '<', base=4))
    entry = DirectoryEntry(0x010F, ExifFormat.ASCII, 6, _offset(8))
    assert decoder.decode(entry, DEFAULT_CATALOG.describe(0x010F)).text == "Nikon\x00"


def test_out_of_line_past_end_is_absent(caplog):
    value = _decode(0x010F, ExifFormat.ASCII, 40, _offset(8), b'\x00' * 16)
    assert not value.is_present
    assert "past the end" in caplog.text


def test_single_rational():
    data = struct.pack('>II', 1, 2)
    value = _decode(0x011A, ExifFormat.RATIONAL, 1, _offset(0, '>'), data, endian='>')
    assert value.rational == Rational(1, 2)


def test_rational_sequence():
    data = struct.pack('<6I', 48, 1, 1, 1, 0, 1)
    value = _decode(0x0002, ExifFormat.RATIONAL, 3, _offset(0), data)
    assert value.rationals == (Rational(48, 1), Rational(1, 1), Rational(0, 1))


def test_rational_is_unsigned():
    data = struct.pack('<II', 0xFFFFFFFF, 1)
    value = _decode(0x011A, ExifFormat.RATIONAL, 1, _offset(0), data)
    assert value.rational == Rational(4294967295, 1)


def test_signed_rational():
    data = struct.pack('<ii', -1, 3)
    value = _decode(0x9204, ExifFormat.SRATIONAL, 1, _offset(0), data)
    assert value.rational == Rational(-1, 3)


def test_rational_count_zero_is_absent():
    assert not _decode(0x011A, ExifFormat.RATIONAL, 0, _offset(0)).is_present


@pytest.mark.parametrize(
    "tag, format_code, count, raw, expected",
    [
        (0x0000, ExifFormat.BYTE, 4, b'\x02\x02\x00\x00', "2.2.0.0"),
        (0x0005, ExifFormat.BYTE, 1, b'\x01\x00\x00\x00', 1),
        (0x9000, ExifFormat.UNDEFINED, 4, b'0230', "0230"),
        (0xA000, ExifFormat.UNDEFINED, 4, b'0100', "0100"),
        (0x9101, ExifFormat.UNDEFINED, 4, b'\x01\x02\x03\x00', "1230"),
        (0xA300, ExifFormat.UNDEFINED, 1, b'\x03\x00\x00\x00', 3),
        (0xA301, ExifFormat.UNDEFINED, 1, b'\x01\x00\x00\x00', 1),
    ],
)
def test_tag_specific_overrides(tag, format_code, count, raw, expected):
    for endian in ('<', '>'):
        assert _decode(tag, format_code, count, raw, endian=endian).to_python() == expected


def test_gps_processing_method():
    data = b'ASCII\x00\x00\x00GPS'
    value = _decode(0x001B, ExifFormat.UNDEFINED, len(data), _offset(0), data)
    assert value.text == "ASCII\x00\x00\x00GPS"


def test_override_with_wrong_count_is_absent():
    assert not _decode(0x9000, ExifFormat.UNDEFINED, 2, b'02\x00\x00').is_present


def test_byte_and_undefined_without_override_are_absent():
    assert not _decode(0x0100, ExifFormat.BYTE, 1, b'\x01\x00\x00\x00').is_present
    assert not _decode(0x9286, ExifFormat.UNDEFINED, 4, b'abcd').is_present


@pytest.mark.parametrize(
    "format_code",
    [ExifFormat.SBYTE, ExifFormat.SSHORT, ExifFormat.SLONG, ExifFormat.FLOAT, ExifFormat.DOUBLE],
)
def test_unsupported_formats_are_absent(format_code, caplog):
    caplog.set_level(logging.WARNING, logger="exifstream")
    value = _decode(0x9204, format_code, 1, b'\x01\x00\x00\x00')
    assert value.kind is ValueKind.ABSENT
    assert "not supported" in caplog.text


def test_format_name():
    assert format_name(5) == "unsigned rational"
    assert format_name(14) == "format 14"
