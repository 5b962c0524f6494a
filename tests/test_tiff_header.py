from __future__ import annotations

import io
import logging

import pytest

from exifstream.exceptions import MetadataReadError
from exifstream.tiff_header import MIN_EXIF_SEGMENT_LENGTH, read_tiff_header


def _payload(header: bytes, prefix: bytes = b'') -> io.BytesIO:
    stream = io.BytesIO(prefix + b'Exif\x00\x00' + header)
    stream.seek(len(prefix))
    return stream


def test_little_endian_header():
    stream = _payload(b'II\x2a\x00\x08\x00\x00\x00', prefix=b'\x00\x00\x00\x00')
    header = read_tiff_header(stream, 100)
    assert header is not None
    assert header.byte_order == "II"
    assert header.endian == '<'
    assert header.base == 10
    assert header.root_offset == 8
    assert "Intel" in header.byte_order_name


def test_big_endian_header():
    header = read_tiff_header(_payload(b'MM\x00\x2a\x00\x00\x00\x0a'), 100)
    assert header is not None
    assert header.byte_order == "MM"
    assert header.endian == '>'
    assert header.root_offset == 10


def test_short_segment_is_not_exif(caplog):
    caplog.set_level(logging.DEBUG, logger="exifstream")
    stream = _payload(b'II\x2a\x00\x08\x00\x00\x00')
    assert MIN_EXIF_SEGMENT_LENGTH == 16
    assert read_tiff_header(stream, 15) is None
    assert stream.tell() == 0


def test_other_signature_is_not_exif():
    stream = io.BytesIO(b'http://ns.adobe.com/xap/1.0/\x00')
    assert read_tiff_header(stream, 100) is None


@pytest.mark.parametrize(
    "header",
    [
        b'IM\x2a\x00\x08\x00\x00\x00',  # mixed order marker
        b'XX\x2a\x00\x08\x00\x00\x00',  # not an order marker
        b'II\x00\x2a\x08\x00\x00\x00',  # magic in the wrong byte order
        b'MM\x00\x2b\x00\x00\x00\x08',  # wrong magic
        b'II\x2a\x00\x04\x00\x00\x00',  # root offset inside the header
        b'II\x2a\x00',                  # truncated
    ],
)
def test_malformed_header_raises(header):
    with pytest.raises(MetadataReadError):
        read_tiff_header(_payload(header), 100)
