# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG marker scanner

Walks the marker stream of a JPEG file with a two byte window:

    FFD8 FFE1 LLLL  data......data  (FFXX LLLL data......data)xN  FFD9
    SOI  APP1 Length  EXIF payload      N JPEG segments             EOI

APP1 payloads are handed to a callback; other APPn segments are skipped by
seeking over them. The first non-APP segment (tables, frame, scan, ...)
ends the scan, since EXIF always precedes the image data.

Copyright 2025 DNAi inc.
"""

import io
import logging
import struct
from typing import BinaryIO, Callable, Optional

from exifstream.exceptions import MetadataReadError

logger = logging.getLogger(__name__)

MARKER_PREFIX = 0xFF
SOI = 0xD8
EOI = 0xD9

# Segment types that end the metadata part of the file
_OTHER_SEGMENT_TYPES = frozenset(
    [
        0xDB,  # DQT
        0xC4,  # DHT
        0xDD,  # DRI
        0xDA,  # SOS
        0xFE,  # COM
        0xF0,  # JPG0
        0xFD,  # JPG13
        0xCC,  # DAC
        0xDC,  # DNL
        0xDE,  # DHP
        0xDF,  # EXP
        0x01,  # TEM
    ]
    + list(range(0xC0, 0xD0))  # SOF0-SOF15
    + list(range(0xD0, 0xD8))  # RST0-RST7
)

# Called with the stream positioned after the APP1 length field and the
# length value. Returns True when the payload was consumed as EXIF.
App1Handler = Callable[[BinaryIO, int], bool]


def is_app_marker(code: int) -> bool:
    return (code & 0xF0) == 0xE0


def is_other_segment(code: int) -> bool:
    return code in _OTHER_SEGMENT_TYPES


class JpegMarkerScanner:
    """
    Locates APP1 segments in a JPEG byte stream without buffering the file.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def scan(self, on_app1: App1Handler) -> bool:
        """
        Scan the stream and dispatch APP1 segments to `on_app1`.

        Returns:
            True if an APP1 payload was consumed, False otherwise

        Raises:
            MetadataReadError: If an APPn length field is invalid
        """
        previous: Optional[int] = None
        while True:
            current = self._read_byte()
            if current is None:
                return False
            if previous == MARKER_PREFIX and current == SOI:
                logger.debug("Marker SOI at %d", self.stream.tell() - 2)
                if self._scan_image(on_app1):
                    return True
                current = None
            previous = current

    def _scan_image(self, on_app1: App1Handler) -> bool:
        previous: Optional[int] = None
        while True:
            current = self._read_byte()
            if current is None:
                return False
            if previous == MARKER_PREFIX:
                if current == EOI:
                    logger.debug("Marker EOI at %d", self.stream.tell() - 2)
                    return False
                if is_app_marker(current):
                    if self._read_app_segment(current & 0x0F, on_app1):
                        return True
                    current = None
                elif is_other_segment(current):
                    logger.debug("Marker 0xFF%02X ends the metadata segments", current)
                    self.stream.seek(0, io.SEEK_END)
                    return False
            previous = current

    def _read_app_segment(self, app_type: int, on_app1: App1Handler) -> bool:
        raw_length = self.stream.read(2)
        if len(raw_length) != 2:
            raise MetadataReadError(f"Unexpected end of stream in APP{app_type} length field")
        length = struct.unpack('>H', raw_length)[0]
        if length < 2:
            raise MetadataReadError(
                f"APP{app_type} length must be at least 2 bytes, got {length}"
            )
        logger.debug("Marker APP%d, length %d", app_type, length)

        payload_start = self.stream.tell()
        if app_type == 1:
            if on_app1(self.stream, length):
                return True
        self.stream.seek(payload_start + length - 2, io.SEEK_SET)
        return False

    def _read_byte(self) -> Optional[int]:
        data = self.stream.read(1)
        if not data:
            return None
        return data[0]
