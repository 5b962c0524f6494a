# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Directory entry value decoder

Turns one raw 12-byte directory record into a DecodedValue. The 4-byte
value field holds the value itself when it fits, otherwise an offset
(relative to the TIFF header base) to where the value is stored.

Decoding is two-staged: a small override table keyed by (tag, format)
handles tags whose BYTE/UNDEFINED payload needs a tag-specific reading;
everything else goes through the generic per-format rule. A combination
neither stage covers leaves the value absent and is logged.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple

from exifstream.binary_reader import ExifStreamReader
from exifstream.exif_tags import TagDescriptor
from exifstream.values import DecodedValue, Rational

logger = logging.getLogger(__name__)


class ExifFormat(IntEnum):
    """EXIF directory value formats"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12
    IFD = 13


FORMAT_DESCRIPTIONS = {
    ExifFormat.BYTE: "unsigned byte",
    ExifFormat.ASCII: "ascii string",
    ExifFormat.SHORT: "unsigned short",
    ExifFormat.LONG: "unsigned long",
    ExifFormat.RATIONAL: "unsigned rational",
    ExifFormat.SBYTE: "signed byte",
    ExifFormat.UNDEFINED: "undefined",
    ExifFormat.SSHORT: "signed short",
    ExifFormat.SLONG: "signed long",
    ExifFormat.SRATIONAL: "signed rational",
    ExifFormat.FLOAT: "single float",
    ExifFormat.DOUBLE: "double float",
    ExifFormat.IFD: "offset to subdirectory",
}

# Recognized formats that are deliberately left undecoded
UNSUPPORTED_FORMATS = frozenset([
    ExifFormat.SBYTE,
    ExifFormat.SSHORT,
    ExifFormat.SLONG,
    ExifFormat.FLOAT,
    ExifFormat.DOUBLE,
])

RATIONAL_SIZE = 8


@dataclass(frozen=True)
class DirectoryEntry:
    """Raw 12-byte directory record."""
    tag: int
    format: int
    count: int
    raw_field: bytes


def format_name(format_code: int) -> str:
    try:
        return FORMAT_DESCRIPTIONS[ExifFormat(format_code)]
    except ValueError:
        return f"format {format_code}"


def _latin1(data: bytes) -> str:
    # one character per byte
    return data.decode('latin-1')


class ValueDecoder:
    """
    Decodes directory entries read through an ExifStreamReader.

    The reader supplies the byte order and the TIFF header base used to
    resolve out-of-line values.
    """

    def __init__(self, reader: ExifStreamReader):
        self.reader = reader

    def decode(self, entry: DirectoryEntry, descriptor: TagDescriptor) -> DecodedValue:
        """
        Decode one entry.

        Args:
            entry: Raw directory record
            descriptor: Catalog descriptor of the entry's tag (for diagnostics)

        Returns:
            The decoded value; absent when no rule covers the entry
        """
        override = VALUE_OVERRIDES.get((entry.tag, entry.format))
        if override is not None:
            value = override(self, entry)
        elif entry.format in UNSUPPORTED_FORMATS:
            logger.warning(
                "%s: format %d (%s) is not supported, value left undecoded",
                descriptor.short_title, entry.format, format_name(entry.format),
            )
            return DecodedValue.absent()
        else:
            handler = GENERIC_DECODERS.get(entry.format)
            value = handler(self, entry) if handler is not None else None

        if value is None:
            logger.warning(
                "%s: unable to decode format %d (%s) with count %d",
                descriptor.short_title, entry.format, format_name(entry.format), entry.count,
            )
            return DecodedValue.absent()

        logger.debug("%s = %s", descriptor.short_title, value)
        return value

    def field_offset(self, entry: DirectoryEntry) -> int:
        return self.reader.unpack_u32(entry.raw_field)

    def read_out_of_line(self, entry: DirectoryEntry, length: int) -> Optional[bytes]:
        """
        Read `length` bytes at the offset stored in the entry's value field.

        The stream position is restored afterwards. Returns None when the
        data would run past the end of the stream.
        """
        offset = self.field_offset(entry)
        start = self.reader.base + offset
        if start + length > self.reader.size():
            logger.warning(
                "Tag 0x%04X: %d bytes at offset %d run past the end of the stream",
                entry.tag, length, offset,
            )
            return None
        with self.reader.preserve_position():
            self.reader.seek(start)
            return self.reader.read(length)

    def read_text(self, entry: DirectoryEntry) -> Optional[DecodedValue]:
        data = self.read_out_of_line(entry, entry.count)
        if data is None:
            return None
        return DecodedValue.of_text(_latin1(data))

    def read_rationals(self, entry: DirectoryEntry, signed: bool) -> Optional[Tuple[Rational, ...]]:
        data = self.read_out_of_line(entry, entry.count * RATIONAL_SIZE)
        if data is None:
            return None
        code = 'i' if signed else 'I'
        numbers = struct.unpack(f'{self.reader.endian}{entry.count * 2}{code}', data)
        return tuple(
            Rational(numbers[i], numbers[i + 1]) for i in range(0, len(numbers), 2)
        )


ValueHandler = Callable[[ValueDecoder, DirectoryEntry], Optional[DecodedValue]]


# ----------------------------------------------------------------------
# Generic per-format rules
# ----------------------------------------------------------------------

def _decode_ascii(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count <= 4:
        # Stored inline, kept as-is including any NUL bytes
        return DecodedValue.of_text(_latin1(entry.raw_field[:entry.count]))
    return decoder.read_text(entry)


def _decode_short(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count != 1:
        return None
    return DecodedValue.of_integer(decoder.reader.unpack_u16(entry.raw_field))


def _decode_long(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count != 1:
        return None
    return DecodedValue.of_integer(decoder.reader.unpack_u32(entry.raw_field))


def _decode_rational(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    # 8 bytes per element never fit inline, so the field is always an offset
    if entry.count < 1:
        return None
    rationals = decoder.read_rationals(entry, signed=False)
    if rationals is None:
        return None
    if entry.count == 1:
        return DecodedValue.of_rational(rationals[0])
    return DecodedValue.of_rationals(rationals)


def _decode_srational(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count != 1:
        return None
    rationals = decoder.read_rationals(entry, signed=True)
    if rationals is None:
        return None
    return DecodedValue.of_rational(rationals[0])


GENERIC_DECODERS: Dict[int, ValueHandler] = {
    ExifFormat.ASCII: _decode_ascii,
    ExifFormat.SHORT: _decode_short,
    ExifFormat.LONG: _decode_long,
    ExifFormat.RATIONAL: _decode_rational,
    ExifFormat.SRATIONAL: _decode_srational,
}


# ----------------------------------------------------------------------
# Tag-specific overrides for BYTE and UNDEFINED payloads
# ----------------------------------------------------------------------

def _dotted_version(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count != 4:
        return None
    return DecodedValue.of_text(".".join(str(b) for b in entry.raw_field))


def _first_byte(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count != 1:
        return None
    return DecodedValue.of_integer(entry.raw_field[0])


def _ascii_version(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count != 4:
        return None
    return DecodedValue.of_text(_latin1(entry.raw_field))


def _components_configuration(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    # Component ids 0..6 rendered as digits, e.g. 01 02 03 00 -> "1230"
    if entry.count != 4:
        return None
    return DecodedValue.of_text("".join(chr(b + ord('0')) for b in entry.raw_field))


def _character_coded_text(decoder: ValueDecoder, entry: DirectoryEntry) -> Optional[DecodedValue]:
    if entry.count <= 4:
        return None
    return decoder.read_text(entry)


VALUE_OVERRIDES: Dict[Tuple[int, int], ValueHandler] = {
    (0x0000, ExifFormat.BYTE): _dotted_version,              # GPSVersionID
    (0x0005, ExifFormat.BYTE): _first_byte,                  # GPSAltitudeRef
    (0x9000, ExifFormat.UNDEFINED): _ascii_version,          # ExifVersion
    (0xA000, ExifFormat.UNDEFINED): _ascii_version,          # FlashPixVersion
    (0x9101, ExifFormat.UNDEFINED): _components_configuration,
    (0xA300, ExifFormat.UNDEFINED): _first_byte,             # FileSource
    (0xA301, ExifFormat.UNDEFINED): _first_byte,             # SceneType
    (0x001B, ExifFormat.UNDEFINED): _character_coded_text,   # GPSProcessingMethod
}
