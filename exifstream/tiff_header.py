# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF header reader for EXIF APP1 payloads

An EXIF APP1 payload starts with the 6-byte signature "Exif\\0\\0" followed
by a TIFF header:

    49 49   2A 00   08 00 00 00     little endian (Intel, II)
    4D 4D   00 2A   00 00 00 08     big endian (Motorola, MM)
    order   magic   root IFD offset

Every offset in the payload is measured from the first byte of the order
marker (the TIFF header base).

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO, Optional

from exifstream.exceptions import MetadataReadError

logger = logging.getLogger(__name__)

EXIF_SIGNATURE = b'Exif\x00\x00'
TIFF_MAGIC = 0x002A
TIFF_HEADER_SIZE = 8
# length field (2) + signature (6) + TIFF header (8)
MIN_EXIF_SEGMENT_LENGTH = 2 + len(EXIF_SIGNATURE) + TIFF_HEADER_SIZE


@dataclass(frozen=True)
class TiffHeader:
    """Byte order and root directory location of one EXIF payload."""
    base: int
    byte_order: str
    root_offset: int

    @property
    def endian(self) -> str:
        return '<' if self.byte_order == 'II' else '>'

    @property
    def byte_order_name(self) -> str:
        if self.byte_order == 'II':
            return 'Little-endian (Intel, II)'
        return 'Big-endian (Motorola, MM)'


def read_tiff_header(stream: BinaryIO, segment_length: int) -> Optional[TiffHeader]:
    """
    Read the EXIF signature and TIFF header at the current stream position.

    The stream must be positioned just after the APP1 length field.

    Args:
        stream: Seekable binary stream
        segment_length: APP1 length field value (includes its own 2 bytes)

    Returns:
        TiffHeader, or None when the segment is not an EXIF payload

    Raises:
        MetadataReadError: If the TIFF header itself is malformed
    """
    if segment_length < MIN_EXIF_SEGMENT_LENGTH:
        logger.debug("APP1 length %d too short for an EXIF payload, skipping", segment_length)
        return None

    signature = stream.read(len(EXIF_SIGNATURE))
    if signature != EXIF_SIGNATURE:
        logger.debug("APP1 signature %r is not an EXIF signature, skipping", signature)
        return None

    base = stream.tell()
    header = stream.read(TIFF_HEADER_SIZE)
    if len(header) != TIFF_HEADER_SIZE:
        raise MetadataReadError("APP1 ends inside the TIFF header")

    order = header[0:2]
    if order[0] != order[1] or order not in (b'II', b'MM'):
        raise MetadataReadError(
            f"APP1 does not contain a valid TIFF byte-order marker: {order.hex().upper()}"
        )
    byte_order = order.decode('ascii')
    endian = '<' if byte_order == 'II' else '>'

    magic = struct.unpack(f'{endian}H', header[2:4])[0]
    if magic != TIFF_MAGIC:
        raise MetadataReadError(
            f"Invalid TIFF alignment word 0x{header[2:4].hex().upper()} for byte order {byte_order}"
        )

    root_offset = struct.unpack(f'{endian}I', header[4:8])[0]
    if root_offset < TIFF_HEADER_SIZE:
        raise MetadataReadError(
            f"Root IFD offset must be at least {TIFF_HEADER_SIZE}, got {root_offset}"
        )

    tiff_header = TiffHeader(base=base, byte_order=byte_order, root_offset=root_offset)
    logger.debug(
        "TIFF header at %d: %s, IFD0 offset %d",
        base, tiff_header.byte_order_name, root_offset,
    )
    return tiff_header
