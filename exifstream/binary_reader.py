# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Endianness-aware reader over a seekable binary stream.

Copyright 2025 DNAi inc.
"""

import io
import struct
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from exifstream.exceptions import MetadataReadError


class ExifStreamReader:
    """
    Reads fixed-size integers from a stream in one byte order.

    All TIFF offsets are relative to `base`, the absolute stream position of
    the byte-order marker; `seek_tiff` converts them.
    """

    def __init__(self, stream: BinaryIO, endian: str = '>', base: int = 0):
        self.stream = stream
        self.endian = endian
        self.base = base

    @property
    def is_little_endian(self) -> bool:
        return self.endian == '<'

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, position: int) -> None:
        self.stream.seek(position, io.SEEK_SET)

    def seek_tiff(self, offset: int) -> None:
        """Seek to a TIFF-header-relative offset."""
        self.seek(self.base + offset)

    def skip(self, length: int) -> None:
        if length > 0:
            self.stream.seek(length, io.SEEK_CUR)

    def seek_end(self) -> None:
        self.stream.seek(0, io.SEEK_END)

    def size(self) -> int:
        """Total length of the underlying stream."""
        with self.preserve_position():
            self.seek_end()
            return self.tell()

    def read(self, length: int) -> bytes:
        """Read up to `length` bytes; the result is short at end of stream."""
        if length <= 0:
            return b''
        return self.stream.read(length)

    def read_exact(self, length: int, what: str = "data") -> bytes:
        data = self.read(length)
        if len(data) != length:
            raise MetadataReadError(
                f"Unexpected end of stream while reading {what}: "
                f"got {len(data)} of {length} bytes"
            )
        return data

    def read_u16(self, what: str = "u16") -> int:
        return self.unpack_u16(self.read_exact(2, what))

    def read_u32(self, what: str = "u32") -> int:
        return self.unpack_u32(self.read_exact(4, what))

    def unpack_u16(self, raw: bytes) -> int:
        return struct.unpack(f'{self.endian}H', raw[:2])[0]

    def unpack_u32(self, raw: bytes) -> int:
        return struct.unpack(f'{self.endian}I', raw[:4])[0]

    def unpack_i32(self, raw: bytes) -> int:
        return struct.unpack(f'{self.endian}i', raw[:4])[0]

    @contextmanager
    def preserve_position(self) -> Iterator[None]:
        """Restore the current stream position when the block exits."""
        position = self.tell()
        try:
            yield
        finally:
            self.seek(position)
