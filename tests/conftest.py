from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pytest
from PIL import Image


@dataclass(frozen=True)
class Ref:
    """Header-relative offset of another block laid out by build_tiff."""
    index: int


Payload = Union[bytes, int, Ref]
Entry = Tuple[int, int, int, Payload]
Block = Union[List[Entry], bytes]


def short(value: int, endian: str = '<') -> bytes:
    return struct.pack(f'{endian}H', value)


def rationals(*pairs: int, endian: str = '<', signed: bool = False) -> bytes:
    code = 'i' if signed else 'I'
    return struct.pack(f'{endian}{len(pairs)}{code}', *pairs)


def _block_size(block: Block) -> int:
    if isinstance(block, bytes):
        return len(block)
    extra = sum(len(p) for _, _, _, p in block if isinstance(p, bytes) and len(p) > 4)
    return 2 + 12 * len(block) + 4 + extra


def _pack_directory(
    block: List[Entry], offset: int, offsets: List[int], next_offset: int, endian: str
) -> bytes:
    data_offset = offset + 2 + 12 * len(block) + 4
    table = struct.pack(f'{endian}H', len(block))
    data = b''
    for tag, format_code, count, payload in block:
        if isinstance(payload, Ref):
            field = struct.pack(f'{endian}I', offsets[payload.index])
        elif isinstance(payload, int):
            field = struct.pack(f'{endian}I', payload)
        elif len(payload) <= 4:
            field = payload.ljust(4, b'\x00')
        else:
            field = struct.pack(f'{endian}I', data_offset + len(data))
            data += payload
        table += struct.pack(f'{endian}HHI', tag, format_code, count) + field
    table += struct.pack(f'{endian}I', next_offset)
    return table + data


def build_tiff(
    blocks: Sequence[Block],
    endian: str = '<',
    links: Optional[Dict[int, int]] = None,
) -> bytes:
    """
    Lay out a TIFF structure: header, then each block in order.

    A block is either a directory (list of (tag, format, count, payload)
    entries) or raw bytes. Payloads of more than 4 bytes are stored right
    after their directory table; Ref(i) resolves to the offset of block i.
    `links` maps a directory index to the index of its next directory.
    """
    links = links or {}
    offsets = []
    position = 8
    for block in blocks:
        offsets.append(position)
        position += _block_size(block)

    order = b'II' if endian == '<' else b'MM'
    out = order + struct.pack(f'{endian}HI', 0x2A, offsets[0])
    for index, block in enumerate(blocks):
        if isinstance(block, bytes):
            out += block
        else:
            next_offset = offsets[links[index]] if index in links else 0
            out += _pack_directory(block, offsets[index], offsets, next_offset, endian)
    return out


def segment(marker: int, payload: bytes) -> bytes:
    return bytes([0xFF, marker]) + struct.pack('>H', len(payload) + 2) + payload


def wrap_jpeg(tiff: bytes, before: bytes = b'', trailer: bool = True) -> bytes:
    """Embed a TIFF structure in a minimal JPEG as an EXIF APP1 segment."""
    data = b'\xff\xd8' + before + segment(0xE1, b'Exif\x00\x00' + tiff)
    if trailer:
        data += segment(0xDB, b'\x00' * 65) + b'\xff\xd9'
    return data


def jpeg_stream(tiff: bytes, **kwargs) -> io.BytesIO:
    return io.BytesIO(wrap_jpeg(tiff, **kwargs))


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("exifstream")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def thumbnail_jpeg() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="JPEG")
    return buffer.getvalue()
