# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IFD (Image File Directory) decoder

A directory is a 2-byte entry count followed by that many 12-byte records:

    tag (2)  format (2)  count (4)  value or offset (4)

IFD0 is followed by a 4-byte offset to IFD1, the thumbnail directory
(0 when absent). Some IFD0/Exif tags are pointers to nested directories
(Exif SubIFD, GPS IFD, Interoperability IFD) or to the vendor MakerNote.
Pointers found in a directory are resolved depth-first once the directory's
own entries have all been read.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Dict, List, MutableMapping, Optional, Set

from exifstream.binary_reader import ExifStreamReader
from exifstream.exceptions import MetadataReadError
from exifstream.exif_tags import (
    DEFAULT_CATALOG,
    TAG_EXIF_OFFSET,
    TAG_GPS_INFO,
    TAG_INTEROPERABILITY_IFD,
    TAG_MAKE,
    TAG_MAKER_NOTE,
    TAG_MODEL,
    TagCatalog,
    TagDescriptor,
)
from exifstream.value_decoder import DirectoryEntry, ExifFormat, ValueDecoder
from exifstream.values import DecodedValue, ExifEntry, clean_text

logger = logging.getLogger(__name__)

ENTRY_SIZE = 12
MIN_FORMAT = ExifFormat.BYTE
MAX_FORMAT = ExifFormat.IFD
POINTER_FORMATS = frozenset([ExifFormat.LONG, ExifFormat.IFD])
MAKER_NOTE_FORMATS = frozenset([ExifFormat.UNDEFINED])

# Group names of the directories reached through pointer tags
DIRECTORY_NAMES = {
    TAG_EXIF_OFFSET: "ExifIFD",
    TAG_GPS_INFO: "GPS",
    TAG_INTEROPERABILITY_IFD: "InteropIFD",
    TAG_MAKER_NOTE: "MakerNotes",
}


@dataclass(frozen=True)
class DirectoryPointer:
    """A queued reference from a pointer tag to a nested directory."""
    tag: int
    name: str
    offset: int
    absolute_offset: int
    is_maker_note: bool
    declared_length: int


class IFDDecoder:
    """
    Decodes IFD0, every directory reachable from it, and optionally IFD1.

    Values of the main directories accumulate in `values` (last occurrence
    of a tag wins). The Interoperability directory reuses GPS tag codes, so
    its values go to `interop_values` instead. Every decoded entry, IFD1
    included, is appended to `entries` in traversal order.

    Directory offsets already decoded are remembered, and a pointer back to
    one of them is skipped so that crafted files cannot recurse forever.
    """

    def __init__(self, reader: ExifStreamReader, catalog: TagCatalog = DEFAULT_CATALOG):
        self.reader = reader
        self.catalog = catalog
        self.value_decoder = ValueDecoder(reader)
        self.values: Dict[int, DecodedValue] = {}
        self.interop_values: Dict[int, DecodedValue] = {}
        self.entries: List[ExifEntry] = []
        self._visited: Set[int] = set()

    def decode_root(self, root_offset: int) -> int:
        """
        Decode IFD0 and its sub-directories.

        Args:
            root_offset: TIFF-header-relative offset of IFD0

        Returns:
            Header-relative offset of IFD1, 0 when there is none
        """
        self._visited.add(root_offset)
        self.reader.seek_tiff(root_offset)
        self.decode_directory("IFD0", self.values)
        next_offset = self.reader.read_u32("IFD0 next directory offset")
        logger.debug("IFD0 offset to IFD1: %d", next_offset)
        return next_offset

    def decode_thumbnail_directory(self, offset: int) -> Optional[Dict[int, DecodedValue]]:
        """
        Decode IFD1 into its own value mapping.

        Returns:
            Tag code to value mapping, or None when the offset was already
            visited
        """
        if not self._mark_visited(offset, "IFD1"):
            return None
        thumbnail_values: Dict[int, DecodedValue] = {}
        with self.reader.preserve_position():
            self.reader.seek_tiff(offset)
            self.decode_directory("IFD1", thumbnail_values)
        return thumbnail_values

    def decode_directory(self, name: str, target: MutableMapping[int, DecodedValue]) -> None:
        """
        Decode the directory at the current stream position.

        On return the stream is positioned just after the last entry, where
        the next-directory offset is stored.
        """
        entry_count = self.reader.read_u16(f"{name} entry count")
        logger.debug("%s: %d entries", name, entry_count)

        pointers: List[DirectoryPointer] = []
        for _ in range(entry_count):
            entry = self._read_entry(name)
            descriptor = self.catalog.describe(entry.tag)
            if descriptor.is_directory_pointer:
                pointers.append(self._make_pointer(entry, descriptor))
                continue
            value = self.value_decoder.decode(entry, descriptor)
            target[entry.tag] = value
            self.entries.append(
                ExifEntry(descriptor, value, name, entry.format, entry.count)
            )

        for pointer in pointers:
            self._follow(pointer, target)

    def _read_entry(self, directory: str) -> DirectoryEntry:
        raw = self.reader.read_exact(ENTRY_SIZE, f"{directory} entry")
        tag, format_code, count = struct.unpack(f'{self.reader.endian}HHI', raw[:8])
        if not MIN_FORMAT <= format_code <= MAX_FORMAT:
            raise MetadataReadError(
                f"{directory}: tag 0x{tag:04X} has format {format_code}, "
                f"must be between {int(MIN_FORMAT)} and {int(MAX_FORMAT)}"
            )
        return DirectoryEntry(tag, format_code, count, raw[8:12])

    def _make_pointer(self, entry: DirectoryEntry, descriptor: TagDescriptor) -> DirectoryPointer:
        is_maker_note = entry.tag == TAG_MAKER_NOTE
        allowed = MAKER_NOTE_FORMATS if is_maker_note else POINTER_FORMATS
        if entry.format not in allowed:
            expected = " or ".join(str(int(f)) for f in sorted(allowed))
            raise MetadataReadError(
                f"{descriptor.short_title} must have format {expected}, got {entry.format}"
            )
        offset = self.reader.unpack_u32(entry.raw_field)
        logger.debug("%s -> offset %d", descriptor.short_title, offset)
        return DirectoryPointer(
            tag=entry.tag,
            name=DIRECTORY_NAMES.get(entry.tag, descriptor.name),
            offset=offset,
            absolute_offset=self.reader.base + offset,
            is_maker_note=is_maker_note,
            declared_length=entry.count,
        )

    def _follow(self, pointer: DirectoryPointer, target: MutableMapping[int, DecodedValue]) -> None:
        if not self._mark_visited(pointer.offset, pointer.name):
            return
        with self.reader.preserve_position():
            self.reader.seek(pointer.absolute_offset)
            if pointer.is_maker_note:
                self._report_maker_note(pointer)
            elif pointer.tag == TAG_INTEROPERABILITY_IFD:
                self.decode_directory(pointer.name, self.interop_values)
            else:
                self.decode_directory(pointer.name, target)

    def _report_maker_note(self, pointer: DirectoryPointer) -> None:
        # No vendor decoder exists yet; identify the camera and skip the blob.
        manufacturer = clean_text(self.values.get(TAG_MAKE))
        camera = clean_text(self.values.get(TAG_MODEL))
        logger.warning(
            "MakerNote (%d bytes at offset %d) for manufacturer '%s' and camera '%s' "
            "uses a proprietary encoding that is not supported, skipped",
            pointer.declared_length, pointer.offset, manufacturer, camera,
        )

    def _mark_visited(self, offset: int, name: str) -> bool:
        if offset in self._visited:
            logger.warning(
                "%s points to already visited offset %d, skipped", name, offset
            )
            return False
        self._visited.add(offset)
        return True
