# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata parser

This module ties the pipeline together: the JPEG marker scanner finds the
APP1 segment, the TIFF header reader establishes byte order, the IFD
decoder walks IFD0 and its sub-directories, and the thumbnail extractor
pulls the IFD1 JPEG thumbnail.

A parse either returns a complete ParseResult or raises
MetadataReadError; partial results are never returned.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, List, Mapping, Optional, Union

from PIL import Image

from exifstream.binary_reader import ExifStreamReader
from exifstream.exceptions import MetadataReadError
from exifstream.exif_tags import (
    DEFAULT_CATALOG,
    TAG_GPS_LATITUDE,
    TAG_GPS_LATITUDE_REF,
    TAG_GPS_LONGITUDE,
    TAG_GPS_LONGITUDE_REF,
    TagCatalog,
)
from exifstream.geotagging import coordinate_from_values
from exifstream.ifd_decoder import IFDDecoder
from exifstream.marker_scanner import JpegMarkerScanner
from exifstream.thumbnail_extractor import ThumbnailExtractor
from exifstream.tiff_header import TiffHeader, read_tiff_header
from exifstream.values import DecodedValue, ExifEntry, clean_text

logger = logging.getLogger(__name__)


class ParseResult:
    """
    Metadata extracted from one JPEG file.

    Attributes:
        values: Tag code to value for IFD0, Exif, GPS directories
        entries: Every decoded entry in traversal order, IFD1 included
        thumbnail_values: Tag code to value for IFD1
        interop_values: Tag code to value for the Interoperability directory
        thumbnail: Raw JPEG thumbnail bytes, if extracted
        byte_order: "II" or "MM", None when the file carries no EXIF
    """

    def __init__(
        self,
        values: Optional[Mapping[int, DecodedValue]] = None,
        entries: Optional[List[ExifEntry]] = None,
        thumbnail_values: Optional[Mapping[int, DecodedValue]] = None,
        thumbnail: Optional[bytes] = None,
        byte_order: Optional[str] = None,
        interop_values: Optional[Mapping[int, DecodedValue]] = None,
        catalog: TagCatalog = DEFAULT_CATALOG,
    ):
        self.values: Dict[int, DecodedValue] = dict(values or {})
        self.entries: List[ExifEntry] = list(entries or [])
        self.thumbnail_values: Dict[int, DecodedValue] = dict(thumbnail_values or {})
        self.interop_values: Dict[int, DecodedValue] = dict(interop_values or {})
        self.thumbnail = thumbnail
        self.byte_order = byte_order
        self.catalog = catalog

    @property
    def has_exif(self) -> bool:
        return self.byte_order is not None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ExifEntry]:
        return iter(self.entries)

    def __contains__(self, code: object) -> bool:
        return code in self.values

    def get(self, code: int) -> Optional[DecodedValue]:
        """
        Get the value of a tag.

        Returns:
            None if the tag was not encountered; an absent DecodedValue if it
            was encountered but could not be decoded
        """
        return self.values.get(code)

    def get_by_name(self, name: str) -> Optional[DecodedValue]:
        """
        Get the value of a tag by catalog name (e.g. "Make").

        Raises:
            InvalidTagError: If the name is not in the catalog
        """
        return self.get(self.catalog.code_for(name))

    def get_text(self, code: int) -> Optional[str]:
        """Text value with NUL padding and surrounding whitespace removed."""
        value = self.get(code)
        if value is None or value.text is None:
            return None
        return clean_text(value)

    def get_integer(self, code: int) -> Optional[int]:
        value = self.get(code)
        return value.integer if value is not None else None

    def gps_latitude(self) -> Optional[float]:
        return coordinate_from_values(self.values, TAG_GPS_LATITUDE_REF, TAG_GPS_LATITUDE)

    def gps_longitude(self) -> Optional[float]:
        return coordinate_from_values(self.values, TAG_GPS_LONGITUDE_REF, TAG_GPS_LONGITUDE)

    def thumbnail_image(self) -> Optional[Image.Image]:
        """Decode the thumbnail bytes with Pillow; None when there is no thumbnail."""
        if self.thumbnail is None:
            return None
        return ThumbnailExtractor.decode_image(self.thumbnail)

    def to_dict(self) -> Dict[str, Any]:
        """
        Flatten the entries into "Group:TagName" keys, in traversal order.

        Undecoded values map to None.
        """
        return {
            f"{entry.directory}:{entry.name}": entry.value.to_python()
            for entry in self.entries
        }


class ExifParser:
    """
    Parser for EXIF metadata embedded in JPEG files.

    A parser holds only configuration and can be reused for any number of
    streams; each call to parse() owns its stream for the duration.

    Example:
        >>> with open('image.jpg', 'rb') as f:
        ...     result = ExifParser().parse(f)
        >>> result.get_text(0x010F)
        'Canon'
    """

    def __init__(self, extract_thumbnail: bool = True, catalog: TagCatalog = DEFAULT_CATALOG):
        """
        Initialize the EXIF parser.

        Args:
            extract_thumbnail: Follow IFD1 and extract the JPEG thumbnail
            catalog: Tag catalog used to label and classify entries
        """
        self.extract_thumbnail = extract_thumbnail
        self.catalog = catalog

    def parse(self, stream: BinaryIO) -> ParseResult:
        """
        Parse EXIF metadata from a readable, seekable binary stream.

        Returns:
            ParseResult; empty when the stream holds no EXIF APP1 segment

        Raises:
            MetadataReadError: If the EXIF structure is malformed
        """
        results: List[ParseResult] = []

        def on_app1(segment_stream: BinaryIO, length: int) -> bool:
            header = read_tiff_header(segment_stream, length)
            if header is None:
                return False
            results.append(self._decode_payload(segment_stream, header))
            return True

        try:
            JpegMarkerScanner(stream).scan(on_app1)
        except OSError as e:
            raise MetadataReadError(f"Failed to read EXIF data: {str(e)}") from e

        if not results:
            logger.debug("No EXIF APP1 segment found")
            return ParseResult(catalog=self.catalog)
        return results[0]

    def _decode_payload(self, stream: BinaryIO, header: TiffHeader) -> ParseResult:
        reader = ExifStreamReader(stream, header.endian, header.base)
        decoder = IFDDecoder(reader, self.catalog)
        thumbnail_offset = decoder.decode_root(header.root_offset)

        thumbnail_values: Optional[Dict[int, DecodedValue]] = None
        thumbnail: Optional[bytes] = None
        if thumbnail_offset and self.extract_thumbnail:
            thumbnail_values = decoder.decode_thumbnail_directory(thumbnail_offset)
            if thumbnail_values is not None:
                thumbnail = ThumbnailExtractor(reader).extract(thumbnail_values)

        return ParseResult(
            values=decoder.values,
            entries=decoder.entries,
            thumbnail_values=thumbnail_values,
            thumbnail=thumbnail,
            byte_order=header.byte_order,
            interop_values=decoder.interop_values,
            catalog=self.catalog,
        )


def parse_file(
    file_path: Union[str, Path],
    extract_thumbnail: bool = True,
    catalog: TagCatalog = DEFAULT_CATALOG,
) -> ParseResult:
    """
    Parse EXIF metadata from a JPEG file on disk.

    Raises:
        FileNotFoundError: If the file does not exist
        MetadataReadError: If the EXIF structure is malformed
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    logger.debug("EXIF parse file '%s'", path)
    with open(path, 'rb') as f:
        return ExifParser(extract_thumbnail=extract_thumbnail, catalog=catalog).parse(f)
