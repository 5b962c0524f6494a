# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
exifstream - EXIF metadata from JPEG streams

Reads the EXIF APP1 segment of a JPEG file straight from a seekable byte
stream: marker scanning, TIFF header, IFD0 with its Exif, GPS and
Interoperability sub-directories, and the IFD1 JPEG thumbnail. The JPEG
image data itself is never decoded.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from exifstream.exceptions import ExifStreamError, MetadataReadError, InvalidTagError
from exifstream.exif_tags import DEFAULT_CATALOG, TagCatalog, TagDescriptor
from exifstream.values import DecodedValue, ExifEntry, Rational, ValueKind
from exifstream.geotagging import convert_gps_coordinate
from exifstream.exif_parser import ExifParser, ParseResult, parse_file

__all__ = [
    "ExifStreamError",
    "MetadataReadError",
    "InvalidTagError",
    "DEFAULT_CATALOG",
    "TagCatalog",
    "TagDescriptor",
    "DecodedValue",
    "ExifEntry",
    "Rational",
    "ValueKind",
    "convert_gps_coordinate",
    "ExifParser",
    "ParseResult",
    "parse_file",
]
