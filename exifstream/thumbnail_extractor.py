# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Thumbnail extractor for EXIF thumbnail directories (IFD1)

IFD1 can describe a JPEG thumbnail (Compression 6, located through
JPEGInterchangeFormat / JPEGInterchangeFormatLength) or an uncompressed
RGB/YCbCr strip image. Only the JPEG form is extracted; decoding the bytes
into a bitmap is left to Pillow.

Copyright 2025 DNAi inc.
"""

import io
import logging
from typing import Mapping, Optional

from PIL import Image, UnidentifiedImageError

from exifstream.binary_reader import ExifStreamReader
from exifstream.exceptions import MetadataReadError
from exifstream.exif_tags import (
    TAG_COMPRESSION,
    TAG_JPEG_INTERCHANGE_FORMAT,
    TAG_JPEG_INTERCHANGE_FORMAT_LENGTH,
)
from exifstream.values import DecodedValue

logger = logging.getLogger(__name__)

# "Old-style" JPEG compression, the only form EXIF thumbnails use
COMPRESSION_OLD_JPEG = 6


class ThumbnailExtractor:
    """
    Extracts the raw JPEG thumbnail described by a decoded IFD1.
    """

    def __init__(self, reader: ExifStreamReader):
        """
        Initialize thumbnail extractor.

        Args:
            reader: Reader positioned inside the EXIF payload; its base is
                the TIFF header base all IFD1 offsets are relative to
        """
        self.reader = reader

    def extract(self, thumbnail_values: Mapping[int, DecodedValue]) -> Optional[bytes]:
        """
        Extract thumbnail bytes.

        Args:
            thumbnail_values: Decoded values of the thumbnail directory

        Returns:
            JPEG bytes, or None if the directory does not describe a JPEG
            thumbnail

        Raises:
            MetadataReadError: If the thumbnail byte range is truncated
        """
        compression = _integer(thumbnail_values, TAG_COMPRESSION)
        if compression != COMPRESSION_OLD_JPEG:
            logger.warning(
                "Thumbnail compression %s is not supported, thumbnail not extracted",
                compression,
            )
            return None

        offset = _integer(thumbnail_values, TAG_JPEG_INTERCHANGE_FORMAT)
        length = _integer(thumbnail_values, TAG_JPEG_INTERCHANGE_FORMAT_LENGTH)
        if offset is None or length is None:
            logger.warning("Thumbnail directory has no JPEG offset/length, thumbnail not extracted")
            return None

        data = b''
        if self.reader.base + offset + length <= self.reader.size():
            with self.reader.preserve_position():
                self.reader.seek_tiff(offset)
                data = self.reader.read(length)
        if len(data) != length:
            raise MetadataReadError(
                f"Unable to read all thumbnail bytes: read {len(data)} instead of {length}"
            )

        logger.debug("Thumbnail extracted: %d bytes at offset %d", length, offset)
        return data

    @staticmethod
    def decode_image(data: bytes) -> Image.Image:
        """
        Decode thumbnail bytes into a Pillow image.

        Raises:
            MetadataReadError: If the bytes are not a decodable image
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise MetadataReadError(f"Failed to decode thumbnail image: {str(e)}") from e
        return image


def _integer(values: Mapping[int, DecodedValue], code: int) -> Optional[int]:
    value = values.get(code)
    if value is None:
        return None
    return value.integer
