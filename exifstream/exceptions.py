# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for exifstream

Fatal problems in the EXIF container abort the whole parse with a
MetadataReadError. Recoverable misses are logged and leave the affected
value absent; they never raise.

Copyright 2025 DNAi inc.
"""


class ExifStreamError(Exception):
    """
    Base exception for all exifstream errors.
    
    All exifstream exceptions inherit from this class, allowing
    catch-all error handling for any exifstream-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(ExifStreamError):
    """
    Raised when the EXIF structure is malformed and the parse must stop.
    
    This exception is raised when:
    - An APPn length field is smaller than 2
    - The TIFF byte-order marker, alignment word or root offset is invalid
    - A directory record carries a format code outside [1, 13]
    - A directory-pointer tag carries an unexpected format
    - A directory table or the thumbnail byte range is truncated
    - The thumbnail bytes cannot be decoded as an image
    """
    pass


class InvalidTagError(ExifStreamError):
    """
    Raised when a tag name is not present in the tag catalog.
    """
    pass
