# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag catalog

This module contains the static table of known EXIF tags for the main image
directory (IFD0), the Exif sub-directory, the GPS directory and the
thumbnail directory (IFD1). Interoperability directory entries share code
space with the GPS tags and are labelled through them.

The table is built once at import time into an immutable TagCatalog
(DEFAULT_CATALOG) that parsers share by reference.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from exifstream.exceptions import InvalidTagError


# Tag codes the decoders refer to directly
TAG_GPS_LATITUDE_REF = 0x0001
TAG_GPS_LATITUDE = 0x0002
TAG_GPS_LONGITUDE_REF = 0x0003
TAG_GPS_LONGITUDE = 0x0004
TAG_COMPRESSION = 0x0103
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_JPEG_INTERCHANGE_FORMAT = 0x0201
TAG_JPEG_INTERCHANGE_FORMAT_LENGTH = 0x0202
TAG_EXIF_OFFSET = 0x8769
TAG_GPS_INFO = 0x8825
TAG_MAKER_NOTE = 0x927C
TAG_INTEROPERABILITY_IFD = 0xA005


@dataclass(frozen=True)
class TagDescriptor:
    """Static description of one EXIF tag code."""
    code: int
    name: str
    description: str = ""
    is_directory_pointer: bool = False

    @property
    def is_known(self) -> bool:
        return not self.name.startswith("Unknown_")

    @property
    def short_title(self) -> str:
        return f"0x{self.code:04X} {self.name}"

    @property
    def full_title(self) -> str:
        if not self.description:
            return self.short_title
        return f"{self.short_title} ({self.description})"


# (code, name, description, is_directory_pointer)
_TAG_TABLE: Tuple[Tuple[int, str, str, bool], ...] = (
    # ============================================================
    # IFD0 (main image) tags
    # ============================================================
    (0x010E, "ImageDescription", "Title or description of the image.", False),
    (0x010F, "Make", "Manufacturer of the recording equipment.", False),
    (0x0110, "Model", "Model name or number of the recording equipment.", False),
    (0x0112, "Orientation", "Orientation of the camera relative to the scene: 1 upper left, 3 lower right, 6 upper right, 8 lower left.", False),
    (0x011A, "XResolution", "Number of pixels per ResolutionUnit in the image width direction.", False),
    (0x011B, "YResolution", "Number of pixels per ResolutionUnit in the image height direction.", False),
    (0x0128, "ResolutionUnit", "Unit of X/YResolution: 1 none, 2 inch, 3 centimeter.", False),
    (0x0131, "Software", "Name and version of the firmware or software that produced the image.", False),
    (0x0132, "DateTime", "Date and time of last modification, YYYY:MM:DD HH:MM:SS.", False),
    (0x013B, "Artist", "Person who created the image.", False),
    (0x013E, "WhitePoint", "Chromaticity of the white point of the image.", False),
    (0x013F, "PrimaryChromaticities", "Chromaticity of the three primary colors of the image.", False),
    (0x0211, "YCbCrCoefficients", "Matrix coefficients for transforming YCbCr to RGB.", False),
    (0x0213, "YCbCrPositioning", "Position of chroma samples relative to luma: 1 centered, 2 co-sited.", False),
    (0x0214, "ReferenceBlackWhite", "Reference black and white point values for each component.", False),
    (0x8298, "Copyright", "Copyright notice.", False),
    (0x8769, "ExifOffset", "Offset to the Exif sub-directory.", True),
    (0x8825, "GPSInfo", "Offset to the GPS directory.", True),
    # ============================================================
    # Exif sub-directory tags
    # ============================================================
    (0x829A, "ExposureTime", "Exposure time in seconds.", False),
    (0x829D, "FNumber", "F-number of the lens when the image was taken.", False),
    (0x8822, "ExposureProgram", "Exposure program: 1 manual, 2 normal, 3 aperture priority, 4 shutter priority, 5 creative, 6 action, 7 portrait, 8 landscape.", False),
    (0x8827, "ISOSpeedRatings", "ISO speed of the camera or input device.", False),
    (0x8830, "SensitivityType", "Which ISO 12232 parameter ISOSpeedRatings records.", False),
    (0x8831, "StandardOutputSensitivity", "Standard output sensitivity as defined in ISO 12232.", False),
    (0x9000, "ExifVersion", "Exif version as 4 ASCII characters, e.g. 0230.", False),
    (0x9003, "DateTimeOriginal", "Date and time the original image was taken.", False),
    (0x9004, "DateTimeDigitized", "Date and time the image was stored as digital data.", False),
    (0x9101, "ComponentsConfiguration", "Channel order of compressed data: 0 none, 1 Y, 2 Cb, 3 Cr, 4 R, 5 G, 6 B.", False),
    (0x9102, "CompressedBitsPerPixel", "Average JPEG compression ratio in bits per pixel.", False),
    (0x9201, "ShutterSpeedValue", "Shutter speed in APEX units.", False),
    (0x9202, "ApertureValue", "Lens aperture in APEX units.", False),
    (0x9203, "BrightnessValue", "Brightness of the subject in EV.", False),
    (0x9204, "ExposureBiasValue", "Exposure bias in EV.", False),
    (0x9205, "MaxApertureValue", "Smallest F-number of the lens in APEX units.", False),
    (0x9206, "SubjectDistance", "Distance to the subject in meters.", False),
    (0x9207, "MeteringMode", "Metering mode: 1 average, 2 center weighted, 3 spot, 4 multi-spot, 5 pattern, 6 partial.", False),
    (0x9208, "LightSource", "Kind of light source or white balance setting.", False),
    (0x9209, "Flash", "Flash status bit field: fired, return light, mode, function, red-eye.", False),
    (0x920A, "FocalLength", "Actual focal length of the lens in millimeters.", False),
    (0x927C, "MakerNote", "Manufacturer specific information.", True),
    (0x9286, "UserComment", "Keywords or comments on the image.", False),
    (0x9290, "SubsecTime", "Fractions of seconds for DateTime.", False),
    (0x9291, "SubsecTimeOriginal", "Fractions of seconds for DateTimeOriginal.", False),
    (0x9292, "SubsecTimeDigitized", "Fractions of seconds for DateTimeDigitized.", False),
    (0xA000, "FlashPixVersion", "Supported FlashPix version as 4 ASCII characters.", False),
    (0xA001, "ColorSpace", "Color space: 1 sRGB, 65535 uncalibrated.", False),
    (0xA002, "ExifImageWidth", "Width of the main image in pixels.", False),
    (0xA003, "ExifImageHeight", "Height of the main image in pixels.", False),
    (0xA004, "RelatedSoundFile", "Name of an audio file related to the image.", False),
    (0xA005, "InteroperabilityIFD", "Offset to the Interoperability directory.", True),
    (0xA20E, "FocalPlaneXResolution", "Pixels per FocalPlaneResolutionUnit in the sensor width direction.", False),
    (0xA20F, "FocalPlaneYResolution", "Pixels per FocalPlaneResolutionUnit in the sensor height direction.", False),
    (0xA210, "FocalPlaneResolutionUnit", "Unit of FocalPlaneX/YResolution: 1 none, 2 inch, 3 centimeter.", False),
    (0xA217, "SensingMethod", "Image sensor type: 2 one-chip color area sensor.", False),
    (0xA300, "FileSource", "Image source: 3 digital still camera.", False),
    (0xA301, "SceneType", "Scene type: 1 directly photographed.", False),
    (0xA401, "CustomRendered", "Special processing: 0 normal, 1 custom.", False),
    (0xA402, "ExposureMode", "Exposure mode: 0 auto, 1 manual, 2 auto bracket.", False),
    (0xA403, "WhiteBalance", "White balance mode: 0 auto, 1 manual.", False),
    (0xA404, "DigitalZoomRatio", "Digital zoom ratio; numerator 0 means no digital zoom.", False),
    (0xA405, "FocalLengthIn35mmFilm", "Equivalent focal length on 35mm film; 0 when unknown.", False),
    (0xA406, "SceneCaptureType", "Scene capture type: 0 standard, 1 landscape, 2 portrait, 3 night.", False),
    (0xA407, "GainControl", "Overall gain adjustment: 0 none, 1 low up, 2 high up, 3 low down, 4 high down.", False),
    (0xA408, "Contrast", "Contrast processing: 0 normal, 1 soft, 2 hard.", False),
    (0xA409, "Saturation", "Saturation processing: 0 normal, 1 low, 2 high.", False),
    (0xA40A, "Sharpness", "Sharpness processing: 0 normal, 1 soft, 2 hard.", False),
    (0xA40C, "SubjectDistanceRange", "Subject distance range: 0 unknown, 1 macro, 2 close, 3 distant.", False),
    (0xA432, "LensSpecification", "Minimum and maximum focal length and the minimum F-numbers at each.", False),
    (0xA433, "LensMake", "Manufacturer of the lens.", False),
    (0xA434, "LensModel", "Model name and number of the lens.", False),
    # ============================================================
    # GPS directory tags
    # ============================================================
    (0x0000, "GPSVersionID", "Version of the GPS directory as 4 bytes, e.g. 2.2.0.0.", False),
    (0x0001, "GPSLatitudeRef", "N for north latitude, S for south latitude.", False),
    (0x0002, "GPSLatitude", "Latitude as degrees, minutes and seconds rationals.", False),
    (0x0003, "GPSLongitudeRef", "E for east longitude, W for west longitude.", False),
    (0x0004, "GPSLongitude", "Longitude as degrees, minutes and seconds rationals.", False),
    (0x0005, "GPSAltitudeRef", "Altitude reference: 0 above sea level, 1 below sea level.", False),
    (0x0006, "GPSAltitude", "Altitude in meters relative to GPSAltitudeRef.", False),
    (0x0007, "GPSTimeStamp", "UTC time as hour, minute and second rationals.", False),
    (0x0008, "GPSSatellites", "Satellites used for the measurement.", False),
    (0x0009, "GPSStatus", "Receiver status: A measurement in progress, V interoperability.", False),
    (0x000A, "GPSMeasureMode", "Measurement mode: 2 two-dimensional, 3 three-dimensional.", False),
    (0x000B, "GPSDOP", "Data degree of precision.", False),
    (0x000C, "GPSSpeedRef", "Speed unit: K km/h, M mph, N knots.", False),
    (0x000D, "GPSSpeed", "Speed of the receiver.", False),
    (0x000E, "GPSTrackRef", "Reference for GPSTrack: T true, M magnetic.", False),
    (0x000F, "GPSTrack", "Direction of movement, 0.00 to 359.99.", False),
    (0x0010, "GPSImgDirectionRef", "Reference for GPSImgDirection: T true, M magnetic.", False),
    (0x0011, "GPSImgDirection", "Direction of the image when captured, 0.00 to 359.99.", False),
    (0x0012, "GPSMapDatum", "Geodetic survey data used by the receiver.", False),
    (0x0013, "GPSDestLatitudeRef", "N or S for the destination latitude.", False),
    (0x0014, "GPSDestLatitude", "Destination latitude as degrees, minutes and seconds.", False),
    (0x0015, "GPSDestLongitudeRef", "E or W for the destination longitude.", False),
    (0x0016, "GPSDestLongitude", "Destination longitude as degrees, minutes and seconds.", False),
    (0x0017, "GPSDestBearingRef", "Reference for GPSDestBearing: T true, M magnetic.", False),
    (0x0018, "GPSDestBearing", "Bearing to the destination, 0.00 to 359.99.", False),
    (0x0019, "GPSDestDistanceRef", "Distance unit: K kilometers, M miles, N nautical miles.", False),
    (0x001A, "GPSDestDistance", "Distance to the destination.", False),
    (0x001B, "GPSProcessingMethod", "Name of the location finding method, prefixed by a character code.", False),
    (0x001C, "GPSAreaInformation", "Name of the GPS area, prefixed by a character code.", False),
    (0x001D, "GPSDateStamp", "UTC date as YYYY:MM:DD.", False),
    (0x001E, "GPSDifferential", "Differential correction: 0 none, 1 applied.", False),
    # ============================================================
    # IFD1 (thumbnail) tags
    # ============================================================
    (0x0100, "ImageWidth", "Width of the image in pixels.", False),
    (0x0101, "ImageLength", "Height of the image in pixels.", False),
    (0x0102, "BitsPerSample", "Bits per component for uncompressed data.", False),
    (0x0103, "Compression", "Compression scheme: 1 none, 6 old-style JPEG, 7 JPEG.", False),
    (0x0106, "PhotometricInterpretation", "Pixel composition: 1 monochrome, 2 RGB, 6 YCbCr.", False),
    (0x0111, "StripOffsets", "Offset of each strip of uncompressed image data.", False),
    (0x0115, "SamplesPerPixel", "Number of components per pixel.", False),
    (0x0116, "RowsPerStrip", "Number of rows per strip.", False),
    (0x0117, "StripByteCounts", "Number of bytes in each strip.", False),
    (0x011C, "PlanarConfiguration", "Storage of components: 1 chunky, 2 planar.", False),
    (0x0201, "JPEGInterchangeFormat", "Offset to the JPEG thumbnail data.", False),
    (0x0202, "JPEGInterchangeFormatLength", "Byte length of the JPEG thumbnail data.", False),
    (0x0212, "YCbCrSubSampling", "Chroma subsampling factors, horizontal then vertical.", False),
)


class TagCatalog:
    """
    Immutable lookup of TagDescriptor by code and by name.

    Unknown codes resolve to a synthetic descriptor named after the hex code
    so that every extracted entry carries a label.
    """

    def __init__(self, descriptors):
        by_code: Dict[int, TagDescriptor] = {}
        by_name: Dict[str, int] = {}
        for descriptor in descriptors:
            if descriptor.code in by_code:
                raise ValueError(f"Duplicate tag code 0x{descriptor.code:04X}")
            if descriptor.name in by_name:
                raise ValueError(f"Duplicate tag name {descriptor.name}")
            by_code[descriptor.code] = descriptor
            by_name[descriptor.name] = descriptor.code
        self._by_code: Mapping[int, TagDescriptor] = MappingProxyType(by_code)
        self._by_name: Mapping[str, int] = MappingProxyType(by_name)

    def __len__(self) -> int:
        return len(self._by_code)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __iter__(self) -> Iterator[TagDescriptor]:
        return iter(self._by_code.values())

    def lookup(self, code: int) -> Optional[TagDescriptor]:
        return self._by_code.get(code)

    def describe(self, code: int) -> TagDescriptor:
        """Return the descriptor for `code`, or a synthetic unknown one."""
        descriptor = self._by_code.get(code)
        if descriptor is None:
            descriptor = TagDescriptor(code, f"Unknown_{code:04X}")
        return descriptor

    def code_for(self, name: str) -> int:
        """
        Resolve a tag name to its code.

        Raises:
            InvalidTagError: If the name is not in the catalog
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise InvalidTagError(f"Unknown EXIF tag name: {name}") from None


def _build_default_catalog() -> TagCatalog:
    return TagCatalog(
        TagDescriptor(code, name, description, is_pointer)
        for code, name, description, is_pointer in _TAG_TABLE
    )


DEFAULT_CATALOG = _build_default_catalog()
