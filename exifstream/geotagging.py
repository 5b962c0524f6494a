# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
GPS coordinate conversion

GPSLatitude / GPSLongitude hold three rationals (degrees, minutes,
seconds); the matching *Ref tag holds the hemisphere letter.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Mapping, Optional, Sequence

from exifstream.values import DecodedValue, Rational, clean_text

logger = logging.getLogger(__name__)

POSITIVE_REFERENCES = frozenset(['N', 'E'])
NEGATIVE_REFERENCES = frozenset(['S', 'W'])


def convert_gps_coordinate(reference: str, coordinates: Sequence[Rational]) -> float:
    """
    Convert degrees/minutes/seconds rationals to signed decimal degrees.

    Args:
        reference: Hemisphere letter, N/S for latitude or E/W for longitude
        coordinates: Degrees, minutes and seconds

    Returns:
        Decimal degrees, negative in the southern and western hemispheres

    Raises:
        ValueError: If the reference is not a hemisphere letter or fewer
            than three coordinates are given
    """
    ref = reference.strip().upper()
    if ref not in POSITIVE_REFERENCES and ref not in NEGATIVE_REFERENCES:
        raise ValueError(f"Invalid GPS reference: {reference!r}")
    if len(coordinates) < 3:
        raise ValueError(f"Expected degrees, minutes and seconds, got {len(coordinates)} values")

    degrees = coordinates[0].value() + coordinates[1].value() / 60.0 + coordinates[2].value() / 3600.0
    if ref in NEGATIVE_REFERENCES:
        degrees = -degrees
    return degrees


def coordinate_from_values(
    values: Mapping[int, DecodedValue],
    reference_tag: int,
    coordinate_tag: int,
) -> Optional[float]:
    """
    Look up a reference/coordinate tag pair and convert it.

    Returns None when either tag is missing or undecoded, or when the pair
    cannot be converted.
    """
    reference = clean_text(values.get(reference_tag))
    coordinate = values.get(coordinate_tag)
    if not reference or coordinate is None or coordinate.rationals is None:
        return None
    try:
        return convert_gps_coordinate(reference, coordinate.rationals)
    except ValueError as e:
        logger.warning("GPS tags 0x%04X/0x%04X not converted: %s", reference_tag, coordinate_tag, e)
        return None
