# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Decoded EXIF value types

DecodedValue is a tagged union: exactly one kind per instance, so callers
branch on `kind` instead of probing several optional slots.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from exifstream.exif_tags import TagDescriptor


@dataclass(frozen=True)
class Rational:
    """A numerator/denominator pair as stored in RATIONAL and SRATIONAL fields."""
    numerator: int
    denominator: int

    def value(self) -> float:
        """Return the quotient, or 0.0 when the denominator is zero."""
        if self.denominator == 0:
            return 0.0
        return self.numerator / self.denominator

    def __float__(self) -> float:
        return self.value()

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


class ValueKind(Enum):
    """Kinds of value a directory entry can decode to."""
    ABSENT = "absent"
    INTEGER = "integer"
    TEXT = "text"
    RATIONAL = "rational"
    RATIONAL_SEQUENCE = "rational_sequence"


@dataclass(frozen=True)
class DecodedValue:
    """
    Value of one directory entry.

    Use the constructors (absent, of_integer, of_text, of_rational,
    of_rationals) rather than building instances directly; they keep
    `kind` and `payload` consistent.
    """
    kind: ValueKind
    payload: Any = None

    @classmethod
    def absent(cls) -> "DecodedValue":
        return cls(ValueKind.ABSENT)

    @classmethod
    def of_integer(cls, value: int) -> "DecodedValue":
        return cls(ValueKind.INTEGER, int(value))

    @classmethod
    def of_text(cls, value: str) -> "DecodedValue":
        return cls(ValueKind.TEXT, value)

    @classmethod
    def of_rational(cls, value: Rational) -> "DecodedValue":
        return cls(ValueKind.RATIONAL, value)

    @classmethod
    def of_rationals(cls, values: Sequence[Rational]) -> "DecodedValue":
        return cls(ValueKind.RATIONAL_SEQUENCE, tuple(values))

    @property
    def is_present(self) -> bool:
        return self.kind is not ValueKind.ABSENT

    @property
    def integer(self) -> Optional[int]:
        return self.payload if self.kind is ValueKind.INTEGER else None

    @property
    def text(self) -> Optional[str]:
        return self.payload if self.kind is ValueKind.TEXT else None

    @property
    def rational(self) -> Optional[Rational]:
        return self.payload if self.kind is ValueKind.RATIONAL else None

    @property
    def rationals(self) -> Optional[Tuple[Rational, ...]]:
        return self.payload if self.kind is ValueKind.RATIONAL_SEQUENCE else None

    def to_python(self) -> Any:
        """
        Convert to plain JSON-friendly Python values.

        Rationals become "n/d" strings, sequences become lists and an
        absent value becomes None.
        """
        if self.kind is ValueKind.RATIONAL:
            return str(self.payload)
        if self.kind is ValueKind.RATIONAL_SEQUENCE:
            return [str(r) for r in self.payload]
        return self.payload

    def __str__(self) -> str:
        if self.kind is ValueKind.ABSENT:
            return ""
        if self.kind is ValueKind.RATIONAL_SEQUENCE:
            return " ".join(str(r) for r in self.payload)
        return str(self.payload)


@dataclass(frozen=True)
class ExifEntry:
    """One decoded directory entry, in the order it was encountered."""
    descriptor: TagDescriptor
    value: DecodedValue
    directory: str
    format: int
    count: int

    @property
    def code(self) -> int:
        return self.descriptor.code

    @property
    def name(self) -> str:
        return self.descriptor.name


def clean_text(value: Optional[DecodedValue]) -> str:
    """Text payload with NUL padding and surrounding whitespace removed, '' otherwise."""
    if value is None or value.text is None:
        return ""
    return value.text.strip('\x00').strip()
