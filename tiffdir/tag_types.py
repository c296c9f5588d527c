# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF tag data types

Type codes used in IFD entries, their component sizes, and the
Rational value type.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum
from typing import NamedTuple, Optional


class TagType(IntEnum):
    """TIFF/EXIF tag data types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12
    IFD = 13  # 32-bit IFD offset
    LONG8 = 16  # BigTIFF format code 16 (64-bit unsigned integer)
    SLONG8 = 17  # BigTIFF format code 17 (64-bit signed integer)
    IFD8 = 18  # BigTIFF format code 18 (64-bit IFD offset)


# Component sizes in bytes
TAG_SIZES = {
    TagType.BYTE: 1,
    TagType.ASCII: 1,
    TagType.SHORT: 2,
    TagType.LONG: 4,
    TagType.RATIONAL: 8,
    TagType.SBYTE: 1,
    TagType.UNDEFINED: 1,
    TagType.SSHORT: 2,
    TagType.SLONG: 4,
    TagType.SRATIONAL: 8,
    TagType.FLOAT: 4,
    TagType.DOUBLE: 8,
    TagType.IFD: 4,
    TagType.LONG8: 8,
    TagType.SLONG8: 8,
    TagType.IFD8: 8,
}


def type_size(type_code: int) -> Optional[int]:
    """
    Get the size of one component of a tag type.

    Args:
        type_code: Raw type code from an IFD entry

    Returns:
        Component size in bytes, or None for unknown type codes
    """
    try:
        return TAG_SIZES[TagType(type_code)]
    except ValueError:
        return None


def type_name(type_code: int) -> str:
    try:
        return TagType(type_code).name
    except ValueError:
        return f"UNKNOWN({type_code})"


class Rational(NamedTuple):
    """
    A numerator/denominator pair.

    A zero denominator is a representable value; it simply has no
    floating point equivalent.
    """
    numerator: int
    denominator: int

    @property
    def is_valid(self) -> bool:
        return self.denominator != 0

    def to_float(self) -> Optional[float]:
        if self.denominator == 0:
            return None
        return self.numerator / self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"
