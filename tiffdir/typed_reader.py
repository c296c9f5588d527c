# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Typed reader

Decodes fixed-width integers, rationals, IEEE floats and byte runs from a
ByteWindow in a chosen byte order. Every read accepts an absolute offset;
when it is omitted the read happens at the cursor, which then advances.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Optional

from tiffdir.byte_window import ByteWindow
from tiffdir.tag_types import Rational


LITTLE_ENDIAN = '<'
BIG_ENDIAN = '>'


class TypedReader:
    """
    Byte-order aware reader over a ByteWindow.

    Bounds checking is left to the window, so any out-of-range read
    raises BoundsError.
    """

    def __init__(self, window: ByteWindow, endian: str = LITTLE_ENDIAN, position: int = 0):
        """
        Initialize the reader.

        Args:
            window: Window holding the bytes to decode
            endian: '<' for little-endian, '>' for big-endian
            position: Initial cursor position
        """
        if endian not in (LITTLE_ENDIAN, BIG_ENDIAN):
            raise ValueError(f"Invalid byte order: {endian!r}")
        self.window = window
        self.endian = endian
        self.position = position

    @property
    def is_big_endian(self) -> bool:
        return self.endian == BIG_ENDIAN

    def with_endian(self, endian: str) -> 'TypedReader':
        """Return a reader over the same window using another byte order."""
        return TypedReader(self.window, endian, self.position)

    def seek(self, position: int) -> None:
        self.position = position

    def skip(self, count: int) -> None:
        self.position += count

    def _take(self, size: int, offset: Optional[int]) -> bytes:
        if offset is None:
            data = self.window.read(self.position, size)
            self.position += size
            return data
        return self.window.read(offset, size)

    def _unpack(self, fmt: str, size: int, offset: Optional[int]):
        return struct.unpack(f'{self.endian}{fmt}', self._take(size, offset))[0]

    def read_uint8(self, offset: Optional[int] = None) -> int:
        return self._unpack('B', 1, offset)

    def read_int8(self, offset: Optional[int] = None) -> int:
        return self._unpack('b', 1, offset)

    def read_uint16(self, offset: Optional[int] = None) -> int:
        return self._unpack('H', 2, offset)

    def read_int16(self, offset: Optional[int] = None) -> int:
        return self._unpack('h', 2, offset)

    def read_uint32(self, offset: Optional[int] = None) -> int:
        return self._unpack('I', 4, offset)

    def read_int32(self, offset: Optional[int] = None) -> int:
        return self._unpack('i', 4, offset)

    def read_uint64(self, offset: Optional[int] = None) -> int:
        return self._unpack('Q', 8, offset)

    def read_int64(self, offset: Optional[int] = None) -> int:
        return self._unpack('q', 8, offset)

    def read_float32(self, offset: Optional[int] = None) -> float:
        return self._unpack('f', 4, offset)

    def read_float64(self, offset: Optional[int] = None) -> float:
        return self._unpack('d', 8, offset)

    def read_rational(self, offset: Optional[int] = None) -> Rational:
        """Read two unsigned 32-bit integers as numerator/denominator."""
        numerator, denominator = struct.unpack(f'{self.endian}II', self._take(8, offset))
        return Rational(numerator, denominator)

    def read_srational(self, offset: Optional[int] = None) -> Rational:
        """Read two signed 32-bit integers as numerator/denominator."""
        numerator, denominator = struct.unpack(f'{self.endian}ii', self._take(8, offset))
        return Rational(numerator, denominator)

    def read_bytes(self, count: int, offset: Optional[int] = None) -> bytes:
        return self._take(count, offset)

    def read_string(self, count: int, offset: Optional[int] = None, encoding: str = 'utf-8') -> str:
        """
        Read a fixed-length string, cut at the first NUL byte.

        Args:
            count: Number of bytes reserved for the string
            offset: Absolute position (cursor when omitted)
            encoding: Text encoding; undecodable bytes are replaced

        Returns:
            Decoded string
        """
        data = self._take(count, offset)
        null_pos = data.find(b'\x00')
        if null_pos >= 0:
            data = data[:null_pos]
        return data.decode(encoding, errors='replace')
