# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Byte window

A growable byte buffer that tracks how many of its bytes are valid.
All metadata decoding reads go through this class so that every
out-of-range access surfaces as a BoundsError instead of a silently
short slice.

Copyright 2025 DNAi inc.
"""

from typing import BinaryIO, Optional, Union

from tiffdir.exceptions import BoundsError


DEFAULT_CAPACITY = 1024
STREAM_CHUNK_SIZE = 16384

# Python codec for each detected encoding name
_CODECS = {
    'UTF-8': 'utf-8-sig',
    'UTF-16': 'utf-16',
    'UTF-16BE': 'utf-16-be',
    'UTF-16LE': 'utf-16-le',
    'UTF-32': 'utf-32',
    'UTF-32BE': 'utf-32-be',
    'UTF-32LE': 'utf-32-le',
}


class ByteWindow:
    """
    Byte buffer with a valid-length marker.

    The underlying storage may be larger than the number of valid bytes
    while the window is filled incrementally. Capacity doubles whenever
    an append would overflow it and never shrinks.
    """

    def __init__(self, data: Union[bytes, bytearray, None] = None, capacity: int = DEFAULT_CAPACITY):
        """
        Initialize the window.

        Args:
            data: Initial valid bytes (the window takes a copy)
            capacity: Initial capacity used when no data is given
        """
        if data is not None:
            self._buffer = bytearray(data)
            self._length = len(data)
        else:
            if capacity < 0:
                raise ValueError("capacity must not be negative")
            self._buffer = bytearray(capacity)
            self._length = 0
        self._encoding: Optional[str] = None
        self._encoding_basis = 0

    @classmethod
    def from_stream(cls, stream: BinaryIO, chunk_size: int = STREAM_CHUNK_SIZE) -> 'ByteWindow':
        """
        Load a binary stream into a new window, chunk by chunk.

        Args:
            stream: Readable binary file object
            chunk_size: Number of bytes requested per read

        Returns:
            ByteWindow holding every byte of the stream
        """
        window = cls(capacity=chunk_size)
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            window.append(chunk)
        return window

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"ByteWindow(length={self._length}, capacity={len(self._buffer)})"

    @property
    def capacity(self) -> int:
        """Size of the underlying storage; at least len(self)."""
        return len(self._buffer)

    def read(self, offset: int, length: int) -> bytes:
        """
        Read a run of valid bytes.

        Args:
            offset: Absolute position of the first byte
            length: Number of bytes to read

        Returns:
            The requested bytes

        Raises:
            BoundsError: If any part of the run lies outside [0, len(self))
        """
        if offset < 0 or length < 0 or offset + length > self._length:
            raise BoundsError(
                f"Attempt to read {length} bytes at offset {offset} "
                f"outside of {self._length} valid bytes",
                offset=offset,
                length=length,
            )
        return bytes(self._buffer[offset:offset + length])

    def byte_at(self, offset: int) -> int:
        """Return the unsigned byte at ``offset``."""
        if offset < 0 or offset >= self._length:
            raise BoundsError(
                f"Index {offset} exceeds the valid buffer area ({self._length} bytes)",
                offset=offset,
                length=1,
            )
        return self._buffer[offset]

    def is_valid_range(self, offset: int, length: int) -> bool:
        return offset >= 0 and length >= 0 and offset + length <= self._length

    def append(self, data: Union[bytes, bytearray, memoryview, int, 'ByteWindow']) -> None:
        """
        Append bytes to the end of the valid area.

        Args:
            data: Bytes-like object, another ByteWindow, or a single byte value
        """
        if isinstance(data, ByteWindow):
            data = data.to_bytes()
        elif isinstance(data, int):
            data = bytes((data & 0xFF,))
        size = len(data)
        self._ensure_capacity(self._length + size)
        self._buffer[self._length:self._length + size] = data
        self._length += size

        # A cached encoding guessed from a short prefix may change
        if self._encoding is not None and self._encoding_basis < 4:
            self._encoding = None

    def _ensure_capacity(self, requested: int) -> None:
        capacity = len(self._buffer)
        if requested <= capacity:
            return
        new_capacity = max(capacity, 1)
        while new_capacity < requested:
            new_capacity *= 2
        self._buffer.extend(bytes(new_capacity - capacity))

    def to_bytes(self) -> bytes:
        """Return a copy of the valid bytes."""
        return bytes(self._buffer[:self._length])

    def detect_encoding(self) -> str:
        """
        Detect the Unicode encoding of the window contents.

        Only UTF-8, UTF-16LE/BE and UTF-32LE/BE are recognized, using at
        most the first four bytes:

            00 nn -- --   UTF-16BE
            00 00 FE FF   UTF-32BE
            00 00 00 nn   UTF-32
            nn mm -- --   UTF-8
            nn 00 -- --   UTF-16LE
            nn 00 00 00   UTF-32LE
            EF BB BF --   UTF-8
            FE FF -- --   UTF-16
            FF FE -- --   UTF-16
            FF FE 00 00   UTF-32

        Returns:
            Encoding name (e.g. "UTF-16BE")
        """
        if self._encoding is not None:
            return self._encoding

        length = self._length
        buf = self._buffer
        if length < 2:
            # a single byte can only be UTF-8
            encoding = 'UTF-8'
        elif buf[0] == 0x00:
            if length < 4 or buf[1] != 0x00:
                encoding = 'UTF-16BE'
            elif buf[2] == 0xFE and buf[3] == 0xFF:
                encoding = 'UTF-32BE'
            else:
                encoding = 'UTF-32'
        elif buf[0] < 0x80:
            if buf[1] != 0x00:
                encoding = 'UTF-8'
            elif length < 4 or buf[2] != 0x00:
                encoding = 'UTF-16LE'
            else:
                encoding = 'UTF-32LE'
        elif buf[0] == 0xEF:
            encoding = 'UTF-8'
        elif buf[0] == 0xFE:
            encoding = 'UTF-16'
        elif length < 4 or buf[2] != 0x00:
            encoding = 'UTF-16'
        else:
            encoding = 'UTF-32'

        self._encoding = encoding
        self._encoding_basis = min(length, 4)
        return encoding

    def decode_text(self, errors: str = 'replace') -> str:
        """
        Decode the valid bytes as text using the detected encoding.

        Args:
            errors: Codec error handler passed to bytes.decode

        Returns:
            Decoded text without a leading byte order mark
        """
        encoding = self.detect_encoding()
        codec = _CODECS[encoding]
        if encoding == 'UTF-32' and self._length >= 1 and self._buffer[0] == 0x00:
            # 00 00 00 nn carries no BOM, so the codec cannot infer the order
            codec = 'utf-32-be'
        text = self.to_bytes().decode(codec, errors=errors)
        return text.lstrip('\ufeff')
