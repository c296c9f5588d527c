# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
XMP packet access

TIFF files carry XMP as an opaque byte run in tag 0x02BC. This module
finds that run and turns it into text; the XML itself is not interpreted.

Copyright 2025 DNAi inc.
"""

from typing import Optional, Union

from tiffdir.byte_window import ByteWindow
from tiffdir.exif_tags import TAG_XMP
from tiffdir.metadata import Metadata


def find_xmp_packet(metadata: Metadata) -> Optional[bytes]:
    """
    Return the raw XMP payload of the first directory carrying one.

    Args:
        metadata: Parsed metadata

    Returns:
        XMP bytes, or None if no directory holds the XMP tag
    """
    for directory in metadata:
        value = directory.get(TAG_XMP)
        if value is None:
            continue
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode('utf-8')
        if isinstance(value, int):
            # single BYTE component
            return bytes([value])
        if isinstance(value, list):
            return bytes(v & 0xFF for v in value if isinstance(v, int))
    return None


def decode_xmp_packet(data: Union[bytes, bytearray, ByteWindow]) -> str:
    """
    Decode an XMP packet to text.

    The encoding is sniffed from the leading bytes (UTF-8, UTF-16 or UTF-32
    in either byte order) and a byte order mark is dropped.

    Args:
        data: Raw packet bytes

    Returns:
        Packet text; trailing NUL padding is removed
    """
    window = data if isinstance(data, ByteWindow) else ByteWindow(data)
    return window.decode_text().rstrip('\x00')
