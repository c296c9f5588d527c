# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
tiffdir - TIFF/Exif directory decoding in pure Python

Walks the Image File Directories of TIFF-structured files (TIFF, BigTIFF,
DNG and camera raw formats), decodes typed tag values, follows Exif, GPS,
Interoperability and SubIFD pointers and reads vendor maker notes.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from tiffdir.byte_window import ByteWindow
from tiffdir.config import DEFAULT_CONFIG, ReaderConfig
from tiffdir.core import TiffDir, read_metadata
from tiffdir.directory import Directory, Tag, TagEntry
from tiffdir.exceptions import (
    BoundsError,
    CycleDetected,
    FormatError,
    LimitExceeded,
    MetadataReadError,
    TiffDirError,
)
from tiffdir.exif_tags import DirectoryType
from tiffdir.ifd_walker import IfdWalker, read_tiff_header
from tiffdir.makernotes import MakernoteDispatcher, MakernoteLocation, VendorEntry
from tiffdir.metadata import Metadata
from tiffdir.tag_types import Rational, TagType
from tiffdir.typed_reader import BIG_ENDIAN, LITTLE_ENDIAN, TypedReader
from tiffdir.xmp import decode_xmp_packet, find_xmp_packet

__all__ = [
    'TiffDir',
    'read_metadata',
    'ByteWindow',
    'TypedReader',
    'LITTLE_ENDIAN',
    'BIG_ENDIAN',
    'Directory',
    'Tag',
    'TagEntry',
    'Metadata',
    'DirectoryType',
    'TagType',
    'Rational',
    'IfdWalker',
    'read_tiff_header',
    'MakernoteDispatcher',
    'MakernoteLocation',
    'VendorEntry',
    'ReaderConfig',
    'DEFAULT_CONFIG',
    'find_xmp_packet',
    'decode_xmp_packet',
    'TiffDirError',
    'FormatError',
    'BoundsError',
    'CycleDetected',
    'LimitExceeded',
    'MetadataReadError',
]
