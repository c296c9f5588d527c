"""
Shared fixtures for the tiffdir test suite.
"""

import pytest

from tiffdir.tag_types import TagType

from tiff_builder import TiffBuilder


@pytest.fixture
def tiff_builder():
    return TiffBuilder


@pytest.fixture
def simple_tiff():
    """Little-endian file with IFD0 (Make, Model, ExifIFD) and an Exif SubIFD."""
    builder = TiffBuilder('<')
    exif = builder.add_ifd([
        (0x829A, TagType.RATIONAL, (1, 250)),  # ExposureTime
        (0x8827, TagType.SHORT, 200),  # ISO
    ])
    builder.add_ifd([
        (0x010F, TagType.ASCII, 'Canon'),
        (0x0110, TagType.ASCII, 'EOS 5D'),
        (0x0112, TagType.SHORT, 1),
        (0x8769, TagType.LONG, exif),
    ], first=True)
    return builder.to_bytes()
