"""
Unit tests for directories, tags and the metadata aggregate.
"""

import pytest

from tiffdir.config import ReaderConfig
from tiffdir.directory import Directory, Tag, format_value
from tiffdir.exceptions import TiffDirError
from tiffdir.exif_tags import DirectoryType, get_tag_name
from tiffdir.metadata import Metadata
from tiffdir.tag_types import Rational, TagType, type_name, type_size


def make_tag(tag_id, value, directory_type=DirectoryType.IFD0, type_code=TagType.SHORT, count=1):
    return Tag(directory_type, tag_id, int(type_code), count, value)


class TestTag:
    """Tests for tag naming and rendering."""

    def test_name_depends_on_directory_type(self):
        assert make_tag(0x0001, 'N', DirectoryType.GPS).name == 'GPSLatitudeRef'
        assert make_tag(0x0001, 'R98', DirectoryType.INTEROP).name == 'InteropIndex'

    def test_unknown_tag_name(self):
        assert get_tag_name(DirectoryType.IFD0, 0xBEEF) == 'Unknown tag (0xbeef)'

    def test_str(self):
        tag = make_tag(0x0110, 'EOS 5D', type_code=TagType.ASCII, count=7)
        assert str(tag) == '[Exif IFD0 - 0x0110] Model = EOS 5D'

    def test_format_value(self):
        assert format_value(Rational(1, 250)) == '1/250'
        assert format_value([1, 2, 3]) == '1 2 3'
        assert format_value(b'\x01\xab') == '01 ab'
        assert format_value(b'\x00' * 40) == '[40 bytes]'

    def test_type_helpers(self):
        assert type_size(TagType.RATIONAL) == 8
        assert type_size(TagType.LONG8) == 8
        assert type_size(99) is None
        assert type_name(2) == 'ASCII'
        assert type_name(99) == 'UNKNOWN(99)'


class TestDirectory:
    """Tests for the directory entity."""

    def test_tags_keep_insertion_order(self):
        directory = Directory(DirectoryType.IFD0)
        directory.set_tag(make_tag(0x0112, 1))
        directory.set_tag(make_tag(0x010F, 'Sony'))
        assert [t.tag_id for t in directory] == [0x0112, 0x010F]

    def test_duplicate_tag_replaces_in_place(self):
        directory = Directory(DirectoryType.IFD0)
        directory.set_tag(make_tag(0x0100, 10))
        directory.set_tag(make_tag(0x0101, 20))
        directory.set_tag(make_tag(0x0100, 30))
        assert [t.tag_id for t in directory] == [0x0100, 0x0101]
        assert directory.get(0x0100) == 30
        assert directory.tag_count == 2

    def test_accessors(self):
        directory = Directory(DirectoryType.IFD0)
        directory.set_tag(make_tag(0x010F, b'Canon\x00\x00'))
        directory.set_tag(make_tag(0x0201, [512]))
        assert directory.get_string(0x010F) == 'Canon'
        assert directory.get_int(0x0201) == 512
        assert directory.get_int(0x010F) is None
        assert directory.get(0x9999, 'missing') == 'missing'
        assert 0x010F in directory
        assert len(directory) == 2

    def test_errors(self):
        directory = Directory(DirectoryType.GPS)
        assert not directory.has_errors()
        directory.add_error('BoundsError: out of range')
        assert directory.has_errors()
        assert directory.errors == ['BoundsError: out of range']

    def test_frozen_directory_rejects_mutation(self):
        directory = Directory(DirectoryType.IFD0)
        Metadata().add_directory(directory)
        assert directory.is_frozen
        with pytest.raises(TiffDirError):
            directory.set_tag(make_tag(0x0100, 1))
        with pytest.raises(TiffDirError):
            directory.add_error('late')

    def test_to_dict(self):
        directory = Directory(DirectoryType.IFD0, offset=8)
        directory.set_tag(make_tag(0x011A, Rational(72, 1), type_code=TagType.RATIONAL))
        directory.set_tag(make_tag(0x02BC, b'<x/>', type_code=TagType.BYTE, count=4))
        result = directory.to_dict()
        assert result['name'] == 'Exif IFD0'
        assert result['tags']['0x011a']['value'] == [72, 1]
        assert result['tags']['0x02bc']['value'] == b'<x/>'.hex()


class TestMetadata:
    """Tests for the aggregate."""

    def test_lookup(self):
        metadata = Metadata()
        ifd0 = Directory(DirectoryType.IFD0)
        index = metadata.add_directory(ifd0)
        first = Directory(DirectoryType.THUMBNAIL, parent_index=None)
        second = Directory(DirectoryType.THUMBNAIL, parent_index=None)
        exif = Directory(DirectoryType.SUBIFD, parent_index=index)
        metadata.add_directory(exif)
        metadata.add_directory(first)
        metadata.add_directory(second)

        assert len(metadata) == 4
        assert metadata.first_of_type(DirectoryType.THUMBNAIL) is first
        assert metadata.directories_of_type(DirectoryType.THUMBNAIL) == [first, second]
        assert metadata.first_of_type(DirectoryType.GPS) is None
        assert metadata.parent_of(exif) is ifd0
        assert metadata.parent_of(ifd0) is None
        assert list(metadata) == [ifd0, exif, first, second]

    def test_has_errors(self):
        metadata = Metadata()
        metadata.add_directory(Directory(DirectoryType.IFD0))
        assert not metadata.has_errors()
        broken = Directory(DirectoryType.GPS)
        broken.add_error('FormatError: bad')
        metadata.add_directory(broken)
        assert metadata.has_errors()
        assert metadata.to_dict()['has_errors'] is True


class TestReaderConfig:
    """Tests for configuration validation."""

    def test_defaults(self):
        config = ReaderConfig()
        assert config.max_directories is None
        assert config.read_makernotes

    @pytest.mark.parametrize('kwargs', [
        {'max_directories': 0},
        {'max_tags_per_directory': -1},
    ])
    def test_rejects_non_positive_limits(self, kwargs):
        with pytest.raises(ValueError):
            ReaderConfig(**kwargs)
