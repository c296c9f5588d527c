"""
Unit tests for the command-line interface.
"""

import json

import pytest

from tiffdir.cli import format_output, iter_input_files, main
from tiffdir.core import read_metadata
from tiffdir.tag_types import TagType

from tiff_builder import TiffBuilder


def write_broken_tiff(path):
    builder = TiffBuilder('<')
    ifd0 = builder.add_ifd([
        (0x010F, TagType.ASCII, 'Canon'),
        (0x0111, TagType.LONG, [1, 2, 3]),
    ], first=True)
    builder.set_entry_value(ifd0, 1, 0xFFFF00)
    path.write_bytes(builder.to_bytes())


class TestFormatOutput:
    """Tests for output formatting."""

    def test_text(self, simple_tiff):
        lines = format_output(read_metadata(simple_tiff)).splitlines()
        assert '[Exif IFD0 - 0x010f] Make = Canon' in lines
        assert '[Exif SubIFD - 0x829a] ExposureTime = 1/250' in lines

    def test_json(self, simple_tiff):
        result = json.loads(format_output(read_metadata(simple_tiff), 'json'))
        names = [d['name'] for d in result['directories']]
        assert names == ['Exif IFD0', 'Exif SubIFD']
        assert result['directories'][1]['parent'] == 0
        assert result['directories'][1]['tags']['0x829a']['value'] == [1, 250]


class TestMain:
    """Tests for the batch entry point."""

    def test_single_file(self, simple_tiff, tmp_path, capsys):
        path = tmp_path / 'a.tif'
        path.write_bytes(simple_tiff)
        assert main([str(path)]) == 0
        captured = capsys.readouterr()
        assert '[Exif IFD0 - 0x0110] Model = EOS 5D' in captured.out
        assert (
            f'Processed 1 files ({len(simple_tiff):,} bytes) with 0 exceptions and 0 file errors'
            in captured.err
        )

    def test_directory_is_searched_recursively(self, simple_tiff, tmp_path, capsys):
        (tmp_path / 'sub').mkdir()
        (tmp_path / 'a.TIF').write_bytes(simple_tiff)
        (tmp_path / 'sub' / 'b.dng').write_bytes(simple_tiff)
        (tmp_path / 'notes.txt').write_text('not an image')
        files = list(iter_input_files([tmp_path]))
        assert [f.name for f in files] == ['a.TIF', 'b.dng']
        assert main([str(tmp_path)]) == 0
        assert 'Processed 2 files' in capsys.readouterr().err

    def test_directory_errors_go_to_stderr(self, tmp_path, capsys):
        path = tmp_path / 'broken.tif'
        write_broken_tiff(path)
        assert main([str(path)]) == 0
        captured = capsys.readouterr()
        assert 'Make = Canon' in captured.out
        assert 'ERROR: BoundsError' in captured.err
        assert 'with 0 exceptions and 1 file errors' in captured.err

    def test_missing_file_counts_as_exception(self, tmp_path, capsys):
        assert main([str(tmp_path / 'missing.tif')]) == 0
        err = capsys.readouterr().err
        assert 'MetadataReadError' in err
        assert 'Processed 0 files (0 bytes) with 1 exceptions and 0 file errors' in err

    def test_no_input_found(self, tmp_path, capsys):
        assert main([str(tmp_path)]) == 1
        assert 'No input files found' in capsys.readouterr().err

    def test_json_output(self, simple_tiff, tmp_path, capsys):
        path = tmp_path / 'a.tiff'
        path.write_bytes(simple_tiff)
        assert main(['--json', str(path)]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result['has_errors'] is False

    def test_limits_and_makernote_switch(self, simple_tiff, tmp_path, capsys):
        path = tmp_path / 'a.tif'
        path.write_bytes(simple_tiff)
        assert main(['--max-directories', '1', '--no-makernotes', str(path)]) == 0
        captured = capsys.readouterr()
        assert 'Exif SubIFD' not in captured.out
        assert 'LimitExceeded' in captured.err

    def test_invalid_limit(self, tmp_path):
        with pytest.raises(SystemExit):
            main(['--max-tags', '0', str(tmp_path)])
