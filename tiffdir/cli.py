# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for tiffdir

Dumps the IFD directories of TIFF-structured files (TIFF, DNG and camera
raw formats). Directories given on the command line are searched
recursively.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

from tiffdir import __version__
from tiffdir.config import ReaderConfig
from tiffdir.core import TiffDir
from tiffdir.exceptions import TiffDirError
from tiffdir.metadata import Metadata

logger = logging.getLogger(__name__)

TIFF_EXTENSIONS = {
    '.tif', '.tiff', '.dng', '.nef', '.nrw', '.arw', '.sr2', '.cr2', '.orf',
    '.rw2', '.pef', '.srw', '.3fr', '.erf', '.mef', '.mos', '.iiq',
}


def format_output(metadata: Metadata, format_type: str = "text") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Parsed metadata
        format_type: Output format ('text' or 'json')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(metadata.to_dict(), indent=2, ensure_ascii=False)
    lines = []
    for directory in metadata:
        for tag in directory:
            lines.append(str(tag))
    return "\n".join(lines)


def iter_input_files(paths: List[Path]) -> Iterator[Path]:
    """Yield the files named on the command line, expanding directories."""
    for path in paths:
        if path.is_dir():
            for child in sorted(path.rglob('*')):
                if child.is_file() and child.suffix.lower() in TIFF_EXTENSIONS:
                    yield child
        else:
            yield path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tiffdir',
        description='Dump TIFF/Exif directories of TIFF-based image files',
    )
    parser.add_argument('paths', nargs='+', type=Path, metavar='FILE_OR_DIR',
                        help='Files to read, or directories to search')
    parser.add_argument('-j', '--json', action='store_true',
                        help='Output one JSON document per file')
    parser.add_argument('--offset', type=int, default=0,
                        help='Position of the TIFF header within each file (default: 0)')
    parser.add_argument('--max-directories', type=int, default=None,
                        help='Maximum number of directories read per file')
    parser.add_argument('--max-tags', type=int, default=None,
                        help='Maximum number of tags read per directory')
    parser.add_argument('--no-makernotes', action='store_true',
                        help='Leave maker notes undecoded')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log traversal decisions to stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def process_file(
    path: Path,
    config: ReaderConfig,
    tiff_offset: int,
    format_type: str,
    out: TextIO,
    err: TextIO,
) -> int:
    """
    Read and print one file.

    Returns:
        Number of directory errors found in the file
    """
    with TiffDir(path, tiff_offset=tiff_offset, config=config) as reader:
        metadata = reader.read()

    if format_type == "json":
        print(format_output(metadata, "json"), file=out)
    else:
        print(f"\n***** {path}", file=out)
        text = format_output(metadata, "text")
        if text:
            print(text, file=out)

    error_count = 0
    for directory in metadata:
        for error in directory.errors:
            print(f"{path}: [{directory.name}] ERROR: {error}", file=err)
            error_count += 1
    return error_count


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        config = ReaderConfig(
            max_directories=args.max_directories,
            max_tags_per_directory=args.max_tags,
            read_makernotes=not args.no_makernotes,
        )
    except ValueError as e:
        parser.error(str(e))

    format_type = "json" if args.json else "text"
    processed_count = 0
    processed_bytes = 0
    exception_count = 0
    error_count = 0

    for path in iter_input_files(args.paths):
        try:
            error_count += process_file(path, config, args.offset, format_type, sys.stdout, sys.stderr)
        except TiffDirError as e:
            print(f"{path}: {type(e).__name__}: {e.message}", file=sys.stderr)
            exception_count += 1
            continue
        processed_count += 1
        processed_bytes += path.stat().st_size

    if processed_count == 0 and exception_count == 0:
        print("Error: No input files found", file=sys.stderr)
        return 1

    print(
        f"Processed {processed_count:,} files ({processed_bytes:,} bytes) with "
        f"{exception_count:,} exceptions and {error_count:,} file errors",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
