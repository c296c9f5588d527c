# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core TiffDir class

This module provides the main API for reading TIFF/Exif directory metadata
from a file or an in-memory buffer.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from tiffdir.byte_window import ByteWindow
from tiffdir.config import DEFAULT_CONFIG, ReaderConfig
from tiffdir.exceptions import MetadataReadError
from tiffdir.ifd_walker import IfdWalker
from tiffdir.makernotes import MakernoteDispatcher
from tiffdir.metadata import Metadata

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, bytearray, ByteWindow]


class TiffDir:
    """
    Reader for the IFD structure of one TIFF-based file.

    Example:
        >>> with TiffDir('image.dng') as reader:
        ...     metadata = reader.read()
        ...     ifd0 = metadata.first_of_type(DirectoryType.IFD0)
    """

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        file_data: Optional[Union[bytes, bytearray, ByteWindow]] = None,
        tiff_offset: int = 0,
        config: Optional[ReaderConfig] = None,
        dispatcher: Optional[MakernoteDispatcher] = None,
    ):
        """
        Initialize the reader.

        Args:
            file_path: Path to the file
            file_data: Raw file data (alternative to file_path)
            tiff_offset: Position of the TIFF header within the data
            config: Limits and switches for the parse
            dispatcher: Maker note dispatcher (built-in vendor table if omitted)
        """
        self.file_path = Path(file_path) if file_path is not None else None
        self.file_data = file_data
        self.tiff_offset = tiff_offset
        self.config = config or DEFAULT_CONFIG
        self.dispatcher = dispatcher
        self.metadata: Optional[Metadata] = None
        self._window: Optional[ByteWindow] = None

    def __enter__(self) -> 'TiffDir':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._window = None

    def _load(self) -> ByteWindow:
        if self.file_path is not None:
            try:
                with open(self.file_path, 'rb') as f:
                    return ByteWindow.from_stream(f)
            except OSError as e:
                raise MetadataReadError(f"Cannot read {self.file_path}: {e}")
        if self.file_data is None:
            raise MetadataReadError("No file path or file data provided")
        if isinstance(self.file_data, ByteWindow):
            return self.file_data
        return ByteWindow(self.file_data)

    def read(self) -> Metadata:
        """
        Read every directory of the file.

        Content problems never raise; they are recorded as directory errors.

        Returns:
            Metadata aggregate

        Raises:
            MetadataReadError: If no input was given or the file cannot be opened
        """
        if self._window is None:
            self._window = self._load()
        logger.debug("Reading %d bytes, TIFF header at %d", len(self._window), self.tiff_offset)
        walker = IfdWalker(self._window, config=self.config, dispatcher=self.dispatcher)
        self.metadata = walker.walk(self.tiff_offset)
        return self.metadata


def read_metadata(
    source: Source,
    tiff_offset: int = 0,
    config: Optional[ReaderConfig] = None,
    dispatcher: Optional[MakernoteDispatcher] = None,
) -> Metadata:
    """
    Read TIFF directory metadata from a path or a buffer.

    Args:
        source: File path, raw bytes or a ByteWindow
        tiff_offset: Position of the TIFF header within the data
        config: Limits and switches for the parse
        dispatcher: Maker note dispatcher

    Returns:
        Metadata aggregate; unparseable input yields a single error directory

    Raises:
        MetadataReadError: If a file path cannot be opened
    """
    if isinstance(source, (str, Path)):
        reader = TiffDir(file_path=source, tiff_offset=tiff_offset, config=config, dispatcher=dispatcher)
    else:
        reader = TiffDir(file_data=source, tiff_offset=tiff_offset, config=config, dispatcher=dispatcher)
    return reader.read()
