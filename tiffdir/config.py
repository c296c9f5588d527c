# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Reader configuration

Limits and switches that control how much work a single parse may do.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ReaderConfig:
    """
    Configuration for one metadata read.

    Attributes:
        max_directories: Maximum number of directories produced per file
            (None for no limit)
        max_tags_per_directory: Maximum number of tags decoded per directory
            (None for no limit)
        read_makernotes: Dispatch maker notes to vendor sub-readers
        extract_thumbnails: Copy JPEG thumbnail bytes onto thumbnail directories
    """
    max_directories: Optional[int] = None
    max_tags_per_directory: Optional[int] = None
    read_makernotes: bool = True
    extract_thumbnails: bool = True

    def __post_init__(self):
        if self.max_directories is not None and self.max_directories < 1:
            raise ValueError("max_directories must be at least 1")
        if self.max_tags_per_directory is not None and self.max_tags_per_directory < 1:
            raise ValueError("max_tags_per_directory must be at least 1")


DEFAULT_CONFIG = ReaderConfig()
