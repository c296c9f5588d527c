# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Metadata aggregate

Owns every Directory produced while reading one file, in the order the
directories were discovered. Directories refer to their parent through an
index into this aggregate, never through an object reference.

Copyright 2025 DNAi inc.
"""

from typing import Any, Dict, Iterator, List, Optional

from tiffdir.directory import Directory
from tiffdir.exif_tags import DirectoryType


class Metadata:
    """
    Ordered, append-only collection of directories for one file.
    """

    def __init__(self):
        self._directories: List[Directory] = []

    def __len__(self) -> int:
        return len(self._directories)

    def __iter__(self) -> Iterator[Directory]:
        return iter(self._directories)

    def __repr__(self) -> str:
        names = ', '.join(d.name for d in self._directories)
        return f"Metadata([{names}])"

    def add_directory(self, directory: Directory) -> int:
        """
        Append a directory and make it read-only.

        Args:
            directory: Fully decoded directory

        Returns:
            Index of the directory, usable as a parent handle
        """
        directory.freeze()
        self._directories.append(directory)
        return len(self._directories) - 1

    @property
    def directories(self) -> List[Directory]:
        return list(self._directories)

    @property
    def directory_count(self) -> int:
        return len(self._directories)

    def get_directory(self, index: int) -> Directory:
        return self._directories[index]

    def first_of_type(self, directory_type: DirectoryType) -> Optional[Directory]:
        """Return the first directory of a type in discovery order, or None."""
        for directory in self._directories:
            if directory.directory_type == directory_type:
                return directory
        return None

    def directories_of_type(self, directory_type: DirectoryType) -> List[Directory]:
        return [d for d in self._directories if d.directory_type == directory_type]

    def parent_of(self, directory: Directory) -> Optional[Directory]:
        if directory.parent_index is None:
            return None
        return self._directories[directory.parent_index]

    def has_errors(self) -> bool:
        """True if any directory recorded at least one error."""
        return any(d.has_errors() for d in self._directories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'directories': [d.to_dict() for d in self._directories],
            'has_errors': self.has_errors(),
        }
