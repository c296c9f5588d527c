# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Directory and tag entities

A Directory is the in-memory form of one decoded IFD: its tags in decode
order, a handle to its parent directory and the errors met while reading
it. Directories are filled by the IFD walker and become read-only once
they are added to a Metadata aggregate.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from tiffdir.exceptions import TiffDirError
from tiffdir.exif_tags import DirectoryType, get_tag_name
from tiffdir.tag_types import Rational, type_name


@dataclass(frozen=True)
class TagEntry:
    """One raw IFD entry record, as read from the file."""
    tag_id: int
    type_code: int
    component_count: int
    raw_value_or_offset: int
    inline_bytes: bytes = b''
    entry_offset: int = 0


@dataclass
class Tag:
    """A decoded tag value attached to a directory type and tag id."""
    directory_type: DirectoryType
    tag_id: int
    type_code: int
    component_count: int
    value: Any

    @property
    def name(self) -> str:
        return get_tag_name(self.directory_type, self.tag_id)

    @property
    def tag_type_hex(self) -> str:
        return f"0x{self.tag_id:04x}"

    @property
    def type_name(self) -> str:
        return type_name(self.type_code)

    def __str__(self) -> str:
        return f"[{self.directory_type.value} - {self.tag_type_hex}] {self.name} = {format_value(self.value)}"


def format_value(value: Any, max_bytes: int = 16) -> str:
    """
    Render a decoded value as plain text.

    Byte runs longer than ``max_bytes`` are summarised by their length.

    Args:
        value: Decoded tag value
        max_bytes: Longest byte run printed in full

    Returns:
        String form of the value
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) > max_bytes:
            return f"[{len(value)} bytes]"
        return ' '.join(f"{b:02x}" for b in value)
    if isinstance(value, Rational):
        return str(value)
    if isinstance(value, list):
        return ' '.join(format_value(v, max_bytes) for v in value)
    return str(value)


class Directory:
    """
    Ordered collection of decoded tags from one IFD.

    Tag ids are unique within a directory; setting an id that is already
    present replaces the value and keeps its original position.
    """

    def __init__(
        self,
        directory_type: DirectoryType,
        offset: Optional[int] = None,
        parent_index: Optional[int] = None,
        name: Optional[str] = None,
    ):
        """
        Initialize an empty directory.

        Args:
            directory_type: Logical type of the directory
            offset: Absolute offset of the IFD in the byte window
            parent_index: Index of the parent directory in the Metadata aggregate
            name: Display name (defaults to the directory type's name)
        """
        self.directory_type = directory_type
        self.offset = offset
        self.parent_index = parent_index
        self.name = name or directory_type.value
        self.thumbnail_data: Optional[bytes] = None
        self._tags: Dict[int, Tag] = {}
        self._errors: List[str] = []
        self._frozen = False

    def __repr__(self) -> str:
        return (
            f"Directory({self.name!r}, tags={len(self._tags)}, "
            f"errors={len(self._errors)})"
        )

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags.values())

    def __contains__(self, tag_id: int) -> bool:
        return tag_id in self._tags

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TiffDirError(f"Directory '{self.name}' is read-only")

    def set_tag(self, tag: Tag) -> None:
        self._check_mutable()
        self._tags[tag.tag_id] = tag

    def add_error(self, message: str) -> None:
        self._check_mutable()
        self._errors.append(message)

    @property
    def tags(self) -> List[Tag]:
        return list(self._tags.values())

    @property
    def errors(self) -> List[str]:
        return list(self._errors)

    @property
    def tag_count(self) -> int:
        return len(self._tags)

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def get_tag(self, tag_id: int) -> Optional[Tag]:
        return self._tags.get(tag_id)

    def get(self, tag_id: int, default: Any = None) -> Any:
        """Return the decoded value of a tag, or ``default`` when absent."""
        tag = self._tags.get(tag_id)
        if tag is None:
            return default
        return tag.value

    def get_string(self, tag_id: int) -> Optional[str]:
        """
        Return a tag value as a string.

        ASCII values are returned as decoded; byte runs are decoded as
        UTF-8 up to the first NUL. Other values use their str() form.
        """
        value = self.get(tag_id)
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            null_pos = value.find(b'\x00')
            if null_pos >= 0:
                value = value[:null_pos]
            return bytes(value).decode('utf-8', errors='replace')
        return str(value)

    def get_int(self, tag_id: int) -> Optional[int]:
        """Return a tag value as an int when it holds a single integer."""
        value = self.get(tag_id)
        if isinstance(value, list) and len(value) == 1:
            value = value[0]
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.directory_type.value,
            'parent': self.parent_index,
            'tags': {tag.tag_type_hex: {'name': tag.name, 'value': _json_value(tag.value)} for tag in self},
            'errors': list(self._errors),
        }


def _json_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, Rational):
        return [value.numerator, value.denominator]
    if isinstance(value, list):
        return [_json_value(v) for v in value]
    return value
