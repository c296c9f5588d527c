# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IFD walker

Reads the TIFF header and walks every Image File Directory reachable from
it: the IFD0 -> IFD1 chain, the Exif, GPS and Interoperability sub-IFDs,
SubIFDs arrays and vendor maker notes.

Traversal uses an explicit work list instead of recursion. Every IFD offset
is claimed in a visited set before it is queued, so self-referencing or
cyclic files terminate. Problems with a single entry are recorded on the
directory being read and the walk moves on; nothing in here raises past
walk().

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Any, List, Optional, Set, Tuple

from tiffdir.byte_window import ByteWindow
from tiffdir.config import DEFAULT_CONFIG, ReaderConfig
from tiffdir.directory import Directory, Tag, TagEntry
from tiffdir.exceptions import (
    BoundsError,
    CycleDetected,
    FormatError,
    LimitExceeded,
    TiffDirError,
)
from tiffdir.exif_tags import (
    DirectoryType,
    TAG_EXIF_SUBIFD,
    TAG_GPS_INFO,
    TAG_INTEROP,
    TAG_MAKE,
    TAG_MAKERNOTE,
    TAG_SUBIFDS,
    TAG_THUMBNAIL_LENGTH,
    TAG_THUMBNAIL_OFFSET,
)
from tiffdir.makernotes import MakernoteDispatcher
from tiffdir.metadata import Metadata
from tiffdir.tag_types import TagType, type_size
from tiffdir.typed_reader import BIG_ENDIAN, LITTLE_ENDIAN, TypedReader

logger = logging.getLogger(__name__)

TIFF_MAGIC = 42
BIGTIFF_MAGIC = 43
ORF_MAGICS = (0x4F52, 0x5352)  # "IIRO"/"MMOR" and "IIRS"
RW2_MAGIC = 0x0055  # "IIU\0"


@dataclass(frozen=True)
class IfdLayout:
    """Field sizes of one flavour of IFD."""
    count_size: int  # entry count at the start of an IFD
    entry_size: int  # one entry record
    value_field_offset: int  # position of the value/offset field within an entry
    value_field_size: int  # bytes available for inline values
    offset_size: int  # next-IFD pointer and value offsets


CLASSIC_LAYOUT = IfdLayout(count_size=2, entry_size=12, value_field_offset=8, value_field_size=4, offset_size=4)
BIGTIFF_LAYOUT = IfdLayout(count_size=8, entry_size=20, value_field_offset=12, value_field_size=8, offset_size=8)


@dataclass(frozen=True)
class TiffHeader:
    endian: str
    magic: int
    first_ifd_offset: int  # relative to the start of the header
    layout: IfdLayout

    @property
    def is_bigtiff(self) -> bool:
        return self.magic == BIGTIFF_MAGIC


# Pointer tags that open a child directory, per parent directory type
SUBDIRECTORY_TAGS = {
    DirectoryType.IFD0: {
        TAG_EXIF_SUBIFD: DirectoryType.SUBIFD,
        TAG_GPS_INFO: DirectoryType.GPS,
        TAG_SUBIFDS: DirectoryType.IMAGE_SUBIFD,
    },
    DirectoryType.THUMBNAIL: {
        TAG_EXIF_SUBIFD: DirectoryType.SUBIFD,
        TAG_GPS_INFO: DirectoryType.GPS,
        TAG_SUBIFDS: DirectoryType.IMAGE_SUBIFD,
    },
    DirectoryType.IMAGE_SUBIFD: {
        TAG_SUBIFDS: DirectoryType.IMAGE_SUBIFD,
    },
    DirectoryType.SUBIFD: {
        TAG_INTEROP: DirectoryType.INTEROP,
    },
}

# Directory types whose next-IFD pointer continues the chain, and the type it continues with
FOLLOWER_TYPES = {
    DirectoryType.IFD0: DirectoryType.THUMBNAIL,
    DirectoryType.THUMBNAIL: DirectoryType.THUMBNAIL,
    DirectoryType.IMAGE_SUBIFD: DirectoryType.IMAGE_SUBIFD,
}

MAKERNOTE_PARENT_TYPES = (DirectoryType.SUBIFD, DirectoryType.IFD0)


@dataclass(frozen=True)
class _IfdTask:
    """A pending IFD read."""
    offset: int  # absolute offset of the entry count
    directory_type: DirectoryType
    parent_index: Optional[int]
    endian: str
    base: int  # absolute offset that value offsets are relative to


@dataclass(frozen=True)
class _PendingChild:
    offset: int
    directory_type: DirectoryType
    endian: str
    base: int
    sibling: bool  # next-IFD follower rather than a child


def _error_text(error: TiffDirError) -> str:
    return f"{type(error).__name__}: {error.message}"


def read_tiff_header(window: ByteWindow, offset: int = 0) -> TiffHeader:
    """
    Parse a TIFF header.

    Args:
        window: Window holding the TIFF structure
        offset: Absolute position of the byte order marker

    Returns:
        TiffHeader

    Raises:
        FormatError: If the byte order marker or magic number is invalid,
            or the header is truncated
    """
    try:
        marker = window.read(offset, 2)
    except BoundsError:
        raise FormatError("File too short for TIFF header")

    if marker == b'II':
        endian = LITTLE_ENDIAN
    elif marker == b'MM':
        endian = BIG_ENDIAN
    else:
        raise FormatError(f"Invalid TIFF byte order marker {marker!r}")

    reader = TypedReader(window, endian)
    try:
        magic = reader.read_uint16(offset + 2)
        if magic == BIGTIFF_MAGIC:
            offset_size = reader.read_uint16(offset + 4)
            if offset_size != 8:
                raise FormatError(f"Unsupported BigTIFF offset size {offset_size}")
            first_ifd = reader.read_uint64(offset + 8)
            layout = BIGTIFF_LAYOUT
        elif magic == TIFF_MAGIC or magic == RW2_MAGIC or magic in ORF_MAGICS:
            first_ifd = reader.read_uint32(offset + 4)
            layout = CLASSIC_LAYOUT
        else:
            raise FormatError(f"Invalid TIFF magic number 0x{magic:04x}")
    except BoundsError:
        raise FormatError("TIFF header is truncated")

    return TiffHeader(endian=endian, magic=magic, first_ifd_offset=first_ifd, layout=layout)


class IfdWalker:
    """
    Walks the IFD structure of one TIFF byte stream into a Metadata aggregate.

    A walker instance is used for a single parse; its visited-offset set and
    directory counter are not shared.
    """

    def __init__(
        self,
        window: ByteWindow,
        metadata: Optional[Metadata] = None,
        config: Optional[ReaderConfig] = None,
        dispatcher: Optional[MakernoteDispatcher] = None,
    ):
        """
        Initialize the walker.

        Args:
            window: Window holding the file bytes
            metadata: Aggregate to append directories to (a new one if omitted)
            config: Limits and switches for this parse
            dispatcher: Maker note dispatcher (built-in vendor table if omitted)
        """
        self.window = window
        self.metadata = metadata if metadata is not None else Metadata()
        self.config = config or DEFAULT_CONFIG
        self.dispatcher = dispatcher or MakernoteDispatcher()
        self.layout = CLASSIC_LAYOUT
        self._visited: Set[int] = set()
        self._claimed = 0

    def walk(self, tiff_offset: int = 0) -> Metadata:
        """
        Read every directory reachable from the TIFF header at ``tiff_offset``.

        Args:
            tiff_offset: Absolute position of the TIFF header in the window

        Returns:
            The Metadata aggregate, possibly holding only an error directory
        """
        try:
            header = read_tiff_header(self.window, tiff_offset)
        except FormatError as e:
            logger.debug("TIFF header rejected: %s", e.message)
            self._add_error_directory(_error_text(e))
            return self.metadata

        self.layout = header.layout
        first_offset = tiff_offset + header.first_ifd_offset
        if header.first_ifd_offset == 0 or not self.window.is_valid_range(first_offset, self.layout.count_size):
            self._add_error_directory(_error_text(FormatError(
                f"First IFD offset {header.first_ifd_offset} is outside the valid range of {len(self.window)} bytes"
            )))
            return self.metadata

        self._visited.add(first_offset)
        self._claimed += 1
        stack: List[_IfdTask] = [
            _IfdTask(first_offset, DirectoryType.IFD0, None, header.endian, tiff_offset)
        ]
        while stack:
            task = stack.pop()
            children = self._process_ifd(task)
            # reversed so that children are read in the order they were found
            stack.extend(reversed(children))
        return self.metadata

    def _add_error_directory(self, message: str) -> None:
        directory = Directory(DirectoryType.ERROR)
        directory.add_error(message)
        self.metadata.add_directory(directory)

    def _process_ifd(self, task: _IfdTask) -> List[_IfdTask]:
        """Decode one IFD, append its directory and return the IFDs it points to."""
        directory = Directory(task.directory_type, offset=task.offset, parent_index=task.parent_index)
        reader = TypedReader(self.window, task.endian)
        layout = self.layout
        pending: List[_PendingChild] = []

        try:
            entry_count = self._read_count(reader, task.offset)
        except BoundsError as e:
            directory.add_error(_error_text(e))
            self.metadata.add_directory(directory)
            return []

        entries_start = task.offset + layout.count_size
        follow_chain = True
        limit = self.config.max_tags_per_directory

        for i in range(entry_count):
            if limit is not None and directory.tag_count >= limit:
                directory.add_error(_error_text(LimitExceeded(
                    f"Directory holds more than {limit} tags; {entry_count - i} entries not read"
                )))
                follow_chain = False
                break

            entry_offset = entries_start + i * layout.entry_size
            try:
                entry = self._read_entry(reader, entry_offset)
            except BoundsError:
                directory.add_error(_error_text(BoundsError(
                    f"IFD entry table truncated at entry {i} of {entry_count}"
                )))
                follow_chain = False
                break

            try:
                value, value_offset = self._decode_entry(reader, entry, task.base)
            except BoundsError as e:
                directory.add_error(f"BoundsError: Tag 0x{entry.tag_id:04x}: {e.message}")
                continue

            directory.set_tag(Tag(
                directory_type=task.directory_type,
                tag_id=entry.tag_id,
                type_code=entry.type_code,
                component_count=entry.component_count,
                value=value,
            ))
            pending.extend(self._subdirectories(directory, task, entry, value))
            if entry.tag_id == TAG_MAKERNOTE and task.directory_type in MAKERNOTE_PARENT_TYPES:
                pending.extend(self._makernote(directory, task, reader, value_offset))

        if follow_chain and task.directory_type in FOLLOWER_TYPES:
            pending.extend(self._follower(directory, task, reader, entries_start + entry_count * layout.entry_size))

        if task.directory_type == DirectoryType.THUMBNAIL and self.config.extract_thumbnails:
            self._extract_thumbnail(directory, task.base)

        index = self.metadata.add_directory(directory)
        return [
            _IfdTask(
                offset=child.offset,
                directory_type=child.directory_type,
                parent_index=task.parent_index if child.sibling else index,
                endian=child.endian,
                base=child.base,
            )
            for child in pending
        ]

    def _read_count(self, reader: TypedReader, offset: int) -> int:
        if self.layout.count_size == 8:
            return reader.read_uint64(offset)
        return reader.read_uint16(offset)

    def _read_offset(self, reader: TypedReader, offset: int) -> int:
        if self.layout.offset_size == 8:
            return reader.read_uint64(offset)
        return reader.read_uint32(offset)

    def _read_entry(self, reader: TypedReader, offset: int) -> TagEntry:
        layout = self.layout
        # make sure the whole record is present before decoding any field
        reader.window.read(offset, layout.entry_size)
        tag_id = reader.read_uint16(offset)
        type_code = reader.read_uint16(offset + 2)
        if layout.offset_size == 8:
            count = reader.read_uint64(offset + 4)
        else:
            count = reader.read_uint32(offset + 4)
        field_offset = offset + layout.value_field_offset
        return TagEntry(
            tag_id=tag_id,
            type_code=type_code,
            component_count=count,
            raw_value_or_offset=self._read_offset(reader, field_offset),
            inline_bytes=reader.read_bytes(layout.value_field_size, field_offset),
            entry_offset=offset,
        )

    def _decode_entry(self, reader: TypedReader, entry: TagEntry, base: int) -> Tuple[Any, int]:
        """
        Resolve and decode the value of one entry.

        Returns:
            (decoded value, absolute offset of the value bytes)
        """
        field_offset = entry.entry_offset + self.layout.value_field_offset
        size = type_size(entry.type_code)
        if size is None:
            logger.debug("Tag 0x%04x has unknown type code %d", entry.tag_id, entry.type_code)
            return entry.inline_bytes, field_offset

        byte_count = size * entry.component_count
        if byte_count <= self.layout.value_field_size:
            value_offset = field_offset
        else:
            value_offset = base + entry.raw_value_or_offset
        if byte_count > 0 and not reader.window.is_valid_range(value_offset, byte_count):
            raise BoundsError(
                f"Value of {byte_count} bytes at offset {value_offset} is outside "
                f"the valid range of {len(reader.window)} bytes",
                offset=value_offset,
                length=byte_count,
            )
        return decode_value(reader, TagType(entry.type_code), entry.component_count, value_offset), value_offset

    def _subdirectories(
        self,
        directory: Directory,
        task: _IfdTask,
        entry: TagEntry,
        value: Any,
    ) -> List[_PendingChild]:
        child_type = SUBDIRECTORY_TAGS.get(task.directory_type, {}).get(entry.tag_id)
        if child_type is None:
            return []
        offsets = value if isinstance(value, list) else [value]
        children = []
        for relative in offsets:
            if isinstance(relative, bool) or not isinstance(relative, int):
                directory.add_error(
                    f"FormatError: Tag 0x{entry.tag_id:04x} does not hold an IFD offset"
                )
                break
            if relative == 0:
                continue
            absolute = task.base + relative
            if self._claim(directory, absolute, child_type):
                children.append(_PendingChild(absolute, child_type, task.endian, task.base, sibling=False))
        return children

    def _makernote(
        self,
        directory: Directory,
        task: _IfdTask,
        reader: TypedReader,
        makernote_offset: int,
    ) -> List[_PendingChild]:
        if not self.config.read_makernotes:
            return []
        make = self._find_make(directory)
        try:
            location = self.dispatcher.locate(make, reader, makernote_offset, task.endian, task.base)
        except BoundsError as e:
            directory.add_error(f"BoundsError: Maker note for make {make!r}: {e.message}")
            return []
        if location is None:
            return []
        if not self._claim(directory, location.ifd_offset, location.directory_type):
            return []
        return [_PendingChild(
            location.ifd_offset, location.directory_type, location.endian, location.offset_base, sibling=False
        )]

    def _find_make(self, directory: Directory) -> Optional[str]:
        make = directory.get_string(TAG_MAKE)
        if make:
            return make
        ifd0 = self.metadata.first_of_type(DirectoryType.IFD0)
        if ifd0 is not None and ifd0.get_string(TAG_MAKE):
            return ifd0.get_string(TAG_MAKE)
        for other in self.metadata:
            make = other.get_string(TAG_MAKE)
            if make:
                return make
        return None

    def _follower(
        self,
        directory: Directory,
        task: _IfdTask,
        reader: TypedReader,
        pointer_offset: int,
    ) -> List[_PendingChild]:
        try:
            next_offset = self._read_offset(reader, pointer_offset)
        except BoundsError as e:
            directory.add_error(f"BoundsError: Next IFD pointer: {e.message}")
            return []
        if next_offset == 0:
            return []
        follower_type = FOLLOWER_TYPES[task.directory_type]
        absolute = task.base + next_offset
        if not self._claim(directory, absolute, follower_type):
            return []
        return [_PendingChild(absolute, follower_type, task.endian, task.base, sibling=True)]

    def _claim(self, directory: Directory, offset: int, directory_type: DirectoryType) -> bool:
        """
        Reserve an IFD offset for reading.

        Rejections are recorded on ``directory``, which holds the pointer.
        """
        if offset in self._visited:
            logger.debug("IFD offset %d already visited; %s not read", offset, directory_type.value)
            directory.add_error(_error_text(CycleDetected(
                f"{directory_type.value} IFD at offset {offset} was already visited"
            )))
            return False
        if not self.window.is_valid_range(offset, self.layout.count_size):
            directory.add_error(_error_text(BoundsError(
                f"{directory_type.value} IFD offset {offset} is outside the valid range "
                f"of {len(self.window)} bytes"
            )))
            return False
        max_directories = self.config.max_directories
        if max_directories is not None and self._claimed >= max_directories:
            logger.debug("Directory limit of %d reached", max_directories)
            directory.add_error(_error_text(LimitExceeded(
                f"Directory limit of {max_directories} reached; "
                f"{directory_type.value} IFD at offset {offset} not read"
            )))
            return False
        self._visited.add(offset)
        self._claimed += 1
        return True

    def _extract_thumbnail(self, directory: Directory, base: int) -> None:
        offset = directory.get_int(TAG_THUMBNAIL_OFFSET)
        length = directory.get_int(TAG_THUMBNAIL_LENGTH)
        if offset is None or length is None:
            return
        try:
            directory.thumbnail_data = self.window.read(base + offset, length)
        except BoundsError as e:
            directory.add_error(f"BoundsError: Thumbnail data: {e.message}")


_NUMERIC_FORMATS = {
    TagType.SHORT: 'H',
    TagType.LONG: 'I',
    TagType.SBYTE: 'b',
    TagType.SSHORT: 'h',
    TagType.SLONG: 'i',
    TagType.FLOAT: 'f',
    TagType.DOUBLE: 'd',
    TagType.IFD: 'I',
    TagType.LONG8: 'Q',
    TagType.SLONG8: 'q',
    TagType.IFD8: 'Q',
}


def decode_value(reader: TypedReader, tag_type: TagType, count: int, offset: int) -> Any:
    """
    Decode ``count`` components of ``tag_type`` stored at ``offset``.

    Single components decode to a scalar, several to a list. BYTE runs
    and UNDEFINED data decode to bytes, ASCII to a string cut at the
    first NUL.

    Args:
        reader: Reader positioned over the window, in the IFD's byte order
        tag_type: Component type
        count: Number of components
        offset: Absolute offset of the first component

    Returns:
        Decoded value
    """
    if tag_type == TagType.ASCII:
        return _decode_ascii(reader.read_bytes(count, offset))

    if tag_type == TagType.UNDEFINED:
        return reader.read_bytes(count, offset)

    if tag_type == TagType.BYTE:
        data = reader.read_bytes(count, offset)
        if count == 1:
            return data[0]
        return data

    if tag_type in (TagType.RATIONAL, TagType.SRATIONAL):
        read = reader.read_rational if tag_type == TagType.RATIONAL else reader.read_srational
        values = [read(offset + i * 8) for i in range(count)]
    else:
        fmt = _NUMERIC_FORMATS[tag_type]
        size = struct.calcsize(fmt)
        data = reader.read_bytes(size * count, offset)
        values = list(struct.unpack(f'{reader.endian}{count}{fmt}', data))

    if count == 1:
        return values[0]
    return values


def _decode_ascii(data: bytes) -> str:
    # Only decode up to the null terminator
    null_pos = data.find(b'\x00')
    if null_pos >= 0:
        data = data[:null_pos]
    if any(b > 127 for b in data):
        # Exif 3.0 allows UTF-8 in ASCII fields
        try:
            return data.decode('utf-8', errors='strict').strip()
        except UnicodeDecodeError:
            pass
    return data.decode('ascii', errors='replace').strip()
