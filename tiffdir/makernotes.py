# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Maker note dispatch

MakerNote data is manufacturer-specific. Most vendors store an ordinary
IFD inside the MakerNote tag, but they differ in the header that precedes
it, in byte order, and in what their offsets are relative to. Each vendor
entry in this module encodes one manufacturer's layout explicitly and
reports where the IFD starts, which byte order it uses and which offset
base its values are relative to. The IFD walker then reads it like any
other IFD.

Vendors are matched on the camera Make (trimmed, case-insensitive prefix).
A maker note from an unlisted vendor, or one whose header does not match
any known layout, stays an opaque UNDEFINED tag.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from tiffdir.exif_tags import DirectoryType
from tiffdir.typed_reader import BIG_ENDIAN, LITTLE_ENDIAN, TypedReader

logger = logging.getLogger(__name__)

# Longest vendor header inspected by the locators
HEADER_PEEK_LENGTH = 16


@dataclass(frozen=True)
class MakernoteLocation:
    """Where and how to read a vendor maker-note IFD."""
    directory_type: DirectoryType
    ifd_offset: int  # absolute offset of the IFD entry count
    endian: str
    offset_base: int  # absolute offset that the IFD's value offsets are relative to


# (reader, makernote_offset, byte_order_hint, offset_base) -> location or None
Locator = Callable[[TypedReader, int, str, int], Optional[MakernoteLocation]]


@dataclass(frozen=True)
class VendorEntry:
    """One row of the vendor table."""
    make_prefix: str
    locator: Locator

    def matches(self, make: str) -> bool:
        return make.strip().upper().startswith(self.make_prefix.upper())


def _peek(reader: TypedReader, offset: int, length: int = HEADER_PEEK_LENGTH) -> bytes:
    """Read up to ``length`` bytes at ``offset``, fewer near the end of the window."""
    available = len(reader.window) - offset
    if available <= 0:
        return b''
    return reader.read_bytes(min(length, available), offset)


def _endian_from_marker(marker: bytes) -> Optional[str]:
    if marker == b'II':
        return LITTLE_ENDIAN
    if marker == b'MM':
        return BIG_ENDIAN
    return None


def locate_sony(reader, offset, endian, base):
    header = _peek(reader, offset)
    if header.startswith(b'SONY CAM') or header.startswith(b'SONY DSC'):
        return MakernoteLocation(DirectoryType.SONY_MAKERNOTE, offset + 12, endian, base)
    if header.startswith(b'SEMC MS\x00\x00\x00\x00\x00'):
        # Sony Ericsson phones write big-endian notes regardless of the host IFD
        return MakernoteLocation(DirectoryType.SONY_ERICSSON_MAKERNOTE, offset + 20, BIG_ENDIAN, base)
    if header[:2] == b'\x01\x00':
        # encrypted/binary layout used by some models, not an IFD
        return None
    return MakernoteLocation(DirectoryType.SONY_MAKERNOTE, offset, endian, base)


def locate_nikon(reader, offset, endian, base):
    header = _peek(reader, offset)
    if not header.startswith(b'Nikon'):
        # Unlabelled type 2 note, e.g. E990, D1
        return MakernoteLocation(DirectoryType.NIKON_TYPE2_MAKERNOTE, offset, endian, base)
    if len(header) < 7:
        return None
    version = header[6]
    if version == 1:
        return MakernoteLocation(DirectoryType.NIKON_TYPE1_MAKERNOTE, offset + 8, endian, base)
    if version == 2:
        # "Nikon\0\x02\x10\0\0" then an embedded TIFF header; offsets are relative to it
        tiff_start = offset + 10
        note_endian = _endian_from_marker(reader.read_bytes(2, tiff_start))
        if note_endian is None:
            return None
        first_ifd = reader.with_endian(note_endian).read_uint32(tiff_start + 4)
        return MakernoteLocation(DirectoryType.NIKON_TYPE2_MAKERNOTE, tiff_start + first_ifd, note_endian, tiff_start)
    logger.debug("Unsupported Nikon maker note version %d", version)
    return None


def locate_canon(reader, offset, endian, base):
    return MakernoteLocation(DirectoryType.CANON_MAKERNOTE, offset, endian, base)


def locate_olympus(reader, offset, endian, base):
    header = _peek(reader, offset)
    if header.startswith(b'OLYMPUS\x00'):
        # Newer layout carries its own byte order and relative offsets
        note_endian = _endian_from_marker(header[8:10])
        if note_endian is None:
            return None
        return MakernoteLocation(DirectoryType.OLYMPUS_MAKERNOTE, offset + 12, note_endian, offset)
    if header.startswith(b'OM SYSTEM\x00'):
        note_endian = _endian_from_marker(header[12:14])
        if note_endian is None:
            return None
        return MakernoteLocation(DirectoryType.OLYMPUS_MAKERNOTE, offset + 16, note_endian, offset)
    if header.startswith(b'OLYMP\x00') or header.startswith(b'EPSON') or header.startswith(b'AGFA '):
        return MakernoteLocation(DirectoryType.OLYMPUS_MAKERNOTE, offset + 8, endian, base)
    return None


def locate_minolta(reader, offset, endian, base):
    # Minolta and Konica Minolta use Olympus tags without a header
    return MakernoteLocation(DirectoryType.OLYMPUS_MAKERNOTE, offset, endian, base)


def locate_fujifilm(reader, offset, endian, base):
    header = _peek(reader, offset)
    if not header.startswith(b'FUJIFILM'):
        return None
    # Always little-endian, with offsets from the start of the note
    first_ifd = reader.with_endian(LITTLE_ENDIAN).read_uint32(offset + 8)
    return MakernoteLocation(DirectoryType.FUJIFILM_MAKERNOTE, offset + first_ifd, LITTLE_ENDIAN, offset)


def locate_panasonic(reader, offset, endian, base):
    header = _peek(reader, offset)
    if not header.startswith(b'Panasonic\x00\x00\x00'):
        return None
    return MakernoteLocation(DirectoryType.PANASONIC_MAKERNOTE, offset + 12, endian, base)


def locate_pentax(reader, offset, endian, base):
    header = _peek(reader, offset)
    if header.startswith(b'AOC\x00'):
        return MakernoteLocation(DirectoryType.PENTAX_MAKERNOTE, offset + 6, endian, offset)
    return MakernoteLocation(DirectoryType.PENTAX_MAKERNOTE, offset, endian, offset)


def locate_casio(reader, offset, endian, base):
    header = _peek(reader, offset)
    if header.startswith(b'QVC\x00\x00\x00'):
        return MakernoteLocation(DirectoryType.CASIO_MAKERNOTE, offset + 6, endian, base)
    return MakernoteLocation(DirectoryType.CASIO_MAKERNOTE, offset, endian, base)


def locate_kyocera(reader, offset, endian, base):
    header = _peek(reader, offset)
    if not header.startswith(b'KYOCERA'):
        return None
    return MakernoteLocation(DirectoryType.KYOCERA_MAKERNOTE, offset + 22, endian, base)


def locate_sigma(reader, offset, endian, base):
    header = _peek(reader, offset)
    if header.startswith(b'SIGMA\x00\x00\x00') or header.startswith(b'FOVEON\x00\x00'):
        return MakernoteLocation(DirectoryType.SIGMA_MAKERNOTE, offset + 10, endian, base)
    return None


def locate_leica(reader, offset, endian, base):
    header = _peek(reader, offset)
    if not header.startswith(b'LEICA\x00'):
        return None
    return MakernoteLocation(DirectoryType.LEICA_MAKERNOTE, offset + 8, endian, offset)


def locate_ricoh(reader, offset, endian, base):
    header = _peek(reader, offset)
    if header[:2] in (b'Rv', b'Re'):
        # text maker note ("Rv0103;Rg1C;..."), not an IFD
        return None
    if header[:5].upper() != b'RICOH':
        return None
    return MakernoteLocation(DirectoryType.RICOH_MAKERNOTE, offset + 8, BIG_ENDIAN, offset)


def locate_apple(reader, offset, endian, base):
    header = _peek(reader, offset)
    if not header.startswith(b'Apple iOS\x00'):
        return None
    return MakernoteLocation(DirectoryType.APPLE_MAKERNOTE, offset + 14, BIG_ENDIAN, offset)


def locate_samsung(reader, offset, endian, base):
    return MakernoteLocation(DirectoryType.SAMSUNG_MAKERNOTE, offset, endian, base)


VENDOR_TABLE = (
    VendorEntry('SONY', locate_sony),
    VendorEntry('NIKON', locate_nikon),
    VendorEntry('CANON', locate_canon),
    VendorEntry('OLYMPUS', locate_olympus),
    VendorEntry('OM DIGITAL', locate_olympus),
    VendorEntry('EPSON', locate_olympus),
    VendorEntry('AGFA', locate_olympus),
    VendorEntry('MINOLTA', locate_minolta),
    VendorEntry('KONICA', locate_minolta),
    VendorEntry('FUJIFILM', locate_fujifilm),
    VendorEntry('PANASONIC', locate_panasonic),
    VendorEntry('PENTAX', locate_pentax),
    VendorEntry('ASAHI', locate_pentax),
    VendorEntry('CASIO', locate_casio),
    VendorEntry('KYOCERA', locate_kyocera),
    VendorEntry('SIGMA', locate_sigma),
    VendorEntry('FOVEON', locate_sigma),
    VendorEntry('LEICA', locate_leica),
    VendorEntry('RICOH', locate_ricoh),
    VendorEntry('APPLE', locate_apple),
    VendorEntry('SAMSUNG', locate_samsung),
)


class MakernoteDispatcher:
    """
    Selects the vendor sub-reader for a maker note.

    The dispatcher starts from VENDOR_TABLE; additional vendors can be
    registered per instance without touching the IFD walker.
    """

    def __init__(self, vendors: Optional[Iterable[VendorEntry]] = None):
        self._vendors: List[VendorEntry] = list(VENDOR_TABLE if vendors is None else vendors)

    @property
    def vendors(self) -> List[VendorEntry]:
        return list(self._vendors)

    def register_vendor(self, make_prefix: str, locator: Locator) -> None:
        """
        Add a vendor to the table, ahead of the built-in entries.

        Args:
            make_prefix: Make prefix to match (case-insensitive)
            locator: Function returning the MakernoteLocation for a note
        """
        self._vendors.insert(0, VendorEntry(make_prefix, locator))

    def find_vendor(self, make: Optional[str]) -> Optional[VendorEntry]:
        if not make:
            return None
        for vendor in self._vendors:
            if vendor.matches(make):
                return vendor
        return None

    def locate(
        self,
        make: Optional[str],
        reader: TypedReader,
        makernote_offset: int,
        byte_order_hint: str,
        offset_base: int,
    ) -> Optional[MakernoteLocation]:
        """
        Find the maker-note IFD for a camera make.

        Args:
            make: Value of the Make tag
            reader: Reader over the shared byte window
            makernote_offset: Absolute offset of the MakerNote tag's data
            byte_order_hint: Byte order of the IFD holding the MakerNote tag
            offset_base: Offset base of the IFD holding the MakerNote tag

        Returns:
            MakernoteLocation, or None if the note should stay opaque

        Raises:
            BoundsError: If a vendor header points outside the window
        """
        vendor = self.find_vendor(make)
        if vendor is None:
            logger.debug("No maker note reader for make %r", make)
            return None
        location = vendor.locator(reader, makernote_offset, byte_order_hint, offset_base)
        if location is None:
            logger.debug("Maker note header for make %r not recognised", make)
        else:
            logger.debug(
                "Maker note for make %r read as %s at offset %d",
                make, location.directory_type.value, location.ifd_offset,
            )
        return location
