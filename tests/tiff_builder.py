"""
Helpers for building TIFF byte streams in memory.
"""

import struct

from tiffdir.tag_types import TagType

_KNOWN_TYPES = {int(t) for t in TagType}


_PACK_FORMATS = {
    TagType.BYTE: 'B',
    TagType.SBYTE: 'b',
    TagType.SHORT: 'H',
    TagType.SSHORT: 'h',
    TagType.LONG: 'I',
    TagType.SLONG: 'i',
    TagType.FLOAT: 'f',
    TagType.DOUBLE: 'd',
    TagType.IFD: 'I',
    TagType.LONG8: 'Q',
    TagType.SLONG8: 'q',
    TagType.IFD8: 'Q',
}


def encode_value(tag_type, value, endian='<'):
    """Return (component count, payload bytes) for a tag value."""
    tag_type = TagType(tag_type)
    if tag_type == TagType.ASCII:
        data = value.encode('utf-8') + b'\x00' if isinstance(value, str) else bytes(value)
        return len(data), data
    if tag_type == TagType.UNDEFINED or (tag_type == TagType.BYTE and isinstance(value, (bytes, bytearray))):
        return len(value), bytes(value)
    if tag_type in (TagType.RATIONAL, TagType.SRATIONAL):
        pairs = [value] if isinstance(value, tuple) else list(value)
        fmt = 'I' if tag_type == TagType.RATIONAL else 'i'
        data = b''.join(struct.pack(f'{endian}{fmt}{fmt}', n, d) for n, d in pairs)
        return len(pairs), data
    values = value if isinstance(value, (list, tuple)) else [value]
    fmt = _PACK_FORMATS[tag_type]
    return len(values), struct.pack(f'{endian}{len(values)}{fmt}', *values)


def inline_ifd(entries, endian='<', next_offset=0):
    """
    Build a standalone classic IFD whose values all fit inline.

    entries: list of (tag_id, tag_type, value)
    """
    out = bytearray(struct.pack(f'{endian}H', len(entries)))
    for tag_id, tag_type, value in entries:
        count, payload = encode_value(tag_type, value, endian)
        assert len(payload) <= 4, "inline_ifd only supports inline values"
        out += struct.pack(f'{endian}HHI', tag_id, int(tag_type), count)
        out += payload.ljust(4, b'\x00')
    out += struct.pack(f'{endian}I', next_offset)
    return bytes(out)


class TiffBuilder:
    """
    Assembles a classic TIFF file.

    Offsets returned by the builder are relative to the TIFF header, which
    is also what IFD pointers and value offsets hold.
    """

    def __init__(self, endian='<'):
        self.endian = endian
        marker = b'II' if endian == '<' else b'MM'
        self.data = bytearray(marker + struct.pack(f'{endian}HI', 42, 0))

    def pack(self, fmt, *values):
        return struct.pack(f'{self.endian}{fmt}', *values)

    def _align(self):
        if len(self.data) % 2:
            self.data += b'\x00'

    def append(self, payload):
        """Append raw bytes and return their offset."""
        self._align()
        offset = len(self.data)
        self.data += payload
        return offset

    def set_first_ifd(self, offset):
        self.data[4:8] = self.pack('I', offset)

    def add_ifd(self, entries, next_offset=0, first=False):
        """
        Append an IFD and the out-of-line values it needs.

        entries: list of (tag_id, tag_type, value); a tag_type given as a
        plain int outside TagType is written with a 4-byte raw value.

        Returns:
            Offset of the IFD
        """
        self._align()
        ifd_offset = len(self.data)
        table_size = 2 + 12 * len(entries) + 4
        data_offset = ifd_offset + table_size
        table = bytearray(self.pack('H', len(entries)))
        extra = bytearray()
        for tag_id, tag_type, value in entries:
            if int(tag_type) not in _KNOWN_TYPES:
                table += self.pack('HHI', tag_id, tag_type, 1) + bytes(value).ljust(4, b'\x00')[:4]
                continue
            count, payload = encode_value(tag_type, value, self.endian)
            table += self.pack('HHI', tag_id, int(tag_type), count)
            if len(payload) <= 4:
                table += payload.ljust(4, b'\x00')
            else:
                if len(extra) % 2:
                    extra += b'\x00'
                table += self.pack('I', data_offset + len(extra))
                extra += payload
        table += self.pack('I', next_offset)
        self.data += table + extra
        if first:
            self.set_first_ifd(ifd_offset)
        return ifd_offset

    def entry_count(self, ifd_offset):
        return struct.unpack(f'{self.endian}H', self.data[ifd_offset:ifd_offset + 2])[0]

    def set_next(self, ifd_offset, next_offset):
        """Rewrite the next-IFD pointer of an existing IFD."""
        pos = ifd_offset + 2 + 12 * self.entry_count(ifd_offset)
        self.data[pos:pos + 4] = self.pack('I', next_offset)

    def set_entry_value(self, ifd_offset, index, raw):
        """Rewrite the 4-byte value field of entry ``index``."""
        pos = ifd_offset + 2 + 12 * index + 8
        self.data[pos:pos + 4] = self.pack('I', raw)

    def to_bytes(self, prefix=b''):
        return bytes(prefix) + bytes(self.data)


