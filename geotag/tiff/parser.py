"""TIFF header and IFD reader over an in-memory buffer -- stdlib only (struct).

Every read takes an absolute offset and an explicit length and is bounds
checked where it happens; nothing advances a hidden cursor. Offsets stored
inside the TIFF block are relative to ``TiffContext.base_offset``.
"""

import struct
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple

from geotag.errors import MalformedHeader, TruncatedBuffer, UnexpectedValueType

TIFF_MAGIC = 42
IFD_ENTRY_SIZE = 12
INLINE_VALUE_SIZE = 4


class ValueType(IntEnum):
    """TIFF field types supported by the reader."""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12
    IFD = 13

    @property
    def size(self) -> int:
        return TIFF_TYPES[self][0]

    @property
    def struct_format(self) -> str:
        return TIFF_TYPES[self][1]


# {type: (element_size_bytes, struct_format_char)}
TIFF_TYPES: Dict[ValueType, Tuple[int, str]] = {
    ValueType.BYTE: (1, 'B'),
    ValueType.ASCII: (1, 's'),
    ValueType.SHORT: (2, 'H'),
    ValueType.LONG: (4, 'I'),
    ValueType.RATIONAL: (8, 'II'),
    ValueType.SBYTE: (1, 'b'),
    ValueType.UNDEFINED: (1, 's'),
    ValueType.SSHORT: (2, 'h'),
    ValueType.SLONG: (4, 'i'),
    ValueType.SRATIONAL: (8, 'ii'),
    ValueType.FLOAT: (4, 'f'),
    ValueType.DOUBLE: (8, 'd'),
    ValueType.IFD: (4, 'I'),
}

# IFD0 tags the extractor knows by name
TAG_NAMES: Dict[int, str] = {
    271: 'Make', 272: 'Model', 274: 'Orientation',
    282: 'XResolution', 283: 'YResolution', 296: 'ResolutionUnit',
    305: 'Software', 306: 'DateTime',
    513: 'JPEGInterchangeFormat', 514: 'JPEGInterchangeFormatLength',
    531: 'YCbCrPositioning',
    34665: 'ExifIFDPointer', 34853: 'GPSInfoIFDPointer',
    36867: 'DateTimeOriginal', 36868: 'DateTimeDigitized',
}

EXIF_IFD_POINTER_TAG = 0x8769
GPS_IFD_POINTER_TAG = 0x8825


class ByteOrder(Enum):
    """TIFF byte order; the value is the matching struct prefix."""
    LITTLE = '<'
    BIG = '>'


BYTE_ORDER_MARKS: Dict[bytes, ByteOrder] = {
    b'II': ByteOrder.LITTLE,
    b'MM': ByteOrder.BIG,
}


class TiffContext:
    """Parsed TIFF header, fixed for the rest of one extraction."""
    __slots__ = ('base_offset', 'byte_order', 'root_ifd_offset')

    def __init__(self, base_offset: int, byte_order: ByteOrder,
                 root_ifd_offset: int):
        self.base_offset = base_offset
        self.byte_order = byte_order
        self.root_ifd_offset = root_ifd_offset

    @property
    def endian(self) -> str:
        return self.byte_order.value

    def absolute(self, relative_offset: int) -> int:
        """Translate a TIFF-relative offset into a buffer offset."""
        return self.base_offset + relative_offset

    def __repr__(self):
        return (f'TiffContext(base_offset={self.base_offset}, '
                f'byte_order={self.byte_order.name}, '
                f'root_ifd_offset={self.root_ifd_offset})')


class IFDEntry:
    """A single 12-byte IFD entry.

    ``value_field`` is the raw 4-byte value/offset field. It holds the value
    itself when the value fits in 4 bytes, otherwise a pointer relative to
    the TIFF base.
    """
    __slots__ = ('tag_id', 'dtype', 'count', 'value_field', 'entry_offset')

    def __init__(self, tag_id: int, dtype: int, count: int,
                 value_field: bytes, entry_offset: int):
        self.tag_id = tag_id
        self.dtype = dtype
        self.count = count
        self.value_field = value_field
        self.entry_offset = entry_offset

    @property
    def tag_name(self) -> str:
        return TAG_NAMES.get(self.tag_id, f'Tag_{self.tag_id}')

    @property
    def value_type(self) -> ValueType:
        try:
            return ValueType(self.dtype)
        except ValueError:
            raise UnexpectedValueType(
                f'{self.tag_name}: unknown field type {self.dtype}') from None

    @property
    def total_size(self) -> int:
        return self.value_type.size * self.count

    @property
    def is_inline(self) -> bool:
        return self.total_size <= INLINE_VALUE_SIZE

    def __repr__(self):
        return (f'IFDEntry(tag={self.tag_id}, type={self.dtype}, '
                f'count={self.count}, at={self.entry_offset})')


def read_bytes(data, offset: int, length: int) -> bytes:
    """Return ``length`` bytes at absolute ``offset`` or raise TruncatedBuffer."""
    if offset < 0 or length < 0 or offset + length > len(data):
        raise TruncatedBuffer(offset, length, len(data))
    return bytes(data[offset:offset + length])


def read_u16(data, offset: int, endian: str = '>') -> int:
    if offset < 0 or offset + 2 > len(data):
        raise TruncatedBuffer(offset, 2, len(data))
    return struct.unpack_from(endian + 'H', data, offset)[0]


def read_u32(data, offset: int, endian: str = '>') -> int:
    if offset < 0 or offset + 4 > len(data):
        raise TruncatedBuffer(offset, 4, len(data))
    return struct.unpack_from(endian + 'I', data, offset)[0]


def parse_header(data, at: int) -> TiffContext:
    """Read the 8-byte TIFF header starting at absolute offset ``at``.

    Raises MalformedHeader for an unknown byte-order mark or a magic number
    other than 42, and TruncatedBuffer if the header does not fit.
    """
    mark = read_bytes(data, at, 2)
    byte_order = BYTE_ORDER_MARKS.get(mark)
    if byte_order is None:
        raise MalformedHeader(f'unknown byte-order mark {mark!r}')

    endian = byte_order.value
    magic = read_u16(data, at + 2, endian)
    if magic != TIFF_MAGIC:
        raise MalformedHeader(f'bad TIFF magic {magic}')

    root_ifd_offset = read_u32(data, at + 4, endian)
    return TiffContext(at, byte_order, root_ifd_offset)


def read_directory(data, ctx: TiffContext, offset: int) -> List[IFDEntry]:
    """Read all entries of the IFD at absolute ``offset``.

    Raises TruncatedBuffer if the entry count or any entry runs past the
    buffer. The trailing next-IFD pointer is not read.
    """
    endian = ctx.endian
    num_entries = read_u16(data, offset, endian)

    entries = []
    for i in range(num_entries):
        entry_offset = offset + 2 + i * IFD_ENTRY_SIZE
        raw = read_bytes(data, entry_offset, IFD_ENTRY_SIZE)
        tag_id, dtype, count = struct.unpack(endian + 'HHI', raw[:8])
        entries.append(IFDEntry(tag_id, dtype, count, raw[8:12], entry_offset))
    return entries


def find_tag(entries: List[IFDEntry], tag_id: int) -> Optional[IFDEntry]:
    """Find a tag in a list of entries. Returns the first match or None."""
    for entry in entries:
        if entry.tag_id == tag_id:
            return entry
    return None
