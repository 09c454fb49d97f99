"""Tag value readers -- rationals, reference characters, pointers, ASCII.

The 4-byte value field of an IFD entry holds the value itself when
``element_size * count <= 4`` and a TIFF-relative pointer otherwise. Every
reader here resolves that through ``value_offset`` so the rule lives in
one place.
"""

import struct
from typing import List

from geotag.errors import UnexpectedValueType
from geotag.tiff.parser import (
    IFDEntry,
    TiffContext,
    ValueType,
    read_bytes,
)

RATIONAL_SIZE = 8


def decode_rational(numerator: int, denominator: int) -> float:
    """Decode an unsigned rational. A zero denominator decodes to 0.0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def read_rationals(data, ctx: TiffContext, offset: int, count: int) -> List[float]:
    """Read ``count`` consecutive RATIONAL records at absolute ``offset``."""
    raw = read_bytes(data, offset, count * RATIONAL_SIZE)
    fmt = ctx.endian + ValueType.RATIONAL.struct_format * count
    fields = struct.unpack(fmt, raw)
    return [decode_rational(fields[i], fields[i + 1])
            for i in range(0, len(fields), 2)]


def value_offset(ctx: TiffContext, entry: IFDEntry) -> int:
    """Absolute buffer offset of an entry's value."""
    if entry.is_inline:
        return entry.entry_offset + 8
    pointer = struct.unpack(ctx.endian + 'I', entry.value_field)[0]
    return ctx.absolute(pointer)


def read_inline_char(entry: IFDEntry) -> str:
    """First character of a value stored inside the 4-byte value field."""
    return chr(entry.value_field[0])


def read_reference(data, ctx: TiffContext, entry: IFDEntry) -> str:
    """Read a one-character ASCII reference tag (GPSLatitudeRef and friends).

    Writers store ``"N\\0"`` with count 2, which fits inline; a longer count
    puts the string behind a pointer. Returns '' for an empty value.
    """
    _expect_type(entry, ValueType.ASCII)
    if entry.count == 0:
        return ''
    if entry.is_inline:
        return read_inline_char(entry).rstrip('\x00')
    first = read_bytes(data, value_offset(ctx, entry), 1)
    return chr(first[0]).rstrip('\x00')


def read_entry_rationals(data, ctx: TiffContext, entry: IFDEntry,
                         expected: int) -> List[float]:
    """Read the first ``expected`` RATIONAL values of an entry."""
    _expect_type(entry, ValueType.RATIONAL)
    if entry.count < expected:
        raise UnexpectedValueType(
            f'{entry.tag_name}: expected {expected} rationals, '
            f'got {entry.count}')
    return read_rationals(data, ctx, value_offset(ctx, entry), expected)


def read_pointer(ctx: TiffContext, entry: IFDEntry) -> int:
    """Decode a sub-IFD pointer (single LONG or IFD value, always inline)."""
    if entry.value_type not in (ValueType.LONG, ValueType.IFD) or entry.count != 1:
        raise UnexpectedValueType(
            f'{entry.tag_name}: pointer must be one LONG, got type '
            f'{entry.dtype} x{entry.count}')
    return struct.unpack(ctx.endian + 'I', entry.value_field)[0]


def read_ascii(data, ctx: TiffContext, entry: IFDEntry) -> str:
    """Read an ASCII value up to its first NUL."""
    _expect_type(entry, ValueType.ASCII)
    raw = read_bytes(data, value_offset(ctx, entry), entry.count)
    return raw.split(b'\x00', 1)[0].decode('ascii', errors='replace')


def _expect_type(entry: IFDEntry, expected: ValueType):
    if entry.value_type is not expected:
        raise UnexpectedValueType(
            f'{entry.tag_name}: expected {expected.name}, '
            f'got type {entry.dtype}')
