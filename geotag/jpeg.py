"""JPEG marker walker -- locates the APP1/Exif segment.

Only the marker/length skeleton in front of the image data is walked; the
scan stops at SOS, since entropy-coded data follows it.
"""

from typing import Optional

from geotag.errors import TruncatedBuffer
from geotag.models import MetadataSegment
from geotag.tiff.parser import read_bytes, read_u16

SOI = 0xFFD8
EOI = 0xFFD9
SOS = 0xFFDA
APP1 = 0xFFE1
TEM = 0xFF01

EXIF_IDENTIFIER = b'Exif\x00\x00'

# Markers with no length field
STANDALONE_MARKERS = {TEM} | set(range(0xFFD0, 0xFFD8))  # TEM, RST0-RST7


def is_jpeg(data) -> bool:
    """Check for the SOI marker at offset 0."""
    return len(data) >= 2 and data[0] == 0xFF and data[1] == 0xD8


def locate_metadata_segment(data) -> Optional[MetadataSegment]:
    """Find the first APP1 segment carrying an Exif identifier.

    Returns the bounds of the TIFF block that follows ``Exif\\0\\0``, or None
    if the buffer is not a JPEG, has no Exif segment before SOS, or is
    malformed. Never raises for bad data.
    """
    if not is_jpeg(data):
        return None
    try:
        return _walk_markers(data)
    except TruncatedBuffer:
        return None


def _walk_markers(data) -> Optional[MetadataSegment]:
    offset = 2
    while offset + 4 <= len(data):
        marker = read_u16(data, offset)
        offset += 2

        if marker & 0xFF00 != 0xFF00:
            return None
        if marker in STANDALONE_MARKERS:
            continue
        if marker in (SOS, EOI):
            return None

        length = read_u16(data, offset)
        if length < 2:
            return None

        if marker == APP1 and length >= 2 + len(EXIF_IDENTIFIER):
            identifier = read_bytes(data, offset + 2, len(EXIF_IDENTIFIER))
            if identifier == EXIF_IDENTIFIER:
                return MetadataSegment(offset=offset + 8, length=length - 8)

        offset += length
    return None
