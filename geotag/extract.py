"""Public extraction API -- JPEG bytes in, GPS coordinates out.

Pipeline: locate the Exif segment, parse the TIFF header, read IFD0,
follow the GPS IFD pointer, read the GPS IFD, decode the latitude and
longitude rationals, validate the references and convert to decimal
degrees. Every stage either succeeds or stops the whole call.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from geotag.convert import to_decimal_degrees
from geotag.errors import (
    GeotagError,
    NoMetadataSegment,
    NotThisFormat,
    TruncatedBuffer,
)
from geotag.jpeg import is_jpeg, locate_metadata_segment
from geotag.models import Coordinates, MetadataSegment, PhotoInfo
from geotag.tiff.exif import read_capture_time
from geotag.tiff.gps import read_gps_directory, read_latitude, read_longitude
from geotag.tiff.parser import IFDEntry, TiffContext, parse_header, read_directory

logger = logging.getLogger(__name__)

# Only the leading 128 KiB of a file is examined; Exif sits right after SOI
SCAN_WINDOW = 131072


def _as_view(data, window: int) -> memoryview:
    """Byte view over the leading window. None or non bytes-like fails fast."""
    if data is None:
        raise TypeError('data must be a bytes-like object, not None')
    view = memoryview(data)
    if not view.c_contiguous:
        view = memoryview(view.tobytes())
    if view.format != 'B' or view.ndim != 1:
        view = view.cast('B')
    return view[:window]


def open_tiff(data, window: int = SCAN_WINDOW) -> Tuple[memoryview, MetadataSegment,
                                                       TiffContext, List[IFDEntry]]:
    """Locate the Exif block and read its header and IFD0.

    Returns (view, segment, ctx, root_entries), where ``view`` is bounded
    to the end of the Exif segment. Raises a GeotagError subclass.
    """
    view = _as_view(data, window)
    if not is_jpeg(view):
        raise NotThisFormat('missing JPEG SOI marker')

    segment = locate_metadata_segment(view)
    if segment is None:
        raise NoMetadataSegment('no APP1/Exif segment before image data')
    if segment.end > len(view):
        raise TruncatedBuffer(segment.offset, segment.length, len(view))

    view = view[:segment.end]
    ctx = parse_header(view, segment.offset)
    root_entries = read_directory(view, ctx, ctx.absolute(ctx.root_ifd_offset))
    return view, segment, ctx, root_entries


def coordinates_from_tiff(view, ctx: TiffContext,
                          root_entries: List[IFDEntry]) -> Coordinates:
    """Follow IFD0 to the GPS IFD and convert its position."""
    gps_entries = read_gps_directory(view, ctx, root_entries)
    lat_dms = read_latitude(view, ctx, gps_entries)
    lng_dms = read_longitude(view, ctx, gps_entries)
    return Coordinates(lat=to_decimal_degrees(lat_dms),
                       lng=to_decimal_degrees(lng_dms))


def read_coordinates(data, window: int = SCAN_WINDOW) -> Coordinates:
    """Extract GPS coordinates, raising the GeotagError that stopped it."""
    view, _, ctx, root_entries = open_tiff(data, window)
    return coordinates_from_tiff(view, ctx, root_entries)


def extract_coordinates(data, window: int = SCAN_WINDOW) -> Optional[Coordinates]:
    """Extract GPS coordinates from the leading bytes of a JPEG file.

    Returns None if the data is not a JPEG, has no Exif GPS position, or is
    malformed in any way. Raises TypeError only for ``None`` or a
    non bytes-like argument.
    """
    try:
        return read_coordinates(data, window)
    except GeotagError as e:
        logger.debug("extract_coordinates: %s (%s)", e.reason, e)
        return None


def extract_photo_info(data, window: int = SCAN_WINDOW) -> Optional[PhotoInfo]:
    """Coordinates plus capture time. None when there is no position."""
    try:
        view, _, ctx, root_entries = open_tiff(data, window)
        coordinates = coordinates_from_tiff(view, ctx, root_entries)
    except GeotagError as e:
        logger.debug("extract_photo_info: %s (%s)", e.reason, e)
        return None
    return PhotoInfo(coordinates, read_capture_time(view, ctx, root_entries))


def read_leading_bytes(path, window: int = SCAN_WINDOW) -> bytes:
    """Read at most ``window`` bytes from the start of a file."""
    with open(str(path), 'rb') as f:
        return f.read(window)


def extract_coordinates_from_file(path, window: int = SCAN_WINDOW) -> Optional[Coordinates]:
    """Read the leading window of ``path`` and extract its coordinates.

    OSError from opening or reading the file propagates.
    """
    return extract_coordinates(read_leading_bytes(Path(path), window), window)
