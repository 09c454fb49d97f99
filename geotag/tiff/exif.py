"""Capture time from the Exif sub-IFD, falling back to IFD0 DateTime."""

import logging
from datetime import datetime
from typing import List, Optional

from geotag.errors import GeotagError
from geotag.tiff.parser import (
    EXIF_IFD_POINTER_TAG,
    IFDEntry,
    TiffContext,
    find_tag,
    read_directory,
)
from geotag.tiff.values import read_ascii, read_pointer

logger = logging.getLogger(__name__)

DATETIME_TAG = 306
DATETIME_ORIGINAL_TAG = 36867
EXIF_DATETIME_FORMAT = '%Y:%m:%d %H:%M:%S'


def parse_exif_datetime(value: str) -> Optional[datetime]:
    """Parse ``YYYY:MM:DD HH:MM:SS``. Blank or malformed values give None."""
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.strptime(value[:19], EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def read_capture_time(data, ctx: TiffContext,
                      root_entries: List[IFDEntry]) -> Optional[datetime]:
    """DateTimeOriginal from the Exif IFD, else DateTime from IFD0."""
    pointer_entry = find_tag(root_entries, EXIF_IFD_POINTER_TAG)
    if pointer_entry is not None:
        try:
            exif_offset = read_pointer(ctx, pointer_entry)
            exif_entries = read_directory(data, ctx, ctx.absolute(exif_offset))
            taken_at = _read_datetime_tag(data, ctx, exif_entries,
                                          DATETIME_ORIGINAL_TAG)
            if taken_at is not None:
                return taken_at
        except GeotagError as e:
            logger.debug("read_capture_time: unreadable Exif IFD: %s", e)

    try:
        return _read_datetime_tag(data, ctx, root_entries, DATETIME_TAG)
    except GeotagError as e:
        logger.debug("read_capture_time: unreadable DateTime: %s", e)
        return None


def _read_datetime_tag(data, ctx: TiffContext, entries: List[IFDEntry],
                       tag_id: int) -> Optional[datetime]:
    entry = find_tag(entries, tag_id)
    if entry is None:
        return None
    return parse_exif_datetime(read_ascii(data, ctx, entry))
