"""geotag -- GPS coordinates from the Exif block of JPEG photos."""

__version__ = "1.0.0"

from geotag.models import (
    BatchResult,
    Coordinates,
    DmsComponents,
    LocateResult,
    MetadataSegment,
    PhotoInfo,
)
from geotag.errors import (
    GeotagError,
    InvalidReference,
    MalformedHeader,
    MissingGpsTags,
    NoMetadataSegment,
    NotThisFormat,
    TruncatedBuffer,
    UnexpectedValueType,
)
from geotag.extract import (
    SCAN_WINDOW,
    extract_coordinates,
    extract_coordinates_from_file,
    extract_photo_info,
    read_coordinates,
)
from geotag.batch import collect_image_files, locate_batch, locate_file
from geotag.config import LocatorConfig

__all__ = [
    "__version__",
    "SCAN_WINDOW",
    "Coordinates",
    "DmsComponents",
    "MetadataSegment",
    "PhotoInfo",
    "LocateResult",
    "BatchResult",
    "LocatorConfig",
    "GeotagError",
    "NotThisFormat",
    "NoMetadataSegment",
    "MalformedHeader",
    "TruncatedBuffer",
    "MissingGpsTags",
    "InvalidReference",
    "UnexpectedValueType",
    "extract_coordinates",
    "extract_coordinates_from_file",
    "extract_photo_info",
    "read_coordinates",
    "collect_image_files",
    "locate_batch",
    "locate_file",
]
