"""Low-level TIFF reader package for the Exif block of a JPEG.

Re-exports all public names so ``from geotag.tiff import X`` works.
"""

# --- parser.py: types, constants, header/IFD reading ---
from geotag.tiff.parser import (  # noqa: F401
    TIFF_MAGIC,
    TIFF_TYPES,
    TAG_NAMES,
    EXIF_IFD_POINTER_TAG,
    GPS_IFD_POINTER_TAG,
    ByteOrder,
    ValueType,
    IFDEntry,
    TiffContext,
    read_bytes,
    read_u16,
    read_u32,
    parse_header,
    read_directory,
    find_tag,
)

# --- values.py: rationals, reference characters, pointers ---
from geotag.tiff.values import (  # noqa: F401
    decode_rational,
    read_rationals,
    value_offset,
    read_inline_char,
    read_reference,
    read_entry_rationals,
    read_pointer,
    read_ascii,
)

# --- gps.py: GPS sub-IFD traversal ---
from geotag.tiff.gps import (  # noqa: F401
    GPS_TAG_NAMES,
    GPS_LATITUDE_REF,
    GPS_LATITUDE,
    GPS_LONGITUDE_REF,
    GPS_LONGITUDE,
    gps_tag_name,
    read_gps_directory,
    read_dms,
    read_latitude,
    read_longitude,
)

# --- exif.py: capture time ---
from geotag.tiff.exif import (  # noqa: F401
    parse_exif_datetime,
    read_capture_time,
)
