"""Failure taxonomy for geolocation extraction.

These exceptions are diagnostics. The public ``extract_coordinates`` call
collapses every one of them into ``None``; ``read_coordinates`` lets them
propagate so a caller can report why a photo has no position.
"""


class GeotagError(Exception):
    """Base class for every reason an extraction can give up."""

    reason = 'error'


class NotThisFormat(GeotagError):
    """The buffer does not start with a JPEG SOI marker."""

    reason = 'not_jpeg'


class NoMetadataSegment(GeotagError):
    """No APP1/Exif segment before the start of image data."""

    reason = 'no_exif'


class MalformedHeader(GeotagError):
    """The TIFF header has an unknown byte-order mark or magic number."""

    reason = 'bad_header'


class TruncatedBuffer(GeotagError):
    """A read ran past the end of the buffer."""

    reason = 'truncated'

    def __init__(self, offset: int, length: int, available: int):
        super().__init__(
            f'read of {length} byte(s) at offset {offset} exceeds '
            f'buffer of {available} byte(s)')
        self.offset = offset
        self.length = length
        self.available = available


class MissingGpsTags(GeotagError):
    """No GPS IFD pointer, or a required GPS tag is absent."""

    reason = 'no_gps'


class InvalidReference(GeotagError):
    """A hemisphere reference outside N/S/E/W."""

    reason = 'bad_reference'


class UnexpectedValueType(GeotagError):
    """A tag's field type or count is not the one its reader expects."""

    reason = 'bad_value_type'
