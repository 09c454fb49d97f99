"""Degrees/minutes/seconds to signed decimal degrees."""

from geotag.errors import InvalidReference
from geotag.models import DmsComponents

VALID_REFERENCES = frozenset('NSEW')
NEGATIVE_REFERENCES = frozenset('SW')


def to_decimal_degrees(dms: DmsComponents) -> float:
    """Convert DMS to decimal degrees, negated for S and W.

    Raises InvalidReference for any reference other than N, S, E or W.
    """
    if dms.ref not in VALID_REFERENCES:
        raise InvalidReference(f'invalid hemisphere reference {dms.ref!r}')
    decimal = dms.degrees + dms.minutes / 60 + dms.seconds / 3600
    if dms.ref in NEGATIVE_REFERENCES:
        return -decimal
    return decimal
