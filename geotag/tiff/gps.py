"""GPS sub-IFD traversal and DMS assembly."""

from typing import Dict, List

from geotag.errors import MissingGpsTags
from geotag.models import DmsComponents
from geotag.tiff.parser import (
    GPS_IFD_POINTER_TAG,
    IFDEntry,
    TiffContext,
    find_tag,
    read_directory,
)
from geotag.tiff.values import read_entry_rationals, read_pointer, read_reference

GPS_LATITUDE_REF = 0x0001
GPS_LATITUDE = 0x0002
GPS_LONGITUDE_REF = 0x0003
GPS_LONGITUDE = 0x0004

# GPS tag names (tags 0-31)
GPS_TAG_NAMES: Dict[int, str] = {
    0: 'GPSVersionID', 1: 'GPSLatitudeRef', 2: 'GPSLatitude',
    3: 'GPSLongitudeRef', 4: 'GPSLongitude', 5: 'GPSAltitudeRef',
    6: 'GPSAltitude', 7: 'GPSTimeStamp', 8: 'GPSSatellites',
    9: 'GPSStatus', 10: 'GPSMeasureMode', 11: 'GPSDOP',
    12: 'GPSSpeedRef', 13: 'GPSSpeed', 14: 'GPSTrackRef',
    15: 'GPSTrack', 16: 'GPSImgDirectionRef', 17: 'GPSImgDirection',
    18: 'GPSMapDatum', 19: 'GPSDestLatitudeRef', 20: 'GPSDestLatitude',
    21: 'GPSDestLongitudeRef', 22: 'GPSDestLongitude', 23: 'GPSDestBearingRef',
    24: 'GPSDestBearing', 25: 'GPSDestDistanceRef', 26: 'GPSDestDistance',
    27: 'GPSProcessingMethod', 28: 'GPSAreaInformation', 29: 'GPSDateStamp',
    30: 'GPSDifferential', 31: 'GPSHPositioningError',
}


def gps_tag_name(tag_id: int) -> str:
    return GPS_TAG_NAMES.get(tag_id, f'GPSTag_{tag_id}')


def read_gps_directory(data, ctx: TiffContext,
                       root_entries: List[IFDEntry]) -> List[IFDEntry]:
    """Follow tag 34853 (GPSInfoIFDPointer) from IFD0 and read the GPS IFD.

    Raises MissingGpsTags when IFD0 has no GPS pointer.
    """
    pointer_entry = find_tag(root_entries, GPS_IFD_POINTER_TAG)
    if pointer_entry is None:
        raise MissingGpsTags('IFD0 has no GPS IFD pointer')
    gps_offset = read_pointer(ctx, pointer_entry)
    return read_directory(data, ctx, ctx.absolute(gps_offset))


def read_dms(data, ctx: TiffContext, gps_entries: List[IFDEntry],
             value_tag: int, ref_tag: int) -> DmsComponents:
    """Assemble degrees/minutes/seconds and the hemisphere reference.

    Raises MissingGpsTags if either tag is absent or the reference is empty.
    """
    value_entry = find_tag(gps_entries, value_tag)
    ref_entry = find_tag(gps_entries, ref_tag)
    if value_entry is None or ref_entry is None:
        raise MissingGpsTags(
            f'{gps_tag_name(value_tag)}/{gps_tag_name(ref_tag)} not present')

    ref = read_reference(data, ctx, ref_entry)
    if not ref:
        raise MissingGpsTags(f'{gps_tag_name(ref_tag)} is empty')

    degrees, minutes, seconds = read_entry_rationals(data, ctx, value_entry, 3)
    return DmsComponents(degrees, minutes, seconds, ref)


def read_latitude(data, ctx: TiffContext,
                  gps_entries: List[IFDEntry]) -> DmsComponents:
    return read_dms(data, ctx, gps_entries, GPS_LATITUDE, GPS_LATITUDE_REF)


def read_longitude(data, ctx: TiffContext,
                   gps_entries: List[IFDEntry]) -> DmsComponents:
    return read_dms(data, ctx, gps_entries, GPS_LONGITUDE, GPS_LONGITUDE_REF)
