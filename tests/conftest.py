"""Shared test fixtures -- synthetic Exif TIFF blocks and JPEG containers."""

import struct

import pytest

GPS_POINTER = 34853
EXIF_POINTER = 34665

# Scenario A: 57 deg 36' 49.89" N, Scenario B: 11 deg 52' 47.15" E
LAT_A = [(57, 1), (36, 1), (4989, 100)]
LNG_B = [(11, 1), (52, 1), (4715, 100)]
LAT_A_DECIMAL = 57 + 36 / 60 + 49.89 / 3600
LNG_B_DECIMAL = 11 + 52 / 60 + 47.15 / 3600


def pack_rationals(pairs, endian='<'):
    """Pack (numerator, denominator) pairs as RATIONAL records."""
    return b''.join(struct.pack(endian + 'II', n, d) for n, d in pairs)


def gps_position_entries(lat=LAT_A, lat_ref=b'N', lng=LNG_B, lng_ref=b'E',
                         endian='<'):
    """GPS IFD entries for a latitude/longitude pair.

    Reference tags are ASCII with count 2 ("N\\0"), stored inline.
    """
    return [
        (1, 2, 2, lat_ref + b'\x00'),
        (2, 5, len(lat), pack_rationals(lat, endian)),
        (3, 2, 2, lng_ref + b'\x00'),
        (4, 5, len(lng), pack_rationals(lng, endian)),
    ]


def _ool_size(entries):
    return sum(len(v) for _, _, _, v in entries
               if isinstance(v, bytes) and len(v) > 4)


def ifd_size(entries):
    """Bytes taken by an IFD plus its out-of-line data."""
    return 2 + 12 * len(entries) + 4 + _ool_size(entries)


def layout_ifd(entries, start, endian='<', next_ifd=0):
    """Lay out one IFD at TIFF-relative offset ``start``.

    Entry values:
        int -- packed as a 4-byte LONG in the value field.
        bytes of 4 or fewer -- stored inline, zero padded.
        longer bytes -- stored after the IFD, value field holds the pointer.
    """
    n = len(entries)
    data_start = start + 2 + 12 * n + 4
    ifd_bytes = struct.pack(endian + 'H', n)
    data_bytes = b''

    for tag_id, type_id, count, value in entries:
        ifd_bytes += struct.pack(endian + 'HHI', tag_id, type_id, count)
        if isinstance(value, bytes) and len(value) > 4:
            ifd_bytes += struct.pack(endian + 'I', data_start + len(data_bytes))
            data_bytes += value
        elif isinstance(value, bytes):
            ifd_bytes += value.ljust(4, b'\x00')
        else:
            ifd_bytes += struct.pack(endian + 'I', value)

    ifd_bytes += struct.pack(endian + 'I', next_ifd)
    return ifd_bytes + data_bytes


def build_exif_tiff(root_entries=(), gps_entries=None, exif_entries=None,
                    endian='<'):
    """Build a TIFF block: header, IFD0, then optional GPS and Exif IFDs.

    Pointer tags for the sub-IFDs are appended to IFD0 automatically.

    Returns:
        bytes: TIFF block as embedded after ``Exif\\0\\0``.
    """
    bo = b'II' if endian == '<' else b'MM'
    root = list(root_entries)
    n_pointers = (gps_entries is not None) + (exif_entries is not None)
    ifd0_size = 2 + 12 * (len(root) + n_pointers) + 4 + _ool_size(root)

    offset = 8 + ifd0_size
    sub_ifds = []
    if gps_entries is not None:
        root.append((GPS_POINTER, 4, 1, offset))
        sub_ifds.append((gps_entries, offset))
        offset += ifd_size(gps_entries)
    if exif_entries is not None:
        root.append((EXIF_POINTER, 4, 1, offset))
        sub_ifds.append((exif_entries, offset))
        offset += ifd_size(exif_entries)

    result = bo + struct.pack(endian + 'HI', 42, 8)
    result += layout_ifd(root, 8, endian)
    for entries, start in sub_ifds:
        result += layout_ifd(entries, start, endian)
    return result


def segment(marker, payload):
    """A length-carrying JPEG segment."""
    return struct.pack('>HH', marker, len(payload) + 2) + payload


def app1_exif(tiff_bytes):
    return segment(0xFFE1, b'Exif\x00\x00' + tiff_bytes)


JFIF_APP0 = segment(0xFFE0, b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00')
SCAN_DATA = (segment(0xFFDA, b'\x01\x01\x00\x00\x3f\x00')
             + b'\x92\x8a\x28\xa0\x0f' + b'\xff\xd9')


def build_jpeg(*segments):
    """SOI, the given segments, then a short scan and EOI."""
    return b'\xff\xd8' + b''.join(segments) + SCAN_DATA


def build_gps_jpeg(lat=LAT_A, lat_ref=b'N', lng=LNG_B, lng_ref=b'E',
                   endian='<', root_entries=(), exif_entries=None):
    """A JPEG whose Exif block carries a full GPS position."""
    tiff = build_exif_tiff(
        root_entries,
        gps_position_entries(lat, lat_ref, lng, lng_ref, endian),
        exif_entries, endian)
    return build_jpeg(JFIF_APP0, app1_exif(tiff))


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def gps_jpeg_bytes():
    return build_gps_jpeg()


@pytest.fixture
def tmp_gps_jpeg(tmp_path):
    """A photo with a GPS position."""
    filepath = tmp_path / 'berth_a12.jpg'
    filepath.write_bytes(build_gps_jpeg())
    return filepath


@pytest.fixture
def tmp_plain_jpeg(tmp_path):
    """A photo with Exif data but no GPS IFD."""
    filepath = tmp_path / 'no_gps.jpg'
    model = b'Pixel 8\x00'
    tiff = build_exif_tiff([(272, 2, len(model), model)])
    filepath.write_bytes(build_jpeg(JFIF_APP0, app1_exif(tiff)))
    return filepath


@pytest.fixture
def photo_dir(tmp_path):
    """A directory with two located photos, one without GPS, and noise."""
    root = tmp_path / 'photos'
    sub = root / 'dock_e'
    sub.mkdir(parents=True)
    (root / 'boat1.jpg').write_bytes(build_gps_jpeg())
    (sub / 'boat2.JPEG').write_bytes(
        build_gps_jpeg(lat_ref=b'S', lng_ref=b'W', endian='>'))
    (root / 'boat3.jpg').write_bytes(build_jpeg(JFIF_APP0))
    (root / 'notes.txt').write_text('not a photo')
    return root
