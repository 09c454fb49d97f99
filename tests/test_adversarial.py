"""Adversarial inputs -- truncation, corruption and hostile structure.

Every malformed buffer must come back as None from the public call, never
as an exception.
"""

import random
import struct
import threading

import pytest

from geotag import extract_coordinates, extract_photo_info
from tests.conftest import (
    app1_exif, build_exif_tiff, build_gps_jpeg, build_jpeg, gps_position_entries,
)


class TestTruncation:
    @pytest.mark.parametrize('endian', ['<', '>'])
    def test_every_prefix(self, endian):
        """Every truncation point yields None or the full result."""
        data = build_gps_jpeg(endian=endian)
        full = extract_coordinates(data)
        for n in range(len(data)):
            result = extract_coordinates(data[:n])
            assert result is None or result == full

    def test_every_prefix_photo_info(self):
        """Capture-time reading survives truncation without raising."""
        taken = b'2025:08:02 17:45:12\x00'
        data = build_gps_jpeg(exif_entries=[(36867, 2, len(taken), taken)])
        for n in range(len(data)):
            extract_photo_info(data[:n])


class TestCorruption:
    def test_single_byte_flips(self):
        """Inverting any single byte must not raise."""
        data = build_gps_jpeg()
        for i in range(len(data)):
            corrupted = bytearray(data)
            corrupted[i] ^= 0xFF
            extract_coordinates(bytes(corrupted))

    def test_random_garbage_after_soi(self):
        """Random bytes after a valid SOI must not raise."""
        rng = random.Random(1234)
        for _ in range(200):
            size = rng.randint(0, 512)
            garbage = bytes(rng.getrandbits(8) for _ in range(size))
            extract_coordinates(b'\xff\xd8' + garbage)

    def test_random_garbage_tiff_block(self):
        """Random TIFF bodies behind both byte-order marks must not raise."""
        rng = random.Random(42)
        for _ in range(200):
            size = rng.randint(0, 256)
            body = bytes(rng.getrandbits(8) for _ in range(size))
            for mark in (b'II*\x00', b'MM\x00*'):
                extract_coordinates(build_jpeg(app1_exif(mark + body)))


class TestHostileStructure:
    def test_huge_entry_count(self):
        """IFD claiming 65535 entries in a 24-byte body."""
        tiff = b'II' + struct.pack('<HI', 42, 8) + struct.pack('<H', 0xFFFF) + b'\x00' * 24
        assert extract_coordinates(build_jpeg(app1_exif(tiff))) is None

    def test_root_offset_past_segment(self):
        """Root IFD offset points far outside the segment."""
        tiff = b'MM' + struct.pack('>HI', 42, 0xFFFFFFFF)
        assert extract_coordinates(build_jpeg(app1_exif(tiff))) is None

    def test_huge_rational_count(self):
        """Oversized rational count still reads only three values in bounds."""
        entries = gps_position_entries()
        tag, dtype, _, value = entries[1]
        entries[1] = (tag, dtype, 0xFFFFFFFF, value)
        tiff = build_exif_tiff([], entries)
        coords = extract_coordinates(build_jpeg(app1_exif(tiff)))
        # only the first three values are read
        assert coords is not None

    def test_huge_ascii_count(self):
        """Reference count forces a pointer that runs past the segment."""
        entries = gps_position_entries()
        entries[0] = (1, 2, 0xFFFFFFFF, 0x10)
        tiff = build_exif_tiff([], entries)
        assert extract_coordinates(build_jpeg(app1_exif(tiff))) is None

    def test_endless_marker_chain(self):
        """Thousands of RST markers end in buffer exhaustion."""
        data = b'\xff\xd8' + b'\xff\xd0' * 5000
        assert extract_coordinates(data) is None


class TestConcurrency:
    def test_threads_share_buffer(self):
        """Concurrent calls over one buffer agree with a single call."""
        data = build_gps_jpeg()
        expected = extract_coordinates(data)
        results = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                value = extract_coordinates(data)
                with lock:
                    results.append(value)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 400
        assert all(r == expected for r in results)
