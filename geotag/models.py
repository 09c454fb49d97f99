"""Data models for geolocation extraction and batch results."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class MetadataSegment:
    """Location of the TIFF block inside an APP1/Exif segment."""
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class DmsComponents:
    """Degrees/minutes/seconds plus a hemisphere reference (N, S, E or W)."""
    degrees: float
    minutes: float
    seconds: float
    ref: str


@dataclass(frozen=True)
class Coordinates:
    """Signed decimal-degree position."""
    lat: float
    lng: float

    def as_dict(self) -> dict:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass(frozen=True)
class PhotoInfo:
    """Position of a photo and, when recorded, when it was taken."""
    coordinates: Coordinates
    taken_at: Optional[datetime] = None


@dataclass
class LocateResult:
    """Result of locating a single image file."""
    filepath: Path
    coordinates: Optional[Coordinates] = None
    taken_at: Optional[datetime] = None
    reason: Optional[str] = None  # GeotagError.reason when no coordinates
    error: Optional[str] = None   # I/O failure
    time_ms: float = 0.0

    @property
    def located(self) -> bool:
        return self.coordinates is not None


@dataclass
class BatchResult:
    """Result of a batch locate run."""
    results: List[LocateResult] = field(default_factory=list)
    total_files: int = 0
    files_located: int = 0
    files_without_gps: int = 0
    files_errored: int = 0
    total_time_seconds: float = 0.0
