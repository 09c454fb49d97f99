"""Batch location -- walk a directory of photos and extract their positions.

Supports both sequential and parallel (thread pool) processing. A photo
without GPS data is skipped, an unreadable one is recorded as an error;
neither stops the run.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from geotag.config import IMAGE_EXTENSIONS, LocatorConfig
from geotag.errors import GeotagError
from geotag.extract import (
    SCAN_WINDOW,
    coordinates_from_tiff,
    open_tiff,
    read_leading_bytes,
)
from geotag.models import BatchResult, LocateResult
from geotag.tiff.exif import read_capture_time

logger = logging.getLogger(__name__)


def locate_file(filepath: Path, scan_window: int = SCAN_WINDOW) -> LocateResult:
    """Extract coordinates and capture time from a single image file."""
    filepath = Path(filepath)
    t0 = time.monotonic()

    try:
        data = read_leading_bytes(filepath, scan_window)
    except OSError as e:
        return LocateResult(filepath=filepath, error=str(e),
                            time_ms=(time.monotonic() - t0) * 1000)

    result = LocateResult(filepath=filepath)
    try:
        view, _, ctx, root_entries = open_tiff(data, scan_window)
        result.coordinates = coordinates_from_tiff(view, ctx, root_entries)
        result.taken_at = read_capture_time(view, ctx, root_entries)
    except GeotagError as e:
        logger.debug("locate_file: %s: %s (%s)", filepath.name, e.reason, e)
        result.reason = e.reason

    result.time_ms = (time.monotonic() - t0) * 1000
    return result


def collect_image_files(path: Path,
                        extensions: Optional[Iterable[str]] = None) -> List[Path]:
    """Collect all image files from a path (file or directory), sorted."""
    path = Path(path)
    if path.is_file():
        return [path]

    extensions = set(extensions) if extensions is not None else IMAGE_EXTENSIONS

    files = []
    for root, _, filenames in os.walk(path):
        for fname in filenames:
            if Path(fname).suffix.lower() in extensions:
                files.append(Path(root) / fname)
    files.sort()
    return files


def locate_batch(
    path: Path,
    config: Optional[LocatorConfig] = None,
    progress_callback: Optional[Callable] = None,
    workers: Optional[int] = None,
) -> BatchResult:
    """Locate every image under ``path``.

    Args:
        path: File or directory containing images.
        config: Scan window and extensions. None uses the defaults.
        progress_callback: Called with (index, total, filepath, result) after each file.
        workers: Number of parallel workers; overrides ``config.workers``.

    Returns:
        BatchResult with per-file results in file order and summary counts.
    """
    config = config or LocatorConfig.default()
    workers = workers if workers is not None else config.workers
    t0 = time.monotonic()

    files = collect_image_files(Path(path), config.extensions)
    batch = BatchResult(total_files=len(files))

    if workers > 1 and len(files) > 1:
        results = _batch_parallel(files, config.scan_window, workers,
                                  progress_callback, batch)
    else:
        results = _batch_sequential(files, config.scan_window,
                                    progress_callback, batch)

    batch.results = results
    batch.total_time_seconds = time.monotonic() - t0
    return batch


def _batch_sequential(
    files: List[Path],
    scan_window: int,
    progress_callback: Optional[Callable],
    batch: BatchResult,
) -> List[LocateResult]:
    """Process files sequentially."""
    results = []
    total = len(files)

    for i, filepath in enumerate(files):
        result = locate_file(filepath, scan_window)
        results.append(result)
        _update_batch_stats(batch, result)

        if progress_callback:
            progress_callback(i + 1, total, filepath, result)

    return results


def _batch_parallel(
    files: List[Path],
    scan_window: int,
    workers: int,
    progress_callback: Optional[Callable],
    batch: BatchResult,
) -> List[LocateResult]:
    """Process files in a thread pool; results keep submission order."""
    total = len(files)
    results = [None] * total
    lock = threading.Lock()
    completed_count = 0

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(locate_file, filepath, scan_window): i
                   for i, filepath in enumerate(files)}

        for future in as_completed(futures):
            index = futures[future]
            result = future.result()
            results[index] = result

            with lock:
                _update_batch_stats(batch, result)
                completed_count += 1
                if progress_callback:
                    progress_callback(completed_count, total,
                                      result.filepath, result)

    return results


def _update_batch_stats(batch: BatchResult, result: LocateResult):
    """Update batch statistics from a single result."""
    if result.error:
        batch.files_errored += 1
    elif result.located:
        batch.files_located += 1
    else:
        batch.files_without_gps += 1
