"""Locator configuration -- scan window, file extensions, worker count."""

import json
from dataclasses import dataclass, field
from typing import FrozenSet

from geotag.extract import SCAN_WINDOW

# File extensions considered for batch processing
IMAGE_EXTENSIONS = frozenset({'.jpg', '.jpeg', '.jpe', '.jfif'})


@dataclass
class LocatorConfig:
    """Settings for batch location runs.

    ``scan_window`` bounds how much of each file is read; Exif data that
    starts past it is not found.
    """

    scan_window: int = SCAN_WINDOW
    extensions: FrozenSet[str] = field(default_factory=lambda: IMAGE_EXTENSIONS)
    workers: int = 1

    @classmethod
    def default(cls) -> 'LocatorConfig':
        """Return the built-in defaults."""
        return cls()

    @classmethod
    def from_json(cls, path) -> 'LocatorConfig':
        """Load settings from a JSON file.

        JSON format::

            {
              "scan_window": 131072,
              "extensions": [".jpg", ".jpeg"],
              "workers": 4
            }

        All keys are optional; omitted keys keep the built-in defaults.
        """
        with open(str(path), 'r') as f:
            data = json.load(f)

        config = cls.default()

        if 'scan_window' in data:
            config.scan_window = int(data['scan_window'])
            if config.scan_window < 2:
                raise ValueError('scan_window must be at least 2 bytes')
        if 'extensions' in data:
            extensions = data['extensions']
            if (not isinstance(extensions, list)
                    or not all(isinstance(ext, str) for ext in extensions)):
                raise ValueError('extensions must be a list of strings')
            config.extensions = frozenset(
                ext.lower() if ext.startswith('.') else '.' + ext.lower()
                for ext in extensions)
        if 'workers' in data:
            config.workers = max(1, int(data['workers']))

        return config
