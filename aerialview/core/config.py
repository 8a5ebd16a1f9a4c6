# -*- coding: utf-8 -*-
"""
Configuration Module - Tunable constants for the aerial view pipeline.

Provides an AerialConfig dataclass holding the scene centre, the valid
bounding box, the camera scale constants, enhancement defaults and
worker settings. Loads from ~/.aerialview/config.json if it exists,
otherwise uses the built-in defaults.

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".aerialview"
_CONFIG_FILE = _CONFIG_DIR / "config.json"

#: Lowest altitude used by the camera model. Lower values are clamped.
ALT_MIN = 10.0


@dataclass
class AerialConfig:
    """Global aerialview configuration with defaults.

    Attributes
    ----------
    center_lat : float
        Latitude of the raster centre in degrees.
    center_lon : float
        Longitude of the raster centre in degrees.
    lat_bounds : Tuple[float, float]
        Inclusive (min, max) latitude accepted for the camera.
    lon_bounds : Tuple[float, float]
        Inclusive (min, max) longitude accepted for the camera.
    local_scale : float
        Scene units per degree of latitude/longitude offset.
    scale_constant : float
        Numerator of the altitude scale law ``(C / altitude) ** E``.
    scale_exponent : float
        Exponent of the altitude scale law.
    alt_min : float
        Altitude floor applied before the scale law.
    blackout_altitude : float
        Altitudes above this hide the surface entirely.
    blackout_color : Tuple[int, int, int]
        Uniform RGB fill used when the surface is hidden.
    backdrop_color : Tuple[int, int, int]
        RGB fill for rays that miss the surface.
    defect_threshold : int
        Per-channel value above which a pixel counts as saturated.
    tone_gamma : float
        Gamma of the single-band tone stretch.
    earth_radius : float
        Earth radius in scene units for the curvature displacement.
    surface_size : float
        Scene-unit length of the longer raster side at scale 1.
    camera_distance : float
        Distance of the camera from the surface plane in scene units.
    preview_size : int
        Edge of the square box the preview is fitted into, in pixels.
    fetch_timeout : float
        HTTP timeout for raster downloads in seconds.
    max_workers : int
        Maximum worker threads for background raster loads.
    """

    center_lat: float = 12.9611
    center_lon: float = 77.6532
    lat_bounds: Tuple[float, float] = (12.90, 13.02)
    lon_bounds: Tuple[float, float] = (77.59, 77.72)
    local_scale: float = 1000.0
    scale_constant: float = 1050.0
    scale_exponent: float = 0.82
    alt_min: float = ALT_MIN
    blackout_altitude: float = 2850.0
    blackout_color: Tuple[int, int, int] = (0, 0, 0)
    backdrop_color: Tuple[int, int, int] = (238, 238, 238)
    defect_threshold: int = 230
    tone_gamma: float = 0.9
    earth_radius: float = 6371.0
    surface_size: float = 10.0
    camera_distance: float = 10.0
    preview_size: int = 400
    fetch_timeout: float = 10.0
    max_workers: int = 2

    def __post_init__(self) -> None:
        # JSON round-trips tuples as lists
        self.lat_bounds = tuple(self.lat_bounds)
        self.lon_bounds = tuple(self.lon_bounds)
        self.blackout_color = tuple(self.blackout_color)
        self.backdrop_color = tuple(self.backdrop_color)

    def in_bounds(self, latitude: float, longitude: float) -> bool:
        """Whether a camera position lies inside the valid region."""
        return (self.lat_bounds[0] <= latitude <= self.lat_bounds[1]
                and self.lon_bounds[0] <= longitude <= self.lon_bounds[1])

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to JSON file."""
        path = path or _CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(self), f, indent=2)


def load_config(path: Optional[Path] = None) -> AerialConfig:
    """Load configuration from file, or return defaults.

    Parameters
    ----------
    path : Optional[Path]
        Config file path. Defaults to ~/.aerialview/config.json.

    Returns
    -------
    AerialConfig
        Loaded or default configuration.
    """
    path = path or _CONFIG_FILE
    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return AerialConfig(**{
                k: v for k, v in data.items()
                if k in AerialConfig.__dataclass_fields__
            })
        except Exception as e:
            logger.warning("Failed to load config from %s: %s", path, e)

    return AerialConfig()
