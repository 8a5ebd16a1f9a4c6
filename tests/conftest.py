# -*- coding: utf-8 -*-
"""
Conftest for aerialview tests.

Provides in-memory GeoTIFF bytes and small rasters shared by the
raster, compositor and CLI tests.

Author
------
Steven Siebert

Created
-------
2026-10-19
"""

import numpy as np
import pytest
from rasterio.io import MemoryFile
from rasterio.transform import from_bounds

from aerialview.core.raster import RasterImage


def make_geotiff(bands: np.ndarray, georeferenced: bool = True) -> bytes:
    """Encode a (C, H, W) array as GeoTIFF bytes."""
    count, height, width = bands.shape
    profile = dict(
        driver="GTiff",
        width=width,
        height=height,
        count=count,
        dtype=bands.dtype,
    )
    if georeferenced:
        profile.update(
            crs="EPSG:4326",
            transform=from_bounds(77.60, 12.90, 77.70, 13.00, width, height),
        )
    with MemoryFile() as memfile:
        with memfile.open(**profile) as ds:
            ds.write(bands)
        return memfile.read()


@pytest.fixture
def rgb_tiff_bytes():
    """3-band 12x16 uint8 GeoTIFF with a gradient."""
    rng = np.random.default_rng(11)
    bands = rng.integers(0, 200, (3, 12, 16)).astype(np.uint8)
    return make_geotiff(bands)


@pytest.fixture
def elevation_tiff_bytes():
    """Single-band float32 GeoTIFF (elevation-like)."""
    band = np.linspace(100.0, 900.0, 20 * 24, dtype=np.float32).reshape(1, 20, 24)
    return make_geotiff(band)


@pytest.fixture
def gradient_raster():
    """Single-band 16x12 raster with a horizontal ramp."""
    values = np.tile(np.arange(16, dtype=np.float64), 12)
    return RasterImage(16, 12, [values])


@pytest.fixture
def geotiff():
    """Factory encoding a (C, H, W) array as GeoTIFF bytes."""
    return make_geotiff
