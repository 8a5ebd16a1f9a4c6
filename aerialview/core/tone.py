# -*- coding: utf-8 -*-
"""
Tone Mapping - Map raw raster bands to 8-bit RGBA display values.

Single-band rasters are min/max stretched and gamma corrected into
gray. Multi-band rasters are treated as display-ready bytes and copied
band-for-channel.

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
import logging

# Third-party
import numpy as np

# aerialview internal
from aerialview.core.exceptions import ErrorKind
from aerialview.core.raster import RasterImage

logger = logging.getLogger(__name__)

#: Gray level used when a single-band raster has no dynamic range.
MID_GRAY = 128

DEFAULT_GAMMA = 0.9


def _to_bytes(arr: np.ndarray) -> np.ndarray:
    """Clamp and round to uint8, like a clamped byte buffer.

    Non-finite samples (nodata) become 0.
    """
    arr = np.nan_to_num(arr, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.rint(arr), 0, 255).astype(np.uint8)


def stretch_band(band: np.ndarray, gamma: float = DEFAULT_GAMMA) -> np.ndarray:
    """Min/max stretch one band to [0, 255] floats, then apply gamma.

    Parameters
    ----------
    band : np.ndarray
        Raw samples, any numeric dtype.
    gamma : float
        Exponent applied to the normalized stretch.

    Returns
    -------
    np.ndarray
        float64 array, same shape as ``band``. Constant input maps to
        ``MID_GRAY`` everywhere. Non-finite samples are ignored for the
        range and stay non-finite; :func:`tone_map` writes NaN as 0.
    """
    values = band.astype(np.float64)
    finite = np.isfinite(values)
    if not finite.any():
        logger.warning(
            "%s: band has no finite samples, using mid-gray",
            ErrorKind.DEGENERATE_RANGE.value,
        )
        return np.full(values.shape, float(MID_GRAY))
    vmin = float(values[finite].min())
    vmax = float(values[finite].max())

    if vmax == vmin:
        logger.warning(
            "%s: band is constant (%s), using mid-gray",
            ErrorKind.DEGENERATE_RANGE.value, vmin,
        )
        return np.full(values.shape, float(MID_GRAY))

    linear = (values - vmin) / (vmax - vmin) * 255.0
    return np.power(linear / 255.0, gamma) * 255.0


def tone_map(raster: RasterImage, gamma: float = DEFAULT_GAMMA) -> np.ndarray:
    """Convert a raster to an (H, W, 4) uint8 RGBA image.

    One band: stretched gray in R, G and B. Two or more bands: band 0
    to R, band 1 to G, band 2 to B (missing G/B repeat band 0), band 3
    to alpha if present. Multi-band samples are assumed to already be
    in 0-255 and are only clamped.

    Parameters
    ----------
    raster : RasterImage
    gamma : float
        Gamma for the single-band stretch.

    Returns
    -------
    np.ndarray
        (height, width, 4) uint8.
    """
    h, w = raster.height, raster.width
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[..., 3] = 255

    if raster.band_count == 1:
        gray = _to_bytes(stretch_band(raster.band_array(0), gamma))
        rgba[..., 0] = gray
        rgba[..., 1] = gray
        rgba[..., 2] = gray
        return rgba

    red = raster.band_array(0)
    green = raster.band_array(1)
    blue = raster.band_array(2) if raster.band_count >= 3 else red
    rgba[..., 0] = _to_bytes(red)
    rgba[..., 1] = _to_bytes(green)
    rgba[..., 2] = _to_bytes(blue)
    if raster.band_count >= 4:
        rgba[..., 3] = _to_bytes(raster.band_array(3))
    return rgba


__all__ = ["MID_GRAY", "DEFAULT_GAMMA", "stretch_band", "tone_map"]
