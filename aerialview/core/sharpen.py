# -*- coding: utf-8 -*-
"""
Sharpening - Unsharp-mask and Laplacian edge enhancement.

Both filters are 3x3 correlations applied to R, G and B of interior
pixels only; the one-pixel border keeps its input values.

Dependencies
------------
scipy

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

# Third-party
import numpy as np
from scipy.ndimage import correlate

UNSHARP_KERNEL = np.array([
    [0.0, -0.2, 0.0],
    [-0.2, 1.8, -0.2],
    [0.0, -0.2, 0.0],
])

LAPLACIAN_KERNEL = np.array([
    [-1.0, -1.0, -1.0],
    [-1.0, 8.0, -1.0],
    [-1.0, -1.0, -1.0],
])

#: Centre weight added per unit of sharpness above 1.
SHARPNESS_STEP = 0.3

#: Laplacian response multiplier per unit of edge enhancement.
EDGE_GAIN = 0.25


def unsharp_kernel(sharpness: float) -> np.ndarray:
    """Return the unsharp kernel with its centre raised for ``sharpness``."""
    kernel = UNSHARP_KERNEL.copy()
    kernel[1, 1] += (sharpness - 1.0) * SHARPNESS_STEP
    return kernel


def _correlate_rgb(rgb: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    out = np.empty_like(rgb)
    for c in range(rgb.shape[2]):
        out[..., c] = correlate(rgb[..., c], kernel, mode='nearest')
    return out


def sharpen(
    rgba: np.ndarray,
    sharpness: float = 1.0,
    edge_enhancement: float = 0.0,
) -> np.ndarray:
    """Sharpen and edge-enhance an RGBA image.

    Returns ``rgba`` itself, without convolving, when
    ``sharpness <= 1`` and ``edge_enhancement <= 0``. With
    ``sharpness <= 1`` and edges requested, only the edge term is added.

    Parameters
    ----------
    rgba : np.ndarray
        (H, W, 4) uint8 image. Not modified.
    sharpness : float
        1.0 = no sharpening.
    edge_enhancement : float
        0.0 = no edge term. The Laplacian response is scaled by
        ``edge_enhancement * 0.25`` and clamped to [0, 255].

    Returns
    -------
    np.ndarray
        (H, W, 4) uint8 image.
    """
    if sharpness <= 1.0 and edge_enhancement <= 0.0:
        return rgba

    h, w = rgba.shape[:2]
    out = rgba.copy()
    if h < 3 or w < 3:
        return out

    rgb = rgba[..., :3].astype(np.float64)
    if sharpness > 1.0:
        result = _correlate_rgb(rgb, unsharp_kernel(sharpness))
    else:
        result = rgb.copy()

    if edge_enhancement > 0.0:
        edges = _correlate_rgb(rgb, LAPLACIAN_KERNEL)
        result += np.clip(edges * edge_enhancement * EDGE_GAIN, 0.0, 255.0)

    result = np.clip(result, 0.0, 255.0)
    out[1:-1, 1:-1, :3] = np.rint(result[1:-1, 1:-1]).astype(np.uint8)
    return out


__all__ = [
    "UNSHARP_KERNEL",
    "LAPLACIAN_KERNEL",
    "unsharp_kernel",
    "sharpen",
]
