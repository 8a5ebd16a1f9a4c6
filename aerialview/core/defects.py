# -*- coding: utf-8 -*-
"""
Defect Cleaning - Inpaint saturated sensor artifacts.

A pixel whose red, green and blue all exceed the threshold is treated
as a saturation artifact and replaced by the mean of its unsaturated
8-neighbours. One pass; the image border is never touched.

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

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 230

_NEIGHBOURS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
]


def saturated_mask(rgba: np.ndarray, threshold: int = DEFAULT_THRESHOLD) -> np.ndarray:
    """Boolean (H, W) mask of pixels with R, G and B all above threshold."""
    return np.all(rgba[..., :3] > threshold, axis=-1)


def clean_saturated_pixels(
    rgba: np.ndarray,
    threshold: int = DEFAULT_THRESHOLD,
) -> np.ndarray:
    """Replace saturated interior pixels with their neighbourhood mean.

    Parameters
    ----------
    rgba : np.ndarray
        (H, W, 4) uint8 image. Not modified.
    threshold : int
        Channel value a pixel must exceed on R, G and B to count as
        saturated.

    Returns
    -------
    np.ndarray
        New (H, W, 4) uint8 image. Alpha is copied unchanged.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f"Expected (H, W, 4) RGBA, got shape {rgba.shape}")

    out = rgba.copy()
    h, w = rgba.shape[:2]
    if h < 3 or w < 3:
        return out

    bad = saturated_mask(rgba, threshold)
    targets = bad[1:-1, 1:-1]
    if not targets.any():
        return out

    rgb = rgba[..., :3].astype(np.float64)
    total = np.zeros((h - 2, w - 2, 3), dtype=np.float64)
    count = np.zeros((h - 2, w - 2), dtype=np.int32)
    for dr, dc in _NEIGHBOURS:
        rows = slice(1 + dr, h - 1 + dr)
        cols = slice(1 + dc, w - 1 + dc)
        good = ~bad[rows, cols]
        total += rgb[rows, cols] * good[..., None]
        count += good

    replace = targets & (count > 0)
    mean = total / np.maximum(count, 1)[..., None]
    interior = out[1:-1, 1:-1, :3]
    interior[replace] = np.rint(mean[replace]).astype(np.uint8)

    logger.debug(
        "Cleaned %d of %d saturated pixels",
        int(replace.sum()), int(targets.sum()),
    )
    return out


__all__ = ["DEFAULT_THRESHOLD", "saturated_mask", "clean_saturated_pixels"]
