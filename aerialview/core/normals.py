# -*- coding: utf-8 -*-
"""
Normal Maps - Tangent-space normals from image luminance.

Luminance is treated as a height field. Sobel gradients with
edge-clamped sampling give the slope, ``1 / strength`` the vertical
component, and the normalized vector is encoded to bytes as
``(n + 1) * 127.5``.

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
from scipy.ndimage import sobel

LUMA_WEIGHTS = np.array([0.3, 0.59, 0.11])

#: Substitute for a non-positive strength.
MIN_STRENGTH = 1e-6


def luminance(rgba: np.ndarray) -> np.ndarray:
    """Return (H, W) luminance in [0, 1]."""
    return rgba[..., :3].astype(np.float64) @ LUMA_WEIGHTS / 255.0


def encode_normals(normals: np.ndarray) -> np.ndarray:
    """Encode unit vectors (H, W, 3) to bytes via ``(n + 1) * 127.5``."""
    return np.clip((normals + 1.0) * 127.5, 0, 255).astype(np.uint8)


def decode_normals(encoded: np.ndarray) -> np.ndarray:
    """Invert :func:`encode_normals` for the first three channels."""
    return encoded[..., :3].astype(np.float64) / 127.5 - 1.0


def generate_normal_map(rgba: np.ndarray, strength: float = 1.0) -> np.ndarray:
    """Derive an RGBA-encoded normal map from an image's luminance.

    Parameters
    ----------
    rgba : np.ndarray
        (H, W, 4) uint8 image (the cleaned texture, before color
        correction).
    strength : float
        Relief strength. Larger values give steeper normals.

    Returns
    -------
    np.ndarray
        (H, W, 4) uint8 with X, Y, Z in R, G, B and alpha 255.
    """
    if rgba.ndim != 3 or rgba.shape[2] < 3:
        raise ValueError(f"Expected (H, W, 4) RGBA, got shape {rgba.shape}")

    if strength <= 0:
        strength = MIN_STRENGTH

    lum = luminance(rgba)
    dx = sobel(lum, axis=1, mode='nearest')
    dy = sobel(lum, axis=0, mode='nearest')
    dz = np.full_like(lum, 1.0 / strength)

    vec = np.stack([dx, dy, dz], axis=-1)
    vec /= np.linalg.norm(vec, axis=-1, keepdims=True)

    out = np.empty(rgba.shape[:2] + (4,), dtype=np.uint8)
    out[..., :3] = encode_normals(vec)
    out[..., 3] = 255
    return out


__all__ = [
    "LUMA_WEIGHTS",
    "MIN_STRENGTH",
    "luminance",
    "encode_normals",
    "decode_normals",
    "generate_normal_map",
]
