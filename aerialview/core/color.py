# -*- coding: utf-8 -*-
"""
Color Enhancement - Roughness noise and saturation/contrast/brightness.

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
from typing import Optional

# Third-party
import numpy as np

#: Noise amplitude per unit of roughness, in channel levels.
ROUGHNESS_AMPLITUDE = 10.0


def add_roughness(
    rgb: np.ndarray,
    roughness: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Add independent uniform noise in ``±roughness*10`` per channel.

    Parameters
    ----------
    rgb : np.ndarray
        (H, W, 3) float64 channel values.
    roughness : float
        Noise strength. 0 returns the input.
    rng : Optional[np.random.Generator]
        Noise source. None draws from fresh OS entropy, so repeated
        calls differ.

    Returns
    -------
    np.ndarray
        Clamped (H, W, 3) float64.
    """
    if roughness <= 0:
        return rgb
    if rng is None:
        rng = np.random.default_rng()
    amplitude = roughness * ROUGHNESS_AMPLITUDE
    noise = rng.uniform(-amplitude, amplitude, size=rgb.shape)
    return np.clip(rgb + noise, 0.0, 255.0)


def adjust_saturation(rgb: np.ndarray, saturation: float) -> np.ndarray:
    """Scale each pixel's chroma around its HSL lightness."""
    if saturation == 1.0:
        return rgb
    lightness = (rgb.max(axis=-1, keepdims=True)
                 + rgb.min(axis=-1, keepdims=True)) / 2.0
    return np.clip(lightness + (rgb - lightness) * saturation, 0.0, 255.0)


def enhance_color(
    rgba: np.ndarray,
    saturation: float = 1.0,
    contrast: float = 1.0,
    brightness: float = 1.0,
    roughness: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Apply roughness noise, then saturation, contrast and brightness.

    Each stage clamps to [0, 255]. Alpha of the result is 255.

    Parameters
    ----------
    rgba : np.ndarray
        (H, W, 4) uint8 image. Not modified.
    saturation : float
        Chroma multiplier. 1.0 = unchanged, 0.0 = gray.
    contrast : float
        Multiplier around mid-level 128.
    brightness : float
        Overall multiplier.
    roughness : float
        Noise strength, see :func:`add_roughness`.
    rng : Optional[np.random.Generator]
        Noise source for reproducible output.

    Returns
    -------
    np.ndarray
        New (H, W, 4) uint8 image.
    """
    rgb = rgba[..., :3].astype(np.float64)

    rgb = add_roughness(rgb, roughness, rng)
    rgb = adjust_saturation(rgb, saturation)
    if contrast != 1.0:
        rgb = np.clip((rgb - 128.0) * contrast + 128.0, 0.0, 255.0)
    if brightness != 1.0:
        rgb = np.clip(rgb * brightness, 0.0, 255.0)

    out = np.empty_like(rgba)
    out[..., :3] = np.rint(rgb).astype(np.uint8)
    out[..., 3] = 255
    return out


__all__ = ["ROUGHNESS_AMPLITUDE", "add_roughness", "adjust_saturation", "enhance_color"]
