# -*- coding: utf-8 -*-
"""
Enhancement Pipeline - Raster to texture and normal map.

Runs the enhancement stages in order on a decoded raster:

1. Tone mapping (bands to RGBA)
2. Saturated-defect cleaning
3. Normal map from the cleaned image
4. Roughness, saturation, contrast, brightness
5. Sharpening and edge enhancement

Every stage takes and returns owned numpy buffers; the results are
wrapped in read-only EnhancedImage / NormalMap values.

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
from typing import Callable, Optional, Tuple

# Third-party
import numpy as np

# aerialview internal
from aerialview.core.color import enhance_color
from aerialview.core.config import AerialConfig
from aerialview.core.defects import clean_saturated_pixels
from aerialview.core.normals import generate_normal_map
from aerialview.core.parameters import Enhancement
from aerialview.core.raster import RasterImage
from aerialview.core.sharpen import sharpen
from aerialview.core.tone import tone_map

logger = logging.getLogger(__name__)


class _FrozenRGBA:
    """Read-only (H, W, 4) uint8 image."""

    def __init__(self, data: np.ndarray) -> None:
        if data.ndim != 3 or data.shape[2] != 4 or data.dtype != np.uint8:
            raise ValueError(
                f"Expected (H, W, 4) uint8, got {data.shape} {data.dtype}"
            )
        data = np.array(data, copy=True)
        data.flags.writeable = False
        self._data = data

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    def to_bytes(self) -> bytes:
        """Interleaved RGBA buffer, 4 bytes per pixel, row-major."""
        return self._data.tobytes()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return np.array_equal(self._data, other._data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.width}x{self.height})"


class EnhancedImage(_FrozenRGBA):
    """Display texture produced by the enhancement chain."""


class NormalMap(_FrozenRGBA):
    """Byte-encoded tangent-space normals, same size as the texture."""


class EnhancementPipeline:
    """Run the enhancement chain for one raster and parameter set.

    Parameters
    ----------
    config : Optional[AerialConfig]
        Supplies the defect threshold and tone gamma.
    """

    STEP_NAMES = ("tone_map", "clean", "normals", "color", "sharpen")

    def __init__(self, config: Optional[AerialConfig] = None) -> None:
        self._config = config or AerialConfig()

    def run(
        self,
        raster: RasterImage,
        enhancement: Enhancement,
        rng: Optional[np.random.Generator] = None,
        progress_callback: Optional[Callable[[float], None]] = None,
    ) -> Tuple[EnhancedImage, NormalMap]:
        """Produce the texture and normal map for ``raster``.

        Parameters
        ----------
        raster : RasterImage
        enhancement : Enhancement
        rng : Optional[np.random.Generator]
            Roughness noise source. None seeds from ``enhancement.seed``
            (fresh entropy when that is None too).
        progress_callback : Optional[Callable[[float], None]]
            Called with the completed fraction after each stage.

        Returns
        -------
        Tuple[EnhancedImage, NormalMap]
        """
        if rng is None:
            rng = np.random.default_rng(enhancement.seed)

        n_steps = len(self.STEP_NAMES)
        done = 0

        def _step(name: str) -> None:
            nonlocal done
            done += 1
            logger.debug("Enhancement step %s complete", name)
            if progress_callback is not None:
                progress_callback(done / n_steps)

        rgba = tone_map(raster, gamma=self._config.tone_gamma)
        _step("tone_map")

        cleaned = clean_saturated_pixels(
            rgba, threshold=self._config.defect_threshold,
        )
        _step("clean")

        normals = generate_normal_map(cleaned, enhancement.elevation_scale)
        _step("normals")

        colored = enhance_color(
            cleaned,
            saturation=enhancement.saturation,
            contrast=enhancement.contrast,
            brightness=enhancement.brightness,
            roughness=enhancement.roughness,
            rng=rng,
        )
        _step("color")

        texture = sharpen(
            colored,
            sharpness=enhancement.sharpness,
            edge_enhancement=enhancement.edge_enhancement,
        )
        _step("sharpen")

        logger.info(
            "Enhanced %dx%d raster (%d bands)",
            raster.width, raster.height, raster.band_count,
        )
        return EnhancedImage(texture), NormalMap(normals)


__all__ = ["EnhancedImage", "NormalMap", "EnhancementPipeline"]
