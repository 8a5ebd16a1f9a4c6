# -*- coding: utf-8 -*-
"""
Renderer - Ray-cast the textured surface into an output frame.

The compositor hands a renderer an immutable RenderRequest; any object
with a matching ``render(request)`` method can stand in for the
bundled SoftwareRenderer (for instance a GPU scene backend).

SoftwareRenderer casts one ray per output pixel from a fixed camera
at ``(0, 0, camera_distance)`` looking down -Z, intersects it with the
transformed (and optionally curved) surface, samples the texture with
nearest-neighbour lookup and applies simple normal-map shading.

Dependencies
------------
Pillow

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
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

# Third-party
import numpy as np
from PIL import Image

# aerialview internal
from aerialview.core.camera import SceneTransform, curvature_displacement
from aerialview.core.config import AerialConfig
from aerialview.core.exceptions import InvalidResolution
from aerialview.core.normals import decode_normals
from aerialview.core.pipeline import EnhancedImage, NormalMap

logger = logging.getLogger(__name__)

#: Fixed light direction in world space (towards the light).
LIGHT_DIRECTION = np.array([0.3, 0.5, 1.0]) / np.linalg.norm([0.3, 0.5, 1.0])

#: Share of the texture colour kept on fully unlit faces.
AMBIENT = 0.55

#: Fixed-point passes used to land rays on a curved surface.
CURVATURE_ITERATIONS = 3


@dataclass(frozen=True)
class RenderRequest:
    """Everything a renderer needs for one frame.

    Attributes
    ----------
    texture : EnhancedImage
    normal_map : NormalMap
    transform : SceneTransform
    width : int
        Output width in pixels.
    height : int
        Output height in pixels.
    curvature : float
        Earth-curvature strength for the surface displacement.
    """

    texture: EnhancedImage
    normal_map: NormalMap
    transform: SceneTransform
    width: int
    height: int
    curvature: float = 0.0


class Renderer(Protocol):
    """Anything that turns a RenderRequest into an (H, W, 4) uint8 frame."""

    def render(self, request: RenderRequest) -> np.ndarray:
        ...


def check_resolution(width: int, height: int) -> None:
    """Raise InvalidResolution unless both dimensions are positive."""
    if width <= 0 or height <= 0:
        raise InvalidResolution(
            f"Output resolution must be positive, got {width}x{height}"
        )


def fit_to_box(width: int, height: int, box: int) -> tuple:
    """Largest (width, height) with the same aspect fitting a square box.

    Parameters
    ----------
    width : int
    height : int
    box : int
        Edge of the square box in pixels.

    Returns
    -------
    tuple
        (width, height), each at least 1.
    """
    check_resolution(width, height)
    scale = min(box / width, box / height)
    return (max(1, int(round(width * scale))), max(1, int(round(height * scale))))


def export_filename(width: int, height: int) -> str:
    """File name used for exported frames."""
    return f"aerial_view_{width}x{height}.png"


def write_png(rgba: np.ndarray, path: Union[str, Path]) -> Path:
    """Encode an (H, W, 4) uint8 frame as PNG.

    Parameters
    ----------
    rgba : np.ndarray
    path : str or Path
        Output path. Parent directories are created.

    Returns
    -------
    Path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(rgba)).save(str(path), format="PNG")
    logger.info("Wrote %s", path)
    return path


class SoftwareRenderer:
    """CPU ray caster for a single textured surface.

    Parameters
    ----------
    config : Optional[AerialConfig]
        Supplies surface size, camera distance, earth radius and the
        blackout/backdrop colours.
    """

    def __init__(self, config: Optional[AerialConfig] = None) -> None:
        self._config = config or AerialConfig()

    def render(self, request: RenderRequest) -> np.ndarray:
        """Render one frame.

        Parameters
        ----------
        request : RenderRequest

        Returns
        -------
        np.ndarray
            (height, width, 4) uint8.
        """
        check_resolution(request.width, request.height)
        cfg = self._config
        h, w = request.height, request.width
        frame = np.empty((h, w, 4), dtype=np.uint8)
        frame[..., 3] = 255

        xf = request.transform
        if not xf.visible:
            frame[..., :3] = cfg.blackout_color
            return frame
        frame[..., :3] = cfg.backdrop_color

        # Camera rays, one per output pixel centre
        tan_half = math.tan(math.radians(xf.fov_degrees) / 2.0)
        aspect = w / h
        ndc_x = (np.arange(w) + 0.5) / w * 2.0 - 1.0 - xf.principal_offset[0]
        ndc_y = 1.0 - (np.arange(h) + 0.5) / h * 2.0 - xf.principal_offset[1]
        gx, gy = np.meshgrid(ndc_x * tan_half * aspect, ndc_y * tan_half)
        dirs = np.stack([gx, gy, -np.ones_like(gx)], axis=-1)

        # Into the surface's local frame: p_local = R^T (p_world - T) / s
        rot = xf.rotation_matrix()
        cam = np.array([0.0, 0.0, cfg.camera_distance])
        origin = rot.T @ (cam - np.asarray(xf.position)) / xf.scale
        dirs = dirs @ rot / xf.scale

        dz = dirs[..., 2]
        with np.errstate(divide='ignore', invalid='ignore'):
            target = np.zeros_like(dz)
            passes = CURVATURE_ITERATIONS if request.curvature > 0 else 1
            for _ in range(passes):
                t = (target - origin[2]) / dz
                px = origin[0] + t * dirs[..., 0]
                py = origin[1] + t * dirs[..., 1]
                if request.curvature > 0:
                    target = curvature_displacement(
                        np.hypot(px, py), request.curvature, cfg.earth_radius,
                    )

            tex = request.texture.data
            th, tw = tex.shape[:2]
            longest = max(tw, th)
            half_w = cfg.surface_size / 2.0 * tw / longest
            half_h = cfg.surface_size / 2.0 * th / longest

            hit = (np.isfinite(t) & (t > 0)
                   & (np.abs(px) <= half_w) & (np.abs(py) <= half_h))
        if not hit.any():
            return frame

        u = px[hit] / (2.0 * half_w) + 0.5
        v = 0.5 - py[hit] / (2.0 * half_h)
        cols = np.clip(np.rint(u * (tw - 1)).astype(np.intp), 0, tw - 1)
        rows = np.clip(np.rint(v * (th - 1)).astype(np.intp), 0, th - 1)

        # Image rows grow downwards, local Y grows upwards
        normals = decode_normals(request.normal_map.data[rows, cols])
        normals[:, 1] = -normals[:, 1]
        world_normals = normals @ rot.T
        lambert = np.clip(world_normals @ LIGHT_DIRECTION, 0.0, 1.0)
        shade = AMBIENT + (1.0 - AMBIENT) * lambert

        colors = tex[rows, cols, :3].astype(np.float64) * shade[:, None]
        frame[hit, :3] = np.clip(np.rint(colors), 0, 255).astype(np.uint8)
        return frame


__all__ = [
    "RenderRequest",
    "Renderer",
    "SoftwareRenderer",
    "check_resolution",
    "fit_to_box",
    "export_filename",
    "write_png",
]
