# -*- coding: utf-8 -*-
"""
Camera Model - Field of view and scene transform from camera parameters.

Everything here is a pure function of ``Parameters`` and
``AerialConfig``. The scene is a textured surface lying in the XY
plane of a local frame (Z up) in front of a fixed camera; moving the
virtual camera moves, turns and scales the surface instead.

Local frame
-----------
- Offsets from the scene centre are ``(degrees) * local_scale`` units,
  a flat approximation valid only over a small region.
- Yaw (pan) turns about the vertical Z axis, then pitch (-tilt) about
  the horizontal X axis. The two do not commute.
- Scale follows ``(C / max(altitude, alt_min)) ** E``.

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
import math
from dataclasses import dataclass
from typing import Optional, Tuple

# Third-party
import numpy as np

# aerialview internal
from aerialview.core.config import AerialConfig
from aerialview.core.parameters import Extrinsics, Intrinsics, Parameters


@dataclass(frozen=True)
class SceneTransform:
    """World transform of the textured surface for one camera pose.

    Attributes
    ----------
    position : Tuple[float, float, float]
        Surface centre offset (x, y, z) in scene units.
    rotation : Tuple[float, float, float]
        (pitch, yaw, roll) in radians.
    scale : float
        Uniform surface scale.
    fov_degrees : float
        Vertical field of view.
    visible : bool
        False when the camera is above the blackout altitude.
    aspect : float
        Output width / height.
    principal_offset : Tuple[float, float]
        Principal point offset from the image centre, as a fraction of
        the half-width / half-height (x right, y up).
    """

    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float]
    scale: float
    fov_degrees: float
    visible: bool
    aspect: float = 1.0
    principal_offset: Tuple[float, float] = (0.0, 0.0)

    def rotation_matrix(self) -> np.ndarray:
        """3x3 matrix applying yaw, then pitch."""
        pitch, yaw, _roll = self.rotation
        return rotation_matrix(yaw, pitch)


def rotation_matrix(yaw: float, pitch: float) -> np.ndarray:
    """Return ``Rx(pitch) @ Rz(yaw)``: yaw about Z first, then pitch about X.

    Parameters
    ----------
    yaw : float
        Radians.
    pitch : float
        Radians.

    Returns
    -------
    np.ndarray
        (3, 3) float64.
    """
    cy, sy = math.cos(yaw), math.sin(yaw)
    cp, sp = math.cos(pitch), math.sin(pitch)
    rz = np.array([
        [cy, -sy, 0.0],
        [sy, cy, 0.0],
        [0.0, 0.0, 1.0],
    ])
    rx = np.array([
        [1.0, 0.0, 0.0],
        [0.0, cp, -sp],
        [0.0, sp, cp],
    ])
    return rx @ rz


def field_of_view(intrinsics: Intrinsics) -> float:
    """Vertical field of view in degrees from sensor geometry.

    ``sensor_height = pixel_size_y * output_height`` and
    ``fov = 2 * atan(sensor_height / (2 * focal_length))``.
    """
    sensor_height = intrinsics.pixel_size_y * intrinsics.output_height
    return math.degrees(2.0 * math.atan(sensor_height / (2.0 * intrinsics.focal_length)))


def altitude_scale(altitude: float, config: Optional[AerialConfig] = None) -> float:
    """Surface scale for an altitude, strictly decreasing above ``alt_min``."""
    config = config or AerialConfig()
    effective = max(altitude, config.alt_min)
    return (config.scale_constant / effective) ** config.scale_exponent


def local_offset(
    extrinsics: Extrinsics,
    config: Optional[AerialConfig] = None,
) -> Tuple[float, float, float]:
    """Surface position ``(lon_diff, -lat_diff, 0)`` in scene units."""
    config = config or AerialConfig()
    lat_diff = (extrinsics.latitude - config.center_lat) * config.local_scale
    lon_diff = (extrinsics.longitude - config.center_lon) * config.local_scale
    return (lon_diff, -lat_diff, 0.0)


def is_visible(altitude: float, config: Optional[AerialConfig] = None) -> bool:
    """Whether the surface is drawn at this altitude (hard cutoff)."""
    config = config or AerialConfig()
    return altitude <= config.blackout_altitude


def compute_scene_transform(
    parameters: Parameters,
    config: Optional[AerialConfig] = None,
) -> SceneTransform:
    """Derive the surface transform and field of view for a camera pose.

    Parameters
    ----------
    parameters : Parameters
    config : Optional[AerialConfig]
        Scene constants. None uses defaults.

    Returns
    -------
    SceneTransform
        Equal inputs always produce an equal transform.
    """
    config = config or AerialConfig()
    intr = parameters.intrinsics
    ext = parameters.extrinsics

    yaw = math.radians(ext.pan)
    pitch = -math.radians(ext.tilt)

    px, py = intr.principal_point
    half_w = intr.output_width / 2.0
    half_h = intr.output_height / 2.0
    principal_offset = (
        (px - (intr.output_width + 1) / 2.0) / half_w,
        ((intr.output_height + 1) / 2.0 - py) / half_h,
    )

    return SceneTransform(
        position=local_offset(ext, config),
        rotation=(pitch, yaw, 0.0),
        scale=altitude_scale(ext.altitude, config),
        fov_degrees=field_of_view(intr),
        visible=is_visible(ext.altitude, config),
        aspect=intr.output_width / intr.output_height,
        principal_offset=principal_offset,
    )


def curvature_displacement(
    distance: np.ndarray,
    curvature: float,
    earth_radius: float,
) -> np.ndarray:
    """Vertical drop of a surface sample at planar ``distance`` from centre.

    ``-curvature * d**2 / (2 * earth_radius)``. Works on scalars and
    arrays.
    """
    return -curvature * np.square(distance) / (2.0 * earth_radius)


__all__ = [
    "SceneTransform",
    "rotation_matrix",
    "field_of_view",
    "altitude_scale",
    "local_offset",
    "is_visible",
    "compute_scene_transform",
    "curvature_displacement",
]
