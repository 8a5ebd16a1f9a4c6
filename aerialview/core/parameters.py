# -*- coding: utf-8 -*-
"""
Parameters - Immutable, range-checked camera and enhancement settings.

A render call is driven by one ``Parameters`` value made of three
groups: intrinsic optics, extrinsic pose and image enhancement. All
groups are frozen dataclasses; changing a field means building a new
value with ``replace``.

Dependencies
------------
pyyaml

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
import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Third-party
import yaml

# aerialview internal
from aerialview.core.config import ALT_MIN
from aerialview.core.exceptions import InvalidParameter, InvalidResolution


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value!r}")


def _check_positive(name: str, value: float) -> None:
    _check_finite(name, value)
    if value <= 0:
        raise InvalidParameter(f"{name} must be > 0, got {value!r}")


def _check_non_negative(name: str, value: float) -> None:
    _check_finite(name, value)
    if value < 0:
        raise InvalidParameter(f"{name} must be >= 0, got {value!r}")


@dataclass(frozen=True)
class Intrinsics:
    """Camera optics.

    Parameters
    ----------
    focal_length : float
        Focal length in metres.
    pixel_size_x : float
        Horizontal pixel pitch in metres.
    pixel_size_y : float
        Vertical pixel pitch in metres.
    principal_x : Optional[float]
        Principal point column in output pixels. None = image centre.
    principal_y : Optional[float]
        Principal point row in output pixels. None = image centre.
    output_width : int
        Output image width in pixels.
    output_height : int
        Output image height in pixels.
    """

    focal_length: float = 0.005
    pixel_size_x: float = 0.000035
    pixel_size_y: float = 0.000035
    principal_x: Optional[float] = None
    principal_y: Optional[float] = None
    output_width: int = 640
    output_height: int = 480

    def __post_init__(self) -> None:
        _check_positive("focal_length", self.focal_length)
        _check_positive("pixel_size_x", self.pixel_size_x)
        _check_positive("pixel_size_y", self.pixel_size_y)
        if self.output_width <= 0 or self.output_height <= 0:
            raise InvalidResolution(
                f"Output resolution must be positive, got "
                f"{self.output_width}x{self.output_height}"
            )
        if self.principal_x is not None:
            _check_finite("principal_x", self.principal_x)
        if self.principal_y is not None:
            _check_finite("principal_y", self.principal_y)

    @property
    def principal_point(self) -> tuple:
        """Principal point (x, y) in pixels, defaulting to the centre."""
        px = self.principal_x
        py = self.principal_y
        if px is None:
            px = (self.output_width + 1) / 2.0
        if py is None:
            py = (self.output_height + 1) / 2.0
        return (px, py)


@dataclass(frozen=True)
class Extrinsics:
    """Camera position and orientation.

    Parameters
    ----------
    latitude : float
        Degrees north.
    longitude : float
        Degrees east.
    altitude : float
        Height above the surface. Must be positive; the configured
        floor (``AerialConfig.alt_min``) is applied by :meth:`Parameters.from_dict`
        and checked by the compositor.
    pan : float
        Heading in degrees, in [0, 360).
    tilt : float
        Tilt in degrees, in [-90, 90].
    """

    latitude: float = 12.9611
    longitude: float = 77.6532
    altitude: float = 300.0
    pan: float = 0.0
    tilt: float = 0.0

    def __post_init__(self) -> None:
        _check_finite("latitude", self.latitude)
        _check_finite("longitude", self.longitude)
        _check_finite("altitude", self.altitude)
        if self.altitude <= 0:
            raise InvalidParameter(
                f"altitude must be positive, got {self.altitude!r}"
            )
        _check_finite("pan", self.pan)
        if not 0.0 <= self.pan < 360.0:
            raise InvalidParameter(f"pan must be in [0, 360), got {self.pan!r}")
        _check_finite("tilt", self.tilt)
        if not -90.0 <= self.tilt <= 90.0:
            raise InvalidParameter(
                f"tilt must be in [-90, 90], got {self.tilt!r}"
            )


@dataclass(frozen=True)
class Enhancement:
    """Image enhancement controls. All values must be >= 0.

    ``seed`` pins the roughness noise; None draws fresh noise on every
    render.
    """

    saturation: float = 1.0
    contrast: float = 1.0
    brightness: float = 1.0
    sharpness: float = 1.0
    roughness: float = 0.0
    edge_enhancement: float = 0.0
    curvature: float = 0.0
    elevation_scale: float = 1.0
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            if f.name != 'seed':
                _check_non_negative(f.name, getattr(self, f.name))


# camelCase form-field keys -> (group, field)
_KEY_MAP: Dict[str, tuple] = {
    'focalLength': ('intrinsics', 'focal_length'),
    'pixelSizeX': ('intrinsics', 'pixel_size_x'),
    'pixelSizeY': ('intrinsics', 'pixel_size_y'),
    'principalX': ('intrinsics', 'principal_x'),
    'principalY': ('intrinsics', 'principal_y'),
    'width': ('intrinsics', 'output_width'),
    'height': ('intrinsics', 'output_height'),
    'outputWidth': ('intrinsics', 'output_width'),
    'outputHeight': ('intrinsics', 'output_height'),
    'edgeEnhancement': ('enhancement', 'edge_enhancement'),
    'elevationScale': ('enhancement', 'elevation_scale'),
}

_GROUPS = {
    'intrinsics': Intrinsics,
    'extrinsics': Extrinsics,
    'enhancement': Enhancement,
}

for _group, _cls in _GROUPS.items():
    for _f in dataclasses.fields(_cls):
        _KEY_MAP.setdefault(_f.name, (_group, _f.name))


@dataclass(frozen=True)
class Parameters:
    """Complete, immutable parameter set for one render call."""

    intrinsics: Intrinsics = field(default_factory=Intrinsics)
    extrinsics: Extrinsics = field(default_factory=Extrinsics)
    enhancement: Enhancement = field(default_factory=Enhancement)

    def replace(self, **changes: Any) -> 'Parameters':
        """Return a copy with individual fields changed.

        Keys may name any field of any group, in snake_case or the
        camelCase form-field spelling.

        Returns
        -------
        Parameters
        """
        grouped: Dict[str, Dict[str, Any]] = {g: {} for g in _GROUPS}
        for key, value in changes.items():
            if key not in _KEY_MAP:
                raise InvalidParameter(f"Unknown parameter '{key}'")
            group, name = _KEY_MAP[key]
            grouped[group][name] = value
        return Parameters(**{
            group: dataclasses.replace(getattr(self, group), **values)
            for group, values in grouped.items()
        })

    def to_dict(self) -> dict:
        """Serialize to a nested dictionary.

        Returns
        -------
        dict
        """
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict, alt_min: float = ALT_MIN) -> 'Parameters':
        """Build parameters from a flat or nested dictionary.

        Unknown keys are ignored. Altitude is clamped to ``alt_min`` and
        pan wrapped into [0, 360) before validation.

        Parameters
        ----------
        data : dict
            Either ``{'intrinsics': {...}, 'extrinsics': {...}, ...}``
            or a flat mapping of field names.
        alt_min : float
            Altitude floor.

        Returns
        -------
        Parameters
        """
        flat: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _GROUPS and isinstance(value, dict):
                flat.update(value)
            else:
                flat[key] = value

        grouped: Dict[str, Dict[str, Any]] = {g: {} for g in _GROUPS}
        for key, value in flat.items():
            if key in _KEY_MAP:
                group, name = _KEY_MAP[key]
                grouped[group][name] = value

        ext = grouped['extrinsics']
        if 'altitude' in ext:
            ext['altitude'] = max(float(ext['altitude']), alt_min)
        if 'pan' in ext:
            ext['pan'] = float(ext['pan']) % 360.0

        intr = grouped['intrinsics']
        for name in ('output_width', 'output_height'):
            if name in intr:
                intr[name] = int(intr[name])

        return cls(**{
            group: _GROUPS[group](**values)
            for group, values in grouped.items()
        })

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        alt_min: float = ALT_MIN,
    ) -> 'Parameters':
        """Load parameters from a YAML or JSON file.

        Parameters
        ----------
        path : str or Path
            File to read.
        alt_min : float
            Altitude floor.

        Returns
        -------
        Parameters
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise InvalidParameter(
                f"Parameter file {path} must contain a mapping"
            )
        return cls.from_dict(data, alt_min=alt_min)


__all__ = ["Intrinsics", "Extrinsics", "Enhancement", "Parameters"]
