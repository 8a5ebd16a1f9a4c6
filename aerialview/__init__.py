# -*- coding: utf-8 -*-
"""
aerialview - Synthetic aerial camera views of georeferenced rasters.

Turns an overhead raster into an enhanced texture and normal map, and
a virtual camera pose into a scene transform, then renders what that
camera would see.

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

__version__ = "0.1.0"
__author__ = "Steven Siebert"

from aerialview.core.compositor import SceneCompositor, SceneState
from aerialview.core.config import AerialConfig, load_config
from aerialview.core.parameters import Enhancement, Extrinsics, Intrinsics, Parameters
from aerialview.core.raster import RasterImage, decode_raster, read_raster

__all__: list = [
    "SceneCompositor",
    "SceneState",
    "AerialConfig",
    "load_config",
    "Parameters",
    "Intrinsics",
    "Extrinsics",
    "Enhancement",
    "RasterImage",
    "decode_raster",
    "read_raster",
]
