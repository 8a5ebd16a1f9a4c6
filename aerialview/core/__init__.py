# -*- coding: utf-8 -*-
"""
Core Module - Non-GUI logic for aerialview.

Contains raster decoding and loading, the enhancement pipeline
(tone mapping, defect cleaning, color, sharpening, normal maps), the
camera model, parameter and configuration types, and the scene
compositor with its software renderer.

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
