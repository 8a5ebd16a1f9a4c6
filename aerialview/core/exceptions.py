# -*- coding: utf-8 -*-
"""
Exceptions - Error kinds surfaced by the aerial view pipeline.

Every error raised to a caller carries a human-readable message and a
machine-checkable ``kind`` so front ends can branch on the failure
without parsing text.

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
from enum import Enum


class ErrorKind(Enum):
    """Machine-checkable failure categories."""

    DECODE_FAILURE = "DecodeFailure"
    OUT_OF_BOUNDS = "OutOfBounds"
    DEGENERATE_RANGE = "DegenerateRange"
    INVALID_RESOLUTION = "InvalidResolution"
    NOT_READY = "NotReady"
    INVALID_PARAMETER = "InvalidParameter"


class AerialViewError(Exception):
    """Base class for all aerialview errors.

    Parameters
    ----------
    message : str
        Human-readable description.
    """

    kind: ErrorKind = ErrorKind.INVALID_PARAMETER

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class DecodeFailure(AerialViewError):
    """Raster bytes could not be fetched or decoded."""

    kind = ErrorKind.DECODE_FAILURE


class OutOfBounds(AerialViewError):
    """Camera latitude/longitude lies outside the valid region."""

    kind = ErrorKind.OUT_OF_BOUNDS


class InvalidResolution(AerialViewError, ValueError):
    """Requested output width or height is not positive."""

    kind = ErrorKind.INVALID_RESOLUTION


class NotReady(AerialViewError):
    """Render or export requested before a texture exists."""

    kind = ErrorKind.NOT_READY


class InvalidParameter(AerialViewError, ValueError):
    """A parameter field is outside its allowed range."""

    kind = ErrorKind.INVALID_PARAMETER


__all__ = [
    "ErrorKind",
    "AerialViewError",
    "DecodeFailure",
    "OutOfBounds",
    "InvalidResolution",
    "NotReady",
    "InvalidParameter",
]
