# -*- coding: utf-8 -*-
"""
Raster Source - Decode georeferenced rasters and manage background loads.

Provides the RasterImage value type, a rasterio-backed decoder for
in-memory GeoTIFF bytes, a fetch helper for local paths and HTTP URLs,
and a RasterLoader that runs loads on a worker thread with
last-request-wins semantics.

Dependencies
------------
rasterio
requests

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
import threading
import warnings
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np
import requests
from rasterio.errors import NotGeoreferencedWarning, RasterioError
from rasterio.io import MemoryFile

# aerialview internal
from aerialview.core.exceptions import DecodeFailure

logger = logging.getLogger(__name__)

RasterSourceLike = Union[str, Path, bytes, bytearray]


class RasterImage:
    """Decoded raster: dimensions plus one flat sample array per band.

    Parameters
    ----------
    width : int
        Columns.
    height : int
        Rows.
    bands : Sequence[np.ndarray]
        One array per band, each with ``width * height`` samples in
        row-major order. Arrays are copied and frozen.
    bounds : Optional[Tuple[float, float, float, float]]
        Georeferenced (west, south, east, north), when known.

    Raises
    ------
    ValueError
        If there are no bands, a dimension is not positive, or a band
        has the wrong number of samples.
    """

    def __init__(
        self,
        width: int,
        height: int,
        bands: Sequence[np.ndarray],
        bounds: Optional[Tuple[float, float, float, float]] = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(
                f"Raster dimensions must be positive, got {width}x{height}"
            )
        if len(bands) == 0:
            raise ValueError("Raster must have at least one band")

        frozen = []
        for i, band in enumerate(bands):
            arr = np.array(band).reshape(-1)
            if arr.size != width * height:
                raise ValueError(
                    f"Band {i} has {arr.size} samples, expected "
                    f"{width * height}"
                )
            arr.flags.writeable = False
            frozen.append(arr)

        self._width = int(width)
        self._height = int(height)
        self._bands = tuple(frozen)
        self._bounds = bounds

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def bands(self) -> Tuple[np.ndarray, ...]:
        """Read-only flat band arrays."""
        return self._bands

    @property
    def band_count(self) -> int:
        return len(self._bands)

    @property
    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        return self._bounds

    def band_array(self, index: int) -> np.ndarray:
        """Return band ``index`` reshaped to (height, width)."""
        return self._bands[index].reshape(self._height, self._width)

    def __repr__(self) -> str:
        return (
            f"RasterImage({self._width}x{self._height}, "
            f"bands={len(self._bands)}, dtype={self._bands[0].dtype})"
        )


def decode_raster(data: bytes) -> RasterImage:
    """Decode encoded raster bytes (GeoTIFF or any GDAL format).

    Parameters
    ----------
    data : bytes
        Encoded file contents.

    Returns
    -------
    RasterImage

    Raises
    ------
    DecodeFailure
        If the bytes cannot be decoded or hold no usable bands.
    """
    if not data:
        raise DecodeFailure("Raster data is empty")
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NotGeoreferencedWarning)
            with MemoryFile(bytes(data)) as memfile:
                with memfile.open() as ds:
                    stack = ds.read()  # (C, H, W)
                    bounds = tuple(ds.bounds) if ds.crs is not None else None
    except (RasterioError, ValueError, TypeError) as e:
        raise DecodeFailure(f"Failed to read raster: {e}") from e

    count, height, width = stack.shape
    try:
        image = RasterImage(width, height, [stack[i] for i in range(count)],
                            bounds=bounds)
    except ValueError as e:
        raise DecodeFailure(str(e)) from e
    logger.info("Decoded raster %s", image)
    return image


def fetch_raster_bytes(source: RasterSourceLike, timeout: float = 10.0) -> bytes:
    """Return the encoded bytes for a path, URL or in-memory buffer.

    Parameters
    ----------
    source : str, Path, bytes or bytearray
        ``http(s)://`` URLs are downloaded; other strings and paths are
        read from disk; buffers are returned as is.
    timeout : float
        HTTP timeout in seconds.

    Returns
    -------
    bytes

    Raises
    ------
    DecodeFailure
        If the source cannot be read.
    """
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    text = str(source)
    if text.startswith(("http://", "https://")):
        try:
            resp = requests.get(text, timeout=timeout)
            resp.raise_for_status()
            return resp.content
        except requests.RequestException as e:
            raise DecodeFailure(f"Failed to fetch {text}: {e}") from e

    try:
        return Path(text).read_bytes()
    except OSError as e:
        raise DecodeFailure(f"Failed to read {text}: {e}") from e


def read_raster(source: RasterSourceLike, timeout: float = 10.0) -> RasterImage:
    """Fetch and decode a raster in one call."""
    return decode_raster(fetch_raster_bytes(source, timeout=timeout))


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one background raster load.

    Attributes
    ----------
    generation : int
        Load request number this result belongs to.
    image : Optional[RasterImage]
        Decoded raster on success.
    error : Optional[DecodeFailure]
        Failure on error.
    stale : bool
        True when a newer load superseded this one; the result was not
        delivered.
    """

    generation: int
    image: Optional[RasterImage] = None
    error: Optional[DecodeFailure] = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.image is not None and not self.stale


class RasterLoader:
    """Run raster loads off the caller's thread, newest request wins.

    Every ``load`` call bumps a generation counter. A completion is
    delivered to ``on_result`` only if its generation is still current;
    otherwise it is dropped. ``on_result`` runs on the worker thread
    without the loader lock held, so a newer ``load`` can start while it
    runs; consumers that publish state re-check :meth:`is_current`
    before doing so.

    Parameters
    ----------
    on_result : Callable[[LoadResult], None]
        Receives every current (non-stale) result, success or failure.
    timeout : float
        HTTP timeout in seconds.
    max_workers : int
        Worker threads.
    reader : Optional[Callable]
        ``(source, timeout) -> RasterImage``. Defaults to
        :func:`read_raster`.
    """

    def __init__(
        self,
        on_result: Callable[[LoadResult], None],
        timeout: float = 10.0,
        max_workers: int = 2,
        reader: Optional[Callable[..., RasterImage]] = None,
    ) -> None:
        self._on_result = on_result
        self._timeout = timeout
        self._reader = reader or read_raster
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="raster-load",
        )
        self._lock = threading.RLock()
        self._generation = 0
        self._pending: Optional[Future] = None

    @property
    def generation(self) -> int:
        """Generation of the most recent request."""
        return self._generation

    def load(self, source: RasterSourceLike) -> Future:
        """Start loading ``source``, superseding any earlier request.

        Returns
        -------
        concurrent.futures.Future
            Resolves to the :class:`LoadResult`.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._pending is not None:
                self._pending.cancel()
            future = self._executor.submit(self._run, generation, source)
            self._pending = future
        logger.info("Raster load %d started", generation)
        return future

    def cancel(self) -> None:
        """Invalidate any in-flight load."""
        with self._lock:
            self._generation += 1
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool."""
        self.cancel()
        self._executor.shutdown(wait=wait)

    def is_current(self, generation: int) -> bool:
        """Whether ``generation`` is still the most recent request."""
        with self._lock:
            return generation == self._generation

    def _run(self, generation: int, source: RasterSourceLike) -> LoadResult:
        if not self.is_current(generation):
            return LoadResult(generation, stale=True)

        try:
            image = self._reader(source, timeout=self._timeout)
            result = LoadResult(generation, image=image)
        except DecodeFailure as e:
            logger.warning("Raster load %d failed: %s", generation, e)
            result = LoadResult(generation, error=e)

        if not self.is_current(generation):
            logger.debug(
                "Discarding stale raster load %d (current %d)",
                generation, self._generation,
            )
            return LoadResult(generation, result.image, result.error,
                              stale=True)
        self._on_result(result)
        return result


__all__ = [
    "RasterImage",
    "decode_raster",
    "fetch_raster_bytes",
    "read_raster",
    "LoadResult",
    "RasterLoader",
]
