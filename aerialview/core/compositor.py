# -*- coding: utf-8 -*-
"""
Scene Compositor - Join texture, normal map and camera transform.

Holds the latest successfully built SceneState and replaces it
wholesale whenever the raster or the parameters change. Readers (the
preview loop, exports) grab the current state reference and work on
that snapshot; nothing in a published state is ever mutated.

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
import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

# Third-party
import numpy as np

# aerialview internal
from aerialview.core.camera import SceneTransform, compute_scene_transform
from aerialview.core.config import AerialConfig
from aerialview.core.exceptions import (
    AerialViewError,
    InvalidParameter,
    NotReady,
    OutOfBounds,
)
from aerialview.core.parameters import Parameters
from aerialview.core.pipeline import EnhancedImage, EnhancementPipeline, NormalMap
from aerialview.core.raster import (
    LoadResult,
    RasterImage,
    RasterLoader,
    RasterSourceLike,
)
from aerialview.core.renderer import (
    Renderer,
    RenderRequest,
    SoftwareRenderer,
    check_resolution,
    export_filename,
    fit_to_box,
    write_png,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneState:
    """Immutable snapshot of everything needed to draw a frame.

    Attributes
    ----------
    parameters : Parameters
    transform : SceneTransform
    raster : Optional[RasterImage]
    texture : Optional[EnhancedImage]
    normal_map : Optional[NormalMap]
    generation : int
        Incremented on every publish.
    """

    parameters: Parameters
    transform: SceneTransform
    raster: Optional[RasterImage] = None
    texture: Optional[EnhancedImage] = None
    normal_map: Optional[NormalMap] = None
    generation: int = 0

    @property
    def ready(self) -> bool:
        """Whether a texture exists to render."""
        return self.texture is not None and self.normal_map is not None


class SceneCompositor:
    """Validate parameters, run the pipelines and render frames.

    Parameters
    ----------
    parameters : Optional[Parameters]
        Initial parameters. Must lie inside the configured bounds.
    config : Optional[AerialConfig]
        Scene constants.
    renderer : Optional[Renderer]
        Frame renderer. Defaults to a SoftwareRenderer.

    Raises
    ------
    OutOfBounds
        If the initial camera position is outside the valid region.
    InvalidParameter
        If the initial altitude is below ``config.alt_min``.
    """

    def __init__(
        self,
        parameters: Optional[Parameters] = None,
        config: Optional[AerialConfig] = None,
        renderer: Optional[Renderer] = None,
    ) -> None:
        self._config = config or AerialConfig()
        self._renderer = renderer or SoftwareRenderer(self._config)
        self._pipeline = EnhancementPipeline(self._config)
        self._write_lock = threading.RLock()
        self._loader: Optional[RasterLoader] = None
        self._last_error: Optional[AerialViewError] = None

        parameters = parameters or Parameters()
        self._validate(parameters)
        self._state = SceneState(
            parameters=parameters,
            transform=compute_scene_transform(parameters, self._config),
        )

    # --- Accessors ---

    @property
    def config(self) -> AerialConfig:
        return self._config

    @property
    def state(self) -> SceneState:
        """The current published snapshot."""
        return self._state

    @property
    def last_error(self) -> Optional[AerialViewError]:
        """Most recent recoverable error, or None."""
        return self._last_error

    # --- Updates ---

    def update_parameters(self, parameters: Parameters) -> SceneState:
        """Apply new parameters and publish a new state.

        The texture is rebuilt only when the enhancement settings
        changed and a raster is loaded.

        Parameters
        ----------
        parameters : Parameters

        Returns
        -------
        SceneState
            The newly published state.

        Raises
        ------
        OutOfBounds
            If latitude/longitude fall outside the valid region. The
            current state is left untouched.
        InvalidParameter
            If altitude is below the configured ``alt_min``. The current
            state is left untouched.
        """
        with self._write_lock:
            try:
                self._validate(parameters)
            except (OutOfBounds, InvalidParameter) as e:
                self._last_error = e
                raise

            current = self._state
            changes = {
                'parameters': parameters,
                'transform': compute_scene_transform(parameters, self._config),
            }
            if (current.raster is not None
                    and parameters.enhancement != current.parameters.enhancement):
                texture, normal_map = self._pipeline.run(
                    current.raster, parameters.enhancement,
                )
                changes['texture'] = texture
                changes['normal_map'] = normal_map
            self._last_error = None
            return self._publish(**changes)

    def set_raster(self, raster: RasterImage) -> SceneState:
        """Build texture and normal map for a new raster and publish.

        Parameters
        ----------
        raster : RasterImage

        Returns
        -------
        SceneState
        """
        with self._write_lock:
            enhancement = self._state.parameters.enhancement
            texture, normal_map = self._pipeline.run(raster, enhancement)
            return self._publish(
                raster=raster, texture=texture, normal_map=normal_map,
            )

    def load(self, source: RasterSourceLike) -> Future:
        """Load a raster in the background; the newest request wins.

        A decode failure is recorded in :attr:`last_error` and the
        current image stays in place.

        Parameters
        ----------
        source : str, Path or bytes
            File path, ``http(s)`` URL or encoded bytes.

        Returns
        -------
        concurrent.futures.Future
            Resolves to the :class:`LoadResult`.
        """
        if self._loader is None:
            self._loader = RasterLoader(
                self._on_load_result,
                timeout=self._config.fetch_timeout,
                max_workers=self._config.max_workers,
            )
        return self._loader.load(source)

    def shutdown(self) -> None:
        """Cancel pending loads and stop the loader threads."""
        if self._loader is not None:
            self._loader.shutdown(wait=True)
            self._loader = None

    # --- Rendering ---

    def render(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> np.ndarray:
        """Render the current state at any resolution.

        Uses the live camera pose and field of view; only the aspect
        ratio follows the requested size. The published state is not
        modified.

        Parameters
        ----------
        width : Optional[int]
            Output width. Defaults to the intrinsic output width.
        height : Optional[int]
            Output height. Defaults to the intrinsic output height.

        Returns
        -------
        np.ndarray
            (height, width, 4) uint8 frame.

        Raises
        ------
        InvalidResolution
            If a dimension is not positive.
        NotReady
            If no texture has been built yet.
        """
        state = self._state
        intr = state.parameters.intrinsics
        width = intr.output_width if width is None else width
        height = intr.output_height if height is None else height
        check_resolution(width, height)

        if not state.ready:
            raise NotReady("No image loaded; load a raster before rendering")

        transform = dataclasses.replace(state.transform, aspect=width / height)
        request = RenderRequest(
            texture=state.texture,
            normal_map=state.normal_map,
            transform=transform,
            width=width,
            height=height,
            curvature=state.parameters.enhancement.curvature,
        )
        return self._renderer.render(request)

    def preview(self) -> np.ndarray:
        """Render fitted inside the configured preview box."""
        intr = self._state.parameters.intrinsics
        width, height = fit_to_box(
            intr.output_width, intr.output_height, self._config.preview_size,
        )
        return self.render(width, height)

    def export(
        self,
        directory: Union[str, Path] = ".",
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> Path:
        """Render and save ``aerial_view_{W}x{H}.png`` into ``directory``.

        Returns
        -------
        Path
            The written file.
        """
        state = self._state
        intr = state.parameters.intrinsics
        width = intr.output_width if width is None else width
        height = intr.output_height if height is None else height
        frame = self.render(width, height)
        return write_png(frame, Path(directory) / export_filename(width, height))

    # --- Internal ---

    def _validate(self, parameters: Parameters) -> None:
        ext = parameters.extrinsics
        if ext.altitude < self._config.alt_min:
            raise InvalidParameter(
                f"altitude must be >= {self._config.alt_min}, "
                f"got {ext.altitude!r}"
            )
        if not self._config.in_bounds(ext.latitude, ext.longitude):
            logger.warning(
                "Camera position (%s, %s) outside valid region",
                ext.latitude, ext.longitude,
            )
            raise OutOfBounds(
                f"Latitude {ext.latitude} / longitude {ext.longitude} outside "
                f"the valid region lat {self._config.lat_bounds}, "
                f"lon {self._config.lon_bounds}"
            )

    def _publish(self, **changes) -> SceneState:
        with self._write_lock:
            new_state = dataclasses.replace(
                self._state,
                generation=self._state.generation + 1,
                **changes,
            )
            self._state = new_state
        logger.debug("Published scene state %d", new_state.generation)
        return new_state

    def _on_load_result(self, result: LoadResult) -> None:
        loader = self._loader
        if result.error is not None:
            with self._write_lock:
                if loader is not None and not loader.is_current(result.generation):
                    return
                self._last_error = result.error
            logger.error("Raster load failed, keeping current image: %s",
                         result.error)
            return

        # Enhance outside the lock; publish only if still the newest load
        enhancement = self._state.parameters.enhancement
        texture, normal_map = self._pipeline.run(result.image, enhancement)
        with self._write_lock:
            if loader is not None and not loader.is_current(result.generation):
                logger.debug("Dropping superseded raster load %d",
                             result.generation)
                return
            current = self._state.parameters.enhancement
            if current != enhancement:
                texture, normal_map = self._pipeline.run(result.image, current)
            self._last_error = None
            self._publish(
                raster=result.image, texture=texture, normal_map=normal_map,
            )


__all__ = ["SceneState", "SceneCompositor"]
