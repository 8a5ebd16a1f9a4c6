# -*- coding: utf-8 -*-
"""
Tests for aerialview.core.compositor — state publication, bounds,
readiness, export isolation and background loading.

Author
------
Steven Siebert

Created
-------
2026-10-19
"""

from unittest.mock import MagicMock

import numpy as np
import pytest

from aerialview.core.compositor import SceneCompositor, SceneState
from aerialview.core.config import AerialConfig
from aerialview.core.exceptions import (
    DecodeFailure,
    ErrorKind,
    InvalidParameter,
    InvalidResolution,
    NotReady,
    OutOfBounds,
)
from aerialview.core.parameters import Parameters
from aerialview.core.raster import LoadResult, RasterImage, decode_raster


@pytest.fixture
def compositor():
    comp = SceneCompositor()
    yield comp
    comp.shutdown()


@pytest.fixture
def loaded(compositor, gradient_raster):
    compositor.set_raster(gradient_raster)
    return compositor


# ---------------------------------------------------------------------------
# Construction and readiness
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_initial_state(self, compositor):
        state = compositor.state
        assert isinstance(state, SceneState)
        assert state.generation == 0
        assert not state.ready
        assert state.parameters == Parameters()

    def test_initial_out_of_bounds(self):
        with pytest.raises(OutOfBounds):
            SceneCompositor(Parameters().replace(latitude=40.0))

    def test_render_before_load(self, compositor):
        with pytest.raises(NotReady):
            compositor.render()

    def test_resolution_checked_before_readiness(self, compositor):
        with pytest.raises(InvalidResolution):
            compositor.render(0, 480)

    def test_export_before_load(self, compositor, tmp_path):
        with pytest.raises(NotReady):
            compositor.export(tmp_path)
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Parameter updates
# ---------------------------------------------------------------------------

class TestUpdateParameters:
    def test_publishes_new_state(self, compositor):
        params = Parameters().replace(pan=45.0)
        state = compositor.update_parameters(params)
        assert compositor.state is state
        assert state.generation == 1
        assert state.parameters == params

    def test_transform_recomputed(self, compositor):
        before = compositor.state.transform
        compositor.update_parameters(Parameters().replace(altitude=900.0))
        assert compositor.state.transform.scale < before.scale

    def test_out_of_bounds_keeps_state(self, loaded):
        before = loaded.state
        with pytest.raises(OutOfBounds) as exc:
            loaded.update_parameters(Parameters().replace(longitude=80.0))
        assert exc.value.kind is ErrorKind.OUT_OF_BOUNDS
        assert loaded.state is before
        assert loaded.last_error is exc.value

    def test_valid_update_clears_error(self, loaded):
        with pytest.raises(OutOfBounds):
            loaded.update_parameters(Parameters().replace(latitude=13.5))
        loaded.update_parameters(Parameters().replace(pan=10.0))
        assert loaded.last_error is None

    def test_camera_change_keeps_texture(self, loaded):
        texture = loaded.state.texture
        loaded.update_parameters(Parameters().replace(tilt=-30.0))
        assert loaded.state.texture is texture

    def test_enhancement_change_rebuilds_texture(self, loaded):
        texture = loaded.state.texture
        loaded.update_parameters(Parameters().replace(brightness=0.5))
        assert loaded.state.texture is not texture
        assert loaded.state.texture != texture

    def test_enhancement_without_raster(self, compositor):
        state = compositor.update_parameters(Parameters().replace(contrast=2.0))
        assert not state.ready

    def test_lower_configured_altitude_floor(self):
        comp = SceneCompositor(config=AerialConfig(alt_min=1.0))
        state = comp.update_parameters(Parameters().replace(altitude=5.0))
        assert state.parameters.extrinsics.altitude == 5.0

    def test_higher_configured_altitude_floor(self, gradient_raster):
        comp = SceneCompositor(config=AerialConfig(alt_min=50.0))
        comp.set_raster(gradient_raster)
        before = comp.state
        with pytest.raises(InvalidParameter) as exc:
            comp.update_parameters(Parameters().replace(altitude=20.0))
        assert exc.value.kind is ErrorKind.INVALID_PARAMETER
        assert comp.state is before
        assert comp.last_error is exc.value

    def test_initial_altitude_below_configured_floor(self):
        with pytest.raises(InvalidParameter):
            SceneCompositor(Parameters().replace(altitude=20.0),
                            config=AerialConfig(alt_min=50.0))


# ---------------------------------------------------------------------------
# Rendering and export
# ---------------------------------------------------------------------------

class TestRender:
    def test_default_size(self, loaded):
        frame = loaded.render()
        assert frame.shape == (480, 640, 4)

    def test_preview_fits_box(self, loaded):
        frame = loaded.preview()
        assert frame.shape == (300, 400, 4)

    def test_export_writes_named_file(self, loaded, tmp_path):
        path = loaded.export(tmp_path, 96, 54)
        assert path == tmp_path / "aerial_view_96x54.png"
        assert path.exists()

    @pytest.mark.parametrize("width,height", [(1920, 1080), (192, 108)])
    def test_export_does_not_touch_state(self, loaded, tmp_path, width, height):
        before = loaded.state
        path = loaded.export(tmp_path, width, height)
        assert path.name == f"aerial_view_{width}x{height}.png"
        assert loaded.state is before
        assert loaded.state == before
        assert loaded.state.transform.aspect == pytest.approx(640 / 480)

    def test_export_matches_preview_pose(self, tmp_path):
        renderer = MagicMock()
        renderer.render.return_value = np.zeros((108, 192, 4), dtype=np.uint8)
        comp = SceneCompositor(renderer=renderer)
        comp.set_raster(_raster())
        comp.export(tmp_path, 192, 108)
        request = renderer.render.call_args[0][0]
        live = comp.state.transform
        assert request.width == 192 and request.height == 108
        assert request.transform.aspect == pytest.approx(192 / 108)
        assert request.transform.position == live.position
        assert request.transform.rotation == live.rotation
        assert request.transform.fov_degrees == live.fov_degrees

    def test_non_default_output_size_looks_at_centre(self):
        bands = [np.full(64, v, dtype=np.uint8) for v in (50, 60, 70)]
        comp = SceneCompositor(
            Parameters().replace(output_width=1920, output_height=1080)
        )
        comp.set_raster(RasterImage(8, 8, bands))
        frame = comp.render(192, 108)
        backdrop = comp.config.backdrop_color
        assert tuple(frame[54, 96, :3]) != backdrop
        assert frame[54, 96, 0] < frame[54, 96, 2]

    def test_blackout_frame(self, loaded):
        loaded.update_parameters(Parameters().replace(altitude=4000.0))
        frame = loaded.render(32, 24)
        assert (frame[..., :3] == 0).all()

    def test_curvature_forwarded(self, tmp_path):
        renderer = MagicMock()
        renderer.render.return_value = np.zeros((2, 2, 4), dtype=np.uint8)
        comp = SceneCompositor(Parameters().replace(curvature=3.0),
                               renderer=renderer)
        comp.set_raster(_raster())
        comp.render(2, 2)
        assert renderer.render.call_args[0][0].curvature == 3.0


def _raster():
    return RasterImage(4, 4, [np.arange(16, dtype=np.float64)])


# ---------------------------------------------------------------------------
# Background loading
# ---------------------------------------------------------------------------

class TestLoad:
    def test_load_bytes(self, compositor, rgb_tiff_bytes):
        result = compositor.load(rgb_tiff_bytes).result(timeout=10)
        assert result.ok
        state = compositor.state
        assert state.ready
        assert state.raster is result.image
        assert state.texture.width == 16

    def test_decode_failure_keeps_image(self, loaded):
        before = loaded.state
        result = loaded.load(b"garbage").result(timeout=10)
        assert isinstance(result.error, DecodeFailure)
        assert loaded.state is before
        assert loaded.last_error is result.error

    def test_uses_config_timeout(self, monkeypatch, rgb_tiff_bytes):
        seen = {}

        def fake_read(source, timeout):
            seen['timeout'] = timeout
            return decode_raster(source)

        monkeypatch.setattr("aerialview.core.raster.read_raster", fake_read)
        comp = SceneCompositor(config=AerialConfig(fetch_timeout=2.5))
        try:
            comp.load(rgb_tiff_bytes).result(timeout=10)
        finally:
            comp.shutdown()
        assert seen['timeout'] == 2.5

    def test_superseded_result_not_published(self, compositor, rgb_tiff_bytes):
        compositor.load(rgb_tiff_bytes).result(timeout=10)
        old_generation = compositor._loader.generation
        compositor.load(rgb_tiff_bytes).result(timeout=10)
        before = compositor.state

        compositor._on_load_result(LoadResult(old_generation, image=_raster()))

        assert compositor.state is before

    def test_superseded_failure_not_recorded(self, compositor, rgb_tiff_bytes):
        compositor.load(rgb_tiff_bytes).result(timeout=10)
        old_generation = compositor._loader.generation
        compositor.load(rgb_tiff_bytes).result(timeout=10)

        compositor._on_load_result(
            LoadResult(old_generation, error=DecodeFailure("late"))
        )

        assert compositor.last_error is None
