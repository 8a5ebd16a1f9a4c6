# -*- coding: utf-8 -*-
"""
Tests for aerialview.core.normals — luminance normal maps.

Author
------
Steven Siebert

Created
-------
2026-10-19
"""

import numpy as np
import pytest

from aerialview.core.normals import (
    decode_normals,
    encode_normals,
    generate_normal_map,
    luminance,
)


def _rgba(h, w, value):
    img = np.zeros((h, w, 4), dtype=np.uint8)
    img[..., :3] = value
    img[..., 3] = 255
    return img


class TestLuminance:
    def test_weights(self):
        img = np.zeros((1, 3, 4), dtype=np.uint8)
        img[0, 0, 0] = 255
        img[0, 1, 1] = 255
        img[0, 2, 2] = 255
        np.testing.assert_allclose(luminance(img)[0], [0.3, 0.59, 0.11])

    def test_white_is_one(self):
        assert luminance(_rgba(1, 1, 255))[0, 0] == pytest.approx(1.0)


class TestGenerateNormalMap:
    @pytest.mark.parametrize("value", [0, 90, 255])
    def test_flat_image_points_up(self, value):
        normals = generate_normal_map(_rgba(6, 5, value), strength=1.0)
        np.testing.assert_array_equal(normals[..., 0], 127)
        np.testing.assert_array_equal(normals[..., 1], 127)
        np.testing.assert_array_equal(normals[..., 2], 255)
        np.testing.assert_array_equal(normals[..., 3], 255)

    def test_zero_strength_does_not_fail(self):
        img = _rgba(4, 4, 0)
        img[:, 2:, :3] = 255
        normals = generate_normal_map(img, strength=0.0)
        # Epsilon strength makes dz dominate: nearly straight up
        assert normals[..., 2].min() >= 254

    def test_horizontal_ramp_tilts_x(self):
        img = np.zeros((5, 8, 4), dtype=np.uint8)
        img[..., :3] = (np.arange(8) * 30)[None, :, None]
        img[..., 3] = 255
        normals = decode_normals(generate_normal_map(img, strength=2.0))
        interior = normals[1:-1, 1:-1]
        assert (interior[..., 0] > 0.1).all()
        np.testing.assert_allclose(interior[..., 1], 0.0, atol=1 / 127.5)

    def test_stronger_relief_tilts_more(self):
        img = np.zeros((5, 8, 4), dtype=np.uint8)
        img[..., :3] = (np.arange(8) * 30)[None, :, None]
        img[..., 3] = 255
        weak = decode_normals(generate_normal_map(img, strength=0.5))
        strong = decode_normals(generate_normal_map(img, strength=4.0))
        assert strong[2, 3, 2] < weak[2, 3, 2]

    def test_vectors_unit_length(self):
        rng = np.random.default_rng(3)
        img = rng.integers(0, 256, (10, 10, 4), dtype=np.uint8)
        decoded = decode_normals(generate_normal_map(img, strength=1.5))
        lengths = np.linalg.norm(decoded, axis=-1)
        np.testing.assert_allclose(lengths, 1.0, atol=0.02)

    def test_same_shape(self):
        out = generate_normal_map(_rgba(3, 7, 10))
        assert out.shape == (3, 7, 4)
        assert out.dtype == np.uint8

    def test_rejects_2d(self):
        with pytest.raises(ValueError):
            generate_normal_map(np.zeros((4, 4), dtype=np.uint8))


class TestEncoding:
    def test_encode_extremes(self):
        vec = np.array([[[-1.0, 0.0, 1.0]]])
        np.testing.assert_array_equal(encode_normals(vec), [[[0, 127, 255]]])
