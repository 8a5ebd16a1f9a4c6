# -*- coding: utf-8 -*-
"""
Tests for aerialview.core.sharpen — unsharp mask and edge enhancement.

Author
------
Steven Siebert

Created
-------
2026-10-19
"""

import numpy as np
import pytest

from aerialview.core.sharpen import UNSHARP_KERNEL, sharpen, unsharp_kernel


@pytest.fixture
def image():
    rng = np.random.default_rng(7)
    img = rng.integers(0, 256, (8, 9, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img


class TestIdentity:
    def test_neutral_settings_return_input(self, image):
        out = sharpen(image, sharpness=1.0, edge_enhancement=0.0)
        np.testing.assert_array_equal(out, image)

    def test_neutral_settings_skip_convolution(self, image):
        assert sharpen(image, 1.0, 0.0) is image

    def test_low_sharpness_is_identity(self, image):
        assert sharpen(image, sharpness=0.5, edge_enhancement=0.0) is image


class TestKernel:
    def test_base_kernel(self):
        np.testing.assert_allclose(unsharp_kernel(1.0), UNSHARP_KERNEL)

    def test_centre_weight_grows(self):
        assert unsharp_kernel(3.0)[1, 1] == pytest.approx(1.8 + 0.6)

    def test_base_kernel_sums_to_one(self):
        assert UNSHARP_KERNEL.sum() == pytest.approx(1.0)


class TestSharpen:
    def test_border_preserved(self, image):
        out = sharpen(image, sharpness=3.0, edge_enhancement=1.0)
        np.testing.assert_array_equal(out[0], image[0])
        np.testing.assert_array_equal(out[-1], image[-1])
        np.testing.assert_array_equal(out[:, 0], image[:, 0])
        np.testing.assert_array_equal(out[:, -1], image[:, -1])

    def test_alpha_preserved(self, image):
        out = sharpen(image, sharpness=2.0)
        np.testing.assert_array_equal(out[..., 3], image[..., 3])

    def test_interior_value_matches_kernel(self):
        img = np.full((3, 3, 4), 100, dtype=np.uint8)
        img[1, 1, :3] = 120
        out = sharpen(img, sharpness=2.0)
        # centre 2.1 * 120 - 0.2 * 4 * 100 = 172
        np.testing.assert_array_equal(out[1, 1, :3], 172)

    def test_peak_amplified(self):
        img = np.full((5, 5, 4), 100, dtype=np.uint8)
        img[2, 2, :3] = 150
        out = sharpen(img, sharpness=2.0)
        assert out[2, 2, 0] > 150
        # 4-neighbour of the peak ends up below the flat interior level
        assert out[1, 2, 0] < out[1, 1, 0]

    def test_edge_term_added(self):
        img = np.full((3, 3, 4), 100, dtype=np.uint8)
        img[1, 1, :3] = 110
        out = sharpen(img, sharpness=1.0, edge_enhancement=1.0)
        # Laplacian = 8 * 110 - 8 * 100 = 80, * 0.25 = 20
        np.testing.assert_array_equal(out[1, 1, :3], 130)

    def test_negative_edge_response_clamped_to_zero(self):
        img = np.full((3, 3, 4), 100, dtype=np.uint8)
        img[1, 1, :3] = 90
        out = sharpen(img, sharpness=1.0, edge_enhancement=1.0)
        np.testing.assert_array_equal(out[1, 1, :3], 90)

    def test_output_clamped(self):
        img = np.zeros((3, 3, 4), dtype=np.uint8)
        img[1, 1, :3] = 255
        out = sharpen(img, sharpness=5.0, edge_enhancement=4.0)
        assert out.dtype == np.uint8
        assert out[1, 1, 0] == 255

    def test_input_not_modified(self, image):
        before = image.copy()
        sharpen(image, sharpness=2.0, edge_enhancement=1.0)
        np.testing.assert_array_equal(image, before)

    def test_tiny_image_unchanged(self):
        img = np.full((2, 2, 4), 50, dtype=np.uint8)
        np.testing.assert_array_equal(sharpen(img, 3.0, 1.0), img)
