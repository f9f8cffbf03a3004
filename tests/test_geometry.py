"""Tests for the geometry kernel."""

import unittest

import numpy as np
import pytest

from Errors import ConfigurationError
from Geometry import (Point, adjugate, model_matrix, orthographic, scaling,
                      transform_point, translation)


class TestPoint(unittest.TestCase):

    def test_arithmetic(self):
        a = Point(1.0, 2.0)
        b = Point(0.5, -1.0)
        self.assertEqual(a + b, Point(1.5, 1.0))
        self.assertEqual(a - b, Point(0.5, 3.0))
        self.assertEqual(a.scale(2.0), Point(2.0, 4.0))
        # Inputs are untouched
        self.assertEqual(a, Point(1.0, 2.0))

    def test_immutable(self):
        p = Point(1.0, 2.0)
        with self.assertRaises(AttributeError):
            p.x = 3.0

    def test_remap(self):
        p = Point.remap(Point(0.25, 0.75), Point(0, 0), Point(1, 1), Point(-1, -1), Point(1, 1))
        self.assertAlmostEqual(p.x, -0.5)
        self.assertAlmostEqual(p.y, 0.5)


class TestMatrices(unittest.TestCase):

    def test_adjugate_is_det_times_inverse(self):
        m = np.array([
            [2.0, 1.0, 0.5],
            [0.0, 3.0, 1.0],
            [1.0, 0.0, 4.0],
        ])
        np.testing.assert_allclose(adjugate(m), np.linalg.det(m) * np.linalg.inv(m), atol=1e-12)

    def test_adjugate_of_singular_is_finite(self):
        m = np.array([
            [1.0, 2.0, 3.0],
            [2.0, 4.0, 6.0],
            [1.0, 1.0, 1.0],
        ])
        adj = adjugate(m)
        self.assertTrue(np.all(np.isfinite(adj)))
        np.testing.assert_allclose(m @ adj, np.zeros((3, 3)), atol=1e-12)

    def test_translation_accepts_point(self):
        np.testing.assert_array_equal(translation(Point(3, 4)), translation(3, 4))
        self.assertEqual(transform_point(translation(3, 4), Point(1, 1)), Point(4, 5))

    def test_model_matrix_composition_order(self):
        origin = Point(8.0, -4.0)
        scale  = 2.0
        m = model_matrix(origin, scale)

        expected = translation(1.0, -0.5) @ scaling(2.0) @ translation(0.5, 0.5)
        np.testing.assert_allclose(m, expected)

        # The mesh corner (-1, -1) is shifted, then scaled, then offset by origin/(4*scale)
        p = transform_point(m, Point(-1.0, -1.0))
        self.assertAlmostEqual(p.x, (-1.0 + 0.5) * 2.0 + 1.0)
        self.assertAlmostEqual(p.y, (-1.0 + 0.5) * 2.0 - 0.5)

    def test_model_matrix_order_matters(self):
        origin = Point(8.0, -4.0)
        reordered = translation(0.5, 0.5) @ scaling(2.0) @ translation(1.0, -0.5)
        self.assertFalse(np.allclose(model_matrix(origin, 2.0), reordered))

    def test_model_matrix_zero_scale_does_not_raise(self):
        m = model_matrix(Point(1.0, 1.0), 0.0)
        self.assertFalse(np.all(np.isfinite(m)))

    def test_orthographic_maps_canvas_corners(self):
        proj = orthographic(8.0, 4.0)
        top_left     = transform_point(proj, Point(-4.0, -2.0))
        bottom_right = transform_point(proj, Point(4.0, 2.0))
        # y points down in canvas space, up in NDC
        self.assertAlmostEqual(top_left.x, -1.0)
        self.assertAlmostEqual(top_left.y, 1.0)
        self.assertAlmostEqual(bottom_right.x, 1.0)
        self.assertAlmostEqual(bottom_right.y, -1.0)

    def test_orthographic_depth_keeps_flat_content_inside_clip(self):
        proj = orthographic(8.0, 4.0)
        z = (proj @ np.array([0.0, 0.0, 0.0, 1.0]))[2]
        self.assertAlmostEqual(z, 0.0)

    def test_orthographic_zero_extent(self):
        with pytest.raises(ConfigurationError):
            orthographic(0, 10)
        with pytest.raises(ConfigurationError):
            orthographic(10, 0)
