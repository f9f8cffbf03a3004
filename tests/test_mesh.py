"""Tests for plane tessellation and the vertex store."""

import unittest

import numpy as np
import pytest

from Errors import ConfigurationError
from Mesh import (FLOATS_PER_VERTEX, TRIANGLES, VERTEX_STRIDE, Plane, Primitive,
                  VertexStore, build_plane_vertices)


class TestBuildPlaneVertices(unittest.TestCase):

    def test_vertex_count(self):
        for r in (1, 2, 3, 8):
            vertices = build_plane_vertices(r)
            self.assertEqual(vertices.shape, (6 * r * r, FLOATS_PER_VERTEX))
            self.assertEqual(vertices.dtype, np.float32)

    def test_layout_stride(self):
        self.assertEqual(VERTEX_STRIDE, 48)

    def test_uvs_in_unit_square(self):
        uv = build_plane_vertices(5)[:, 2:4]
        self.assertTrue(np.all(uv >= 0.0))
        self.assertTrue(np.all(uv <= 1.0))

    def test_position_is_remapped_uv(self):
        vertices = build_plane_vertices(4)
        np.testing.assert_allclose(vertices[:, 0:2], vertices[:, 2:4] * 2.0 - 1.0, atol=1e-6)
        self.assertAlmostEqual(float(vertices[:, 0].min()), -1.0)
        self.assertAlmostEqual(float(vertices[:, 0].max()), 1.0)

    def test_single_quad_winding(self):
        uv = build_plane_vertices(1)[:, 2:4].tolist()
        nw, sw, se, ne = [0, 0], [0, 1], [1, 1], [1, 0]
        self.assertEqual(uv, [nw, sw, se, nw, se, ne])

    def test_winding_is_consistent(self):
        positions = build_plane_vertices(3)[:, 0:2].astype(np.float64).reshape(-1, 3, 2)
        a, b, c = positions[:, 0], positions[:, 1], positions[:, 2]
        cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
        self.assertTrue(np.all(cross < 0) or np.all(cross > 0))

    def test_cells_tile_without_gaps(self):
        r = 4
        uv = build_plane_vertices(r)[:, 2:4].astype(np.float64).reshape(-1, 3, 2)
        a, b, c = uv[:, 0], uv[:, 1], uv[:, 2]
        areas = np.abs((b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])) / 2
        # Total area covers the unit square exactly, with every triangle the same size
        self.assertAlmostEqual(float(areas.sum()), 1.0, places=6)
        np.testing.assert_allclose(areas, 1.0 / (2 * r * r), rtol=1e-5)

        # Neighbouring cells share edge coordinates exactly
        grid = set(np.round(uv.reshape(-1, 2) * r, 6).ravel().tolist())
        self.assertEqual(grid, set(float(i) for i in range(r + 1)))

    def test_border_weight(self):
        vertices = build_plane_vertices(2)
        uv     = vertices[:, 2:4]
        border = np.any((uv == 0.0) | (uv == 1.0), axis=1)
        np.testing.assert_array_equal(vertices[:, 8], border.astype(np.float32))
        np.testing.assert_array_equal(vertices[:, 9:12], 0.0)
        np.testing.assert_array_equal(vertices[:, 4:8], 1.0)

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            build_plane_vertices(0)


class TestVertexStore(unittest.TestCase):

    def test_planes_occupy_consecutive_ranges(self):
        store = VertexStore(100)
        a = store.new_plane(1, 1, 1)
        b = store.new_plane(2, 3, 2)

        self.assertEqual(a, Plane(1, 1, Primitive(TRIANGLES, 0, 6)))
        self.assertEqual(b.primitive, Primitive(TRIANGLES, 6, 24))
        self.assertEqual((b.width, b.height), (2, 3))
        self.assertEqual(store.written, 30)
        np.testing.assert_array_equal(store.data[6:30], build_plane_vertices(2))

    def test_capacity_is_fixed(self):
        store = VertexStore(12)
        store.new_plane(1, 1, 1)
        store.new_plane(1, 1, 1)
        with pytest.raises(ConfigurationError):
            store.new_plane(1, 1, 1)
        self.assertEqual(store.written, 12)
        self.assertEqual(store.data.shape[0], 12)

    def test_overflow_leaves_store_untouched(self):
        store = VertexStore(10)
        with pytest.raises(ConfigurationError):
            store.new_plane(1, 1, 2)
        self.assertEqual(store.written, 0)
        self.assertEqual(store.nbytes, 10 * VERTEX_STRIDE)
