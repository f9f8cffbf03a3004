"""Tests for window <-> canvas conversion."""

import itertools
import unittest

from Canvas import Canvas
from Geometry import Point


class TestCanvas(unittest.TestCase):

    def test_inverse_law(self):
        sizes   = [(640, 480), (1920, 1080), (1, 1), (333, 777)]
        offsets = [Point(0, 0), Point(12.5, 40)]
        ratios  = [1.0, 2.0, 1.25]
        points  = [Point(0, 0), Point(100.5, 33.25), Point(-40, 2000), Point(1919, 1079)]

        for (w, h), offset, ratio, p in itertools.product(sizes, offsets, ratios, points):
            canvas = Canvas(w, h, offset, ratio)
            back = canvas.canvas_to_window_point(canvas.window_to_canvas_point(p))
            self.assertAlmostEqual(back.x, p.x, places=9)
            self.assertAlmostEqual(back.y, p.y, places=9)

    def test_centre_is_origin(self):
        canvas = Canvas(800, 600, offset=Point(10, 20), pixels_per_unit=100.0)
        self.assertEqual(canvas.window_to_canvas_point(Point(410, 320)), Point(0, 0))
        self.assertEqual(canvas.window_to_canvas_point(Point(510, 220)), Point(1, -1))

    def test_scalar(self):
        canvas = Canvas(800, 600, pixels_per_unit=50.0)
        self.assertEqual(canvas.window_to_canvas_scalar(25.0), 0.5)
        self.assertEqual(canvas.canvas_to_window_scalar(0.5), 25.0)

    def test_extent_and_framebuffer(self):
        canvas = Canvas(960, 480, pixel_ratio=2.0, pixels_per_unit=96.0)
        self.assertEqual(canvas.extent, (10.0, 5.0))
        self.assertEqual(canvas.framebuffer_size, (1920, 960))

        canvas.resize(480, 240)
        self.assertEqual(canvas.extent, (5.0, 2.5))
        self.assertEqual(canvas.framebuffer_size, (960, 480))
