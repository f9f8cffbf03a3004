"""Tests for the reference grid and pattern loading."""

import unittest
import tempfile

from pathlib  import Path
from PIL      import Image

from Textures import CENTRE_LINE, MAJOR_LINE, BACKGROUND, load_pattern_image, reference_grid_image


class TestTextures(unittest.TestCase):

    def test_reference_grid(self):
        img = reference_grid_image()
        self.assertEqual(img.mode, 'RGBA')
        self.assertEqual(img.size, (1024, 1024))

        self.assertEqual(img.getpixel((0, 0)),     MAJOR_LINE)
        self.assertEqual(img.getpixel((16, 16)),   BACKGROUND)
        self.assertEqual(img.getpixel((512, 512)), CENTRE_LINE)
        self.assertEqual(img.getpixel((512, 100)), CENTRE_LINE)

    def test_small_grid(self):
        img = reference_grid_image(size=64, cells=4, major_every=2)
        self.assertEqual(img.size, (64, 64))
        self.assertEqual(img.getpixel((63, 8)), MAJOR_LINE)

    def test_load_pattern(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "pattern.png"
            Image.new('RGB', (20, 10), (10, 20, 30)).save(path)

            pattern = load_pattern_image(path)
            self.assertEqual(pattern.mode, 'RGBA')
            self.assertEqual(pattern.size, (20, 10))
            self.assertEqual(pattern.getpixel((5, 5)), (10, 20, 30, 255))

    def test_missing_pattern(self):
        with self.assertRaises(FileNotFoundError):
            load_pattern_image("/nonexistent/pattern.png")


if __name__ == '__main__':
    unittest.main()
