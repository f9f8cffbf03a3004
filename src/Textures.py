
#
# Texture sources.  These only produce Pillow images; Renderer.create_texture()
#   does the upload.
#
import logging

from PIL     import Image, ImageDraw
from pathlib import Path

logger = logging.getLogger(__name__)

GRID_SIZE        = 1024
GRID_CELLS       = 32
GRID_MAJOR_EVERY = 4

BACKGROUND  = (255, 255, 255, 255)
MINOR_LINE  = (160, 160, 160, 255)
MAJOR_LINE  = (  0,   0,   0, 255)
CENTRE_LINE = (200,  30,  30, 255)


def reference_grid_image(size=GRID_SIZE, cells=GRID_CELLS, major_every=GRID_MAJOR_EVERY):
    """The calibration ruler: a square grid with a heavier line every major_every
        cells and a red cross through the centre.
    """
    img  = Image.new('RGBA', (size, size), BACKGROUND)
    draw = ImageDraw.Draw(img)

    for i in range(cells + 1):
        # Clamp so the last line lands inside the image
        at     = min(size - 1, round(i * size / cells))
        major  = i % major_every == 0
        colour = MAJOR_LINE if major else MINOR_LINE
        width  = 3 if major else 1
        draw.line([(at, 0), (at, size - 1)], fill=colour, width=width)
        draw.line([(0, at), (size - 1, at)], fill=colour, width=width)

    centre = size // 2
    draw.line([(centre, 0), (centre, size - 1)], fill=CENTRE_LINE, width=3)
    draw.line([(0, centre), (size - 1, centre)], fill=CENTRE_LINE, width=3)

    return img

def load_pattern_image(path):
    "Loads an already rasterized pattern.  Raises FileNotFoundError if it isn't there."
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pattern file {path} not found")

    with Image.open(path) as img:
        pattern = img.convert('RGBA')

    logger.info(f"Loaded pattern {path.name}: {pattern.width}x{pattern.height}")
    return pattern
