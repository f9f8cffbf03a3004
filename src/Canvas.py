
#
# Window <-> canvas coordinate conversion.
#
# Window space is what the windowing system reports for the cursor: logical
#   pixels, origin top-left of the window.  Canvas space is centred on the
#   drawing surface, y down, measured in units of pixels_per_unit window
#   pixels.  Framebuffer pixels are window pixels * pixel_ratio (HiDPI).
#
from Geometry import Point

PIXELS_PER_UNIT = 96.0      # One canvas unit is about an inch on a 96 dpi display.


class Canvas(object):

    def __init__(self, width, height, offset=Point(0, 0), pixel_ratio=1.0, pixels_per_unit=PIXELS_PER_UNIT):
        self.width           = width            # Window pixels
        self.height          = height
        self.offset          = offset           # Where the canvas sits within the window
        self.pixel_ratio     = pixel_ratio
        self.pixels_per_unit = pixels_per_unit

    def resize(self, width, height, pixel_ratio=None):
        self.width  = width
        self.height = height
        if pixel_ratio is not None:
            self.pixel_ratio = pixel_ratio

    @property
    def extent(self):
        "(width, height) in canvas units."
        return (self.width / self.pixels_per_unit, self.height / self.pixels_per_unit)

    @property
    def framebuffer_size(self):
        return (int(round(self.width * self.pixel_ratio)), int(round(self.height * self.pixel_ratio)))

    def _centre(self):
        return Point(self.offset.x + self.width / 2.0, self.offset.y + self.height / 2.0)

    def window_to_canvas_point(self, p):
        return (p - self._centre()).scale(1.0 / self.pixels_per_unit)

    def canvas_to_window_point(self, p):
        return p.scale(self.pixels_per_unit) + self._centre()

    def window_to_canvas_scalar(self, s):
        return s / self.pixels_per_unit

    def canvas_to_window_scalar(self, s):
        return s * self.pixels_per_unit
