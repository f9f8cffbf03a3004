#!/usr/bin/env python3
"""
Pattern Projector - calibrate a projector against a flat surface, then project a
    pattern onto it at true scale.

Calibration mode shows a reference grid.  Drag its four corner handles until
    the projected grid lines up with a real ruler on the surface; drag the centre
    handle and use the wheel to move and scale the grid.  Pattern mode reuses
    that calibration to draw a pattern image instead.

Keys:
    c / p       calibration / pattern mode
    1 - 5       reset a handle (TL, TR, BL, BR, origin)
    r           reset scale
    l           lock / unlock scale
    shift+wheel drag sensitivity
    s / o       save / load calibration
    h           show / hide handle markers
    escape      quit
"""
import argparse
import logging
import os
import sys

from enum     import Enum
from PIL      import Image

import CalibrationFile
import Shaders

from Canvas   import Canvas
from Errors   import ConfigurationError
from Geometry import Point, identity, scaling, translation
from Renderer import DEFAULT_CAPACITY, Renderer
from Textures import load_pattern_image, reference_grid_image
from Viewer   import (DEFAULT_SENSITIVITY, HANDLE_RADIUS, DragState, change_scale, change_sensitivity,
                      model_matrix, new_calibrator, new_projector, projection_matrix, reset_handle, reset_scale)

logger = logging.getLogger("projector")

WINDOW_TITLE          = "Pattern Projector"
WHEEL_UNITS_PER_NOTCH = 100.0       # One scroll notch, in the units change_scale() expects.
GRID_RESOLUTION       = 8
BACKGROUND            = (0.0, 0.0, 0.0, 1.0)


class DisplayMode(Enum):
    CALIBRATION = 'calibration'
    PATTERN     = 'pattern'


class PatternProjector(object):
    """Frame loop glue: routes IO into the viewers and draws one frame at a time.

    Everything runs on the one thread that owns the GL context, so handle
        positions are never read and written concurrently.
    """

    def __init__(self, io, renderer, pattern=None, resolution=GRID_RESOLUTION, state_file=None):
        self.io         = io
        self.renderer   = renderer
        self.state_file = state_file

        self.calibrator   = new_calibrator()
        self.projector    = new_projector()
        self.mode         = DisplayMode.CALIBRATION
        self.viewer       = self.calibrator
        self.drag         = DragState()
        self.sensitivity  = DEFAULT_SENSITIVITY
        self.scale_locked = {DisplayMode.CALIBRATION: False, DisplayMode.PATTERN: False}
        self.show_handles = True

        self.plane_program  = renderer.create_program(Shaders.PLANE_VERTEX,  Shaders.PLANE_FRAGMENT)
        self.handle_program = renderer.create_program(Shaders.HANDLE_VERTEX, Shaders.HANDLE_FRAGMENT)

        if pattern is None:
            pattern = Image.new('RGBA', (1, 1), (255, 255, 255, 255))
        self.grid_texture    = renderer.create_texture(reference_grid_image(), 'grid')
        self.pattern_texture = renderer.create_texture(pattern, 'pattern')

        self.grid_plane   = renderer.new_plane(1, 1, resolution)
        self.handle_plane = renderer.new_plane(1, 1, 1)
        renderer.upload_vertices()

    #
    # Modes and commands
    #

    def set_mode(self, mode):
        if mode == self.mode:
            return
        self.drag.end()
        self.mode   = mode
        self.viewer = self.calibrator if mode == DisplayMode.CALIBRATION else self.projector
        logger.info(f"Mode: {mode.value}")

    def set_pattern(self, image):
        "Called when the pattern source has a new image ready."
        self.pattern_texture = self.renderer.replace_texture('pattern', image)

    def save(self):
        if self.state_file:
            CalibrationFile.save(self.state_file, self.calibrator, self.projector)

    def load(self):
        if self.state_file:
            self.drag.end()
            CalibrationFile.load(self.state_file, self.calibrator, self.projector)

    def handle_key(self, key):
        if key == 'c':
            self.set_mode(DisplayMode.CALIBRATION)
        elif key == 'p':
            self.set_mode(DisplayMode.PATTERN)
        elif len(key) == 1 and key in '12345':
            reset_handle(self.viewer, int(key) - 1)
        elif key == 'r':
            reset_scale(self.viewer)
        elif key == 'l':
            self.scale_locked[self.mode] = not self.scale_locked[self.mode]
            logger.info(f"Scale {'locked' if self.scale_locked[self.mode] else 'unlocked'} ({self.mode.value})")
        elif key == 's':
            self.save()
        elif key == 'o':
            self.load()
        elif key == 'h':
            self.show_handles = not self.show_handles
        elif key == 'escape':
            self.io.quit()

    #
    # Per frame
    #

    def handle_input(self):
        io       = self.io
        renderer = self.renderer

        # A minimised window reports 0x0; keep the last projection until it comes back.
        if io.resized and io.size and all(io.size):
            renderer.resize_canvas(*io.size, pixel_ratio=io.pixel_ratio)

        for key in io.keystrokes:
            self.handle_key(key)

        for action, x, y in io.mouse_events:
            pointer = renderer.window_to_canvas_point(Point(x, y))
            if action == 'press':
                self.drag.begin(self.viewer, pointer, HANDLE_RADIUS)
            elif action == 'release' and self.drag.active:
                self.drag.move(self.viewer, pointer, self.sensitivity)
                self.drag.end()

        if self.drag.active:
            pointer = renderer.window_to_canvas_point(Point(io.mouse_x, io.mouse_y))
            self.drag.move(self.viewer, pointer, self.sensitivity)

        if io.mouse_scroll_y:
            # Wheel down is positive, as in browser wheel events.
            delta_y = -io.mouse_scroll_y * WHEEL_UNITS_PER_NOTCH
            if 'shift' in io.keys_down:
                self.sensitivity = change_sensitivity(self.sensitivity, delta_y)
            else:
                change_scale(self.viewer, delta_y, self.scale_locked[self.mode])

    def render(self):
        renderer = self.renderer
        renderer.clear(BACKGROUND)

        renderer.set_model_matrix(model_matrix(self.viewer))
        renderer.set_view_matrix(projection_matrix(self.calibrator, self.grid_plane))
        renderer.use_program(self.plane_program)
        if self.mode == DisplayMode.CALIBRATION:
            renderer.use_texture(self.grid_texture)
        else:
            renderer.use_texture(self.pattern_texture)
        renderer.draw_primitive(self.grid_plane.primitive)

        if self.show_handles:
            renderer.set_view_matrix(identity())
            renderer.use_program(self.handle_program)
            for handle in self.viewer.handles:
                renderer.set_model_matrix(translation(handle.pos) @ scaling(HANDLE_RADIUS))
                renderer.draw_primitive(self.handle_plane.primitive)

    def run(self):
        io = self.io
        while not io.quitted:
            io.poll_events()
            self.handle_input()
            self.render()
            io.swap_buffers()
            io.clear()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Calibrate a projector with a reference grid, then project a pattern at true scale.")
    parser.add_argument('--pattern',    help="Rasterized pattern image to project in pattern mode")
    parser.add_argument('--size',       type=int, nargs=2, metavar=('WIDTH', 'HEIGHT'), default=(1280, 720),
                        help="Window size (default: %(default)s)")
    parser.add_argument('--fullscreen', action='store_true', help="Open fullscreen on the primary monitor")
    parser.add_argument('--state-file', help="Where calibration is saved and loaded (default: ~/.cache/pattern-projector/calibration.info)")
    parser.add_argument('--resolution', type=int, default=GRID_RESOLUTION, help="Grid plane tessellation per axis (default: %(default)s)")
    parser.add_argument('--capacity',   type=int, default=DEFAULT_CAPACITY, help="Vertex store capacity (default: %(default)s)")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        handlers=[
            logging.StreamHandler(),
        ],
    )

    # Imported here so --help works without the glfw library present.
    from IO_glfw import IO_glfw

    state_file = args.state_file or CalibrationFile.default_state_path()
    pattern    = load_pattern_image(args.pattern) if args.pattern else None

    io       = None
    renderer = None
    try:
        io = IO_glfw()
        io.set_size(tuple(args.size), WINDOW_TITLE, args.fullscreen)

        canvas   = Canvas(*io.size, pixel_ratio=io.pixel_ratio)
        renderer = Renderer(canvas, args.capacity)
        app      = PatternProjector(io, renderer, pattern, args.resolution, state_file)

        if os.path.exists(state_file):
            app.load()

        app.run()
    except ConfigurationError as e:
        logger.error(f"Setup failed: {e}")
        return 1
    finally:
        if renderer is not None:
            renderer.close()
        if io is not None:
            io.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
