
#
# This module tracks mouse and keyboard with accumulators which the
#   frame loop consumes once per frame.
#


#
# These are the standard names for keyboard keys for boolean key states.
#
# All single-letter and digit key names correspond to that keyboard character
#   (lower-case version always).  Use ' ' for space.
#
# Key codes from the back end should be translated to these standard names.
#
known_keys = {
        # Named keys
        'backspace',
        'delete',
        'enter',
        'tab',
        'escape',

        # Arrows
        'right',
        'left',
        'up',
        'down',

        # common mods
        'control',
        'shift',
    }

class IO(object):

    def __init__(self, screen_size):

        self.screen_size = screen_size      # Size of the full screen

        # Window size (the space the mouse is in) and framebuffer size (the
        # space we render into).  They differ on HiDPI displays.
        self.size             = None
        self.framebuffer_size = None

        # Mouse state, window coordinates
        self.mouse_x    = 0.0
        self.mouse_y    = 0.0
        self.mouse_down = False

        # Keyboard state, some subset of known_keys
        self.keys_down = set()

        # Accumulators (see clear() for available list of accumulators):
        self.clear()

        self.quitted = False    # Flag set by .quit() saying we should wrap things up.

    def clear(self):
        """Clear accumulators.  Call at least once per frame, after the frame has
            consumed them.
        """
        self.mouse_events   = []    # ('press' or 'release', x, y) per left button event since last clear, in order
        self.mouse_scroll_x = 0.0   # Cumulative scroll since last clear
        self.mouse_scroll_y = 0.0
        self.keystrokes     = []    # Sequence of known_keys (incl single chars) hit since last clear.
        self.resized        = False

    @property
    def pixel_ratio(self):
        "Framebuffer pixels per window pixel."
        if not self.size or not self.framebuffer_size or not self.size[0]:
            return 1.0
        return self.framebuffer_size[0] / self.size[0]

    def set_size(self, size, title, fullscreen=False):
        """This must be called once as it establishes the window.

        The passed size is a request; it's cropped to fit on the screen.
        """
        raise NotImplementedError("Subclass needs to implement set_size()")

    def crop_size(self, size, max_size=None):
        "Crops size to max_size, preserving aspect ratio."
        if max_size is None:
            return size
        if size is None:
            return max_size
        scale = min(max_size[i]/size[i] for i in (0, 1))
        if scale < 1.0:
            return tuple(int(size[i]*scale) for i in (0, 1))
        return tuple(size)

    def swap_buffers(self):
        # Swap render buffers.  Back-end specific...
        pass

    def poll_events(self):
        # Call this once a cycle to handle events; accumulators update during this.
        pass

    def quit(self):
        "Sets the flag, but also subclass may initiate back-end specific exit."
        self.quitted = True

    def close(self):
        "Clean up, shut everything down..."
        pass
