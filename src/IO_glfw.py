import glfw
import logging

from IO     import IO
from Errors import ConfigurationError

logger = logging.getLogger(__name__)

glfw_key_map = {
    # Named keys
    glfw.KEY_SPACE:     ' ',
    glfw.KEY_BACKSPACE: 'backspace',
    glfw.KEY_DELETE:    'delete',
    glfw.KEY_ENTER:     'enter',
    glfw.KEY_TAB:       'tab',
    glfw.KEY_ESCAPE:    'escape',

    # Arrows
    glfw.KEY_RIGHT:     'right',
    glfw.KEY_LEFT:      'left',
    glfw.KEY_UP:        'up',
    glfw.KEY_DOWN:      'down',

    # Common mods
    glfw.KEY_LEFT_CONTROL:  'control',
    glfw.KEY_RIGHT_CONTROL: 'control',
    glfw.KEY_LEFT_SHIFT:    'shift',
    glfw.KEY_RIGHT_SHIFT:   'shift',
}

def translate_key(key):
    "glfw key code -> standard key name, or None if we don't track it."
    if key in glfw_key_map:
        return glfw_key_map[key]
    if glfw.KEY_A <= key <= glfw.KEY_Z:
        return chr(key + 32)
    if glfw.KEY_0 <= key <= glfw.KEY_9:
        return chr(key)
    return None

class IO_glfw(IO):

    def __init__(self):

        if not glfw.init():
            raise ConfigurationError("GLFW init failed")

        monitor     = glfw.get_primary_monitor()
        mode        = glfw.get_video_mode(monitor)
        screen_size = (mode.size.width, mode.size.height)

        IO.__init__(self, screen_size)

        self.monitor = monitor
        self.vmode   = mode
        self.window  = None

    def set_size(self, size, title, fullscreen=False):

        if fullscreen or size is None:
            size    = self.screen_size
            monitor = self.monitor
        else:
            size    = self.crop_size(size, self.screen_size)
            monitor = None

        if self.window is not None:
            x, y = (0, 0) if monitor is not None else glfw.get_window_pos(self.window)
            glfw.set_window_monitor(self.window, monitor, x, y, *size, glfw.DONT_CARE)
            self._read_sizes()
            return

        #
        # Create the GL window and make it the global rendering target.
        # Uniform blocks and VAOs need a 3.3 core context.
        #
        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)

        self.window = glfw.create_window(*size, title, monitor, None)
        if not self.window:
            raise ConfigurationError("Window creation failed (is OpenGL 3.3 available?)")
        glfw.make_context_current(self.window)
        glfw.swap_interval(1)       # Frames are paced by the display refresh.

        glfw.set_window_size_callback     (self.window, self.window_size_callback)
        glfw.set_framebuffer_size_callback(self.window, self.framebuffer_size_callback)
        glfw.set_mouse_button_callback    (self.window, self.mouse_button_callback)
        glfw.set_cursor_pos_callback      (self.window, self.cursor_pos_callback)
        glfw.set_key_callback             (self.window, self.key_callback)
        glfw.set_scroll_callback          (self.window, self.scroll_callback)

        self._read_sizes()
        logger.info(f"Window {self.size[0]}x{self.size[1]} (framebuffer {self.framebuffer_size[0]}x{self.framebuffer_size[1]}), fullscreen={monitor is not None}")

    def _read_sizes(self):
        self.size             = tuple(glfw.get_window_size(self.window))
        self.framebuffer_size = tuple(glfw.get_framebuffer_size(self.window))
        self.resized          = True

    def swap_buffers(self):
        glfw.swap_buffers(self.window)

    def poll_events(self):
        glfw.poll_events()

        if glfw.window_should_close(self.window):
            self.quitted = True

    def close(self):
        glfw.terminate()

    def mouse_button_callback(self, window, button, action, mods):
        if button == glfw.MOUSE_BUTTON_LEFT:
            self.mouse_down = (action == glfw.PRESS)
            x, y = glfw.get_cursor_pos(window)
            if action == glfw.PRESS:
                self.mouse_events.append(('press', x, y))
            elif action == glfw.RELEASE:
                self.mouse_events.append(('release', x, y))

    def cursor_pos_callback(self, window, x, y):
        self.mouse_x = x
        self.mouse_y = y

    def key_callback(self, window, key, scancode, action, mods):
        key = translate_key(key)
        if key is None:
            return
        if action == glfw.PRESS:
            self.keys_down.add(key)
            self.keystrokes.append(key)
        elif action == glfw.RELEASE:
            self.keys_down.discard(key)

    def scroll_callback(self, window, dx, dy):
        self.mouse_scroll_x += dx
        self.mouse_scroll_y += dy

    def window_size_callback(self, window, width, height):
        self.size    = (width, height)
        self.resized = True

    def framebuffer_size_callback(self, window, width, height):
        self.framebuffer_size = (width, height)
        self.resized          = True

    def quit(self):
        if not self.quitted:
            IO.quit(self)
            if self.window is not None:
                glfw.set_window_should_close(self.window, True)
