import ctypes
import logging
import numpy as np

from OpenGL   import GL
from Errors   import ConfigurationError
from Geometry import orthographic
from Mesh     import ATTRIBUTES, VERTEX_STRIDE, VertexStore

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY  = 4096        # Vertices.  A resolution 8 plane takes 384.
TRANSFORM_BLOCK   = b"Transform"
TRANSFORM_BINDING = 0
SAMPLER_UNIFORM   = b"image"


class TransformBlock(object):
    """CPU copy of the shared std140 uniform block: three column-major mat4s.

    Slot order is fixed: projection, view, model.  Each slot is 64 bytes.
    """
    PROJECTION = 0
    VIEW       = 1
    MODEL      = 2

    SLOT_BYTES = 64
    nbytes     = 3 * SLOT_BYTES

    def __init__(self):
        self.data = np.zeros((3, 16), dtype=np.float32)
        for slot in (self.PROJECTION, self.VIEW, self.MODEL):
            self.set(slot, np.eye(4))

    def set(self, slot, matrix):
        "Stores matrix in slot and returns (byte offset, bytes) for the partial upload."
        self.data[slot] = np.asarray(matrix, dtype=np.float32).flatten(order='F')
        return slot * self.SLOT_BYTES, self.data[slot].tobytes()

    def get(self, slot):
        return self.data[slot].reshape(4, 4, order='F')


class Renderer(object):
    """
    Owns the GPU side of the pipeline: one shared vertex buffer, the Transform
        uniform block, shader programs and textures.

    Requires a current OpenGL 3.3 core context at construction.

    Usage:
        renderer = Renderer(canvas)
        program  = renderer.create_program(vertex_source, fragment_source)
        plane    = renderer.new_plane(1, 1, 8)
        renderer.upload_vertices()                  # Once, after all planes exist.
        ...
        renderer.set_view_matrix(view)              # Per frame, any order.
        renderer.use_program(program)
        renderer.use_texture(texture)
        renderer.draw_primitive(plane.primitive)
    """

    def __init__(self, canvas, capacity=DEFAULT_CAPACITY):
        self.canvas     = canvas
        self.store      = VertexStore(capacity)
        self.transforms = TransformBlock()
        self.programs   = []
        self.textures   = {}        # name -> (texture id, (width, height))

        self._create_vertex_buffer()
        self._create_uniform_buffer()

        self.resize_canvas(canvas.width, canvas.height)

    def _create_vertex_buffer(self):
        "Allocates the whole store up front; it's never resized."
        self.vao = GL.glGenVertexArrays(1)
        GL.glBindVertexArray(self.vao)

        self.vbo = GL.glGenBuffers(1)
        GL.glBindBuffer(GL.GL_ARRAY_BUFFER, self.vbo)
        GL.glBufferData(GL.GL_ARRAY_BUFFER, self.store.nbytes, None, GL.GL_STATIC_DRAW)

        for location, (size, offset) in enumerate(ATTRIBUTES):
            GL.glEnableVertexAttribArray(location)
            GL.glVertexAttribPointer(location, size, GL.GL_FLOAT, GL.GL_FALSE,
                                     VERTEX_STRIDE, ctypes.c_void_p(offset))

    def _create_uniform_buffer(self):
        self.ubo = GL.glGenBuffers(1)
        GL.glBindBuffer(GL.GL_UNIFORM_BUFFER, self.ubo)
        GL.glBufferData(GL.GL_UNIFORM_BUFFER, TransformBlock.nbytes, self.transforms.data.tobytes(), GL.GL_DYNAMIC_DRAW)
        GL.glBindBufferBase(GL.GL_UNIFORM_BUFFER, TRANSFORM_BINDING, self.ubo)

    #
    # Transforms
    #

    def _set_matrix(self, slot, matrix):
        offset, data = self.transforms.set(slot, matrix)
        GL.glBindBuffer(GL.GL_UNIFORM_BUFFER, self.ubo)
        GL.glBufferSubData(GL.GL_UNIFORM_BUFFER, offset, TransformBlock.SLOT_BYTES, data)

    def set_projection_matrix(self, matrix):
        self._set_matrix(TransformBlock.PROJECTION, matrix)

    def set_view_matrix(self, matrix):
        self._set_matrix(TransformBlock.VIEW, matrix)

    def set_model_matrix(self, matrix):
        self._set_matrix(TransformBlock.MODEL, matrix)

    def resize_canvas(self, width, height, pixel_ratio=None):
        """Call whenever the drawable changes size.  width, height are window pixels.
        Only the projection slot is rewritten.
        """
        self.canvas.resize(width, height, pixel_ratio)
        GL.glViewport(0, 0, *self.canvas.framebuffer_size)
        self.set_projection_matrix(orthographic(*self.canvas.extent))
        logger.debug(f"Canvas resized to {width}x{height} (framebuffer {self.canvas.framebuffer_size})")

    #
    # Geometry
    #

    def new_plane(self, width, height, resolution):
        return self.store.new_plane(width, height, resolution)

    def upload_vertices(self):
        "Flushes the written part of the CPU-side store in one transfer."
        written = self.store.data[:self.store.written]
        GL.glBindBuffer(GL.GL_ARRAY_BUFFER, self.vbo)
        GL.glBufferSubData(GL.GL_ARRAY_BUFFER, 0, written.nbytes, written)
        logger.info(f"Uploaded {self.store.written} of {self.store.capacity} vertices")

    #
    # Programs
    #

    def _compile_shader(self, kind, source):
        shader = GL.glCreateShader(kind)
        GL.glShaderSource(shader, source)
        GL.glCompileShader(shader)
        if not GL.glGetShaderiv(shader, GL.GL_COMPILE_STATUS):
            log = GL.glGetShaderInfoLog(shader)
            GL.glDeleteShader(shader)
            raise ConfigurationError(f"Shader compilation failed: {_text(log)}")
        return shader

    def create_program(self, vertex_source, fragment_source):
        vertex   = self._compile_shader(GL.GL_VERTEX_SHADER,   vertex_source)
        fragment = self._compile_shader(GL.GL_FRAGMENT_SHADER, fragment_source)

        program = GL.glCreateProgram()
        GL.glAttachShader(program, vertex)
        GL.glAttachShader(program, fragment)
        GL.glLinkProgram(program)

        # The program keeps what it needs once linked:
        GL.glDeleteShader(vertex)
        GL.glDeleteShader(fragment)

        if not GL.glGetProgramiv(program, GL.GL_LINK_STATUS):
            log = GL.glGetProgramInfoLog(program)
            GL.glDeleteProgram(program)
            raise ConfigurationError(f"Program link failed: {_text(log)}")

        block = GL.glGetUniformBlockIndex(program, TRANSFORM_BLOCK)
        if block == GL.GL_INVALID_INDEX:
            GL.glDeleteProgram(program)
            raise ConfigurationError("Program has no Transform uniform block")
        GL.glUniformBlockBinding(program, block, TRANSFORM_BINDING)

        GL.glUseProgram(program)
        GL.glUniform1i(GL.glGetUniformLocation(program, SAMPLER_UNIFORM), 0)

        self.programs.append(program)
        logger.info(f"Linked program {program}")
        return program

    #
    # Textures
    #

    def create_texture(self, image, name=None):
        """Uploads a Pillow image as RGBA8 and returns the texture id.
        If name is given the texture is registered under it for replace_texture().
        """
        texture = GL.glGenTextures(1)
        self._upload_image(texture, image)

        self.textures[texture if name is None else name] = (texture, image.size)
        logger.info(f"Texture {name or texture}: {image.size[0]}x{image.size[1]}")
        return texture

    def replace_texture(self, name, image):
        "Re-uploads a registered texture in place (e.g. when a new pattern is ready)."
        texture, _ = self.textures[name]
        self._upload_image(texture, image)
        self.textures[name] = (texture, image.size)
        return texture

    def texture_size(self, name):
        return self.textures[name][1]

    def _upload_image(self, texture, image):
        rgba = image.convert('RGBA')
        GL.glBindTexture(GL.GL_TEXTURE_2D, texture)
        GL.glPixelStorei(GL.GL_UNPACK_ALIGNMENT, 1)
        GL.glTexImage2D(GL.GL_TEXTURE_2D, 0, GL.GL_RGBA8, rgba.width, rgba.height,
                        0, GL.GL_RGBA, GL.GL_UNSIGNED_BYTE, rgba.tobytes())
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_MIN_FILTER, GL.GL_LINEAR)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_MAG_FILTER, GL.GL_LINEAR)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_S, GL.GL_CLAMP_TO_EDGE)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_T, GL.GL_CLAMP_TO_EDGE)

    #
    # Pipeline state and drawing
    #

    def use_texture(self, texture):
        GL.glActiveTexture(GL.GL_TEXTURE0)
        GL.glBindTexture(GL.GL_TEXTURE_2D, texture)

    def use_program(self, program):
        GL.glUseProgram(program)

    def clear(self, color=(0.0, 0.0, 0.0, 1.0)):
        GL.glClearColor(*color)
        GL.glClear(GL.GL_COLOR_BUFFER_BIT)

    def draw_primitive(self, primitive):
        GL.glBindVertexArray(self.vao)
        GL.glDrawArrays(primitive.mode, primitive.first, primitive.count)

    #
    # Coordinate conversions (input handling only needs these)
    #

    def window_to_canvas_point(self, p):
        return self.canvas.window_to_canvas_point(p)

    def canvas_to_window_point(self, p):
        return self.canvas.canvas_to_window_point(p)

    def window_to_canvas_scalar(self, s):
        return self.canvas.window_to_canvas_scalar(s)

    def canvas_to_window_scalar(self, s):
        return self.canvas.canvas_to_window_scalar(s)

    def close(self):
        "Release all GL resources.  The context must still be current."
        for program in self.programs:
            GL.glDeleteProgram(program)
        self.programs = []

        if self.textures:
            GL.glDeleteTextures([texture for texture, _ in self.textures.values()])
            self.textures = {}

        if self.vbo is not None:
            GL.glDeleteBuffers(2, [self.vbo, self.ubo])
            self.vbo = self.ubo = None

        if self.vao is not None:
            GL.glDeleteVertexArrays(1, [self.vao])
            self.vao = None


def _text(log):
    return log.decode(errors='replace') if isinstance(log, bytes) else str(log)
