import pytest


class FakeGL(object):
    """Stands in for the OpenGL.GL module: records every call, returns ids for
    the glGen*/glCreate* calls and the statuses the test asks for.
    """
    GL_INVALID_INDEX = 0xFFFFFFFF

    _creators = {'glGenBuffers', 'glGenTextures', 'glGenVertexArrays', 'glCreateShader', 'glCreateProgram'}

    def __init__(self):
        self.calls       = []
        self.compile_ok  = True
        self.link_ok     = True
        self.block_index = 0
        self._next_id    = 0

    def __getattr__(self, name):
        if name.startswith('GL_'):
            return name

        def record(*args):
            self.calls.append((name, args))
            return self._result(name)
        return record

    def _result(self, name):
        if name in self._creators:
            self._next_id += 1
            return self._next_id
        if name == 'glGetShaderiv':
            return self.compile_ok
        if name == 'glGetProgramiv':
            return self.link_ok
        if name in ('glGetShaderInfoLog', 'glGetProgramInfoLog'):
            return b"0:3(1): error: syntax error, unexpected IDENTIFIER"
        if name == 'glGetUniformBlockIndex':
            return self.block_index
        if name == 'glGetUniformLocation':
            return 1
        return None

    def named(self, name):
        return [args for n, args in self.calls if n == name]

    def reset(self):
        self.calls = []


@pytest.fixture
def fake_gl(monkeypatch):
    pytest.importorskip("OpenGL.GL")
    import Renderer

    gl = FakeGL()
    monkeypatch.setattr(Renderer, "GL", gl)
    return gl
