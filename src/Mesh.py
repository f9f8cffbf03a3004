
#
# Plane tessellation and the shared CPU-side vertex arena.
#
# Vertex layout (float32, tightly packed):
#   position(2) uv(2) color(4) weight(4)  -> 12 floats, 48 byte stride
#
import logging
import numpy as np

from dataclasses import dataclass
from Errors      import ConfigurationError
from Homography  import compute_projection, projection_matrix4

logger = logging.getLogger(__name__)

TRIANGLES = 0x0004      # Same value as GL_TRIANGLES, so the renderer can pass it straight through.

FLOATS_PER_VERTEX = 12
VERTEX_STRIDE     = FLOATS_PER_VERTEX * 4

# (size, byte offset) per attribute location:
ATTRIBUTES = (
    (2,  0),    # position
    (2,  8),    # uv
    (4, 16),    # color
    (4, 32),    # weight
)

WHITE = (1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class Primitive:
    "A draw range in the shared vertex store."
    mode:  int
    first: int
    count: int


@dataclass(frozen=True)
class Plane:
    """A logical width x height rectangle plus where its triangles live.

    The vertices always span [-1, 1]^2 whatever width and height are.  width and
        height only describe the source corners the homography maps from.
    """
    width:     float
    height:    float
    primitive: Primitive

    def compute_projection(self, p1, p2, p3, p4):
        "4x4 view matrix carrying this plane's corners onto p1..p4 (TL, TR, BL, BR)."
        return projection_matrix4(compute_projection(self.width, self.height, p1, p2, p3, p4))


def build_plane_vertices(resolution, color=WHITE):
    """Tessellates the unit square into resolution^2 cells, two triangles each.

    Returns a (6 * resolution^2, 12) float32 array.  Each cell is emitted as
        NW, SW, SE then NW, SE, NE.  uv is the grid coordinate in [0, 1];
        position is the same thing remapped to [-1, 1].  weight.x flags
        vertices on the plane border.
    """
    if resolution < 1:
        raise ValueError(f"Plane resolution must be at least 1, got {resolution}")

    grid = np.linspace(0.0, 1.0, resolution + 1)

    u0, v0 = np.meshgrid(grid[:-1], grid[:-1], indexing='xy')
    u1, v1 = np.meshgrid(grid[1:],  grid[1:],  indexing='xy')
    u0, v0, u1, v1 = (a.ravel() for a in (u0, v0, u1, v1))

    # Six corners per cell, cells in row-major order:
    u = np.stack([u0, u0, u1, u0, u1, u1], axis=1).ravel()
    v = np.stack([v0, v1, v1, v0, v1, v0], axis=1).ravel()

    vertices = np.zeros((u.size, FLOATS_PER_VERTEX), dtype=np.float32)
    vertices[:, 0]    = u * 2.0 - 1.0
    vertices[:, 1]    = v * 2.0 - 1.0
    vertices[:, 2]    = u
    vertices[:, 3]    = v
    vertices[:, 4:8]  = color
    vertices[:, 8]    = ((u == 0.0) | (u == 1.0) | (v == 0.0) | (v == 1.0))

    return vertices


class VertexStore(object):
    """Fixed capacity vertex arena.

    Planes are appended once at startup and never removed; the written range
        is what gets uploaded.  Capacity never grows: overflowing it means
        the store was sized wrong for the session.
    """
    def __init__(self, capacity):
        self.capacity = capacity
        self.data     = np.zeros((capacity, FLOATS_PER_VERTEX), dtype=np.float32)
        self.written  = 0

    @property
    def nbytes(self):
        return self.data.nbytes

    def append(self, vertices, mode=TRIANGLES):
        count = len(vertices)
        if self.written + count > self.capacity:
            raise ConfigurationError(
                f"Vertex store overflow: {self.written} + {count} vertices exceeds capacity {self.capacity}")

        first = self.written
        self.data[first:first + count] = vertices
        self.written += count

        return Primitive(mode, first, count)

    def new_plane(self, width, height, resolution):
        primitive = self.append(build_plane_vertices(resolution))
        logger.debug(f"Plane {width}x{height} @ resolution {resolution} -> vertices [{primitive.first}, {primitive.first + primitive.count})")
        return Plane(width, height, primitive)
