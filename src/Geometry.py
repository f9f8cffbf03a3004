
#
# Pure value math used by the homography solver, the mesh builder and the renderer.
#
# Matrices are numpy arrays in the column-vector convention (M @ v) ; they are
#   only converted to float32 column-major order when uploaded to the GPU.
#
import numpy as np

from dataclasses import dataclass
from Errors      import ConfigurationError

ORTHO_DEPTH = 1000.0    # Everything we draw sits at z=0, so this is plenty.


@dataclass(frozen=True)
class Point:
    "A 2D coordinate in canvas space (or window space, depending on who's asking)."
    x: float
    y: float

    def __add__(self, other):
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Point(self.x - other.x, self.y - other.y)

    def scale(self, k):
        return Point(self.x * k, self.y * k)

    def as_tuple(self):
        return (self.x, self.y)

    @staticmethod
    def remap(p, from_lo, from_hi, to_lo, to_hi):
        """Linearly remaps p, per axis, from the box [from_lo, from_hi] to [to_lo, to_hi].
        All four bounds are Points.
        """
        return Point(
            to_lo.x + (p.x - from_lo.x) * (to_hi.x - to_lo.x) / (from_hi.x - from_lo.x),
            to_lo.y + (p.y - from_lo.y) * (to_hi.y - to_lo.y) / (from_hi.y - from_lo.y),
        )


#
# 3x3 helpers (homogeneous 2D)
#

def mat3_mul(a, b):
    return np.asarray(a, dtype=np.float64) @ np.asarray(b, dtype=np.float64)

def mat3_mul_vec(m, v):
    return np.asarray(m, dtype=np.float64) @ np.asarray(v, dtype=np.float64)

def adjugate(m):
    """Transpose of the cofactor matrix of a 3x3.

    adjugate(M) == det(M) * inverse(M), but it never divides, so it stays
        finite even when M is singular.
    """
    (a, b, c), (d, e, f), (g, h, i) = np.asarray(m, dtype=np.float64)
    return np.array([
        [e*i - f*h, c*h - b*i, b*f - c*e],
        [f*g - d*i, a*i - c*g, c*d - a*f],
        [d*h - e*g, b*g - a*h, a*e - b*d],
    ])


#
# 4x4 builders
#

def identity():
    return np.eye(4)

def translation(x, y=None, z=0.0):
    "Accepts either a Point or separate x, y components."
    if isinstance(x, Point):
        x, y = x.x, x.y
    m = np.eye(4)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m

def scaling(sx, sy=None, sz=1.0):
    "Uniform in x and y unless sy is given.  z is left alone since the content is flat."
    if sy is None:
        sy = sx
    return np.diag([sx, sy, sz, 1.0]).astype(np.float64)

def model_matrix(origin, scale):
    """Translate by origin/(4*scale), then scale, then translate by (0.5, 0.5).

    Read right to left when applied to a vertex: the (0.5, 0.5) shift happens
        first, so the pivot of the scale is the plane's shifted origin.
        Changing the order moves the pivot.

    A zero scale produces non-finite entries instead of raising.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        offset = np.float64(1.0) / (np.float64(4.0) * np.float64(scale))
        shift  = translation(origin.x * offset, origin.y * offset)
    return shift @ scaling(scale) @ translation(0.5, 0.5)

def orthographic(width, height, depth=ORTHO_DEPTH):
    """Orthographic projection of the centred canvas extent, y pointing down, onto NDC.

    width, height are in canvas units.
    """
    if not width or not height:
        raise ConfigurationError(f"Orthographic extent must be non-zero, got {width}x{height}")

    left,   right = -width  / 2.0, width  / 2.0
    top,   bottom = -height / 2.0, height / 2.0
    near,     far = -depth, depth

    m = np.zeros((4, 4))
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    m[3, 3] = 1.0
    return m

def transform_point(m, p):
    "Applies a 4x4 to a Point at z=0 and does the w divide."
    x, y, _, w = np.asarray(m, dtype=np.float64) @ np.array([p.x, p.y, 0.0, 1.0])
    return Point(x / w, y / w)
