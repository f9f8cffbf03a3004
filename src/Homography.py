
"""Closed form plane-to-quad homography.

The trick is to never solve "quad to quad" directly.  basis_to_points() builds
    the matrix that carries the four canonical homogeneous directions
    (1,0,0), (0,1,0), (0,0,1), (1,1,1) onto any four points.  Doing that once for
    the source corners (S) and once for the destination corners (D) gives the
    answer as D @ inverse(S), and since homogeneous matrices are only defined
    up to scale the adjugate stands in for the inverse.

Corner order everywhere is top-left, top-right, bottom-left, bottom-right.
"""
import logging
import numpy as np

from Geometry import Point, adjugate, mat3_mul, mat3_mul_vec

logger = logging.getLogger(__name__)

DEGENERATE_EPSILON = 1e-12


def basis_to_points(q1, q2, q3, q4):
    m = np.array([
        [q1.x, q2.x, q3.x],
        [q1.y, q2.y, q3.y],
        [ 1.0,  1.0,  1.0],
    ])
    v = mat3_mul_vec(adjugate(m), [q4.x, q4.y, 1.0])
    return mat3_mul(m, np.diag(v))

def compute_projection(width, height, p1, p2, p3, p4):
    """Returns the 3x3 H carrying (0,0), (w,0), (0,h), (w,h) onto p1..p4.

    Three or more collinear points make this singular.  That isn't an error:
        the result may be huge or non-finite, and it's up to the user to
        notice and move the handles.
    """
    source = basis_to_points(Point(0, 0), Point(width, 0), Point(0, height), Point(width, height))
    dest   = basis_to_points(p1, p2, p3, p4)

    h = mat3_mul(dest, adjugate(source))

    if logger.isEnabledFor(logging.DEBUG):
        det = np.linalg.det(h)
        if not np.isfinite(det) or abs(det) < DEGENERATE_EPSILON:
            logger.debug(f"Degenerate homography for corners {p1}, {p2}, {p3}, {p4} (det={det:.3g})")

    return h

def normalize(h):
    "Scales H so its bottom-right entry is 1.  Non-finite results pass straight through."
    h = np.asarray(h, dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        return h / h[2, 2]

def projection_matrix4(h):
    """Embeds a 3x3 homography into the 4x4 the vertex shader consumes.

    z passes through untouched; the projective row lands in w so the
        rasterizer's own divide finishes the job.
    """
    h = normalize(h)
    return np.array([
        [h[0, 0], h[0, 1], 0.0, h[0, 2]],
        [h[1, 0], h[1, 1], 0.0, h[1, 2]],
        [    0.0,     0.0, 1.0,     0.0],
        [h[2, 0], h[2, 1], 0.0, h[2, 2]],
    ])

def apply_homography(h, p):
    x, y, w = mat3_mul_vec(h, [p.x, p.y, 1.0])
    with np.errstate(divide='ignore', invalid='ignore'):
        return Point(float(x / w), float(y / w))
