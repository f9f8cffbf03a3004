
"""Viewer state: the draggable handles and scale behind each display mode.

There are two kinds of viewer:

    CALIBRATION - four perspective handles (TL, TR, BL, BR) plus the origin.
                  The perspective handles define the homography.
    PROJECTION  - just the origin, which positions the pattern.

Both share one Viewer class; the per-kind behaviour lives in the module
    functions below, which switch on viewer.kind.

Nothing here knows about windows or mice.  The host feeds canvas-space
    pointer positions into try_begin_drag() / apply_drag() (or DragState,
    which just threads the anchors through for it).
"""

from enum     import Enum
from Geometry import Point, model_matrix as build_model_matrix

DEFAULT_SCALE_VALUE     = 2.0
DEFAULT_HANDLE_POSITION = 2.0
HANDLE_RADIUS           = 0.25      # Canvas units; hit testing only.

DEFAULT_SENSITIVITY     = 0.1
MIN_SENSITIVITY         = 0.01
SENSITIVITY_PER_WHEEL   = 0.0002
SCALE_PER_WHEEL_UNIT    = 0.0005

ORIGIN_DEFAULT = Point(0, 0)


class ViewerKind(Enum):
    CALIBRATION = 'calibration'
    PROJECTION  = 'projection'


class Handle(object):
    def __init__(self, pos, radius=HANDLE_RADIUS):
        self.pos    = pos
        self.radius = radius

    def __repr__(self):
        return f"Handle({self.pos.x:.3f}, {self.pos.y:.3f})"


class Viewer(object):
    """
    handles always contains origin.  For a calibrator, handles[0:4] are the
        perspective handles in TL, TR, BL, BR order and handles[4] is the origin.
    """
    def __init__(self, kind, perspective=(), default_positions=()):
        self.kind              = kind
        self.origin            = Handle(ORIGIN_DEFAULT)
        self.perspective       = list(perspective)
        self.default_positions = list(default_positions)     # Parallel to handles
        self.handles           = self.perspective + [self.origin]
        self.scale             = DEFAULT_SCALE_VALUE

    def __repr__(self):
        return f"Viewer({self.kind.value}, scale={self.scale:.3f}, handles={self.handles})"


def new_calibrator():
    d = DEFAULT_HANDLE_POSITION
    defaults = [
        Point(-d, -d),
        Point( d, -d),
        Point(-d,  d),
        Point( d,  d),
    ]
    perspective = [Handle(p) for p in defaults]
    return Viewer(ViewerKind.CALIBRATION, perspective, defaults + [ORIGIN_DEFAULT])

def new_projector():
    return Viewer(ViewerKind.PROJECTION, default_positions=[ORIGIN_DEFAULT])


#
# Per-kind operations
#

def reset_handle(viewer, index):
    """Calibrator: restore handle index to its default.
    Projector: there's only the origin, so index is ignored.
    """
    if viewer.kind is ViewerKind.CALIBRATION:
        if not 0 <= index < len(viewer.handles):
            raise ValueError(f"Calibrator has no handle {index}")
        viewer.handles[index].pos = viewer.default_positions[index]
    elif viewer.kind is ViewerKind.PROJECTION:
        viewer.origin.pos = ORIGIN_DEFAULT
    else:
        raise ValueError(f"Unknown viewer kind {viewer.kind}")

def reset_scale(viewer):
    viewer.scale = DEFAULT_SCALE_VALUE

def projection_matrix(viewer, plane):
    "The calibration homography for plane, as the 4x4 view matrix."
    if viewer.kind is not ViewerKind.CALIBRATION:
        raise ValueError("Only a calibration viewer defines a projection")
    return plane.compute_projection(*(handle.pos for handle in viewer.perspective))

def model_matrix(viewer):
    return build_model_matrix(viewer.origin.pos, viewer.scale)


#
# Input-driven changes.  Scale is deliberately left unclamped: zero or
#   negative scale flips or collapses the model, but it doesn't crash.
#

def change_scale(viewer, delta_y, locked=False):
    if not locked:
        viewer.scale += delta_y * SCALE_PER_WHEEL_UNIT
    return viewer.scale

def change_sensitivity(sensitivity, delta_y):
    return max(MIN_SENSITIVITY, sensitivity + delta_y * SENSITIVITY_PER_WHEEL)


#
# Dragging
#

def try_begin_drag(viewer, pointer, radius=HANDLE_RADIUS):
    "Index of the nearest handle strictly within radius of pointer, else None."
    best  = radius * radius
    index = None
    for i, handle in enumerate(viewer.handles):
        dx = pointer.x - handle.pos.x
        dy = pointer.y - handle.pos.y
        distance_squared = dx * dx + dy * dy
        if distance_squared < best:
            best  = distance_squared
            index = i
    return index

def apply_drag(viewer, index, anchor, delta):
    "Places handle index at anchor + delta (anchor being where it was when the drag began)."
    viewer.handles[index].pos = anchor + delta


class DragState(object):
    """What the host needs to remember between pointer-down and pointer-up."""

    def __init__(self):
        self.end()

    @property
    def active(self):
        return self.active_handle_index is not None

    def begin(self, viewer, pointer, radius=HANDLE_RADIUS):
        self.active_handle_index = try_begin_drag(viewer, pointer, radius)
        if self.active_handle_index is not None:
            self.anchor_handle_position  = viewer.handles[self.active_handle_index].pos
            self.anchor_pointer_position = pointer
        return self.active_handle_index

    def move(self, viewer, pointer, sensitivity=DEFAULT_SENSITIVITY):
        "No-op unless a handle was hit on begin()."
        if self.active_handle_index is None:
            return
        delta = (pointer - self.anchor_pointer_position).scale(sensitivity)
        apply_drag(viewer, self.active_handle_index, self.anchor_handle_position, delta)

    def end(self):
        self.active_handle_index     = None
        self.anchor_handle_position  = None
        self.anchor_pointer_position = None
