
"""Saved calibration state.

A CalibrationFile is just a dictionary stored in a file (via pickle), written
    out whole.  snapshot() / restore() move the fields the viewers expose in
    and out of such a dictionary:

    calibration_handles - five (x, y) tuples: TL, TR, BL, BR, origin
    calibration_scale
    projection_origin   - (x, y)
    projection_scale

The default location is ~/.cache/pattern-projector (or ~/.pattern-projector).

Loading unpickles the file, which can run arbitrary code.  Only load state
    files you wrote yourself; these aren't meant for sharing.
"""
import logging
import os
import pickle

from Geometry import Point

logger = logging.getLogger(__name__)

STATE_FILENAME = "calibration.info"


def default_state_path():
    homedir  = os.path.expanduser("~")
    cachedir = os.path.join(homedir, ".cache")
    if os.path.isdir(cachedir):
        statedir = os.path.join(cachedir, "pattern-projector")
    else:
        statedir = os.path.join(homedir, ".pattern-projector")

    if not os.path.exists(statedir):
        logger.info(f"Creating {statedir}")
        os.makedirs(statedir)

    return os.path.join(statedir, STATE_FILENAME)

def temp_filename_for(filename):
    directory, name = os.path.split(filename)
    return os.path.join(directory, f".{name}.{os.getpid()}.tmp")


class CalibrationFile(object):
    """Dictionary in a file.

    Access and change this through [] and .get.  Nothing is written until
        flush(); revert() abandons unflushed changes.  The file is created on
        the first flush() if it doesn't exist.
    """
    def __init__(self, filename):
        self.filename = filename
        self.items    = None    # Not loaded yet.
        self.dirty    = False

    def __iter__(self):
        self.load()
        return iter(self.items)

    def __contains__(self, key):
        self.load()
        return key in self.items

    def __setitem__(self, key, val):
        self.load()
        self.items[key] = val
        self.dirty = True

    def __getitem__(self, key):
        self.load()
        return self.items[key]

    def get(self, key, default=None):
        self.load()
        return self.items.get(key, default)

    def update(self, values):
        self.load()
        self.items.update(values)
        self.dirty = True

    def revert(self):
        self.items = None
        self.dirty = False

    def load(self):
        "Loads from our file.  Does nothing if already loaded."
        if self.items is None:
            if self.filename and os.path.exists(self.filename):
                with open(self.filename, 'rb') as fl:
                    items = pickle.load(fl)
                if not isinstance(items, dict):
                    raise ValueError(f"{self.filename} does not hold a calibration dictionary")
                self.items = items
            else:
                self.items = {}
            self.dirty = False

    def flush(self):
        "Returns True if anything was written, False if there were no changes."
        if not (self.filename and self.items is not None and self.dirty):
            return False

        tempname = temp_filename_for(self.filename)
        with open(tempname, 'wb') as fl:
            pickle.dump(self.items, fl)
        os.replace(tempname, self.filename)
        self.dirty = False

        logger.info(f"Saved calibration to {self.filename}")
        return True


def snapshot(calibrator, projector):
    return {
        'calibration_handles': [handle.pos.as_tuple() for handle in calibrator.handles],
        'calibration_scale':   calibrator.scale,
        'projection_origin':   projector.origin.pos.as_tuple(),
        'projection_scale':    projector.scale,
    }

def _point(value):
    x, y = value
    return Point(float(x), float(y))

def restore(state, calibrator, projector):
    """Fields missing from state are left as they are.  Everything present is
        converted before anything is assigned, so a bad field changes nothing.
    """
    handles = scale = origin = projection_scale = None

    if 'calibration_handles' in state:
        positions = state['calibration_handles']
        if len(positions) != len(calibrator.handles):
            raise ValueError(f"Expected {len(calibrator.handles)} calibration handles, got {len(positions)}")
        handles = [_point(p) for p in positions]
    if 'calibration_scale' in state:
        scale = float(state['calibration_scale'])
    if 'projection_origin' in state:
        origin = _point(state['projection_origin'])
    if 'projection_scale' in state:
        projection_scale = float(state['projection_scale'])

    if handles is not None:
        for handle, pos in zip(calibrator.handles, handles):
            handle.pos = pos
    if scale is not None:
        calibrator.scale = scale
    if origin is not None:
        projector.origin.pos = origin
    if projection_scale is not None:
        projector.scale = projection_scale

def save(filename, calibrator, projector):
    store = CalibrationFile(filename)
    store.update(snapshot(calibrator, projector))
    return store.flush()

def load(filename, calibrator, projector):
    """Restores what filename holds into the viewers.  Returns False (leaving
        the viewers alone) if the file is missing or unreadable.
    """
    if not os.path.exists(filename):
        logger.warning(f"No saved calibration at {filename}")
        return False
    store = CalibrationFile(filename)
    try:
        store.load()
        restore(store.items, calibrator, projector)
    except (OSError, ValueError, TypeError, pickle.UnpicklingError, EOFError) as e:
        logger.warning(f"Could not load calibration from {filename}: {type(e).__name__}: {e}")
        return False
    logger.info(f"Loaded calibration from {filename}")
    return True
