"""
astrocore.state — Frame-Tagged State Types
============================================

Value types exchanged between the frame transforms and the Kepler
engine.  Every vector carries the name of the reference frame it is
expressed in so that a transform handed a value in the wrong frame fails
loudly instead of producing positions that are silently kilometers off.

Frames
------
``j2000`` — mean equator / equinox of J2000.0 (inertial)
``mod``   — mean equator / equinox of date (precession applied)
``cep``   — true equator / equinox of date (precession + nutation)
``ecef``  — Earth-fixed, rotating with GAST about the CEP axis
"""

from dataclasses import dataclass
from datetime import datetime

import numpy as np
from numpy.typing import NDArray

from .timescales import as_utc

J2000 = "j2000"
MOD = "mod"
CEP = "cep"
ECEF = "ecef"

FRAMES = (J2000, MOD, CEP, ECEF)


class FrameMismatchError(ValueError):
    """A value tagged with one frame was passed where another is required."""


def check_frame(frame: str) -> str:
    fr = frame.lower()
    if fr not in FRAMES:
        raise ValueError(f"Unknown frame {frame!r}. Valid: {FRAMES}")
    return fr


def require_frame(value, frame: str) -> None:
    """Raise FrameMismatchError unless ``value.frame == frame``."""
    if value.frame != frame:
        raise FrameMismatchError(
            f"Expected a value in frame {frame!r}, got {value.frame!r}")


def _vector3(v) -> NDArray:
    arr = np.array(v, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class OrbitStateVector:
    """Position and velocity of an object at one instant in one frame.

    Attributes
    ----------
    r : (3,) ndarray — position [m]
    v : (3,) ndarray — velocity [m/s]
    timestamp : datetime — UTC instant
    frame : str — one of FRAMES
    """
    r: NDArray
    v: NDArray
    timestamp: datetime
    frame: str = J2000

    def __post_init__(self):
        object.__setattr__(self, "r", _vector3(self.r))
        object.__setattr__(self, "v", _vector3(self.v))
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))
        object.__setattr__(self, "frame", check_frame(self.frame))

    def replace(self, r=None, v=None, frame=None) -> "OrbitStateVector":
        """Copy with some of r, v or frame changed."""
        return OrbitStateVector(
            r=self.r if r is None else r,
            v=self.v if v is None else v,
            timestamp=self.timestamp,
            frame=self.frame if frame is None else frame,
        )


@dataclass(frozen=True, eq=False)
class FramedPosition:
    """Position-only vector tagged with its frame."""
    r: NDArray
    frame: str = J2000

    def __post_init__(self):
        object.__setattr__(self, "r", _vector3(self.r))
        object.__setattr__(self, "frame", check_frame(self.frame))
