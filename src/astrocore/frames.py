"""
astrocore.frames — J2000 / MOD / CEP / ECEF Transformations
=============================================================

The four frames form a chain; every transform moves one or more links
along it::

    J2000  ←→  MOD  ←→  CEP  ←→  ECEF
        precession  nutation  Earth rotation

Frame Definitions
-----------------

**J2000** — mean equator and equinox at 2000-01-01 12:00 TT (inertial).

**MOD (Mean-of-Date)** — J2000 rotated by IAU 1976 precession::

    r_mod = R_z(z) · R_y(−ν) · R_z(ζ) · r_j2000

**CEP (true equator / equinox of date)** — MOD rotated by nutation::

    r_cep = R_x(ε + Δε) · R_z(Δψ) · R_x(−ε) · r_mod

**ECEF** — CEP rotated about Z by −GAST.  Velocities pick up the
Earth-rotation term::

    r_ecef = R_z(−θ) · r_cep
    v_ecef = R_z(−θ) · v_cep + Ṙ_z(−θ) · r_cep

Polar motion is not modeled: the ECEF Z axis coincides with the CEP
axis.  All rotations are active (see :mod:`astrocore.utils`), angles in
degrees.

Reference
---------
ESA (2013). *GNSS Data Processing*, Vol. I, §A.2.5 (A.22-A.32).
"""

from typing import NamedTuple, Optional

import numpy as np
from numpy.typing import NDArray

from .nutation import NutationParameters, nutation_terms
from .state import (
    J2000, MOD, CEP, ECEF, FRAMES,
    OrbitStateVector, FramedPosition,
    check_frame, require_frame,
)
from .timescales import (
    compute_julian_time, compute_sidereal_time, julian_centuries,
    sidereal_rate_deg_per_second,
)
from .utils import apply_dcm, cosd, sind, rot_x_matrix, rot_y_matrix, rot_z_matrix


class PrecessionAngles(NamedTuple):
    """IAU 1976 precession angles [deg]."""
    z: float
    nu: float
    zeta: float


# ════════════════════════════════════════════════════════════════════════════
#  Rotation Matrices
# ════════════════════════════════════════════════════════════════════════════

def get_mod_params(jt: float) -> PrecessionAngles:
    """Precession angles z, ν, ζ at Julian Time ``jt`` (A.23)."""
    T = julian_centuries(jt)
    T2, T3 = T * T, T * T * T
    z = 0.6406161388 * T + 3.0407777777e-04 * T2 + 5.0563888888e-06 * T3
    nu = 0.5567530277 * T - 1.1851388888e-04 * T2 - 1.1620277777e-05 * T3
    zeta = 0.6406161388 * T + 8.3855555555e-05 * T2 + 4.9994444444e-06 * T3
    return PrecessionAngles(z=z, nu=nu, zeta=zeta)


def precession_matrix(jt: float) -> NDArray:
    """J2000→MOD 3×3 rotation matrix (A.22)."""
    p = get_mod_params(jt)
    return rot_z_matrix(p.z) @ rot_y_matrix(-p.nu) @ rot_z_matrix(p.zeta)


def nutation_matrix(nutation: NutationParameters) -> NDArray:
    """MOD→CEP 3×3 rotation matrix (A.24)."""
    return (rot_x_matrix(nutation.eps + nutation.deps)
            @ rot_z_matrix(nutation.dpsi)
            @ rot_x_matrix(-nutation.eps))


def earth_rotation_matrix(gast: float) -> NDArray:
    """CEP→ECEF 3×3 rotation matrix for sidereal angle ``gast`` [deg]."""
    return rot_z_matrix(-gast)


def earth_rotation_rate_matrix(gast: float) -> NDArray:
    """Time derivative [1/s] of :func:`earth_rotation_matrix`.

    ::

        x' =  cos θ · x + sin θ · y        ẋ' = ω (−sin θ · x + cos θ · y)
        y' = −sin θ · x + cos θ · y        ẏ' = ω (−cos θ · x − sin θ · y)
    """
    omega = np.deg2rad(sidereal_rate_deg_per_second())
    c, s = cosd(gast), sind(gast)
    return omega * np.array([
        [-s,   c, 0.0],
        [-c,  -s, 0.0],
        [0.0, 0.0, 0.0],
    ])


def _nutation_or_default(jt: float,
                         nutation: Optional[NutationParameters]) -> NutationParameters:
    if nutation is None:
        return nutation_terms(julian_centuries(jt))
    return nutation


def j2000_to_cep_matrix(jt: float,
                        nutation: Optional[NutationParameters] = None) -> NDArray:
    """Combined J2000→CEP rotation: N · P."""
    return nutation_matrix(_nutation_or_default(jt, nutation)) @ precession_matrix(jt)


# ════════════════════════════════════════════════════════════════════════════
#  Full-State (OSV) Transforms
# ════════════════════════════════════════════════════════════════════════════
#
#  Precession and nutation rates are neglected over one evaluation, so
#  velocity is rotated by the same matrix as position.  Only the Earth
#  rotation contributes a velocity term.
# ════════════════════════════════════════════════════════════════════════════

def _rotate_osv(osv: OrbitStateVector, R: NDArray, frame: str) -> OrbitStateVector:
    return osv.replace(r=R @ osv.r, v=R @ osv.v, frame=frame)


def osv_j2000_to_mod(osv: OrbitStateVector) -> OrbitStateVector:
    """Apply IAU 1976 precession to an OSV."""
    require_frame(osv, J2000)
    jt = compute_julian_time(osv.timestamp).jt
    return _rotate_osv(osv, precession_matrix(jt), MOD)


def osv_mod_to_j2000(osv: OrbitStateVector) -> OrbitStateVector:
    require_frame(osv, MOD)
    jt = compute_julian_time(osv.timestamp).jt
    return _rotate_osv(osv, precession_matrix(jt).T, J2000)


def osv_mod_to_cep(osv: OrbitStateVector,
                   nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    """Apply nutation to an OSV."""
    require_frame(osv, MOD)
    jt = compute_julian_time(osv.timestamp).jt
    N = nutation_matrix(_nutation_or_default(jt, nutation))
    return _rotate_osv(osv, N, CEP)


def osv_cep_to_mod(osv: OrbitStateVector,
                   nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    require_frame(osv, CEP)
    jt = compute_julian_time(osv.timestamp).jt
    N = nutation_matrix(_nutation_or_default(jt, nutation))
    return _rotate_osv(osv, N.T, MOD)


def osv_j2000_to_cep(osv: OrbitStateVector,
                     nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    """J2000 → CEP (precession followed by nutation)."""
    return osv_mod_to_cep(osv_j2000_to_mod(osv), nutation)


def osv_cep_to_j2000(osv: OrbitStateVector,
                     nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    return osv_mod_to_j2000(osv_cep_to_mod(osv, nutation))


def osv_cep_to_ecef(osv: OrbitStateVector,
                    nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    """Rotate an OSV from CEP into the Earth-fixed frame.

    Parameters
    ----------
    osv : OrbitStateVector — state in CEP
    nutation : NutationParameters or None — for the equation of the equinoxes

    Returns
    -------
    OrbitStateVector — state in ECEF; velocity relative to the rotating Earth
    """
    require_frame(osv, CEP)
    julian = compute_julian_time(osv.timestamp)
    gast = compute_sidereal_time(0.0, julian.jd, julian.jt, nutation)

    R = earth_rotation_matrix(gast)
    R_dot = earth_rotation_rate_matrix(gast)

    r_ecef = R @ osv.r
    v_ecef = R @ osv.v + R_dot @ osv.r
    return osv.replace(r=r_ecef, v=v_ecef, frame=ECEF)


def osv_ecef_to_cep(osv: OrbitStateVector,
                    nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    """Inverse of :func:`osv_cep_to_ecef`::

        r_cep = Rᵀ · r_ecef
        v_cep = Rᵀ · (v_ecef − Ṙ · r_cep)
    """
    require_frame(osv, ECEF)
    julian = compute_julian_time(osv.timestamp)
    gast = compute_sidereal_time(0.0, julian.jd, julian.jt, nutation)

    R = earth_rotation_matrix(gast)
    R_dot = earth_rotation_rate_matrix(gast)

    r_cep = R.T @ osv.r
    v_cep = R.T @ (osv.v - R_dot @ r_cep)
    return osv.replace(r=r_cep, v=v_cep, frame=CEP)


def osv_j2000_to_ecef(osv: OrbitStateVector,
                      nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    """J2000 → ECEF through MOD and CEP."""
    return osv_cep_to_ecef(osv_j2000_to_cep(osv, nutation), nutation)


def osv_ecef_to_j2000(osv: OrbitStateVector,
                      nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    return osv_cep_to_j2000(osv_ecef_to_cep(osv, nutation), nutation)


# ════════════════════════════════════════════════════════════════════════════
#  Position-Only Transforms
# ════════════════════════════════════════════════════════════════════════════
#
#  Used to place bodies that carry no velocity (Sun marker, sub-solar
#  point) in whichever frame the camera is locked to.  The Julian time
#  is passed explicitly since positions carry no timestamp.
# ════════════════════════════════════════════════════════════════════════════

def pos_j2000_to_cep(jt: float, position: FramedPosition,
                     nutation: Optional[NutationParameters] = None) -> FramedPosition:
    """Precess and nutate a J2000 position to CEP."""
    require_frame(position, J2000)
    return FramedPosition(j2000_to_cep_matrix(jt, nutation) @ position.r, CEP)


def pos_cep_to_j2000(jt: float, position: FramedPosition,
                     nutation: Optional[NutationParameters] = None) -> FramedPosition:
    """Undo nutation and precession of a CEP position."""
    require_frame(position, CEP)
    return FramedPosition(j2000_to_cep_matrix(jt, nutation).T @ position.r, J2000)


def pos_cep_to_ecef(jt: float, jd: float, position: FramedPosition,
                    nutation: Optional[NutationParameters] = None) -> FramedPosition:
    """Rotate a CEP position by −GAST into ECEF."""
    require_frame(position, CEP)
    gast = compute_sidereal_time(0.0, jd, jt, nutation)
    return FramedPosition(earth_rotation_matrix(gast) @ position.r, ECEF)


def pos_ecef_to_cep(jt: float, jd: float, position: FramedPosition,
                    nutation: Optional[NutationParameters] = None) -> FramedPosition:
    require_frame(position, ECEF)
    gast = compute_sidereal_time(0.0, jd, jt, nutation)
    return FramedPosition(earth_rotation_matrix(gast).T @ position.r, CEP)


def rotate_positions(vec: NDArray, from_frame: str, to_frame: str,
                     jt: float, jd: Optional[float] = None,
                     nutation: Optional[NutationParameters] = None) -> NDArray:
    """Rotate raw position vector(s) between any two frames.

    Builds the chain of rotations once and applies it to a single (3,)
    vector or an (N,3) batch, which is the cheap way to move an orbit
    trail of many samples.

    Parameters
    ----------
    vec : (3,) or (N,3) — position(s) in ``from_frame`` [m]
    from_frame, to_frame : str — frame names
    jt : float — Julian Time
    jd : float or None — Julian Day at 0h (derived from ``jt`` if omitted)
    nutation : NutationParameters or None

    Returns
    -------
    vec_out : same shape — position(s) in ``to_frame``
    """
    fr, to = check_frame(from_frame), check_frame(to_frame)
    if jd is None:
        jd = np.floor(jt - 0.5) + 0.5
    nutation = _nutation_or_default(jt, nutation)

    # Step matrices along the chain J2000 → MOD → CEP → ECEF.
    steps = [
        precession_matrix(jt),
        nutation_matrix(nutation),
        earth_rotation_matrix(compute_sidereal_time(0.0, jd, jt, nutation)),
    ]
    i_from, i_to = FRAMES.index(fr), FRAMES.index(to)

    R = np.eye(3)
    if i_to > i_from:
        for M in steps[i_from:i_to]:
            R = M @ R
    else:
        for M in reversed(steps[i_to:i_from]):
            R = M.T @ R
    return apply_dcm(R, vec)


def transform_position(position: FramedPosition, to_frame: str, jt: float,
                       jd: Optional[float] = None,
                       nutation: Optional[NutationParameters] = None) -> FramedPosition:
    """Move a frame-tagged position into ``to_frame``."""
    to = check_frame(to_frame)
    r = rotate_positions(position.r, position.frame, to, jt, jd, nutation)
    return FramedPosition(r, to)


def transform_osv(osv: OrbitStateVector, to_frame: str,
                  nutation: Optional[NutationParameters] = None) -> OrbitStateVector:
    """Move an OSV into ``to_frame`` along the frame chain.

    Velocities are handled as in the individual transforms: the
    Earth-rotation term is added or removed whenever the ECEF link is
    crossed.
    """
    to = check_frame(to_frame)
    forward = {
        J2000: osv_j2000_to_mod,
        MOD: lambda s: osv_mod_to_cep(s, nutation),
        CEP: lambda s: osv_cep_to_ecef(s, nutation),
    }
    backward = {
        ECEF: lambda s: osv_ecef_to_cep(s, nutation),
        CEP: lambda s: osv_cep_to_mod(s, nutation),
        MOD: osv_mod_to_j2000,
    }
    while osv.frame != to:
        if FRAMES.index(to) > FRAMES.index(osv.frame):
            osv = forward[osv.frame](osv)
        else:
            osv = backward[osv.frame](osv)
    return osv
