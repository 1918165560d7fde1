"""
astrocore.kepler — Keplerian Orbit Engine
===========================================

Two-body orbital mechanics for closed (elliptical) orbits: osculating
elements from a state vector, Kepler equation solver and propagation of
elements back to a state vector at any instant.

Angles are in degrees throughout, matching the rest of the frame
machinery.  Elements are *osculating*: propagation from them ignores all
perturbations and is only as good as the freshness of their epoch.

Orbital-plane frame
-------------------
Periapsis along +x, orbit normal along +z.  The orbital frame is
brought into the reference frame of the input state vector with::

    r = R_z(Ω) · R_x(i) · R_z(ω) · r_orbital
"""

from dataclasses import dataclass
from datetime import datetime
import math
from typing import Iterable, NamedTuple

import numpy as np
from numpy.typing import NDArray

from .logging_config import get_logger
from .state import J2000, OrbitStateVector, check_frame
from .timescales import as_utc
from .utils import (
    MU_EARTH, KEPLER_TOLERANCE, KEPLER_MAX_ITERATIONS, INCLINATION_MIN_DEG,
    acosd, atan2d, clamp_unit, cosd, sind,
    cross, norm, rot_x_matrix, rot_z_matrix, vecmul, vecsub,
)

logger = get_logger(__name__)


class EccentricAnomalySolution(NamedTuple):
    """Result of the Newton–Raphson Kepler solver.

    ``converged`` is False when the iteration budget ran out; ``value`` is
    then the best available iterate.
    """
    value: float        # eccentric anomaly [deg]
    converged: bool
    iterations: int
    residual: float     # |E − e sin E − M| [rad]


@dataclass(frozen=True, eq=False)
class KeplerianElements:
    """Osculating elements of an elliptical orbit at ``epoch``.

    Attributes
    ----------
    a : semi-major axis [m]
    b : semi-minor axis [m]
    ecc : (3,) eccentricity vector
    ecc_norm : eccentricity, 0 ≤ e < 1
    incl : inclination [deg]
    raan : longitude of the ascending node Ω [deg]
    argp : argument of periapsis ω [deg]
    mean_anomaly : M at epoch [deg]
    mu : gravitational parameter [m³/s²]
    epoch : datetime (UTC)
    k : (3,) specific angular momentum r × v [m²/s]
    energy : specific orbital energy [m²/s²]
    frame : frame of the state vector the elements were derived from
    """
    a: float
    b: float
    ecc: NDArray
    ecc_norm: float
    incl: float
    raan: float
    argp: float
    mean_anomaly: float
    mu: float
    epoch: datetime
    k: NDArray
    energy: float
    frame: str = J2000

    @property
    def period(self) -> float:
        """Orbital period [s]."""
        return compute_period(self.a, self.mu)

    @property
    def periapsis(self) -> float:
        return self.a * (1.0 - self.ecc_norm)

    @property
    def apoapsis(self) -> float:
        return self.a * (1.0 + self.ecc_norm)

    def orbital_to_reference_matrix(self) -> NDArray:
        """3×3 matrix R_z(Ω) · R_x(i) · R_z(ω)."""
        return (rot_z_matrix(self.raan)
                @ rot_x_matrix(self.incl)
                @ rot_z_matrix(self.argp))


# ════════════════════════════════════════════════════════════════════════════
#  Kepler Equation
# ════════════════════════════════════════════════════════════════════════════

def solve_eccentric_anomaly(M: float, e: float,
                            tolerance: float = KEPLER_TOLERANCE,
                            max_iterations: int = KEPLER_MAX_ITERATIONS,
                            ) -> EccentricAnomalySolution:
    """Solve Kepler's equation  M = E − e sin(E)  via Newton–Raphson.

    The iteration runs in radians on M reduced to [0, 2π); the whole
    revolutions removed are added back, so the returned E tracks M.
    Starts from E₀ = M + 0.85·e·sign(sin M), or from E₀ = π when
    e ≥ 0.8, rather than the plain E₀ = M.  The converged E is the
    same; iteration counts are lower than with the plain start.

    Parameters
    ----------
    M : float — mean anomaly [deg]
    e : float — eccentricity, 0 ≤ e < 1
    tolerance : float — bound on |E − e sin E − M| [rad]
    max_iterations : int — iteration budget

    Returns
    -------
    EccentricAnomalySolution — E [deg] with convergence information

    Raises
    ------
    ValueError — if e is outside [0, 1)
    """
    if not 0.0 <= e < 1.0:
        raise ValueError(f"Eccentricity must be in [0, 1), got {e}")

    M_rad = math.radians(M)
    revs = math.floor(M_rad / (2.0 * math.pi))
    Mr = M_rad - 2.0 * math.pi * revs

    # Smart initial guess (Markley-style)
    E = Mr + 0.85 * e * float(np.sign(math.sin(Mr))) if e < 0.8 else math.pi

    iterations = 0
    residual = E - e * math.sin(E) - Mr
    while abs(residual) >= tolerance and iterations < max_iterations:
        E -= residual / (1.0 - e * math.cos(E))
        iterations += 1
        residual = E - e * math.sin(E) - Mr

    converged = abs(residual) < tolerance
    if not converged:
        logger.warning("Kepler solver did not converge: M=%.6f deg e=%.6f "
                       "residual=%.3e after %d iterations",
                       M, e, abs(residual), iterations)

    return EccentricAnomalySolution(
        value=math.degrees(E + 2.0 * math.pi * revs),
        converged=converged,
        iterations=iterations,
        residual=abs(residual),
    )


def compute_natural_anomaly(ecc_norm: float, E: float) -> float:
    """True anomaly [deg] from eccentric anomaly E [deg]."""
    denom = 1.0 - ecc_norm * cosd(E)
    xu = (cosd(E) - ecc_norm) / denom
    yu = math.sqrt(1.0 - ecc_norm * ecc_norm) * sind(E) / denom
    return float(atan2d(yu, xu))


def compute_period(a: float, mu: float = MU_EARTH) -> float:
    """Orbital period [s] for semi-major axis a [m]."""
    return 2.0 * math.pi * math.sqrt(a * a * a / mu)


def compute_mean_motion(a: float, mu: float = MU_EARTH) -> float:
    """Mean motion [deg/s] for semi-major axis a [m]."""
    return 360.0 / compute_period(a, mu)


# ════════════════════════════════════════════════════════════════════════════
#  State Vector → Elements
# ════════════════════════════════════════════════════════════════════════════

def _argument_of_periapsis(ecc: NDArray, incl: float, raan: float,
                           incl_min: float) -> float:
    if incl < incl_min:
        # Ω undefined; only the longitude of periapsis Ω + ω is meaningful.
        return float(atan2d(ecc[1], ecc[0]) - raan)
    if incl > 180.0 - incl_min:
        return float(raan - atan2d(ecc[1], ecc[0]))

    # Use whichever formula divides by the larger of |sin Ω| and |cos Ω|.
    asc_y = ecc[2] / sind(incl)
    if abs(sind(raan)) < abs(cosd(raan)):
        asc_x = (1.0 / cosd(raan)) * (
            ecc[0] + sind(raan) * cosd(incl) * ecc[2] / sind(incl))
    else:
        asc_x = (1.0 / sind(raan)) * (
            ecc[1] - cosd(raan) * cosd(incl) * ecc[2] / sind(incl))
    return float(atan2d(asc_y, asc_x))


def osv_to_kepler(r: NDArray, v: NDArray, timestamp: datetime,
                  mu: float = MU_EARTH, frame: str = J2000,
                  incl_min: float = INCLINATION_MIN_DEG) -> KeplerianElements:
    """Compute osculating Keplerian elements from a state vector.

    Parameters
    ----------
    r : (3,) — position [m]
    v : (3,) — velocity [m/s]
    timestamp : datetime — epoch of the state
    mu : float — gravitational parameter [m³/s²]
    frame : str — frame of r, v; carried to propagated states
    incl_min : float — inclination [deg] below which the orbit is
        treated as equatorial

    Returns
    -------
    KeplerianElements

    Raises
    ------
    ValueError — for parabolic or hyperbolic states (e ≥ 1)
    """
    r = np.asarray(r, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    r_norm, v_norm = norm(r), norm(v)

    k = cross(r, v)
    ecc = vecsub(vecmul(cross(v, k), 1.0 / mu), vecmul(r, 1.0 / r_norm))
    ecc_norm = norm(ecc)
    if ecc_norm >= 1.0:
        raise ValueError(f"Only elliptical orbits are supported, got e={ecc_norm:.6f}")

    incl = float(acosd(clamp_unit(k[2] / norm(k))))

    energy = 0.5 * v_norm * v_norm - mu / r_norm
    a = -mu / (2.0 * energy)
    b = a * math.sqrt(1.0 - ecc_norm * ecc_norm)

    raan = float(atan2d(k[0], -k[1]))
    argp = _argument_of_periapsis(ecc, incl, raan, incl_min)

    # Eccentric anomaly from the position expressed in the orbital plane.
    R = rot_z_matrix(raan) @ rot_x_matrix(incl) @ rot_z_matrix(argp)
    r_orbital = R.T @ r
    E = float(atan2d(r_orbital[1] / b, r_orbital[0] / a + ecc_norm))
    M = E - ecc_norm * math.degrees(sind(E))

    return KeplerianElements(
        a=a, b=b, ecc=ecc, ecc_norm=ecc_norm,
        incl=incl, raan=raan, argp=argp, mean_anomaly=M,
        mu=mu, epoch=as_utc(timestamp), k=k, energy=energy,
        frame=check_frame(frame),
    )


def elements_from_osv(osv: OrbitStateVector, mu: float = MU_EARTH) -> KeplerianElements:
    """:func:`osv_to_kepler` on an OrbitStateVector, keeping its frame."""
    return osv_to_kepler(osv.r, osv.v, osv.timestamp, mu=mu, frame=osv.frame)


# ════════════════════════════════════════════════════════════════════════════
#  Elements → State Vector
# ════════════════════════════════════════════════════════════════════════════

def propagate(kepler: KeplerianElements, target: datetime,
              tolerance: float = KEPLER_TOLERANCE,
              max_iterations: int = KEPLER_MAX_ITERATIONS) -> OrbitStateVector:
    """Two-body propagation of osculating elements to ``target``.

    The mean anomaly advances linearly by 360°·Δt/period; the eccentric
    anomaly is re-solved and the orbital-plane state rebuilt with
    dE/dt = n / (1 − e cos E).

    Parameters
    ----------
    kepler : KeplerianElements
    target : datetime — instant to propagate to (may precede the epoch)

    Returns
    -------
    OrbitStateVector — in the frame the elements were derived in
    """
    target = as_utc(target)
    dt = (target - kepler.epoch).total_seconds()
    period = kepler.period

    M_ext = kepler.mean_anomaly + 360.0 * dt / period
    E = solve_eccentric_anomaly(M_ext, kepler.ecc_norm,
                                tolerance, max_iterations).value

    a, b, e = kepler.a, kepler.b, kepler.ecc_norm
    cos_E, sin_E = cosd(E), sind(E)
    r_orbital = np.array([a * (cos_E - e), b * sin_E, 0.0])

    dE_dt = (math.sqrt(kepler.mu) / a**1.5) / (1.0 - e * cos_E)
    v_orbital = np.array([-a * dE_dt * sin_E, b * dE_dt * cos_E, 0.0])

    R = kepler.orbital_to_reference_matrix()
    return OrbitStateVector(r=R @ r_orbital, v=R @ v_orbital,
                            timestamp=target, frame=kepler.frame)


def propagate_trail(kepler: KeplerianElements,
                    timestamps: Iterable[datetime]) -> list[OrbitStateVector]:
    """Propagate the same elements to many instants (orbit trail)."""
    return [propagate(kepler, ts) for ts in timestamps]


def elements_to_osv(a: float, e: float, incl: float, raan: float,
                    argp: float, true_anomaly: float, timestamp: datetime,
                    mu: float = MU_EARTH, frame: str = J2000) -> OrbitStateVector:
    """Convert classical Keplerian elements to a state vector.

    Parameters
    ----------
    a : float — semi-major axis [m]
    e : float — eccentricity, 0 ≤ e < 1
    incl, raan, argp : float — inclination, Ω, ω [deg]
    true_anomaly : float — ν [deg]
    timestamp : datetime
    mu : float — gravitational parameter [m³/s²]

    Returns
    -------
    OrbitStateVector
    """
    if not 0.0 <= e < 1.0:
        raise ValueError(f"Eccentricity must be in [0, 1), got {e}")

    p = a * (1.0 - e**2)               # semi-latus rectum
    r_mag = p / (1.0 + e * cosd(true_anomaly))

    # Position & velocity in the perifocal frame
    r_pqw = r_mag * np.array([cosd(true_anomaly), sind(true_anomaly), 0.0])
    v_pqw = math.sqrt(mu / p) * np.array([-sind(true_anomaly),
                                          e + cosd(true_anomaly), 0.0])

    R = rot_z_matrix(raan) @ rot_x_matrix(incl) @ rot_z_matrix(argp)
    return OrbitStateVector(r=R @ r_pqw, v=R @ v_pqw,
                            timestamp=timestamp, frame=frame)
