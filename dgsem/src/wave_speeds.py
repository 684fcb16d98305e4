"""
Wave-speed estimates for stability and for Riemann-type dissipation.

All estimators share the signature (u_ll, u_rr, direction, equations) and
work for any equation family through its normal_velocity, signal_speed and
calc_wavespeed_roe operations. For a normal vector the speeds are scaled by
its magnitude.

From loosest (cheapest) to tightest:
    max_abs_speed_naive     max(|v_ll|, |v_rr|) + max(c_ll, c_rr)
    max_abs_speed           max(|v_ll| + c_ll, |v_rr| + c_rr)
    min_max_speed_davis     min/max over v -+ c of both sides
    min_max_speed_einfeldt  Davis bounds tightened with Roe averages
"""

import numpy as np
from typing import Tuple

from .equations import AbstractEquations, Direction, as_normal, normal_norm


def _side_speeds(u_ll, u_rr, direction, equations):
    """Normal velocities and scaled celerities on both sides."""
    normal = as_normal(direction, equations.ndims)
    norm_ = normal_norm(normal)
    v_ll = equations.normal_velocity(u_ll, normal)
    v_rr = equations.normal_velocity(u_rr, normal)
    c_ll = equations.signal_speed(u_ll) * norm_
    c_rr = equations.signal_speed(u_rr) * norm_
    return v_ll, v_rr, c_ll, c_rr


def max_abs_speed_naive(u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                        equations: AbstractEquations) -> np.ndarray:
    """Maximum velocity magnitude plus maximum celerity."""
    v_ll, v_rr, c_ll, c_rr = _side_speeds(u_ll, u_rr, direction, equations)
    return np.maximum(np.abs(v_ll), np.abs(v_rr)) + np.maximum(c_ll, c_rr)


def max_abs_speed(u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                  equations: AbstractEquations) -> np.ndarray:
    """Less overestimating than max_abs_speed_naive."""
    v_ll, v_rr, c_ll, c_rr = _side_speeds(u_ll, u_rr, direction, equations)
    return np.maximum(np.abs(v_ll) + c_ll, np.abs(v_rr) + c_rr)


def min_max_speed_naive(u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                        equations: AbstractEquations) -> Tuple[np.ndarray, np.ndarray]:
    """Left-going speed of the left state and right-going speed of the right state."""
    v_ll, v_rr, c_ll, c_rr = _side_speeds(u_ll, u_rr, direction, equations)
    return v_ll - c_ll, v_rr + c_rr


def min_max_speed_davis(u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                        equations: AbstractEquations) -> Tuple[np.ndarray, np.ndarray]:
    """Davis (1988) estimates over both sides."""
    v_ll, v_rr, c_ll, c_rr = _side_speeds(u_ll, u_rr, direction, equations)
    lambda_min = np.minimum(v_ll - c_ll, v_rr - c_rr)
    lambda_max = np.maximum(v_ll + c_ll, v_rr + c_rr)
    return lambda_min, lambda_max


def min_max_speed_einfeldt(u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                           equations: AbstractEquations) -> Tuple[np.ndarray, np.ndarray]:
    """
    Einfeldt (1988) estimates using the Roe-averaged velocity and celerity.

    Not guarded against two dry states (both Roe weights zero).
    """
    v_ll, v_rr, c_ll, c_rr = _side_speeds(u_ll, u_rr, direction, equations)
    v_roe, c_roe = equations.calc_wavespeed_roe(u_ll, u_rr, direction)
    lambda_min = np.minimum(v_ll - c_ll, v_roe - c_roe)
    lambda_max = np.maximum(v_rr + c_rr, v_roe + c_roe)
    return lambda_min, lambda_max


def max_dt(u: np.ndarray, inverse_jacobian: np.ndarray, equations: AbstractEquations,
           cfl: float, polydeg: int) -> float:
    """
    CFL-limited step size over all nodes of all elements.

    Args:
        u: Solution (n_vars, n_nodes, ..., n_elements)
        inverse_jacobian: (n_elements,) or per node
        equations: Equation family
        cfl: CFL number
        polydeg: Polynomial degree of the basis

    Returns:
        dt: Largest admissible step size
    """
    speeds = equations.max_abs_speeds(u)
    inv_jac = np.abs(inverse_jacobian)
    max_lambda = np.max(sum(speeds) * inv_jac)
    return cfl * 2 / ((polydeg + 1) * max_lambda)
