"""
Two-dimensional shallow water equations with variable bottom topography.

    h_t + (h v1)_x + (h v2)_y = 0
    (h v1)_t + (h v1^2 + g h^2 / 2)_x + (h v1 v2)_y + g h b_x = 0
    (h v2)_t + (h v1 v2)_x + (h v2^2 + g h^2 / 2)_y + g h b_y = 0

Conservative variables:
    h     - water height above the bottom
    h_v1  - momentum in x
    h_v2  - momentum in y
    b     - bottom topography (stored with the solution, never transported)

Primitive variables use the total water height H = h + b.

The bottom topography gradient is a non-conservative term and is handled by
the non-symmetric two-point fluxes defined in this module. The flux and
dissipation of b are always exactly zero.

References:
    LeVeque (2002), Finite Volume Methods for Hyperbolic Problems, Ch. 13
    Fjordholm, Mishra, Tadmor (2011), doi:10.1016/j.jcp.2011.03.042
    Wintermeyer et al. (2017), doi:10.1016/j.jcp.2017.03.036
    Audusse et al. (2004), doi:10.1137/S1064827503431090
"""

import numpy as np
from dataclasses import dataclass
from typing import ClassVar, Tuple

from .equations import (AbstractEquations, Direction, as_normal, normal_norm,
                        stack_components)


@dataclass(frozen=True)
class ShallowWaterEquations2D(AbstractEquations):
    """
    Shallow water equations in two space dimensions.

    Attributes:
        gravity: Gravitational constant g
        H0: Reference total water height for "lake-at-rest" setups
    """
    gravity: float
    H0: float = 0.0

    ndims: ClassVar[int] = 2
    n_vars: ClassVar[int] = 4
    has_nonconservative_terms: ClassVar[bool] = True
    transported: ClassVar[Tuple[bool, ...]] = (True, True, True, False)

    def varnames(self, kind: str = 'cons') -> Tuple[str, ...]:
        if kind == 'cons':
            return ('h', 'h_v1', 'h_v2', 'b')
        if kind == 'prim':
            return ('H', 'v1', 'v2', 'b')
        raise ValueError(f"Unknown variable kind: {kind}. Options: 'cons', 'prim'")

    # --- Derived quantities ---

    def waterheight(self, u: np.ndarray) -> np.ndarray:
        return u[0]

    def velocity(self, u: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Velocity components. Not guarded against h = 0."""
        h = u[0]
        return u[1] / h, u[2] / h

    def pressure(self, u: np.ndarray) -> np.ndarray:
        """Hydrostatic pressure g h^2 / 2."""
        return 0.5 * self.gravity * u[0]**2

    def waterheight_pressure(self, u: np.ndarray) -> np.ndarray:
        return self.waterheight(u) * self.pressure(u)

    def normal_velocity(self, u: np.ndarray, normal: np.ndarray) -> np.ndarray:
        v1, v2 = self.velocity(u)
        return v1 * normal[0] + v2 * normal[1]

    def signal_speed(self, u: np.ndarray) -> np.ndarray:
        """Gravity wave celerity sqrt(g h)."""
        return np.sqrt(self.gravity * u[0])

    # --- Fluxes ---

    def flux(self, u: np.ndarray, direction: Direction) -> np.ndarray:
        normal = as_normal(direction, self.ndims)
        h = u[0]
        v1, v2 = self.velocity(u)

        h_v_normal = h * (v1 * normal[0] + v2 * normal[1])
        p = 0.5 * self.gravity * h**2

        f1 = h_v_normal
        f2 = h_v_normal * v1 + p * normal[0]
        f3 = h_v_normal * v2 + p * normal[1]
        return stack_components(f1, f2, f3, 0.0)

    def max_abs_speeds(self, u: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        v1, v2 = self.velocity(u)
        c = self.signal_speed(u)
        return np.abs(v1) + c, np.abs(v2) + c

    def calc_wavespeed_roe(self, u_ll: np.ndarray, u_rr: np.ndarray,
                           direction: Direction) -> Tuple[np.ndarray, np.ndarray]:
        """
        Roe-averaged normal velocity and celerity sqrt(g h_roe).

        See Ullrich, Jablonowski, van Leer (2010), eq. (62),
        doi:10.1016/j.jcp.2010.04.044. Two dry states give NaN.
        """
        normal = as_normal(direction, self.ndims)
        h_ll = u_ll[0]
        h_rr = u_rr[0]
        v1_ll, v2_ll = self.velocity(u_ll)
        v1_rr, v2_rr = self.velocity(u_rr)

        h_roe = 0.5 * (h_ll + h_rr)
        c_roe = np.sqrt(self.gravity * h_roe) * normal_norm(normal)

        h_ll_sqrt = np.sqrt(h_ll)
        h_rr_sqrt = np.sqrt(h_rr)
        inv_sum = 1.0 / (h_ll_sqrt + h_rr_sqrt)

        v1_roe = (h_ll_sqrt * v1_ll + h_rr_sqrt * v1_rr) * inv_sum
        v2_roe = (h_ll_sqrt * v2_ll + h_rr_sqrt * v2_rr) * inv_sum
        v_roe = v1_roe * normal[0] + v2_roe * normal[1]

        return v_roe, c_roe

    # --- Variable conversions ---

    def cons2prim(self, u: np.ndarray) -> np.ndarray:
        h, _, _, b = u
        v1, v2 = self.velocity(u)
        return stack_components(h + b, v1, v2, b)

    def prim2cons(self, prim: np.ndarray) -> np.ndarray:
        H, v1, v2, b = prim
        h = H - b
        return stack_components(h, h * v1, h * v2, b)

    def cons2entropy(self, u: np.ndarray) -> np.ndarray:
        """Entropy variables; the last entry still carries b."""
        h, _, _, b = u
        v1, v2 = self.velocity(u)
        w1 = self.gravity * (h + b) - 0.5 * (v1**2 + v2**2)
        return stack_components(w1, v1, v2, b)

    def entropy2cons(self, w: np.ndarray) -> np.ndarray:
        w1, w2, w3, b = w
        h = (w1 + 0.5 * (w2**2 + w3**2)) / self.gravity - b
        return stack_components(h, h * w2, h * w3, b)

    # --- Energies ---

    def entropy(self, u: np.ndarray) -> np.ndarray:
        """The total energy is the mathematical entropy."""
        return self.energy_total(u)

    def energy_total(self, u: np.ndarray) -> np.ndarray:
        h, h_v1, h_v2, b = u
        return ((h_v1**2 + h_v2**2) / (2 * h) + 0.5 * self.gravity * h**2
                + self.gravity * h * b)

    def energy_kinetic(self, u: np.ndarray) -> np.ndarray:
        h, h_v1, h_v2, _ = u
        return (h_v1**2 + h_v2**2) / (2 * h)

    def energy_internal(self, u: np.ndarray) -> np.ndarray:
        return self.energy_total(u) - self.energy_kinetic(u)

    def lake_at_rest_error(self, u: np.ndarray) -> np.ndarray:
        """Deviation of H = h + b from the reference level H0."""
        h, _, _, b = u
        return np.abs(self.H0 - (h + b))


# --- Two-point fluxes ---

def flux_fjordholm_etal(u_ll: np.ndarray, u_rr: np.ndarray,
                        direction: Direction,
                        equations: ShallowWaterEquations2D) -> np.ndarray:
    """
    Total energy conservative flux, eq. (4.1) of Fjordholm et al. (2011).

    Only well-balanced as a surface flux when b is non-constant; use
    flux_wintermeyer_etal as volume flux.
    """
    normal = as_normal(direction, equations.ndims)
    h_ll = u_ll[0]
    h_rr = u_rr[0]
    v1_ll, v2_ll = equations.velocity(u_ll)
    v1_rr, v2_rr = equations.velocity(u_rr)

    v_dot_n_ll = v1_ll * normal[0] + v2_ll * normal[1]
    v_dot_n_rr = v1_rr * normal[0] + v2_rr * normal[1]

    # Average each factor of the products in the flux
    h_avg = 0.5 * (h_ll + h_rr)
    v1_avg = 0.5 * (v1_ll + v1_rr)
    v2_avg = 0.5 * (v2_ll + v2_rr)
    p_avg = 0.25 * equations.gravity * (h_ll**2 + h_rr**2)
    v_dot_n_avg = 0.5 * (v_dot_n_ll + v_dot_n_rr)

    f1 = h_avg * v_dot_n_avg
    f2 = f1 * v1_avg + p_avg * normal[0]
    f3 = f1 * v2_avg + p_avg * normal[1]
    return stack_components(f1, f2, f3, 0.0)


def flux_wintermeyer_etal(u_ll: np.ndarray, u_rr: np.ndarray,
                          direction: Direction,
                          equations: ShallowWaterEquations2D) -> np.ndarray:
    """
    Total energy conservative split-form flux, Theorem 1 of
    Wintermeyer et al. (2017). Well-balanced as a volume flux.
    """
    normal = as_normal(direction, equations.ndims)
    h_ll, h_v1_ll, h_v2_ll = u_ll[0], u_ll[1], u_ll[2]
    h_rr, h_v1_rr, h_v2_rr = u_rr[0], u_rr[1], u_rr[2]
    v1_ll, v2_ll = equations.velocity(u_ll)
    v1_rr, v2_rr = equations.velocity(u_rr)

    h_v1_avg = 0.5 * (h_v1_ll + h_v1_rr)
    h_v2_avg = 0.5 * (h_v2_ll + h_v2_rr)
    v1_avg = 0.5 * (v1_ll + v1_rr)
    v2_avg = 0.5 * (v2_ll + v2_rr)
    p_avg = 0.5 * equations.gravity * h_ll * h_rr

    f1 = h_v1_avg * normal[0] + h_v2_avg * normal[1]
    f2 = f1 * v1_avg + p_avg * normal[0]
    f3 = f1 * v2_avg + p_avg * normal[1]
    return stack_components(f1, f2, f3, 0.0)


def flux_nonconservative_wintermeyer_etal(u_ll: np.ndarray, u_rr: np.ndarray,
                                          direction: Direction,
                                          equations: ShallowWaterEquations2D) -> np.ndarray:
    """
    Non-symmetric two-point volume flux for the term g h grad(b), using the
    left water height. Pair with flux_wintermeyer_etal.
    """
    normal = as_normal(direction, equations.ndims)
    h_ll = u_ll[0]
    b_jump = u_rr[3] - u_ll[3]

    source = equations.gravity * h_ll * b_jump
    return stack_components(0.0, normal[0] * source, normal[1] * source, 0.0)


def flux_nonconservative_fjordholm_etal(u_ll: np.ndarray, u_rr: np.ndarray,
                                        direction: Direction,
                                        equations: ShallowWaterEquations2D) -> np.ndarray:
    """
    Non-symmetric two-point surface flux for g h grad(b) with the averaged
    water height. Pair with flux_fjordholm_etal.
    """
    normal = as_normal(direction, equations.ndims)
    h_average = 0.5 * (u_ll[0] + u_rr[0])
    b_jump = u_rr[3] - u_ll[3]

    source = equations.gravity * h_average * b_jump
    return stack_components(0.0, normal[0] * source, normal[1] * source, 0.0)


def hydrostatic_reconstruction_audusse_etal(u_ll: np.ndarray, u_rr: np.ndarray,
                                            equations: ShallowWaterEquations2D
                                            ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Hydrostatic reconstruction of the water height at an interface.

    The heights are clipped against the higher of the two bottom values,
    h* = max(0, h + b - max(b_ll, b_rr)), and the momenta rebuilt from the
    side velocities. Used with FluxHydrostaticReconstruction and
    flux_nonconservative_audusse_etal.

    Returns:
        u_ll_star, u_rr_star: Reconstructed left and right states
    """
    h_ll, b_ll = u_ll[0], u_ll[3]
    h_rr, b_rr = u_rr[0], u_rr[3]
    v1_ll, v2_ll = equations.velocity(u_ll)
    v1_rr, v2_rr = equations.velocity(u_rr)

    b_max = np.maximum(b_ll, b_rr)
    h_ll_star = np.maximum(0.0, h_ll + b_ll - b_max)
    h_rr_star = np.maximum(0.0, h_rr + b_rr - b_max)

    u_ll_star = stack_components(h_ll_star, h_ll_star * v1_ll, h_ll_star * v2_ll, b_ll)
    u_rr_star = stack_components(h_rr_star, h_rr_star * v1_rr, h_rr_star * v2_rr, b_rr)
    return u_ll_star, u_rr_star


def flux_nonconservative_audusse_etal(u_ll: np.ndarray, u_rr: np.ndarray,
                                      direction: Direction,
                                      equations: ShallowWaterEquations2D) -> np.ndarray:
    """
    Non-symmetric surface flux g (h_ll^2 - h_ll_star^2) built on the
    hydrostatic reconstruction of the left state.
    """
    normal = as_normal(direction, equations.ndims)
    h_ll = u_ll[0]
    u_ll_star, _ = hydrostatic_reconstruction_audusse_etal(u_ll, u_rr, equations)
    h_ll_star = u_ll_star[0]

    source = equations.gravity * (h_ll**2 - h_ll_star**2)
    return stack_components(0.0, normal[0] * source, normal[1] * source, 0.0)


# --- Initial conditions ---

def initial_condition_convergence_test(x: np.ndarray, t: float,
                                       equations: ShallowWaterEquations2D) -> np.ndarray:
    """
    Smooth solution for convergence tests, periodic on [0, sqrt(2)]^2.

    Use together with source_terms_convergence_test.

    Args:
        x: Coordinates (2, ...)
        t: Time

    Returns:
        Conservative state (4, ...)
    """
    c = 7.0
    omega_x = 2 * np.pi * np.sqrt(2.0)
    omega_t = 2 * np.pi
    x1, x2 = x[0], x[1]

    H = c + np.cos(omega_x * x1) * np.sin(omega_x * x2) * np.cos(omega_t * t)
    v1 = 0.5
    v2 = 1.5
    b = (2 + 0.5 * np.sin(np.pi * np.sqrt(2.0) * x1)
         + 0.5 * np.sin(np.pi * np.sqrt(2.0) * x2))
    return equations.prim2cons(stack_components(H, v1, v2, b))


def source_terms_convergence_test(u: np.ndarray, x: np.ndarray, t: float,
                                  equations: ShallowWaterEquations2D) -> np.ndarray:
    """
    Manufactured source terms for initial_condition_convergence_test with
    b = 2 + sin(pi sqrt(2) x)/2 + sin(pi sqrt(2) y)/2.
    """
    c = 7.0
    omega_x = 2 * np.pi * np.sqrt(2.0)
    omega_t = 2 * np.pi
    omega_b = np.sqrt(2.0) * np.pi
    v1 = 0.5
    v2 = 1.5
    x1, x2 = x[0], x[1]

    sinX, cosX = np.sin(omega_x * x1), np.cos(omega_x * x1)
    sinY, cosY = np.sin(omega_x * x2), np.cos(omega_x * x2)
    sinT, cosT = np.sin(omega_t * t), np.cos(omega_t * t)

    H = c + cosX * sinY * cosT
    H_x = -omega_x * sinX * sinY * cosT
    H_y = omega_x * cosX * cosY * cosT
    # b is fixed in time, so H_t = h_t
    H_t = -omega_t * cosX * sinY * sinT

    b = 2 + 0.5 * np.sin(omega_b * x1) + 0.5 * np.sin(omega_b * x2)
    b_x = 0.5 * omega_b * np.cos(omega_b * x1)
    b_y = 0.5 * omega_b * np.cos(omega_b * x2)

    du1 = H_t + v1 * (H_x - b_x) + v2 * (H_y - b_y)
    du2 = v1 * du1 + equations.gravity * (H - b) * H_x
    du3 = v2 * du1 + equations.gravity * (H - b) * H_y
    return stack_components(du1, du2, du3, 0.0)


def initial_condition_weak_blast_wave(x: np.ndarray, t: float,
                                      equations: ShallowWaterEquations2D) -> np.ndarray:
    """Weak blast wave centered at (0.7, 0.7) over a flat bottom."""
    x_norm = x[0] - 0.7
    y_norm = x[1] - 0.7
    r = np.sqrt(x_norm**2 + y_norm**2)
    phi = np.arctan2(y_norm, x_norm)

    inside = r <= 0.5
    H = np.where(inside, 4.0, 3.25)
    v1 = np.where(inside, 0.1882 * np.cos(phi), 0.0)
    v2 = np.where(inside, 0.1882 * np.sin(phi), 0.0)
    b = 0.0
    return equations.prim2cons(stack_components(H, v1, v2, b))
