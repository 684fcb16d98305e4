"""
Two-dimensional compressible Euler equations for a calorically perfect gas.

Conservative variables:
    rho     - density
    rho_v1  - momentum in x
    rho_v2  - momentum in y
    rho_e   - total energy per volume

Primitive variables are (rho, v1, v2, p).
"""

import numpy as np
from dataclasses import dataclass
from typing import ClassVar, Tuple

from .equations import (AbstractEquations, Direction, as_normal, normal_norm,
                        stack_components)


@dataclass(frozen=True)
class CompressibleEulerEquations2D(AbstractEquations):
    """Compressible Euler equations with ratio of specific heats gamma."""
    gamma: float = 1.4

    ndims: ClassVar[int] = 2
    n_vars: ClassVar[int] = 4
    has_nonconservative_terms: ClassVar[bool] = False
    transported: ClassVar[Tuple[bool, ...]] = (True, True, True, True)

    def varnames(self, kind: str = 'cons') -> Tuple[str, ...]:
        if kind == 'cons':
            return ('rho', 'rho_v1', 'rho_v2', 'rho_e')
        if kind == 'prim':
            return ('rho', 'v1', 'v2', 'p')
        raise ValueError(f"Unknown variable kind: {kind}. Options: 'cons', 'prim'")

    # --- Derived quantities ---

    def density(self, u: np.ndarray) -> np.ndarray:
        return u[0]

    def velocity(self, u: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        rho = u[0]
        return u[1] / rho, u[2] / rho

    def pressure(self, u: np.ndarray) -> np.ndarray:
        rho, rho_v1, rho_v2, rho_e = u
        return (self.gamma - 1) * (rho_e - 0.5 * (rho_v1**2 + rho_v2**2) / rho)

    def density_pressure(self, u: np.ndarray) -> np.ndarray:
        return self.density(u) * self.pressure(u)

    def entropy_thermodynamic(self, u: np.ndarray) -> np.ndarray:
        """Specific entropy s = ln(p) - gamma ln(rho)."""
        return np.log(self.pressure(u)) - self.gamma * np.log(u[0])

    def entropy_math(self, u: np.ndarray) -> np.ndarray:
        return -u[0] * self.entropy_thermodynamic(u) / (self.gamma - 1)

    def entropy(self, u: np.ndarray) -> np.ndarray:
        return self.entropy_math(u)

    def normal_velocity(self, u: np.ndarray, normal: np.ndarray) -> np.ndarray:
        v1, v2 = self.velocity(u)
        return v1 * normal[0] + v2 * normal[1]

    def signal_speed(self, u: np.ndarray) -> np.ndarray:
        """Speed of sound sqrt(gamma p / rho)."""
        return np.sqrt(self.gamma * self.pressure(u) / u[0])

    # --- Fluxes ---

    def flux(self, u: np.ndarray, direction: Direction) -> np.ndarray:
        normal = as_normal(direction, self.ndims)
        rho, rho_e = u[0], u[3]
        v1, v2 = self.velocity(u)
        p = self.pressure(u)

        v_normal = v1 * normal[0] + v2 * normal[1]
        rho_v_normal = rho * v_normal

        f1 = rho_v_normal
        f2 = rho_v_normal * v1 + p * normal[0]
        f3 = rho_v_normal * v2 + p * normal[1]
        f4 = (rho_e + p) * v_normal
        return stack_components(f1, f2, f3, f4)

    def max_abs_speeds(self, u: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        v1, v2 = self.velocity(u)
        c = self.signal_speed(u)
        return np.abs(v1) + c, np.abs(v2) + c

    def calc_wavespeed_roe(self, u_ll: np.ndarray, u_rr: np.ndarray,
                           direction: Direction) -> Tuple[np.ndarray, np.ndarray]:
        """Roe averages of the normal velocity and speed of sound (via enthalpy)."""
        normal = as_normal(direction, self.ndims)
        rho_ll, rho_rr = u_ll[0], u_rr[0]
        v1_ll, v2_ll = self.velocity(u_ll)
        v1_rr, v2_rr = self.velocity(u_rr)
        p_ll = self.pressure(u_ll)
        p_rr = self.pressure(u_rr)

        sqrt_rho_ll = np.sqrt(rho_ll)
        sqrt_rho_rr = np.sqrt(rho_rr)
        inv_sum_sqrt_rho = 1.0 / (sqrt_rho_ll + sqrt_rho_rr)

        v1_roe = (sqrt_rho_ll * v1_ll + sqrt_rho_rr * v1_rr) * inv_sum_sqrt_rho
        v2_roe = (sqrt_rho_ll * v2_ll + sqrt_rho_rr * v2_rr) * inv_sum_sqrt_rho
        v_roe = v1_roe * normal[0] + v2_roe * normal[1]
        v_roe_mag = v1_roe**2 + v2_roe**2

        H_ll = (u_ll[3] + p_ll) / rho_ll
        H_rr = (u_rr[3] + p_rr) / rho_rr
        H_roe = (sqrt_rho_ll * H_ll + sqrt_rho_rr * H_rr) * inv_sum_sqrt_rho
        c_roe = np.sqrt((self.gamma - 1) * (H_roe - 0.5 * v_roe_mag)) * normal_norm(normal)

        return v_roe, c_roe

    # --- Variable conversions ---

    def cons2prim(self, u: np.ndarray) -> np.ndarray:
        v1, v2 = self.velocity(u)
        return stack_components(u[0], v1, v2, self.pressure(u))

    def prim2cons(self, prim: np.ndarray) -> np.ndarray:
        rho, v1, v2, p = prim
        rho_e = p / (self.gamma - 1) + 0.5 * rho * (v1**2 + v2**2)
        return stack_components(rho, rho * v1, rho * v2, rho_e)

    def cons2entropy(self, u: np.ndarray) -> np.ndarray:
        rho = u[0]
        v1, v2 = self.velocity(u)
        p = self.pressure(u)
        s = np.log(p) - self.gamma * np.log(rho)
        rho_p = rho / p

        w1 = (self.gamma - s) / (self.gamma - 1) - 0.5 * rho_p * (v1**2 + v2**2)
        return stack_components(w1, rho_p * v1, rho_p * v2, -rho_p)

    def entropy2cons(self, w: np.ndarray) -> np.ndarray:
        """
        Inverse of cons2entropy, after Hughes, Franca, Mallet (1986),
        doi:10.1016/0045-7825(86)90127-1.
        """
        gamma = self.gamma
        # Rescale to the entropy -rho s used by Hughes et al.
        V1, V2, V3, V5 = w * (gamma - 1)

        s = gamma - V1 + (V2**2 + V3**2) / (2 * V5)
        rho_iota = (((gamma - 1) / (-V5)**gamma)**(1 / (gamma - 1))
                    * np.exp(-s / (gamma - 1)))

        rho = -rho_iota * V5
        rho_v1 = rho_iota * V2
        rho_v2 = rho_iota * V3
        rho_e = rho_iota * (1 - (V2**2 + V3**2) / (2 * V5))
        return stack_components(rho, rho_v1, rho_v2, rho_e)
