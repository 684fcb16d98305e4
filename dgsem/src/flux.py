"""
Numerical flux functions.

Every numerical flux has the signature
    flux(u_ll, u_rr, direction, equations) -> flux vector
and is vectorized over the trailing (face) axes of the states.

Plain two-point fluxes are module-level functions; fluxes that carry
parameters (a wave-speed estimator, a reconstruction) derive from
NumericalFlux and are callable instances.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Callable, Tuple

from .equations import AbstractEquations, Direction
from .wave_speeds import (max_abs_speed, min_max_speed_naive, min_max_speed_davis,
                          min_max_speed_einfeldt)
from .shallow_water import hydrostatic_reconstruction_audusse_etal


def flux_central(u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                 equations: AbstractEquations) -> np.ndarray:
    """Arithmetic mean of the analytic fluxes."""
    f_ll = equations.flux(u_ll, direction)
    f_rr = equations.flux(u_rr, direction)
    return 0.5 * (f_ll + f_rr)


class NumericalFlux(ABC):
    """Abstract base class for parameterized numerical fluxes."""

    @abstractmethod
    def compute_flux(self, u_ll: np.ndarray, u_rr: np.ndarray,
                     direction: Direction, equations: AbstractEquations) -> np.ndarray:
        """
        Compute the numerical flux at a face.

        Args:
            u_ll: Left state (n_vars, ...)
            u_rr: Right state (n_vars, ...)
            direction: Orientation or (unnormalized) normal vector
            equations: Equation family

        Returns:
            Numerical flux (n_vars, ...)
        """
        pass

    def __call__(self, u_ll, u_rr, direction, equations) -> np.ndarray:
        return self.compute_flux(np.asarray(u_ll, dtype=float),
                                 np.asarray(u_rr, dtype=float),
                                 direction, equations)


class DissipationLocalLaxFriedrichs:
    """
    Local Lax-Friedrichs dissipation -0.5 * lambda_max * (u_rr - u_ll).

    Variables that are not transported (e.g. the bottom topography) get no
    dissipation, so a stationary auxiliary field is never smeared.
    """

    def __init__(self, max_abs_speed: Callable = max_abs_speed):
        self.max_abs_speed = max_abs_speed

    def __call__(self, u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                 equations: AbstractEquations) -> np.ndarray:
        lambda_max = self.max_abs_speed(u_ll, u_rr, direction, equations)
        diss = -0.5 * lambda_max * (u_rr - u_ll)
        return diss * equations.broadcast_mask(diss)


class FluxLaxFriedrichs(NumericalFlux):
    """
    Local Lax-Friedrichs (Rusanov) flux:
        F = 0.5 * (F(u_ll) + F(u_rr)) - 0.5 * lambda_max * (u_rr - u_ll)
    """

    def __init__(self, max_abs_speed: Callable = max_abs_speed):
        self.dissipation = DissipationLocalLaxFriedrichs(max_abs_speed)

    def compute_flux(self, u_ll, u_rr, direction, equations):
        return (flux_central(u_ll, u_rr, direction, equations)
                + self.dissipation(u_ll, u_rr, direction, equations))


class FluxHLL(NumericalFlux):
    """
    Two-wave HLL approximate Riemann solver.

    With signed speed bounds lambda_min <= lambda_max:
        lambda_min >= 0:  F(u_ll)
        lambda_max <= 0:  F(u_rr)
        otherwise:        (lambda_max F_ll - lambda_min F_rr
                           + lambda_min lambda_max (u_rr - u_ll)) / (lambda_max - lambda_min)
    The dissipation of non-transported variables is zero.
    """

    def __init__(self, min_max_speed: Callable = min_max_speed_naive):
        self.min_max_speed = min_max_speed

    def compute_flux(self, u_ll, u_rr, direction, equations):
        lambda_min, lambda_max = self.min_max_speed(u_ll, u_rr, direction, equations)
        f_ll = equations.flux(u_ll, direction)
        f_rr = equations.flux(u_rr, direction)

        # Wave structure masks
        mask_left = (lambda_min >= 0) & (lambda_max >= 0)
        mask_right = (lambda_max <= 0) & (lambda_min <= 0)
        mask_blend = ~(mask_left | mask_right)

        denominator = lambda_max - lambda_min
        if np.any(mask_blend & (denominator <= 0)):
            raise ValueError("HLL flux needs lambda_min < lambda_max; fall back "
                             "to a dissipative flux for degenerate wave speeds")
        inv_denominator = 1.0 / np.where(mask_blend, denominator, 1.0)

        diss = (u_rr - u_ll) * equations.broadcast_mask(u_rr)
        f_blend = (lambda_max * inv_denominator * f_ll
                   - lambda_min * inv_denominator * f_rr
                   + lambda_min * lambda_max * inv_denominator * diss)

        return np.where(mask_left, f_ll, np.where(mask_right, f_rr, f_blend))


class FluxHydrostaticReconstruction(NumericalFlux):
    """
    Evaluate a numerical flux on hydrostatically reconstructed states.

    Combined with flux_nonconservative_audusse_etal this keeps the
    "lake-at-rest" state exactly, also across discontinuous topography.
    """

    def __init__(self, numerical_flux: Callable,
                 hydrostatic_reconstruction: Callable = hydrostatic_reconstruction_audusse_etal):
        self.numerical_flux = numerical_flux
        self.hydrostatic_reconstruction = hydrostatic_reconstruction

    def compute_flux(self, u_ll, u_rr, direction, equations):
        u_ll_star, u_rr_star = self.hydrostatic_reconstruction(u_ll, u_rr, equations)
        return self.numerical_flux(u_ll_star, u_rr_star, direction, equations)


SurfaceFlux = Tuple[Callable, Callable]

flux_lax_friedrichs = FluxLaxFriedrichs()
flux_hll = FluxHLL(min_max_speed_davis)
flux_hlle = FluxHLL(min_max_speed_einfeldt)
