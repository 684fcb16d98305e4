"""
Interface flux contract shared by the element and boundary loops.
"""

import numpy as np
from typing import Callable, Tuple, Union

from .equations import AbstractEquations, Direction
from .flux import SurfaceFlux


def calc_interface_flux(u_ll: np.ndarray, u_rr: np.ndarray, direction: Direction,
                        surface_flux: Union[Callable, SurfaceFlux],
                        equations: AbstractEquations) -> Tuple[np.ndarray, np.ndarray]:
    """
    Surface flux seen by the two elements sharing an interface.

    For systems without non-conservative terms both sides get the same
    conservative flux. Otherwise surface_flux is a pair
    (flux, nonconservative_flux) and each side adds half of its own
    non-conservative contribution.

    Args:
        u_ll: State of the element on the left/primary side
        u_rr: State of the element on the right/secondary side
        direction: Orientation or normal vector pointing from left to right
        surface_flux: Numerical flux, or (flux, nonconservative_flux) pair
        equations: Equation family

    Returns:
        flux_left, flux_right: Flux values stored for each element
    """
    if not equations.has_nonconservative_terms:
        flux = surface_flux(u_ll, u_rr, direction, equations)
        return flux, flux

    flux_function, nonconservative_flux = surface_flux
    flux = flux_function(u_ll, u_rr, direction, equations)
    noncons_left = nonconservative_flux(u_ll, u_rr, direction, equations)
    noncons_right = nonconservative_flux(u_rr, u_ll, direction, equations)
    return flux + 0.5 * noncons_left, flux + 0.5 * noncons_right
