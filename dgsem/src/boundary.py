"""
Boundary fluxes for the shallow water equations.
"""

import numpy as np
from abc import ABC, abstractmethod

from .equations import AbstractEquations, Direction, as_normal, stack_components
from .flux import SurfaceFlux


class BoundaryCondition(ABC):
    """Abstract base class for boundary fluxes."""

    @abstractmethod
    def compute_flux(self, u_inner: np.ndarray, direction: Direction,
                     surface_flux_functions: SurfaceFlux, equations: AbstractEquations,
                     side: str = 'right'):
        """
        Compute the boundary flux pair.

        Args:
            u_inner: State inside the domain
            direction: Orientation, or outward normal vector
            surface_flux_functions: (flux, nonconservative_flux)
            equations: Equation family
            side: Domain side of the boundary for an orientation:
                  'left' (inner state right of the face) or 'right'

        Returns:
            flux, noncons_flux
        """
        pass


class SlipWallBC(BoundaryCondition):
    """
    Slip wall: mirror the normal velocity, keep the tangential velocity and
    the water height. See Toro (2001), Shock-Capturing Methods for
    Free-Surface Shallow Flows, Section 9.2.5.
    """

    def compute_flux(self, u_inner, direction, surface_flux_functions, equations,
                     side='right'):
        surface_flux_function, nonconservative_flux_function = surface_flux_functions

        if isinstance(direction, (int, np.integer)):
            # Bottom topography is taken as continuous across the wall, so
            # the non-conservative term is zero for the mirrored state
            u_boundary = np.array(u_inner, dtype=float)
            u_boundary[direction + 1] = -u_boundary[direction + 1]

            if side == 'right':
                u_ll, u_rr = u_inner, u_boundary
            elif side == 'left':
                u_ll, u_rr = u_boundary, u_inner
            else:
                raise ValueError(f"Unknown boundary side: {side}. Options: 'left', 'right'")
        else:
            normal_direction = as_normal(direction, equations.ndims)
            normal = normal_direction / np.sqrt(np.sum(normal_direction**2, axis=0))
            u_normal = normal[0] * u_inner[1] + normal[1] * u_inner[2]

            u_boundary = stack_components(u_inner[0],
                                          u_inner[1] - 2 * u_normal * normal[0],
                                          u_inner[2] - 2 * u_normal * normal[1],
                                          u_inner[3])
            u_ll, u_rr = u_inner, u_boundary

        flux = surface_flux_function(u_ll, u_rr, direction, equations)
        noncons_flux = nonconservative_flux_function(u_ll, u_rr, direction, equations)
        return flux, noncons_flux
