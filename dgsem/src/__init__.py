"""
DGSEM Flux and Limiter Core
===========================

Numerical fluxes, wave-speed estimates and stage limiters for nodal
discontinuous Galerkin spectral element methods on tree meshes.

Features:
- Shallow water equations with bottom topography (non-conservative term)
- Compressible Euler equations
- Energy conservative and well-balanced two-point fluxes
- Hydrostatic reconstruction for discontinuous topography
- Local Lax-Friedrichs and HLL fluxes with four wave-speed estimates
- Zhang-Shu positivity limiter and entropy-bounded limiter

State representation:
    u has the variable axis first, (n_vars,) or (n_vars, ...); the solution
    of all elements is (n_vars, n_nodes, ..., n_elements).

Example:
    equations = ShallowWaterEquations2D(gravity=9.81)
    surface_flux = (FluxHydrostaticReconstruction(flux_hll),
                    flux_nonconservative_audusse_etal)
    flux_left, flux_right = calc_interface_flux(u_ll, u_rr, 0, surface_flux,
                                                equations)

    limiter = PositivityPreservingLimiterZhangShu(thresholds=(1e-6,),
                                                  variables=('waterheight',))
    limiter(u, equations, basis, elements)
"""

from .equations import AbstractEquations, as_normal
from .shallow_water import (
    ShallowWaterEquations2D,
    flux_fjordholm_etal,
    flux_wintermeyer_etal,
    flux_nonconservative_fjordholm_etal,
    flux_nonconservative_wintermeyer_etal,
    flux_nonconservative_audusse_etal,
    hydrostatic_reconstruction_audusse_etal,
    initial_condition_convergence_test,
    initial_condition_weak_blast_wave,
    source_terms_convergence_test,
)
from .euler import CompressibleEulerEquations2D
from .wave_speeds import (
    max_abs_speed_naive,
    max_abs_speed,
    min_max_speed_naive,
    min_max_speed_davis,
    min_max_speed_einfeldt,
    max_dt,
)
from .flux import (
    NumericalFlux,
    DissipationLocalLaxFriedrichs,
    FluxLaxFriedrichs,
    FluxHLL,
    FluxHydrostaticReconstruction,
    flux_central,
    flux_lax_friedrichs,
    flux_hll,
    flux_hlle,
)
from .elements import Basis, ElementContainer, element_mean, element_means
from .driver import calc_interface_flux
from .limiters import (
    InadmissibleMeanError,
    LimiterStatus,
    PositivityPreservingLimiterZhangShu,
    EntropyBoundedLimiter,
    limiter_zhang_shu,
    limiter_entropy_bounded,
    exp_entropy_change,
)
from .boundary import BoundaryCondition, SlipWallBC
from .sources import SourceTerm, ConvergenceTestSource, CompositeSourceTerm

__all__ = [
    # Equations
    'AbstractEquations',
    'as_normal',
    'ShallowWaterEquations2D',
    'CompressibleEulerEquations2D',

    # Shallow water two-point fluxes and setups
    'flux_fjordholm_etal',
    'flux_wintermeyer_etal',
    'flux_nonconservative_fjordholm_etal',
    'flux_nonconservative_wintermeyer_etal',
    'flux_nonconservative_audusse_etal',
    'hydrostatic_reconstruction_audusse_etal',
    'initial_condition_convergence_test',
    'initial_condition_weak_blast_wave',
    'source_terms_convergence_test',

    # Wave speeds
    'max_abs_speed_naive',
    'max_abs_speed',
    'min_max_speed_naive',
    'min_max_speed_davis',
    'min_max_speed_einfeldt',
    'max_dt',

    # Numerical fluxes
    'NumericalFlux',
    'DissipationLocalLaxFriedrichs',
    'FluxLaxFriedrichs',
    'FluxHLL',
    'FluxHydrostaticReconstruction',
    'flux_central',
    'flux_lax_friedrichs',
    'flux_hll',
    'flux_hlle',

    # Elements and interface flux
    'Basis',
    'ElementContainer',
    'element_mean',
    'element_means',
    'calc_interface_flux',

    # Limiters
    'InadmissibleMeanError',
    'LimiterStatus',
    'PositivityPreservingLimiterZhangShu',
    'EntropyBoundedLimiter',
    'limiter_zhang_shu',
    'limiter_entropy_bounded',
    'exp_entropy_change',

    # Boundary conditions
    'BoundaryCondition',
    'SlipWallBC',

    # Source terms
    'SourceTerm',
    'ConvergenceTestSource',
    'CompositeSourceTerm',
]

__version__ = '1.0.0'
