"""
DGSEM Core Package
==================

Re-exports all public components from dgsem.src
"""

from dgsem.src import (
    AbstractEquations,
    as_normal,
    ShallowWaterEquations2D,
    CompressibleEulerEquations2D,
    flux_fjordholm_etal,
    flux_wintermeyer_etal,
    flux_nonconservative_fjordholm_etal,
    flux_nonconservative_wintermeyer_etal,
    flux_nonconservative_audusse_etal,
    hydrostatic_reconstruction_audusse_etal,
    initial_condition_convergence_test,
    initial_condition_weak_blast_wave,
    source_terms_convergence_test,
    max_abs_speed_naive,
    max_abs_speed,
    min_max_speed_naive,
    min_max_speed_davis,
    min_max_speed_einfeldt,
    max_dt,
    NumericalFlux,
    DissipationLocalLaxFriedrichs,
    FluxLaxFriedrichs,
    FluxHLL,
    FluxHydrostaticReconstruction,
    flux_central,
    flux_lax_friedrichs,
    flux_hll,
    flux_hlle,
    Basis,
    ElementContainer,
    element_mean,
    element_means,
    calc_interface_flux,
    InadmissibleMeanError,
    LimiterStatus,
    PositivityPreservingLimiterZhangShu,
    EntropyBoundedLimiter,
    limiter_zhang_shu,
    limiter_entropy_bounded,
    exp_entropy_change,
    BoundaryCondition,
    SlipWallBC,
    SourceTerm,
    ConvergenceTestSource,
    CompositeSourceTerm,
)

__all__ = [
    'AbstractEquations',
    'as_normal',
    'ShallowWaterEquations2D',
    'CompressibleEulerEquations2D',
    'flux_fjordholm_etal',
    'flux_wintermeyer_etal',
    'flux_nonconservative_fjordholm_etal',
    'flux_nonconservative_wintermeyer_etal',
    'flux_nonconservative_audusse_etal',
    'hydrostatic_reconstruction_audusse_etal',
    'initial_condition_convergence_test',
    'initial_condition_weak_blast_wave',
    'source_terms_convergence_test',
    'max_abs_speed_naive',
    'max_abs_speed',
    'min_max_speed_naive',
    'min_max_speed_davis',
    'min_max_speed_einfeldt',
    'max_dt',
    'NumericalFlux',
    'DissipationLocalLaxFriedrichs',
    'FluxLaxFriedrichs',
    'FluxHLL',
    'FluxHydrostaticReconstruction',
    'flux_central',
    'flux_lax_friedrichs',
    'flux_hll',
    'flux_hlle',
    'Basis',
    'ElementContainer',
    'element_mean',
    'element_means',
    'calc_interface_flux',
    'InadmissibleMeanError',
    'LimiterStatus',
    'PositivityPreservingLimiterZhangShu',
    'EntropyBoundedLimiter',
    'limiter_zhang_shu',
    'limiter_entropy_bounded',
    'exp_entropy_change',
    'BoundaryCondition',
    'SlipWallBC',
    'SourceTerm',
    'ConvergenceTestSource',
    'CompositeSourceTerm',
]
