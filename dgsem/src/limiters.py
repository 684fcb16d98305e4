"""
Stage limiters applied to the element solution after every explicit stage.

Both limiters follow the same per-element procedure:
    1. scan all nodes for the smallest value of an admissibility quantity
    2. if it violates the bound, compute the volume-weighted element mean
    3. blend every node convexly toward the mean

The blend leaves the element mean unchanged, so the limiters are
conservative. Elements that pass the scan are not touched.

All elements are processed at once: the scan is a minimum over the node
axes, and means and blend factors are computed only for the triggered
elements, selected with a mask over the trailing element axis.

References:
    Zhang, Shu (2010), doi:10.1016/j.jcp.2010.08.016
    Lv, Ihme (2015), doi:10.1016/j.jcp.2015.04.026
"""

import logging
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from .elements import Basis, ElementContainer, element_means
from .equations import AbstractEquations

logger = logging.getLogger(__name__)

Variable = Union[str, Callable[[np.ndarray, AbstractEquations], np.ndarray]]


class InadmissibleMeanError(ValueError):
    """The element mean itself violates the limiter bound."""


class LimiterStatus(Enum):
    """Outcome of the limiter for one element."""
    PASSED = 'passed'
    BLENDED = 'blended'


def resolve_variable(variable: Variable,
                     equations: AbstractEquations) -> Callable[[np.ndarray], np.ndarray]:
    """
    Turn an admissibility variable into a function of the state only.

    Args:
        variable: Name of an equations method (e.g. 'waterheight') or a
                  function(u, equations)
        equations: Equation family
    """
    if isinstance(variable, str):
        method = getattr(equations, variable, None)
        if method is None or not callable(method):
            raise ValueError(f"{type(equations).__name__} has no variable '{variable}'")
        return method
    return lambda u: variable(u, equations)


def _node_minimum(values: np.ndarray) -> np.ndarray:
    """Minimum over the node axes of (n_nodes, ..., n_elements) values."""
    return np.min(values, axis=tuple(range(values.ndim - 1)))


def _expand_nodes(per_element: np.ndarray, like: np.ndarray) -> np.ndarray:
    """Reshape (..., n_elements) to broadcast against the node axes of like."""
    n_node_axes = like.ndim - per_element.ndim
    return per_element.reshape(per_element.shape[:-1] + (1,) * n_node_axes
                               + per_element.shape[-1:])


def _statuses(triggered: np.ndarray) -> List[LimiterStatus]:
    return [LimiterStatus.BLENDED if t else LimiterStatus.PASSED for t in triggered]


# --- Positivity limiter ---

def _zhang_shu(u: np.ndarray, threshold: float, value: Callable[[np.ndarray], np.ndarray],
               volume_weights: np.ndarray, element_ids: np.ndarray) -> np.ndarray:
    """
    Zhang-Shu blend of all elements of u (in place).

    Nodes of a triggered element are blended as theta * u + (1 - theta) * u_mean
    with
        theta = (value_mean - threshold) / (value_mean - value_min)
    The variable is evaluated directly on the mean, assuming Jensen's
    inequality holds for it (e.g. water height, pressure).

    Returns:
        Boolean mask of the blended elements
    """
    value_min = _node_minimum(value(u))
    triggered = value_min < threshold
    if not np.any(triggered):
        return triggered

    blended = np.flatnonzero(triggered)
    u_blend = u[..., blended]
    u_mean = element_means(u_blend, volume_weights[..., blended])
    value_mean = value(u_mean)

    inadmissible = value_mean < threshold
    if np.any(inadmissible):
        first = np.flatnonzero(inadmissible)[0]
        raise InadmissibleMeanError(
            f"Element {element_ids[blended[first]]}: mean value {value_mean[first]:.6e} "
            f"is below the positivity threshold {threshold:.6e}; refine the mesh or "
            f"lower the threshold")

    # theta lies in [0, 1) since value_min < threshold <= value_mean
    theta = (value_mean - threshold) / (value_mean - value_min[blended])
    u[..., blended] = theta * u_blend + (1 - theta) * _expand_nodes(u_mean, u_blend)
    return triggered


def limit_element_zhang_shu(u_element: np.ndarray, threshold: float,
                            variable: Callable[[np.ndarray], np.ndarray],
                            volume_weights: np.ndarray,
                            element: Optional[int] = None) -> LimiterStatus:
    """
    Zhang-Shu positivity limiter for one element (in place).

    Args:
        u_element: Node buffer (n_vars, n_nodes, ...), modified in place
        threshold: Smallest admissible value
        variable: Function(u) -> admissibility values
        volume_weights: Quadrature weight times volume Jacobian per node
        element: Element index, only used in error messages

    Returns:
        PASSED if no node violated the threshold, else BLENDED

    Raises:
        InadmissibleMeanError: The mean value is below the threshold
    """
    triggered = _zhang_shu(u_element[..., np.newaxis], threshold, variable,
                           np.asarray(volume_weights)[..., np.newaxis],
                           np.array([element]))
    return _statuses(triggered)[0]


def limiter_zhang_shu(u: np.ndarray, threshold: float, variable: Variable,
                      equations: AbstractEquations, basis: Basis,
                      elements: ElementContainer) -> List[LimiterStatus]:
    """
    Apply the Zhang-Shu positivity limiter to every element.

    Args:
        u: Solution (n_vars, n_nodes, ..., n_elements), modified in place
        threshold: Smallest admissible value of the variable
        variable: Admissibility variable (see resolve_variable)
        equations: Equation family
        basis: Quadrature basis
        elements: Element metrics

    Returns:
        Limiter status per element
    """
    value = resolve_variable(variable, equations)
    triggered = _zhang_shu(u, threshold, value, elements.all_volume_weights(basis),
                           np.arange(elements.n_elements))
    return _statuses(triggered)


@dataclass(frozen=True)
class PositivityPreservingLimiterZhangShu:
    """
    Positivity limiter applied as a stage callback.

    Each (threshold, variable) pair is enforced in turn, e.g.
        thresholds=(5e-6, 5e-6), variables=('density', 'pressure')

    Attributes:
        thresholds: Smallest admissible value per variable
        variables: Method names of the equations or functions(u, equations)
    """
    thresholds: Tuple[float, ...]
    variables: Tuple[Variable, ...]

    def __post_init__(self):
        object.__setattr__(self, 'thresholds', tuple(self.thresholds))
        object.__setattr__(self, 'variables', tuple(self.variables))
        if len(self.thresholds) != len(self.variables):
            raise ValueError(f"Got {len(self.thresholds)} thresholds for "
                             f"{len(self.variables)} variables")

    def __call__(self, u: np.ndarray, equations: AbstractEquations, basis: Basis,
                 elements: ElementContainer) -> List[List[LimiterStatus]]:
        """Limit u in place; returns the element statuses per variable."""
        statuses = []
        for threshold, variable in zip(self.thresholds, self.variables):
            result = limiter_zhang_shu(u, threshold, variable, equations, basis, elements)
            n_blended = sum(status is LimiterStatus.BLENDED for status in result)
            logger.debug("Positivity limiter on %s: blended %d of %d elements",
                         variable, n_blended, len(result))
            statuses.append(result)
        return statuses


# --- Entropy-bounded limiter ---

def exp_entropy_change(pressure: np.ndarray, density: np.ndarray, gamma: float,
                       exp_entropy: np.ndarray) -> np.ndarray:
    """
    Change of the exponentiated entropy, p - rho^gamma * exp(s).

    Non-negative when the state has an entropy of at least s.
    """
    return pressure - density**gamma * exp_entropy


def _entropy_bounded(u: np.ndarray, u_prev: np.ndarray, exp_entropy_decrease_max: float,
                     equations: AbstractEquations, volume_weights: np.ndarray) -> np.ndarray:
    """
    Entropy-bounded blend of all elements of u (in place).

    The entropy of every node is compared with the entropy of the same
    node in the previous stage. If the largest decrease is beyond
    exp_entropy_decrease_max, nodes are blended as
    (1 - epsilon) * u + epsilon * u_mean with
        epsilon = d_min / (d_min - d_mean)
    clipped to at most 1. The derivation assumes d_mean >= 0, which is
    not enforced during a simulation.

    Returns:
        Boolean mask of the blended elements
    """
    gamma = equations.gamma
    exp_s = np.exp(equations.entropy_thermodynamic(u_prev))
    exp_s_min = _node_minimum(exp_s)

    d_exp_s = exp_entropy_change(equations.pressure(u), equations.density(u), gamma, exp_s)
    d_exp_s_min = np.minimum(0.0, _node_minimum(d_exp_s))

    triggered = d_exp_s_min < exp_entropy_decrease_max
    if not np.any(triggered):
        return triggered

    blended = np.flatnonzero(triggered)
    u_blend = u[..., blended]
    u_mean = element_means(u_blend, volume_weights[..., blended])
    entropy_change_mean = exp_entropy_change(equations.pressure(u_mean),
                                             equations.density(u_mean),
                                             gamma, exp_s_min[blended])

    d_min = d_exp_s_min[blended]
    denominator = d_min - entropy_change_mean
    # Entropy is concave, so d_mean >= d_min up to round-off; elements where
    # the mean is worse are replaced by their mean
    worse_mean = denominator >= 0
    if np.any(worse_mean):
        logger.debug("Entropy-bounded limiter: mean entropy below the worst node in "
                     "%d elements, replacing them by their mean", np.count_nonzero(worse_mean))
    epsilon = np.where(worse_mean, 1.0,
                       np.minimum(d_min / np.where(worse_mean, -1.0, denominator), 1.0))

    u[..., blended] = (1 - epsilon) * u_blend + epsilon * _expand_nodes(u_mean, u_blend)
    return triggered


def limit_element_entropy_bounded(u_element: np.ndarray, u_element_prev: np.ndarray,
                                  exp_entropy_decrease_max: float,
                                  equations: AbstractEquations,
                                  volume_weights: np.ndarray) -> LimiterStatus:
    """
    Entropy-bounded limiter for one element (in place).

    Returns:
        PASSED or BLENDED
    """
    triggered = _entropy_bounded(u_element[..., np.newaxis],
                                 u_element_prev[..., np.newaxis],
                                 exp_entropy_decrease_max, equations,
                                 np.asarray(volume_weights)[..., np.newaxis])
    return _statuses(triggered)[0]


def limiter_entropy_bounded(u: np.ndarray, u_prev: np.ndarray,
                            exp_entropy_decrease_max: float,
                            equations: AbstractEquations, basis: Basis,
                            elements: ElementContainer) -> List[LimiterStatus]:
    """
    Apply the entropy-bounded limiter to every element.

    Args:
        u: Current solution, modified in place
        u_prev: Solution at the previous stage (read only)
        exp_entropy_decrease_max: Largest tolerated decrease (<= 0)
        equations: Equation family with pressure, density and
                   entropy_thermodynamic (compressible Euler)
        basis: Quadrature basis
        elements: Element metrics

    Returns:
        Limiter status per element
    """
    if not hasattr(equations, 'entropy_thermodynamic'):
        raise ValueError(f"Entropy-bounded limiter is not available for "
                         f"{type(equations).__name__}")
    if u_prev.shape != u.shape:
        raise ValueError(f"Previous stage has shape {u_prev.shape}, expected {u.shape}")

    triggered = _entropy_bounded(u, u_prev, exp_entropy_decrease_max, equations,
                                 elements.all_volume_weights(basis))
    return _statuses(triggered)


@dataclass(frozen=True)
class EntropyBoundedLimiter:
    """
    Entropy-bounded limiter applied as a stage callback.

    Attributes:
        exp_entropy_decrease_max: Largest tolerated decrease of the
                                  exponentiated entropy (<= 0)
    """
    exp_entropy_decrease_max: float = -1e-13

    def __call__(self, u: np.ndarray, u_prev: np.ndarray, equations: AbstractEquations,
                 basis: Basis, elements: ElementContainer) -> List[LimiterStatus]:
        """Limit u in place against u_prev; returns the element statuses."""
        result = limiter_entropy_bounded(u, u_prev, self.exp_entropy_decrease_max,
                                         equations, basis, elements)
        n_blended = sum(status is LimiterStatus.BLENDED for status in result)
        logger.debug("Entropy-bounded limiter: blended %d of %d elements",
                     n_blended, len(result))
        return result
