"""
Source term classes.

Notation:
    u  - conservative variables (n_vars, ...)
    x  - coordinates (ndims, ...)
    S  - source rate array (same shape as u)
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import List

from .equations import AbstractEquations
from .shallow_water import source_terms_convergence_test


class SourceTerm(ABC):
    """Abstract base class for source terms."""

    @abstractmethod
    def compute(self, u: np.ndarray, x: np.ndarray, t: float,
                equations: AbstractEquations) -> np.ndarray:
        """
        Compute source term contribution.

        Args:
            u: Conservative variables (n_vars, ...)
            x: Coordinates (ndims, ...)
            t: Time
            equations: Equation family

        Returns:
            S: Source rate array of the same shape as u
        """
        pass


class ConvergenceTestSource(SourceTerm):
    """Manufactured source of the shallow water convergence test."""

    def compute(self, u, x, t, equations):
        return source_terms_convergence_test(u, x, t, equations)


class CompositeSourceTerm(SourceTerm):
    """Combines multiple source terms."""

    def __init__(self, sources: List[SourceTerm] = None):
        self.sources = sources if sources is not None else []

    def add(self, source: SourceTerm):
        """Add a source term to the composite."""
        self.sources.append(source)

    def compute(self, u, x, t, equations):
        S_total = np.zeros(np.shape(u))
        for source in self.sources:
            S_total += source.compute(u, x, t, equations)
        return S_total
