"""
Common interface for the equation families.

Each family is a frozen dataclass holding its physical parameters and
exposing the same operation table, so fluxes, wave-speed estimators and
limiters can be written once against this interface.

State convention:
    u has the variable axis first, shape (n_vars,) for a single point or
    (n_vars, ...) for a batch of points/faces.

Direction convention:
    An int orientation (0 = x, 1 = y) or an unnormalized normal vector of
    shape (ndims,) or (ndims, ...). Quantities evaluated for a normal vector
    are scaled by its magnitude.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Tuple, Union

Direction = Union[int, np.ndarray]


def as_normal(direction: Direction, ndims: int) -> np.ndarray:
    """
    Convert an orientation or a normal vector to a normal vector.

    Args:
        direction: Axis index or (unnormalized) normal vector
        ndims: Number of spatial dimensions

    Returns:
        Normal vector of shape (ndims,) or (ndims, ...)
    """
    if isinstance(direction, (int, np.integer)):
        if not 0 <= direction < ndims:
            raise ValueError(f"Orientation {direction} out of range for "
                             f"{ndims} dimensions")
        normal = np.zeros(ndims)
        normal[direction] = 1.0
        return normal
    normal = np.asarray(direction, dtype=float)
    if normal.shape[0] != ndims:
        raise ValueError(f"Normal vector must have {ndims} components, "
                         f"got shape {normal.shape}")
    return normal


def normal_norm(normal: np.ndarray) -> np.ndarray:
    """Euclidean norm along the component axis."""
    return np.sqrt(np.sum(normal**2, axis=0))


class AbstractEquations(ABC):
    """Abstract base class for a system of conservation laws."""

    ndims: int
    n_vars: int
    has_nonconservative_terms: bool
    # Variables that are transported; the rest get no flux and no dissipation
    transported: Tuple[bool, ...]

    @abstractmethod
    def varnames(self, kind: str = 'cons') -> Tuple[str, ...]:
        """Variable names for 'cons' or 'prim' variables."""
        pass

    @abstractmethod
    def flux(self, u: np.ndarray, direction: Direction) -> np.ndarray:
        """
        Analytic flux of the state in the given direction.

        Args:
            u: Conservative variables (n_vars, ...)
            direction: Orientation or normal vector

        Returns:
            Flux vector (n_vars, ...)
        """
        pass

    @abstractmethod
    def cons2prim(self, u: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def prim2cons(self, prim: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def cons2entropy(self, u: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def entropy2cons(self, w: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def entropy(self, u: np.ndarray) -> np.ndarray:
        """Mathematical entropy function."""
        pass

    @abstractmethod
    def max_abs_speeds(self, u: np.ndarray) -> Tuple[np.ndarray, ...]:
        """Characteristic speed magnitude per coordinate direction."""
        pass

    @abstractmethod
    def normal_velocity(self, u: np.ndarray, normal: np.ndarray) -> np.ndarray:
        """Velocity dotted with the (unnormalized) normal vector."""
        pass

    @abstractmethod
    def signal_speed(self, u: np.ndarray) -> np.ndarray:
        """Local wave celerity / speed of sound."""
        pass

    @abstractmethod
    def calc_wavespeed_roe(self, u_ll: np.ndarray, u_rr: np.ndarray,
                           direction: Direction) -> Tuple[np.ndarray, np.ndarray]:
        """
        Roe-averaged normal velocity and celerity, both scaled by the
        magnitude of the normal.
        """
        pass

    @property
    def transported_mask(self) -> np.ndarray:
        """Float mask (n_vars,) that zeroes non-transported variables."""
        return np.array(self.transported, dtype=float)

    def broadcast_mask(self, like: np.ndarray) -> np.ndarray:
        """Transported mask reshaped to broadcast against a state array."""
        mask = self.transported_mask
        return mask.reshape(mask.shape + (1,) * (np.ndim(like) - 1))


def stack_components(*components) -> np.ndarray:
    """
    Stack per-variable components into a state/flux array.

    Scalars (e.g. an explicit zero for a non-transported variable) are
    broadcast to the common batch shape.
    """
    arrays = np.broadcast_arrays(*[np.asarray(c, dtype=float) for c in components])
    return np.stack(arrays)
