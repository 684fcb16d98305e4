"""
Read-only geometry and quadrature data shared by all elements.

The solution of all elements lives in one array
    u: (n_vars, n_nodes, ..., n_elements)
with one node axis per spatial dimension; u[..., element] is the local
node buffer of one element.
"""

import numpy as np
from dataclasses import dataclass
from numpy.polynomial import legendre


@dataclass(frozen=True)
class Basis:
    """
    1D nodes and quadrature weights of a nodal tensor-product basis.

    Attributes:
        nodes: Node locations on the reference interval [-1, 1]
        weights: Quadrature weights at the nodes
    """
    nodes: np.ndarray
    weights: np.ndarray

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def polydeg(self) -> int:
        return self.n_nodes - 1

    @classmethod
    def lobatto_legendre(cls, polydeg: int) -> 'Basis':
        """
        Legendre-Gauss-Lobatto nodes and weights.

        Args:
            polydeg: Polynomial degree (>= 1)
        """
        if polydeg < 1:
            raise ValueError(f"Polynomial degree must be at least 1, got {polydeg}")
        P_N = legendre.Legendre.basis(polydeg)
        interior = np.sort(P_N.deriv().roots().real)
        nodes = np.concatenate(([-1.0], interior, [1.0]))
        weights = 2.0 / (polydeg * (polydeg + 1) * P_N(nodes)**2)
        return cls(nodes=nodes, weights=weights)

    def tensor_weights(self, ndims: int) -> np.ndarray:
        """Tensor-product quadrature weights of shape (n_nodes,) * ndims."""
        w = self.weights
        for _ in range(ndims - 1):
            w = np.multiply.outer(w, self.weights)
        return w


@dataclass
class ElementContainer:
    """
    Geometric metrics of the local elements.

    Attributes:
        inverse_jacobian: (n_elements,) for tree meshes, or
                          (n_nodes,) * ndims + (n_elements,) per node
        ndims: Number of spatial dimensions
    """
    inverse_jacobian: np.ndarray
    ndims: int

    def __post_init__(self):
        self.inverse_jacobian = np.asarray(self.inverse_jacobian, dtype=float)
        if self.inverse_jacobian.ndim not in (1, self.ndims + 1):
            raise ValueError("inverse_jacobian must have shape (n_elements,) or "
                             "(n_nodes,)*ndims + (n_elements,)")

    @property
    def n_elements(self) -> int:
        return self.inverse_jacobian.shape[-1]

    def volume_jacobian(self, element: int) -> np.ndarray:
        """|J| of one element, scalar or per node."""
        return np.abs(1.0 / self.inverse_jacobian[..., element])

    def volume_weights(self, basis: Basis, element: int) -> np.ndarray:
        """Quadrature weight times volume Jacobian at every node of an element."""
        return basis.tensor_weights(self.ndims) * self.volume_jacobian(element)

    def all_volume_weights(self, basis: Basis) -> np.ndarray:
        """Volume weights of all elements, (n_nodes,) * ndims + (n_elements,)."""
        tensor_weights = basis.tensor_weights(self.ndims)[..., np.newaxis]
        return tensor_weights * np.abs(1.0 / self.inverse_jacobian)

    @classmethod
    def uniform_tree(cls, n_elements: int, ndims: int, element_length: float) -> 'ElementContainer':
        """Elements of equal size on a Cartesian tree mesh."""
        inverse_jacobian = np.full(n_elements, 2.0 / element_length)
        return cls(inverse_jacobian=inverse_jacobian, ndims=ndims)


def element_mean(u_element: np.ndarray, volume_weights: np.ndarray) -> np.ndarray:
    """
    Volume-weighted mean state of one element.

    Args:
        u_element: Local node buffer (n_vars, n_nodes, ...)
        volume_weights: Weights at the nodes (n_nodes, ...)

    Returns:
        Mean state (n_vars,)
    """
    node_axes = tuple(range(1, u_element.ndim))
    total_volume = np.sum(volume_weights)
    return np.sum(u_element * volume_weights, axis=node_axes) / total_volume


def element_means(u: np.ndarray, volume_weights: np.ndarray) -> np.ndarray:
    """
    Volume-weighted mean states of all elements at once.

    Args:
        u: Solution (n_vars, n_nodes, ..., n_elements)
        volume_weights: Weights at the nodes (n_nodes, ..., n_elements)

    Returns:
        Mean states (n_vars, n_elements)
    """
    node_axes = tuple(range(volume_weights.ndim - 1))
    total_volume = np.sum(volume_weights, axis=node_axes)
    u_node_axes = tuple(axis + 1 for axis in node_axes)
    return np.sum(u * volume_weights, axis=u_node_axes) / total_volume
