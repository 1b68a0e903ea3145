"""Kernel functions evaluated between support vectors and a query vector.

Row reductions use math.fsum, which is correctly rounded and therefore
independent of summation order. The same inputs always give bit-identical
kernel values, whichever thread or process evaluates them.
"""

import math
from dataclasses import dataclass

import numpy as np

KERNEL_TYPES = ("linear", "polynomial", "rbf", "sigmoid")

# Parameters each kernel needs from the model header
REQUIRED_PARAMETERS = {
    "linear": (),
    "polynomial": ("gamma", "degree", "coef0"),
    "rbf": ("gamma",),
    "sigmoid": ("gamma", "coef0"),
}


def row_dot(matrix: np.ndarray, vector: np.ndarray) -> np.ndarray:
    """Dot product of every matrix row with vector."""
    products = matrix * vector
    return np.array([math.fsum(row) for row in products], dtype=np.float64)


def row_square_dist(matrix: np.ndarray, vector: np.ndarray) -> np.ndarray:
    """Squared Euclidean distance of every matrix row to vector."""
    diff = matrix - vector
    return np.array([math.fsum(row) for row in diff * diff], dtype=np.float64)


@dataclass(frozen=True)
class Kernel:
    """A LIBSVM-style kernel with its parameters.

    Attributes:
        kernel_type: One of linear, polynomial, rbf, sigmoid
        gamma: Scale for rbf, polynomial and sigmoid kernels
        degree: Polynomial degree
        coef0: Offset for polynomial and sigmoid kernels
    """

    kernel_type: str
    gamma: float | None = None
    degree: int | None = None
    coef0: float | None = None

    def __post_init__(self):
        if self.kernel_type not in KERNEL_TYPES:
            raise ValueError(f"Unsupported kernel type: {self.kernel_type}")
        missing = [p for p in REQUIRED_PARAMETERS[self.kernel_type] if getattr(self, p) is None]
        if missing:
            raise ValueError(
                f"{self.kernel_type} kernel requires parameter(s): {', '.join(missing)}"
            )

    def compute(self, support_vectors: np.ndarray, vector: np.ndarray) -> np.ndarray:
        """Kernel value of the query against each support vector, in SV order."""
        if self.kernel_type == "linear":
            return row_dot(support_vectors, vector)
        if self.kernel_type == "rbf":
            return np.exp(-self.gamma * row_square_dist(support_vectors, vector))
        if self.kernel_type == "polynomial":
            return (self.gamma * row_dot(support_vectors, vector) + self.coef0) ** self.degree
        return np.tanh(self.gamma * row_dot(support_vectors, vector) + self.coef0)
