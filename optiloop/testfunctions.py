"""
Analytical test functions for exercising solvers and the executor.

Rosenbrock and sphere with their derivatives, plus a ready-made problem
class exposing them as capabilities.
"""

import numpy as np


def sphere(x: np.ndarray) -> float:
    """f(x) = sum(x_i^2), minimum 0 at the origin."""
    x = np.asarray(x, dtype=float)
    return float(np.dot(x, x))


def sphere_gradient(x: np.ndarray) -> np.ndarray:
    return 2.0 * np.asarray(x, dtype=float)


def rosenbrock(x: np.ndarray, a: float = 1.0, b: float = 100.0) -> float:
    """
    Multidimensional Rosenbrock function.

    Minimum 0 at x = (a, a^2, ...); for the default a=1 at all ones.
    """
    x = np.asarray(x, dtype=float)
    return float(np.sum(b * (x[1:] - x[:-1] ** 2) ** 2 + (a - x[:-1]) ** 2))


def rosenbrock_gradient(x: np.ndarray, a: float = 1.0, b: float = 100.0) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    grad = np.zeros_like(x)
    diff = x[1:] - x[:-1] ** 2
    grad[:-1] = -4.0 * b * x[:-1] * diff - 2.0 * (a - x[:-1])
    grad[1:] += 2.0 * b * diff
    return grad


def rosenbrock_hessian(x: np.ndarray, a: float = 1.0, b: float = 100.0) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    n = x.size
    hess = np.zeros((n, n))
    for i in range(n - 1):
        hess[i, i] += 12.0 * b * x[i] ** 2 - 4.0 * b * x[i + 1] + 2.0
        hess[i, i + 1] = -4.0 * b * x[i]
        hess[i + 1, i] = -4.0 * b * x[i]
        hess[i + 1, i + 1] += 2.0 * b
    return hess


class Rosenbrock:
    """
    Rosenbrock problem with cost, gradient and Hessian.

    Example:
        >>> problem = Problem(Rosenbrock())
        >>> problem.cost(np.array([1.0, 1.0]))
        0.0
    """

    def __init__(self, a: float = 1.0, b: float = 100.0):
        self.a = a
        self.b = b

    def cost(self, x: np.ndarray) -> float:
        return rosenbrock(x, self.a, self.b)

    def gradient(self, x: np.ndarray) -> np.ndarray:
        return rosenbrock_gradient(x, self.a, self.b)

    def hessian(self, x: np.ndarray) -> np.ndarray:
        return rosenbrock_hessian(x, self.a, self.b)
