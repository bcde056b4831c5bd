"""
Tests for the analytical test functions.
"""

import numpy as np
import pytest

from optiloop.testfunctions import (
    Rosenbrock,
    rosenbrock,
    rosenbrock_gradient,
    rosenbrock_hessian,
    sphere,
    sphere_gradient,
)


def finite_difference(f, x, h=1e-6):
    grad = np.zeros_like(x)
    for i in range(x.size):
        step = np.zeros_like(x)
        step[i] = h
        grad[i] = (f(x + step) - f(x - step)) / (2 * h)
    return grad


def test_rosenbrock_minimum():
    x = np.ones(4)
    assert rosenbrock(x) == 0.0
    np.testing.assert_allclose(rosenbrock_gradient(x), np.zeros(4), atol=1e-12)


def test_rosenbrock_known_value():
    assert rosenbrock(np.array([-1.2, 1.0])) == pytest.approx(24.2)


def test_rosenbrock_gradient_matches_finite_difference():
    x = np.array([-1.2, 1.0, 0.3])
    np.testing.assert_allclose(
        rosenbrock_gradient(x), finite_difference(rosenbrock, x), rtol=1e-5, atol=1e-6
    )


def test_rosenbrock_hessian_matches_gradient_differences():
    x = np.array([0.5, -0.3, 1.1])
    hess = rosenbrock_hessian(x)
    numeric = np.column_stack(
        [finite_difference(lambda y, i=i: rosenbrock_gradient(y)[i], x) for i in range(3)]
    )
    np.testing.assert_allclose(hess, hess.T)
    np.testing.assert_allclose(hess, numeric, rtol=1e-4, atol=1e-4)


def test_sphere():
    x = np.array([1.0, -2.0])
    assert sphere(x) == 5.0
    np.testing.assert_allclose(sphere_gradient(x), [2.0, -4.0])


def test_rosenbrock_problem_class():
    problem = Rosenbrock(a=1.0, b=100.0)
    x = np.array([0.0, 0.0])
    assert problem.cost(x) == 1.0
    assert problem.gradient(x).shape == (2,)
    assert problem.hessian(x).shape == (2, 2)
