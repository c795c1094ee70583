#!/usr/bin/env python3
"""
Pytest configuration and fixtures for the summation benchmark tests.

This file contains shared test fixtures, configuration, and utilities
used across the test suite.
"""

import pytest
import numpy as np
import torch
from fractions import Fraction
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sumbench.cases import OperandGenerator
from sumbench.exact import ExactContext
from sumbench.precision import Precision, to_fraction


@pytest.fixture(scope="session")
def random_seed():
    """Set random seed for reproducible tests."""
    seed = 42
    np.random.seed(seed)
    torch.manual_seed(seed)
    return seed


@pytest.fixture
def context():
    """Exact context wide enough for every product of two long doubles."""
    return ExactContext(256)


@pytest.fixture(params=[Precision.SINGLE, Precision.DOUBLE, Precision.EXTENDED],
                ids=lambda p: p.name.lower())
def precision(request):
    """Parameterized fixture for every supported working precision."""
    return request.param


@pytest.fixture(params=[Precision.SINGLE, Precision.DOUBLE],
                ids=lambda p: p.name.lower())
def ieee_precision(request):
    """Precisions with a fixed, platform-independent IEEE layout."""
    return request.param


def moderate_generator(precision, seed=42, spread=10):
    """Generator whose values stay within 2**±spread, away from underflow."""
    bias = 1 - precision.info.minexp
    return OperandGenerator(precision, seed=seed,
                            exponent_range=(bias - spread, bias + spread))


@pytest.fixture
def make_generator():
    return moderate_generator


@pytest.fixture
def simple_vectors():
    """Small integer vectors whose dot product (32) is exact everywhere."""
    return [1.0, 2.0, 3.0], [4.0, 5.0, 6.0]


@pytest.fixture
def small_term_cancellation():
    """
    Float32 vectors whose large products cancel and leave a tiny term.

    x*x is not representable, so every algorithm that rounds the product
    before it cancels loses the 2**-30 contribution entirely.
    """
    x = np.float32(1 + 2.0 ** -12)
    v1 = np.array([x, 2.0 ** -30, -x], dtype=np.float32)
    v2 = np.array([x, 1.0, x], dtype=np.float32)
    return v1, v2, Fraction(1, 2 ** 30)


def _big_term_cancellation(precision):
    """
    Vectors of the form [x, B, -B] . [x, 1, 1] with B = 2**digits.

    Adding B to x*x rounds away almost all of x*x, which is then lost when
    B is cancelled again.
    """
    dtype = precision.dtype
    x = dtype(1) + dtype(np.ldexp(dtype(1), -(precision.digits // 2)))
    big = dtype(np.ldexp(dtype(1), precision.digits))
    v1 = np.array([x, big, -big], dtype=dtype)
    v2 = np.array([x, 1, 1], dtype=dtype)
    exact = to_fraction(x) * to_fraction(x)
    return v1, v2, exact


def relative_error(estimate, exact: Fraction) -> Fraction:
    """Exact relative error of an estimate against a rational reference."""
    return abs(to_fraction(estimate) - exact) / abs(exact)


@pytest.fixture
def big_term_cancellation():
    return _big_term_cancellation


@pytest.fixture
def exact_relative_error():
    return relative_error


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark tests that take long time as slow
        if "random" in item.name or "suite" in item.name:
            item.add_marker(pytest.mark.slow)

        # Mark integration tests
        if "integration" in item.name or "end_to_end" in item.name:
            item.add_marker(pytest.mark.integration)
