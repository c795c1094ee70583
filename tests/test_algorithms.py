#!/usr/bin/env python3
"""
Unit tests for the dot-product accumulation algorithms.

Tests the algorithms in the sumbench.algorithms module.
"""

from fractions import Fraction

import numpy as np
import pytest
import torch

from sumbench.algorithms import (
    DOT_PRODUCT_ALGORITHMS,
    exact_fma_compensated_dot,
    fma_dot,
    fma_kahan_dot,
    get_algorithm,
    kahan_dot,
    kobbelt_dot,
    naive_dot,
)
from sumbench.precision import Precision, to_fraction

ALL_ALGORITHMS = list(DOT_PRODUCT_ALGORITHMS.values())

ORDERED_KEYS = ["naive", "kahan", "fma_kahan", "exact_fma", "kobbelt"]


def exact_dot(v1, v2):
    return sum((to_fraction(x) * to_fraction(y) for x, y in zip(v1, v2)), Fraction(0))


class TestRegistry:
    """Test cases for the algorithm registry."""

    def test_order(self):
        assert list(DOT_PRODUCT_ALGORITHMS) == [
            "naive", "fma", "kahan", "fma_kahan", "exact_fma", "kobbelt"]

    def test_labels(self):
        labels = [algorithm.label for algorithm in ALL_ALGORITHMS]
        assert labels == ["Naive", "FMA", "Kahan", "Kahan FMA",
                          "Exact FMA Compensated", "Kobbelt"]

    def test_get_algorithm(self):
        assert get_algorithm("kobbelt").function is kobbelt_dot

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError, match="Unknown method"):
            get_algorithm("pairwise")


@pytest.mark.parametrize("algorithm", ALL_ALGORITHMS, ids=lambda a: a.key)
class TestCommonBehaviour:
    """Behaviour every algorithm shares."""

    def test_simple_vectors(self, algorithm, simple_vectors, precision):
        v1, v2 = simple_vectors
        result = algorithm.function(v1, v2, precision)
        assert result == 32
        assert isinstance(result, precision.dtype)

    def test_precision_inferred(self, algorithm):
        v1 = np.array([1.0, 2.0], dtype=np.float32)
        v2 = np.array([3.0, 4.0], dtype=np.float32)
        result = algorithm.function(v1, v2)
        assert isinstance(result, np.float32)
        assert result == 11

    def test_torch_tensors(self, algorithm):
        v1 = torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64)
        v2 = torch.tensor([4.0, 5.0, 6.0], dtype=torch.float64)
        result = algorithm.function(v1, v2)
        assert isinstance(result, np.float64)
        assert result == 32

    def test_single_element(self, algorithm):
        assert algorithm.function([3.0], [0.5], Precision.DOUBLE) == 1.5

    def test_zero_result(self, algorithm, precision):
        assert algorithm.function([2.0, 3.0], [3.0, -2.0], precision) == 0

    def test_mismatched_shapes(self, algorithm):
        with pytest.raises(AssertionError):
            algorithm.function([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_deterministic(self, algorithm, precision, make_generator):
        generator = make_generator(precision, seed=99)
        v1, v2 = generator.vector(4), generator.vector(4)
        first = algorithm.function(v1, v2, precision)
        second = algorithm.function(v1, v2, precision)
        assert first == second

    def test_forward_error_bound(self, algorithm, precision, make_generator):
        """Every algorithm stays within the recursive-summation bound."""
        generator = make_generator(precision, seed=31)
        eps = to_fraction(precision.info.eps)
        for _ in range(50):
            v1, v2 = generator.vector(4), generator.vector(4)
            magnitude = sum(abs(to_fraction(x) * to_fraction(y)) for x, y in zip(v1, v2))
            error = abs(to_fraction(algorithm.function(v1, v2, precision)) - exact_dot(v1, v2))
            assert error <= 8 * eps * magnitude


class TestSmallTermCancellation:
    """A tiny term survives only if products are never rounded alone."""

    def test_rounded_products_lose_the_term(self, small_term_cancellation):
        v1, v2, _ = small_term_cancellation
        assert naive_dot(v1, v2) == 0
        assert kahan_dot(v1, v2) == 0
        assert fma_kahan_dot(v1, v2) == 0

    def test_fma_keeps_part_of_it(self, small_term_cancellation):
        v1, v2, exact = small_term_cancellation
        assert to_fraction(fma_dot(v1, v2)) == -Fraction(1, 2 ** 24)

    def test_exact_algorithms(self, small_term_cancellation):
        v1, v2, exact = small_term_cancellation
        assert to_fraction(exact_fma_compensated_dot(v1, v2)) == exact
        assert to_fraction(kobbelt_dot(v1, v2)) == exact


class TestBigTermCancellation:
    """A large term added and removed again swamps the first product."""

    def test_naive_family(self, big_term_cancellation, precision):
        v1, v2, _ = big_term_cancellation(precision)
        assert naive_dot(v1, v2, precision) == 2
        assert kahan_dot(v1, v2, precision) == 2
        assert fma_kahan_dot(v1, v2, precision) == 2

    def test_ordering(self, big_term_cancellation, exact_relative_error, precision):
        v1, v2, exact = big_term_cancellation(precision)
        errors = {
            key: exact_relative_error(get_algorithm(key).function(v1, v2, precision), exact)
            for key in ORDERED_KEYS
        }
        for better, worse in zip(ORDERED_KEYS[1:], ORDERED_KEYS[:-1]):
            assert errors[worse] >= errors[better]
        assert errors["naive"] > errors["exact_fma"]

    def test_exact_algorithms_within_half_ulp(self, big_term_cancellation, precision):
        v1, v2, exact = big_term_cancellation(precision)
        half_ulp = to_fraction(precision.info.eps) / 2
        for function in (exact_fma_compensated_dot, kobbelt_dot):
            result = to_fraction(function(v1, v2, precision))
            assert abs(result - exact) <= half_ulp * exact

    def test_double_is_exact(self, big_term_cancellation):
        v1, v2, exact = big_term_cancellation(Precision.DOUBLE)
        assert to_fraction(exact_fma_compensated_dot(v1, v2)) == exact
        assert to_fraction(kobbelt_dot(v1, v2)) == exact


class TestKobbelt:
    """Test cases specific to kobbelt_dot."""

    def test_large_cancellation(self):
        v1 = np.array([1e8, 1.0, -1e8], dtype=np.float32)
        v2 = np.array([1.0, 1.0, 1.0], dtype=np.float32)

        assert naive_dot(v1, v2) == 0
        assert kobbelt_dot(v1, v2) == 1

    def test_promoted_accumulator(self):
        v1 = np.array([2.0 ** 30, 1.0, -(2.0 ** 30)], dtype=np.float32)
        v2 = np.ones(3, dtype=np.float32)
        result = kobbelt_dot(v1, v2, Precision.DOUBLE)
        assert isinstance(result, np.float64)
        assert result == 1
