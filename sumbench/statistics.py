"""
Running error statistics in arbitrary precision.

An :class:`ErrorStatistics` instance belongs to one algorithm.  It receives
(estimate, reference) pairs, derives the absolute and relative error of each
trial, and answers descriptive-statistics queries about the relative errors.
Samples are only ever appended; order statistics sort a copy.
"""

import math
from typing import List, Optional, Tuple

from .errors import (
    EmptyStatisticsError,
    InsufficientSamplesError,
    InvalidPercentileError,
    StatisticsError,
    UndefinedRelativeError,
)
from .exact import ExactContext


class ErrorStatistics:
    """
    Absolute/relative error samples with incrementally kept aggregates.

    Attributes:
        context: Exact arithmetic context all samples live in
        undefined_count: Trials rejected because their reference was zero
    """

    def __init__(self, context: Optional[ExactContext] = None):
        self.context = context or ExactContext()
        self.undefined_count = 0
        self._abs_errors: List = []
        self._rel_errors: List = []
        self._rel_sum = self.context.zero()
        self._rel_max = None
        self._rel_min = None

    def __len__(self):
        return len(self._rel_errors)

    @property
    def count(self) -> int:
        return len(self._rel_errors)

    @property
    def absolute_errors(self) -> Tuple:
        return tuple(self._abs_errors)

    @property
    def relative_errors(self) -> Tuple:
        return tuple(self._rel_errors)

    def record_trial(self, estimate, reference) -> Tuple:
        """
        Record the error of one trial.

        Args:
            estimate: Value produced by the algorithm (float, numpy scalar or mpf)
            reference: Exact value the estimate is judged against

        Returns:
            Tuple of (absolute_error, relative_error)

        Raises:
            UndefinedRelativeError: if ``reference`` is exactly zero; the
                trial is counted in ``undefined_count`` and not stored
        """
        estimate = self.context.exact(estimate)
        reference = self.context.exact(reference)
        if reference == 0:
            self.undefined_count += 1
            raise UndefinedRelativeError(
                "Relative error is undefined for a zero reference value")

        abs_error = self.context.fabs(estimate - reference)
        rel_error = self.context.fabs(abs_error / reference)

        self._abs_errors.append(abs_error)
        self._rel_errors.append(rel_error)
        self._rel_sum += rel_error
        if self._rel_max is None or rel_error > self._rel_max:
            self._rel_max = rel_error
        if self._rel_min is None or rel_error < self._rel_min:
            self._rel_min = rel_error
        return abs_error, rel_error

    def _require(self, minimum: int):
        if not self._rel_errors:
            raise EmptyStatisticsError("No samples recorded")
        if len(self._rel_errors) < minimum:
            raise InsufficientSamplesError(
                f"Need at least {minimum} samples, have {len(self._rel_errors)}")

    def mean(self):
        self._require(1)
        return self._rel_sum / len(self._rel_errors)

    def minimum(self):
        self._require(1)
        return self._rel_min

    def maximum(self):
        self._require(1)
        return self._rel_max

    def central_moment(self, order: int):
        """
        Central moment of the relative errors with an ``(n - 1)`` divisor.

        Args:
            order: Moment order (>= 1)
        """
        if order < 1:
            raise ValueError(f"Moment order must be positive, got {order}")
        self._require(2)
        mean = self.mean()
        total = self.context.fsum((err - mean) ** order for err in self._rel_errors)
        return total / (len(self._rel_errors) - 1)

    def variance(self):
        """Unbiased sample variance of the relative errors."""
        return self.central_moment(2)

    def _nonzero_variance(self):
        variance = self.variance()
        if variance == 0:
            raise StatisticsError("Relative errors have zero variance")
        return variance

    def skewness(self):
        """Third central moment over the cubed standard deviation."""
        variance = self._nonzero_variance()
        stddev = self.context.sqrt(variance)
        return self.central_moment(3) / (stddev * stddev * stddev)

    def kurtosis(self):
        """Excess kurtosis: fourth central moment over variance squared, minus 3."""
        variance = self._nonzero_variance()
        return self.central_moment(4) / (variance * variance) - 3

    def median(self):
        self._require(1)
        ordered = sorted(self._rel_errors)
        middle = len(ordered) // 2
        if len(ordered) % 2:
            return ordered[middle]
        return (ordered[middle - 1] + ordered[middle]) / 2

    def percentile(self, fraction: float) -> Tuple:
        """
        Both tails of a central interval of the relative errors.

        Args:
            fraction: Upper-tail fraction in [0, 1], e.g. 0.99

        Returns:
            Tuple of (sorted[floor((1 - fraction) * n)], sorted[ceil(fraction * n)]),
            with both positions clamped to the last sample
        """
        if not 0 <= fraction <= 1:
            raise InvalidPercentileError(
                f"Percentile fraction must be within [0, 1], got {fraction}")
        self._require(1)
        ordered = sorted(self._rel_errors)
        n = len(ordered)
        lower = min(math.floor((1 - fraction) * n), n - 1)
        upper = min(math.ceil(fraction * n), n - 1)
        return ordered[lower], ordered[upper]
