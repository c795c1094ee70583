"""
Test cases and operand generation.

A test case bundles the operands of one trial with the exact value every
algorithm is judged against.  Operands are synthesised field by field
(sign, exponent, mantissa) so the error profile covers the whole binade
structure of the format rather than a single uniform interval.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .exact import ExactContext
from .precision import Precision, as_vector, int_to_float

logger = logging.getLogger(__name__)

# Largest exponent drawn above the bias by default; keeps products of four
# terms comfortably inside the single-precision range.
DEFAULT_EXPONENT_HEADROOM = 20


@dataclass(frozen=True, eq=False)
class DotProductCase:
    """
    Operands of one dot-product trial and their exact dot product.

    Attributes:
        v1: First operand vector (read-only)
        v2: Second operand vector (read-only)
        reference: Exact sum of the elementwise products
    """

    v1: np.ndarray
    v2: np.ndarray
    reference: object

    @classmethod
    def from_vectors(cls, v1, v2, context: ExactContext,
                     precision: Optional[Precision] = None) -> "DotProductCase":
        """
        Build a case from operand vectors, computing the exact reference.

        Args:
            v1: First vector (list, numpy array or torch tensor)
            v2: Second vector
            context: Exact arithmetic context for the reference value
            precision: Operand precision (default: inferred from ``v1``)
        """
        if precision is None:
            precision = Precision.from_value(v1)
        v1 = as_vector(v1, precision).copy()
        v2 = as_vector(v2, precision).copy()
        if v1.shape != v2.shape:
            raise ValueError(f"Shape mismatch: {v1.shape} vs {v2.shape}")
        v1.flags.writeable = False
        v2.flags.writeable = False
        return cls(v1, v2, context.dot(v1, v2))

    @property
    def precision(self) -> Precision:
        return Precision.from_dtype(self.v1.dtype)

    @property
    def dim(self) -> int:
        return len(self.v1)


class OperandGenerator:
    """
    Random finite floating-point values built from random bit fields.

    The sign is uniform, the biased exponent field is uniform over
    ``exponent_range`` (inclusive) and the stored mantissa is uniform over
    all its bit patterns.  Patterns that decode to infinity or NaN are
    drawn again and counted in ``rejected``.

    Attributes:
        precision: Format of the generated values
        exponent_range: Inclusive range of biased exponent fields
        rejected: Number of non-finite patterns discarded so far
    """

    def __init__(self, precision: Precision = Precision.SINGLE, seed: Optional[int] = None,
                 exponent_range: Optional[Tuple[int, int]] = None):
        self.precision = Precision.from_dtype(precision)
        self.rng = np.random.default_rng(seed)
        info = self.precision.info
        self.bias = 1 - info.minexp
        max_field = 2 * self.bias + 1
        if exponent_range is None:
            exponent_range = (0, self.bias + DEFAULT_EXPONENT_HEADROOM)
        low, high = exponent_range
        if not 0 <= low <= high <= max_field:
            raise ValueError(f"Exponent range must lie within [0, {max_field}], "
                             f"got {exponent_range}")
        self.exponent_range = (low, high)
        self.rejected = 0

    def _from_fields(self, sign: int, field: int, mantissa: int):
        precision = self.precision
        nmant = precision.info.nmant
        if field == 0:
            significand = mantissa
            exponent = 1 - self.bias - nmant
        else:
            significand = (1 << nmant) | mantissa
            exponent = field - self.bias - nmant
        with np.errstate(over="ignore"):
            magnitude = precision.dtype(np.ldexp(int_to_float(significand, precision), exponent))
        return -magnitude if sign else magnitude

    def value(self):
        """Draw one finite value."""
        nmant = self.precision.info.nmant
        low, high = self.exponent_range
        while True:
            sign = int(self.rng.integers(0, 2))
            field = int(self.rng.integers(low, high, endpoint=True))
            mantissa = int(self.rng.integers(0, 1 << nmant, dtype=np.uint64))
            candidate = self._from_fields(sign, field, mantissa)
            if np.isfinite(candidate):
                return candidate
            self.rejected += 1
            logger.debug("Rejected non-finite operand pattern (field=%d)", field)

    def vector(self, dim: int) -> np.ndarray:
        """Draw a read-only vector of ``dim`` finite values."""
        values = np.array([self.value() for _ in range(dim)], dtype=self.precision.dtype)
        values.flags.writeable = False
        return values

    def dot_product_case(self, dim: int, context: ExactContext) -> DotProductCase:
        """Draw a fresh dot-product case with its exact reference."""
        v1 = np.empty(dim, dtype=self.precision.dtype)
        v2 = np.empty(dim, dtype=self.precision.dtype)
        for i in range(dim):
            v1[i] = self.value()
            v2[i] = self.value()
        return DotProductCase.from_vectors(v1, v2, context, self.precision)
