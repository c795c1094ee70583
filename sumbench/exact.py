"""
Arbitrary-precision reference arithmetic.

Reference values and error statistics are kept as mpmath numbers.  Every
:class:`ExactContext` owns its own ``mpmath.MPContext`` so the working
precision is an explicit property of the object instead of the global
``mpmath.mp`` setting; two harness runs at different precisions never share
state.
"""

from typing import Iterable, Sequence

import mpmath
import numpy as np

from .precision import to_fraction

DEFAULT_EXACT_PRECISION = 1024


class ExactContext:
    """
    Factory and helper functions for exact numbers at a fixed precision.

    Attributes:
        precision: Mantissa width in bits of every number made here
    """

    def __init__(self, precision: int = DEFAULT_EXACT_PRECISION):
        if precision < 2:
            raise ValueError(f"Exact precision must be at least 2 bits, got {precision}")
        self._ctx = mpmath.MPContext()
        self._ctx.prec = precision

    @property
    def precision(self) -> int:
        return self._ctx.prec

    @property
    def mpf(self):
        """The mpf type bound to this context."""
        return self._ctx.mpf

    def __repr__(self):
        return f"ExactContext(precision={self.precision})"

    def exact(self, value):
        """
        Convert a finite float, numpy scalar, int or mpf without rounding.

        Binary floating-point values are ratios of an integer and a power of
        two, so the conversion is exact as long as the context precision is
        at least the source significand width.
        """
        if hasattr(value, "_mpf_"):
            return self._ctx.mpf(value)
        if isinstance(value, (float, np.floating)) and not np.isfinite(value):
            return self._ctx.mpf(float(value))
        ratio = to_fraction(value)
        return self._ctx.mpf(ratio.numerator) / ratio.denominator

    def zero(self):
        return self._ctx.mpf(0)

    def fsum(self, terms: Iterable):
        return self._ctx.fsum(terms)

    def dot(self, v1: Sequence, v2: Sequence):
        """Exact sum of elementwise products, rounded once to the context."""
        return self._ctx.fsum(self.exact(a) * self.exact(b) for a, b in zip(v1, v2))

    def fabs(self, value):
        return self._ctx.fabs(value)

    def sqrt(self, value):
        return self._ctx.sqrt(value)

    def to_string(self, value, digits: int = None) -> str:
        """Text representation; full context precision unless ``digits`` is given."""
        if digits is None:
            return str(value)
        return self._ctx.nstr(value, digits)
