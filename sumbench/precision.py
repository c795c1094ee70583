"""
Working precisions supported by the accuracy harness.

The set of floating-point formats under test is small and closed, so it is
modelled as a tagged variant (:class:`Precision`) instead of being recovered
from the run-time type of the operands.  Each member knows its numpy scalar
type, how to perform a correctly rounded fused multiply-add, and how to
classify a value by genus for the exact summation table.

FMA precondition: the error-free transformations in :mod:`sumbench.core`
are exact only if ``fma`` rounds once.  ``math.fma`` is used for double
precision when the interpreter provides it (Python 3.13+).  Every other case
uses an exact rational evaluation of ``a*b + c`` rounded once to the target
format, which is correct but much slower than a hardware instruction.
"""

import logging
import math
from enum import Enum
from fractions import Fraction
from typing import Union

import numpy as np
import torch

logger = logging.getLogger(__name__)

_CHUNK_BITS = 32


class Precision(Enum):
    """Floating-point working precision."""

    SINGLE = ("float", np.float32)
    DOUBLE = ("double", np.float64)
    EXTENDED = ("long double", np.longdouble)

    def __init__(self, label, dtype):
        self.label = label
        self.dtype = dtype

    def __str__(self):
        return self.label

    @property
    def info(self) -> np.finfo:
        return np.finfo(self.dtype)

    @property
    def digits(self) -> int:
        """Significand width in bits, implicit bit included."""
        return self.info.nmant + 1

    @property
    def torch_dtype(self):
        """Matching torch dtype, or None when torch has no such format."""
        return _TORCH_DTYPES.get(self)

    @property
    def hardware_fma(self) -> bool:
        return self is Precision.DOUBLE and hasattr(math, "fma")

    def zero(self):
        return self.dtype(0)

    @classmethod
    def from_dtype(cls, dtype) -> "Precision":
        """
        Resolve a precision from a numpy dtype, torch dtype or name.

        Args:
            dtype: ``Precision``, numpy dtype/scalar type, torch dtype, or one
                of the names accepted by :data:`PRECISION_NAMES`

        Returns:
            Matching precision
        """
        if isinstance(dtype, cls):
            return dtype
        if isinstance(dtype, str) and dtype.lower() in PRECISION_NAMES:
            return PRECISION_NAMES[dtype.lower()]
        if isinstance(dtype, torch.dtype):
            for precision, torch_dtype in _TORCH_DTYPES.items():
                if torch_dtype == dtype:
                    return precision
            raise ValueError(f"Unsupported torch dtype: {dtype}")

        scalar_type = np.dtype(dtype).type
        for precision in cls:
            if precision.dtype is scalar_type:
                return precision
        raise ValueError(f"Unsupported floating-point type: {dtype}")

    @classmethod
    def from_value(cls, value) -> "Precision":
        """Infer the precision of a scalar, array or tensor."""
        if isinstance(value, torch.Tensor):
            return cls.from_dtype(value.dtype)
        if isinstance(value, (np.ndarray, np.generic)):
            return cls.from_dtype(value.dtype)
        if isinstance(value, (list, tuple)) and value:
            return cls.from_value(value[0])
        return cls.DOUBLE

    def fma(self, a, b, c):
        """
        Correctly rounded ``a*b + c`` in this precision.

        Args:
            a: Multiplicand
            b: Multiplier
            c: Addend

        Returns:
            ``a*b + c`` rounded once to the working format
        """
        dtype = self.dtype
        if self.hardware_fma:
            return dtype(math.fma(a, b, c))

        a, b, c = dtype(a), dtype(b), dtype(c)
        exact = to_fraction(a) * to_fraction(b) + to_fraction(c)
        if exact == 0:
            # An exact zero means a*b == -c, so the plain expression is exact
            # and carries the IEEE sign of zero.
            return a * b + c
        return round_fraction(exact, self)

    def genus(self, value) -> int:
        """
        Genus key of a finite value.

        The key is ``2 * exponent_field + last_mantissa_bit`` where the
        exponent field is the biased IEEE exponent (0 for zero and
        subnormals).  It is computed through ``frexp``/``ldexp`` so the
        x87 extended format is handled without looking at its bytes.
        """
        if value == 0:
            return 0
        info = self.info
        _, exponent = np.frexp(value)
        exponent = int(exponent)

        field = exponent - info.minexp
        if field < 1:
            field = 0
        ulp_exponent = max(exponent - 1, info.minexp) - info.nmant
        significand = np.ldexp(np.abs(value), -ulp_exponent)
        last_bit = int(np.fmod(significand, 2))
        return 2 * field + last_bit


PRECISION_NAMES = {
    "float": Precision.SINGLE,
    "single": Precision.SINGLE,
    "float32": Precision.SINGLE,
    "double": Precision.DOUBLE,
    "float64": Precision.DOUBLE,
    "long double": Precision.EXTENDED,
    "longdouble": Precision.EXTENDED,
    "extended": Precision.EXTENDED,
}

_TORCH_DTYPES = {
    Precision.SINGLE: torch.float32,
    Precision.DOUBLE: torch.float64,
}

logger.debug("math.fma available: %s", hasattr(math, "fma"))


def to_fraction(value) -> Fraction:
    """Exact rational value of a finite float, numpy scalar or int."""
    if isinstance(value, (int, Fraction)):
        return Fraction(value)
    numerator, denominator = value.as_integer_ratio()
    return Fraction(numerator, denominator)


def int_to_float(integer: int, precision: Precision):
    """
    Convert an integer with at most ``precision.digits`` bits exactly.

    Values are assembled from 32-bit chunks so that conversions never pass
    through a narrower intermediate format.
    """
    dtype = precision.dtype
    high, low = divmod(integer, 1 << _CHUNK_BITS)
    if high == 0:
        return dtype(low)
    return dtype(high) * dtype(1 << _CHUNK_BITS) + dtype(low)


def round_fraction(value: Fraction, precision: Precision):
    """
    Round an exact rational to the nearest value of ``precision``.

    Ties go to even.  Results beyond the format's range overflow to
    infinity; results below the normal range are rounded to subnormals.
    """
    dtype = precision.dtype
    if value == 0:
        return dtype(0)

    info = precision.info
    negative = value < 0
    numerator = abs(value.numerator)
    denominator = value.denominator

    # 2**exponent <= |value| < 2**(exponent + 1)
    exponent = numerator.bit_length() - denominator.bit_length()
    if exponent >= 0:
        below = numerator < (denominator << exponent)
    else:
        below = (numerator << -exponent) < denominator
    if below:
        exponent -= 1
    exponent = max(exponent, info.minexp)

    shift = precision.digits - 1 - exponent
    if shift >= 0:
        numerator <<= shift
    else:
        denominator <<= -shift
    mantissa, remainder = divmod(numerator, denominator)
    if 2 * remainder > denominator or (2 * remainder == denominator and mantissa & 1):
        mantissa += 1

    with np.errstate(over="ignore"):
        result = dtype(np.ldexp(int_to_float(mantissa, precision), -shift))
    return -result if negative else result


def as_vector(values: Union[list, tuple, np.ndarray, torch.Tensor],
              precision: Precision = None) -> np.ndarray:
    """
    Convert operands to a 1-D numpy array of the working precision.

    Args:
        values: List, numpy array or torch tensor
        precision: Target precision (default: inferred from ``values``)

    Returns:
        Array with the precision's dtype
    """
    if precision is None:
        precision = Precision.from_value(values)
    if isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    return np.asarray(values, dtype=precision.dtype).reshape(-1)
