"""
Error-free transformations.

This module contains the numeric kernels that the compensated and exact
dot-product algorithms are built from.  Each transformation returns a
rounded result together with the exact rounding error(s), using only
operations of the working precision.

All functions assume finite operands whose products do not overflow.
``two_prod`` and ``three_fma`` additionally require a correctly rounded
fused multiply-add; see :mod:`sumbench.precision` for how one is provided
on every supported format.
"""

from typing import Optional, Tuple

from .precision import Precision


def _resolve(precision: Optional[Precision], value) -> Precision:
    if precision is None:
        return Precision.from_value(value)
    return precision


def two_sum(a, b) -> Tuple:
    """
    Knuth's branch-free TwoSum.

    Args:
        a: First addend
        b: Second addend

    Returns:
        Tuple of (s, e) with ``s = fl(a + b)`` and ``s + e == a + b`` exactly
    """
    s = a + b
    b_virtual = s - a
    a_virtual = s - b_virtual
    e = (a - a_virtual) + (b - b_virtual)
    return s, e


def fast_two_sum(a, b) -> Tuple:
    """Dekker's FastTwoSum; exact when ``|a| >= |b|`` or ``a == 0``."""
    s = a + b
    e = b - (s - a)
    return s, e


def two_prod(a, b, precision: Optional[Precision] = None) -> Tuple:
    """
    Split a product into its rounded value and exact residual.

    Args:
        a: Multiplicand
        b: Multiplier
        precision: Working precision (default: inferred from ``a``)

    Returns:
        Tuple of (p, e) with ``p = fl(a * b)`` and ``p + e == a * b`` exactly
    """
    precision = _resolve(precision, a)
    p = a * b
    e = precision.fma(a, b, -p)
    return p, e


def three_fma(a, b, c, precision: Optional[Precision] = None) -> Tuple:
    """
    Split a fused multiply-add into its result and two exact error terms.

    This is Boldo and Muller's ErrFma: ``r1`` is the FMA result and
    ``r1 + r2 + r3 == a * b + c`` exactly, with ``|r2 + r3| <= ulp(r1) / 2``.

    Args:
        a: Multiplicand
        b: Multiplier
        c: Addend
        precision: Working precision (default: inferred from ``a``)

    Returns:
        Tuple of (r1, r2, r3)
    """
    precision = _resolve(precision, a)
    r1 = precision.fma(a, b, c)
    u1, u2 = two_prod(a, b, precision)
    alpha1, alpha2 = two_sum(c, u2)
    beta1, beta2 = two_sum(u1, alpha1)
    gamma = (beta1 - r1) + beta2
    r2, r3 = fast_two_sum(gamma, alpha2)
    return r1, r2, r3


def kahan_add(total, value, compensation) -> Tuple:
    """
    Single-step Kahan addition.

    Args:
        total: Running sum
        value: Value to add
        compensation: Current compensation term

    Returns:
        Tuple of (new_total, new_compensation)
    """
    y = value - compensation
    t = total + y
    new_compensation = (t - total) - y
    return t, new_compensation
