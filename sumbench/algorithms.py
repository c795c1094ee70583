"""
Dot-product accumulation algorithms.

Every algorithm has the same shape: two operand vectors of equal length in,
one scalar of the working precision out, with no state kept between calls.
Operands may be lists, numpy arrays or torch tensors and are converted to
the working precision first (inferred from the first vector when no
precision is given).
"""

from collections import OrderedDict
from typing import Callable, List, NamedTuple, Optional, Tuple, Union

import numpy as np
import torch

from .core import kahan_add, three_fma, two_prod
from .genus import GenusTable
from .precision import Precision, as_vector

Operands = Union[List[float], np.ndarray, torch.Tensor]


def _prepare(v1: Operands, v2: Operands,
             precision: Optional[Precision]) -> Tuple[np.ndarray, np.ndarray, Precision]:
    if precision is None:
        precision = Precision.from_value(v1)
    else:
        precision = Precision.from_dtype(precision)
    v1 = as_vector(v1, precision)
    v2 = as_vector(v2, precision)
    assert v1.shape == v2.shape, "Vectors must have same shape"
    return v1, v2, precision


def naive_dot(v1: Operands, v2: Operands, precision: Optional[Precision] = None):
    """
    Plain multiply-then-add accumulation.

    Args:
        v1: First vector
        v2: Second vector
        precision: Working precision

    Returns:
        Dot product rounded after every multiply and every add
    """
    v1, v2, precision = _prepare(v1, v2, precision)
    accumulator = precision.zero()
    for x, y in zip(v1, v2):
        accumulator += x * y
    return accumulator


def fma_dot(v1: Operands, v2: Operands, precision: Optional[Precision] = None):
    """Accumulation with one fused multiply-add per element."""
    v1, v2, precision = _prepare(v1, v2, precision)
    accumulator = precision.zero()
    for x, y in zip(v1, v2):
        accumulator = precision.fma(x, y, accumulator)
    return accumulator


def kahan_dot(v1: Operands, v2: Operands, precision: Optional[Precision] = None):
    """
    Kahan compensated accumulation of the rounded products.

    Args:
        v1: First vector
        v2: Second vector
        precision: Working precision

    Returns:
        Compensated dot product
    """
    v1, v2, precision = _prepare(v1, v2, precision)
    accumulator = precision.zero()
    c = precision.zero()
    for x, y in zip(v1, v2):
        accumulator, c = kahan_add(accumulator, x * y, c)
    return accumulator


def fma_kahan_dot(v1: Operands, v2: Operands, precision: Optional[Precision] = None):
    """
    Kahan accumulation where ``x*y - c`` is a single fused operation.

    The product never gets rounded on its own, so only the additions feed
    error into the compensation term.
    """
    v1, v2, precision = _prepare(v1, v2, precision)
    accumulator = precision.zero()
    c = precision.zero()
    for x, y in zip(v1, v2):
        mod = precision.fma(x, y, -c)
        tmp = accumulator + mod
        c = (tmp - accumulator) - mod
        accumulator = tmp
    return accumulator


def exact_fma_compensated_dot(v1: Operands, v2: Operands,
                              precision: Optional[Precision] = None):
    """
    Double-length accumulation built from error-free transformations.

    ``term0`` carries the running FMA result and ``term1`` collects the exact
    residuals of every step, so the pair behaves like a double-double sum.

    Args:
        v1: First vector
        v2: Second vector
        precision: Working precision

    Returns:
        ``term0 + term1`` in the working precision
    """
    v1, v2, precision = _prepare(v1, v2, precision)
    term0, term1 = two_prod(v1[0], v2[0], precision)
    for x, y in zip(v1[1:], v2[1:]):
        term0, e1, e2 = three_fma(x, y, term0, precision)
        term1 += e1 + e2
    return precision.dtype(term0 + term1)


def kobbelt_dot(v1: Operands, v2: Operands, precision: Optional[Precision] = None):
    """
    Exact products summed through a genus table.

    Both halves of every ``two_prod`` split go into the table, which merges
    values whenever their sum is exact; the survivors are added in ascending
    genus order.
    """
    v1, v2, precision = _prepare(v1, v2, precision)
    table = GenusTable(precision)
    for x, y in zip(v1, v2):
        product, residual = two_prod(x, y, precision)
        table.insert(product)
        table.insert(residual)
    return table.drain()


class DotProductAlgorithm(NamedTuple):
    key: str
    label: str
    function: Callable


DOT_PRODUCT_ALGORITHMS = OrderedDict(
    (algorithm.key, algorithm) for algorithm in [
        DotProductAlgorithm("naive", "Naive", naive_dot),
        DotProductAlgorithm("fma", "FMA", fma_dot),
        DotProductAlgorithm("kahan", "Kahan", kahan_dot),
        DotProductAlgorithm("fma_kahan", "Kahan FMA", fma_kahan_dot),
        DotProductAlgorithm("exact_fma", "Exact FMA Compensated", exact_fma_compensated_dot),
        DotProductAlgorithm("kobbelt", "Kobbelt", kobbelt_dot),
    ]
)


def get_algorithm(key: str) -> DotProductAlgorithm:
    """Look up a dot-product algorithm by key."""
    try:
        return DOT_PRODUCT_ALGORITHMS[key]
    except KeyError:
        raise ValueError(f"Unknown method: {key}") from None
