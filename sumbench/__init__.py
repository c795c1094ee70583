"""
Summation Accuracy Benchmarks

Measures how accurately, and how fast, different strategies accumulate a
short sum of products in finite-precision floating point, judged against an
arbitrary-precision reference value.

This library provides:
- Error-free transformations (TwoSum, TwoProduct, ThreeFMA)
- Naive, FMA, Kahan, Kahan-FMA, exact FMA-compensated and Kobbelt dot products
- Genus-bucketed exact summation
- Arbitrary-precision error statistics and CPU/wall timing per algorithm
- Support for single, double and extended precision
"""

from .precision import Precision
from .core import two_sum, fast_two_sum, two_prod, three_fma, kahan_add
from .genus import GenusTable
from .algorithms import (
    naive_dot,
    fma_dot,
    kahan_dot,
    fma_kahan_dot,
    exact_fma_compensated_dot,
    kobbelt_dot,
    DOT_PRODUCT_ALGORITHMS,
)
from .exact import ExactContext
from .cases import DotProductCase, OperandGenerator
from .statistics import ErrorStatistics
from .timer import Timer
from .config import RunConfig
from .harness import (
    NumericTest,
    DotProductTest,
    QuadricTest,
    build_dot_product_tests,
    run_trials,
    summary_frame,
)

__version__ = "1.0.0"
__author__ = "Summation Benchmark Contributors"

__all__ = [
    "Precision",
    "two_sum",
    "fast_two_sum",
    "two_prod",
    "three_fma",
    "kahan_add",
    "GenusTable",
    "naive_dot",
    "fma_dot",
    "kahan_dot",
    "fma_kahan_dot",
    "exact_fma_compensated_dot",
    "kobbelt_dot",
    "DOT_PRODUCT_ALGORITHMS",
    "ExactContext",
    "DotProductCase",
    "OperandGenerator",
    "ErrorStatistics",
    "Timer",
    "RunConfig",
    "NumericTest",
    "DotProductTest",
    "QuadricTest",
    "build_dot_product_tests",
    "run_trials",
    "summary_frame",
]
