#!/usr/bin/env python3
"""
Basic usage examples for the summation accuracy benchmarks.

This script demonstrates the dot-product algorithms, the error-free
transformations they are built from, and a short measurement run.
"""

import io
import sys

import numpy as np
import torch

sys.path.append('..')

from sumbench import (
    DOT_PRODUCT_ALGORITHMS,
    ExactContext,
    Precision,
    RunConfig,
    summary_frame,
    three_fma,
    two_prod,
)
from sumbench.harness import run_dot_product_suite
from sumbench.precision import to_fraction


def demonstrate_precision_loss():
    """Show which algorithms recover a term swamped by cancellation."""
    print("=" * 60)
    print("DEMONSTRATION: Cancellation in a Dot Product")
    print("=" * 60)

    v1 = np.array([1e8, 1.0, -1e8], dtype=np.float32)
    v2 = np.ones(3, dtype=np.float32)

    print(f"v1 = {v1.tolist()}")
    print(f"v2 = {v2.tolist()}")
    print("Expected result: 1.0")
    print()

    print(f"{'Algorithm':<25} {'Result':<12}")
    print("-" * 40)
    for algorithm in DOT_PRODUCT_ALGORITHMS.values():
        result = algorithm.function(v1, v2)
        print(f"{algorithm.label:<25} {result!s:<12}")
    print()


def demonstrate_error_free_transformations():
    """Show that two_prod and three_fma lose nothing."""
    print("=" * 60)
    print("DEMONSTRATION: Error-Free Transformations")
    print("=" * 60)

    a = np.float32(1 + 2.0 ** -12)
    p, e = two_prod(a, a)
    print(f"two_prod({a}, {a}) = ({p}, {e!r})")
    print(f"  p + e == a * a exactly: {to_fraction(p) + to_fraction(e) == to_fraction(a) ** 2}")

    b, c = np.float32(3.0), np.float32(-1.0)
    s, e1, e2 = three_fma(a, b, c)
    exact = to_fraction(a) * to_fraction(b) + to_fraction(c)
    print(f"three_fma({a}, {b}, {c}) = ({s}, {e1!r}, {e2!r})")
    print(f"  s + e1 + e2 == a * b + c exactly: "
          f"{to_fraction(s) + to_fraction(e1) + to_fraction(e2) == exact}")
    print(f"Hardware FMA for double precision: {Precision.DOUBLE.hardware_fma}")
    print()


def demonstrate_torch_inputs():
    """Tensors are accepted wherever vectors are."""
    print("=" * 60)
    print("DEMONSTRATION: PyTorch Inputs")
    print("=" * 60)

    torch.manual_seed(0)
    v1 = torch.randn(4, dtype=torch.float64)
    v2 = torch.randn(4, dtype=torch.float64)
    context = ExactContext(256)
    reference = context.dot(v1.numpy(), v2.numpy())

    print(f"Exact dot product: {context.to_string(reference, 20)}")
    for key in ("naive", "kobbelt"):
        algorithm = DOT_PRODUCT_ALGORITHMS[key]
        print(f"{algorithm.label:<10} {algorithm.function(v1, v2)!r}")
    print()


def demonstrate_measurement_run():
    """Run a short suite and summarize it with pandas."""
    print("=" * 60)
    print("DEMONSTRATION: Short Measurement Run")
    print("=" * 60)

    config = RunConfig(trials=500, dimension=4, seed=42, precisions=["float"], dump=False)
    report = io.StringIO()
    tests = run_dot_product_suite(config, report)

    print(report.getvalue().split("\n\n")[0])
    print()
    frame = summary_frame(tests)
    print(frame[["test", "mean_rel_error", "max_rel_error", "cpu_seconds"]].to_string(index=False))
    print()


def main():
    """Run all demonstrations."""
    print("SUMMATION ACCURACY BENCHMARKS - BASIC USAGE EXAMPLES")
    print("=" * 60)
    print()

    demonstrate_precision_loss()
    demonstrate_error_free_transformations()
    demonstrate_torch_inputs()
    demonstrate_measurement_run()

    print("=" * 60)
    print("All demonstrations completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
