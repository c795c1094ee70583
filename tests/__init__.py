"""
Test suite for the summation accuracy benchmarks.

Test Structure:
- test_core.py: Error-free transformations and the correctly rounded FMA
- test_precision.py: Working precisions, genus keys and exact conversions
- test_genus.py: Genus table behind Kobbelt's summation
- test_algorithms.py: Dot-product algorithms and their accuracy ordering
- test_statistics.py: Arbitrary-precision error statistics
- test_timer.py: CPU and wall-clock accounting
- test_cases.py: Test cases and operand generation
- test_quadric.py: Quadric surface evaluation
- test_harness.py: Trial loop, reports, dumps and suites
- test_cli.py: Run configuration and command line
- conftest.py: Shared fixtures and configuration

Usage:
    # Run all tests
    pytest

    # Run specific test file
    pytest tests/test_core.py

    # Run tests with coverage
    pytest --cov=sumbench

    # Run only fast tests
    pytest -m "not slow"
"""
