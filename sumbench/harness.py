"""
Trial loop, reports and data dumps.

Every algorithm under comparison is wrapped in a :class:`NumericTest` that
owns its own statistics engine and timer.  The trial loop hands each
generated case to every test in turn; at the end every test prints a
summary and can dump its raw per-trial errors.
"""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO, Union

import numpy as np
import pandas as pd

from .algorithms import DOT_PRODUCT_ALGORITHMS, DotProductAlgorithm, get_algorithm
from .cases import DotProductCase, OperandGenerator
from .config import RunConfig
from .errors import EmptyStatisticsError, StatisticsError, UndefinedRelativeError
from .exact import ExactContext
from .precision import Precision
from .quadric import QUADRIC_CASES, QUADRIC_EVALUATORS, QuadricCase, QuadricEvaluator
from .statistics import ErrorStatistics
from .timer import Timer

logger = logging.getLogger(__name__)

REPORT_DIGITS = 12
DUMP_COLUMNS = ["Absolute Error", "Relative Error"]


class NumericTest(ABC):
    """
    One algorithm under measurement.

    Subclasses provide ``name`` and ``run``; everything else (timing,
    error bookkeeping, reporting) is shared.

    Attributes:
        context: Exact arithmetic context of the statistics
        stats: Error statistics of all recorded trials
        timer: Accumulated run time of all trials
    """

    def __init__(self, context: Optional[ExactContext] = None):
        self.context = context or ExactContext()
        self.stats = ErrorStatistics(self.context)
        self.timer = Timer()

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable test name, also used for the dump file."""

    @abstractmethod
    def run(self, case):
        """Compute this algorithm's estimate for one case."""

    def __repr__(self):
        return f"<{type(self).__name__} {self.name!r}>"

    def update_stats(self, case):
        """
        Time one run on ``case`` and record its error.

        Raises:
            UndefinedRelativeError: if the case's reference value is zero
        """
        with self.timer:
            estimate = self.run(case)
        self.stats.record_trial(estimate, case.reference)
        return estimate

    def total_run_time(self):
        """Accumulated CPU time as (seconds, nanoseconds)."""
        return self.timer.total_run_time()

    def _format(self, value) -> str:
        return self.context.to_string(value, REPORT_DIGITS)

    def _statistic_line(self, label: str, compute) -> str:
        try:
            text = self._format(compute())
        except StatisticsError as e:
            text = f"undefined ({e})"
        return f"{label}: {text}"

    def report(self, percentile: Optional[float] = None) -> str:
        """
        Text summary of the run time and relative-error statistics.

        Args:
            percentile: Upper-tail fraction whose two-sided interval is added

        Statistics that need more samples, or a non-zero variance, are shown
        as undefined.

        Raises:
            EmptyStatisticsError: if no trial has been recorded
        """
        self.stats.mean()

        lines = [
            self.name,
            f"Running Time: {self.timer.format_run_time()}",
            self._statistic_line("Relative Error Average", self.stats.mean),
            self._statistic_line("Relative Error Variance", self.stats.variance),
            self._statistic_line("Relative Error Skew", self.stats.skewness),
            self._statistic_line("Relative Error Kurtosis", self.stats.kurtosis),
        ]
        if percentile is not None:
            lower, upper = self.stats.percentile(percentile)
            lines.append(f"Relative Error {percentile:g} Percentile: "
                         f"({self._format(lower)}, {self._format(upper)})")
        if self.stats.undefined_count:
            lines.append(f"Undefined Relative Errors: {self.stats.undefined_count}")
        return "\n".join(lines)

    def error_frame(self) -> pd.DataFrame:
        """Per-trial errors as text at full exact precision."""
        return pd.DataFrame({
            DUMP_COLUMNS[0]: [self.context.to_string(e) for e in self.stats.absolute_errors],
            DUMP_COLUMNS[1]: [self.context.to_string(e) for e in self.stats.relative_errors],
        }, columns=DUMP_COLUMNS)

    def dump(self, directory: Union[str, Path] = ".") -> Path:
        """
        Write all per-trial errors to ``<directory>/<name>.csv``.

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{self.name}.csv"
        self.error_frame().to_csv(path, index=False)
        logger.info("Wrote %d samples to %s", self.stats.count, path)
        return path


class DotProductTest(NumericTest):
    """Dot-product algorithm run in a given accumulator precision."""

    def __init__(self, algorithm: Union[str, DotProductAlgorithm],
                 precision: Precision = Precision.SINGLE,
                 context: Optional[ExactContext] = None):
        super().__init__(context)
        if isinstance(algorithm, str):
            algorithm = get_algorithm(algorithm)
        self.algorithm = algorithm
        self.precision = Precision.from_dtype(precision)

    @property
    def name(self) -> str:
        return f"{self.algorithm.label} Dot Product with {self.precision.label}"

    def run(self, case: DotProductCase):
        return self.algorithm.function(case.v1, case.v2, self.precision)


class QuadricTest(NumericTest):
    """Quadric evaluator measured on one family of cases."""

    def __init__(self, evaluator: QuadricEvaluator, suite: str = "",
                 context: Optional[ExactContext] = None):
        super().__init__(context)
        self.evaluator = evaluator
        self.suite = suite

    @property
    def name(self) -> str:
        name = f"{self.evaluator.label} Quadric Evaluation"
        if self.suite:
            name = f"{name} {self.suite}"
        return name

    def run(self, case: QuadricCase):
        return self.evaluator.function(case)


def build_dot_product_tests(precisions: Sequence[Precision],
                            context: Optional[ExactContext] = None) -> List[DotProductTest]:
    """Every dot-product algorithm in every precision, algorithms varying fastest."""
    context = context or ExactContext()
    return [
        DotProductTest(algorithm, precision, context)
        for precision in precisions
        for algorithm in DOT_PRODUCT_ALGORITHMS.values()
    ]


def run_trials(tests: Sequence[NumericTest], cases: Iterable) -> int:
    """
    Run every test on every case.

    Cases with a zero reference are flagged: each test counts the trial as
    undefined and no error sample is stored.

    Returns:
        Number of cases consumed
    """
    count = 0
    flagged = 0
    for case in cases:
        count += 1
        undefined = False
        for test in tests:
            try:
                test.update_stats(case)
            except UndefinedRelativeError:
                undefined = True
        if undefined:
            flagged += 1
            logger.warning("Trial %d has a zero reference value; relative error "
                           "excluded from the statistics", count)
    logger.info("Ran %d trials over %d tests (%d flagged)", count, len(tests), flagged)
    return count


def print_reports(tests: Iterable[NumericTest], stream: Optional[TextIO] = None,
                  percentile: Optional[float] = None) -> None:
    """Print each test's report; a test without samples is skipped with a warning."""
    stream = stream or sys.stdout
    for test in tests:
        try:
            text = test.report(percentile)
        except EmptyStatisticsError as e:
            logger.warning("No report for %s: %s", test.name, e)
            continue
        print(text, file=stream)
        print(file=stream)


def dump_all(tests: Iterable[NumericTest], directory: Union[str, Path] = ".") -> List[Path]:
    return [test.dump(directory) for test in tests]


def _to_float(compute) -> float:
    try:
        return float(compute())
    except StatisticsError:
        return np.nan


def summary_frame(tests: Iterable[NumericTest]) -> pd.DataFrame:
    """
    One row of summary statistics per test.

    Statistics that cannot be computed are NaN.
    """
    rows = []
    for test in tests:
        stats = test.stats
        rows.append({
            "test": test.name,
            "trials": stats.count,
            "undefined": stats.undefined_count,
            "cpu_seconds": test.timer.elapsed_ns / 1e9,
            "wall_seconds": test.timer.wall_ns / 1e9,
            "mean_rel_error": _to_float(stats.mean),
            "median_rel_error": _to_float(stats.median),
            "variance_rel_error": _to_float(stats.variance),
            "skew_rel_error": _to_float(stats.skewness),
            "kurtosis_rel_error": _to_float(stats.kurtosis),
            "min_rel_error": _to_float(stats.minimum),
            "max_rel_error": _to_float(stats.maximum),
        })
    return pd.DataFrame(rows)


def run_dot_product_suite(config: RunConfig, stream: Optional[TextIO] = None) -> List[DotProductTest]:
    """
    Generate ``config.trials`` dot-product cases and measure every algorithm.

    Returns:
        The tests, holding their statistics and timings
    """
    context = ExactContext(config.exact_precision)
    generator = OperandGenerator(config.operand_precision, seed=config.seed)
    tests = build_dot_product_tests(config.precisions, context)
    logger.info("Dot product suite: %d trials, dimension %d, precisions %s",
                config.trials, config.dimension, ", ".join(config.precision_labels))

    cases = (generator.dot_product_case(config.dimension, context)
             for _ in range(config.trials))
    run_trials(tests, cases)
    if generator.rejected:
        logger.info("Operand generator rejected %d non-finite patterns", generator.rejected)

    print_reports(tests, stream, config.percentile)
    if config.dump:
        dump_all(tests, config.output_dir)
    return tests


def run_quadric_suite(config: RunConfig, stream: Optional[TextIO] = None) -> List[QuadricTest]:
    """
    Measure every quadric evaluator on every quadric case family.

    Returns:
        All quadric tests, grouped by family
    """
    stream = stream or sys.stdout
    context = ExactContext(config.exact_precision)
    rng = np.random.default_rng(config.seed)
    all_tests = []
    for suite, make_case in QUADRIC_CASES.items():
        tests = [QuadricTest(evaluator, suite, context) for evaluator in QUADRIC_EVALUATORS]
        logger.info("Quadric suite %r: %d trials", suite, config.quadric_trials)
        cases = (make_case(rng, context, config.operand_precision)
                 for _ in range(config.quadric_trials))
        run_trials(tests, cases)

        print(suite, file=stream)
        print_reports(tests, stream, config.percentile)
        if config.dump:
            dump_all(tests, config.output_dir)
        all_tests.extend(tests)
    return all_tests
