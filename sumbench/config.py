"""
Run configuration for the accuracy harness.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import ConfigurationError
from .exact import DEFAULT_EXACT_PRECISION
from .precision import Precision

DEFAULT_TRIALS = 100_000
DEFAULT_DIMENSION = 4
DEFAULT_QUADRIC_TRIALS = 10_000


@dataclass
class RunConfig:
    """
    Settings of one measurement run.

    Attributes:
        trials: Number of generated test cases
        dimension: Length of each operand vector
        precisions: Accumulator precisions to run every algorithm in
        operand_precision: Precision the operands are generated in
        exact_precision: Bits of the arbitrary-precision reference arithmetic
        seed: Seed of the operand generator (None draws fresh entropy)
        percentile: Upper-tail fraction to report, or None to skip
        output_dir: Directory receiving the per-test CSV dumps
        dump: Whether to write the CSV dumps at all
        quadric_trials: Cases per quadric family when running quadric suites
    """

    trials: int = DEFAULT_TRIALS
    dimension: int = DEFAULT_DIMENSION
    precisions: List[Precision] = field(
        default_factory=lambda: [Precision.SINGLE, Precision.DOUBLE, Precision.EXTENDED])
    operand_precision: Precision = Precision.SINGLE
    exact_precision: int = DEFAULT_EXACT_PRECISION
    seed: Optional[int] = None
    percentile: Optional[float] = None
    output_dir: Path = Path(".")
    dump: bool = True
    quadric_trials: int = DEFAULT_QUADRIC_TRIALS

    def __post_init__(self):
        """Validate configuration."""
        if self.trials < 1:
            raise ConfigurationError("Number of tests must be greater than 0")
        if self.dimension < 1:
            raise ConfigurationError("Vector size must be greater than 0")
        if self.quadric_trials < 1:
            raise ConfigurationError("Number of quadric tests must be greater than 0")
        if self.exact_precision < 2:
            raise ConfigurationError(
                f"Exact precision must be at least 2 bits, got {self.exact_precision}")
        if self.percentile is not None and not 0 <= self.percentile <= 1:
            raise ConfigurationError(
                f"Percentile must be within [0, 1], got {self.percentile}")
        if not self.precisions:
            raise ConfigurationError("At least one precision is required")
        try:
            self.precisions = [Precision.from_dtype(p) for p in self.precisions]
            self.operand_precision = Precision.from_dtype(self.operand_precision)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(str(e)) from e
        self.output_dir = Path(self.output_dir)

    @property
    def precision_labels(self) -> Tuple[str, ...]:
        return tuple(p.label for p in self.precisions)
