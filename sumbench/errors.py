"""
Exception hierarchy for the summation accuracy harness.
"""


class SumbenchError(Exception):
    """Base class for all errors raised by sumbench."""


class StatisticsError(SumbenchError, ArithmeticError):
    """A descriptive statistic could not be computed."""


class EmptyStatisticsError(StatisticsError):
    """A statistic was requested before any sample was recorded."""


class InsufficientSamplesError(EmptyStatisticsError):
    """A statistic needs more samples than have been recorded."""


class InvalidPercentileError(StatisticsError, ValueError):
    """Percentile fraction outside [0, 1]."""


class UndefinedRelativeError(StatisticsError, ZeroDivisionError):
    """The reference value is exactly zero, so relative error is undefined."""


class TimerError(SumbenchError, RuntimeError):
    """Timer used out of order, or the process clock could not be read."""


class ConfigurationError(SumbenchError, ValueError):
    """Invalid run configuration."""
