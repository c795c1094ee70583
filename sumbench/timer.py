"""
CPU and wall-clock accounting for individual trials.
"""

import time
from typing import Tuple

from .errors import TimerError

NS_PER_S = 1_000_000_000


class Timer:
    """
    Accumulating stopwatch with one start/stop pair per trial.

    CPU time comes from ``time.process_time_ns`` and wall time from
    ``time.perf_counter_ns``.  Starting a running timer, or stopping one
    that is not running, raises :class:`TimerError`.

    Attributes:
        elapsed_ns: Total process CPU time over all laps
        wall_ns: Total wall-clock time over all laps
        laps: Number of completed start/stop pairs
    """

    def __init__(self):
        self.elapsed_ns = 0
        self.wall_ns = 0
        self.laps = 0
        self._cpu_start = None
        self._wall_start = None

    @property
    def running(self) -> bool:
        return self._cpu_start is not None

    def start(self):
        if self.running:
            raise TimerError("Timer started while already running")
        try:
            self._wall_start = time.perf_counter_ns()
            self._cpu_start = time.process_time_ns()
        except OSError as e:
            raise TimerError(f"Could not read process clock: {e}") from e

    def stop(self):
        try:
            cpu_end = time.process_time_ns()
            wall_end = time.perf_counter_ns()
        except OSError as e:
            raise TimerError(f"Could not read process clock: {e}") from e
        if not self.running:
            raise TimerError("Timer stopped without a matching start")

        self.elapsed_ns += cpu_end - self._cpu_start
        self.wall_ns += wall_end - self._wall_start
        self.laps += 1
        self._cpu_start = None
        self._wall_start = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    def total_run_time(self) -> Tuple[int, int]:
        """Accumulated CPU time as (seconds, nanoseconds)."""
        return divmod(self.elapsed_ns, NS_PER_S)

    def format_run_time(self) -> str:
        seconds, nanoseconds = self.total_run_time()
        return f"{seconds}.{nanoseconds:09d}"
