"""
Command-line entry point.

    sumbench [TRIALS [DIMENSION]] [options]
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_DIMENSION, DEFAULT_QUADRIC_TRIALS, DEFAULT_TRIALS, RunConfig
from .errors import ConfigurationError
from .exact import DEFAULT_EXACT_PRECISION
from .harness import run_dot_product_suite, run_quadric_suite
from .precision import PRECISION_NAMES

logger = logging.getLogger(__name__)

EXIT_INVALID_ARGUMENTS = -1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sumbench",
        description="Measure the accuracy and run time of dot-product "
                    "accumulation algorithms against an exact reference.",
    )
    parser.add_argument("trials", nargs="?", default=str(DEFAULT_TRIALS),
                        help=f"number of random test cases (default: {DEFAULT_TRIALS})")
    parser.add_argument("dimension", nargs="?", default=str(DEFAULT_DIMENSION),
                        help=f"length of each operand vector (default: {DEFAULT_DIMENSION})")
    parser.add_argument("--precision", dest="precisions", action="append",
                        choices=sorted(PRECISION_NAMES), metavar="NAME",
                        help="accumulator precision to test; repeatable "
                             "(default: float, double and long double)")
    parser.add_argument("--exact-bits", type=int, default=DEFAULT_EXACT_PRECISION,
                        help=f"bits of the reference arithmetic (default: {DEFAULT_EXACT_PRECISION})")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the operand generator")
    parser.add_argument("--percentile", type=float, default=None, metavar="FRACTION",
                        help="also report the two-sided interval for this fraction, e.g. 0.99")
    parser.add_argument("--output-dir", default=".",
                        help="directory for the per-test CSV dumps (default: current directory)")
    parser.add_argument("--no-dump", dest="dump", action="store_false",
                        help="do not write the per-test CSV dumps")
    parser.add_argument("--quadric", action="store_true",
                        help="run the quadric evaluation suites instead of dot products")
    parser.add_argument("--quadric-trials", type=int, default=DEFAULT_QUADRIC_TRIALS,
                        help=f"cases per quadric family (default: {DEFAULT_QUADRIC_TRIALS})")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="increase log verbosity (-v info, -vv debug)")
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")


def _count(text: str, message: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ConfigurationError(f"{message}, got {text!r}") from None


def config_from_args(args: argparse.Namespace) -> RunConfig:
    kwargs = dict(
        trials=_count(args.trials, "Number of tests must be an integer"),
        dimension=_count(args.dimension, "Vector size must be an integer"),
        exact_precision=args.exact_bits,
        seed=args.seed,
        percentile=args.percentile,
        output_dir=args.output_dir,
        dump=args.dump,
        quadric_trials=args.quadric_trials,
    )
    if args.precisions:
        kwargs["precisions"] = args.precisions
    return RunConfig(**kwargs)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return EXIT_INVALID_ARGUMENTS

    if args.quadric:
        run_quadric_suite(config)
    else:
        run_dot_product_suite(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
