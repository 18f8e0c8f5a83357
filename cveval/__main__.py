"""Command line entry point.

    cveval DATASET SPLITS PREDICTIONS TARGET

Prints the JSON report on success. Any integrity failure prints the error to
stderr and exits with status 1 without writing a report.
"""

import argparse
import logging
import sys

from ._errors import EvaluationError
from .evaluation import evaluate_files


def build_parser():
    parser = argparse.ArgumentParser(
        prog="cveval",
        description="Score cross-validation predictions against a dataset and split plan.",
    )
    parser.add_argument("dataset", help="dataset location (ARFF or CSV, path or URL)")
    parser.add_argument("splits", help="split plan location")
    parser.add_argument("predictions", help="predictions location")
    parser.add_argument("target", help="name of the target attribute in the dataset")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level written to stderr (default: WARNING)",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        report = evaluate_files(args.dataset, args.splits, args.predictions, args.target)
    except EvaluationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(report.to_json(indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
