#!/usr/bin/env python3

"""
Build the comparison views for a dataset of grouped aligned sequences.

The master sequence of the first group is resolved once, then the four
views are built from the resolved ordering in a fixed order.
"""

import argparse
import json
import logging
import sys
from typing import NamedTuple, Optional

from seqcompare.config import DEFAULT_MAX_POSITION, RulerConfig
from seqcompare.consensus import rearrange
from seqcompare.loader import build_dataset, load_dataset, read_fasta_groups, write_data_js, variable_name_for
from seqcompare.summary import format_seq_ids, format_summary
from seqcompare.types import Dataset, DatasetError, View
from seqcompare.views import (
    frequency_view,
    full_sequences_view,
    most_frequent_view,
    positions_with_diversity_view,
    views_to_dict,
)

try:
    from seqcompare import __version__
except ImportError:
    __version__ = "dev"


class CompareViews(NamedTuple):
    most_frequent: View
    frequency: View
    diversity: View
    full_sequences: View


def compare_sequences(dataset: Dataset, config: Optional[RulerConfig] = None) -> CompareViews:
    """
    Resolve the master sequence and build all views.

    Raises:
        DatasetError: if the dataset cannot be rendered; no view is returned
    """
    if config is None:
        config = RulerConfig()
    if not dataset.groups:
        raise DatasetError("Dataset has no groups")

    reference = dataset.groups[0]
    rearrange(reference)
    master = dataset.master_record()
    logging.info(f"Master sequence: {master.id} (group {reference.name!r})")
    config.ensure_covers(dataset)

    return CompareViews(
        most_frequent=most_frequent_view(dataset.groups, reference, dataset.pos1),
        frequency=frequency_view(dataset.groups, dataset.pos1),
        diversity=positions_with_diversity_view(dataset.groups, master, dataset.pos1),
        full_sequences=full_sequences_view(dataset.groups, master, config),
    )


def setup_logging(log_level: str, log_file: str = None):
    """Setup logging configuration with optional file output."""
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        return log_file

    return None


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(description="Compare groups of aligned sequences")
    parser.add_argument("fasta", nargs="*", metavar="GROUP=FASTA",
                        help="Aligned FASTA file per group, optionally prefixed with the group name")
    parser.add_argument("--data", help="Comparison data file (.json or .data.js) instead of FASTA input")
    parser.add_argument("--max-position", type=int, default=DEFAULT_MAX_POSITION,
                        help=f"Last position of the full sequence ruler (default: {DEFAULT_MAX_POSITION})")
    parser.add_argument("--ruler-ticks", default="0,5", metavar="B,M",
                        help="Label positions with position %% 10 == B, mid separators at M (default: 0,5)")
    parser.add_argument("--filler", default="",
                        help="Text for unlabelled ruler columns (default: empty)")
    parser.add_argument("-o", "--output", help="Write views as JSON to this file (default: stdout)")
    parser.add_argument("--data-js", help="Also write the dataset as a .data.js file")
    parser.add_argument("--summary", action="store_true",
                        help="Print member ids and most frequent residues per group instead of views JSON on stdout")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--version", action="version", version=f"seqcompare {__version__}")

    args = parser.parse_args(argv)
    if bool(args.data) == bool(args.fasta):
        parser.error("give either --data or FASTA files")
    return args


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        config = RulerConfig.from_args(args)
        if args.data:
            dataset = load_dataset(args.data)
        else:
            dataset = build_dataset(read_fasta_groups(args.fasta))
        views = compare_sequences(dataset, config)
    except (DatasetError, ValueError) as e:
        logging.error(f"Cannot compare sequences: {e}")
        sys.exit(1)

    if args.data_js:
        write_data_js(args.data_js, dataset, variable_name_for(args.data_js))

    if args.summary:
        sys.stdout.write(format_seq_ids(dataset) + '\n')
        sys.stdout.write(format_summary(dataset))

    output = json.dumps(views_to_dict(views), indent=1)
    if args.output:
        with open(args.output, 'w') as f:
            f.write(output)
        logging.info(f"Wrote views to {args.output}")
    elif not args.summary:
        sys.stdout.write(output + '\n')


if __name__ == "__main__":
    main()
