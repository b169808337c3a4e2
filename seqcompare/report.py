#!/usr/bin/env python3

"""
Plain text comparison of aligned sequences against the first one.

Lists only the positions where at least one sequence differs from the first
sequence; identical residues are printed as '.', missing ones as '-'.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence, Tuple

from Bio import SeqIO

from seqcompare.compare import setup_logging
from seqcompare.types import SequenceRecord

SPLIT_GAP = '  '


def residue_marker(aa: str, seq: str, pos0: int) -> str:
    """Marker for seq at pos0 relative to the master residue aa."""
    if len(seq) <= pos0:
        return '-'
    if seq[pos0] == aa:
        return '.'
    return seq[pos0]


def positions_with_differences(master: str, others: Sequence[str]) -> List[int]:
    """0-based positions of master where some long enough sequence differs."""
    result = []
    for pos0, aa in enumerate(master):
        if not all(len(seq) <= pos0 or seq[pos0] == aa for seq in others):
            result.append(pos0)
    return result


def _columns(values: Sequence[str], gap_at: Optional[int]) -> str:
    """Join per-sequence columns, with a gap before the gap_at-th one."""
    out = []
    for index, value in enumerate(values):
        if index == gap_at:
            out.append(SPLIT_GAP)
        out.append(f" {value:>2}")
    return ''.join(out)


def _format_report(master: SequenceRecord, first: Sequence[SequenceRecord], second: Sequence[SequenceRecord],
                   title1: str = '', title2: str = '', split: bool = False) -> str:
    others = list(first) + list(second)
    if not others:
        raise ValueError("too few seq ids: nothing to compare")
    gap_at = len(first) if split else None

    lines = []
    if title1:
        lines.append(title1)
    lines.append(f"{0:2d} {master.id}")
    lines.extend(f"{no:2d} {record.id}" for no, record in enumerate(first, start=1))
    if title2:
        lines.append('')
        lines.append(title2)
    lines.extend(f"{no:2d} {record.id}" for no, record in enumerate(second, start=len(first) + 1))
    lines.append('')
    lines.append(f"    {0:>2d}" + _columns([str(no) for no in range(1, len(others) + 1)], gap_at))

    seqs = [record.seq for record in others]
    for pos0 in positions_with_differences(master.seq, seqs):
        aa = master.seq[pos0]
        lines.append(f"{pos0 + 1:3d} {aa:>2}" + _columns([residue_marker(aa, seq, pos0) for seq in seqs], gap_at))
    return '\n'.join(lines) + '\n'


def compare_report_text(records: Sequence[SequenceRecord], split: int = 0) -> str:
    """
    Format the comparison report.

    Args:
        records: Sequences to compare, the first one is the master
        split: When > 0, records[split:] are set apart from records[1:split]

    Returns:
        Report text
    """
    if len(records) < 2:
        raise ValueError("too few seq ids: nothing to compare")
    if split < 0 or split > len(records):
        raise ValueError(f"split must be in 0..{len(records)}, got {split}")
    if split > 0:
        return _format_report(records[0], records[1:split], records[split:], split=True)
    return _format_report(records[0], records[1:], [])


def compare_report_sets(sets: Sequence[Tuple[str, Sequence[SequenceRecord]]]) -> str:
    """
    Format the comparison report for one or two titled sets of sequences.

    The first sequence of the first set is the master. With two sets the
    columns of the second set are set apart and each set is listed under
    its title.
    """
    if not 1 <= len(sets) <= 2:
        raise ValueError(f"one or two sets can be compared, got {len(sets)}")
    title1, records1 = sets[0]
    if not records1:
        raise ValueError(f"set {title1!r} is empty")
    if len(sets) == 1:
        return _format_report(records1[0], records1[1:], [], title1=title1)
    title2, records2 = sets[1]
    return _format_report(records1[0], records1[1:], records2, title1=title1, title2=title2, split=True)


def read_records(path: str) -> List[SequenceRecord]:
    if not os.path.exists(path):
        raise ValueError(f"FASTA file not found: {path}")
    records = [SequenceRecord(record.id, str(record.seq).upper()) for record in SeqIO.parse(path, "fasta")]
    logging.info(f"Loaded {len(records)} sequences from {path}")
    return records


def main(argv=None):
    parser = argparse.ArgumentParser(description="Report positions where aligned sequences differ from the first one")
    parser.add_argument("input_file", help="Aligned FASTA file")
    parser.add_argument("--compare-with", metavar="FASTA",
                        help="Second set of aligned sequences, reported under its own title")
    parser.add_argument("--split", type=int, default=0,
                        help="Separate sequences from this index on into a second block (default: 0 = no split)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--log-file", help="Also write log messages to this file")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)

    try:
        records = read_records(args.input_file)
        if args.compare_with:
            sets = [(os.path.basename(args.input_file), records),
                    (os.path.basename(args.compare_with), read_records(args.compare_with))]
            report = compare_report_sets(sets)
        else:
            report = compare_report_text(records, args.split)
    except ValueError as e:
        logging.error(str(e))
        sys.exit(1)
    sys.stdout.write(report)


if __name__ == "__main__":
    main()
