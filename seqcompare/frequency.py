"""Per-position residue frequencies of a group.

Frequency tables map 1-based positions to (residue, count) entries ranked
by descending count. They are normally supplied with the dataset; this
module reads them and can also compute them from aligned sequences.
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

import numpy as np

from seqcompare.types import (
    DatasetError,
    FrequencyEntry,
    FrequencyTable,
    Group,
    Position,
    Residue,
    to_pos1,
)

# Characters counted as residues: ASCII ' ' up to (not including) '['
FIRST_COUNTED = ' '
END_COUNTED = '['


def most_frequent(group: Group, pos1: Position) -> FrequencyEntry:
    """Top ranked entry for a position; the position must be tabulated."""
    entries = group.pos1.get(pos1)
    if not entries:
        raise DatasetError(f"Group {group.name!r} has no frequencies for position {pos1}")
    return entries[0]


def row_count(group: Group, pos1: Position) -> int:
    """Number of distinct residues observed at a tabulated position."""
    if pos1 not in group.pos1:
        raise DatasetError(f"Group {group.name!r} has no frequencies for position {pos1}")
    return len(group.pos1[pos1])


def max_row_count(group: Group) -> int:
    """Largest number of distinct residues over all tabulated positions (0 if none)."""
    return max((len(entries) for entries in group.pos1.values()), default=0)


def check_ranked(entries: Sequence[FrequencyEntry], pos1: Position, group_name: str = '') -> None:
    """Raise DatasetError unless counts are >= 1 and non-increasing."""
    previous: Optional[int] = None
    for entry in entries:
        if entry.count < 1:
            raise DatasetError(f"Group {group_name!r} position {pos1}: count must be >= 1, "
                               f"got {entry.count} for {entry.residue!r}")
        if previous is not None and entry.count > previous:
            raise DatasetError(f"Group {group_name!r} position {pos1}: entries are not "
                               f"ranked by descending count")
        previous = entry.count


def residue_matrix(sequences: Sequence[str]) -> np.ndarray:
    """Stack sequences into a (n_sequences, alignment_length) character matrix.

    Shorter sequences are padded with empty strings, which are never counted.
    """
    length = max((len(seq) for seq in sequences), default=0)
    matrix = np.full((len(sequences), length), '', dtype='<U1')
    for row, seq in enumerate(sequences):
        if seq:
            matrix[row, :len(seq)] = list(seq)
    return matrix


def count_residues(sequences: Sequence[str]) -> List[List[FrequencyEntry]]:
    """
    Count residues in every alignment column.

    Returns:
        List indexed by 0-based column of entries ranked by descending count.
        Ties keep residue order.
    """
    matrix = residue_matrix(sequences)
    counters = []
    for pos0 in range(matrix.shape[1]):
        column = matrix[:, pos0]
        column = column[(column >= FIRST_COUNTED) & (column < END_COUNTED)]
        if column.size == 0:
            counters.append([])
            continue
        residues, counts = np.unique(column, return_counts=True)
        order = np.argsort(-counts, kind='stable')
        counters.append([FrequencyEntry(Residue(str(residues[i])), int(counts[i])) for i in order])
    return counters


def diversity_positions(counters_by_group: Dict[str, List[List[FrequencyEntry]]]) -> List[Position]:
    """
    Positions where the groups taken together show more than one residue.

    Groups without any counted column are skipped with a warning.
    """
    merged: List[Set[str]] = []
    for name, counters in counters_by_group.items():
        if not any(counters):
            logging.warning(f"subset empty: {name}")
            continue
        if len(merged) < len(counters):
            merged.extend(set() for _ in range(len(counters) - len(merged)))
        for pos0, entries in enumerate(counters):
            merged[pos0].update(entry.residue for entry in entries)
    return [to_pos1(pos0) for pos0, seen in enumerate(merged) if len(seen) > 1]


def frequency_table(counters: List[List[FrequencyEntry]], positions: Sequence[Position]) -> FrequencyTable:
    """Restrict per-column counters to the given positions.

    Positions the group has no residues for are left untabulated.
    """
    table: FrequencyTable = {}
    for pos1 in positions:
        pos0 = pos1 - 1
        if pos0 < len(counters) and counters[pos0]:
            table[pos1] = list(counters[pos0])
    return table
