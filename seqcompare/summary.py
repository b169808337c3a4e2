"""Plain text summary of a dataset: member ids per group and most frequent residues."""

from typing import List

from seqcompare.frequency import most_frequent
from seqcompare.types import Dataset

MATCH_MARKER = '.'


def format_seq_ids(dataset: Dataset, indent: int = 0) -> str:
    """Group names, each followed by the ids of its members."""
    prefix = ' ' * indent
    lines: List[str] = []
    for group in dataset.groups:
        lines.append(f"{prefix}{group.name} ({len(group.seq)})")
        lines.extend(f"{prefix}  {record.id}" for record in group.seq)
        lines.append('')
    return '\n'.join(lines)


def format_summary(dataset: Dataset, indent: int = 2, column_width: int = 5) -> str:
    """
    Most frequent residue of every group at each diversity position.

    The first group is printed in full; in the other groups a residue equal
    to the first group's most frequent one is printed as '.'.

    Args:
        dataset: Dataset whose groups tabulate every diversity position
        indent: Number of spaces before each line
        column_width: Width of a position column

    Returns:
        Summary text, one header line and one line per group
    """
    prefix = ' ' * indent
    name_width = max((len(group.name) for group in dataset.groups), default=0)
    lines = [prefix + ' ' * name_width + ''.join(f"{pos1:^{column_width}d}" for pos1 in dataset.pos1)]

    reference = dataset.groups[0] if dataset.groups else None
    for group in dataset.groups:
        cells = []
        for pos1 in dataset.pos1:
            aa = most_frequent(group, pos1).residue
            if group is not reference and aa == most_frequent(reference, pos1).residue:
                aa = MATCH_MARKER
            cells.append(f"{aa:^{column_width}}")
        lines.append(f"{prefix}{group.name:<{name_width}}" + ''.join(cells))
    return '\n'.join(lines) + '\n'
