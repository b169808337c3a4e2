"""Coordinate rulers shown above and below the tabular views.

Two forms are produced:

- dense: one slot per alignment position from 1 to a maximum position, with
  the position number written at every tenth position. A multi-digit label
  occupies one slot per digit, so the positions it covers are skipped.
- sparse: one column per entry of an explicit (possibly discontinuous)
  position list, every column labelled with its position.
"""

from typing import FrozenSet, List, Sequence

from seqcompare.types import Cell, Position, Row, Ruler, RulerColumn

TICK_BOUNDARY = 'tick-boundary'
MID_BOUNDARY = 'mid-boundary'


def dense_boundary(pos1: int, boundary_tick: int = 0, mid_tick: int = 5) -> FrozenSet[str]:
    """Separator tags for a position of a contiguous range."""
    if pos1 % 10 == boundary_tick:
        return frozenset([TICK_BOUNDARY])
    if pos1 % 10 == mid_tick:
        return frozenset([MID_BOUNDARY])
    return frozenset()


def sparse_boundary(index: int) -> FrozenSet[str]:
    """Separator tags for the index-th column of an explicit position list.

    Every fifth column gets a separator; the first column never does.
    """
    if index > 0 and (index % 10 == 0 or index % 10 == 5):
        return frozenset([MID_BOUNDARY])
    return frozenset()


def dense_ruler(max_position: int, initial_columns: int,
                boundary_tick: int = 0, mid_tick: int = 5, filler: str = '') -> Ruler:
    """
    Build a ruler over positions 1..max_position.

    Args:
        max_position: Last position covered. Must be at least the longest
            sequence length, otherwise the ruler under-covers the data.
        initial_columns: Number of blank leading columns (identifier columns)
        boundary_tick: Labelled positions satisfy position % 10 == boundary_tick
        mid_tick: Mid separators at position % 10 == mid_tick
        filler: Text for unlabelled columns

    Returns:
        Ruler with one column per slot
    """
    columns: List[RulerColumn] = []
    pos1 = 1
    while pos1 <= max_position:
        if pos1 % 10 == boundary_tick:
            label = str(pos1)
            columns.append(RulerColumn(label, True, False, len(label)))
            pos1 += len(label)
            continue
        columns.append(RulerColumn(filler, False, pos1 % 10 == mid_tick, 1))
        pos1 += 1
    return Ruler(initial_columns, columns)


def sparse_ruler(positions: Sequence[Position], initial_columns: int) -> Ruler:
    """Build a ruler with one labelled column per position, in list order."""
    columns = []
    for index, pos1 in enumerate(positions):
        columns.append(RulerColumn(str(pos1), False, bool(sparse_boundary(index)), 1))
    return Ruler(initial_columns, columns)


def ruler_row(ruler: Ruler, kind: str) -> Row:
    """Convert a ruler to a row of cells; kind tags the row (e.g. "aa-ruler")."""
    cells = []
    if ruler.initial_columns > 0:
        cells.append(Cell('', span=ruler.initial_columns))
    for column in ruler.columns:
        hints = set()
        if column.is_tick_boundary:
            hints.add(TICK_BOUNDARY)
        if column.is_mid_boundary:
            hints.add(MID_BOUNDARY)
        cells.append(Cell(column.label, frozenset(hints), column.span))
    return Row(cells, frozenset([kind]))
