"""Row and cell layout of the four comparison views.

Each builder returns a View: a title and rows of cells carrying symbolic
hints only. Turning them into widgets is up to the rendering layer.
"""

from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence

from seqcompare.config import RulerConfig
from seqcompare.diff import MATCH_PLACEHOLDER, display_text, project, project_positions, reference_for
from seqcompare.frequency import max_row_count, most_frequent
from seqcompare.ruler import dense_boundary, dense_ruler, ruler_row, sparse_boundary, sparse_ruler
from seqcompare.types import (
    Cell,
    DatasetError,
    DiffCell,
    Group,
    Position,
    Row,
    SequenceRecord,
    View,
)

MOST_FREQUENT_TITLE = "Most frequent per group"
FREQUENCY_TITLE = "Frequency per group"
DIVERSITY_TITLE = "Positions with diversity"
FULL_SEQUENCES_TITLE = "Full sequences"

DIFF_MATCH = 'diff-match'
GROUP_NAME = 'group-name'
SEQ_ID = 'seq-id'
GROUP_SPACE = 'group-space'
AA_AND_COUNT = 'aa-and-count'


def residue_hints(aa: str) -> FrozenSet[str]:
    return frozenset(['aa', f'aa{aa}'])


def residue_cell(aa: str, text: str, boundary: FrozenSet[str], matches: bool) -> Cell:
    hints = residue_hints(aa) | boundary
    if matches:
        hints = hints | {DIFF_MATCH}
    return Cell(text, hints)


def diff_cell(cell: DiffCell, boundary: FrozenSet[str]) -> Cell:
    return residue_cell(cell.residue, display_text(cell), boundary, cell.is_master_match)


def group_space_row(width: int) -> Row:
    """Blank row separating groups, spanning width columns."""
    return Row([Cell('', span=width)], frozenset([GROUP_SPACE]))


def sequence_rows(group: Group, master: SequenceRecord,
                  make_cells: Callable[[SequenceRecord, str], List[Cell]],
                  width: Callable[[SequenceRecord], int]) -> List[Row]:
    """
    One row per member of group, diffed against master.

    The group name spans all member rows. A spacer row precedes the group
    unless its first member is the master, identified by id.
    """
    rows = []
    for index, record in enumerate(group.seq):
        is_master = record.id == master.id
        if index == 0 and not is_master:
            rows.append(group_space_row(width(record)))
        cells = []
        if index == 0:
            cells.append(Cell(group.name, frozenset([GROUP_NAME]), row_span=len(group.seq)))
        cells.append(Cell(record.id, frozenset([SEQ_ID])))
        cells.extend(make_cells(record, reference_for(record, master)))
        rows.append(Row(cells))
    return rows


def full_sequences_view(groups: Sequence[Group], master: SequenceRecord, config: RulerConfig) -> View:
    """Every member sequence in full, residues equal to master shown as placeholders."""
    def make_cells(record: SequenceRecord, reference: str) -> List[Cell]:
        return [diff_cell(cell, dense_boundary(cell.column_position0 + 1, config.boundary_tick, config.mid_tick))
                for cell in project(record.seq, reference)]

    ruler = ruler_row(dense_ruler(config.max_position, 2, config.boundary_tick,
                                  config.mid_tick, config.filler), 'aa-ruler')
    rows = [ruler]
    for group in groups:
        rows.extend(sequence_rows(group, master, make_cells, lambda record: len(record.seq) + 2))
    rows.append(ruler)
    return View(FULL_SEQUENCES_TITLE, rows)


def positions_with_diversity_view(groups: Sequence[Group], master: SequenceRecord,
                                  positions: Sequence[Position]) -> View:
    """Member residues at the diversity positions only."""
    def make_cells(record: SequenceRecord, reference: str) -> List[Cell]:
        return [diff_cell(cell, sparse_boundary(index))
                for index, cell in enumerate(project_positions(record, reference, positions))]

    ruler = ruler_row(sparse_ruler(positions, 2), 'position-ruler')
    rows = [ruler]
    for group in groups:
        rows.extend(sequence_rows(group, master, make_cells, lambda record: len(positions) + 2))
    rows.append(ruler)
    return View(DIVERSITY_TITLE, rows)


def most_frequent_view(groups: Sequence[Group], reference: Group, positions: Sequence[Position]) -> View:
    """
    One row per group with its most frequent residue at each diversity position.

    Rows of groups other than reference are diffed against reference's most
    frequent residues; reference itself is shown in full.
    """
    rows = [ruler_row(sparse_ruler(positions, 1), 'position-ruler')]
    for group in groups:
        baseline: Optional[Group] = None if group is reference else reference
        cells = [Cell(group.name, frozenset([GROUP_NAME]))]
        for index, pos1 in enumerate(positions):
            aa = most_frequent(group, pos1).residue
            matches = baseline is not None and aa == most_frequent(baseline, pos1).residue
            cells.append(residue_cell(aa, MATCH_PLACEHOLDER if matches else aa, sparse_boundary(index), matches))
        rows.append(Row(cells))
    return View(MOST_FREQUENT_TITLE, rows)


def frequency_view(groups: Sequence[Group], positions: Sequence[Position]) -> View:
    """Ranked residues and counts per group, one stacked row per rank.

    A group gets as many rows as its position with the most distinct
    residues; ranks a position does not have are left empty.
    """
    rows = [ruler_row(sparse_ruler(positions, 1), 'position-ruler')]
    for group_no, group in enumerate(groups):
        if group_no > 0:
            rows.append(group_space_row(len(positions) + 1))
        n_rows = max_row_count(group)
        for rank in range(n_rows):
            cells = []
            if rank == 0:
                cells.append(Cell(group.name, frozenset([GROUP_NAME]), row_span=n_rows))
            for index, pos1 in enumerate(positions):
                if pos1 not in group.pos1:
                    raise DatasetError(f"Group {group.name!r} has no frequencies for position {pos1}")
                entries = group.pos1[pos1]
                boundary = sparse_boundary(index)
                if rank < len(entries):
                    entry = entries[rank]
                    hints = residue_hints(entry.residue) | boundary | {AA_AND_COUNT}
                    cells.append(Cell(entry.residue, hints, count=entry.count))
                else:
                    cells.append(Cell('', boundary))
            rows.append(Row(cells))
    return View(FREQUENCY_TITLE, rows)


def cell_to_dict(cell: Cell) -> Dict[str, Any]:
    result: Dict[str, Any] = {'text': cell.text, 'hints': sorted(cell.hints), 'span': cell.span}
    if cell.row_span != 1:
        result['row_span'] = cell.row_span
    if cell.count is not None:
        result['count'] = cell.count
    return result


def view_to_dict(view: View) -> Dict[str, Any]:
    """Plain JSON-serializable form of a view."""
    return {
        'title': view.title,
        'rows': [{'hints': sorted(row.hints), 'cells': [cell_to_dict(cell) for cell in row.cells]}
                 for row in view.rows],
    }


def views_to_dict(views: Sequence[View]) -> List[Dict[str, Any]]:
    return [view_to_dict(view) for view in views]
