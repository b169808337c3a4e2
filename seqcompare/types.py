"""Data structures shared by the seqcompare modules."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, NamedTuple, NewType, Optional

# 1-based alignment position as used by frequency tables and rulers
Position = NewType('Position', int)

# Single character residue code (amino acid or nucleotide)
Residue = NewType('Residue', str)


class DatasetError(ValueError):
    """Fatal precondition failure: the dataset cannot be rendered."""


def residue(value: str) -> Residue:
    """Check that value is a single character residue code."""
    if not isinstance(value, str) or len(value) != 1:
        raise DatasetError(f"Residue must be a single character, got {value!r}")
    return Residue(value)


def position(value: int) -> Position:
    """Check that value is a valid 1-based position."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise DatasetError(f"Position must be an integer >= 1, got {value!r}")
    return Position(value)


def to_pos0(pos1: Position) -> int:
    """Convert a 1-based position to a 0-based sequence index."""
    return pos1 - 1


def to_pos1(pos0: int) -> Position:
    """Convert a 0-based sequence index to a 1-based position."""
    return Position(pos0 + 1)


class SequenceRecord(NamedTuple):
    """An aligned sequence and its identifier."""
    id: str
    seq: str


class FrequencyEntry(NamedTuple):
    """Number of group members carrying a residue at a position."""
    residue: Residue
    count: int


# position -> entries ranked by descending count
FrequencyTable = Dict[Position, List[FrequencyEntry]]


@dataclass
class Group:
    """Named set of aligned sequences with its per-position residue frequencies.

    The order of seq is display order. After consensus resolution seq[0]
    is the group's master record.
    """
    name: str
    seq: List[SequenceRecord] = field(default_factory=list)
    pos1: FrequencyTable = field(default_factory=dict)


@dataclass
class Dataset:
    """Groups to compare and the positions where they show diversity.

    pos1 is kept in the order supplied, it is not necessarily sorted.
    """
    groups: List[Group] = field(default_factory=list)
    pos1: List[Position] = field(default_factory=list)

    def master_record(self) -> SequenceRecord:
        """Dataset-wide reference: first member of the first group."""
        if not self.groups:
            raise DatasetError("Dataset has no groups")
        if not self.groups[0].seq:
            raise DatasetError(f"Group {self.groups[0].name!r} has no sequences")
        return self.groups[0].seq[0]

    def longest_sequence(self) -> int:
        return max((len(record.seq) for group in self.groups for record in group.seq), default=0)


class DiffCell(NamedTuple):
    """Residue at a column and whether it is identical to the master sequence."""
    residue: Residue
    is_master_match: bool
    column_position0: int


class RulerColumn(NamedTuple):
    """One column of a coordinate ruler."""
    label: str
    is_tick_boundary: bool
    is_mid_boundary: bool
    span: int = 1


class Ruler(NamedTuple):
    """Ruler columns preceded by initial_columns blank leading columns."""
    initial_columns: int
    columns: List[RulerColumn]


class Cell(NamedTuple):
    """Cell handed to the rendering layer.

    hints are symbolic tags (e.g. "tick-boundary", "diff-match"); the
    renderer decides how each one looks.
    """
    text: str
    hints: FrozenSet[str] = frozenset()
    span: int = 1
    row_span: int = 1
    count: Optional[int] = None


class Row(NamedTuple):
    cells: List[Cell]
    hints: FrozenSet[str] = frozenset()


class View(NamedTuple):
    title: str
    rows: List[Row]
