"""Per-position comparison of a sequence against the master sequence."""

from typing import List, Sequence

from seqcompare.types import DatasetError, DiffCell, Position, Residue, SequenceRecord, to_pos0

# Shown in place of a residue identical to the master
MATCH_PLACEHOLDER = '·'


def is_master_match(aa: str, reference: str, pos0: int) -> bool:
    """Residue equals the reference at pos0; a too short reference never matches."""
    return pos0 < len(reference) and aa == reference[pos0]


def reference_for(record: SequenceRecord, master: SequenceRecord) -> str:
    """Diff baseline for record: empty for the master itself (compared by id)."""
    return '' if record.id == master.id else master.seq


def project(sequence: str, reference: str) -> List[DiffCell]:
    """Mark every residue of sequence as matching the reference or not.

    An empty reference matches nothing, so the sequence is shown in full.
    """
    return [DiffCell(Residue(aa), is_master_match(aa, reference, pos0), pos0)
            for pos0, aa in enumerate(sequence)]


def project_positions(record: SequenceRecord, reference: str, positions: Sequence[Position]) -> List[DiffCell]:
    """Diff cells for the listed 1-based positions only, in list order."""
    cells = []
    for pos1 in positions:
        pos0 = to_pos0(pos1)
        if pos0 >= len(record.seq):
            raise DatasetError(f"Sequence {record.id!r} has {len(record.seq)} residues, "
                               f"position {pos1} requested")
        aa = record.seq[pos0]
        cells.append(DiffCell(Residue(aa), is_master_match(aa, reference, pos0), pos0))
    return cells


def display_text(cell: DiffCell) -> str:
    return MATCH_PLACEHOLDER if cell.is_master_match else cell.residue
