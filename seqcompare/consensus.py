"""Master sequence resolution.

The master of a group is the first member that carries the most frequent
residue at every tabulated position of the group's frequency table.
"""

import logging
from typing import List, Optional

from seqcompare.frequency import most_frequent
from seqcompare.types import DatasetError, Group, SequenceRecord, to_pos0


def matches_most_frequent(group: Group, record: SequenceRecord) -> bool:
    """True if record has the most frequent residue at every tabulated position."""
    for pos1 in group.pos1:
        pos0 = to_pos0(pos1)
        if pos0 >= len(record.seq):
            raise DatasetError(f"Sequence {record.id!r} of group {group.name!r} is shorter "
                               f"than tabulated position {pos1}")
        if most_frequent(group, pos1).residue != record.seq[pos0]:
            return False
    return True


def find_master(group: Group) -> Optional[int]:
    """Index of the first member matching the most frequent residues, None if there is none."""
    for index, record in enumerate(group.seq):
        if matches_most_frequent(group, record):
            return index
    return None


def move_to_front(members: List[SequenceRecord], index: int) -> List[SequenceRecord]:
    """New list with members[index] first, others keeping their relative order."""
    return [members[index]] + members[:index] + members[index + 1:]


def rearrange(group: Group) -> int:
    """
    Put the group's master sequence first.

    Falls back to the current first member when no member matches the most
    frequent residues at all positions.

    Returns:
        Index the master had before the reorder
    """
    master_index = find_master(group)
    if master_index is None:
        logging.warning(f"master not found in group {group.name!r}, keeping first member")
        return 0
    if master_index > 0:
        logging.debug(f"Moving master {group.seq[master_index].id} of group {group.name!r} "
                      f"from index {master_index} to the front")
        group.seq = move_to_front(group.seq, master_index)
    return master_index
