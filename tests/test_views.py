#!/usr/bin/env python3
"""
Tests for the comparison views and the rendering pipeline.

Tests focus on:
- Row order, group spacers and master placeholders in the sequence views
- Cross-group diffing in the most frequent view
- Stacked rank rows in the frequency view
- Fatal dataset failures producing no views
"""

import json

import pytest

from seqcompare.compare import compare_sequences
from seqcompare.config import RulerConfig
from seqcompare.diff import MATCH_PLACEHOLDER as DOT
from seqcompare.ruler import MID_BOUNDARY, TICK_BOUNDARY
from seqcompare.types import Dataset, DatasetError, FrequencyEntry, Group, Position, SequenceRecord
from seqcompare.views import (
    DIFF_MATCH,
    GROUP_NAME,
    GROUP_SPACE,
    frequency_view,
    full_sequences_view,
    view_to_dict,
    views_to_dict,
)


def entries(*pairs):
    return [FrequencyEntry(aa, count) for aa, count in pairs]


def single_group_dataset():
    return Dataset(
        groups=[Group(
            name="A",
            seq=[SequenceRecord("s1", "ACD"), SequenceRecord("s2", "ACE")],
            pos1={
                Position(1): entries(("A", 2)),
                Position(2): entries(("C", 2)),
                Position(3): entries(("D", 1), ("E", 1)),
            },
        )],
        pos1=[Position(3)],
    )


def two_group_dataset():
    return Dataset(
        groups=[
            Group(
                name="A",
                seq=[SequenceRecord("s2", "ACE"), SequenceRecord("s1", "ACD"), SequenceRecord("s3", "ACD")],
                pos1={
                    Position(1): entries(("A", 3)),
                    Position(3): entries(("D", 2), ("E", 1)),
                },
            ),
            Group(
                name="B",
                seq=[SequenceRecord("t1", "ACE"), SequenceRecord("t2", "GCD")],
                pos1={
                    Position(1): entries(("A", 1), ("G", 1)),
                    Position(3): entries(("E", 1), ("D", 1)),
                },
            ),
        ],
        pos1=[Position(1), Position(3)],
    )


def texts(row):
    return [cell.text for cell in row.cells]


def test_end_to_end_single_group():
    dataset = single_group_dataset()
    views = compare_sequences(dataset, RulerConfig(max_position=21))

    full = views.full_sequences
    assert full.title == "Full sequences"
    assert len(full.rows) == 4
    assert full.rows[0] == full.rows[-1]
    assert texts(full.rows[1]) == ["A", "s1", "A", "C", "D"]
    assert texts(full.rows[2]) == ["s2", DOT, DOT, "E"]
    assert full.rows[1].cells[0].row_span == 2
    assert DIFF_MATCH in full.rows[2].cells[1].hints
    assert DIFF_MATCH not in full.rows[2].cells[3].hints


def test_master_moved_first_before_views():
    dataset = two_group_dataset()
    views = compare_sequences(dataset)

    assert [record.id for record in dataset.groups[0].seq] == ["s1", "s2", "s3"]
    # other groups keep their order
    assert [record.id for record in dataset.groups[1].seq] == ["t1", "t2"]

    rows = views.full_sequences.rows
    assert texts(rows[1])[:2] == ["A", "s1"]
    assert texts(rows[2]) == ["s2", DOT, DOT, "E"]
    assert texts(rows[3]) == ["s3", DOT, DOT, DOT]


def test_spacer_before_groups_not_led_by_master():
    views = compare_sequences(two_group_dataset())
    rows = views.full_sequences.rows

    assert len(rows) == 8
    assert rows[4].hints == {GROUP_SPACE}
    assert rows[4].cells[0].span == 5
    assert texts(rows[5]) == ["B", "t1", DOT, DOT, "E"]
    assert texts(rows[6]) == ["t2", "G", DOT, DOT]


def test_full_sequence_cells_carry_ruler_separators():
    group = Group("A", [SequenceRecord("s1", "ACDEFGHIKLM")], {})
    master = group.seq[0]
    view = full_sequences_view([group], master, RulerConfig(max_position=20))
    residues = view.rows[1].cells[2:]

    assert TICK_BOUNDARY in residues[9].hints
    assert MID_BOUNDARY in residues[4].hints
    assert "aaL" in residues[9].hints


def test_duplicate_master_id_in_other_group_is_not_diffed():
    dataset = two_group_dataset()
    dataset.groups[1].seq.insert(0, SequenceRecord("s1", "GCE"))
    views = compare_sequences(dataset)
    rows = views.full_sequences.rows

    # no spacer: the group starts with a record carrying the master id
    assert texts(rows[4]) == ["B", "s1", "G", "C", "E"]


def test_positions_with_diversity_view():
    views = compare_sequences(two_group_dataset())
    view = views.diversity

    assert view.title == "Positions with diversity"
    assert texts(view.rows[0]) == ["", "1", "3"]
    assert view.rows[0].cells[0].span == 2
    assert texts(view.rows[1]) == ["A", "s1", "A", "D"]
    assert texts(view.rows[2]) == ["s2", DOT, "E"]
    assert view.rows[4].hints == {GROUP_SPACE}
    assert view.rows[4].cells[0].span == 4
    assert texts(view.rows[6]) == ["t2", "G", DOT]
    assert view.rows[-1] == view.rows[0]


def test_most_frequent_view_diffs_against_first_group():
    views = compare_sequences(two_group_dataset())
    view = views.most_frequent

    assert view.title == "Most frequent per group"
    assert len(view.rows) == 3
    assert texts(view.rows[0]) == ["", "1", "3"]
    assert view.rows[0].cells[0].span == 1
    assert texts(view.rows[1]) == ["A", "A", "D"]
    assert texts(view.rows[2]) == ["B", DOT, "E"]
    assert GROUP_NAME in view.rows[2].cells[0].hints


def test_frequency_view_stacks_ranked_rows():
    views = compare_sequences(two_group_dataset())
    view = views.frequency

    assert view.title == "Frequency per group"
    assert len(view.rows) == 6
    first, second = view.rows[1], view.rows[2]
    assert texts(first) == ["A", "A", "D"]
    assert first.cells[0].row_span == 2
    assert [cell.count for cell in first.cells[1:]] == [3, 2]
    # position 1 has a single residue in group A: empty cell below it
    assert texts(second) == ["", "E"]
    assert second.cells[0].count is None
    assert view.rows[3].hints == {GROUP_SPACE}
    assert view.rows[3].cells[0].span == 3
    assert texts(view.rows[4]) == ["B", "A", "E"]
    assert texts(view.rows[5]) == ["G", "D"]


def test_frequency_view_uses_all_tabulated_positions_for_row_count():
    group = Group("A", [], {
        Position(1): entries(("A", 2)),
        Position(2): entries(("C", 1), ("D", 1), ("E", 1)),
    })
    view = frequency_view([group], [Position(1)])

    assert len(view.rows) == 4
    assert texts(view.rows[3]) == [""]


def test_missing_group_frequencies_is_fatal():
    dataset = two_group_dataset()
    del dataset.groups[1].pos1[Position(3)]

    with pytest.raises(DatasetError):
        compare_sequences(dataset)


def test_empty_dataset_is_fatal():
    with pytest.raises(DatasetError):
        compare_sequences(Dataset([], []))
    with pytest.raises(DatasetError):
        compare_sequences(Dataset([Group("A")], []))


def test_views_serialize_to_json():
    views = compare_sequences(two_group_dataset())
    data = views_to_dict(views)

    assert [view["title"] for view in data] == [
        "Most frequent per group", "Frequency per group", "Positions with diversity", "Full sequences"]
    json.dumps(data)
    frequency = view_to_dict(views.frequency)
    assert frequency["rows"][1]["cells"][0]["row_span"] == 2
    assert frequency["rows"][1]["cells"][1]["count"] == 3
