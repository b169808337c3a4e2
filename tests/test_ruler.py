#!/usr/bin/env python3
"""
Tests for coordinate rulers and ruler configuration.

Tests focus on:
- Label placement and multi-digit label spans of the dense ruler
- Separator placement of the sparse ruler
- Tick pair validation
"""

import argparse

import pytest

from seqcompare.config import RulerConfig, parse_ticks
from seqcompare.ruler import (
    MID_BOUNDARY,
    TICK_BOUNDARY,
    dense_boundary,
    dense_ruler,
    ruler_row,
    sparse_boundary,
    sparse_ruler,
)
from seqcompare.types import Dataset, Group, SequenceRecord


def column_positions(ruler):
    """First position covered by each column."""
    positions = []
    pos1 = 1
    for column in ruler.columns:
        positions.append(pos1)
        pos1 += column.span
    return positions


def test_dense_ruler_ticks_one_six():
    """Labels at 1, 11, 21 with spans matching their digit count."""
    ruler = dense_ruler(21, 2, boundary_tick=1, mid_tick=6)
    positions = column_positions(ruler)

    ticks = [(pos1, column) for pos1, column in zip(positions, ruler.columns) if column.is_tick_boundary]
    assert [pos1 for pos1, _ in ticks] == [1, 11, 21]
    assert [column.label for _, column in ticks] == ["1", "11", "21"]
    assert [column.span for _, column in ticks] == [1, 2, 2]

    mids = [pos1 for pos1, column in zip(positions, ruler.columns) if column.is_mid_boundary]
    assert mids == [6, 16]
    assert all(column.label == "" for column in ruler.columns if column.is_mid_boundary)


def test_dense_ruler_skips_positions_covered_by_label():
    ruler = dense_ruler(21, 2, boundary_tick=1, mid_tick=6)
    positions = column_positions(ruler)

    assert 12 not in positions
    assert 13 in positions
    assert len(ruler.columns) == 20
    assert ruler.initial_columns == 2


def test_dense_ruler_default_ticks():
    ruler = dense_ruler(100, 2)
    labels = [column.label for column in ruler.columns if column.is_tick_boundary]
    assert labels == ["10", "20", "30", "40", "50", "60", "70", "80", "90", "100"]
    first = ruler.columns[0]
    assert first.label == ""
    assert not first.is_tick_boundary and not first.is_mid_boundary
    assert ruler.columns[4].is_mid_boundary


def test_dense_ruler_filler():
    ruler = dense_ruler(12, 0, filler=".")
    assert ruler.columns[0].label == "."
    assert [column.label for column in ruler.columns if column.is_tick_boundary] == ["10"]


def test_sparse_ruler_short_list_has_no_separators():
    ruler = sparse_ruler([145, 156, 190], 1)

    assert [column.label for column in ruler.columns] == ["145", "156", "190"]
    assert not any(column.is_mid_boundary or column.is_tick_boundary for column in ruler.columns)
    assert all(column.span == 1 for column in ruler.columns)


def test_sparse_ruler_separators_every_fifth_column():
    positions = [3, 7, 12, 40, 41, 42, 90, 91, 100, 120, 131, 200]
    ruler = sparse_ruler(positions, 2)

    separated = [index for index, column in enumerate(ruler.columns) if column.is_mid_boundary]
    assert separated == [5, 10]
    # list order is kept, not re-sorted
    assert sparse_ruler([30, 10, 20], 1).columns[0].label == "30"


def test_boundary_helpers():
    assert dense_boundary(10) == {TICK_BOUNDARY}
    assert dense_boundary(15) == {MID_BOUNDARY}
    assert dense_boundary(11, 1, 6) == {TICK_BOUNDARY}
    assert dense_boundary(3) == frozenset()
    assert sparse_boundary(0) == frozenset()
    assert sparse_boundary(20) == {MID_BOUNDARY}


def test_ruler_row_leading_blank_cell():
    row = ruler_row(sparse_ruler([145, 156], 2), "position-ruler")

    assert row.hints == {"position-ruler"}
    assert row.cells[0].text == ""
    assert row.cells[0].span == 2
    assert [cell.text for cell in row.cells[1:]] == ["145", "156"]


def test_ruler_config_rejects_ticks_not_five_apart():
    with pytest.raises(ValueError):
        RulerConfig(boundary_tick=0, mid_tick=4)
    with pytest.raises(ValueError):
        RulerConfig(boundary_tick=10, mid_tick=5)
    with pytest.raises(ValueError):
        RulerConfig(max_position=0)
    # 5 apart either way round
    assert RulerConfig(boundary_tick=6, mid_tick=1).mid_tick == 1


def test_ruler_config_from_args():
    args = argparse.Namespace(max_position=300, ruler_ticks="1,6", filler="")
    config = RulerConfig.from_args(args)

    assert config.max_position == 300
    assert (config.boundary_tick, config.mid_tick) == (1, 6)
    with pytest.raises(ValueError):
        parse_ticks("1")


def test_ruler_config_warns_when_sequences_longer(caplog):
    dataset = Dataset([Group("A", [SequenceRecord("s1", "A" * 30)], {})], [])

    assert RulerConfig(max_position=30).ensure_covers(dataset)
    with caplog.at_level("WARNING"):
        assert not RulerConfig(max_position=20).ensure_covers(dataset)
    assert "longest sequence" in caplog.text
