import random

import pytest

from image_to_table.grid import assign_columns, assign_grid, assign_rows
from image_to_table.structures import Fragment, LabeledFragment, Point

from conftest import box


def test_empty_input():
    assert assign_grid([]) == ([], 0)
    assert assign_rows([]) == ([], 0)
    assert assign_columns([]) == ([], 0)


def test_single_fragment():
    labeled, row_count = assign_grid([box("solo", 5, 5, 50, 20)])
    assert row_count == 1
    assert (labeled[0].row, labeled[0].column) == (1, 1)


def test_fragment_at_origin_opens_first_band():
    labeled, row_count = assign_grid([box("A", 0, 0, 10, 10)])
    assert row_count == 1
    assert (labeled[0].row, labeled[0].column) == (1, 1)


def test_negative_coordinates_still_label_from_one():
    labeled, row_count = assign_grid([box("neg", -10, -10, 0, 0)])
    assert row_count == 1
    assert (labeled[0].row, labeled[0].column) == (1, 1)


def test_same_line_different_columns():
    a, bb = box("A", 0, 0, 10, 10), box("BB", 20, 0, 40, 10)
    labeled, row_count = assign_grid([a, bb])
    assert row_count == 1
    assert [(f.text, f.row, f.column) for f in labeled] == [("A", 1, 1), ("BB", 1, 2)]


def test_stacked_fragments():
    labeled, row_count = assign_grid([box("X", 0, 0, 10, 10), box("Y", 0, 20, 10, 30)])
    assert row_count == 2
    assert [(f.text, f.row, f.column) for f in labeled] == [("X", 1, 1), ("Y", 2, 1)]


def test_identical_top_shares_row():
    labeled, row_count = assign_grid([box("right", 50, 7, 90, 17), box("left", 0, 7, 30, 17)])
    assert row_count == 1
    by_text = {f.text: f for f in labeled}
    assert by_text["left"].column == 1
    assert by_text["right"].column == 2


def test_joining_fragment_raises_row_watermark():
    # B se une a la fila de A pero llega más abajo; C solo solapa con B
    frags = [box("A", 0, 0, 10, 10), box("B", 20, 5, 30, 30), box("C", 40, 20, 50, 40)]
    labeled, row_count = assign_grid(frags)
    assert row_count == 1
    assert {f.row for f in labeled} == {1}


def test_joining_fragment_raises_column_watermark():
    frags = [box("A", 0, 0, 10, 10), box("B", 5, 20, 30, 30), box("C", 20, 40, 40, 50)]
    labeled, column_count = assign_columns(frags)
    assert column_count == 1
    assert {f.column for f in labeled} == {1}


def test_huge_finite_coordinates_do_not_overflow():
    labeled, row_count = assign_grid([box("A", 0, 0, 10, 10), box("B", 1e20, 0, 1e20 + 10, 10)])
    assert row_count == 1
    assert [(f.text, f.row, f.column) for f in labeled] == [("A", 1, 1), ("B", 1, 2)]


def test_touching_edge_joins_band():
    # top == watermark no abre fila nueva
    labeled, row_count = assign_grid([box("a", 0, 0, 10, 10), box("b", 0, 10, 10, 20)])
    assert row_count == 1
    assert labeled[1].row == 1


def test_inverted_box_does_not_retract_watermark():
    tall = box("tall", 0, 0, 10, 30)
    inverted = box("inv", 20, 5, 30, 1)
    late = box("late", 40, 20, 50, 40)
    labeled, row_count = assign_grid([tall, inverted, late])
    assert row_count == 1
    assert {f.row for f in labeled} == {1}


def test_coordinates_are_truncated():
    f = Fragment("t", Point(3.9, 7.99), Point(10.5, 20.2))
    assert (f.left, f.top, f.right, f.bottom) == (3, 7, 10, 20)


def test_non_finite_coordinates_rejected():
    with pytest.raises(ValueError):
        box("nan", float("nan"), 0, 10, 10)
    with pytest.raises(ValueError):
        box("inf", 0, 0, float("inf"), 10)


def test_empty_text_is_accepted():
    labeled, row_count = assign_grid([box("", 0, 0, 10, 10)])
    assert row_count == 1
    assert labeled[0].text == ""


def test_input_is_not_mutated_and_order_is_kept(jittered_grid):
    stale = [f.labeled().with_row(99).with_column(99) for f in jittered_grid]
    labeled, _ = assign_grid(stale)
    assert all(isinstance(f, LabeledFragment) for f in labeled)
    assert [f.fragment for f in labeled] == jittered_grid
    assert all((f.row, f.column) == (99, 99) for f in stale)
    assert all(f.row != 99 for f in labeled)


def test_rows_and_columns_partition_jittered_grid(jittered_grid):
    labeled, row_count = assign_grid(jittered_grid)
    assert row_count == 4
    assert {f.row for f in labeled} == set(range(1, 5))
    assert {f.column for f in labeled} == set(range(1, 4))
    for f in labeled:
        assert f.text.startswith(f"r{f.row}c{f.column}")


def test_no_two_fragments_share_a_cell(jittered_grid):
    labeled, _ = assign_grid(jittered_grid)
    cells = [(f.row, f.column) for f in labeled]
    assert len(cells) == len(set(cells))


def test_passes_are_independent(jittered_grid):
    rows, row_count = assign_rows(jittered_grid)
    cols, col_count = assign_columns(jittered_grid)
    combined, _ = assign_grid(jittered_grid)
    assert (row_count, col_count) == (4, 3)
    assert all(r.column == 0 for r in rows)
    assert all(c.row == 0 for c in cols)
    assert [(f.row, f.column) for f in combined] == [(r.row, c.column) for r, c in zip(rows, cols)]


def test_labels_do_not_depend_on_input_order(jittered_grid):
    expected = {f.text: (f.row, f.column) for f in assign_grid(jittered_grid)[0]}
    rng = random.Random(7)
    for _ in range(5):
        shuffled = jittered_grid[:]
        rng.shuffle(shuffled)
        got = {f.text: (f.row, f.column) for f in assign_grid(shuffled)[0]}
        assert got == expected
