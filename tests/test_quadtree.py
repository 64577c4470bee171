"""
Unit tests for the sparse quadtree board.
"""

from collections import Counter

import numpy as np
import pytest

from life_sim.quadtree import (
    BoundingSquare,
    Node,
    QuadTree,
    is_power_of_two,
    log2,
)

GLIDER = {(25, 25), (26, 25), (27, 25), (27, 24), (26, 23)}
BLOCK = {(10, 10), (11, 10), (10, 11), (11, 11)}
BLINKER_H = {(10, 10), (11, 10), (12, 10)}
BLINKER_V = {(11, 9), (11, 10), (11, 11)}


def baseline_life(pts):
    """Set-based reference step: count every neighbourhood, keep 3s and live 2s."""
    ns = Counter((x + a, y + b) for x, y in pts for a in (-1, 0, 1) for b in (-1, 0, 1))
    return {p for p in ns if ns[p] == 3 or (ns[p] == 4 and p in pts)}


# ---------------------------------------------------------------- mutation


def test_empty_board():
    board = QuadTree()
    assert board.root is None
    assert board.bounds is None
    assert board.generation == 1
    assert board.population == 0
    assert not board.contains(0, 0)
    assert not board.is_set(0, 0)
    assert list(board.populated_leafs(1)) == []
    assert board.living_neighbor_count(0, 0) == 0


def test_first_insertion_sets_unit_square():
    board = QuadTree()
    board.set(-7, 12)
    assert board.bounds == BoundingSquare(-7, 12, 1)
    assert board.is_set(-7, 12)
    assert board.population == 1


@pytest.mark.parametrize(
    "second, expected_bounds, quadrant",
    [
        ((1, 1), BoundingSquare(0, 0, 2), "nw"),
        ((-1, 0), BoundingSquare(-1, 0, 2), "ne"),
        ((0, -1), BoundingSquare(0, -1, 2), "sw"),
        ((-1, -1), BoundingSquare(-1, -1, 2), "se"),
    ],
)
def test_growth_places_old_root_opposite_new_point(second, expected_bounds, quadrant):
    board = QuadTree()
    board.set(0, 0)
    old_root = board.root
    board.set(*second)
    assert board.bounds == expected_bounds
    assert getattr(board.root, quadrant) is old_root
    assert board.is_set(0, 0)
    assert board.is_set(*second)


def test_growth_repeats_until_point_is_contained():
    board = QuadTree()
    board.set(5, 5)
    board.set(3, 3)
    # One doubling to (4, 4) size 2 is not enough for (3, 3).
    assert board.bounds == BoundingSquare(2, 2, 4)

    board.set(1000, -1000)
    assert board.contains(1000, -1000)
    assert board.contains(3, 3)
    assert is_power_of_two(board.bounds.size)
    assert board.bounds.size >= 1024


def test_bounds_depend_on_insertion_order():
    # (12, 10) first: two westward doublings anchor the square at x = 9.
    board = QuadTree.from_cells([(12, 10), (10, 10), (11, 10)])
    assert board.bounds == BoundingSquare(9, 10, 4)
    assert [(x, y) for x, y, _ in board.populated_leafs(2)] == [(9, 10), (11, 10)]

    board = QuadTree.from_cells([(10, 10), (11, 10), (12, 10)])
    assert board.bounds == BoundingSquare(10, 10, 4)
    assert [(x, y) for x, y, _ in board.populated_leafs(2)] == [(10, 10), (12, 10)]


def test_set_is_idempotent():
    board = QuadTree()
    board.set(3, 4)
    board.set(3, 4)
    board.set(3, 4)
    assert board.population == 1


def test_set_and_query_independent_of_order():
    rng = np.random.default_rng(7)
    cells = {tuple(int(v) for v in p) for p in rng.integers(-50, 50, size=(200, 2))}
    forward = QuadTree.from_cells(sorted(cells))
    backward = QuadTree.from_cells(sorted(cells, reverse=True))

    sizes = []
    board = QuadTree()
    for cell in cells:
        board.set(*cell)
        sizes.append(board.bounds.size)
        assert board.contains(*cell)
    assert sizes == sorted(sizes)
    assert all(is_power_of_two(s) for s in sizes)

    for b in (forward, backward, board):
        assert b.live_cells() == cells
        assert len(b) == len(cells)
        for x in range(-52, 52, 3):
            for y in range(-52, 52, 3):
                assert b.is_set(x, y) == ((x, y) in cells)


def test_clear_resets_board_and_generation():
    board = QuadTree.from_cells(BLINKER_H)
    board.step(3)
    assert board.generation == 4
    board.clear()
    assert board.generation == 1
    assert board.bounds is None
    assert not any(board.is_set(x, y) for x, y in BLINKER_H | BLINKER_V)
    assert board.live_cells() == frozenset()


def test_clear_restores_custom_initial_generation():
    board = QuadTree(generation=0)
    board.set(0, 0)
    board.next_generation()
    board.clear()
    assert board.generation == 0


def test_dunder_helpers():
    board = QuadTree.from_cells(BLOCK)
    assert (10, 11) in board
    assert (12, 12) not in board
    assert set(board) == BLOCK
    assert "population=4" in repr(board)


# --------------------------------------------------------------- invariants


def test_node_rejects_non_positive_size():
    with pytest.raises(AssertionError):
        Node(0)


def test_quadrant_dispatch_outside_square_is_fatal():
    node = Node(4)
    with pytest.raises(AssertionError, match="Unreachable"):
        node.set(0, 0, 10, 10)
    with pytest.raises(AssertionError):
        node.is_set(0, 0, -1, 2)


def test_log2():
    assert log2(1) == 0
    assert log2(2) == 1
    assert log2(1000) == 9
    with pytest.raises(ValueError):
        log2(0)


# -------------------------------------------------------------- enumeration


def test_unit_blocks_enumerate_live_cells_in_preorder():
    board = QuadTree.from_cells([(0, 0), (1, 0), (0, 1), (1, 1)])
    assert list(board.populated_leafs(1)) == [
        (0, 0, 1),
        (1, 0, 1),
        (0, 1, 1),
        (1, 1, 1),
    ]


def test_larger_blocks():
    board = QuadTree.from_cells(sorted(BLINKER_H))
    assert board.bounds == BoundingSquare(10, 10, 4)
    assert [(x, y) for x, y, _ in board.populated_leafs(2)] == [(10, 10), (12, 10)]
    assert list(board.populated_leafs(4)) == [(10, 10, 4)]
    # Blocks larger than the bounding square have nothing to report.
    assert list(board.populated_leafs(8)) == []


def test_visitor_receives_every_block():
    board = QuadTree.from_cells(GLIDER)
    seen = []
    board.visit_populated_leafs(lambda x, y, size: seen.append((x, y, size)), 1)
    assert {(x, y) for x, y, _ in seen} == GLIDER
    assert len(seen) == len(GLIDER)
    assert all(size == 1 for _, _, size in seen)


def test_enumeration_is_restartable():
    board = QuadTree.from_cells(GLIDER)
    assert list(board.populated_leafs(1)) == list(board.populated_leafs(1))


@pytest.mark.parametrize("block_size", [0, -1, -4, 3, 6, 1.0, "2"])
def test_invalid_block_size_rejected(block_size):
    board = QuadTree.from_cells(GLIDER)
    with pytest.raises(ValueError):
        list(board.populated_leafs(block_size))
    with pytest.raises(ValueError):
        board.visit_populated_leafs(lambda *a: None, block_size)


def test_invalid_block_size_rejected_on_empty_board():
    with pytest.raises(ValueError):
        list(QuadTree().populated_leafs(3))


def test_invalid_block_size_rejected_before_iteration():
    board = QuadTree.from_cells(GLIDER)
    with pytest.raises(ValueError):
        board.populated_leafs(3)
    with pytest.raises(ValueError):
        QuadTree().populated_leafs(0)


# -------------------------------------------------------- neighbour counting


def test_neighbor_count_isolated_and_surrounded():
    board = QuadTree()
    board.set(0, 0)
    assert board.living_neighbor_count(0, 0) == 0

    board.set_many((x, y) for x in (-1, 0, 1) for y in (-1, 0, 1))
    assert board.living_neighbor_count(0, 0) == 8
    assert board.living_neighbor_count(1, 1) == 3
    assert board.living_neighbor_count(2, 0) == 3
    assert board.living_neighbor_count(5, 5) == 0


def test_neighbor_count_uses_cache():
    board = QuadTree.from_cells(BLOCK)
    cache = {}
    assert board.living_neighbor_count(10, 10, cache) == 3
    assert cache[(10, 10)] == 3
    cache[(10, 10)] = 7
    assert board.living_neighbor_count(10, 10, cache) == 7
    assert board.living_neighbor_count(10, 10) == 3


def test_neighbor_count_fresh_after_step():
    board = QuadTree.from_cells(BLINKER_H)
    assert board.living_neighbor_count(10, 10) == 1
    board.next_generation()
    assert board.living_neighbor_count(10, 10) == 3
    assert board.living_neighbor_count(11, 10) == 2


# ---------------------------------------------------------------- stepping


def test_glider_translates_after_four_generations():
    board = QuadTree.from_cells(GLIDER)
    board.step(4)
    assert board.generation == 5
    assert board.live_cells() == {(x + 1, y + 1) for x, y in GLIDER}


def test_block_is_still_life():
    board = QuadTree.from_cells(BLOCK)
    for _ in range(6):
        board.next_generation()
        assert board.live_cells() == BLOCK


def test_blinker_oscillates():
    board = QuadTree.from_cells(BLINKER_H)
    board.next_generation()
    assert board.live_cells() == BLINKER_V
    board.next_generation()
    assert board.live_cells() == BLINKER_H
    assert board.generation == 3


def test_lonely_cells_die():
    board = QuadTree.from_cells([(0, 0), (5, 5)])
    board.next_generation()
    assert board.population == 0
    assert board.bounds is None
    assert board.generation == 2
    board.next_generation()
    assert board.generation == 3


def test_step_rejects_negative_count():
    with pytest.raises(ValueError):
        QuadTree().step(-1)


def test_step_replaces_tree():
    board = QuadTree.from_cells(BLINKER_H)
    old_root = board.root
    board.next_generation()
    assert board.root is not old_root


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_matches_reference_stepper_on_random_soup(seed):
    rng = np.random.default_rng(seed)
    cells = {tuple(int(v) for v in p) for p in rng.integers(-8, 8, size=(70, 2))}
    board = QuadTree.from_cells(cells)
    expected = set(cells)
    for _ in range(12):
        board.next_generation()
        expected = baseline_life(expected)
        assert board.live_cells() == expected
        for x, y in expected:
            assert board.contains(x, y)
