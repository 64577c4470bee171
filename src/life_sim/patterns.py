"""Named seed patterns, written as ASCII rows (``#`` alive, ``.`` dead)."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Sequence, Tuple

from .quadtree import Cell, QuadTree

ALIVE_CHARS = "#O*"


def parse_pattern(rows: Sequence[str], alive: str = ALIVE_CHARS) -> FrozenSet[Cell]:
    """
    Converts ASCII rows into a set of live (x, y) cells.
    Row index is y (growing downwards), column index is x.
    """
    return frozenset(
        (x, y)
        for y, row in enumerate(rows)
        for x, char in enumerate(row)
        if char in alive
    )


_PATTERN_ROWS: Dict[str, Tuple[str, ...]] = {
    "block": (
        "##",
        "##",
    ),
    "beehive": (
        ".##.",
        "#..#",
        ".##.",
    ),
    "blinker": (
        "###",
    ),
    "toad": (
        ".###",
        "###.",
    ),
    "glider": (
        ".#.",
        "..#",
        "###",
    ),
    "lwss": (
        ".#..#",
        "#....",
        "#...#",
        "####.",
    ),
    "r_pentomino": (
        ".##",
        "##.",
        ".#.",
    ),
    # Methuselah used as the demo seed: 5206 generations before it settles.
    "acorn": (
        ".#.....",
        "...#...",
        "##..###",
    ),
}

PATTERNS: Dict[str, FrozenSet[Cell]] = {
    name: parse_pattern(rows) for name, rows in _PATTERN_ROWS.items()
}


def get_pattern_names() -> list[str]:
    return sorted(PATTERNS)


def get_pattern(name: str, offset: Tuple[int, int] = (0, 0)) -> FrozenSet[Cell]:
    """Returns the named pattern translated by `offset`."""
    try:
        cells = PATTERNS[name]
    except KeyError:
        raise KeyError(
            f"Unknown pattern {name!r}, expected one of {get_pattern_names()}"
        ) from None
    dx, dy = offset
    return frozenset((x + dx, y + dy) for x, y in cells)


def seed_board(board: QuadTree, cells: Iterable[Cell]) -> QuadTree:
    """Inserts `cells` in sorted order so the bounding square is reproducible."""
    board.set_many(sorted(cells))
    return board


__all__ = [
    "ALIVE_CHARS",
    "PATTERNS",
    "parse_pattern",
    "get_pattern",
    "get_pattern_names",
    "seed_board",
]
