"""
Sparse quadtree board for Conway's Game of Life on an unbounded integer grid.

Key ideas:
1.  **Bounding square:** every live cell lies inside a power-of-two square
    anchored at an integer top-left corner. The square doubles towards a new
    point whenever an insertion lands outside of it.
2.  **Sparsity by omission:** a node at size 1 *is* a live cell. Internal
    nodes own up to four quadrants (nw, ne, sw, se); a missing quadrant is
    uniformly dead, so dead leaves are never materialised.
3.  **Live-cell driven stepping:** the next generation is built only from the
    currently live cells and their Moore neighbourhoods. Any dead cell further
    away has no live neighbour and cannot be born.

Coordinates grow to the right (x) and downwards (y) and may be negative.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

Cell = Tuple[int, int]
NeighborCache = Dict[Cell, int]

# Moore neighbourhood, row by row from the north-west corner.
NEIGHBOR_OFFSETS: Tuple[Cell, ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)

# Standard 2-state Life thresholds.
SURVIVAL_COUNTS = frozenset((2, 3))
BIRTH_COUNT = 3

INITIAL_GENERATION = 1


###############################################################################
# Small integer helpers
###############################################################################


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def log2(value: int) -> int:
    """Floor of log2 for a positive integer."""
    if value <= 0:
        raise ValueError(f"value out of valid range: {value}")
    return value.bit_length() - 1


def _check_block_size(block_size: int) -> None:
    if not isinstance(block_size, numbers.Integral) or not is_power_of_two(int(block_size)):
        raise ValueError(
            f"block_size must be a positive power of two, got {block_size!r}"
        )


@dataclass(frozen=True)
class BoundingSquare:
    """Square ``[x_top_left, x_top_left + size) x [y_top_left, y_top_left + size)``."""

    x_top_left: int
    y_top_left: int
    size: int

    def contains(self, x: int, y: int) -> bool:
        return (
            self.x_top_left <= x < self.x_top_left + self.size
            and self.y_top_left <= y < self.y_top_left + self.size
        )


###############################################################################
# Node tree
###############################################################################


def _locate(size: int, x_top_left: int, y_top_left: int, x: int, y: int) -> Tuple[str, int, int]:
    """
    Dispatches (x, y) to one of the four quadrants of a square of side `size`.

    Returns the quadrant name and the absolute top-left corner of that quadrant.
    The four quadrants partition the square, so a point that matches none of
    them was never inside the square and the tree is inconsistent.
    """
    half = size // 2
    x_mid = x_top_left + half
    y_mid = y_top_left + half

    if x_top_left <= x < x_mid:
        west = True
    elif x_mid <= x < x_top_left + size:
        west = False
    else:
        raise AssertionError(
            f"Unreachable code reached: ({x_top_left},{y_top_left}),size={size} "
            f"cannot contain ({x},{y})"
        )

    if y_top_left <= y < y_mid:
        north = True
    elif y_mid <= y < y_top_left + size:
        north = False
    else:
        raise AssertionError(
            f"Unreachable code reached: ({x_top_left},{y_top_left}),size={size} "
            f"cannot contain ({x},{y})"
        )

    if north:
        return ("nw", x_top_left, y_top_left) if west else ("ne", x_mid, y_top_left)
    return ("sw", x_top_left, y_mid) if west else ("se", x_mid, y_mid)


class Node:
    """
    One square of the tree. A node of size 1 is a live cell; larger nodes
    own up to four children of half their size, ``None`` meaning all dead.
    """

    __slots__ = ("size", "nw", "ne", "sw", "se")

    def __init__(
        self,
        size: int,
        nw: Optional[Node] = None,
        ne: Optional[Node] = None,
        sw: Optional[Node] = None,
        se: Optional[Node] = None,
    ) -> None:
        assert size >= 1, f"Size must be >= 1, was: {size}"
        self.size = size
        self.nw = nw
        self.ne = ne
        self.sw = sw
        self.se = se

    def __repr__(self) -> str:
        return f"Node(size={self.size})"

    def children(self) -> Tuple[Optional[Node], ...]:
        return (self.nw, self.ne, self.sw, self.se)

    def is_populated(self) -> bool:
        """True if any leaf exists below (or at) this node."""
        if self.size == 1:
            return True
        return any(child is not None and child.is_populated() for child in self.children())

    def is_set(self, x_top_left: int, y_top_left: int, x: int, y: int) -> bool:
        node = self
        while node.size > 1:
            name, x_top_left, y_top_left = _locate(node.size, x_top_left, y_top_left, x, y)
            node = getattr(node, name)
            if node is None:
                return False
        return True

    def set(self, x_top_left: int, y_top_left: int, x: int, y: int) -> None:
        # Reaching size 1 is the insertion itself.
        node = self
        while node.size > 1:
            name, x_top_left, y_top_left = _locate(node.size, x_top_left, y_top_left, x, y)
            child = getattr(node, name)
            if child is None:
                child = Node(node.size // 2)
                setattr(node, name, child)
            node = child

    def leaf_count(self) -> int:
        if self.size == 1:
            return 1
        return sum(child.leaf_count() for child in self.children() if child is not None)


###############################################################################
# Board
###############################################################################


class QuadTree:
    """
    The board: an optional root node, the bounding square it covers and a
    generation counter.

    The root is replaced wholesale by :meth:`next_generation`; nothing is
    shared between the old and the new tree.
    """

    def __init__(self, generation: int = INITIAL_GENERATION) -> None:
        self._initial_generation = generation
        self._generation = generation
        self.root: Optional[Node] = None
        self._x_top_left = 0
        self._y_top_left = 0

    @classmethod
    def from_cells(cls, cells: Iterable[Cell], generation: int = INITIAL_GENERATION) -> QuadTree:
        board = cls(generation=generation)
        board.set_many(cells)
        return board

    # ------------------------------------------------------------------ state
    @property
    def generation(self) -> int:
        return self._generation

    @property
    def bounds(self) -> Optional[BoundingSquare]:
        """The bounding square, or ``None`` for an empty board."""
        if self.root is None:
            return None
        return BoundingSquare(self._x_top_left, self._y_top_left, self.root.size)

    @property
    def population(self) -> int:
        return 0 if self.root is None else self.root.leaf_count()

    def __len__(self) -> int:
        return self.population

    def __iter__(self) -> Iterator[Cell]:
        for x, y, _ in self.populated_leafs(1):
            yield x, y

    def __contains__(self, cell: Cell) -> bool:
        x, y = cell
        return self.is_set(x, y)

    def __repr__(self) -> str:
        return (
            f"QuadTree(generation={self._generation}, bounds={self.bounds}, "
            f"population={self.population})"
        )

    def live_cells(self) -> frozenset:
        return frozenset(self)

    # --------------------------------------------------------------- mutation
    def clear(self) -> None:
        """Discards every cell and resets the generation counter."""
        self.root = None
        self._x_top_left = 0
        self._y_top_left = 0
        self._generation = self._initial_generation

    def set(self, x: int, y: int) -> None:
        """Marks (x, y) alive, growing the bounding square as needed."""
        if self.root is None:
            self._x_top_left = x
            self._y_top_left = y
            self.root = Node(1)
            return

        # One doubling is not enough for far-away points.
        while not self.contains(x, y):
            self._grow_towards(x, y)
        self.root.set(self._x_top_left, self._y_top_left, x, y)

    def set_many(self, cells: Iterable[Cell]) -> None:
        for x, y in cells:
            self.set(x, y)

    def _grow_towards(self, x: int, y: int) -> None:
        """
        Doubles the bounding square in the direction of (x, y). The old root
        becomes the quadrant of the new root that faces away from the point.
        """
        old = self.root
        size = old.size
        if x < self._x_top_left:
            self._x_top_left -= size
            if y < self._y_top_left:
                self._y_top_left -= size
                self.root = Node(size * 2, se=old)
            else:
                self.root = Node(size * 2, ne=old)
        else:
            if y < self._y_top_left:
                self._y_top_left -= size
                self.root = Node(size * 2, sw=old)
            else:
                self.root = Node(size * 2, nw=old)

    # ---------------------------------------------------------------- queries
    def contains(self, x: int, y: int) -> bool:
        if self.root is None:
            return False
        return (
            self._x_top_left <= x < self._x_top_left + self.root.size
            and self._y_top_left <= y < self._y_top_left + self.root.size
        )

    def is_set(self, x: int, y: int) -> bool:
        """True if (x, y) is alive. Points outside the bounding square are dead."""
        if not self.contains(x, y):
            return False
        return self.root.is_set(self._x_top_left, self._y_top_left, x, y)

    def living_neighbor_count(self, x: int, y: int, cache: Optional[NeighborCache] = None) -> int:
        """
        Number of live cells among the 8 neighbours of (x, y).

        `cache` memoises counts for the duration of one generation step; it
        must not outlive the tree it was filled from. Without a cache the
        count always reflects the current tree.
        """
        if cache is not None:
            count = cache.get((x, y))
            if count is not None:
                return count

        count = 0
        for dx, dy in NEIGHBOR_OFFSETS:
            if self.is_set(x + dx, y + dy):
                count += 1

        if cache is not None:
            cache[(x, y)] = count
        return count

    # ------------------------------------------------------------ enumeration
    def populated_leafs(self, block_size: int = 1) -> Iterator[Tuple[int, int, int]]:
        """
        Returns an iterator of ``(x, y, block_size)`` for every populated block
        of the given size, in pre-order (nw, ne, sw, se). ``block_size == 1``
        yields exactly the live cells. Blocks larger than the bounding square
        yield nothing. An invalid `block_size` raises ValueError immediately.
        """
        _check_block_size(block_size)
        return self._iter_blocks(block_size)

    def _iter_blocks(self, block_size: int) -> Iterator[Tuple[int, int, int]]:
        if self.root is None:
            return

        stack = [(self.root, self._x_top_left, self._y_top_left)]
        while stack:
            node, x0, y0 = stack.pop()
            if node.size == block_size:
                if node.is_populated():
                    yield x0, y0, block_size
                continue
            if node.size < block_size:
                continue

            half = node.size // 2
            # Reverse push order so nw pops first.
            if node.se is not None:
                stack.append((node.se, x0 + half, y0 + half))
            if node.sw is not None:
                stack.append((node.sw, x0, y0 + half))
            if node.ne is not None:
                stack.append((node.ne, x0 + half, y0))
            if node.nw is not None:
                stack.append((node.nw, x0, y0))

    def visit_populated_leafs(self, visitor: Callable[[int, int, int], None], block_size: int = 1) -> None:
        """Calls ``visitor(x, y, block_size)`` for every populated block."""
        for x, y, size in self.populated_leafs(block_size):
            visitor(x, y, size)

    # --------------------------------------------------------------- stepping
    def next_generation(self) -> None:
        """
        Advances the board by exactly one generation.

        Only live cells and their dead neighbours are examined. The successor
        tree is built from scratch and then swapped in together with its
        bounding square.
        """
        cache: NeighborCache = {}
        successor = QuadTree(generation=self._generation + 1)

        for x, y, _ in self.populated_leafs(1):
            if self.living_neighbor_count(x, y, cache) in SURVIVAL_COUNTS:
                successor.set(x, y)

            for dx, dy in NEIGHBOR_OFFSETS:
                nx, ny = x + dx, y + dy
                if self.is_set(nx, ny):
                    continue
                if self.living_neighbor_count(nx, ny, cache) == BIRTH_COUNT:
                    successor.set(nx, ny)

        self.root = successor.root
        self._x_top_left = successor._x_top_left
        self._y_top_left = successor._y_top_left
        self._generation += 1

    def step(self, generations: int = 1) -> None:
        if generations < 0:
            raise ValueError(f"generations must be >= 0, got {generations}")
        for _ in range(generations):
            self.next_generation()


__all__ = [
    "BoundingSquare",
    "Node",
    "QuadTree",
    "NEIGHBOR_OFFSETS",
    "INITIAL_GENERATION",
    "is_power_of_two",
    "log2",
]
