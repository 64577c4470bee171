"""
Game of Life simulation manager.

Wraps a :class:`~life_sim.quadtree.QuadTree` board with a seed pattern, a
generation budget and a few observables (population history, snapshots)
and exports the board as numpy arrays for plotting or analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from . import utils
from .patterns import get_pattern, get_pattern_names
from .quadtree import INITIAL_GENERATION, QuadTree


# Raster size cap for occupancy_grid: 4096 x 4096 pixels.
MAX_PIXELS = 1 << 24


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass
class LifeConfig:
    """Seed and run settings for a simulation."""
    pattern: str = "acorn"
    offset: Tuple[int, int] = (25, 23)
    generations: int = 100
    initial_generation: int = INITIAL_GENERATION
    render_level: int = 0  # block size is 1 << render_level
    verbose: bool = False
    progress_every: int = 10

    def __post_init__(self) -> None:
        try:
            self.offset = tuple(int(v) for v in self.offset)
        except (TypeError, ValueError):
            raise ValueError(f"offset must be a pair of integers, got {self.offset!r}") from None
        if len(self.offset) != 2:
            raise ValueError(f"offset must have two components, got {self.offset}")
        for name in ("generations", "initial_generation", "render_level", "progress_every"):
            setattr(self, name, _as_int(name, getattr(self, name)))
        if self.pattern not in get_pattern_names():
            raise ValueError(
                f"Unknown pattern '{self.pattern}', expected one of {get_pattern_names()}"
            )
        if self.generations < 0:
            raise ValueError("generations must be >= 0")
        if self.render_level < 0:
            raise ValueError("render_level must be >= 0")
        if self.progress_every < 1:
            raise ValueError("progress_every must be >= 1")

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> LifeConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**params)


class LifeSimulator:
    """
    The Manager Class.

    Responsibilities:
    1. Own the board and seed it from the configured pattern.
    2. Advance generations and record observables.
    3. Export live cells and block rasters as numpy arrays.
    """

    def __init__(self, config: LifeConfig | None = None) -> None:
        self.config = config or LifeConfig()
        self.board = QuadTree(generation=self.config.initial_generation)
        self.population_history: list[int] = []
        self.reset()

    # ------------------------------------------------------------------ setup
    def reset(self) -> None:
        """Clears the board and re-seeds the configured pattern."""
        self.board.clear()
        # Growth depends on insertion order; sorting keeps the bounding square reproducible.
        self.board.set_many(sorted(get_pattern(self.config.pattern, self.config.offset)))
        self.population_history = [self.board.population]

    def clear(self) -> None:
        self.board.clear()
        self.population_history = [0]

    def set_cell(self, x: int, y: int) -> None:
        self.board.set(x, y)
        self.population_history[-1] = self.board.population

    # ----------------------------------------------------------------- public
    @property
    def generation(self) -> int:
        return self.board.generation

    def run(self, generations: Optional[int] = None) -> None:
        """Advances `generations` steps (default: the configured budget)."""
        if generations is None:
            generations = self.config.generations
        if generations < 0:
            raise ValueError(f"generations must be >= 0, got {generations}")

        if self.config.verbose:
            print(f"Running Life: pattern={self.config.pattern}, "
                  f"generations={generations}, start={self.generation}")

        for i in range(1, generations + 1):
            self.board.next_generation()
            population = self.board.population
            self.population_history.append(population)
            if self.config.verbose and i % self.config.progress_every == 0:
                print(f"[life] generation {self.generation}: population {population}, "
                      f"bounding square {self.board.bounds}")

    def snapshot(self) -> Dict[str, Any]:
        bounds = self.board.bounds
        return {
            "generation": self.generation,
            "population": self.board.population,
            "x_top_left": None if bounds is None else bounds.x_top_left,
            "y_top_left": None if bounds is None else bounds.y_top_left,
            "size": 0 if bounds is None else bounds.size,
        }

    def _block_size(self, level: Optional[int]) -> int:
        if level is None:
            level = self.config.render_level
        if level < 0:
            raise ValueError(f"level must be >= 0, got {level}")
        return 1 << level

    def get_coords(self) -> np.ndarray:
        """Returns an (N, 2) int64 array of live (x, y) cells."""
        return utils.cells_to_array(self.board)

    def block_coords(self, level: Optional[int] = None) -> np.ndarray:
        """Top-left corners of populated blocks of side ``1 << level``."""
        block_size = self._block_size(level)
        corners = [(x, y) for x, y, _ in self.board.populated_leafs(block_size)]
        return utils.cells_to_array(corners)

    def occupancy_grid(
        self, level: Optional[int] = None, max_pixels: int = MAX_PIXELS
    ) -> np.ndarray:
        """
        Boolean raster of the bounding square, one pixel per block of side
        ``1 << level``, indexed ``[y, x]``. Empty boards give a (0, 0) array.

        The raster covers the whole bounding square, so sparse boards with far
        apart cells need a coarser level. Rasters above `max_pixels` pixels
        raise ValueError.
        """
        bounds = self.board.bounds
        if bounds is None:
            return np.zeros((0, 0), dtype=bool)
        block_size = min(self._block_size(level), bounds.size)
        side = bounds.size // block_size
        if side * side > max_pixels:
            raise ValueError(
                f"Raster of {side}x{side} pixels exceeds max_pixels={max_pixels}; "
                "use a coarser level"
            )
        corners = np.array(
            [(x, y) for x, y, _ in self.board.populated_leafs(block_size)],
            dtype=np.int64,
        ).reshape(-1, 2)
        return utils.rasterize_blocks(
            corners, bounds.x_top_left, bounds.y_top_left, bounds.size, block_size
        )


__all__ = ["LifeConfig", "LifeSimulator"]


if __name__ == "__main__":
    # Standalone execution for testing
    sim = LifeSimulator(LifeConfig(verbose=True))
    sim.run()
    print(f"Generation {sim.generation}: {sim.get_coords().shape[0]} live cells")
