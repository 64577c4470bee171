"""
Game of Life Simulation Library - Sparse Quadtree Core

This package provides:
- QuadTree: unbounded Life board stored as a sparse quadtree
- LifeSimulator: seeded runner with observables and numpy exports
- patterns: named seed patterns and ASCII parsing
"""

from .quadtree import BoundingSquare, Node, QuadTree
from .simulator import LifeConfig, LifeSimulator
from . import patterns
from . import utils

__all__ = [
    # Board
    "QuadTree",
    "Node",
    "BoundingSquare",
    # Simulation
    "LifeSimulator",
    "LifeConfig",
    # Utilities
    "patterns",
    "utils",
]
