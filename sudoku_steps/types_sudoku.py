# types_sudoku.py
from __future__ import annotations

from enum import Enum
from typing import Any, TypedDict

Coord = tuple[int, int]
"""A cell coordinate (row, col), 0-based."""

Grid = list[list[int]]
"""A 9x9 Sudoku grid as rows of integers (0 = empty)."""

Candidates = dict[str, list[int]]
"""Map from cell key (e.g., 'r1c1') to a list of candidate digits (1..9)."""

DIGITS = frozenset(range(1, 10))


class Role(str, Enum):
    """Highlight role of a cell touched by a step. Used only for display."""

    PIVOT = "pivot"  # defines the pattern
    DETERMINED = "determined"  # received a value (or was narrowed to one digit)
    ELIMINATED = "eliminated"  # lost candidates
    CONFLICT = "conflict"  # implicated in a contradiction


class Move(TypedDict, total=False):
    """A single explained solving action, as handed to the demo & UI layers."""

    index: int  # 1-based order in the sequence
    technique: str  # e.g., 'single_candidate', 'hidden_single', 'xy_wing'
    type: str  # 'placement' or 'elimination'
    digit: int  # the digit being placed
    cell: str  # for placements, target cell (e.g., 'r4c7')
    eliminate: list[str]  # for eliminations, cells that lost candidates
    highlights: dict[str, Any]  # cell key -> role for overlay rendering
    caption: str  # human-friendly explanation
