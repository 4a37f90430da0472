"""Core Sudoku utilities used by the techniques: group geometry, peers, grid state and cloning, candidate propagation and verification."""

# solver_core.py
# - group geometry (rows, columns, boxes) computed from closed-form formulas
# - SudokuState: 9x9 cells with value + candidate set, deep clone
# - fill_marks: strips candidates that clash with placed digits
# - find_contradiction / verify: the three grid invariants
# Coordinates are (row, col), 0-based. Keys for payloads are 1-based 'r1c1'.

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from .errors import Contradiction, InvalidStateError
from .types_sudoku import DIGITS, Coord, Grid

logger = logging.getLogger(__name__)


class GroupType(Enum):
    ROW = "Row"
    COLUMN = "Column"
    BOX = "Box"

    def __str__(self) -> str:
        return self.value


TYPES = (GroupType.ROW, GroupType.COLUMN, GroupType.BOX)


def position(kind: GroupType, group: int, offset: int) -> Coord:
    if kind is GroupType.ROW:
        return (group, offset)
    if kind is GroupType.COLUMN:
        return (offset, group)
    return (group // 3 * 3 + offset // 3, group % 3 * 3 + offset % 3)


def which_box(r: int, c: int) -> int:
    return r // 3 * 3 + c // 3


def groups_of(r: int, c: int) -> list[tuple[GroupType, int]]:
    return [(GroupType.ROW, r), (GroupType.COLUMN, c), (GroupType.BOX, which_box(r, c))]


def group_cells(kind: GroupType, group: int) -> list[Coord]:
    return [position(kind, group, i) for i in range(9)]


def all_groups() -> Iterable[tuple[GroupType, int]]:
    for kind in TYPES:
        for group in range(9):
            yield kind, group


def sees(a: Coord, b: Coord) -> bool:
    """True if two distinct cells share a row, column or box."""
    if a == b:
        return False
    return a[0] == b[0] or a[1] == b[1] or which_box(*a) == which_box(*b)


def peers(r: int, c: int) -> set[Coord]:
    ps = set()
    for kind, group in groups_of(r, c):
        ps.update(group_cells(kind, group))
    ps.discard((r, c))
    return ps


def cell_name(pos: Coord) -> str:
    return f"R{pos[0] + 1}C{pos[1] + 1}"


def cell_names(cells: Iterable[Coord]) -> str:
    return ", ".join(cell_name(p) for p in sorted(cells))


def digit_list(digits: Iterable[int]) -> str:
    ds = [str(d) for d in sorted(digits)]
    if len(ds) == 1:
        return ds[0]
    return ", ".join(ds[:-1]) + " and " + ds[-1]


def rc_to_key(r: int, c: int) -> str:
    """1-based payload key for a 0-based coordinate."""
    return f"r{r + 1}c{c + 1}"


def key_to_rc(key: str) -> Coord:
    r = int(key.split("c")[0][1:])
    c = int(key.split("c")[1])
    return (r - 1, c - 1)


class Cell:
    __slots__ = ("value", "candidates")

    def __init__(self, value: int = 0, candidates: Optional[Iterable[int]] = None):
        self.value = value
        self.candidates = set(DIGITS if candidates is None else candidates)

    def assign(self, digit: int) -> None:
        self.value = digit
        self.candidates = {digit}

    def options(self) -> set[int]:
        """What the cell can still be: its value when solved, else its candidates."""
        return {self.value} if self.value else set(self.candidates)

    def __repr__(self) -> str:
        if self.value:
            return f"Cell({self.value})"
        return f"Cell(candidates={sorted(self.candidates)})"


class SudokuState:
    """The 9x9 cell matrix. Mutated in place by rules; clone() for branches and history."""

    def __init__(self, cells: list[list[Cell]]):
        if len(cells) != 9 or any(len(row) != 9 for row in cells):
            raise ValueError("cells must have size [9,9]")
        self.cells = cells

    @classmethod
    def from_digits(cls, grid: Grid) -> "SudokuState":
        if len(grid) != 9 or any(len(row) != 9 for row in grid):
            raise ValueError("grid must have size [9,9]")
        rows = []
        for row in grid:
            cells = []
            for v in row:
                if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 9:
                    raise ValueError(f"grid values must be integers 0..9, got {v!r}")
                cells.append(Cell(v, {v} if v else None))
            rows.append(cells)
        return cls(rows)

    def __getitem__(self, pos: Coord) -> Cell:
        return self.cells[pos[0]][pos[1]]

    def clone(self) -> "SudokuState":
        return SudokuState(
            [[Cell(cell.value, cell.candidates) for cell in row] for row in self.cells]
        )

    def digits(self) -> Grid:
        return [[cell.value for cell in row] for row in self.cells]

    def empty_cells(self) -> list[Coord]:
        return [(r, c) for r in range(9) for c in range(9) if self.cells[r][c].value == 0]

    def is_solved(self) -> bool:
        return all(cell.value for row in self.cells for cell in row)

    def candidates(self, kind: GroupType, group: int, digit: int) -> list[Coord]:
        """Empty cells of a group that still hold `digit` as a candidate."""
        return [
            p for p in group_cells(kind, group)
            if self[p].value == 0 and digit in self[p].candidates
        ]

    def __repr__(self) -> str:
        return "\n".join("".join(str(v) if v else "." for v in row) for row in self.digits())


def contents(state: SudokuState, kind: GroupType, group: int) -> set[int]:
    return {state[p].value for p in group_cells(kind, group)} - {0}


def find_duplicate(state: SudokuState, kind: GroupType, group: int) -> Optional[Contradiction]:
    seen: dict[int, Coord] = {}
    for p in group_cells(kind, group):
        v = state[p].value
        if v == 0:
            continue
        if v in seen:
            first = seen[v]
            return Contradiction(
                f"{kind} {group + 1} contains two {v}s: {cell_name(first)}, {cell_name(p)}",
                [p, first],
            )
        seen[v] = p
    return None


def fill_marks(state: SudokuState) -> Optional[Contradiction]:
    """Remove from every empty cell the digits already placed in its row, column and box.

    Never adds candidates back. Returns the contradiction instead of narrowing
    when a group holds the same digit twice.
    """
    for kind, group in all_groups():
        dup = find_duplicate(state, kind, group)
        if dup is not None:
            return dup
    placed = {(kind, group): contents(state, kind, group) for kind, group in all_groups()}
    for r, c in state.empty_cells():
        used = set()
        for key in groups_of(r, c):
            used |= placed[key]
        state[(r, c)].candidates -= used
    return None


def find_contradiction(state: SudokuState) -> Optional[Contradiction]:
    """First violated grid invariant, or None. Read-only."""
    for kind, group in all_groups():
        dup = find_duplicate(state, kind, group)
        if dup is not None:
            return dup
        seen = set()
        for p in group_cells(kind, group):
            cell = state[p]
            seen |= cell.candidates if cell.value == 0 else {cell.value}
        for digit in range(1, 10):
            if digit not in seen:
                return Contradiction(
                    f"{kind} {group + 1} has no options for {digit}",
                    group_cells(kind, group),
                )
    for r, c in state.empty_cells():
        if not state[(r, c)].candidates:
            return Contradiction(f"Cell {cell_name((r, c))} has no possible values", [(r, c)])
    return None


def verify(state: SudokuState) -> None:
    contradiction = find_contradiction(state)
    if contradiction is not None:
        logger.debug("verify failed: %s", contradiction.reason)
        raise InvalidStateError(contradiction)


def compute_candidates(state: SudokuState) -> dict[str, list[int]]:
    return {rc_to_key(r, c): sorted(state[(r, c)].candidates) for r, c in state.empty_cells()}
