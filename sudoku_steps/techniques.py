"""Human-style deduction rules: singles, naked and hidden subsets, locked candidates.

Each rule takes the mutable SudokuState, applies the first pattern it finds and
returns a StepResult, or returns None when the pattern does not occur. A
pattern that would change nothing is skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterable, Optional

from .solver_core import (
    TYPES,
    GroupType,
    SudokuState,
    all_groups,
    cell_name,
    cell_names,
    contents,
    digit_list,
    group_cells,
    groups_of,
)
from .types_sudoku import Coord, Role

SUBSET_NAMES = {2: "Pair", 3: "Triple", 4: "Quad"}


@dataclass
class StepResult:
    technique: str
    log: str
    cells: dict[Coord, Role] = field(default_factory=dict)


def eliminate(state: SudokuState, cells: Iterable[Coord], digits: Iterable[int]) -> dict[Coord, set[int]]:
    """Remove `digits` from the candidates of the empty `cells`; returns what was removed per cell."""
    digits = set(digits)
    removed = {}
    for p in cells:
        cell = state[p]
        if cell.value:
            continue
        hit = cell.candidates & digits
        if hit:
            cell.candidates -= hit
            removed[p] = hit
    return removed


def roles(pivots: Iterable[Coord], changed: Iterable[Coord], role: Role = Role.ELIMINATED) -> dict[Coord, Role]:
    out = {p: Role.PIVOT for p in pivots}
    for p in changed:
        out[p] = role
    return out


def single_candidate(state: SudokuState) -> Optional[StepResult]:
    for r in range(9):
        for c in range(9):
            cell = state[(r, c)]
            if cell.value == 0 and len(cell.candidates) == 1:
                digit = next(iter(cell.candidates))
                cell.assign(digit)
                return StepResult(
                    "single_candidate",
                    f"Single Candidate: Cell {cell_name((r, c))} had only one possibility, {digit}",
                    {(r, c): Role.DETERMINED},
                )
    return None


def hidden_single(state: SudokuState) -> Optional[StepResult]:
    for kind, group in all_groups():
        placed = contents(state, kind, group)
        for digit in range(1, 10):
            if digit in placed:
                continue
            spots = state.candidates(kind, group, digit)
            if len(spots) == 1:
                pos = spots[0]
                state[pos].assign(digit)
                return StepResult(
                    "hidden_single",
                    f"Hidden Single: Cell {cell_name(pos)} was the only possibility for {digit} in {kind} {group + 1}",
                    {pos: Role.DETERMINED},
                )
    return None


def naked_subset(state: SudokuState, size: int) -> Optional[StepResult]:
    name = SUBSET_NAMES[size]
    for kind, group in all_groups():
        empties = [p for p in group_cells(kind, group) if state[p].value == 0]
        small = [p for p in empties if len(state[p].candidates) <= size]
        for subset in combinations(small, size):
            digits = set()
            for p in subset:
                digits |= state[p].candidates
            if len(digits) != size:
                continue
            others = [p for p in empties if p not in subset]
            removed = eliminate(state, others, digits)
            if not removed:
                continue
            return StepResult(
                f"naked_{name.lower()}",
                f"Naked {name}: Cells {cell_names(subset)} in {kind} {group + 1} can only contain "
                f"{digit_list(digits)}, so those digits were removed from {cell_names(removed)}",
                roles(subset, removed),
            )
    return None


def hidden_subset(state: SudokuState, size: int) -> Optional[StepResult]:
    name = SUBSET_NAMES[size]
    for kind, group in all_groups():
        placed = contents(state, kind, group)
        spots = {}
        for digit in range(1, 10):
            if digit in placed:
                continue
            where = state.candidates(kind, group, digit)
            if 0 < len(where) <= size:
                spots[digit] = where
        for digits in combinations(sorted(spots), size):
            cells = set()
            for d in digits:
                cells.update(spots[d])
            if len(cells) != size:
                continue
            keep = set(digits)
            extra = set()
            changed = []
            for p in cells:
                if state[p].candidates - keep:
                    extra |= state[p].candidates - keep
                    state[p].candidates &= keep
                    changed.append(p)
            if not changed:
                continue
            # the defining cells are the ones narrowed, so they stay pivots
            return StepResult(
                f"hidden_{name.lower()}",
                f"Hidden {name}: In {kind} {group + 1}, {digit_list(digits)} can only go in "
                f"{cell_names(cells)}, so {digit_list(extra)} {'was' if len(extra) == 1 else 'were'} removed from {cell_names(changed)}",
                roles(cells, ()),
            )
    return None


def naked_pair(state: SudokuState) -> Optional[StepResult]:
    return naked_subset(state, 2)


def naked_triple(state: SudokuState) -> Optional[StepResult]:
    return naked_subset(state, 3)


def naked_quad(state: SudokuState) -> Optional[StepResult]:
    return naked_subset(state, 4)


def hidden_pair(state: SudokuState) -> Optional[StepResult]:
    return hidden_subset(state, 2)


def hidden_triple(state: SudokuState) -> Optional[StepResult]:
    return hidden_subset(state, 3)


def hidden_quad(state: SudokuState) -> Optional[StepResult]:
    return hidden_subset(state, 4)


def locked_candidates(state: SudokuState) -> Optional[StepResult]:
    """A digit's positions in one group all lie in a second group (box vs. row/column):
    eliminate it from the rest of the second group.
    """
    for kind, group in all_groups():
        placed = contents(state, kind, group)
        for digit in range(1, 10):
            if digit in placed:
                continue
            spots = state.candidates(kind, group, digit)
            if not spots:
                continue
            for other in TYPES:
                if other is kind or GroupType.BOX not in (kind, other):
                    continue
                targets = {dict(groups_of(*p))[other] for p in spots}
                if len(targets) != 1:
                    continue
                target = targets.pop()
                rest = [p for p in group_cells(other, target) if p not in spots]
                removed = eliminate(state, rest, [digit])
                if not removed:
                    continue
                return StepResult(
                    "locked_candidates",
                    f"Locked Candidates: In {kind} {group + 1}, {digit} can only be in {other} {target + 1}, "
                    f"so it was removed from {cell_names(removed)}",
                    roles(spots, removed),
                )
    return None
