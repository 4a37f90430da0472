"""Fish and wing rules spanning several groups: X-Wing, Swordfish, XY-Wing, XYZ-Wing."""

from __future__ import annotations

from itertools import combinations
from typing import Optional

from .solver_core import GroupType, SudokuState, cell_name, cell_names, contents, group_cells, sees
from .techniques import StepResult, eliminate, roles

FISH_NAMES = {2: "X-Wing", 3: "Swordfish"}


def _fmt(digits) -> str:
    return "{" + ",".join(str(d) for d in sorted(digits)) + "}"


def basic_fish(state: SudokuState, size: int) -> Optional[StepResult]:
    """`size` base lines whose positions for a digit fall on exactly `size` cross lines:
    the digit goes away from the rest of the cross lines.
    """
    name = FISH_NAMES[size]
    for digit in range(1, 10):
        for base, cover in ((GroupType.ROW, GroupType.COLUMN), (GroupType.COLUMN, GroupType.ROW)):
            lines = {}
            for line in range(9):
                if digit in contents(state, base, line):
                    continue
                spots = state.candidates(base, line, digit)
                if 2 <= len(spots) <= size:
                    lines[line] = spots
            for chosen in combinations(sorted(lines), size):
                defining = [p for line in chosen for p in lines[line]]
                # index of the cross line a position sits on
                crosses = sorted({p[1] if base is GroupType.ROW else p[0] for p in defining})
                if len(crosses) != size:
                    continue
                rest = [
                    p for cross in crosses for p in group_cells(cover, cross)
                    if p not in defining
                ]
                removed = eliminate(state, rest, [digit])
                if not removed:
                    continue
                return StepResult(
                    name.lower().replace("-", "_"),
                    f"{name}: {digit} in {base}s {', '.join(str(i + 1) for i in chosen)} is confined to "
                    f"{cover}s {', '.join(str(i + 1) for i in crosses)}, so it was removed from {cell_names(removed)}",
                    roles(defining, removed),
                )
    return None


def x_wing(state: SudokuState) -> Optional[StepResult]:
    return basic_fish(state, 2)


def swordfish(state: SudokuState) -> Optional[StepResult]:
    return basic_fish(state, 3)


def xy_wing(state: SudokuState) -> Optional[StepResult]:
    empties = state.empty_cells()
    bivalue = [p for p in empties if len(state[p].candidates) == 2]
    for pivot in bivalue:
        x, y = sorted(state[pivot].candidates)
        wings = [p for p in bivalue if sees(p, pivot)]
        for a, b in combinations(wings, 2):
            ca, cb = state[a].candidates, state[b].candidates
            if ca == cb:
                continue
            for first, second, ff, ss in ((a, b, ca, cb), (b, a, cb, ca)):
                if x not in ff or y in ff or y not in ss or x in ss:
                    continue
                z_set = (ff - {x}) & (ss - {y})
                if len(z_set) != 1:
                    continue
                z = z_set.pop()
                targets = [p for p in empties if p not in (pivot, a, b) and sees(p, a) and sees(p, b)]
                removed = eliminate(state, targets, [z])
                if not removed:
                    continue
                return StepResult(
                    "xy_wing",
                    f"XY-Wing: Pivot {cell_name(pivot)} {_fmt((x, y))} with pincers {cell_name(first)} {_fmt(ff)} "
                    f"and {cell_name(second)} {_fmt(ss)}: one pincer must be {z}, so {z} was removed from "
                    f"{cell_names(removed)}",
                    roles((pivot, a, b), removed),
                )
    return None


def xyz_wing(state: SudokuState) -> Optional[StepResult]:
    empties = state.empty_cells()
    for pivot in empties:
        trio = state[pivot].candidates
        if len(trio) != 3:
            continue
        wings = [
            p for p in empties
            if sees(p, pivot) and len(state[p].candidates) == 2 and state[p].candidates <= trio
        ]
        for a, b in combinations(wings, 2):
            ca, cb = state[a].candidates, state[b].candidates
            if ca == cb:
                continue
            shared = ca & cb
            if len(shared) != 1:
                continue
            z = next(iter(shared))
            targets = [
                p for p in empties
                if p not in (pivot, a, b) and sees(p, pivot) and sees(p, a) and sees(p, b)
            ]
            removed = eliminate(state, targets, [z])
            if not removed:
                continue
            return StepResult(
                "xyz_wing",
                f"XYZ-Wing: Pivot {cell_name(pivot)} {_fmt(trio)} with pincers {cell_name(a)} {_fmt(ca)} "
                f"and {cell_name(b)} {_fmt(cb)}: one of them must be {z}, so {z} was removed from "
                f"{cell_names(removed)}",
                roles((pivot, a, b), removed),
            )
    return None
