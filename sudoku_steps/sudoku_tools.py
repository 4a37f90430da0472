"""Solver engine (one explained step at a time) plus the tool-friendly helpers used by the demo CLI and the HTTP wrapper."""

# sudoku_tools.py
# SudokuSolver.step(): try the rules in priority order, else bifurcate, then
# propagate and verify. Contradictions stay values inside the engine and are
# raised as InvalidStateError only by step()/initialize().

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, Union

from .bifurcation import guess
from .errors import Contradiction, InvalidStateError
from .solver_core import (
    SudokuState,
    all_groups,
    compute_candidates,
    fill_marks,
    find_contradiction,
    group_cells,
    key_to_rc,
    rc_to_key,
    verify,
)
from .techniques import (
    StepResult,
    hidden_pair,
    hidden_quad,
    hidden_single,
    hidden_triple,
    locked_candidates,
    naked_pair,
    naked_quad,
    naked_triple,
    single_candidate,
)
from .types_sudoku import Candidates, Grid, Move, Role
from .wings import swordfish, x_wing, xy_wing, xyz_wing

logger = logging.getLogger(__name__)

Rule = Callable[[SudokuState], Optional[StepResult]]

# Priority order: the first rule that matches wins the step.
RULES: dict[str, Rule] = {
    "single_candidate": single_candidate,
    "hidden_single": hidden_single,
    "naked_pair": naked_pair,
    "naked_triple": naked_triple,
    "naked_quad": naked_quad,
    "hidden_pair": hidden_pair,
    "hidden_triple": hidden_triple,
    "hidden_quad": hidden_quad,
    "locked_candidates": locked_candidates,
    "x_wing": x_wing,
    "swordfish": swordfish,
    "xy_wing": xy_wing,
    "xyz_wing": xyz_wing,
}


def rules_by_name(names: Sequence[str]) -> list[Rule]:
    unknown = [n for n in names if n not in RULES]
    if unknown:
        raise ValueError(f"Unknown technique(s): {', '.join(unknown)}")
    # keep priority order regardless of the order given
    return [rule for name, rule in RULES.items() if name in names]


class SudokuSolver:
    """Steps one bound SudokuState.

    A speculating solver falls back to bifurcation when no rule matches; the
    child solvers it creates for the branches never speculate.
    """

    def __init__(self, state: SudokuState, may_speculate: bool = True, rules: Optional[Sequence[Rule]] = None):
        self.state = state
        self.may_speculate = may_speculate
        self.rules = list(RULES.values()) if rules is None else list(rules)

    @classmethod
    def from_config(cls, state: SudokuState, cfg: Mapping[str, Any]) -> "SudokuSolver":
        names = cfg.get("techniques") or list(RULES)
        return cls(state, may_speculate=bool(cfg.get("bifurcation", True)), rules=rules_by_name(names))

    def _child(self, state: SudokuState) -> "SudokuSolver":
        return SudokuSolver(state, may_speculate=False, rules=self.rules)

    def initialize(self) -> None:
        contradiction = fill_marks(self.state)
        if contradiction is not None:
            raise InvalidStateError(contradiction)
        verify(self.state)

    def advance(self) -> Union[StepResult, Contradiction, None]:
        """One attempt; a contradiction is returned, not raised."""
        result = None
        for rule in self.rules:
            result = rule(self.state)
            if result is not None:
                break
        if result is None and self.may_speculate:
            result = guess(self.state, self._child)
        if result is None:
            return None
        contradiction = fill_marks(self.state) or find_contradiction(self.state)
        if contradiction is not None:
            contradiction.previous_step = result
            return contradiction
        return result

    def step(self) -> Optional[StepResult]:
        outcome = self.advance()
        if isinstance(outcome, Contradiction):
            logger.debug("contradiction after %r: %s", outcome.previous_step.technique, outcome.reason)
            raise InvalidStateError(outcome)
        if outcome is not None:
            logger.debug("step: %s", outcome.log)
        return outcome

    def solve(self, max_steps: int = 500) -> Iterator[StepResult]:
        for _ in range(max_steps):
            if self.state.is_solved():
                return
            result = self.step()
            if result is None:
                return
            yield result


def initialize(grid: Grid) -> SudokuState:
    """Build a state from entered digits, propagate and verify it."""
    state = SudokuState.from_digits(grid)
    SudokuSolver(state).initialize()
    return state


def state_from_payload(current: Grid, candidates: Optional[Candidates] = None) -> SudokuState:
    """Rebuild a state from digits plus (optionally) the candidates a client kept between calls."""
    state = SudokuState.from_digits(current)
    if candidates is not None:
        for key, digits in candidates.items():
            pos = key_to_rc(key)
            if state[pos].value == 0:
                state[pos].candidates = set(digits)
    return state


def sanity_check(original: Grid, current: Grid) -> dict:
    """Overwritten givens, then every unit holding a digit twice, then any other broken invariant."""
    SudokuState.from_digits(original)
    state = SudokuState.from_digits(current)
    issues = []
    for r in range(9):
        for c in range(9):
            if original[r][c] != 0 and current[r][c] not in (0, original[r][c]):
                issues.append({"type": "given_overwritten", "cell": rc_to_key(r, c),
                               "given": original[r][c], "found": current[r][c]})
    for kind, group in all_groups():
        cells = group_cells(kind, group)
        values = [state[p].value for p in cells]
        dups = sorted({v for v in values if v and values.count(v) > 1})
        if dups:
            issues.append({"type": "duplicate", "unit": f"{kind.value[0].lower()}{group + 1}", "digits": dups,
                           "cells": [rc_to_key(*p) for p, v in zip(cells, values) if v in dups]})
    if not any(i["type"] == "duplicate" for i in issues):
        contradiction = fill_marks(state) or find_contradiction(state)
        if contradiction is not None:
            issues.append({"type": "contradiction", "reason": contradiction.reason,
                           "cells": [rc_to_key(*p) for p in contradiction.cells]})
    return {"ok": len(issues) == 0, "issues": issues}


def compute_candidates_tool(current: Grid) -> dict:
    """Compute candidate digits for each empty cell of the grid. Returns a dict like {'candidates': {'r1c2': [1, 2, 5], ...}}."""
    state = SudokuState.from_digits(current)
    contradiction = fill_marks(state)
    if contradiction is not None:
        raise InvalidStateError(contradiction)
    return {"candidates": compute_candidates(state)}


def step_to_move(result: StepResult, index: int = 1, state: Optional[SudokuState] = None) -> Move:
    determined = [p for p, role in result.cells.items() if role is Role.DETERMINED]
    eliminated = [p for p, role in result.cells.items() if role is Role.ELIMINATED]
    move: Move = {
        "index": index,
        "technique": result.technique,
        "type": "placement" if result.technique in ("single_candidate", "hidden_single") else "elimination",
        "caption": result.log,
        "highlights": {rc_to_key(*p): role.value for p, role in sorted(result.cells.items())},
    }
    if move["type"] == "placement":
        move["cell"] = rc_to_key(*determined[0])
        if state is not None:
            move["digit"] = state[determined[0]].value
    else:
        # hidden subsets narrow their own pivot cells
        changed = eliminated + determined or list(result.cells)
        move["eliminate"] = [rc_to_key(*p) for p in sorted(changed)]
    return move


def contradiction_payload(contradiction: Contradiction) -> dict:
    out = {"reason": contradiction.reason, "cells": [rc_to_key(*p) for p in contradiction.cells]}
    if contradiction.previous_step is not None:
        out["previous_step"] = contradiction.previous_step.log
    return out


def next_moves(
    current: Grid,
    candidates: Optional[Candidates] = None,
    max_moves: int = 5,
    techniques: Optional[Sequence[str]] = None,
    bifurcation: bool = True,
) -> dict:
    """Step a copy of `current` up to `max_moves` times.

    Returns the explained moves, a status ('progress', 'solved', 'stalled' or
    'contradiction') and the resulting digits/candidates snapshot.
    """
    state = state_from_payload(current, candidates)
    solver = SudokuSolver(state, may_speculate=bifurcation, rules=rules_by_name(techniques or list(RULES)))
    out: dict[str, Any] = {"moves": [], "status": "progress"}
    try:
        solver.initialize()
        for i in range(1, max_moves + 1):
            if state.is_solved():
                out["status"] = "solved"
                break
            result = solver.step()
            if result is None:
                out["status"] = "stalled"
                break
            out["moves"].append(step_to_move(result, i, state))
        else:
            if state.is_solved():
                out["status"] = "solved"
    except InvalidStateError as e:
        out["status"] = "contradiction"
        out["contradiction"] = contradiction_payload(e.contradiction)
    out["snapshot"] = {"current": state.digits(), "candidates": compute_candidates(state)}
    return out
