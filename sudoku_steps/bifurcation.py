"""Bifurcation ("guess") search: case splits on pairs of mutually exclusive hypotheses, used when no deduction rule applies."""

# bifurcation.py
# A path is a pair of hypotheses of which exactly one holds:
#   - the two candidates of a bi-value cell, or
#   - the last two positions of a digit inside a group.
# Each hypothesis runs in a non-speculating child engine on a cloned grid.
# A branch that contradicts removes its candidate from the real grid; two
# surviving branches are merged by taking, per cell, the union of what the
# cell can be in either branch.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Union

from .errors import Contradiction
from .solver_core import (
    SudokuState,
    all_groups,
    cell_name,
    contents,
    digit_list,
    fill_marks,
    find_contradiction,
)
from .techniques import StepResult
from .types_sudoku import Coord, Role

logger = logging.getLogger(__name__)

Hypothesis = tuple[Coord, int]


class BranchEngine(Protocol):
    def advance(self) -> Union[StepResult, Contradiction, None]: ...


@dataclass
class Branch:
    hypothesis: Hypothesis
    state: SudokuState
    steps: list[StepResult] = field(default_factory=list)
    contradiction: Optional[Contradiction] = None

    def chain(self) -> str:
        parts = [s.log for s in self.steps]
        if self.contradiction is not None:
            parts.append(f"then {self.contradiction.reason}")
        return "; ".join(parts) if parts else "nothing follows"


@dataclass
class Proposal:
    """A bifurcation outcome not yet applied to the real grid."""

    result: StepResult
    keep: dict[Coord, set[int]]  # cell -> candidates it keeps


def describe(h: Hypothesis) -> str:
    return f"{cell_name(h[0])} is {h[1]}"


def hypothesis_pairs(state: SudokuState) -> list[tuple[Hypothesis, Hypothesis, str]]:
    """All exhaustive pairs of hypotheses, each with the reason the pair is exhaustive."""
    pairs = []
    seen = set()
    for pos in state.empty_cells():
        cands = state[pos].candidates
        if len(cands) == 2:
            a, b = sorted(cands)
            pair = ((pos, a), (pos, b))
            seen.add(frozenset(pair))
            pairs.append((*pair, f"{cell_name(pos)} can only be {a} or {b}"))
    for kind, group in all_groups():
        placed = contents(state, kind, group)
        for digit in range(1, 10):
            if digit in placed:
                continue
            spots = state.candidates(kind, group, digit)
            if len(spots) != 2:
                continue
            pair = ((spots[0], digit), (spots[1], digit))
            if frozenset(pair) in seen:
                continue
            seen.add(frozenset(pair))
            pairs.append((*pair, f"{digit} can only go in {cell_name(spots[0])} or {cell_name(spots[1])} in {kind} {group + 1}"))
    return pairs


def run_branch(state: SudokuState, hypothesis: Hypothesis, make_child: Callable[[SudokuState], BranchEngine]) -> Branch:
    pos, digit = hypothesis
    trial = state.clone()
    trial[pos].assign(digit)
    branch = Branch(hypothesis, trial)
    branch.contradiction = fill_marks(trial) or find_contradiction(trial)
    if branch.contradiction is not None:
        return branch
    child = make_child(trial)
    while True:
        outcome = child.advance()
        if outcome is None:
            break
        if isinstance(outcome, Contradiction):
            branch.contradiction = outcome
            break
        branch.steps.append(outcome)
    return branch


def _refuted(state: SudokuState, header: str, branch: Branch, other: Hypothesis) -> Proposal:
    pos, digit = branch.hypothesis
    keep = state[pos].candidates - {digit}
    role = Role.DETERMINED if len(keep) == 1 else Role.ELIMINATED
    cells = {other[0]: Role.PIVOT, pos: role}
    log = f"{header} If {describe(branch.hypothesis)}: {branch.chain()}. So {cell_name(pos)} cannot be {digit}"
    return Proposal(StepResult("bifurcation", log, cells), {pos: keep})


def _merged(state: SudokuState, header: str, first: Branch, second: Branch) -> Optional[Proposal]:
    keep = {}
    for pos in state.empty_cells():
        either = first.state[pos].options() | second.state[pos].options()
        if either < state[pos].candidates:
            keep[pos] = either
    if not keep:
        return None
    cells = {first.hypothesis[0]: Role.PIVOT, second.hypothesis[0]: Role.PIVOT}
    found = []
    for pos, digits in sorted(keep.items()):
        if len(digits) == 1:
            cells[pos] = Role.DETERMINED
            found.append(f"{cell_name(pos)} must be {next(iter(digits))}")
        else:
            cells[pos] = Role.ELIMINATED
            found.append(f"{cell_name(pos)} can only be {digit_list(digits)}")
    log = (
        f"{header} If {describe(first.hypothesis)}: {first.chain()}. "
        f"If {describe(second.hypothesis)}: {second.chain()}. "
        f"Either way, {', '.join(found)}"
    )
    return Proposal(StepResult("bifurcation", log, cells), keep)


def evaluate_pair(
    state: SudokuState,
    first: Hypothesis,
    second: Hypothesis,
    why: str,
    make_child: Callable[[SudokuState], BranchEngine],
) -> Optional[Proposal]:
    header = f"Bifurcation: Either {describe(first)} or {describe(second)} ({why})."
    left = run_branch(state, first, make_child)
    if left.contradiction is not None:
        return _refuted(state, header, left, second)
    right = run_branch(state, second, make_child)
    if right.contradiction is not None:
        return _refuted(state, header, right, first)
    return _merged(state, header, left, right)


def guess(state: SudokuState, make_child: Callable[[SudokuState], BranchEngine]) -> Optional[StepResult]:
    """Try every hypothesis pair and apply the proposal with the shortest log.

    Shortest-log selection is a readability heuristic; ties go to the first pair found.
    """
    best: Optional[Proposal] = None
    for first, second, why in hypothesis_pairs(state):
        proposal = evaluate_pair(state, first, second, why, make_child)
        if proposal is None:
            continue
        if best is None or len(proposal.result.log) < len(best.result.log):
            best = proposal
    if best is None:
        logger.debug("bifurcation found nothing")
        return None
    for pos, digits in best.keep.items():
        state[pos].candidates &= digits
    logger.debug("bifurcation applied: %s", best.result.log)
    return best.result
