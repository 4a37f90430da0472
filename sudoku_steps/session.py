"""Solve session: the step log a host UI shows, with a grid snapshot per entry so any entry can be revisited and continued."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .config import DEFAULTS
from .errors import InvalidStateError
from .solver_core import SudokuState
from .sudoku_tools import SudokuSolver
from .types_sudoku import Coord, Grid, Role

logger = logging.getLogger(__name__)

NO_PROGRESS = "Failed to make any progress"


@dataclass
class LogEntry:
    id: int
    entry: str
    state: SudokuState
    cells: dict[Coord, Role] = field(default_factory=dict)
    valid: bool = True


class SolveSession:
    """Entered digits, the live state, and the history of explained steps.

    Selecting an older entry rewinds to its snapshot; the next step drops the
    entries after it. Editing a digit throws the live state away.
    """

    def __init__(self, digits: Optional[Grid] = None, cfg: Optional[Mapping[str, Any]] = None):
        self.digits: Grid = [row[:] for row in digits] if digits else [[0] * 9 for _ in range(9)]
        SudokuState.from_digits(self.digits)  # validates the shape
        self.cfg = dict(DEFAULTS if cfg is None else cfg)
        self.state: Optional[SudokuState] = None
        self.log: list[LogEntry] = []
        self.selected: Optional[int] = None

    def _add(self, entry: str, state: SudokuState, cells: dict[Coord, Role], valid: bool) -> LogEntry:
        item = LogEntry(len(self.log), entry, state.clone(), dict(cells), valid)
        self.log.append(item)
        return item

    def _truncate(self) -> None:
        if self.selected is not None:
            del self.log[self.selected + 1:]
            self.selected = None

    def _fail(self, e: InvalidStateError, state: SudokuState) -> LogEntry:
        cells = {p: Role.CONFLICT for p in e.cells}
        if e.previous_step is not None and e.previous_step.log:
            self._add(e.previous_step.log, state, cells, False)
        self.state = None
        logger.debug("invalid state: %s", e.reason)
        return self._add("Invalid state: " + e.reason, state, cells, False)

    @property
    def solved(self) -> bool:
        return self.state is not None and self.state.is_solved()

    def start(self) -> bool:
        """Build the live state from the entered digits. False if they are already inconsistent."""
        self._truncate()
        state = SudokuState.from_digits(self.digits)
        try:
            SudokuSolver.from_config(state, self.cfg).initialize()
        except InvalidStateError as e:
            self._fail(e, state)
            return False
        self.state = state
        return True

    def step(self) -> LogEntry:
        self._truncate()
        if self.state is None and not self.start():
            return self.log[-1]
        solver = SudokuSolver.from_config(self.state, self.cfg)
        try:
            result = solver.step()
        except InvalidStateError as e:
            return self._fail(e, solver.state)
        if result is None:
            return self._add(NO_PROGRESS, self.state, {}, True)
        return self._add(result.log, self.state, result.cells, True)

    def run(self, max_steps: Optional[int] = None) -> list[LogEntry]:
        """Step until solved, stalled, contradicted or `max_steps` entries were added."""
        added = []
        limit = self.cfg.get("max_steps", DEFAULTS["max_steps"]) if max_steps is None else max_steps
        while len(added) < limit and not self.solved:
            entry = self.step()
            added.append(entry)
            if not entry.valid or entry.entry == NO_PROGRESS:
                break
        return added

    def select(self, entry_id: int) -> LogEntry:
        entry = self.log[entry_id]
        self.state = entry.state.clone() if entry.valid else None
        self.selected = None if entry_id == len(self.log) - 1 else entry_id
        return entry

    def set_value(self, row: int, col: int, digit: int) -> None:
        if not 0 <= digit <= 9:
            raise ValueError(f"digit must be 0..9, got {digit}")
        self.digits[row][col] = digit
        self.state = None
        self._truncate()
