"""Contradiction value produced by the verifier, and the exception that carries it across the public boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .types_sudoku import Coord

if TYPE_CHECKING:
    from .techniques import StepResult


@dataclass
class Contradiction:
    """A violated grid invariant.

    `previous_step` is the last successful step before the contradiction was
    found, so a caller can log the whole chain and not only the failure.
    """

    reason: str
    cells: list[Coord] = field(default_factory=list)
    previous_step: Optional["StepResult"] = None


class InvalidStateError(Exception):
    def __init__(self, contradiction: Contradiction):
        super().__init__(contradiction.reason)
        self.contradiction = contradiction

    @property
    def reason(self) -> str:
        return self.contradiction.reason

    @property
    def cells(self) -> list[Coord]:
        return self.contradiction.cells

    @property
    def previous_step(self) -> Optional["StepResult"]:
        return self.contradiction.previous_step
