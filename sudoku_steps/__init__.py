"""
Explained, step-by-step Sudoku solving.

Deduction rules from singles up to XY/XYZ-Wings, with a bifurcation fallback;
every step carries a log line and highlight roles for the affected cells.
"""

from .errors import Contradiction, InvalidStateError
from .session import LogEntry, SolveSession
from .solver_core import Cell, GroupType, SudokuState, fill_marks, find_contradiction, groups_of, position, verify
from .sudoku_tools import RULES, SudokuSolver, initialize, next_moves
from .techniques import StepResult
from .types_sudoku import Role

__version__ = "1.0.0"
__all__ = [
    'Cell',
    'Contradiction',
    'GroupType',
    'InvalidStateError',
    'LogEntry',
    'RULES',
    'Role',
    'SolveSession',
    'StepResult',
    'SudokuSolver',
    'SudokuState',
    'fill_marks',
    'find_contradiction',
    'groups_of',
    'initialize',
    'next_moves',
    'position',
    'verify',
]
