# tests/test_sudoku_tools.py
import pytest

from sudoku_steps.config import load_config
from sudoku_steps.errors import InvalidStateError
from sudoku_steps.solver_core import SudokuState, key_to_rc
from sudoku_steps.sudoku_tools import (
    RULES,
    SudokuSolver,
    compute_candidates_tool,
    initialize,
    next_moves,
    rules_by_name,
    sanity_check,
    step_to_move,
)
from sudoku_steps.techniques import hidden_pair, hidden_single, single_candidate


def test_rule_priority_order():
    assert list(RULES)[:3] == ["single_candidate", "hidden_single", "naked_pair"]
    assert list(RULES)[-2:] == ["xy_wing", "xyz_wing"]
    assert len(RULES) == 13


def test_rules_by_name_keeps_priority_and_rejects_unknown():
    assert rules_by_name(["hidden_single", "single_candidate"]) == [single_candidate, hidden_single]
    with pytest.raises(ValueError):
        rules_by_name(["single_candidate", "guesswork"])


def test_solve_classic_puzzle(puzzle, solution):
    state = initialize(puzzle)
    solver = SudokuSolver(state)
    steps = list(solver.solve())
    assert state.is_solved()
    assert state.digits() == solution
    assert len(steps) == sum(v == 0 for row in puzzle for v in row)
    assert all(s.technique in ("single_candidate", "hidden_single") for s in steps)


def test_step_on_solved_grid_stalls(solution):
    state = initialize(solution)
    assert SudokuSolver(state).step() is None


def test_initialize_reports_duplicate_in_box():
    grid = [[0] * 9 for _ in range(9)]
    grid[0][0] = 4
    grid[1][1] = 4
    with pytest.raises(InvalidStateError) as err:
        initialize(grid)
    assert err.value.reason == "Box 1 contains two 4s: R1C1, R2C2"
    assert err.value.previous_step is None


def test_contradiction_carries_previous_step(empty_state):
    empty_state[(0, 0)].candidates = {1}
    empty_state[(0, 1)].candidates = {1}
    solver = SudokuSolver(empty_state)
    outcome = solver.advance()
    assert outcome.reason == "Cell R1C2 has no possible values"
    assert outcome.previous_step.technique == "single_candidate"
    assert outcome.cells == [(0, 1)]


def test_step_raises_contradiction(empty_state):
    empty_state[(0, 0)].candidates = {1}
    empty_state[(0, 1)].candidates = {1}
    with pytest.raises(InvalidStateError) as err:
        SudokuSolver(empty_state).step()
    assert err.value.previous_step.log.startswith("Single Candidate: Cell R1C1")


def test_from_config_disables_bifurcation(empty_state):
    cfg = load_config(bifurcation=False, techniques=["single_candidate"])
    solver = SudokuSolver.from_config(empty_state, cfg)
    assert solver.may_speculate is False
    assert solver.rules == [single_candidate]


def test_compute_candidates_tool(puzzle):
    cands = compute_candidates_tool(puzzle)["candidates"]
    assert cands["r1c3"] == [1, 2, 4]
    assert "r1c1" not in cands


def test_next_moves_returns_explained_placements(puzzle, solution):
    out = next_moves(puzzle, max_moves=3)
    assert out["status"] == "progress"
    assert len(out["moves"]) == 3
    for i, move in enumerate(out["moves"], start=1):
        assert move["index"] == i
        assert move["type"] == "placement"
        r, c = key_to_rc(move["cell"])
        assert move["digit"] == solution[r][c]
        assert move["highlights"][move["cell"]] == "determined"
        assert move["caption"]


def test_next_moves_until_solved(puzzle, solution):
    out = next_moves(puzzle, max_moves=100)
    assert out["status"] == "solved"
    assert out["snapshot"]["current"] == solution
    assert out["snapshot"]["candidates"] == {}


def test_next_moves_keeps_client_candidates():
    grid = [[0] * 9 for _ in range(9)]
    candidates = {f"r1c{c}": [1, 2, 3, 4, 5, 6, 7, 8, 9] for c in range(1, 10)}
    candidates["r1c1"] = [2, 6]
    candidates["r1c2"] = [2, 6]
    out = next_moves(grid, candidates, max_moves=1, bifurcation=False)
    move = out["moves"][0]
    assert move["technique"] == "naked_pair"
    assert move["type"] == "elimination"
    assert "r1c3" in move["eliminate"]
    assert out["snapshot"]["candidates"]["r1c3"] == [1, 3, 4, 5, 7, 8, 9]


def test_next_moves_contradiction():
    grid = [[0] * 9 for _ in range(9)]
    grid[2][0] = 5
    grid[2][7] = 5
    out = next_moves(grid)
    assert out["status"] == "contradiction"
    assert out["contradiction"]["reason"] == "Row 3 contains two 5s: R3C1, R3C8"
    assert set(out["contradiction"]["cells"]) == {"r3c1", "r3c8"}
    assert out["moves"] == []


def test_sanity_check(puzzle):
    assert sanity_check(puzzle, puzzle) == {"ok": True, "issues": []}
    current = [row[:] for row in puzzle]
    current[0][0] = 3
    report = sanity_check(puzzle, current)
    assert not report["ok"]
    assert [i["type"] for i in report["issues"]] == ["given_overwritten", "duplicate", "duplicate"]
    assert report["issues"][0] == {"type": "given_overwritten", "cell": "r1c1", "given": 5, "found": 3}
    assert report["issues"][1] == {"type": "duplicate", "unit": "r1", "digits": [3], "cells": ["r1c1", "r1c2"]}
    assert report["issues"][2]["unit"] == "b1"


def test_sanity_check_reports_every_duplicated_unit():
    grid = [[0] * 9 for _ in range(9)]
    grid[0][0] = grid[0][5] = 3
    grid[8][1] = grid[8][7] = 6
    report = sanity_check(grid, grid)
    assert not report["ok"]
    assert report["issues"] == [
        {"type": "duplicate", "unit": "r1", "digits": [3], "cells": ["r1c1", "r1c6"]},
        {"type": "duplicate", "unit": "r9", "digits": [6], "cells": ["r9c2", "r9c8"]},
    ]


def test_sanity_check_reports_uncoverable_digit():
    grid = [[0] * 9 for _ in range(9)]
    grid[0] = [0, 1, 2, 3, 4, 5, 6, 7, 8]
    grid[1][0] = 9
    report = sanity_check(grid, grid)
    assert report["issues"] == [
        {"type": "contradiction", "reason": "Row 1 has no options for 9",
         "cells": [f"r1c{c}" for c in range(1, 10)]},
    ]


def test_sanity_check_rejects_malformed_grids(puzzle):
    with pytest.raises(ValueError):
        sanity_check(puzzle[:8], puzzle)
    with pytest.raises(ValueError):
        sanity_check(puzzle, [row[:8] for row in puzzle])


def test_hidden_subset_move_lists_narrowed_cells(empty_state):
    for c in range(9):
        if c not in (2, 5):
            empty_state[(0, c)].candidates -= {3, 8}
    move = step_to_move(hidden_pair(empty_state))
    assert move["type"] == "elimination"
    assert move["eliminate"] == ["r1c3", "r1c6"]
    assert move["highlights"] == {"r1c3": "pivot", "r1c6": "pivot"}


def test_state_dimensions_checked():
    with pytest.raises(ValueError):
        next_moves([[0] * 9])
    with pytest.raises(ValueError):
        SudokuState.from_digits([])
