# tests/test_wings.py
from sudoku_steps.types_sudoku import Role
from sudoku_steps.wings import swordfish, x_wing, xy_wing, xyz_wing


def keep_digit_only_in(state, row, cols, digit):
    for c in range(9):
        if c not in cols:
            state[(row, c)].candidates.discard(digit)


def test_x_wing_on_rows(empty_state):
    keep_digit_only_in(empty_state, 1, (2, 7), 4)
    keep_digit_only_in(empty_state, 5, (2, 7), 4)
    result = x_wing(empty_state)
    assert result is not None
    assert result.technique == "x_wing"
    assert result.log.startswith("X-Wing: 4 in Rows 2, 6 is confined to Columns 3, 8")
    for r in range(9):
        if r in (1, 5):
            assert 4 in empty_state[(r, 2)].candidates
            assert result.cells[(r, 2)] is Role.PIVOT
        else:
            assert 4 not in empty_state[(r, 2)].candidates
            assert 4 not in empty_state[(r, 7)].candidates
    assert 4 in empty_state[(0, 0)].candidates


def test_x_wing_on_columns(empty_state):
    for c in (1, 6):
        for r in range(9):
            if r not in (2, 7):
                empty_state[(r, c)].candidates.discard(4)
    result = x_wing(empty_state)
    assert result is not None
    assert result.log.startswith("X-Wing: 4 in Columns 2, 7 is confined to Rows 3, 8")
    for r in (2, 7):
        for c in range(9):
            if c in (1, 6):
                assert 4 in empty_state[(r, c)].candidates
                assert result.cells[(r, c)] is Role.PIVOT
            else:
                assert 4 not in empty_state[(r, c)].candidates
                assert result.cells[(r, c)] is Role.ELIMINATED
    assert x_wing(empty_state) is None


def test_swordfish_on_rows(empty_state):
    keep_digit_only_in(empty_state, 0, (1, 5), 6)
    keep_digit_only_in(empty_state, 4, (5, 8), 6)
    keep_digit_only_in(empty_state, 8, (1, 8), 6)
    assert x_wing(empty_state) is None
    result = swordfish(empty_state)
    assert result is not None
    assert result.log.startswith("Swordfish: 6 in Rows 1, 5, 9 is confined to Columns 2, 6, 9")
    for r in range(9):
        if r in (0, 4, 8):
            continue
        for c in (1, 5, 8):
            assert 6 not in empty_state[(r, c)].candidates
            assert result.cells[(r, c)] is Role.ELIMINATED


def test_xy_wing(empty_state):
    empty_state[(0, 0)].candidates = {1, 2}
    empty_state[(0, 4)].candidates = {1, 3}
    empty_state[(4, 0)].candidates = {2, 3}
    result = xy_wing(empty_state)
    assert result is not None
    assert 3 not in empty_state[(4, 4)].candidates
    assert result.cells[(4, 4)] is Role.ELIMINATED
    assert {p for p, role in result.cells.items() if role is Role.PIVOT} == {(0, 0), (0, 4), (4, 0)}
    assert result.log.startswith("XY-Wing: Pivot R1C1 {1,2}")
    assert xy_wing(empty_state) is None


def test_xyz_wing(empty_state):
    empty_state[(0, 0)].candidates = {1, 2, 3}
    empty_state[(0, 4)].candidates = {1, 3}
    empty_state[(1, 1)].candidates = {2, 3}
    assert xy_wing(empty_state) is None
    result = xyz_wing(empty_state)
    assert result is not None
    assert 3 not in empty_state[(0, 1)].candidates
    assert 3 not in empty_state[(0, 2)].candidates
    assert 3 in empty_state[(0, 3)].candidates
    assert set(p for p, role in result.cells.items() if role is Role.ELIMINATED) == {(0, 1), (0, 2)}
