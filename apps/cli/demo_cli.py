"""Command-line demo: load a puzzle, step it with explanations, print the log (or a JSON payload)."""

# demo_cli.py
# End-to-end demo:
# - Takes a puzzle as 81 characters (digits, '0' or '.' for blanks), a text
#   file holding them, or a JSON file with a 9x9 list
# - Optional YAML config (techniques, bifurcation, max_steps)
# - Steps the puzzle until it is solved, stalls or contradicts
#
# Usage:
#   python -m apps.cli.demo_cli --demo
#   python -m apps.cli.demo_cli --grid puzzle.txt --config solver.yaml --json

import argparse
import json
import logging
import time
from pathlib import Path

from sudoku_steps.config import load_config
from sudoku_steps.session import NO_PROGRESS, SolveSession
from sudoku_steps.solver_core import cell_name, rc_to_key
from sudoku_steps.types_sudoku import Grid

DEMO = [
    [6, 2, 4, 3, 8, 0, 1, 0, 9],
    [5, 0, 0, 0, 9, 0, 0, 0, 7],
    [1, 0, 9, 0, 2, 6, 4, 3, 8],
    [8, 0, 0, 0, 6, 0, 0, 0, 1],
    [9, 1, 5, 8, 7, 0, 6, 0, 2],
    [4, 0, 0, 0, 1, 0, 0, 0, 3],
    [3, 0, 1, 0, 4, 2, 8, 7, 5],
    [7, 0, 0, 0, 3, 0, 0, 0, 4],
    [2, 4, 8, 7, 5, 0, 3, 0, 6],
]


def ts() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S")


def log(msg: str, *, quiet: bool = False) -> None:
    if not quiet:
        print(f"[{ts()}] {msg}", flush=True)


def parse_grid(text: str) -> Grid:
    """81 puzzle characters, whitespace ignored; '.' and '0' are blanks."""
    chars = [ch for ch in text if not ch.isspace() and ch not in "|-+"]
    if len(chars) != 81:
        raise ValueError(f"expected 81 cells, got {len(chars)}")
    values = []
    for ch in chars:
        if ch == ".":
            values.append(0)
        elif ch.isdigit():
            values.append(int(ch))
        else:
            raise ValueError(f"unexpected character {ch!r} in puzzle")
    return [values[i * 9:(i + 1) * 9] for i in range(9)]


def load_grid(arg: str) -> Grid:
    p = Path(arg)
    if p.suffix == ".json" and p.exists():
        with open(p, encoding="utf-8") as f:
            data = json.load(f)
        return data["grid"] if isinstance(data, dict) else data
    if p.exists():
        return parse_grid(p.read_text(encoding="utf-8"))
    return parse_grid(arg)


def format_grid(grid: Grid) -> str:
    lines = []
    for r, row in enumerate(grid):
        if r and r % 3 == 0:
            lines.append("------+-------+------")
        parts = [" ".join(str(v) if v else "." for v in row[i:i + 3]) for i in (0, 3, 6)]
        lines.append(" | ".join(parts))
    return "\n".join(lines)


def main(args) -> int:
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    cfg = load_config(
        args.config,
        bifurcation=False if args.no_bifurcation else None,
        max_steps=args.max_steps,
    )
    grid = DEMO if args.demo else load_grid(args.grid)
    session = SolveSession(grid, cfg)
    quiet = args.json
    log(f"Loaded puzzle, {sum(v == 0 for row in grid for v in row)} blanks", quiet=quiet)
    entries = session.run()
    for e in entries:
        log(f"#{e.id + 1} {e.entry}", quiet=quiet)

    last = session.log[-1] if session.log else None
    if session.solved:
        status = "solved"
    elif last is not None and not last.valid:
        status = "contradiction"
    elif last is not None and last.entry == NO_PROGRESS:
        status = "stalled"
    else:
        status = "step_limit"

    final = (session.state.digits() if session.state is not None else
             last.state.digits() if last is not None else grid)
    if args.json:
        payload = {
            "status": status,
            "original": grid,
            "current": final,
            "log": [
                {
                    "index": e.id + 1,
                    "entry": e.entry,
                    "valid": e.valid,
                    "highlights": {rc_to_key(*p): role.value for p, role in sorted(e.cells.items())},
                }
                for e in session.log
            ],
        }
        print(json.dumps(payload, indent=2))
    else:
        log(f"Status: {status}")
        if last is not None and not last.valid:
            log("Conflicting cells: " + ", ".join(cell_name(p) for p in sorted(last.cells)))
        print(format_grid(final))
    return {"solved": 0, "step_limit": 0, "stalled": 1}.get(status, 2)


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Step a Sudoku puzzle with explanations.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--grid", help="81-character puzzle, or a .txt/.json file holding one")
    src.add_argument("--demo", action="store_true", help="use the built-in demo puzzle")
    ap.add_argument("--config", type=str, default=None, help="YAML solver config")
    ap.add_argument("--max-steps", type=int, default=None)
    ap.add_argument("--no-bifurcation", action="store_true")
    ap.add_argument("--json", action="store_true", help="print a JSON payload instead of the log")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()
    raise SystemExit(main(args))
