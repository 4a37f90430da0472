# sudoku_tool_api.py
# Optional FastAPI wrapper for the tool functions.
# Run with: uvicorn apps.api.sudoku_tool_api:app --reload
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import List, Dict, Optional

from sudoku_steps.errors import InvalidStateError
from sudoku_steps.sudoku_tools import (
    sanity_check,
    compute_candidates_tool,
    next_moves as _next_moves,
    contradiction_payload,
)

app = FastAPI(title="Sudoku Steps Tool API")

class GridModel(BaseModel):
    grid: List[List[int]]

class SanityRequest(BaseModel):
    original: List[List[int]]
    current: List[List[int]]

class NextMovesRequest(BaseModel):
    current: List[List[int]]
    candidates: Optional[Dict[str, List[int]]] = None
    techniques: Optional[List[str]] = None
    bifurcation: bool = True
    max_moves: int = 3

class StepRequest(BaseModel):
    current: List[List[int]]
    candidates: Optional[Dict[str, List[int]]] = None
    techniques: Optional[List[str]] = None
    bifurcation: bool = True

def _bad_input(e: ValueError):
    return HTTPException(status_code=400, detail=str(e))

@app.post("/sanity_check")
def api_sanity(req: SanityRequest):
    try:
        return sanity_check(req.original, req.current)
    except ValueError as e:
        raise _bad_input(e)

@app.post("/compute_candidates")
def api_cands(payload: GridModel):
    try:
        return compute_candidates_tool(payload.grid)
    except InvalidStateError as e:
        raise HTTPException(status_code=422, detail=contradiction_payload(e.contradiction))
    except ValueError as e:
        raise _bad_input(e)

@app.post("/next_moves")
def api_moves(req: NextMovesRequest):
    try:
        return _next_moves(req.current, req.candidates, req.max_moves, req.techniques, req.bifurcation)
    except ValueError as e:
        raise _bad_input(e)

@app.post("/step")
def api_step(req: StepRequest):
    try:
        out = _next_moves(req.current, req.candidates, 1, req.techniques, req.bifurcation)
    except ValueError as e:
        raise _bad_input(e)
    if out["status"] == "contradiction":
        raise HTTPException(status_code=422, detail=out["contradiction"])
    return {"move": out["moves"][0] if out["moves"] else None, "status": out["status"], "snapshot": out["snapshot"]}
