# sudoku_tool_api.py
# Optional FastAPI wrapper for the tool functions.
# Run with: uvicorn apps.api.sudoku_tool_api:app --reload
from typing import Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from solver.solver_core import InvalidInput
from solver.sudoku_tools import sanity_check, compute_candidates_tool, solve as _solve

app = FastAPI(title="Sudoku Solver Tool API")

Difficulty = Literal["singles", "subsets", "locked"]


class PuzzleModel(BaseModel):
    puzzle: str


class PuzzleRequest(BaseModel):
    puzzle: str
    max_difficulty: Difficulty = "locked"


@app.post("/sanity_check")
def api_sanity(payload: PuzzleModel):
    return sanity_check(payload.puzzle)


@app.post("/compute_candidates")
def api_cands(req: PuzzleRequest):
    try:
        return compute_candidates_tool(req.puzzle, req.max_difficulty)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/solve")
def api_solve(req: PuzzleRequest):
    return _solve(req.puzzle, req.max_difficulty).to_dict()
