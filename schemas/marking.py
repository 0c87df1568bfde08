# services/drill/schemas/marking.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from schemas.drill import AnswerLog, Question

# ---------- Game state ----------


class GameState(BaseModel):
    score: int = 0
    combo: int = 0
    max_combo: int = 0
    correct_count: int = 0
    total_count: int = 0


# ---------- Mark single ----------


class MarkRequest(BaseModel):
    question: Question
    answer: str
    response_time_ms: int = Field(default=0, ge=0)
    # client keeps the running score between requests
    state: GameState = Field(default_factory=GameState)


class MarkResponse(BaseModel):
    ok: bool
    correct: bool
    expected: int
    feedback: str = ""
    log: Optional[AnswerLog] = None
    state: GameState
