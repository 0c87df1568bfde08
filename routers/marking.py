from __future__ import annotations

from fastapi import APIRouter

from schemas.marking import MarkRequest, MarkResponse
from scoring import apply_answer, mark_answer, parse_answer

_NOT_A_NUMBER_MSG = "Please type a whole number."

router = APIRouter(tags=["marking"])


@router.post("/mark", response_model=MarkResponse)
def mark(req: MarkRequest):
    q = req.question
    answer = parse_answer(req.answer)
    if answer is None:
        # state untouched: the answer doesn't count
        return {
            "ok": False,
            "correct": False,
            "expected": q.correct_answer,
            "feedback": _NOT_A_NUMBER_MSG,
            "log": None,
            "state": req.state,
        }

    log = mark_answer(q, answer, req.response_time_ms, combo_at_answer=req.state.combo)
    return {
        "ok": True,
        "correct": log.is_correct,
        "expected": q.correct_answer,
        "feedback": "" if log.is_correct else f"The answer is {q.correct_answer}.",
        "log": log,
        "state": apply_answer(req.state, log.is_correct),
    }
