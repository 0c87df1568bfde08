# services/drill/scoring.py
from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Optional

from schemas.drill import AnswerLog, Question
from schemas.marking import GameState

BASE_POINTS = 100
COMBO_BONUS = 10  # per answer in the current streak, from the second one on

LEN_LIMIT = 10
_WHOLE_NUMBER_RE = re.compile(r"^\s*-?\d+\s*$")


def parse_answer(text: Optional[str]) -> Optional[int]:
    """Whole-number answer typed by the learner, or None if it isn't one."""
    if text is None or not isinstance(text, str) or len(text) > LEN_LIMIT:
        return None
    if _WHOLE_NUMBER_RE.fullmatch(text) is None:
        return None
    return int(text.strip())


def mark_answer(
    question: Question,
    user_answer: int,
    response_time_ms: int,
    combo_at_answer: int = 0,
    answered_at: Optional[datetime] = None,
) -> AnswerLog:
    return AnswerLog(
        operation=question.operation,
        first_number=question.first_number,
        second_number=question.second_number,
        correct_answer=question.correct_answer,
        user_answer=user_answer,
        is_correct=user_answer == question.correct_answer,
        response_time_ms=max(0, response_time_ms),
        has_carry=question.has_carry,
        has_borrow=question.has_borrow,
        combo_at_answer=combo_at_answer,
        answered_at=answered_at or datetime.now(UTC),
    )


def apply_answer(state: GameState, is_correct: bool) -> GameState:
    if not is_correct:
        return state.model_copy(
            update={"combo": 0, "total_count": state.total_count + 1}
        )

    combo = state.combo + 1
    gain = BASE_POINTS + (combo * COMBO_BONUS if combo > 1 else 0)
    return state.model_copy(
        update={
            "score": state.score + gain,
            "combo": combo,
            "max_combo": max(state.max_combo, combo),
            "correct_count": state.correct_count + 1,
            "total_count": state.total_count + 1,
        }
    )
