from __future__ import annotations

import random
from typing import List

from fastapi import APIRouter, Depends, Query

from deps.rng import get_rng
from generator import generate, generate_batch, generate_practice, generate_targeted
from schemas.drill import GenerationSettings, Question, TargetedRequest
from schemas.weakness import PatternRequest

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post("/generate", response_model=Question)
def generate_question(settings: GenerationSettings, rng: random.Random = Depends(get_rng)):
    return generate(settings, rng)


@router.post("/generate-batch", response_model=List[Question])
def generate_questions(
    settings: GenerationSettings,
    count: int = Query(default=10, ge=1, le=100),
    rng: random.Random = Depends(get_rng),
):
    return generate_batch(settings, count, rng)


@router.post("/targeted", response_model=Question)
def targeted_question(req: TargetedRequest, rng: random.Random = Depends(get_rng)):
    return generate_targeted(
        req.operation,
        req.want_carry_or_borrow,
        req.fixed_operand,
        fixed_is_first=req.fixed_is_first,
        rng=rng,
    )


@router.post("/practice", response_model=List[Question])
def practice_questions(
    req: PatternRequest,
    count: int = Query(default=10, ge=1, le=100),
    rng: random.Random = Depends(get_rng),
):
    return generate_practice(req.pattern, count, rng)
