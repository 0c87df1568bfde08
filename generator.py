# services/drill/generator.py
"""
Constrained random generation of addition/subtraction questions.

Every function takes an optional ``rng`` (anything with ``randint``, usually a
``random.Random``) so callers and tests can use a seeded source.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from schemas.drill import GenerationSettings, Operation, Question, has_borrow, has_carry

logger = logging.getLogger(__name__)

# Give up on the carry/borrow constraint after this many draws
MAX_ATTEMPTS = 100

# Operand range used by targeted (weakness practice) questions
TARGETED_MIN = 1
TARGETED_MAX = 20

_rng = random.Random()


def build_question(operation: Operation, first: int, second: int) -> Question:
    if operation == "add":
        return Question(
            operation="add",
            first_number=first,
            second_number=second,
            correct_answer=first + second,
            has_carry=has_carry(first, second),
            has_borrow=False,
        )
    return Question(
        operation="subtract",
        first_number=first,
        second_number=second,
        correct_answer=first - second,
        has_carry=False,
        has_borrow=has_borrow(first, second),
    )


def _draw_pair(settings: GenerationSettings, rng) -> Tuple[int, int]:
    first = rng.randint(settings.first_number_min, settings.first_number_max)
    if settings.operation == "subtract":
        # never let the subtrahend exceed the minuend
        high = min(settings.second_number_max, first)
        low = min(settings.second_number_min, high)
    else:
        low, high = settings.second_number_min, settings.second_number_max
    return first, rng.randint(low, high)


def generate(settings: GenerationSettings, rng=None) -> Question:
    """
    Draw one question honouring the carry/borrow flag when possible.

    The flag is a soft constraint: after MAX_ATTEMPTS draws the last pair is
    kept whatever its carry/borrow status, so read ``has_carry``/``has_borrow``
    from the result rather than from the settings.
    """
    rng = rng or _rng
    if settings.operation == "add":
        wanted, check = settings.allow_carry, has_carry
    else:
        wanted, check = settings.allow_borrow, has_borrow

    for _attempt in range(MAX_ATTEMPTS):
        first, second = _draw_pair(settings, rng)
        if check(first, second) == wanted:
            break
    else:
        logger.debug(
            "no %s pair with %s=%s after %d attempts; keeping %d, %d",
            settings.operation,
            "carry" if settings.operation == "add" else "borrow",
            wanted,
            MAX_ATTEMPTS,
            first,
            second,
        )

    return build_question(settings.operation, first, second)


def generate_batch(settings: GenerationSettings, count: int, rng=None) -> List[Question]:
    rng = rng or _rng
    return [generate(settings, rng) for _ in range(count)]


def generate_targeted(
    operation: Operation,
    want_carry_or_borrow: bool,
    fixed_operand: Optional[int] = None,
    fixed_is_first: bool = False,
    rng=None,
) -> Question:
    """
    Question for weakness practice.

    With ``fixed_operand`` one operand is pinned (first or second depending on
    ``fixed_is_first``) and the other is drawn from the targeted range; the
    carry/borrow wish is not enforced in that mode. Without it this is plain
    ``generate`` over the targeted range.
    """
    rng = rng or _rng

    if fixed_operand is None:
        settings = GenerationSettings(
            operation=operation,
            first_number_min=TARGETED_MIN,
            first_number_max=TARGETED_MAX,
            second_number_min=TARGETED_MIN,
            second_number_max=TARGETED_MAX,
            allow_carry=want_carry_or_borrow and operation == "add",
            allow_borrow=want_carry_or_borrow and operation == "subtract",
        )
        return generate(settings, rng)

    if operation == "add":
        other = rng.randint(TARGETED_MIN, TARGETED_MAX)
        if fixed_is_first:
            return build_question("add", fixed_operand, other)
        return build_question("add", other, fixed_operand)

    if fixed_is_first:
        high = min(TARGETED_MAX, fixed_operand)
        second = rng.randint(min(TARGETED_MIN, high), high)
        return build_question("subtract", fixed_operand, second)

    first = rng.randint(fixed_operand, max(TARGETED_MAX, fixed_operand))
    return build_question("subtract", first, fixed_operand)


def generate_for_pattern(pattern, rng=None) -> Question:
    """Map a weakness pattern back to a targeted question."""
    rng = rng or _rng
    kind = pattern.kind

    if kind == "carry":
        return generate_targeted("add", True, rng=rng)
    if kind == "borrow":
        return generate_targeted("subtract", True, rng=rng)
    if kind == "specific_number":
        return generate_targeted(
            pattern.operation,
            False,
            pattern.specific_number,
            fixed_is_first=pattern.is_first_number,
            rng=rng,
        )
    if kind == "operation":
        return generate_targeted(pattern.operation, False, rng=rng)

    logger.warning("unknown pattern kind %r; falling back to plain addition", kind)
    return generate_targeted("add", False, rng=rng)


def generate_practice(pattern, count: int, rng=None) -> List[Question]:
    rng = rng or _rng
    return [generate_for_pattern(pattern, rng) for _ in range(count)]
