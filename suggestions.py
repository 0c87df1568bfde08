# services/drill/suggestions.py
from __future__ import annotations

import math

DEFAULT_MESSAGE = "Let's practise the questions you find tricky!"
DEFAULT_LABEL = "Practice"

_OPERATION_NAMES = {"add": "Addition", "subtract": "Subtraction"}


def percent(rate: float) -> int:
    """Round a 0..1 rate to a whole percentage, halves going up."""
    return int(math.floor(rate * 100 + 0.5))


def suggestion_message(pattern) -> str:
    """Friendly practice suggestion for a weakness pattern. Never raises."""
    kind = getattr(pattern, "kind", None)
    operation = getattr(pattern, "operation", None)
    try:
        rate = float(getattr(pattern, "correct_rate"))
    except (AttributeError, TypeError, ValueError):
        return DEFAULT_MESSAGE
    if not math.isfinite(rate):
        return DEFAULT_MESSAGE
    pct = percent(rate)
    tail = f" (correct rate {pct}%). Let's practise!"

    if kind == "operation" and operation in _OPERATION_NAMES:
        return f"{_OPERATION_NAMES[operation]} looks tricky for you{tail}"
    if kind == "carry":
        return f"Addition with carrying looks tricky for you{tail}"
    if kind == "borrow":
        return f"Subtraction with borrowing looks tricky for you{tail}"
    if kind == "specific_number":
        number = getattr(pattern, "specific_number", None)
        if operation == "add":
            return f"Questions that add {number} look tricky for you{tail}"
        return f"Questions that take away {number} look tricky for you{tail}"
    return DEFAULT_MESSAGE


def pattern_label(pattern) -> str:
    """Short title shown during practice, e.g. "Carrying" or "Adding 7"."""
    kind = getattr(pattern, "kind", None)
    operation = getattr(pattern, "operation", None)

    if kind == "operation":
        return _OPERATION_NAMES.get(operation, DEFAULT_LABEL)
    if kind == "carry":
        return "Carrying"
    if kind == "borrow":
        return "Borrowing"
    if kind == "specific_number":
        number = getattr(pattern, "specific_number", None)
        return f"Adding {number}" if operation == "add" else f"Taking away {number}"
    return DEFAULT_LABEL
