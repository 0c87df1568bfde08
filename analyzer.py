# services/drill/analyzer.py
"""
Weakness analysis over a learner's answer logs.

Logs must be supplied oldest first. Four independent lenses look at the
history (operation, carry/borrow, second operand, recent slump); their
patterns are merged and ranked by ascending correct rate.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from schemas.drill import AnswerLog, Operation
from schemas.weakness import (
    BorrowPattern,
    CarryPattern,
    LogSummary,
    OperationPattern,
    ProblemStats,
    SliceStats,
    SpecificNumberPattern,
    WeaknessAnalysis,
)

logger = logging.getLogger(__name__)

# --- Thresholds ------------------------------------------------------------------
WEAK_CORRECT_RATE = 0.7  # below 70% correct counts as a weakness
MIN_QUESTION_COUNT = 5  # smaller samples are ignored
RECENT_WINDOW = 10
RECENT_MISTAKE_THRESHOLD = 3  # 3+ mistakes in the last 10 = currently struggling
RECENT_CARRY_BORROW_MISTAKES = 2
WEAK_PROBLEM_LIMIT = 10  # rows in the class summary's worst-problem list

OPERATIONS: Tuple[Operation, ...] = ("add", "subtract")


def _stats(logs: Sequence[AnswerLog]) -> Tuple[float, float]:
    """(correct rate, mean response time) of a non-empty sample."""
    n = len(logs)
    correct = sum(1 for log in logs if log.is_correct)
    total_time = sum(log.response_time_ms for log in logs)
    return correct / n, total_time / n


def _is_weak(count: int, correct_rate: float) -> bool:
    return count >= MIN_QUESTION_COUNT and correct_rate < WEAK_CORRECT_RATE


# --- Lenses ----------------------------------------------------------------------


def analyze_by_operation(logs: Sequence[AnswerLog]) -> List[OperationPattern]:
    patterns: List[OperationPattern] = []
    for operation in OPERATIONS:
        op_logs = [log for log in logs if log.operation == operation]
        if len(op_logs) < MIN_QUESTION_COUNT:
            continue
        rate, avg_ms = _stats(op_logs)
        if _is_weak(len(op_logs), rate):
            patterns.append(
                OperationPattern(
                    operation=operation,
                    correct_rate=rate,
                    avg_response_time_ms=avg_ms,
                    question_count=len(op_logs),
                )
            )
    return patterns


def analyze_by_carry_borrow(logs: Sequence[AnswerLog]) -> List[CarryPattern | BorrowPattern]:
    patterns: List[CarryPattern | BorrowPattern] = []

    carry_logs = [log for log in logs if log.has_carry]
    if len(carry_logs) >= MIN_QUESTION_COUNT:
        rate, avg_ms = _stats(carry_logs)
        if _is_weak(len(carry_logs), rate):
            patterns.append(
                CarryPattern(
                    correct_rate=rate,
                    avg_response_time_ms=avg_ms,
                    question_count=len(carry_logs),
                )
            )

    borrow_logs = [log for log in logs if log.has_borrow]
    if len(borrow_logs) >= MIN_QUESTION_COUNT:
        rate, avg_ms = _stats(borrow_logs)
        if _is_weak(len(borrow_logs), rate):
            patterns.append(
                BorrowPattern(
                    correct_rate=rate,
                    avg_response_time_ms=avg_ms,
                    question_count=len(borrow_logs),
                )
            )

    return patterns


def analyze_by_specific_number(logs: Sequence[AnswerLog]) -> List[SpecificNumberPattern]:
    """Group each operation's logs by second operand (addend / subtrahend)."""
    patterns: List[SpecificNumberPattern] = []
    for operation in OPERATIONS:
        # dicts keep first-seen order, which fixes the output order
        by_number: Dict[int, List[AnswerLog]] = {}
        for log in logs:
            if log.operation == operation:
                by_number.setdefault(log.second_number, []).append(log)

        for number, group in by_number.items():
            if len(group) < MIN_QUESTION_COUNT:
                continue
            rate, avg_ms = _stats(group)
            if _is_weak(len(group), rate):
                patterns.append(
                    SpecificNumberPattern(
                        operation=operation,
                        specific_number=number,
                        is_first_number=False,
                        correct_rate=rate,
                        avg_response_time_ms=avg_ms,
                        question_count=len(group),
                    )
                )
    return patterns


def _dominant_operation(mistakes: Iterable[AnswerLog]) -> Operation | None:
    counts: Dict[Operation, int] = {}
    for log in mistakes:
        counts[log.operation] = counts.get(log.operation, 0) + 1

    best: Operation | None = None
    best_count = 0
    for operation, count in counts.items():
        # strict ">" keeps the first-seen operation on ties
        if count > best_count:
            best, best_count = operation, count
    return best


def analyze_recent_mistakes(logs: Sequence[AnswerLog]) -> List[CarryPattern | BorrowPattern]:
    """
    React to a slump in the last RECENT_WINDOW answers.

    The emitted pattern covers the whole window and is not filtered by
    WEAK_CORRECT_RATE.
    """
    if len(logs) < RECENT_WINDOW:
        return []
    recent = list(logs[-RECENT_WINDOW:])

    mistakes = [log for log in recent if not log.is_correct]
    if len(mistakes) < RECENT_MISTAKE_THRESHOLD:
        return []

    carries = sum(1 for log in mistakes if log.has_carry)
    borrows = sum(1 for log in mistakes if log.has_borrow)
    dominant = _dominant_operation(mistakes)

    window = dict(
        correct_rate=(len(recent) - len(mistakes)) / len(recent),
        avg_response_time_ms=sum(log.response_time_ms for log in recent) / len(recent),
        question_count=len(recent),
    )

    if dominant == "add" and carries >= RECENT_CARRY_BORROW_MISTAKES:
        return [CarryPattern(**window)]
    if dominant == "subtract" and borrows >= RECENT_CARRY_BORROW_MISTAKES:
        return [BorrowPattern(**window)]
    return []


# --- Public API ------------------------------------------------------------------


def analyze(logs: Iterable[AnswerLog]) -> WeaknessAnalysis:
    logs = list(logs)
    if not logs:
        return WeaknessAnalysis()

    patterns = [
        *analyze_recent_mistakes(logs),
        *analyze_by_operation(logs),
        *analyze_by_carry_borrow(logs),
        *analyze_by_specific_number(logs),
    ]
    # sorted() is stable: equal rates keep the order above
    patterns = sorted(patterns, key=lambda p: p.correct_rate)

    logger.info("analyzed %d logs: %d weakness pattern(s)", len(logs), len(patterns))
    return WeaknessAnalysis(
        patterns=patterns,
        suggested_practice=patterns[0] if patterns else None,
    )


# --- Class summary ---------------------------------------------------------------

SLICE_LABELS = {
    "add": "Addition",
    "subtract": "Subtraction",
    "carry": "Carrying",
    "borrow": "Borrowing",
}


def _slice(name: str, logs: Sequence[AnswerLog]) -> SliceStats:
    rate, avg_ms = _stats(logs)
    return SliceStats(
        name=name,
        label=SLICE_LABELS[name],
        correct_rate=rate,
        avg_response_time_ms=avg_ms,
        question_count=len(logs),
    )


def weak_problems(
    logs: Sequence[AnswerLog], limit: int = WEAK_PROBLEM_LIMIT
) -> List[ProblemStats]:
    """
    Exact questions (operation and both operands) answered at least
    MIN_QUESTION_COUNT times, lowest correct rate first.
    """
    groups: Dict[Tuple[str, int, int], List[AnswerLog]] = {}
    for log in logs:
        key = (log.operation, log.first_number, log.second_number)
        groups.setdefault(key, []).append(log)

    problems = [
        ProblemStats(
            operation=operation,
            first_number=first,
            second_number=second,
            correct_rate=sum(1 for log in group if log.is_correct) / len(group),
            attempt_count=len(group),
        )
        for (operation, first, second), group in groups.items()
        if len(group) >= MIN_QUESTION_COUNT
    ]
    problems.sort(key=lambda p: p.correct_rate)
    return problems[:limit]


def summarize(logs: Iterable[AnswerLog]) -> LogSummary:
    """
    Class-wide report over logs from any number of learners.

    Unlike ``analyze`` nothing here is filtered by WEAK_CORRECT_RATE: every
    non-empty slice is reported. Logs without a ``user_id`` count as one
    anonymous learner.
    """
    logs = list(logs)
    if not logs:
        return LogSummary()

    rate, avg_ms = _stats(logs)

    slices: List[SliceStats] = []
    for operation in OPERATIONS:
        op_logs = [log for log in logs if log.operation == operation]
        if op_logs:
            slices.append(_slice(operation, op_logs))
    carry_logs = [log for log in logs if log.has_carry]
    if carry_logs:
        slices.append(_slice("carry", carry_logs))
    borrow_logs = [log for log in logs if log.has_borrow]
    if borrow_logs:
        slices.append(_slice("borrow", borrow_logs))

    summary = LogSummary(
        total_questions=len(logs),
        avg_correct_rate=rate,
        avg_response_time_ms=avg_ms,
        learner_count=len({log.user_id for log in logs}),
        weak_problems=weak_problems(logs),
        slices=slices,
    )
    logger.info(
        "summarized %d logs from %d learner(s)", summary.total_questions, summary.learner_count
    )
    return summary
