import random

from analyzer import (
    MIN_QUESTION_COUNT,
    WEAK_PROBLEM_LIMIT,
    analyze,
    analyze_by_carry_borrow,
    analyze_by_operation,
    analyze_by_specific_number,
    analyze_recent_mistakes,
    summarize,
    weak_problems,
)
from generator import has_borrow, has_carry
from schemas.drill import AnswerLog


def _log(operation, first, second, correct, ms=1000):
    return AnswerLog(
        operation=operation,
        first_number=first,
        second_number=second,
        is_correct=correct,
        response_time_ms=ms,
        has_carry=operation == "add" and has_carry(first, second),
        has_borrow=operation == "subtract" and has_borrow(first, second),
    )


def test_empty_logs():
    result = analyze([])
    assert result.patterns == []
    assert result.suggested_practice is None


def test_below_min_sample_size_is_ignored():
    logs = [_log("add", 1, 2, False) for _ in range(MIN_QUESTION_COUNT - 1)]
    assert analyze_by_operation(logs) == []
    assert analyze(logs).patterns == []


def test_recent_carry_slump():
    # 10 carrying additions, 3 wrong: 70% is not weak overall, but is a slump
    logs = [_log("add", 8, 5, i not in (2, 5, 9), ms=2000) for i in range(10)]

    result = analyze(logs)

    assert len(result.patterns) == 1
    p = result.patterns[0]
    assert p.kind == "carry" and p.operation == "add"
    assert p.correct_rate == 0.7
    assert p.question_count == 10
    assert p.avg_response_time_ms == 2000
    assert result.suggested_practice == p


def test_recent_window_needs_ten_logs():
    logs = [_log("add", 8, 5, False)] * 3 + [_log("add", 1, n, True) for n in range(1, 7)]
    assert len(logs) == 9
    assert analyze_recent_mistakes(logs) == []
    assert all(p.kind != "carry" for p in analyze(logs).patterns)


def test_recent_window_only_looks_at_last_ten():
    old_mistakes = [_log("add", 8, 5, False) for _ in range(3)]
    recent = [_log("add", 1, n % 8 + 1, True) for n in range(10)]
    assert analyze_recent_mistakes(old_mistakes + recent) == []
    assert len(analyze_recent_mistakes(recent[:7] + old_mistakes)) == 1


def test_recent_tie_goes_to_first_seen_operation():
    mistakes_sub_first = [
        _log("subtract", 12, 5, False),
        _log("add", 8, 5, False),
        _log("subtract", 13, 7, False),
        _log("add", 9, 4, False),
    ]
    fillers = [_log("add", 1, n, True) for n in (1, 2, 3, 4, 6, 7)]

    result = analyze_recent_mistakes(mistakes_sub_first + fillers)
    assert [p.kind for p in result] == ["borrow"]
    assert result[0].correct_rate == 0.6

    mistakes_add_first = [mistakes_sub_first[i] for i in (1, 0, 3, 2)]
    result = analyze_recent_mistakes(mistakes_add_first + fillers)
    assert [p.kind for p in result] == ["carry"]


def test_recent_mistakes_without_carry_emit_nothing():
    logs = [_log("add", 1, 2, False) for _ in range(3)] + [_log("add", 2, 3, True) for _ in range(7)]
    assert analyze_recent_mistakes(logs) == []


def test_operation_pattern():
    logs = [_log("subtract", 9, n, n <= 2) for n in range(1, 7)]

    result = analyze(logs)

    assert len(result.patterns) == 1
    p = result.patterns[0]
    assert p.kind == "operation" and p.operation == "subtract"
    assert p.question_count == 6
    assert abs(p.correct_rate - 2 / 6) < 1e-9


def test_borrow_pattern_ties_keep_merge_order():
    pairs = [(12, 5), (13, 7), (11, 4), (14, 8), (10, 9)]
    logs = [_log("subtract", a, b, i == 0) for i, (a, b) in enumerate(pairs)]

    assert [p.kind for p in analyze_by_carry_borrow(logs)] == ["borrow"]

    result = analyze(logs)
    assert [p.kind for p in result.patterns] == ["operation", "borrow"]
    assert all(abs(p.correct_rate - 0.2) < 1e-9 for p in result.patterns)


def test_carry_and_borrow_counted_independently_of_operation():
    carry = [_log("add", 8, 5, False) for _ in range(5)]
    borrow = [_log("subtract", 12, 5, True) for _ in range(5)]
    kinds = [p.kind for p in analyze_by_carry_borrow(carry + borrow)]
    assert kinds == ["carry"]


def test_specific_number_pattern():
    sevens = [_log("add", 1, 7, i == 0, ms=3000) for i in range(5)]
    twos = [_log("add", n, 2, True) for n in range(1, 6)]

    result = analyze(sevens + twos)

    kinds = [p.kind for p in result.patterns]
    assert kinds == ["specific_number", "operation"]
    top = result.suggested_practice
    assert top.specific_number == 7
    assert top.operation == "add"
    assert top.is_first_number is False
    assert top.avg_response_time_ms == 3000
    assert abs(result.patterns[1].correct_rate - 0.6) < 1e-9


def test_specific_number_groups_by_second_operand_only():
    # same first operand, different second operands: no group reaches 5
    logs = [_log("add", 7, n, False) for n in range(1, 6)]
    assert analyze_by_specific_number(logs) == []


def test_patterns_sorted_and_suggestion_is_worst():
    rng = random.Random(21)
    for _ in range(20):
        logs = []
        for _ in range(rng.randint(1, 120)):
            op = rng.choice(["add", "subtract"])
            a = rng.randint(1, 20)
            b = rng.randint(1, a if op == "subtract" else 20)
            logs.append(_log(op, a, b, rng.random() < 0.55, ms=rng.randint(500, 9000)))

        result = analyze(iter(logs))

        rates = [p.correct_rate for p in result.patterns]
        assert rates == sorted(rates)
        if result.patterns:
            assert result.suggested_practice == result.patterns[0]
            assert all(p.question_count >= MIN_QUESTION_COUNT for p in result.patterns)
        else:
            assert result.suggested_practice is None


def _user_log(user, operation, first, second, correct, ms=1000):
    return _log(operation, first, second, correct, ms=ms).model_copy(update={"user_id": user})


def test_summary_empty():
    s = summarize([])
    assert s.total_questions == 0
    assert s.learner_count == 0
    assert s.weak_problems == [] and s.slices == []


def test_summary_totals_and_slices():
    logs = [
        _user_log("amy", "add", 8, 5, True, ms=2000),
        _user_log("amy", "add", 1, 2, False, ms=1000),
        _user_log("ben", "subtract", 12, 5, False, ms=3000),
        _user_log("ben", "subtract", 9, 4, True, ms=2000),
    ]

    s = summarize(logs)

    assert s.total_questions == 4
    assert s.avg_correct_rate == 0.5
    assert s.avg_response_time_ms == 2000
    assert s.learner_count == 2
    # no sample-size or weakness cut-off on slices
    assert [(x.name, x.question_count) for x in s.slices] == [
        ("add", 2),
        ("subtract", 2),
        ("carry", 1),
        ("borrow", 1),
    ]
    carry = s.slices[2]
    assert carry.correct_rate == 1.0 and carry.label == "Carrying"
    borrow = s.slices[3]
    assert borrow.correct_rate == 0.0 and borrow.avg_response_time_ms == 3000


def test_summary_counts_missing_user_as_one_learner():
    logs = [_log("add", 1, 2, True), _log("add", 1, 3, True), _user_log("amy", "add", 1, 4, True)]
    assert summarize(logs).learner_count == 2


def test_weak_problems_grouped_by_exact_question():
    logs = []
    # 7 + 6 five times, one right; 8 + 5 five times, all right; 9 + 4 only four times
    logs += [_log("add", 7, 6, i == 0) for i in range(5)]
    logs += [_log("add", 8, 5, True) for _ in range(5)]
    logs += [_log("add", 9, 4, False) for _ in range(4)]
    # same operands, other operation: a separate problem
    logs += [_log("subtract", 7, 6, i < 3) for i in range(5)]

    problems = summarize(logs).weak_problems

    assert [(p.operation, p.first_number, p.second_number) for p in problems] == [
        ("add", 7, 6),
        ("subtract", 7, 6),
        ("add", 8, 5),
    ]
    assert problems[0].correct_rate == 0.2 and problems[0].attempt_count == 5
    assert problems[2].correct_rate == 1.0


def test_weak_problems_keeps_worst_ten():
    logs = []
    for second in range(1, 13):
        # question "1 + second" answered right (second - 1) times out of 12
        logs += [_log("add", 1, second, i < second - 1) for i in range(12)]

    problems = weak_problems(logs)

    assert len(problems) == WEAK_PROBLEM_LIMIT
    assert [p.second_number for p in problems] == list(range(1, 11))
    rates = [p.correct_rate for p in problems]
    assert rates == sorted(rates)
