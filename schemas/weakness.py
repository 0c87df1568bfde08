# services/drill/schemas/weakness.py
from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from schemas.drill import AnswerLog, Operation


class _PatternStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    correct_rate: float = Field(ge=0.0, le=1.0)
    avg_response_time_ms: float = Field(ge=0.0)
    question_count: int = Field(ge=1)


class OperationPattern(_PatternStats):
    kind: Literal["operation"] = "operation"
    operation: Operation


class CarryPattern(_PatternStats):
    kind: Literal["carry"] = "carry"
    operation: Literal["add"] = "add"


class BorrowPattern(_PatternStats):
    kind: Literal["borrow"] = "borrow"
    operation: Literal["subtract"] = "subtract"


class SpecificNumberPattern(_PatternStats):
    kind: Literal["specific_number"] = "specific_number"
    operation: Operation
    specific_number: int = Field(ge=0)
    # analysis only looks at the second operand (addend / subtrahend)
    is_first_number: bool = False


WeaknessPattern = Annotated[
    Union[OperationPattern, CarryPattern, BorrowPattern, SpecificNumberPattern],
    Field(discriminator="kind"),
]


class WeaknessAnalysis(BaseModel):
    patterns: List[WeaknessPattern] = Field(default_factory=list)
    suggested_practice: Optional[WeaknessPattern] = None


# ---------- Analysis endpoints ----------


class AnalyzeRequest(BaseModel):
    # oldest first
    logs: List[AnswerLog] = Field(default_factory=list)


class AnalyzeResponse(WeaknessAnalysis):
    message: Optional[str] = None
    label: Optional[str] = None


class SuggestionResponse(BaseModel):
    message: str
    label: str


class PatternRequest(BaseModel):
    pattern: WeaknessPattern


# ---------- Class summary ----------


class ProblemStats(BaseModel):
    operation: Operation
    first_number: int
    second_number: int
    correct_rate: float = Field(ge=0.0, le=1.0)
    attempt_count: int = Field(ge=1)


class SliceStats(BaseModel):
    # "add", "subtract", "carry" or "borrow"
    name: Literal["add", "subtract", "carry", "borrow"]
    label: str
    correct_rate: float = Field(ge=0.0, le=1.0)
    avg_response_time_ms: float = Field(ge=0.0)
    question_count: int = Field(ge=1)


class LogSummary(BaseModel):
    total_questions: int = 0
    avg_correct_rate: float = 0.0
    avg_response_time_ms: float = 0.0
    learner_count: int = 0
    # exact questions asked often enough, worst first
    weak_problems: List[ProblemStats] = Field(default_factory=list)
    slices: List[SliceStats] = Field(default_factory=list)
