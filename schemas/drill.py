# services/drill/schemas/drill.py
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Operation = Literal["add", "subtract"]

# ---------- Questions ----------


def has_carry(a: int, b: int) -> bool:
    return a % 10 + b % 10 >= 10


def has_borrow(a: int, b: int) -> bool:
    return a % 10 < b % 10


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: Operation
    first_number: int = Field(ge=0)
    second_number: int = Field(ge=0)
    correct_answer: int = Field(ge=0)
    # only one of these can be true: carry for "add", borrow for "subtract"
    has_carry: bool = False
    has_borrow: bool = False

    @model_validator(mode="after")
    def _check_consistent(self) -> "Question":
        a, b = self.first_number, self.second_number
        if self.operation == "add":
            expected, carry, borrow = a + b, has_carry(a, b), False
        else:
            if b > a:
                raise ValueError("second_number must be <= first_number for subtraction")
            expected, carry, borrow = a - b, False, has_borrow(a, b)
        if self.correct_answer != expected:
            raise ValueError(f"correct_answer must be {expected}")
        if self.has_carry != carry or self.has_borrow != borrow:
            raise ValueError("has_carry/has_borrow do not match the operands")
        return self


class GenerationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: Operation = "add"
    first_number_min: int = Field(default=1, ge=0)
    first_number_max: int = Field(default=20, ge=0)
    second_number_min: int = Field(default=1, ge=0)
    second_number_max: int = Field(default=20, ge=0)
    allow_carry: bool = False
    allow_borrow: bool = False

    @model_validator(mode="after")
    def _check_ranges(self) -> "GenerationSettings":
        if self.first_number_min > self.first_number_max:
            raise ValueError("first_number_min must be <= first_number_max")
        if self.second_number_min > self.second_number_max:
            raise ValueError("second_number_min must be <= second_number_max")
        return self


class TargetedRequest(BaseModel):
    operation: Operation
    want_carry_or_borrow: bool = False
    fixed_operand: Optional[int] = Field(default=None, ge=0)
    # False: the fixed value is the addend/subtrahend
    fixed_is_first: bool = False


# ---------- Answer logs ----------


class AnswerLog(BaseModel):
    """One answered question, as kept by the external log store."""

    operation: Operation
    first_number: int = Field(ge=0)
    second_number: int = Field(ge=0)
    is_correct: bool
    response_time_ms: int = Field(ge=0)
    has_carry: bool = False
    has_borrow: bool = False
    answered_at: Optional[datetime] = None
    correct_answer: Optional[int] = None
    user_answer: Optional[int] = None
    combo_at_answer: int = 0
    # learner the answer belongs to; only the class summary reads it
    user_id: Optional[str] = None
