"""
Pydantic schemas for test results.

Clients submit a result after finishing a test.  Only ``userName``,
``testName`` and a numeric ``score`` are required.  Everything else a
client sends (``userId``, ``userEmail``, ``testType``, ``date``,
``timeTaken``, ``totalQuestions``, ``correctAnswers``, ...) is stored
unchanged.  The server adds ``id`` and ``timestamp``.
"""

import math
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator

Number = Union[StrictInt, StrictFloat]


class ResultCreate(BaseModel):
    """Schema for submitting a test result."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    user_name: StrictStr = Field(..., alias="userName")
    test_name: StrictStr = Field(..., alias="testName")
    score: Number

    @field_validator("user_name", "test_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("score")
    @classmethod
    def finite(cls, v: Union[int, float]) -> Union[int, float]:
        # NaN and infinities are not valid JSON once stored.
        try:
            finite = math.isfinite(v)
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError("must be a finite number")
        return v


class ResultStats(BaseModel):
    """Aggregate figures over a list of results."""

    model_config = ConfigDict(populate_by_name=True)

    total_tests: int = Field(0, alias="totalTests")
    unique_students: int = Field(0, alias="uniqueStudents")
    average_score: int = Field(0, alias="averageScore")
    pass_rate: int = Field(0, alias="passRate")


class DashboardStats(ResultStats):
    """Figures shown on the admin dashboard."""

    total_students: int = Field(0, alias="totalStudents")
    total_questions: int = Field(0, alias="totalQuestions")
    available_tests: int = Field(0, alias="availableTests")
