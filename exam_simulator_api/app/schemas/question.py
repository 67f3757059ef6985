"""
Pydantic schemas for quiz questions.

A question set is uploaded as a JSON array.  Every element must match
``QuestionRecord``: an identifier, the prompt, exactly four option
strings and the index of the correct option.  Additional keys (for
example an explanation) are kept as they are.

``validate_questions`` checks a whole payload and returns a list of
violations instead of stopping at the first problem.
"""

from typing import Annotated, Any, List, NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

OPTION_COUNT = 4

REQUIRED_SHAPE = "Required: id, question, options (4), correctAnswer (0-3)"


class QuestionRecord(BaseModel):
    """A single multiple choice question."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Union[Annotated[StrictStr, Field(min_length=1)], StrictInt]
    question: Annotated[StrictStr, Field(min_length=1)]
    options: Annotated[List[StrictStr], Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)]
    correct_answer: Annotated[StrictInt, Field(ge=0, le=OPTION_COUNT - 1)] = Field(..., alias="correctAnswer")


class AvailableTest(BaseModel):
    """Summary of one stored question set."""

    model_config = ConfigDict(populate_by_name=True)

    test_type: str = Field(..., alias="testType")
    test_id: str = Field(..., alias="testId")
    question_count: int = Field(..., alias="questionCount")
    filename: str


class Violation(NamedTuple):
    """One problem found in an uploaded payload.

    ``index`` is ``None`` when the payload as a whole is wrong.
    """

    index: Union[int, None]
    field: str
    message: str

    def __str__(self) -> str:
        if self.index is None:
            return self.message
        return f"index {self.index}: {self.field}: {self.message}"


def validate_questions(payload: Any) -> List[Violation]:
    """Return the list of violations for an uploaded question payload.

    An empty list means the payload is a valid question set.
    """
    if not isinstance(payload, list):
        return [Violation(None, "", "Questions must be an array")]
    violations: List[Violation] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            violations.append(Violation(index, "question", "must be an object"))
            continue
        try:
            QuestionRecord.model_validate(item)
        except PydanticValidationError as exc:
            fields = set()
            for error in exc.errors():
                # Union members add extra ``loc`` parts; report the field once.
                field = str(error["loc"][0]) if error.get("loc") else "question"
                if field not in fields:
                    fields.add(field)
                    violations.append(Violation(index, field, error["msg"]))
    return violations
