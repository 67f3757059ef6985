"""
Service layer for question sets.

Each test instance is identified by a ``(testType, testId)`` pair, for
example ``("chapter", "1")`` or ``("mock", "2")``.  Its questions are
stored as one document named ``questions/<testType>_<testId>``.  An
upload replaces the whole set; a fetch returns it in random order so
that students cannot memorise answer positions.
"""

from __future__ import annotations

import json
import logging
import random
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypeVar

from exam_simulator_api.app.core.exceptions import NotFoundError, ValidationError
from exam_simulator_api.app.core.store import get_store
from exam_simulator_api.app.schemas.question import REQUIRED_SHAPE, AvailableTest, validate_questions

QUESTIONS_FOLDER = "questions"

# Parts are joined with ``_`` so they must not contain one themselves.
_KEY_PART = re.compile(r"^[A-Za-z0-9-]+$")

T = TypeVar("T")

logger = logging.getLogger(__name__)


def question_set_name(test_type: str, test_id: str) -> str:
    """Return the store name of the question set for a test."""
    for label, value in (("testType", test_type), ("testId", test_id)):
        if not _KEY_PART.match(value or ""):
            raise ValidationError(f"Invalid {label}: only letters, digits and '-' are allowed")
    return f"{QUESTIONS_FOLDER}/{test_type}_{test_id}"


def split_set_name(name: str) -> Tuple[str, str]:
    """Split a stored set name such as ``chapter_1`` into its test type and id."""
    test_type, _, test_id = name.partition("_")
    return test_type, test_id


def shuffled(items: Sequence[T], seed: Optional[int] = None) -> List[T]:
    """Return a shuffled copy of ``items``.

    The same ``seed`` always gives the same order.  Without a seed the
    order differs from call to call.
    """
    result = list(items)
    random.Random(seed).shuffle(result)
    return result


class QuestionService:
    """Upload, fetch and list question sets."""

    @classmethod
    async def upload(cls, test_type: str, test_id: str, content: bytes) -> int:
        """Validate uploaded JSON and store it as the set for this test.

        The previous set for the same test is only replaced when the
        whole payload is valid.  Returns the number of questions saved.
        """
        name = question_set_name(test_type, test_id)
        try:
            questions = json.loads(content.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise ValidationError("Invalid JSON format")

        violations = validate_questions(questions)
        if violations:
            first = violations[0]
            if first.index is None:
                raise ValidationError(first.message)
            raise ValidationError(
                f"Invalid question format at index {first.index}. {REQUIRED_SHAPE}",
                violations=[str(v) for v in violations],
            )

        get_store().save(name, questions)
        logger.info("%d questions uploaded for %s %s", len(questions), test_type, test_id)
        return len(questions)

    @classmethod
    async def upload_file(cls, test_type: str, test_id: str, path: Path) -> int:
        """Read an uploaded file from disk and pass it to ``upload``."""
        with open(path, "rb") as fh:
            content = fh.read()
        return await cls.upload(test_type, test_id, content)

    @classmethod
    async def fetch(cls, test_type: str, test_id: str, seed: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return the questions of a test in random order.

        Raises ``NotFoundError`` if no set was uploaded for the test.
        """
        try:
            name = question_set_name(test_type, test_id)
        except ValidationError:
            # No set can be stored under such a name.
            raise NotFoundError("Questions not found for this test")
        store = get_store()
        if not store.exists(name):
            raise NotFoundError("Questions not found for this test")
        return shuffled(store.load(name), seed=seed)

    @classmethod
    async def available_tests(cls) -> List[Dict[str, Any]]:
        """List every stored question set with its size."""
        store = get_store()
        tests = []
        for set_name in store.names(QUESTIONS_FOLDER):
            test_type, test_id = split_set_name(set_name)
            questions = store.load(f"{QUESTIONS_FOLDER}/{set_name}")
            tests.append(
                AvailableTest(
                    test_type=test_type,
                    test_id=test_id,
                    question_count=len(questions),
                    filename=f"{set_name}.json",
                ).model_dump(by_alias=True)
            )
        return tests
