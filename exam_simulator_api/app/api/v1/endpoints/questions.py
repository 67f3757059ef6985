"""
Question set endpoints.

Administrators upload a JSON array of questions per test; students
fetch a test's questions in random order.  Uploaded files pass
through the scratch folder and are removed whatever the outcome.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, File, UploadFile

from exam_simulator_api.app.core.exceptions import ValidationError
from exam_simulator_api.app.core.uploads import scratch_upload
from exam_simulator_api.app.services.question_service import QuestionService

router = APIRouter()


@router.get("/available", response_model=Dict[str, Any])
async def available_tests() -> Dict[str, Any]:
    """List the stored question sets with their question counts."""
    tests = await QuestionService.available_tests()
    return {"success": True, "tests": tests}


@router.post("/upload/{test_type}/{test_id}", response_model=Dict[str, Any])
async def upload_questions(
    test_type: str,
    test_id: str,
    file: Optional[UploadFile] = File(None),
) -> Dict[str, Any]:
    """Replace the question set of a test with the uploaded JSON file.

    The file must contain an array of questions, each with ``id``,
    ``question``, four ``options`` and ``correctAnswer`` (0-3).  An
    invalid file leaves the current set untouched.
    """
    if file is None:
        raise ValidationError("No file uploaded")
    with scratch_upload(file, "file") as path:
        count = await QuestionService.upload_file(test_type, test_id, path)
    return {
        "success": True,
        "message": "Questions uploaded successfully",
        "count": count,
        "testType": test_type,
        "testId": test_id,
    }


@router.get("/{test_type}/{test_id}", response_model=Dict[str, Any])
async def get_questions(test_type: str, test_id: str) -> Dict[str, Any]:
    """Return the questions of a test, shuffled on every request."""
    questions = await QuestionService.fetch(test_type, test_id)
    return {"success": True, "questions": questions, "count": len(questions)}
