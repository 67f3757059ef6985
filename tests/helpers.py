"""Builders shared by the test modules."""

import json

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


def make_question(qid, correct=0, **extra):
    question = {
        "id": qid,
        "question": f"Question {qid}?",
        "options": ["A", "B", "C", "D"],
        "correctAnswer": correct,
    }
    question.update(extra)
    return question


def json_upload(payload, name="questions.json"):
    body = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
    return {"file": (name, body, "application/json")}
