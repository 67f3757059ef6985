"""
CSV formatting of test results.

The column order is fixed and matches the spreadsheets administrators
already use.  Text fields are wrapped in double quotes, numbers are
written bare.  Quote characters inside a value are written as they
are, without doubling, so a value containing ``"`` produces a row
that strict CSV readers will split differently.
"""

import time
from typing import Any, Dict, Iterable, Optional

from exam_simulator_api.app.core.config import settings

CSV_HEADER = (
    "ID,User Name,User Email,Test Name,Test Type,Score (%),Date,"
    "Time Taken,Total Questions,Correct Answers,User ID,Timestamp"
)


def _text(value: Any) -> str:
    return f'"{_plain(value)}"'


def _plain(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def result_row(r: Dict[str, Any]) -> str:
    """Format a single result record as one CSV line (without newline)."""
    return ",".join(
        [
            _text(r.get("id")),
            _text(r.get("userName")),
            _text(r.get("userEmail") or "N/A"),
            _text(r.get("testName")),
            _text(r.get("testType") or "N/A"),
            _plain(r.get("score")),
            _text(r.get("date")),
            _text(r.get("timeTaken")),
            _plain(r.get("totalQuestions")),
            _plain(r.get("correctAnswers")),
            _text(r.get("userId")),
            _text(r.get("timestamp")),
        ]
    )


def results_to_csv(results: Iterable[Dict[str, Any]]) -> str:
    """Return the CSV document for ``results``, header first, one line per record."""
    lines = [CSV_HEADER]
    lines.extend(result_row(r) for r in results)
    return "\n".join(lines) + "\n"


def export_filename(timestamp_ms: Optional[int] = None) -> str:
    """Return the download name for an export, e.g. ``cbda-results-1700000000000.csv``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{settings.export_prefix}-{timestamp_ms}.csv"
