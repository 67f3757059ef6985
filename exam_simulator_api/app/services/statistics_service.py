"""
Service layer for statistics and reporting.

``aggregate_results`` is a pure reduction over result records and is
shared by the results listing and the admin dashboard.  Averages and
percentages are rounded half up to whole numbers, so 66.5 becomes 67
rather than Python's banker's rounding result of 66.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional

from exam_simulator_api.app.core.config import settings
from exam_simulator_api.app.core.store import get_store
from exam_simulator_api.app.schemas.result import DashboardStats, ResultStats


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _score(record: Dict[str, Any]) -> float:
    score = record.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return 0.0
    try:
        value = float(score)
    except OverflowError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def aggregate_results(results: Iterable[Dict[str, Any]], pass_threshold: Optional[float] = None) -> Dict[str, int]:
    """Return count, distinct students, mean score and pass rate.

    Parameters
    ----------
    results : Iterable[dict]
        Result records as stored.
    pass_threshold : Optional[float]
        Minimum score that counts as a pass.  Defaults to
        ``settings.pass_threshold`` (70).

    Returns
    -------
    dict
        ``totalTests``, ``uniqueStudents``, ``averageScore`` and
        ``passRate``.  All zero for an empty input.
    """
    threshold = settings.pass_threshold if pass_threshold is None else pass_threshold
    records: List[Dict[str, Any]] = list(results)
    if not records:
        return ResultStats().model_dump(by_alias=True)
    scores = [_score(r) for r in records]
    passed = sum(1 for s in scores if s >= threshold)
    return ResultStats(
        total_tests=len(records),
        unique_students=len({r.get("userId") for r in records}),
        average_score=round_half_up(sum(scores) / len(scores)),
        pass_rate=round_half_up(passed / len(records) * 100),
    ).model_dump(by_alias=True)


class StatisticsService:
    """Service providing aggregated figures for administrators."""

    @classmethod
    async def dashboard(cls) -> Dict[str, int]:
        """Return the admin dashboard figures.

        Combines the number of student accounts, the result aggregates
        and the size of the question bank.
        """
        # result_service imports this module at load time.
        from exam_simulator_api.app.services.question_service import QUESTIONS_FOLDER
        from exam_simulator_api.app.services.result_service import RESULTS
        from exam_simulator_api.app.services.user_service import USERS

        store = get_store()
        users = store.load(USERS)
        result_stats = aggregate_results(store.load(RESULTS))
        set_names = store.names(QUESTIONS_FOLDER)
        total_questions = sum(len(store.load(f"{QUESTIONS_FOLDER}/{n}")) for n in set_names)
        return DashboardStats(
            total_students=sum(1 for u in users if u.get("role") == "student"),
            total_tests=result_stats["totalTests"],
            unique_students=result_stats["uniqueStudents"],
            average_score=result_stats["averageScore"],
            pass_rate=result_stats["passRate"],
            total_questions=total_questions,
            available_tests=len(set_names),
        ).model_dump(by_alias=True)
