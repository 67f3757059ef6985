"""
Business logic for test results.

All results for all users are kept in one shared document,
``results/all_results``.  Filtering by user and ordering by recency
happen here, after loading.  Submissions go through
``RecordStore.update`` so that concurrent submits in one process are
all kept.
"""

import logging
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError as PydanticValidationError

from exam_simulator_api.app.core.exceptions import NotFoundError, ValidationError
from exam_simulator_api.app.core.store import get_store, new_record_id, utc_timestamp
from exam_simulator_api.app.schemas.result import ResultCreate
from exam_simulator_api.app.services.cloud_storage_service import CloudStorageService
from exam_simulator_api.app.services.export_service import export_filename, results_to_csv
from exam_simulator_api.app.services.statistics_service import aggregate_results

RESULTS = "results/all_results"

logger = logging.getLogger(__name__)


def newest_first(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # Timestamps share one ISO-8601 UTC format, so string order is time order.
    return sorted(results, key=lambda r: str(r.get("timestamp") or ""), reverse=True)


class ResultService:
    """Record, query, export and delete test results."""

    @classmethod
    async def submit(cls, body: Dict[str, Any]) -> str:
        """Store a submitted result and return its generated id.

        The stored record is the submitted body plus ``id`` and
        ``timestamp``; client supplied values for those two keys are
        replaced.
        """
        try:
            ResultCreate.model_validate(body)
        except PydanticValidationError:
            raise ValidationError("Missing required fields: userName, testName, score")

        def _append(results: List[Dict[str, Any]]) -> str:
            record = dict(body)
            record["id"] = new_record_id("result", results)
            record["timestamp"] = utc_timestamp()
            results.append(record)
            return record["id"]

        result_id = get_store().update(RESULTS, _append)
        logger.info("Result saved: %s - %s - %s%%", body.get("userName"), body.get("testName"), body.get("score"))
        return result_id

    @classmethod
    async def for_user(cls, user_id: str) -> List[Dict[str, Any]]:
        """Return the results of one user, newest first."""
        return newest_first([r for r in get_store().load(RESULTS) if r.get("userId") == user_id])

    @classmethod
    async def all_with_stats(cls) -> Dict[str, Any]:
        """Return every result, newest first, with aggregate stats."""
        results = newest_first(get_store().load(RESULTS))
        return {"results": results, "count": len(results), "stats": aggregate_results(results)}

    @classmethod
    async def delete(cls, result_id: str) -> None:
        """Remove one result.

        Raises ``NotFoundError`` if the results document or the id does
        not exist; in both cases nothing is written.
        """
        store = get_store()
        if not store.exists(RESULTS):
            raise NotFoundError("No results found")

        def _remove(results: List[Dict[str, Any]]) -> None:
            remaining = [r for r in results if r.get("id") != result_id]
            if len(remaining) == len(results):
                raise NotFoundError("Result not found")
            results[:] = remaining

        store.update(RESULTS, _remove)
        logger.info("Result %s deleted", result_id)

    @classmethod
    async def export_csv(cls) -> Tuple[str, str]:
        """Return ``(filename, csv_text)`` for all stored results."""
        store = get_store()
        if not store.exists(RESULTS):
            raise NotFoundError("No results to export")
        return export_filename(), results_to_csv(store.load(RESULTS))

    @classmethod
    async def export_to_cloud(cls) -> Dict[str, Any]:
        """Export results and mirror the CSV to cloud storage.

        Returns the upload outcome together with the CSV itself, so the
        caller can serve the file directly when ``success`` is false.
        """
        filename, csv_text = await cls.export_csv()
        outcome = await CloudStorageService.upload_csv(csv_text, filename)
        if not outcome.get("success"):
            logger.warning("Cloud export failed, falling back to direct download")
        return {**outcome, "filename": filename, "csv": csv_text}
