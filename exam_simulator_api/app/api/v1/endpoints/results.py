"""
Result endpoints.

Students submit results and read their own history.  Administrators
list every result with aggregate stats, export CSV files (directly or
through the cloud mirror) and delete individual results.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body
from fastapi.responses import Response

from exam_simulator_api.app.services.cloud_storage_service import CloudStorageService
from exam_simulator_api.app.services.result_service import ResultService

router = APIRouter()


def _csv_response(filename: str, csv_text: str) -> Response:
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("", response_model=Dict[str, Any])
async def submit_result(body: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Store a finished test.

    ``userName``, ``testName`` and a numeric ``score`` are required;
    any other fields are stored as sent.
    """
    result_id = await ResultService.submit(body)
    return {"success": True, "resultId": result_id}


@router.get("/user/{user_id}", response_model=Dict[str, Any])
async def user_results(user_id: str) -> Dict[str, Any]:
    """Return one user's results, newest first."""
    results = await ResultService.for_user(user_id)
    return {"success": True, "results": results, "count": len(results)}


@router.get("/admin/all", response_model=Dict[str, Any])
async def all_results() -> Dict[str, Any]:
    """Return every result, newest first, with aggregate stats."""
    data = await ResultService.all_with_stats()
    return {"success": True, **data}


@router.get("/export/csv")
async def export_csv() -> Response:
    """Download all results as a CSV attachment."""
    filename, csv_text = await ResultService.export_csv()
    return _csv_response(filename, csv_text)


@router.get("/export/csv-cloud")
async def export_csv_cloud():
    """Upload a CSV export to cloud storage and return its URL.

    If the upload fails the CSV is returned as a download instead.
    """
    outcome = await ResultService.export_to_cloud()
    if not outcome.get("success"):
        return _csv_response(outcome["filename"], outcome["csv"])
    return {
        "success": True,
        "message": "CSV uploaded to cloud storage",
        "url": outcome["url"],
        "filename": outcome["filename"],
    }


@router.get("/csv-files", response_model=Dict[str, Any])
async def list_csv_files() -> Dict[str, Any]:
    files = await CloudStorageService.list_csv_files()
    return {"success": True, "files": files}


@router.delete("/csv-cloud/{filename}", response_model=Dict[str, Any])
async def delete_csv_file(filename: str) -> Dict[str, Any]:
    await CloudStorageService.delete_csv_file(filename)
    return {"success": True, "message": "CSV file deleted successfully"}


@router.delete("/{result_id}", response_model=Dict[str, Any])
async def delete_result(result_id: str) -> Dict[str, Any]:
    """Delete one result.  Unknown ids give 404 and change nothing."""
    await ResultService.delete(result_id)
    return {"success": True, "message": "Result deleted successfully"}
