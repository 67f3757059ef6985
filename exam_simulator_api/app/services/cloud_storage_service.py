"""
Firebase Storage mirror for CSV exports.

Exports are written to ``csv-exports/<filename>`` in the configured
bucket.  Uploading is best effort: ``upload_csv`` reports failure in
its return value so the caller can fall back to a direct download.
Listing and deleting raise ``InternalError`` when the bucket cannot be
reached, since there is nothing to fall back to.

The Firebase app is initialised lazily on first use with the service
account file named by ``FIREBASE_CREDENTIALS``.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, storage

from exam_simulator_api.app.core.config import settings
from exam_simulator_api.app.core.exceptions import InternalError, NotFoundError, ValidationError

CSV_FOLDER = "csv-exports"
APP_NAME = "exam-simulator"
URL_LIFETIME = timedelta(days=7)

logger = logging.getLogger(__name__)


class CloudStorageService:
    """Upload, list and delete CSV exports in Firebase Storage."""

    _app: Optional[firebase_admin.App] = None

    @classmethod
    def _bucket(cls):
        if not settings.firebase_credentials or not settings.firebase_bucket:
            raise InternalError("Cloud storage is not configured")
        if cls._app is None:
            cred = credentials.Certificate(settings.firebase_credentials)
            cls._app = firebase_admin.initialize_app(
                cred, {"storageBucket": settings.firebase_bucket}, name=APP_NAME
            )
        return storage.bucket(app=cls._app)

    @staticmethod
    def _blob_path(filename: str) -> str:
        if not filename or "/" in filename or filename in {".", ".."}:
            raise ValidationError("Invalid file name")
        return f"{CSV_FOLDER}/{filename}"

    @classmethod
    async def upload_csv(cls, csv_text: str, filename: str) -> Dict[str, Any]:
        """Upload a CSV export.

        Returns ``{"success": True, "url": ..., "filename": ...}`` on
        success and ``{"success": False, "error": ...}`` otherwise.
        """
        try:
            blob = cls._bucket().blob(cls._blob_path(filename))
            blob.upload_from_string(csv_text, content_type="text/csv")
            url = blob.generate_signed_url(expiration=URL_LIFETIME, version="v4")
        except Exception as exc:
            logger.warning("CSV upload to cloud storage failed: %s", exc)
            return {"success": False, "error": str(exc)}
        logger.info("CSV %s uploaded to cloud storage", filename)
        return {"success": True, "url": url, "filename": filename}

    @classmethod
    async def list_csv_files(cls) -> List[Dict[str, Any]]:
        """Return name, size, creation time and URL of every stored export."""
        try:
            blobs = list(cls._bucket().list_blobs(prefix=f"{CSV_FOLDER}/"))
        except InternalError:
            raise
        except Exception as exc:
            raise InternalError(f"Could not list CSV files: {exc}") from exc
        files = []
        for blob in blobs:
            name = blob.name[len(CSV_FOLDER) + 1:]
            if not name:
                continue
            files.append(
                {
                    "name": name,
                    "size": blob.size,
                    "created": blob.time_created.isoformat() if blob.time_created else None,
                    "url": blob.public_url,
                }
            )
        return files

    @classmethod
    async def delete_csv_file(cls, filename: str) -> None:
        """Delete one export.  Raises ``NotFoundError`` if it does not exist."""
        path = cls._blob_path(filename)
        try:
            blob = cls._bucket().blob(path)
            if not blob.exists():
                raise NotFoundError("CSV file not found")
            blob.delete()
        except (InternalError, NotFoundError):
            raise
        except Exception as exc:
            raise InternalError(f"Could not delete CSV file: {exc}") from exc
        logger.info("CSV %s deleted from cloud storage", filename)
