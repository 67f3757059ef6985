"""
Scratch handling for multipart uploads.

Uploaded files are copied into ``settings.upload_dir`` before they are
processed.  ``scratch_upload`` owns that copy: it is removed when the
``with`` block exits, whether processing succeeded, failed validation
or raised unexpectedly.
"""

import logging
import os
import random
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import UploadFile

from .config import settings
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _scratch_name(field_name: str, original: Optional[str]) -> str:
    suffix = Path(original or "").suffix
    return f"{field_name}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"


@contextmanager
def scratch_upload(upload: UploadFile, field_name: str = "file", max_bytes: Optional[int] = None) -> Iterator[Path]:
    """Copy ``upload`` into the scratch folder and yield its path.

    Raises ``ValidationError`` if the upload exceeds ``max_bytes``
    (defaults to ``settings.max_upload_bytes``).  The scratch copy is
    deleted on every exit path.
    """
    limit = settings.max_upload_bytes if max_bytes is None else max_bytes
    directory = Path(settings.upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / _scratch_name(field_name, upload.filename)
    try:
        written = 0
        with open(path, "wb") as fh:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > limit:
                    raise ValidationError(f"File too large (limit {limit // (1024 * 1024)} MB)")
                fh.write(chunk)
        yield path
    finally:
        if path.exists():
            os.unlink(path)
            logger.debug("Removed scratch upload %s", path.name)
