"""
Administrative file operations.

Currently only the site logo.  The frontend serves ``logo.png`` from
``settings.public_dir``; uploading a new logo keeps the previous one
as ``logo-backup-<epoch ms>.png``.
"""

import logging
import shutil
import time
from pathlib import Path
from typing import Optional

from exam_simulator_api.app.core.config import settings
from exam_simulator_api.app.core.exceptions import ValidationError

LOGO_NAME = "logo.png"

logger = logging.getLogger(__name__)


class AdminService:
    """Service for admin-only maintenance tasks."""

    @classmethod
    async def upload_logo(cls, source: Path, content_type: Optional[str]) -> Path:
        """Install ``source`` as the site logo and return the logo path.

        Only images are accepted.  An existing logo is copied to a
        timestamped backup before it is overwritten.
        """
        if not (content_type or "").startswith("image/"):
            raise ValidationError("Only image files are allowed")
        public_dir = Path(settings.public_dir)
        public_dir.mkdir(parents=True, exist_ok=True)
        logo_path = public_dir / LOGO_NAME
        if logo_path.exists():
            backup = public_dir / f"logo-backup-{int(time.time() * 1000)}.png"
            shutil.copyfile(logo_path, backup)
            logger.info("Previous logo backed up to %s", backup.name)
        shutil.copyfile(source, logo_path)
        logger.info("Logo uploaded successfully")
        return logo_path
