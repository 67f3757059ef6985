"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  A ``.env`` file in the working directory is
loaded first so local development does not need exported variables.
Defaults are provided for all fields; in a production deployment you
should override at least the admin password and the Firebase
credentials.
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_origins() -> List[str]:
    origins = [o.strip() for o in os.getenv("FRONTEND_URL", "").split(",") if o.strip()]
    if "http://localhost:3000" not in origins:
        origins.append("http://localhost:3000")
    return origins


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Exam Simulator API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # Routes are mounted under this prefix.
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    log_max_bytes: int = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))
    log_backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "3"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # Storage locations.  Relative paths are resolved against the
    # current working directory when the store is created.
    data_dir: str = os.getenv("DATA_DIR", "data")
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    public_dir: str = os.getenv("PUBLIC_DIR", "public")
    max_upload_mb: int = int(os.getenv("MAX_UPLOAD_MB", "10"))

    # Reporting
    pass_threshold: float = float(os.getenv("PASS_THRESHOLD", "70"))
    export_prefix: str = os.getenv("EXPORT_PREFIX", "cbda-results")

    cors_origins: List[str] = field(default_factory=_split_origins)

    # Account created on first start when no users file exists.
    admin_name: str = os.getenv("ADMIN_NAME", "Admin User")
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "admin123")

    # Firebase Storage mirror for CSV exports.  Both values are needed;
    # without them cloud exports fall back to a direct download.
    firebase_credentials: str = os.getenv("FIREBASE_CREDENTIALS", "")
    firebase_bucket: str = os.getenv("FIREBASE_BUCKET", "")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Tests adjust attributes
# on this instance directly.
settings = Settings()
