"""
Configuration
=============

Settings come from environment variables (a ``.env`` file is loaded first
with python-dotenv). Anything can also be passed straight to ``Config(...)``,
which is what the tests do.

Environment Variables:
    PORT:               Port the server listens on (default: 3000)
    HOST:               Bind address (default: 0.0.0.0)
    DATABASE_URL:       SQLAlchemy database URL
    DATABASE_URL_FILE:  Plain-text file holding the URL, used when
                        DATABASE_URL is not set (default: database_url.txt
                        next to the backend/ folder)
    DB_CONNECT_TIMEOUT: Seconds to wait for the database (default: 10)
    UPLOADS_DIR:        Where uploaded 3D models are stored
    MAX_UPLOAD_MB:      Upload size limit in MiB (default: 50)
    CORS_ORIGINS:       Comma separated allowed origins (default: *)
    LOG_LEVEL:          Logging level (default: INFO)
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()


BACKEND_DIR = Path(__file__).resolve().parent.parent


class Config:
    """Application configuration."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        database_url_file: Optional[Path] = None,
        uploads_dir: Optional[Path] = None,
        port: Optional[int] = None,
        host: Optional[str] = None,
        db_connect_timeout: Optional[float] = None,
        max_upload_mb: Optional[int] = None,
        cors_origins: Optional[list[str]] = None,
        log_level: Optional[str] = None,
    ):
        self._database_url = database_url
        self.database_url_file = Path(
            database_url_file
            or os.getenv("DATABASE_URL_FILE", str(BACKEND_DIR.parent / "database_url.txt"))
        )
        self.uploads_dir = Path(uploads_dir or os.getenv("UPLOADS_DIR", str(BACKEND_DIR / "uploads")))
        self.port = port or int(os.getenv("PORT", "3000"))
        self.host = host or os.getenv("HOST", "0.0.0.0")
        self.db_connect_timeout = db_connect_timeout or float(os.getenv("DB_CONNECT_TIMEOUT", "10"))
        self.max_upload_mb = max_upload_mb or int(os.getenv("MAX_UPLOAD_MB", "50"))
        self.cors_origins = cors_origins or [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def database_url(self) -> str:
        """
        The database URL: explicit value, then DATABASE_URL, then the secret file.

        Raises:
            RuntimeError: If none of them yields a URL
        """
        if self._database_url:
            return self._database_url

        env_url = os.getenv("DATABASE_URL")
        if env_url:
            return env_url

        try:
            url = self.database_url_file.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise RuntimeError(
                f"Failed to read database URL from {self.database_url_file}: {e}"
            ) from e
        if not url:
            raise RuntimeError(f"Database URL file {self.database_url_file} is empty")
        return url
