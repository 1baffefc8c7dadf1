"""
Configuration loader for the job dashboard.

Loads all settings from environment variables (.env file).
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


class Config:
    """
    Centralized configuration for the dashboard.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== MongoDB =====
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "jobNotifier")
    MONGODB_COLLECTION: str = os.getenv("MONGODB_COLLECTION", "seenJobs")

    # ===== Auth =====
    # Shared secret a user enters to unlock mutations (save/archive/applied)
    AUTH_SECRET: str = os.getenv("AUTH_SECRET", "")
    FLASK_SECRET_KEY: str = os.getenv("FLASK_SECRET_KEY", "")

    # ===== Listing =====
    DEFAULT_PAGE_SIZE: int = _int_env("DEFAULT_PAGE_SIZE", 20)
    MAX_PAGE_SIZE: int = _int_env("MAX_PAGE_SIZE", 100)

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "simple")  # simple | json

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required configuration is present.
        Raises ValueError if critical settings are missing.
        """
        required_settings = {
            "MONGODB_URI": cls.MONGODB_URI,
            "AUTH_SECRET": cls.AUTH_SECRET,
        }

        missing = [name for name, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if cls.DEFAULT_PAGE_SIZE <= 0 or cls.DEFAULT_PAGE_SIZE > cls.MAX_PAGE_SIZE:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE ({cls.MAX_PAGE_SIZE})"
            )

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  MongoDB: {'✓ Configured' if cls.MONGODB_URI else '✗ Missing'} ({cls.MONGODB_DATABASE}.{cls.MONGODB_COLLECTION})
  Auth secret: {'✓ Configured' if cls.AUTH_SECRET else '✗ Missing'}
  Page size: default {cls.DEFAULT_PAGE_SIZE}, max {cls.MAX_PAGE_SIZE}
  Logging: {cls.LOG_LEVEL} ({cls.LOG_FORMAT})
        """.strip()
