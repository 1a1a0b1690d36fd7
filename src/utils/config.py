"""Configuration loading and validation for tubehub."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000"


def load_config() -> dict:
    """Load configuration from environment variables."""

    # Helper function to resolve paths relative to project root
    def resolve_path(path: str | None, default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    config = {
        # Storage
        "video_db_path": resolve_path(os.getenv("VIDEO_DB_PATH"), ".tubehub/videos.db"),
        # Suggestion engine
        "suggestion_default_limit": int(os.getenv("SUGGESTION_DEFAULT_LIMIT", "10")),
        "suggestion_max_limit": int(os.getenv("SUGGESTION_MAX_LIMIT", "50")),
        "suggestion_pool_multiplier": int(os.getenv("SUGGESTION_POOL_MULTIPLIER", "10")),
        # Video listing
        "list_default_limit": int(os.getenv("LIST_DEFAULT_LIMIT", "20")),
        # Logging
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": os.getenv("LOG_JSON", "false").lower() == "true",
        # API
        "cors_origins": [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ],
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    for key in (
        "suggestion_default_limit",
        "suggestion_max_limit",
        "suggestion_pool_multiplier",
        "list_default_limit",
    ):
        value = config.get(key)
        if not isinstance(value, int) or value < 1:
            errors.append(f"{key.upper()} must be a positive integer")

    default_limit = config.get("suggestion_default_limit")
    max_limit = config.get("suggestion_max_limit")
    if isinstance(default_limit, int) and isinstance(max_limit, int) and default_limit > max_limit:
        errors.append("SUGGESTION_DEFAULT_LIMIT cannot exceed SUGGESTION_MAX_LIMIT")

    if config.get("log_level", "INFO").upper() not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        errors.append(f"Unsupported LOG_LEVEL: {config.get('log_level')}")

    db_path = config.get("video_db_path")
    if not db_path:
        errors.append("VIDEO_DB_PATH is required")
    else:
        try:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            errors.append(f"Cannot create database folder: {e}")

    return errors
