"""
Configuration settings for the content sync pipeline.

This module defines the SyncConfig dataclass holding output locations,
the optional site build command, and the download policy.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        raise EnvironmentError(f"{name} must be a number, got: {value!r}")


@dataclass
class SyncConfig:
    """Configuration for a content sync run"""

    # Output roots
    documents_root: Path = Path("content")
    images_root: Path = Path("static/images")

    # Site-relative URL prefix written in the document `image` field
    image_url_prefix: str = "/images"

    # External build step (None disables it)
    build_command: Optional[str] = None
    build_timeout: Optional[float] = None

    # Download policy
    max_attempts: int = 3
    retry_delay: float = 5.0
    max_redirects: int = 10
    request_timeout: float = 30.0

    # Whole-run deadline in seconds (None for no deadline)
    run_timeout: Optional[float] = None

    # Append a listing of both output roots to the report
    list_files: bool = False

    def __post_init__(self):
        self.documents_root = Path(self.documents_root)
        self.images_root = Path(self.images_root)
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.max_redirects < 0:
            raise ValueError("max_redirects cannot be negative")

    @classmethod
    def from_env(cls, **overrides) -> "SyncConfig":
        """
        Build a configuration from environment variables (and .env).

        Keyword overrides that are not None take precedence over the
        environment.

        Raises:
            EnvironmentError: If a numeric variable cannot be parsed
        """
        load_dotenv()
        values = {
            "documents_root": Path(os.getenv("CONTENT_DIR", "content")),
            "images_root": Path(os.getenv("IMAGES_DIR", "static/images")),
            "image_url_prefix": os.getenv("IMAGE_URL_PREFIX", "/images"),
            "build_command": os.getenv("BUILD_COMMAND") or None,
            "build_timeout": _optional_float("BUILD_TIMEOUT"),
            "request_timeout": _optional_float("REQUEST_TIMEOUT") or 30.0,
            "run_timeout": _optional_float("RUN_TIMEOUT"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
