"""Runtime settings for the backend, the HTTP client and the CLI."""

import os
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_UPLOAD_BYTES = 1024 * 1024  # 1 MiB


class FormBuilderSettings(BaseModel):
    """Settings for the form builder.

    Attributes:
        data_dir: Root directory of the file store.
        api_url: Base URL of the backend API, used by the HTTP gateways.
        max_upload_bytes: Size limit for uploaded schema files.
        cors_origins: Origins allowed to call the API from a browser.
        request_timeout: HTTP client timeout in seconds.

    Example:
        >>> settings = FormBuilderSettings(data_dir=Path("/tmp/forms"))
    """

    data_dir: Path = Path("output/forms")
    api_url: str = "http://localhost:8000/api"
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:8501"]
    )
    request_timeout: float = Field(default=10.0, gt=0)

    model_config = {"extra": "forbid"}

    @field_validator("data_dir", mode="before")
    @classmethod
    def convert_data_dir(cls, v):
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @classmethod
    def from_env(cls, prefix: str = "FORM_BUILDER_") -> "FormBuilderSettings":
        """Create settings from environment variables.

        Environment variables:
            {prefix}DATA_DIR: Store root directory
            {prefix}API_URL: Backend base URL
            {prefix}MAX_UPLOAD_BYTES: Upload size limit in bytes
            {prefix}CORS_ORIGINS: Comma-separated allowed origins
            {prefix}REQUEST_TIMEOUT: HTTP timeout in seconds

        Args:
            prefix: Environment variable prefix (default: FORM_BUILDER_)

        Returns:
            FormBuilderSettings with values from environment
        """
        kwargs = {}

        data_dir = os.getenv(f"{prefix}DATA_DIR")
        if data_dir:
            kwargs["data_dir"] = Path(data_dir)

        api_url = os.getenv(f"{prefix}API_URL")
        if api_url:
            kwargs["api_url"] = api_url

        max_upload_bytes = os.getenv(f"{prefix}MAX_UPLOAD_BYTES")
        if max_upload_bytes:
            kwargs["max_upload_bytes"] = int(max_upload_bytes)

        cors_origins = os.getenv(f"{prefix}CORS_ORIGINS")
        if cors_origins:
            kwargs["cors_origins"] = [o.strip() for o in cors_origins.split(",") if o.strip()]

        request_timeout = os.getenv(f"{prefix}REQUEST_TIMEOUT")
        if request_timeout:
            kwargs["request_timeout"] = float(request_timeout)

        return cls(**kwargs)
