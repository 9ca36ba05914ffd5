"""Centralized initialization for all form_builder entry points.

The API, the CLI and the Streamlit client call ensure_initialized() before
reading settings so a project-level .env is honoured the same way everywhere.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from form_builder.config import FormBuilderSettings

logger = logging.getLogger(__name__)

# Module-level state
_initialized: bool = False
_settings: Optional[FormBuilderSettings] = None


def _find_project_root(start_path: Optional[Path] = None) -> Path:
    """Find project root by looking for pyproject.toml or .env.

    Args:
        start_path: Starting path for search. Defaults to the working directory.

    Returns:
        Project root directory.
    """
    current = start_path or Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists() or (parent / ".env").exists():
            return parent
    return current


def _load_env(project_root: Path) -> bool:
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)
        logger.debug(f"Loaded .env from {env_path}")
        return True
    logger.debug(f"No .env found at {env_path}")
    return False


def ensure_initialized(start_path: Optional[Path] = None) -> FormBuilderSettings:
    """Load .env once per process and return the settings."""
    global _initialized, _settings
    if not _initialized:
        _load_env(_find_project_root(start_path))
        _settings = FormBuilderSettings.from_env()
        _initialized = True
    return _settings


def get_settings() -> FormBuilderSettings:
    return ensure_initialized()


def reset_for_testing() -> None:
    """Reset initialization state for test isolation."""
    global _initialized, _settings
    _initialized = False
    _settings = None
