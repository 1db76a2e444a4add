"""
Configuration module for the DEDE e-Service MCP Server.

Provides centralized configuration management with support for:
- Environment variables
- Default values
- Backend connection and session credentials
- Logging configuration
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file at project root
# config.py is in mcp-server-python/, so .env is in parent directory
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)

SUPPORTED_LOCALES = ("th", "en")


def _parse_optional_str(env_var: str) -> Optional[str]:
    """Read an environment variable, treating blank values as unset."""
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_int(env_var: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back on bad input."""
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


class Config:
    """
    Configuration class for MCP server settings.

    Supports configuration via environment variables (and .env file) with sensible defaults.
    Relative paths are resolved against the repository root.
    """

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        # Repository root detection
        self._repo_root = self._find_repo_root()

        # Backend configuration
        self.api_base_url = os.getenv("DEDE_API_BASE_URL", "http://localhost:8080").rstrip("/")
        self.api_timeout_seconds = _parse_float("DEDE_API_TIMEOUT_SECONDS", 30.0)

        # Session credentials (citizen and back-office portal are separate audiences)
        self.citizen_token = _parse_optional_str("DEDE_CITIZEN_TOKEN")
        self.citizen_user_id = _parse_optional_str("DEDE_CITIZEN_USER_ID")
        self.portal_token = _parse_optional_str("DEDE_PORTAL_TOKEN")
        self.portal_user_id = _parse_optional_str("DEDE_PORTAL_USER_ID")
        self.portal_role = os.getenv("DEDE_PORTAL_ROLE", "officer").strip() or "officer"

        # Presentation defaults
        self.locale = os.getenv("DEDE_LOCALE", "th").strip().lower() or "th"
        self.default_page_limit = _parse_int("DEDE_DEFAULT_PAGE_LIMIT", 10)
        self.min_bar_height_percent = _parse_float("DEDE_MIN_BAR_HEIGHT_PERCENT", 5.0)

        # Logging configuration
        self.log_level = os.getenv("DEDE_LOG_LEVEL", "INFO").upper()
        self.log_file = self._resolve_log_path()

        # Server configuration
        self.server_name = os.getenv("DEDE_SERVER_NAME", "dede-eservice-mcp-server")

    def _find_repo_root(self) -> Path:
        """Return the repository root (the parent of mcp-server-python/)."""
        return Path(__file__).resolve().parent.parent

    def _resolve_log_path(self) -> Optional[Path]:
        """
        Resolve the log file path from environment.

        If DEDE_LOG_FILE is set, logs will be written to that file.
        Otherwise, logs go to stderr only.

        Returns:
            Path to log file, or None for stderr-only logging
        """
        log_env = os.getenv("DEDE_LOG_FILE")
        if not log_env:
            return None

        log_path = Path(log_env)
        if log_path.is_absolute():
            return log_path
        else:
            # Relative to repo root
            return self._repo_root / log_path

    def setup_logging(self):
        """
        Configure logging based on configuration settings.

        Sets up logging to stderr and optionally to a file.
        Log level is controlled by DEDE_LOG_LEVEL. Tokens are never logged.
        """
        numeric_level = getattr(logging, self.log_level, logging.INFO)

        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # Remove existing handlers to avoid duplicates
        root_logger.handlers.clear()

        # Always add stderr handler (stdout carries the MCP protocol)
        stderr_handler = logging.StreamHandler()
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(formatter)
        root_logger.addHandler(stderr_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.info(f"Logging to file: {self.log_file}")

        logging.info(f"Log level set to: {self.log_level}")
        logging.info(f"Backend API: {self.api_base_url}")
        logging.info(f"Portal role: {self.portal_role}, locale: {self.locale}")

    def validate(self) -> list[str]:
        """
        Validate configuration and return any warnings.

        Returns:
            List of warning messages (empty if all valid)
        """
        warnings = []

        if not self.api_base_url.startswith(("http://", "https://")):
            warnings.append(f"DEDE_API_BASE_URL does not look like an HTTP URL: {self.api_base_url}")

        if self.api_timeout_seconds <= 0:
            warnings.append(
                f"DEDE_API_TIMEOUT_SECONDS must be positive, got {self.api_timeout_seconds}"
            )

        if not self.citizen_token:
            warnings.append(
                "DEDE_CITIZEN_TOKEN is not set. Citizen tools will call the backend anonymously."
            )
        if not self.portal_token:
            warnings.append(
                "DEDE_PORTAL_TOKEN is not set. Back-office tools will call the backend anonymously."
            )

        if self.locale not in SUPPORTED_LOCALES:
            warnings.append(
                f"Unsupported DEDE_LOCALE '{self.locale}'; labels fall back to 'th'"
            )

        if self.default_page_limit < 1:
            warnings.append(
                f"DEDE_DEFAULT_PAGE_LIMIT must be at least 1, got {self.default_page_limit}"
            )

        # Check if log file directory is writable (if configured)
        if self.log_file:
            log_dir = self.log_file.parent
            if not log_dir.exists():
                try:
                    log_dir.mkdir(parents=True, exist_ok=True)
                except Exception as e:
                    warnings.append(f"Cannot create log directory {log_dir}: {e}")
            elif not os.access(log_dir, os.W_OK):
                warnings.append(f"Log directory not writable: {log_dir}")

        return warnings


# Global configuration instance
config = Config()


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Global Config instance
    """
    return config
