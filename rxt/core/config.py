"""RXT configuration management.

This module centralizes all configuration loading from environment variables
and provides sensible defaults. All modules should import configuration
values from here rather than reading environment variables directly.

Environment Variables:
    RXT_OUTPUT_DIR: Base directory for artifacts written by ExportRunner
                    Default: <system temp dir>/rxt-exports

    RXT_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                   Default: INFO

    RXT_LOG_FORMAT: Log output format (text, json)
                    Default: text

    RXT_DEFAULT_FORMAT: Output kind used when none is specified
                        Default: csv

    RXT_JSON_INDENT: Indentation of JSON artifacts
                     Default: 2

    RXT_PDF_PAGE_SIZE: Page size of PDF artifacts (letter, a4)
                       Default: letter

    RXT_PDF_FONT_SIZE: Body font size of PDF artifacts, in points
                       Default: 10

    RXT_CSV_ENCODING: Text encoding of CSV artifacts
                      Default: utf-8
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path


def _get_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key, "")
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


def _default_output_dir() -> Path:
    return Path(_get_str("RXT_OUTPUT_DIR", str(Path(tempfile.gettempdir()) / "rxt-exports")))


@dataclass
class RXTConfig:
    """RXT configuration container.

    All configuration values are loaded from environment variables
    with sensible defaults.

    Usage:
        from rxt.core.config import config

        output_dir = config.get_output_dir()
        indent = config.json_indent
    """

    # Output Configuration
    output_dir: Path = field(default_factory=_default_output_dir)
    default_format: str = field(default_factory=lambda: _get_str("RXT_DEFAULT_FORMAT", "csv").lower())

    # Logging Configuration
    log_level: str = field(default_factory=lambda: _get_str("RXT_LOG_LEVEL", "INFO").upper())
    log_format: str = field(default_factory=lambda: _get_str("RXT_LOG_FORMAT", "text").lower())

    # Encoder Configuration
    json_indent: int = field(default_factory=lambda: _get_int("RXT_JSON_INDENT", 2))
    pdf_page_size: str = field(default_factory=lambda: _get_str("RXT_PDF_PAGE_SIZE", "letter").lower())
    pdf_font_size: int = field(default_factory=lambda: _get_int("RXT_PDF_FONT_SIZE", 10))
    csv_encoding: str = field(default_factory=lambda: _get_str("RXT_CSV_ENCODING", "utf-8"))

    def __post_init__(self):
        """Validate configuration after initialization."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_levels:
            raise ValueError(
                f"Invalid RXT_LOG_LEVEL: {self.log_level}. "
                f"Must be one of: {valid_levels}"
            )

        valid_log_formats = {"text", "json"}
        if self.log_format not in valid_log_formats:
            raise ValueError(
                f"Invalid RXT_LOG_FORMAT: {self.log_format}. "
                f"Must be one of: {valid_log_formats}"
            )

        valid_page_sizes = {"letter", "a4"}
        if self.pdf_page_size not in valid_page_sizes:
            raise ValueError(
                f"Invalid RXT_PDF_PAGE_SIZE: {self.pdf_page_size}. "
                f"Must be one of: {valid_page_sizes}"
            )

        if self.json_indent < 0:
            raise ValueError(f"RXT_JSON_INDENT must be >= 0, got {self.json_indent}")

        if not 6 <= self.pdf_font_size <= 24:
            raise ValueError(f"RXT_PDF_FONT_SIZE must be between 6 and 24, got {self.pdf_font_size}")

        if not self.default_format:
            raise ValueError("RXT_DEFAULT_FORMAT must not be empty")

    def get_output_dir(self) -> Path:
        """Get output directory as an absolute path.

        Returns:
            Absolute path to the artifact directory
        """
        path = self.output_dir
        if not path.is_absolute():
            path = Path.cwd() / path
        return path

    def as_dict(self) -> dict:
        """Export configuration as dictionary.

        Returns:
            Dictionary of all configuration values
        """
        return {
            "output_dir": str(self.output_dir),
            "default_format": self.default_format,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "json_indent": self.json_indent,
            "pdf_page_size": self.pdf_page_size,
            "pdf_font_size": self.pdf_font_size,
            "csv_encoding": self.csv_encoding,
        }


def load_config() -> RXTConfig:
    """Load configuration from environment.

    Creates a new RXTConfig instance by reading current environment
    variables. Call this to refresh config if environment has changed.

    Returns:
        New RXTConfig instance
    """
    return RXTConfig()


# Global configuration instance - loaded once at import time
# Use load_config() to refresh if needed
config = load_config()
