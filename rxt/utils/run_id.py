"""Run ID generation utilities for RXT.

This module provides functions for generating run IDs and the unique
artifact paths derived from them.
"""

from __future__ import annotations

import re
import secrets
from datetime import datetime
from pathlib import Path

from rxt.core.config import config


def generate_run_id() -> str:
    """Generate a sortable, unique run ID.

    Format: YYYYMMDD_HHMMSS_<random>
    Example: 20250604_143052_a1b2c3

    The format ensures:
    - Sortable by timestamp (lexicographic ordering = chronological)
    - Human-readable date/time component
    - Uniqueness via random suffix (6 hex chars = 16M combinations)

    Returns:
        Unique run ID string
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    random_suffix = secrets.token_hex(3)  # 6 hex characters
    return f"{timestamp}_{random_suffix}"


def get_output_dir() -> Path:
    """Get the base artifact directory from centralized config.

    Returns:
        Path to output directory (absolute)
    """
    return config.get_output_dir()


def safe_name(name: str) -> str:
    """Reduce a name to characters that are safe in a file name."""
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip("-.")
    return cleaned or "export"


def get_export_path(
    name: str,
    run_id: str,
    kind: str,
    output_dir: str | Path | None = None,
) -> Path:
    """Get the artifact path for one export.

    Structure:
        {output_dir}/{name}-{run_id}.{kind}

    Args:
        name: Artifact base name (e.g., an entity type)
        run_id: Unique run identifier
        kind: Output kind, used as the file extension
        output_dir: Optional override for the output directory

    Returns:
        Path to the artifact
    """
    base_dir = Path(output_dir) if output_dir else get_output_dir()
    return base_dir / f"{safe_name(name)}-{run_id}.{kind}"
