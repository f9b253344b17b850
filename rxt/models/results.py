"""Result model for export operations."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field as PydanticField


class ExportOutcome(BaseModel):
    """Result of one export attempt.

    A failed outcome covers configuration errors, empty results and I/O
    faults alike; only the diagnostic text tells them apart.
    """

    success: bool = PydanticField(
        ...,
        description="Whether an artifact was written",
    )

    format: str = PydanticField(
        ...,
        description="Requested output kind",
    )

    file_path: Optional[str] = PydanticField(
        None,
        description="Location of the written artifact",
    )

    diagnostic: Optional[str] = PydanticField(
        None,
        description="Human-readable explanation of the outcome",
    )

    records_received: int = PydanticField(
        0,
        description="Number of input records before transformation",
        ge=0,
    )

    started_at: datetime = PydanticField(
        ...,
        description="Export start time",
    )

    completed_at: Optional[datetime] = PydanticField(
        None,
        description="Export completion time",
    )

    duration_seconds: float = PydanticField(
        0.0,
        description="Duration of the export in seconds",
        ge=0.0,
    )

    model_config = {"extra": "forbid"}
