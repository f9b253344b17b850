"""Export option and configuration models.

This module defines the user-facing configuration structures that control
how a record collection is transformed and which encoder serializes it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field as PydanticField, field_validator


class ExportFormat(str, Enum):
    """Built-in output kinds."""

    CSV = "csv"
    JSON = "json"
    PDF = "pdf"


class ExportOptions(BaseModel):
    """Options applied by the transform pipeline before encoding.

    Examples:
        >>> ExportOptions(
        ...     include_metadata=True,
        ...     fields=["id", "name"],
        ...     filters={"status": "active"},
        ... )
    """

    include_metadata: bool = PydanticField(
        False,
        description="Stamp every record with export timestamp and version fields",
    )

    fields: Optional[list[str]] = PydanticField(
        None,
        description="Ordered field selection; absent fields are omitted",
    )

    filters: Optional[dict[str, Any]] = PydanticField(
        None,
        description="Exact-match filter: field name -> required value",
    )

    model_config = {"extra": "forbid"}

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        """Require a non-empty selection and collapse duplicates."""
        if v is None:
            return v
        if not v:
            raise ValueError("Field selection must not be empty")

        seen: list[str] = []
        for name in v:
            if not name:
                raise ValueError("Field names must be non-empty strings")
            if name not in seen:
                seen.append(name)
        return seen


class ExportConfig(BaseModel):
    """Complete export configuration (YAML schema).

    Examples:
        >>> ExportConfig(format="csv", options=ExportOptions(fields=["id"]))
    """

    format: str = PydanticField(
        ...,
        description="Output kind; must resolve to a registered encoder",
    )

    options: ExportOptions = PydanticField(
        default_factory=ExportOptions,
        description="Transform options",
    )

    encoders: dict[str, str] = PydanticField(
        default_factory=dict,
        description="Additional encoders: kind -> full class path",
    )

    model_config = {"extra": "forbid"}

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Normalize the output kind."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Export format must not be empty")
        return v
