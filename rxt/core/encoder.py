"""Base Encoder abstract class.

This module defines the Encoder interface for serializing a record
collection into one output kind.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from rxt.core.transform import transform
from rxt.exceptions import EncoderError
from rxt.models.options import ExportOptions

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


class Encoder(ABC):
    """Base class for serializing records to one output kind.

    Encoders own the transform step: each call to export() runs the shared
    pipeline on the raw records, so the same collection can be handed to
    several encoders without results leaking between them.

    The export lifecycle:
    1. transform() - filter, project and annotate the records
    2. write() - serialize to a temporary sibling of the target
    3. commit - atomically rename the temporary file onto the target
    4. rollback - on failure, remove the temporary file

    Examples:
        Exporting with a fixed clock:
        >>> encoder = CSVEncoder(clock=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc))
        >>> encoder.export([{"id": 1}], Path("out/users.csv"))
        True
    """

    #: Registry key for this encoder
    format: str = ""

    #: File extension written by this encoder (without the dot)
    extension: str = ""

    def __init__(self, clock: Optional[Clock] = None, **kwargs: Any):
        """Initialize encoder.

        Args:
            clock: Callable returning the export timestamp (defaults to UTC now)
            **kwargs: Encoder-specific options
        """
        self.clock = clock or utc_now

    def export(
        self,
        records: Sequence[Mapping[str, Any]],
        output_path: Union[str, Path],
        options: Optional[ExportOptions] = None,
    ) -> bool:
        """Transform records and write them to output_path.

        Args:
            records: Raw record collection
            output_path: Target file; missing parent directories are created
            options: Transform options

        Returns:
            True if an artifact was written, False if nothing was left to
            export after transformation

        Raises:
            EncoderError: If writing or serialization fails
            TransformError: If the records are not mappings
        """
        exported_at = self.clock()
        transformed = transform(records, options, exported_at)
        label = self.format.upper()

        if not transformed:
            logger.warning(
                "No data to export to %s",
                label,
                extra={"export_format": self.format},
            )
            return False

        target = Path(output_path)
        temp_location = target.with_name(f"{target.name}.tmp")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            self.write(transformed, temp_location, exported_at)
            os.replace(temp_location, target)
        except Exception as e:
            self._rollback(temp_location)
            raise EncoderError(f"Error exporting to {label}: {e}") from e

        logger.info(
            "Successfully exported %d records to %s: %s",
            len(transformed),
            label,
            target,
            extra={
                "export_format": self.format,
                "file_path": str(target),
                "record_count": len(transformed),
            },
        )
        return True

    @abstractmethod
    def write(
        self,
        records: list[dict[str, Any]],
        path: Path,
        exported_at: datetime,
    ) -> None:
        """Serialize transformed records to path.

        Args:
            records: Transformed, non-empty record collection
            path: File to create (parent directory exists)
            exported_at: Timestamp used by the transform step

        Raises:
            OSError: If the file cannot be written
            EncoderError: If a value cannot be serialized
        """
        pass

    def _rollback(self, temp_location: Path) -> None:
        try:
            temp_location.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove partial artifact %s: %s", temp_location, e)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(format={self.format!r})"
