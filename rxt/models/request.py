"""Export request passed to the encoder registry."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from rxt.models.options import ExportFormat, ExportOptions


@dataclass
class ExportRequest:
    """A single-format export request.

    Options are validated at dispatch time, so a plain mapping is accepted
    here and malformed options surface as a failed outcome rather than an
    exception at construction.
    """

    records: Optional[Sequence[Mapping[str, Any]]]
    format: Union[str, ExportFormat]
    output_path: Union[str, Path]
    options: Optional[Union[ExportOptions, Mapping[str, Any]]] = None

    @property
    def kind(self) -> str:
        """Output kind as a plain registry key."""
        if isinstance(self.format, ExportFormat):
            return self.format.value
        return str(self.format).strip().lower()
