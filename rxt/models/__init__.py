"""RXT models package.

This package contains the Pydantic models that represent user-facing
configuration structures (YAML schemas) and results.
"""

from rxt.models.options import ExportConfig, ExportFormat, ExportOptions
from rxt.models.request import ExportRequest
from rxt.models.results import ExportOutcome

__all__ = [
    # Configuration models
    "ExportFormat",
    "ExportOptions",
    "ExportConfig",
    # Request
    "ExportRequest",
    # Result models
    "ExportOutcome",
]
