"""RXT - The Record Export Tool."""

__version__ = "0.1.0"

# Re-export key models for convenience
from rxt.models import (
    ExportConfig,
    ExportFormat,
    ExportOptions,
    ExportOutcome,
    ExportRequest,
)

# Re-export core classes for custom encoders
from rxt.core import Encoder, EncoderRegistry, ExportRunner, create_default_registry, transform

# Re-export encoder implementations
from rxt.encoders import CSVEncoder, JSONEncoder, PDFEncoder

__all__ = [
    # Version
    "__version__",
    # Models
    "ExportConfig",
    "ExportFormat",
    "ExportOptions",
    "ExportOutcome",
    "ExportRequest",
    # Core
    "Encoder",
    "EncoderRegistry",
    "ExportRunner",
    "create_default_registry",
    "transform",
    # Encoders
    "CSVEncoder",
    "JSONEncoder",
    "PDFEncoder",
]
