"""RXT core package.

This package contains the transform pipeline, the Encoder abstract base
class, the encoder registry and the export runner.
"""

from rxt.core.config import RXTConfig, config, load_config
from rxt.core.transform import (
    EXPORT_FORMAT_VERSION,
    EXPORT_VERSION_FIELD,
    EXPORTED_AT_FIELD,
    add_metadata,
    filter_records,
    format_timestamp,
    select_fields,
    transform,
)
from rxt.core.encoder import Encoder
from rxt.core.registry import DEFAULT_ENCODERS, EncoderRegistry, create_default_registry
from rxt.core.export_runner import ExportRunner

__all__ = [
    # Configuration
    "RXTConfig",
    "config",
    "load_config",
    # Transform pipeline
    "EXPORT_FORMAT_VERSION",
    "EXPORT_VERSION_FIELD",
    "EXPORTED_AT_FIELD",
    "add_metadata",
    "filter_records",
    "format_timestamp",
    "select_fields",
    "transform",
    # Encoders and dispatch
    "Encoder",
    "EncoderRegistry",
    "DEFAULT_ENCODERS",
    "create_default_registry",
    "ExportRunner",
]
