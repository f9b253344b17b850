"""RXT utilities package.

This package contains utility functions for configuration and record
file parsing, logging setup, artifact naming and PDF writing.
"""

from rxt.utils.logging import JSONFormatter, configure_logging
from rxt.utils.pdf import PDFStreamWriter
from rxt.utils.run_id import generate_run_id, get_export_path, get_output_dir
from rxt.utils.yaml_parser import load_export_config, load_records, load_yaml, substitute_env_vars

__all__ = [
    "JSONFormatter",
    "PDFStreamWriter",
    "configure_logging",
    "generate_run_id",
    "get_export_path",
    "get_output_dir",
    "load_export_config",
    "load_records",
    "load_yaml",
    "substitute_env_vars",
]
