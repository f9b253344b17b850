"""Export runner.

This module provides the entry point used by callers that hold a resolved
record collection and an export configuration: it picks a unique artifact
location, dispatches to the registry and reports an ExportOutcome.

Artifact retention is left to the caller; the runner never deletes what it
writes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from rxt.core.registry import EncoderRegistry, create_default_registry
from rxt.exceptions import ConfigurationError
from rxt.models.options import ExportConfig, ExportFormat
from rxt.models.request import ExportRequest
from rxt.models.results import ExportOutcome
from rxt.utils.run_id import generate_run_id, get_export_path

logger = logging.getLogger(__name__)


class ExportRunner:
    """Run exports of resolved record collections.

    Examples:
        >>> runner = ExportRunner()
        >>> outcome = runner.export(records, ExportConfig(format="csv"), name="users")
        >>> outcome.file_path
        '/tmp/rxt-exports/users-20250604_143052_a1b2c3.csv'
    """

    def __init__(self, registry: Optional[EncoderRegistry] = None):
        """Initialize export runner.

        Args:
            registry: Encoder registry (defaults to the built-in encoders)
        """
        self.registry = registry or create_default_registry()

    def export(
        self,
        records: Optional[Sequence[Mapping[str, Any]]],
        export_config: ExportConfig,
        output_dir: Optional[Union[str, Path]] = None,
        name: str = "export",
        run_id: Optional[str] = None,
    ) -> ExportOutcome:
        """Export records in the configured format.

        Args:
            records: Resolved record collection
            export_config: Format, transform options and extra encoders
            output_dir: Artifact directory (defaults to RXT_OUTPUT_DIR)
            name: Artifact base name (e.g., an entity type)
            run_id: Run identifier (auto-generated if not provided)

        Returns:
            ExportOutcome with the artifact location on success

        Raises:
            ConfigurationError: If records is not iterable
        """
        started_at = datetime.now()
        kind = export_config.format
        records = _materialize(records)

        if not records:
            logger.warning("No data found for %s", name, extra={"export_format": kind})
            return ExportOutcome(
                success=False,
                format=kind,
                diagnostic=f"No data found for {name}",
                started_at=started_at,
                completed_at=datetime.now(),
            )

        try:
            registry = self._resolve_registry(export_config)
        except ConfigurationError as e:
            logger.error("Encoder configuration failed: %s", e, extra={"export_format": kind})
            return ExportOutcome(
                success=False,
                format=kind,
                diagnostic=str(e),
                records_received=len(records),
                started_at=started_at,
                completed_at=datetime.now(),
            )

        run_id = run_id or generate_run_id()
        output_path = get_export_path(name, run_id, kind, output_dir)
        logger.debug(
            "Exporting %d records to %s",
            len(records),
            output_path,
            extra={"export_format": kind, "run_id": run_id},
        )

        outcome = registry.dispatch(
            ExportRequest(
                records=records,
                format=kind,
                output_path=output_path,
                options=export_config.options,
            )
        )
        if outcome.success:
            outcome.diagnostic = f"Successfully exported {len(records)} records to {kind.upper()}"
        else:
            outcome.diagnostic = outcome.diagnostic or f"Failed to export data to {kind.upper()}"
        return outcome

    def export_many(
        self,
        records: Optional[Sequence[Mapping[str, Any]]],
        export_config: ExportConfig,
        formats: Iterable[Union[str, ExportFormat]],
        output_dir: Optional[Union[str, Path]] = None,
        name: str = "export",
    ) -> dict[str, ExportOutcome]:
        """Export records to several formats under one run id.

        The formats override export_config.format; options and extra
        encoders are shared.

        Returns:
            Mapping of kind -> ExportOutcome
        """
        records = _materialize(records)
        run_id = generate_run_id()
        outcomes: dict[str, ExportOutcome] = {}
        for fmt in formats:
            kind_config = export_config.model_copy(
                update={"format": fmt.value if isinstance(fmt, ExportFormat) else str(fmt).strip().lower()}
            )
            outcomes[kind_config.format] = self.export(
                records, kind_config, output_dir=output_dir, name=name, run_id=run_id
            )
        return outcomes

    def _resolve_registry(self, export_config: ExportConfig) -> EncoderRegistry:
        """Registry for one call: the shared one, or a copy with the configured encoders."""
        if not export_config.encoders:
            return self.registry
        registry = self.registry.copy()
        for kind, class_path in export_config.encoders.items():
            registry.register_from_path(kind, class_path)
        return registry


def _materialize(records: Any) -> Any:
    """Turn one-shot iterables (e.g. generators) into a list."""
    if records is None or isinstance(records, Sequence):
        return records
    try:
        return list(records)
    except TypeError as e:
        raise ConfigurationError(f"Records must be a sequence of mappings: {e}") from e
