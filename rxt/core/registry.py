"""Encoder registry and dispatcher.

This module maps output kinds to encoder instances and routes export
requests to them. Dispatch never raises: configuration errors, empty
collections and encoder faults all come back as a failed outcome with a
logged reason.
"""

from __future__ import annotations

import importlib
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from rxt.core.encoder import Encoder
from rxt.exceptions import ConfigurationError, RegistryError
from rxt.models.options import ExportFormat, ExportOptions
from rxt.models.request import ExportRequest
from rxt.models.results import ExportOutcome

logger = logging.getLogger(__name__)

# Built-in encoders - maps output kind to encoder class path
DEFAULT_ENCODERS = {
    "csv": "rxt.encoders.tabular.CSVEncoder",
    "json": "rxt.encoders.structured.JSONEncoder",
    "pdf": "rxt.encoders.document.PDFEncoder",
}


def _normalize_kind(kind: Union[str, ExportFormat]) -> str:
    if isinstance(kind, ExportFormat):
        return kind.value
    return str(kind).strip().lower()


class EncoderRegistry:
    """Registry of encoders keyed by output kind.

    Registration is expected to happen once at startup; dispatch only reads
    the mapping, so a fully registered instance can be shared.

    Examples:
        >>> registry = create_default_registry()
        >>> registry.export(ExportRequest(records, "csv", "out/users.csv"))
        True
        >>> registry.export_multiple(records, "out/users", ["csv", "json"])
        {'csv': True, 'json': True}
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._encoders: dict[str, Encoder] = {}

    # === Registration ===

    def register_encoder(self, kind: Union[str, ExportFormat], encoder: Encoder) -> None:
        """Register an encoder for an output kind.

        Re-registering a kind replaces the previous encoder.

        Args:
            kind: Output kind (e.g., "csv")
            encoder: Encoder instance

        Raises:
            RegistryError: If kind is empty or encoder is not an Encoder
        """
        key = _normalize_kind(kind)
        if not key:
            raise RegistryError("Encoder kind must not be empty")
        if not isinstance(encoder, Encoder):
            raise RegistryError(
                f"Cannot register {type(encoder).__name__} for '{key}': not an Encoder"
            )

        if key in self._encoders:
            logger.debug("Replacing encoder for '%s' with %r", key, encoder)
        self._encoders[key] = encoder

    def register_from_path(self, kind: Union[str, ExportFormat], class_path: str, **kwargs: Any) -> Encoder:
        """Import an encoder class by full path, instantiate and register it.

        Args:
            kind: Output kind
            class_path: e.g., "mycompany.export.XMLEncoder"
            **kwargs: Passed to the encoder constructor

        Returns:
            The registered encoder instance

        Raises:
            ConfigurationError: If the module or class cannot be loaded
        """
        module_path, _, class_name = class_path.rpartition(".")
        if not module_path:
            raise ConfigurationError(
                f"Encoder path must be a full module path (package.module.ClassName), got: {class_path}"
            )

        encoder_class = self._load_encoder_class(module_path, class_name)
        try:
            encoder = encoder_class(**kwargs)
        except Exception as e:
            raise ConfigurationError(f"Failed to instantiate encoder '{class_path}': {e}") from e

        try:
            self.register_encoder(kind, encoder)
        except RegistryError as e:
            raise ConfigurationError(str(e)) from e
        return encoder

    def unregister_encoder(self, kind: Union[str, ExportFormat]) -> bool:
        """Remove an encoder.

        Returns:
            True if an encoder was removed, False if the kind was unknown
        """
        return self._encoders.pop(_normalize_kind(kind), None) is not None

    def get_encoder(self, kind: Union[str, ExportFormat]) -> Optional[Encoder]:
        """Look up the encoder for a kind, or None if unregistered."""
        return self._encoders.get(_normalize_kind(kind))

    @property
    def formats(self) -> list[str]:
        """Registered kinds, in registration order."""
        return list(self._encoders)

    def __contains__(self, kind: object) -> bool:
        if not isinstance(kind, (str, ExportFormat)):
            return False
        return _normalize_kind(kind) in self._encoders

    def __len__(self) -> int:
        return len(self._encoders)

    def copy(self) -> "EncoderRegistry":
        """Return a new registry sharing this one's encoder instances.

        Registrations on the copy do not affect the original.
        """
        clone = EncoderRegistry()
        clone._encoders = dict(self._encoders)
        return clone

    def _load_encoder_class(self, module_path: str, class_name: str) -> type:
        """Dynamically import and return an encoder class.

        Raises:
            ConfigurationError: If module/class not found
        """
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise ConfigurationError(
                f"Failed to import encoder module '{module_path}'.\n"
                f"Error: {e}\n"
                f"Make sure the module exists and is importable."
            ) from e

        try:
            return getattr(module, class_name)
        except AttributeError as e:
            available_classes = [name for name in dir(module) if not name.startswith("_")]
            raise ConfigurationError(
                f"Class '{class_name}' not found in module '{module_path}'.\n"
                f"Available classes: {available_classes}"
            ) from e

    # === Dispatch ===

    def dispatch(self, request: ExportRequest) -> ExportOutcome:
        """Route a request to its encoder and report the outcome.

        Never raises.

        Args:
            request: Export request

        Returns:
            ExportOutcome describing success or the reason for failure
        """
        started_at = datetime.now()
        start = time.monotonic()
        kind = request.kind
        records = request.records
        invalid_records: Optional[str] = None

        # Materialize one-shot iterables so length checks and encoders agree
        if records is not None and not isinstance(records, Sequence):
            try:
                records = list(records)
            except TypeError as e:
                invalid_records = f"Records must be a sequence of mappings: {e}"
                records = None

        received = len(records) if records is not None else 0

        def outcome(success: bool, diagnostic: str, file_path: Optional[str] = None) -> ExportOutcome:
            return ExportOutcome(
                success=success,
                format=kind,
                file_path=file_path,
                diagnostic=diagnostic,
                records_received=received,
                started_at=started_at,
                completed_at=datetime.now(),
                duration_seconds=time.monotonic() - start,
            )

        if invalid_records:
            logger.error("%s", invalid_records, extra={"export_format": kind})
            return outcome(False, invalid_records)

        if not records:
            logger.error("No data to export", extra={"export_format": kind})
            return outcome(False, "No data to export")

        try:
            options = self._resolve_options(request.options)
        except ConfigurationError as e:
            logger.error("Invalid export options: %s", e, extra={"export_format": kind})
            return outcome(False, str(e))

        encoder = self._encoders.get(kind)
        if encoder is None:
            logger.error("Unsupported export format: %s", kind, extra={"export_format": kind})
            return outcome(False, f"Unsupported export format: {kind}")

        output_path = str(request.output_path)
        try:
            exported = encoder.export(records, Path(output_path), options)
        except Exception as e:
            logger.error(
                "Export failed: %s",
                e,
                exc_info=True,
                extra={"export_format": kind, "file_path": output_path},
            )
            return outcome(False, f"Export failed: {e}")

        if not exported:
            return outcome(False, f"No records left to export to {kind.upper()} after filtering")

        return outcome(True, f"Exported {received} records to {kind.upper()}", file_path=output_path)

    def export(self, request: ExportRequest) -> bool:
        """Export a single format.

        Returns:
            True if the artifact was written, False otherwise (never raises)
        """
        return self.dispatch(request).success

    def export_multiple(
        self,
        records: Optional[Sequence[Mapping[str, Any]]],
        base_path: Union[str, Path],
        formats: Iterable[Union[str, ExportFormat]],
        options: Optional[Union[ExportOptions, Mapping[str, Any]]] = None,
    ) -> dict[str, bool]:
        """Export the same records to several formats, one after another.

        Each target is `<base_path>.<kind>`; a failure for one kind does not
        stop the others.

        Args:
            records: Raw record collection
            base_path: Path prefix without extension
            formats: Output kinds, processed in the given order
            options: Transform options shared by every kind

        Returns:
            Mapping of kind -> success
        """
        if records is not None and not isinstance(records, Sequence):
            try:
                records = list(records)
            except TypeError:
                pass  # dispatch reports the invalid collection per kind

        results: dict[str, bool] = {}
        for fmt in formats:
            kind = _normalize_kind(fmt)
            results[kind] = self.export(
                ExportRequest(
                    records=records,
                    format=kind,
                    output_path=f"{base_path}.{kind}",
                    options=options,
                )
            )
        return results

    def _resolve_options(
        self, options: Optional[Union[ExportOptions, Mapping[str, Any]]]
    ) -> Optional[ExportOptions]:
        if options is None or isinstance(options, ExportOptions):
            return options
        try:
            return ExportOptions.model_validate(dict(options))
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid export options: {e}") from e


def create_default_registry(**encoder_options: Any) -> EncoderRegistry:
    """Create a registry with the built-in CSV, JSON and PDF encoders.

    Args:
        **encoder_options: Passed to every built-in encoder (e.g., clock)

    Returns:
        Populated EncoderRegistry
    """
    registry = EncoderRegistry()
    for kind, class_path in DEFAULT_ENCODERS.items():
        registry.register_from_path(kind, class_path, **encoder_options)
    return registry
