"""Record transform pipeline.

This module implements the preprocessing shared by every encoder:
filter -> project -> annotate. All functions are pure; they build new
record dicts and never mutate their input.

Examples:
    >>> records = [{"id": 1, "status": "active"}, {"id": 2, "status": "inactive"}]
    >>> options = ExportOptions(filters={"status": "active"}, fields=["id"])
    >>> transform(records, options, datetime(2024, 1, 1, tzinfo=timezone.utc))
    [{'id': 1}]
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence, Union

from rxt.exceptions import TransformError
from rxt.models.options import ExportOptions

EXPORTED_AT_FIELD = "_exportedAt"
EXPORT_VERSION_FIELD = "_exportVersion"
EXPORT_FORMAT_VERSION = "1.0.0"


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC.

    Examples:
        >>> format_timestamp(datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc))
        '2024-05-01T12:30:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _values_match(actual: Any, expected: Any) -> bool:
    # bool is an int subclass; True == 1 must not count as a match
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    if type(actual) is not type(expected) and not (
        isinstance(actual, (int, float)) and isinstance(expected, (int, float))
    ):
        return False
    return actual == expected


def filter_records(
    records: Sequence[Mapping[str, Any]],
    filters: Mapping[str, Any],
) -> list[Mapping[str, Any]]:
    """Keep records whose values equal every filter value exactly.

    Records missing a filtered field never match. No type coercion is
    applied: the string "1" does not match the number 1.

    Args:
        records: Input records, in source order
        filters: Field name -> required value

    Returns:
        Matching records, in their original order
    """
    missing = object()
    return [
        record
        for record in records
        if all(
            _values_match(record.get(key, missing), value)
            for key, value in filters.items()
        )
    ]


def select_fields(
    records: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
) -> list[dict[str, Any]]:
    """Project each record onto the selected fields, in selection order.

    Fields named in the selection but absent from a record are omitted,
    not filled with None.
    """
    return [{name: record[name] for name in fields if name in record} for record in records]


def add_metadata(
    records: Sequence[Mapping[str, Any]],
    exported_at: Union[datetime, str],
) -> list[dict[str, Any]]:
    """Stamp every record with the export timestamp and format version.

    The reserved fields overwrite any existing fields of the same name.
    Every record receives the same timestamp value.
    """
    stamp = format_timestamp(exported_at) if isinstance(exported_at, datetime) else exported_at
    return [
        {**record, EXPORTED_AT_FIELD: stamp, EXPORT_VERSION_FIELD: EXPORT_FORMAT_VERSION}
        for record in records
    ]


def transform(
    records: Sequence[Mapping[str, Any]],
    options: Optional[ExportOptions],
    exported_at: Union[datetime, str],
) -> list[dict[str, Any]]:
    """Apply filter -> project -> annotate to a record collection.

    Each step runs only if configured. With no options set, the result
    equals the input (as new dicts, same order).

    Args:
        records: Input record collection
        options: Transform options, or None for identity
        exported_at: Timestamp captured once per export call

    Returns:
        Transformed records as new dicts

    Raises:
        TransformError: If records is None or contains a non-mapping
    """
    if records is None:
        raise TransformError("Record collection must not be None")

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise TransformError(
                f"Record at position {index} is {type(record).__name__}, expected a mapping"
            )

    options = options or ExportOptions()
    result: Sequence[Mapping[str, Any]] = records

    if options.filters:
        result = filter_records(result, options.filters)

    if options.fields:
        result = select_fields(result, options.fields)

    if options.include_metadata:
        return add_metadata(result, exported_at)

    return [dict(record) for record in result]
