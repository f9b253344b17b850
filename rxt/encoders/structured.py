"""JSON encoder implementation.

Writes the transformed collection inside an envelope carrying export
metadata:

    {
      "metadata": {"exportedAt": "...", "recordCount": 2, "version": "1.0.0"},
      "data": [...]
    }
"""

from __future__ import annotations

import base64
import json
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
from uuid import UUID

from rxt.core.config import config
from rxt.core.encoder import Clock, Encoder
from rxt.core.transform import EXPORT_FORMAT_VERSION, format_timestamp
from rxt.exceptions import EncoderError


def json_default(value: Any) -> Any:
    """Convert values the json module cannot serialize natively."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise EncoderError(f"Value of type {type(value).__name__} is not JSON serializable")


class JSONEncoder(Encoder):
    """JSON encoder - indented, envelope with metadata block.

    Key order within each record follows the record's own order.

    Examples:
        >>> encoder = JSONEncoder(indent=4)
        >>> encoder.export([{"id": 1, "name": "Alice"}], Path("users.json"))
        True
    """

    format = "json"
    extension = "json"

    def __init__(self, clock: Optional[Clock] = None, indent: Optional[int] = None, **kwargs: Any):
        """Initialize JSON encoder.

        Args:
            clock: Callable returning the export timestamp
            indent: Indentation width (defaults to RXT_JSON_INDENT)
            **kwargs: Additional options (ignored)
        """
        super().__init__(clock=clock, **kwargs)
        self.indent = config.json_indent if indent is None else indent

    def write(self, records: list[dict[str, Any]], path: Path, exported_at: datetime) -> None:
        envelope = {
            "metadata": {
                "exportedAt": format_timestamp(exported_at),
                "recordCount": len(records),
                "version": EXPORT_FORMAT_VERSION,
            },
            "data": records,
        }

        with open(path, "w", encoding="utf-8") as f:
            json.dump(envelope, f, indent=self.indent, ensure_ascii=False, default=json_default)
            f.write("\n")
