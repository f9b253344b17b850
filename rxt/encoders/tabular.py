"""CSV encoder implementation.

Column headers come from the first record's own field order. Records with
other fields contribute only the cells for those columns. The header and
rows are newline-joined; there is no terminator after the last row.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional

from rxt.core.config import config
from rxt.core.encoder import Clock, Encoder
from rxt.encoders.structured import json_default


def quote(text: str) -> str:
    """Wrap text in double quotes, doubling embedded quotes."""
    return '"' + text.replace('"', '""') + '"'


def format_cell(value: Any) -> str:
    """Render one CSV cell.

    - None: empty cell
    - bool: true / false
    - int, float, Decimal: literal text, unquoted
    - nested mapping/sequence: compact JSON, quoted
    - str: quoted
    - other values (dates, UUIDs, bytes): their JSON form, quoted

    Raises:
        EncoderError: If the value has no JSON form
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return quote(json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=json_default))
    if isinstance(value, str):
        return quote(value)
    return quote(str(json_default(value)))


class CSVEncoder(Encoder):
    """CSV encoder - header row plus one row per record.

    Examples:
        >>> encoder = CSVEncoder()
        >>> encoder.export([{"id": 1, "name": "Alice"}], Path("users.csv"))
        True
        >>> Path("users.csv").read_text()
        'id,name\\n1,"Alice"'
    """

    format = "csv"
    extension = "csv"

    def __init__(
        self,
        clock: Optional[Clock] = None,
        encoding: Optional[str] = None,
        delimiter: str = ",",
        **kwargs: Any,
    ):
        """Initialize CSV encoder.

        Args:
            clock: Callable returning the export timestamp
            encoding: Text encoding (defaults to RXT_CSV_ENCODING)
            delimiter: Cell delimiter
            **kwargs: Additional options (ignored)
        """
        super().__init__(clock=clock, **kwargs)
        self.encoding = encoding or config.csv_encoding
        self.delimiter = delimiter

    def write(self, records: list[dict[str, Any]], path: Path, exported_at: datetime) -> None:
        headers = list(records[0].keys())

        with open(path, "w", encoding=self.encoding, newline="") as f:
            # Header is written verbatim, never quoted
            f.write(self.delimiter.join(headers))
            for record in records:
                f.write("\n")
                f.write(self.delimiter.join(format_cell(record.get(header)) for header in headers))
