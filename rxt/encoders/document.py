"""PDF encoder implementation.

Renders records as a paginated, human-readable document: a title block,
then one block per record with its fields listed as label/value lines.
Pages are streamed to disk as they fill (see rxt.utils.pdf).
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from rxt.core.config import config
from rxt.core.encoder import Clock, Encoder
from rxt.core.transform import format_timestamp
from rxt.encoders.structured import json_default
from rxt.utils.pdf import PAGE_SIZES, PDFStreamWriter


def format_value(value: Any) -> str:
    """Render a field value for display."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=json_default)
    return str(value)


class PDFEncoder(Encoder):
    """PDF encoder - one labelled block per record.

    Examples:
        >>> encoder = PDFEncoder(page_size="a4", title="Users")
        >>> encoder.export([{"id": 1, "name": "Alice"}], Path("users.pdf"))
        True
    """

    format = "pdf"
    extension = "pdf"

    def __init__(
        self,
        clock: Optional[Clock] = None,
        page_size: Optional[str] = None,
        font_size: Optional[int] = None,
        title: str = "Data Export",
        **kwargs: Any,
    ):
        """Initialize PDF encoder.

        Args:
            clock: Callable returning the export timestamp
            page_size: 'letter' or 'a4' (defaults to RXT_PDF_PAGE_SIZE)
            font_size: Body font size (defaults to RXT_PDF_FONT_SIZE)
            title: Document title
            **kwargs: Additional options (ignored)

        Raises:
            ValueError: If page_size is unknown
        """
        super().__init__(clock=clock, **kwargs)
        self.page_size = (page_size or config.pdf_page_size).lower()
        if self.page_size not in PAGE_SIZES:
            raise ValueError(f"Unknown page size: {self.page_size}. Must be one of: {set(PAGE_SIZES)}")
        self.font_size = font_size or config.pdf_font_size
        self.title = title

    def write(self, records: list[dict[str, Any]], path: Path, exported_at: datetime) -> None:
        with open(path, "wb") as f:
            with PDFStreamWriter(
                f,
                page_size=self.page_size,
                font_size=self.font_size,
                title=self.title,
                creation_date=exported_at,
            ) as pdf:
                pdf.add_line(self.title, bold=True, size=self.font_size + 6)
                pdf.add_line(f"Exported at: {format_timestamp(exported_at)}")
                pdf.add_line(f"Records: {len(records)}")
                pdf.add_spacing()

                for number, record in enumerate(records, start=1):
                    # Keep a heading together with its first field
                    pdf.ensure_space(2)
                    pdf.add_line(f"Record {number}", bold=True)
                    for label, value in record.items():
                        pdf.add_field(str(label), format_value(value), indent=self.font_size)
                    pdf.add_spacing(0.5)
