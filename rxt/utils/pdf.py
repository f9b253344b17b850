"""Incremental PDF writer.

PDFStreamWriter emits a PDF 1.4 file page by page: each page's content
stream and page object are written to the output as soon as the page is
full, so memory use is bounded by a single page regardless of document
length. The page tree, catalog and cross-reference table are written on
close().

Text is set in the standard Helvetica fonts with WinAnsiEncoding; characters
outside that code page are replaced with "?".

Examples:
    >>> with open("report.pdf", "wb") as f:
    ...     with PDFStreamWriter(f, title="Report") as pdf:
    ...         pdf.add_line("Report", bold=True, size=16)
    ...         pdf.add_field("name", "Alice")
"""

from __future__ import annotations

import textwrap
from datetime import datetime, timezone
from typing import BinaryIO, Optional

# Page sizes in points (1/72 inch)
PAGE_SIZES: dict[str, tuple[float, float]] = {
    "letter": (612.0, 792.0),
    "a4": (595.28, 841.89),
}

# Average Helvetica glyph width as a fraction of the font size
AVERAGE_CHAR_WIDTH = 0.55

_CATALOG_ID = 1
_PAGES_ID = 2
_FONT_REGULAR_ID = 3
_FONT_BOLD_ID = 4


def escape_text(text: str) -> bytes:
    """Encode text as a PDF literal string body (without parentheses)."""
    cleaned = "".join(ch if ch >= " " else " " for ch in text)
    raw = cleaned.encode("cp1252", errors="replace")
    return raw.replace(b"\\", b"\\\\").replace(b"(", b"\\(").replace(b")", b"\\)")


def format_pdf_date(moment: datetime) -> str:
    """Format a datetime as a PDF date string (UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("D:%Y%m%d%H%M%SZ")


class PDFStreamWriter:
    """Write a text-only PDF document incrementally.

    Lifecycle:
    1. start() - write the file header and font objects
    2. add_line() / add_field() / add_spacing() - lay out text; full pages
       are flushed to the stream immediately
    3. close() - flush the last page and write page tree, catalog,
       info dictionary, cross-reference table and trailer
    """

    def __init__(
        self,
        stream: BinaryIO,
        page_size: str = "letter",
        font_size: int = 10,
        margin: float = 54.0,
        title: Optional[str] = None,
        creation_date: Optional[datetime] = None,
    ):
        """Initialize writer.

        Args:
            stream: Binary output stream
            page_size: 'letter' or 'a4'
            font_size: Body font size in points
            margin: Page margin in points
            title: Document title for the info dictionary
            creation_date: Creation date for the info dictionary

        Raises:
            ValueError: If page_size is unknown
        """
        if page_size not in PAGE_SIZES:
            raise ValueError(f"Unknown page size: {page_size}. Must be one of: {set(PAGE_SIZES)}")

        self._stream = stream
        self.width, self.height = PAGE_SIZES[page_size]
        self.font_size = font_size
        self.margin = margin
        self.title = title
        self.creation_date = creation_date

        self._offset = 0
        self._offsets: dict[int, int] = {}
        self._next_id = _FONT_BOLD_ID + 1
        self._page_ids: list[int] = []
        self._ops: list[bytes] = []
        self._cursor_y = self._top
        self._started = False
        self._closed = False

    @property
    def page_count(self) -> int:
        """Number of pages flushed so far."""
        return len(self._page_ids)

    @property
    def _top(self) -> float:
        return self.height - self.margin

    @property
    def _bottom(self) -> float:
        # Leave room for the footer
        return self.margin + self.font_size * 2

    # === Low-level output ===

    def _write(self, data: bytes) -> None:
        self._stream.write(data)
        self._offset += len(data)

    def _allocate_id(self) -> int:
        obj_id = self._next_id
        self._next_id += 1
        return obj_id

    def _write_object(self, obj_id: int, body: bytes) -> None:
        self._offsets[obj_id] = self._offset
        self._write(f"{obj_id} 0 obj\n".encode("ascii") + body + b"\nendobj\n")

    # === Lifecycle ===

    def start(self) -> None:
        """Write the file header and shared font objects."""
        if self._started:
            return
        self._started = True
        # Binary comment marks the file as binary for transfer tools
        self._write(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
        self._write_object(
            _FONT_REGULAR_ID,
            b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
        )
        self._write_object(
            _FONT_BOLD_ID,
            b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold /Encoding /WinAnsiEncoding >>",
        )

    def close(self) -> None:
        """Flush the last page and write the document trailer.

        Idempotent - calling multiple times has no further effect.
        """
        if self._closed:
            return
        self.start()

        if self._ops or not self._page_ids:
            self._flush_page()

        kids = " ".join(f"{page_id} 0 R" for page_id in self._page_ids)
        self._write_object(
            _PAGES_ID,
            f"<< /Type /Pages /Kids [{kids}] /Count {len(self._page_ids)} >>".encode("ascii"),
        )
        self._write_object(_CATALOG_ID, b"<< /Type /Catalog /Pages 2 0 R >>")

        info_id = self._allocate_id()
        info = b"<< /Producer (rxt)"
        if self.title:
            info += b" /Title (" + escape_text(self.title) + b")"
        if self.creation_date:
            info += f" /CreationDate ({format_pdf_date(self.creation_date)})".encode("ascii")
        info += b" >>"
        self._write_object(info_id, info)

        self._write_xref_and_trailer(info_id)
        self._closed = True

    def _write_xref_and_trailer(self, info_id: int) -> None:
        size = self._next_id
        xref_offset = self._offset
        lines = [f"xref\n0 {size}\n", "0000000000 65535 f \n"]
        for obj_id in range(1, size):
            lines.append(f"{self._offsets[obj_id]:010d} 00000 n \n")
        lines.append(
            f"trailer\n<< /Size {size} /Root {_CATALOG_ID} 0 R /Info {info_id} 0 R >>\n"
            f"startxref\n{xref_offset}\n%%EOF\n"
        )
        self._write("".join(lines).encode("ascii"))

    def __enter__(self) -> "PDFStreamWriter":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()

    # === Layout ===

    def new_page(self) -> None:
        """Flush the current page and start a new one."""
        self.start()
        self._flush_page()

    def ensure_space(self, lines: int, size: Optional[float] = None) -> None:
        """Start a new page unless `lines` more lines fit on this one."""
        leading = self._leading(size)
        if self._ops and self._cursor_y - leading * lines < self._bottom:
            self.new_page()

    def add_spacing(self, lines: float = 1) -> None:
        """Advance the cursor by blank lines."""
        self._cursor_y -= self._leading() * lines

    def add_line(self, text: str, bold: bool = False, size: Optional[float] = None, indent: float = 0) -> None:
        """Add text, wrapping it to the printable width."""
        size = size or self.font_size
        for chunk in self._wrap(text, size, indent):
            self._place(b"(" + escape_text(chunk) + b") Tj", bold, size, indent)

    def add_field(self, label: str, value: str, indent: float = 0) -> None:
        """Add a `label: value` line with a bold label.

        Continuation lines of long values are indented under the label.
        """
        size = self.font_size
        prefix = f"{label}: "
        wrapped = self._wrap(value, size, indent, reserve=len(prefix))

        self._place(
            b"(" + escape_text(prefix) + b") Tj /F1 " + f"{size:g}".encode("ascii")
            + b" Tf (" + escape_text(wrapped[0]) + b") Tj",
            True,
            size,
            indent,
        )
        for chunk in wrapped[1:]:
            self._place(b"(" + escape_text(chunk) + b") Tj", False, size, indent + size * 2)

    def _leading(self, size: Optional[float] = None) -> float:
        return (size or self.font_size) * 1.4

    def _wrap(self, text: str, size: float, indent: float, reserve: int = 0) -> list[str]:
        """Split text into lines that fit the printable width.

        The first line is shortened by `reserve` characters to leave room
        for a label printed in front of it.
        """
        usable = self.width - 2 * self.margin - indent
        width = max(int(usable / (size * AVERAGE_CHAR_WIDTH)), 10)
        lead = " " * min(reserve, width // 2)

        chunks: list[str] = []
        for index, paragraph in enumerate(text.splitlines() or [""]):
            if index == 0 and lead:
                wrapped = textwrap.wrap(paragraph, width=width, initial_indent=lead)
                if wrapped:
                    wrapped[0] = wrapped[0][len(lead):]
            else:
                wrapped = textwrap.wrap(paragraph, width=width)
            chunks.extend(wrapped or [""])
        return chunks

    def _place(self, show_ops: bytes, bold: bool, size: float, indent: float) -> None:
        self.start()
        leading = self._leading(size)
        if self._cursor_y - leading < self._bottom and self._ops:
            self._flush_page()
        self._cursor_y -= leading
        font = b"/F2" if bold else b"/F1"
        self._ops.append(
            b"BT " + font + f" {size:g} Tf {self.margin + indent:.2f} {self._cursor_y:.2f} Td ".encode("ascii")
            + show_ops + b" ET\n"
        )

    def _flush_page(self) -> None:
        page_number = len(self._page_ids) + 1
        footer = (
            f"BT /F1 {max(self.font_size - 2, 6):g} Tf {self.margin:.2f} {self.margin / 2:.2f} Td ".encode("ascii")
            + b"(" + escape_text(f"Page {page_number}") + b") Tj ET\n"
        )
        content = b"".join(self._ops) + footer

        content_id = self._allocate_id()
        page_id = self._allocate_id()
        self._write_object(
            content_id,
            f"<< /Length {len(content)} >>\nstream\n".encode("ascii") + content + b"\nendstream",
        )
        self._write_object(
            page_id,
            (
                f"<< /Type /Page /Parent {_PAGES_ID} 0 R "
                f"/MediaBox [0 0 {self.width:g} {self.height:g}] "
                f"/Resources << /Font << /F1 {_FONT_REGULAR_ID} 0 R /F2 {_FONT_BOLD_ID} 0 R >> >> "
                f"/Contents {content_id} 0 R >>"
            ).encode("ascii"),
        )
        self._page_ids.append(page_id)
        self._ops = []
        self._cursor_y = self._top
