"""RXT encoders package.

This package contains the built-in encoder implementations:
- CSVEncoder (tabular text)
- JSONEncoder (structured text with a metadata envelope)
- PDFEncoder (paginated document, streamed page by page)
"""

from rxt.encoders.document import PDFEncoder
from rxt.encoders.structured import JSONEncoder
from rxt.encoders.tabular import CSVEncoder

__all__ = [
    "CSVEncoder",
    "JSONEncoder",
    "PDFEncoder",
]
