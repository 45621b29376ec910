"""Terminal input and rendering surface."""

from .raw_input import KeyReader, raw_input_mode
from .renderer import RichRenderer, build_view, page_size_for, scroll_offset, viewport_rows_for

__all__ = [
    "build_view",
    "KeyReader",
    "page_size_for",
    "raw_input_mode",
    "RichRenderer",
    "scroll_offset",
    "viewport_rows_for",
]
