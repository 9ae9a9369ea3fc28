"""
Utility functions for ycalc, including terminal coloring, caret diagnostics
and a JSON artifact serializer.
"""

import json
from typing import Optional

from pydantic import BaseModel

from .classes import Span


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class ArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        return super().default(o)


def _char_offset(source: str, byte_offset: int) -> int:
    """Converts a byte offset into the UTF-8 source to a character offset."""
    return len(source.encode("utf-8")[:byte_offset].decode("utf-8", errors="ignore"))


def format_diagnostic(source: str, span: Optional[Span]) -> str:
    """
    Renders the line of `source` containing `span` with carets under the
    offending text:

        1 + true
        ^^^^^^^^
    """
    if span is None:
        return ""

    start = _char_offset(source, span.start)
    end = max(_char_offset(source, span.end), start + 1)

    line_start = source.rfind("\n", 0, start) + 1
    line_end = source.find("\n", start)
    if line_end == -1:
        line_end = len(source)

    line = source[line_start:line_end]
    carets = "^" * max(min(end, line_end) - start, 1)
    return f"{line}\n{' ' * (start - line_start)}{carets}"
