"""Error types raised inside the pipeline and recovered at its edges."""

from __future__ import annotations
from typing import Optional


class MarkstyleError(Exception):
    """Base class for pipeline errors."""


class MalformedHTMLError(MarkstyleError):
    """Raised when the HTML tag stack does not balance."""

    def __init__(self, message: str, tag: Optional[str] = None) -> None:
        self.tag = tag
        super().__init__(message)
