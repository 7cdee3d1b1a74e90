"""
Error taxonomy for content loading.

Malformed YAML and schema violations fail the build. Broken links and
unresolved learning-path references are not errors at all; they are reported
as warnings by the services that detect them.
"""
from __future__ import annotations

from typing import List, Optional


class ContentError(Exception):
    """Base class for every error that should fail a content build."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message


class YAMLParseError(ContentError):
    """Raised when a file is not valid YAML."""


class ContentValidationError(ContentError):
    """Raised when parsed content violates the schema or a collection invariant."""

    def __init__(self, message: str, issues: Optional[List[str]] = None, source: Optional[str] = None) -> None:
        super().__init__(message, source=source)
        self.issues: List[str] = list(issues or [])

    def format(self) -> str:
        """Human readable multi-line description of every issue."""
        lines = [str(self)]
        lines.extend(f"  - {issue}" for issue in self.issues)
        return "\n".join(lines)
