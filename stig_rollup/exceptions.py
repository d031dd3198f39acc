"""Custom exception classes for STIG Rollup.

All exceptions raised by the package inherit from RollupError so callers
can catch one type and still get the contextual details.
"""

from __future__ import annotations
from typing import Optional, Dict, Any


class RollupError(Exception):
    """Base exception with context.

    Attributes:
        msg: The error message
        ctx: Optional dictionary of contextual information (e.g., file paths, checklist ids)
    """

    def __init__(self, msg: str, ctx: Optional[Dict[str, Any]] = None):
        super().__init__(msg)
        self.msg = msg
        self.ctx = ctx or {}

    def __str__(self) -> str:
        if self.ctx:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.ctx.items())
            return f"{self.msg} [{ctx_str}]"
        return self.msg


class ValidationError(RollupError):
    """Raised when an input value or path is rejected."""


class FileError(RollupError):
    """Raised when file operations fail."""


class ParseError(RollupError):
    """Raised when a document is not well-formed XML."""
