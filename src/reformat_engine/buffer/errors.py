"""Errors raised by the document layer."""

from __future__ import annotations

from typing import Optional


class OutOfRangeError(RuntimeError):
    """Raised when a line or offset cannot be resolved against the document."""

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        line: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.line = line


class BufferMutationError(RuntimeError):
    """Raised when the document rejects an insert or remove."""

    def __init__(self, message: str, *, document: Optional[str] = None) -> None:
        super().__init__(message)
        self.document = document


__all__ = ["OutOfRangeError", "BufferMutationError"]
