"""Causal Reasoning Exceptions.

- CausalReasoningError: Raised by the engine's query interface
- InvalidCausalQueryError: Query type the dispatcher does not handle

Lookups of unknown links or nodes do not raise; they return empty
collections or None so the engine stays available to best-effort callers.
Malformed queries fail earlier, as pydantic ValidationError.
"""

from __future__ import annotations

from typing import Optional


class CausalReasoningError(Exception):
    """Failure while answering a causal query.

    Unexpected exceptions inside ``CausalReasoning.query`` are wrapped in
    this type; the original is kept on ``cause`` and chained as
    ``__cause__``.

    Attributes:
        message: Error description
        query_type: Value of the CausalQueryType being executed, if known
        cause: Wrapped exception, if any
    """

    def __init__(
        self,
        message: str,
        query_type: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.query_type = query_type
        self.cause = cause

    def __str__(self) -> str:
        text = self.message
        if self.query_type:
            text += f" (query_type={self.query_type})"
        if self.cause is not None:
            text += f" [caused by {type(self.cause).__name__}]"
        return text


class InvalidCausalQueryError(CausalReasoningError):
    """Raised when the dispatcher receives a query type it does not handle."""
