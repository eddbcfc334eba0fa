"""
Envelope models.

The request envelope handed to the pipeline and the canonical output envelope
it produces.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class RequestEnvelope(BaseModel):
    """
    Inbound invocation request.

    ``body`` is left untyped on purpose: its shape is checked by the envelope
    validator so that malformed bodies produce an error envelope instead of a
    pydantic error.
    """

    body: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)
    secrets: Optional[Dict[str, str]] = None
    method: str = "POST"

    @property
    def has_body(self) -> bool:
        """False when no body was supplied; an explicit None body counts as supplied."""
        return "body" in self.model_fields_set


class OutputEnvelope(BaseModel):
    """Canonical result of an invocation."""

    status: Literal["success", "error"]
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, data: Optional[Dict[str, Any]] = None) -> "OutputEnvelope":
        return cls(status="success", data=data if data is not None else {})

    @classmethod
    def error(cls, **data: Any) -> "OutputEnvelope":
        return cls(status="error", data=data)

    @property
    def is_success(self) -> bool:
        return self.status == "success"
