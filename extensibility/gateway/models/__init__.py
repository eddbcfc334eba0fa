"""
Data model definitions package.

Aggregates the envelope, outcome and extension point models.
"""

from .envelope import OutputEnvelope, RequestEnvelope
from .extension_point import ExtensionPoint
from .outcome import (
    DomainFailure,
    ErrorOutcome,
    Failure,
    InternalFailure,
    NoResult,
    Outcome,
    RejectedOutcome,
    SuccessResult,
)

__all__ = [
    "OutputEnvelope",
    "RequestEnvelope",
    "ExtensionPoint",
    "DomainFailure",
    "ErrorOutcome",
    "Failure",
    "InternalFailure",
    "NoResult",
    "Outcome",
    "RejectedOutcome",
    "SuccessResult",
]
