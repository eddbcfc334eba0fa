"""
Invocation outcome models.

An outcome is exactly one of NoResult, SuccessResult, ErrorOutcome (raised by
or passed to the hook) or RejectedOutcome (produced before the hook ran).
Errors are classified into DomainFailure or InternalFailure for reporting.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from ..core.exceptions import AuthorizationError, ValidationError


@dataclass(frozen=True)
class NoResult:
    """The hook completed without a result."""


@dataclass(frozen=True)
class SuccessResult:
    result: Any


@dataclass(frozen=True)
class ErrorOutcome:
    """The hook raised, or passed a truthy error to its callback."""

    error: Any


@dataclass(frozen=True)
class RejectedOutcome:
    """The request never reached the hook."""

    error: Union[ValidationError, AuthorizationError]


Outcome = Union[NoResult, SuccessResult, ErrorOutcome, RejectedOutcome]


@dataclass(frozen=True)
class DomainFailure:
    name: str
    message: str
    friendly_message: Optional[str] = None


@dataclass(frozen=True)
class InternalFailure:
    message: str


Failure = Union[DomainFailure, InternalFailure]
