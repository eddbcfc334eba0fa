"""
Result normalization.

Turns any invocation outcome into the strict ``{status, data}`` envelope.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Type

from ..models.envelope import OutputEnvelope
from ..models.outcome import (
    DomainFailure,
    ErrorOutcome,
    Failure,
    InternalFailure,
    NoResult,
    Outcome,
    RejectedOutcome,
    SuccessResult,
)
from .exceptions import RESULT_NOT_OBJECT, DomainError

logger = logging.getLogger("gateway.normalizer")


def error_message(error: Any) -> str:
    """
    Best-effort message of an arbitrary error value.

    Exceptions use their text, objects their ``message`` attribute or key,
    anything else its string form.
    """
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    if isinstance(error, BaseException):
        return str(error)
    if isinstance(error, Mapping) and "message" in error:
        return str(error["message"])
    return str(error)


def _field(error: Any, *names: str) -> Optional[str]:
    for name in names:
        if isinstance(error, Mapping):
            value = error.get(name)
        else:
            value = getattr(error, name, None)
        if value is not None:
            return str(value)
    return None


def classify_error(error: Any, domain_error: Type[DomainError] = DomainError) -> Failure:
    """
    Split an error into a domain failure (reported in full) or an internal one.

    An error is a domain error when it is an instance of ``domain_error`` or
    carries the same ``name``.
    """
    if isinstance(error, domain_error) or _field(error, "name") == domain_error.name:
        return DomainFailure(
            name=_field(error, "name") or domain_error.name,
            message=error_message(error),
            friendly_message=_field(error, "friendly_message", "friendlyMessage"),
        )
    return InternalFailure(message=error_message(error))


def failure_envelope(failure: Failure) -> OutputEnvelope:
    if isinstance(failure, DomainFailure):
        data = {"name": failure.name, "message": failure.message}
        if failure.friendly_message is not None:
            data["friendlyMessage"] = failure.friendly_message
        return OutputEnvelope.error(**data)
    return OutputEnvelope.error(message=failure.message)


def success_envelope(result: Mapping) -> OutputEnvelope:
    """
    Wrap a hook result, passed through as-is including nested user metadata.

    A result that does not serialize to a JSON object with string keys is an
    internal failure with a fixed message.
    """
    try:
        envelope = OutputEnvelope.success(dict(result))
        envelope.model_dump(mode="json")
    except (ValueError, TypeError) as e:
        logger.warning(
            "Hook produced a result that is not a JSON object",
            extra={"error_type": type(e).__name__},
        )
        return failure_envelope(InternalFailure(RESULT_NOT_OBJECT))
    return envelope


def normalize(outcome: Outcome, domain_error: Type[DomainError] = DomainError) -> OutputEnvelope:
    """
    Build the output envelope for an outcome.

    Args:
        outcome: what the validator, authorizer or hook produced
        domain_error: domain error class of the extension point

    Returns:
        OutputEnvelope fully determined by ``outcome``
    """
    if isinstance(outcome, NoResult):
        return OutputEnvelope.success()

    if isinstance(outcome, SuccessResult):
        result = outcome.result
        if result is None:
            return OutputEnvelope.success()
        if not isinstance(result, Mapping):
            logger.warning(
                "Hook produced a non-object result",
                extra={"result_type": type(result).__name__},
            )
            return failure_envelope(InternalFailure(RESULT_NOT_OBJECT))
        return success_envelope(result)

    if isinstance(outcome, RejectedOutcome):
        return OutputEnvelope.error(message=outcome.error.message)

    if isinstance(outcome, ErrorOutcome):
        return failure_envelope(classify_error(outcome.error, domain_error))

    raise TypeError(f"Unknown outcome: {outcome!r}")
