"""
Where: extensibility/gateway/core/validator.py
What: Structural validation of the request body sent to an extension point.
Why: The four checks and their messages are an external contract; their order is fixed.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from .exceptions import (
    BODY_NOT_OBJECT,
    CONNECTION_NOT_OBJECT,
    CONTEXT_NOT_OBJECT,
    USER_NOT_OBJECT,
    ValidationError,
)


@dataclass(frozen=True)
class ValidBody:
    user: Dict[str, Any] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InvalidBody:
    error: ValidationError


ValidationResult = Union[ValidBody, InvalidBody]

# Marks a request that carried no body at all, as opposed to a JSON null body.
ABSENT: Any = object()


def is_object(value: Any) -> bool:
    """True for JSON objects: mappings, but not lists, strings or scalars."""
    return isinstance(value, Mapping)


def validate_body(body: Any = ABSENT) -> ValidationResult:
    """
    Check the shape of a request body.

    A missing body and ``None`` (absent) fields are replaced by empty objects;
    a body that is itself ``None`` is not an object. The returned user and
    context are deep copies, so hooks never mutate the caller's data.

    Args:
        body: decoded request body, any type (``ABSENT`` when there is none)

    Returns:
        ValidBody with ``context["connection"]`` always set, or InvalidBody
        carrying the first failed check.
    """
    if body is ABSENT:
        body = {}
    if not is_object(body):
        return InvalidBody(ValidationError(BODY_NOT_OBJECT))

    user = body.get("user")
    if user is None:
        user = {}
    if not is_object(user):
        return InvalidBody(ValidationError(USER_NOT_OBJECT))

    context = body.get("context")
    if context is None:
        context = {}
    if not is_object(context):
        return InvalidBody(ValidationError(CONTEXT_NOT_OBJECT))

    connection = context.get("connection")
    if connection is None:
        connection = {}
    if not is_object(connection):
        return InvalidBody(ValidationError(CONNECTION_NOT_OBJECT))

    context = dict(copy.deepcopy(context))
    context["connection"] = dict(copy.deepcopy(connection))
    return ValidBody(user=dict(copy.deepcopy(user)), context=context)
