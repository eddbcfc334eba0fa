"""
Core logic package.

Provides the leaf logic of the pipeline: body validation, bearer
authorization and the settle-once completion slot.
"""

from .security import AuthResult, authorize, extract_bearer_token
from .settle import SettleOnce
from .validator import ABSENT, InvalidBody, ValidBody, validate_body

__all__ = [
    "AuthResult",
    "authorize",
    "extract_bearer_token",
    "SettleOnce",
    "ABSENT",
    "InvalidBody",
    "ValidBody",
    "validate_body",
]
