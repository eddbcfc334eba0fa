"""
Extension point registry.
"""

from typing import Dict

from ..models.extension_point import ExtensionPoint
from .exceptions import ExtensionPointNotFoundError, PreUserRegistrationError

PRE_USER_REGISTRATION = ExtensionPoint(
    name="pre-user-registration",
    domain_error=PreUserRegistrationError,
)

EXTENSION_POINTS: Dict[str, ExtensionPoint] = {
    PRE_USER_REGISTRATION.name: PRE_USER_REGISTRATION,
}


def get_extension_point(name: str) -> ExtensionPoint:
    """
    Look up a registered extension point.

    Raises:
        ExtensionPointNotFoundError: the name is not registered
    """
    try:
        return EXTENSION_POINTS[name]
    except KeyError:
        raise ExtensionPointNotFoundError(name) from None
