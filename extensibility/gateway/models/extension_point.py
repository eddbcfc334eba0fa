"""
Extension point descriptor.
"""

from dataclasses import dataclass
from typing import Type

from ..core.exceptions import DomainError


@dataclass(frozen=True)
class ExtensionPoint:
    """
    A lifecycle hook that user scripts can be attached to.

    Attributes:
        name: registry key, e.g. ``pre-user-registration``
        domain_error: error class exposed to scripts under its ``name``
        arity: number of positional arguments the handler must accept
    """

    name: str
    domain_error: Type[DomainError]
    arity: int = 3

    @property
    def domain_error_name(self) -> str:
        return self.domain_error.name
