"""
Extensibility point gateway.

Runs user-authored callback-style hooks behind a validated, authorized
invocation pipeline and returns a canonical ``{status, data}`` envelope.
"""

__version__ = "1.0.0"
