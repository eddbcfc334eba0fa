import os

import pytest

# Config is initialized at import time, so set environment variables at top level.
os.environ.setdefault("HOOK_SCRIPT_PATH", "/nonexistent/handler.py")
os.environ.setdefault("LOG_CONFIG_PATH", "/tmp/extensibility-missing-logging.yml")

from extensibility.gateway.core.compiler import compile_script  # noqa: E402

NOOP_SCRIPT = "def handler(user, context, cb):\n    cb()\n"


@pytest.fixture
def make_request():
    """Factory for a well-formed request envelope (as a dict)."""

    def _make(**overrides):
        request = {
            "body": {"user": {}, "context": {"connection": {}}},
            "headers": {},
            "method": "POST",
        }
        request.update(overrides)
        return request

    return _make


@pytest.fixture
def noop_hook():
    return compile_script(NOOP_SCRIPT)
