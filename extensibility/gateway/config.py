"""
Gateway configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import Optional

from pydantic import Field

from extensibility.common.core.config import BaseAppConfig


class GatewayConfig(BaseAppConfig):
    """
    Configuration management for the extensibility gateway.
    """

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:8000", description="Listen address")

    # Hook script
    HOOK_SCRIPT_PATH: str = Field(
        default="/app/hooks/handler.py", description="Path of the hook script to compile"
    )
    EXTENSION_POINT: str = Field(
        default="pre-user-registration", description="Extension point served by the script"
    )

    # Authorization
    EXTENSION_SECRET_NAME: str = Field(
        default="auth0-extension-secret", description="Key of the secret in the request secrets"
    )
    EXTENSION_SECRET: Optional[str] = Field(
        default=None, description="Shared secret expected as the bearer token"
    )
    # Without this flag an unconfigured secret skips the authorization check.
    REQUIRE_EXTENSION_SECRET: bool = Field(
        default=False, description="Reject every request when no secret is configured"
    )

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")

    # model_config is inherited


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = GatewayConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
