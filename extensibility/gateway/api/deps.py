"""
Dependency Injection for Gateway API.

Manage request handler dependencies using FastAPI Depends.
"""

import json
from typing import Annotated, Any, Dict

from fastapi import Depends, HTTPException, Request

from ..config import GatewayConfig
from ..core.extension_points import get_extension_point
from ..core.pipeline import ExtensibilityPipeline
from ..core.validator import ABSENT
from ..models import ExtensionPoint


# ==========================================
# 1. Service Accessors
# ==========================================


def get_config(request: Request) -> GatewayConfig:
    return request.app.state.config


def get_pipeline(request: Request) -> ExtensibilityPipeline:
    return request.app.state.pipeline


ConfigDep = Annotated[GatewayConfig, Depends(get_config)]
PipelineDep = Annotated[ExtensibilityPipeline, Depends(get_pipeline)]


# ==========================================
# 2. Logic Dependencies (Resolution)
# ==========================================


async def resolve_extension_point(extension_point: str, pipeline: PipelineDep) -> ExtensionPoint:
    """
    Resolve the extension point named in the request path.

    Raises:
        ExtensionPointNotFoundError: the name is not registered
        HTTPException: 404 when the extension point is not served here
    """
    resolved = get_extension_point(extension_point)

    if resolved is not pipeline.extension_point:
        raise HTTPException(
            status_code=404, detail=f"Extension point not served: {extension_point}"
        )
    return resolved


async def read_body(request: Request) -> Any:
    """
    Decode the JSON request body.

    An empty body is ``ABSENT``; a JSON ``null`` body decodes to None. A body
    that is not valid JSON is kept as text so that the envelope validator
    reports it.
    """
    raw = await request.body()
    if not raw:
        return ABSENT
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return raw.decode("utf-8", errors="replace")


ExtensionPointDep = Annotated[ExtensionPoint, Depends(resolve_extension_point)]
BodyDep = Annotated[Any, Depends(read_body)]


def get_headers(request: Request) -> Dict[str, str]:
    """Request headers as a plain dict (keys are lowercase)."""
    return dict(request.headers)


HeadersDep = Annotated[Dict[str, str], Depends(get_headers)]
