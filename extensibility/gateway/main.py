"""
Extensibility Gateway - hook invocation server

Compiles the configured hook script at startup and serves it behind the
extensibility pipeline.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from extensibility.common.core.logging_config import setup_logging

from .api.deps import BodyDep, ConfigDep, ExtensionPointDep, HeadersDep, PipelineDep
from .config import GatewayConfig, config
from .core.compiler import load_script
from .core.extension_points import get_extension_point
from .core.pipeline import ExtensibilityPipeline
from .core.validator import ABSENT
from .exceptions import register_exception_handlers
from .middleware import request_context_middleware
from .models import RequestEnvelope

# Logger setup
setup_logging(config.LOG_CONFIG_PATH)
logger = logging.getLogger("gateway.main")


def build_pipeline(settings: GatewayConfig) -> ExtensibilityPipeline:
    """Compile the configured hook script into a pipeline."""
    extension_point = get_extension_point(settings.EXTENSION_POINT)
    hook = load_script(settings.HOOK_SCRIPT_PATH, extension_point)
    return ExtensibilityPipeline(
        hook,
        extension_point=extension_point,
        secret_name=settings.EXTENSION_SECRET_NAME,
        require_secret=settings.REQUIRE_EXTENSION_SECRET,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    settings: GatewayConfig = app.state.config
    if getattr(app.state, "pipeline", None) is None:
        app.state.pipeline = build_pipeline(settings)

    logger.info(
        f"Gateway serving {app.state.pipeline.extension_point.name}",
        extra={"script": settings.HOOK_SCRIPT_PATH},
    )

    yield

    logger.info("Gateway shutting down.")


def create_app(
    settings: GatewayConfig = config, pipeline: Optional[ExtensibilityPipeline] = None
) -> FastAPI:
    """
    Assemble the FastAPI application.

    Args:
        settings: gateway configuration
        pipeline: prebuilt pipeline; compiled from ``HOOK_SCRIPT_PATH`` when omitted
    """
    app = FastAPI(
        title="Extensibility Gateway",
        version="1.0.0",
        lifespan=lifespan,
        root_path=settings.root_path,
    )
    app.state.config = settings
    app.state.pipeline = pipeline

    app.middleware("http")(request_context_middleware)
    register_exception_handlers(app)

    # ===========================================
    # Endpoint definitions.
    # ===========================================

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/extensibility/{extension_point}")
    async def invoke_extension_point(
        target: ExtensionPointDep,
        body: BodyDep,
        hook_pipeline: PipelineDep,
        gateway_config: ConfigDep,
        request_headers: HeadersDep,
    ):
        """
        Run the hook for one request.

        The pipeline outcome is always carried in the envelope; the HTTP
        status is 200 for both success and error envelopes.
        """
        secrets = {}
        if gateway_config.EXTENSION_SECRET:
            secrets[gateway_config.EXTENSION_SECRET_NAME] = gateway_config.EXTENSION_SECRET

        # An absent body stays unset so the validator can tell it from null.
        fields = {} if body is ABSENT else {"body": body}
        envelope = await hook_pipeline.run(
            RequestEnvelope(
                headers=request_headers,
                secrets=secrets or None,
                method="POST",
                **fields,
            )
        )
        return JSONResponse(status_code=200, content=envelope.model_dump(mode="json"))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    host, _, port = config.UVICORN_BIND_ADDR.rpartition(":")
    uvicorn.run(app, host=host or "0.0.0.0", port=int(port))
