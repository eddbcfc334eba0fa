"""
Extensibility Pipeline - Service Layer

Standardizes the flow: RequestEnvelope -> validate -> authorize -> invoke -> OutputEnvelope.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..models.envelope import OutputEnvelope, RequestEnvelope
from ..models.extension_point import ExtensionPoint
from ..models.outcome import ErrorOutcome, Outcome, RejectedOutcome
from .exceptions import InternalError
from .extension_points import PRE_USER_REGISTRATION
from .invoker import Hook, HookInvoker
from .normalizer import normalize
from .security import authorize
from .validator import ABSENT, InvalidBody, validate_body

logger = logging.getLogger("gateway.pipeline")

DEFAULT_SECRET_NAME = "auth0-extension-secret"
MALFORMED_REQUEST = "Request received by extensibility point is malformed"


class Stage(str, Enum):
    START = "start"
    VALIDATING = "validating"
    AUTHORIZING = "authorizing"
    INVOKING = "invoking"
    NORMALIZING = "normalizing"
    DONE = "done"


class PipelineRun:
    """Per-run stage tracker."""

    def __init__(self, extension_point: ExtensionPoint):
        self.extension_point = extension_point
        self.stage = Stage.START

    def enter(self, stage: Stage) -> None:
        self.stage = stage
        logger.debug(
            f"Pipeline stage: {stage.value}",
            extra={"extension_point": self.extension_point.name, "stage": stage.value},
        )


class ExtensibilityPipeline:
    """
    Orchestrates one extension point invocation per ``run``.

    Stages only move forward; validation and authorization failures jump
    straight to normalization. ``run`` never raises.
    """

    def __init__(
        self,
        hook: Hook,
        extension_point: ExtensionPoint = PRE_USER_REGISTRATION,
        secret_name: str = DEFAULT_SECRET_NAME,
        require_secret: bool = False,
    ):
        self.hook = hook
        self.extension_point = extension_point
        self.secret_name = secret_name
        self.require_secret = require_secret

    def configured_secret(self, request: RequestEnvelope) -> Optional[str]:
        return (request.secrets or {}).get(self.secret_name)

    async def run(self, request: RequestEnvelope) -> OutputEnvelope:
        """
        Process a request into its output envelope.
        """
        run = PipelineRun(self.extension_point)
        try:
            outcome = await self._produce_outcome(request, run)
            run.enter(Stage.NORMALIZING)
            envelope = normalize(outcome, self.extension_point.domain_error)
        except Exception as e:
            logger.exception(
                f"Unexpected error in extensibility pipeline: {e}",
                extra={"extension_point": self.extension_point.name, "stage": run.stage.value},
            )
            envelope = normalize(ErrorOutcome(InternalError(str(e))))
        run.enter(Stage.DONE)

        logger.info(
            f"{self.extension_point.name} finished with status {envelope.status}",
            extra={"extension_point": self.extension_point.name, "status": envelope.status},
        )
        return envelope

    async def _produce_outcome(self, request: RequestEnvelope, run: PipelineRun) -> Outcome:
        run.enter(Stage.VALIDATING)
        validation = validate_body(request.body if request.has_body else ABSENT)
        if isinstance(validation, InvalidBody):
            logger.info(
                "Rejected request body",
                extra={"extension_point": self.extension_point.name, "reason": "validation"},
            )
            return RejectedOutcome(validation.error)

        run.enter(Stage.AUTHORIZING)
        auth = authorize(request.headers, self.configured_secret(request), self.require_secret)
        if not auth.allowed:
            return RejectedOutcome(auth.error)

        run.enter(Stage.INVOKING)
        return await HookInvoker(self.hook).invoke(validation.user, validation.context)


async def run_pipeline(
    hook: Hook,
    request: Any,
    extension_point: ExtensionPoint = PRE_USER_REGISTRATION,
    secret_name: str = DEFAULT_SECRET_NAME,
    require_secret: bool = False,
) -> Dict[str, Any]:
    """
    Run ``hook`` against a request and return the envelope as a plain dict.

    Args:
        hook: compiled handler
        request: RequestEnvelope, or a mapping with body/headers/secrets/method

    Returns:
        ``{"status": ..., "data": ...}``
    """
    if not isinstance(request, RequestEnvelope):
        try:
            request = RequestEnvelope.model_validate(request)
        except PydanticValidationError as e:
            logger.warning(
                "Malformed request envelope",
                extra={"extension_point": extension_point.name, "detail": str(e.errors())},
            )
            return OutputEnvelope.error(message=MALFORMED_REQUEST).model_dump()

    pipeline = ExtensibilityPipeline(hook, extension_point, secret_name, require_secret)
    envelope = await pipeline.run(request)
    return envelope.model_dump()
