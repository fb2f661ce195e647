"""Request handler: runs one request through the pipeline."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
import threading
from typing import Iterator

from pydantic import ValidationError

from model_service.errors import (
    ModelServiceError,
    RequestDecodeError,
    WorkspaceError,
)
from model_service.models.pipeline import (
    GLB,
    OutputFormat,
    RenderContext,
    ResponsePayload,
)
from model_service.models.request import ModelRequest
from model_service.pipeline.classifier import classify
from model_service.pipeline.renderer import ScriptRenderer
from model_service.pipeline.response import (
    build_response,
    error_response,
    text_response,
)
from model_service.providers.engine.base import EngineInvoker

logger = logging.getLogger(__name__)


def decode_request(body: bytes) -> ModelRequest:
    try:
        return ModelRequest.model_validate_json(body)
    except ValidationError as exc:
        raise RequestDecodeError(f"Invalid request body: {exc}") from exc


class ModelPipeline:
    """Decode, render, invoke, classify, respond.

    Each call to ``handle`` works in its own temporary directory, which
    holds the artifact path and is removed before the call returns.
    Nothing is retried; the first failure decides the response.
    """

    def __init__(
        self,
        renderer: ScriptRenderer,
        invoker: EngineInvoker,
        output_format: OutputFormat = GLB,
        temp_dir: str | None = None,
        log_model_code: bool = False,
    ) -> None:
        self._renderer = renderer
        self._invoker = invoker
        self._format = output_format
        self._temp_dir = temp_dir or None
        self._log_model_code = log_model_code

    @property
    def output_format(self) -> OutputFormat:
        return self._format

    def handle(
        self, body: bytes, cancel: threading.Event | None = None
    ) -> ResponsePayload:
        logger.info("Received request body (%d bytes)", len(body))
        try:
            request = decode_request(body)
        except RequestDecodeError as exc:
            logger.warning("%s", exc)
            return text_response(exc.status_code, str(exc))

        if self._log_model_code:
            logger.debug("Model code:\n```\n%s\n```", request.model_code)

        try:
            return self._run(request, cancel)
        except WorkspaceError as exc:
            logger.error("%s", exc)
            return error_response(exc.status_code, "Internal server error")
        except ModelServiceError as exc:
            logger.error("%s", exc)
            return error_response(exc.status_code, "Internal server error", str(exc))

    def _run(
        self, request: ModelRequest, cancel: threading.Event | None
    ) -> ResponsePayload:
        with self._workspace() as workdir:
            output_path = os.path.join(workdir, f"model{self._format.extension}")
            logger.info("Using output path: %s", output_path)

            script = self._renderer.render(
                RenderContext(model_code=request.model_code, output_path=output_path)
            )
            result = self._invoker.invoke(script, cancel=cancel)
            outcome = classify(result, output_path)

            if outcome.succeeded:
                logger.debug("Engine output:\n%s", outcome.log)
            else:
                logger.warning(
                    "Request failed with %s (%s); engine output:\n%s",
                    outcome.kind.value,
                    result.describe(),
                    outcome.log,
                )
            return build_response(outcome, self._format)

    @contextlib.contextmanager
    def _workspace(self) -> Iterator[str]:
        try:
            tmp = tempfile.TemporaryDirectory(
                prefix="model-", dir=self._temp_dir, ignore_cleanup_errors=True
            )
        except OSError as exc:
            raise WorkspaceError(f"Error creating temp directory: {exc}") from exc
        with tmp as workdir:
            yield workdir
