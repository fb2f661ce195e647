import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from model_service import __version__
from model_service.config import ServiceConfig, get_config
from model_service.models.pipeline import ResponsePayload
from model_service.pipeline.handler import ModelPipeline
from model_service.pipeline.renderer import ScriptRenderer
from model_service.providers.engine import BlenderInvoker

logger = logging.getLogger(__name__)


class PayloadResponse(Response):
    """Sends a pipeline payload; write failures after headers are only logged."""

    def __init__(self, payload: ResponsePayload) -> None:
        super().__init__(
            content=payload.body,
            status_code=payload.status_code,
            headers=payload.headers,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except OSError as exc:
            logger.error("Failed to write response: %s", exc)
        else:
            logger.info("Response sent: %d (%d bytes)", self.status_code, len(self.body))


def build_pipeline(config: ServiceConfig) -> ModelPipeline:
    return ModelPipeline(
        renderer=ScriptRenderer(config.template_path or None),
        invoker=BlenderInvoker(
            binary=config.engine_binary,
            timeout_s=config.timeout,
            temp_dir=config.temp_dir or None,
        ),
        output_format=config.format,
        temp_dir=config.temp_dir or None,
        log_model_code=config.log_model_code,
    )


def create_app(
    config: ServiceConfig | None = None, pipeline: ModelPipeline | None = None
) -> FastAPI:
    config = config or get_config()
    pipeline = pipeline or build_pipeline(config)

    app = FastAPI(title="model-service", version=__version__)
    app.state.config = config
    app.state.pipeline = pipeline

    @app.get("/health")
    def health_check() -> dict:
        return {"status": "ok"}

    @app.post("/create_model")
    async def create_model(request: Request) -> Response:
        body = await request.body()
        payload = await run_in_threadpool(pipeline.handle, body)
        return PayloadResponse(payload)

    return app
