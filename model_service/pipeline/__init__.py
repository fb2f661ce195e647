"""Render-invoke-validate pipeline stages."""

from model_service.pipeline.classifier import (
    check_artifact,
    classify,
    looks_like_engine_failure,
)
from model_service.pipeline.handler import ModelPipeline, decode_request
from model_service.pipeline.renderer import ScriptRenderer, render
from model_service.pipeline.response import build_response

__all__ = [
    "ModelPipeline",
    "ScriptRenderer",
    "build_response",
    "check_artifact",
    "classify",
    "decode_request",
    "looks_like_engine_failure",
    "render",
]
