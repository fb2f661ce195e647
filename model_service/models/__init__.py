"""Shared data models for the model-service application."""

from model_service.models.pipeline import (
    GLB,
    OUTPUT_FORMATS,
    STL,
    ArtifactCheck,
    InvocationResult,
    InvocationStatus,
    Outcome,
    OutcomeKind,
    OutputFormat,
    RenderContext,
    RenderedScript,
    ResponsePayload,
)
from model_service.models.request import ModelRequest

__all__ = [
    "ArtifactCheck",
    "GLB",
    "InvocationResult",
    "InvocationStatus",
    "ModelRequest",
    "OUTPUT_FORMATS",
    "Outcome",
    "OutcomeKind",
    "OutputFormat",
    "RenderContext",
    "RenderedScript",
    "ResponsePayload",
    "STL",
]
