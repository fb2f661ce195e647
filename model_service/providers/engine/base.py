"""Engine invoker interface."""

from __future__ import annotations

import threading
from typing import Protocol

from model_service.models.pipeline import InvocationResult, RenderedScript


class EngineInvoker(Protocol):
    def invoke(
        self,
        script: RenderedScript,
        cancel: threading.Event | None = None,
    ) -> InvocationResult:
        ...
