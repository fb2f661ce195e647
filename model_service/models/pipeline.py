"""Data models for the render-invoke-validate pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class OutputFormat:
    name: str
    extension: str
    content_type: str
    filename: str


GLB = OutputFormat(
    name="glb",
    extension=".glb",
    content_type="application/octet-stream",
    filename="model.glb",
)
STL = OutputFormat(
    name="stl",
    extension=".stl",
    content_type="application/octet-stream",
    filename="model.stl",
)

OUTPUT_FORMATS: dict[str, OutputFormat] = {fmt.name: fmt for fmt in (GLB, STL)}


@dataclass(frozen=True)
class RenderContext:
    model_code: str
    output_path: str


@dataclass(frozen=True)
class RenderedScript:
    text: str
    output_path: str


class InvocationStatus(str, Enum):
    EXITED_OK = "exited_ok"
    EXITED_FAILURE = "exited_failure"
    START_FAILED = "start_failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class InvocationResult:
    """What came back from one engine run.

    ``output`` is stdout and stderr interleaved as the engine wrote them.
    ``exit_code`` is None when the process never started.
    """

    status: InvocationStatus
    output: str
    exit_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is InvocationStatus.EXITED_OK

    def describe(self) -> str:
        if self.error:
            return self.error
        if self.exit_code is not None:
            return f"exit status {self.exit_code}"
        return self.status.value


@dataclass(frozen=True)
class ArtifactCheck:
    exists: bool
    size: int


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    PROCESS_FAILED = "process_failed"
    ENGINE_REPORTED_ERROR = "engine_reported_error"
    ARTIFACT_MISSING = "artifact_missing"
    ARTIFACT_EMPTY = "artifact_empty"


@dataclass(frozen=True)
class Outcome:
    """Terminal classification of one request.

    Only ``SUCCESS`` carries artifact bytes; every kind carries the full log.
    """

    kind: OutcomeKind
    log: str
    invocation: InvocationResult
    artifact: Optional[bytes] = field(default=None, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass(frozen=True)
class ResponsePayload:
    status_code: int
    headers: dict[str, str]
    body: bytes = field(repr=False)
