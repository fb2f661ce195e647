"""Response builder: turns an outcome into status, headers and body."""

from __future__ import annotations

import json
from typing import Any

from model_service.models.pipeline import (
    InvocationStatus,
    Outcome,
    OutcomeKind,
    OutputFormat,
    ResponsePayload,
)

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

_NO_ARTIFACT_DETAILS = (
    "The engine completed but did not generate a valid model file. "
    "This typically indicates an error in the model code."
)

_FAILURE_MESSAGES: dict[OutcomeKind, tuple[str, str]] = {
    OutcomeKind.PROCESS_FAILED: (
        "Engine render failed",
        "The engine process did not complete successfully.",
    ),
    OutcomeKind.ENGINE_REPORTED_ERROR: (
        "Engine render failed",
        "The engine reported an error while running the model code.",
    ),
    OutcomeKind.ARTIFACT_MISSING: ("Failed to generate model file", _NO_ARTIFACT_DETAILS),
    OutcomeKind.ARTIFACT_EMPTY: ("Failed to generate model file", _NO_ARTIFACT_DETAILS),
}


def failure_status(outcome: Outcome) -> int:
    # An engine that cannot be started is an environment fault, not a bad request.
    if outcome.invocation.status is InvocationStatus.START_FAILED:
        return 500
    return 422


def json_response(status_code: int, content: dict[str, Any]) -> ResponsePayload:
    body = json.dumps(content).encode("utf-8")
    return ResponsePayload(
        status_code=status_code,
        headers={
            "Content-Type": JSON_CONTENT_TYPE,
            "Content-Length": str(len(body)),
        },
        body=body,
    )


def error_response(status_code: int, error: str, details: str | None = None) -> ResponsePayload:
    content: dict[str, Any] = {"error": error}
    if details:
        content["details"] = details
    return json_response(status_code, content)


def text_response(status_code: int, message: str) -> ResponsePayload:
    body = message.encode("utf-8")
    return ResponsePayload(
        status_code=status_code,
        headers={
            "Content-Type": TEXT_CONTENT_TYPE,
            "Content-Length": str(len(body)),
        },
        body=body,
    )


def build_response(outcome: Outcome, output_format: OutputFormat) -> ResponsePayload:
    if outcome.kind is OutcomeKind.SUCCESS:
        data = outcome.artifact or b""
        return ResponsePayload(
            status_code=200,
            headers={
                "Content-Type": output_format.content_type,
                "Content-Disposition": f"attachment; filename={output_format.filename}",
                "Content-Length": str(len(data)),
            },
            body=data,
        )

    error, details = _FAILURE_MESSAGES[outcome.kind]
    invocation = outcome.invocation
    if invocation.error:
        details = f"{details} {invocation.error}"
    content: dict[str, Any] = {
        "error": error,
        "outcome": outcome.kind.value,
        "details": details,
        "log": outcome.log,
    }
    if invocation.exit_code is not None:
        content["exit_code"] = invocation.exit_code
    return json_response(failure_status(outcome), content)
