"""Outcome classification for a finished engine run."""

from __future__ import annotations

import logging
import os

from model_service.errors import ArtifactReadError
from model_service.models.pipeline import (
    ArtifactCheck,
    InvocationResult,
    Outcome,
    OutcomeKind,
)

logger = logging.getLogger(__name__)

ENGINE_ERROR_MARKERS: tuple[str, ...] = ("Traceback", "Error:")


def looks_like_engine_failure(log: str) -> bool:
    """Return True when the engine log shows a script-level fault.

    Blender can exit 0 after a Python exception in the script it ran, so the
    log is the only signal in that case. Case-sensitive and unanchored: a
    model fragment that prints these words itself is reported as a failure.
    """
    return any(marker in log for marker in ENGINE_ERROR_MARKERS)


def check_artifact(path: str) -> ArtifactCheck:
    try:
        stat_info = os.stat(path)
    except FileNotFoundError:
        return ArtifactCheck(exists=False, size=0)
    return ArtifactCheck(exists=True, size=stat_info.st_size)


def classify(result: InvocationResult, expected_artifact_path: str) -> Outcome:
    """Map an engine run to exactly one outcome. First match wins:

    1. process failed to start or did not exit cleanly -> PROCESS_FAILED
    2. log contains an engine error marker -> ENGINE_REPORTED_ERROR
    3. artifact absent -> ARTIFACT_MISSING
    4. artifact zero bytes -> ARTIFACT_EMPTY
    5. otherwise SUCCESS, with the artifact read in full

    Raises ArtifactReadError if the artifact exists but cannot be read.
    """
    log = result.output

    if not result.ok:
        logger.warning("Engine run failed (%s)", result.describe())
        return Outcome(kind=OutcomeKind.PROCESS_FAILED, log=log, invocation=result)

    if looks_like_engine_failure(log):
        logger.warning("Engine log reports a script error")
        return Outcome(kind=OutcomeKind.ENGINE_REPORTED_ERROR, log=log, invocation=result)

    check = check_artifact(expected_artifact_path)
    if not check.exists:
        logger.warning("Artifact was not created at %s", expected_artifact_path)
        return Outcome(kind=OutcomeKind.ARTIFACT_MISSING, log=log, invocation=result)
    if check.size == 0:
        logger.warning("Artifact is empty at %s", expected_artifact_path)
        return Outcome(kind=OutcomeKind.ARTIFACT_EMPTY, log=log, invocation=result)

    try:
        with open(expected_artifact_path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise ArtifactReadError(f"Error reading generated model file: {exc}") from exc

    logger.info("Artifact read successfully, size: %d bytes", len(data))
    return Outcome(
        kind=OutcomeKind.SUCCESS,
        log=log,
        invocation=result,
        artifact=data,
    )
