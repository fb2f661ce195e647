"""Blender invoker running the engine as a local subprocess."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import threading
import time
from typing import Sequence

from model_service.errors import WorkspaceError
from model_service.models.pipeline import (
    InvocationResult,
    InvocationStatus,
    RenderedScript,
)
from model_service.providers.engine.base import EngineInvoker

logger = logging.getLogger(__name__)

BATCH_ARGS: tuple[str, ...] = ("-b", "--python")
DEFAULT_TIMEOUT_S = 300.0


class BlenderInvoker(EngineInvoker):
    def __init__(
        self,
        binary: str = "blender",
        timeout_s: float | None = DEFAULT_TIMEOUT_S,
        temp_dir: str | None = None,
        poll_interval_s: float = 0.1,
    ) -> None:
        self._binary = binary
        self._timeout_s = timeout_s or None
        self._temp_dir = temp_dir or None
        self._poll_interval_s = poll_interval_s

    def command(self, script_path: str) -> list[str]:
        return [self._binary, *BATCH_ARGS, script_path]

    def invoke(
        self,
        script: RenderedScript,
        cancel: threading.Event | None = None,
    ) -> InvocationResult:
        script_path = self._write_script(script.text)
        try:
            return self._run(self.command(script_path), cancel)
        finally:
            self._remove(script_path)

    def _write_script(self, text: str) -> str:
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                prefix="blender_",
                suffix=".py",
                dir=self._temp_dir,
                encoding="utf-8",
                delete=False,
            ) as handle:
                path = handle.name
                try:
                    handle.write(text)
                except OSError:
                    handle.close()
                    self._remove(path)
                    raise
        except OSError as exc:
            raise WorkspaceError(f"Could not write engine script: {exc}") from exc
        logger.debug("Wrote engine script to %s", path)
        return path

    def _remove(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Failed to remove engine script %s: %s", path, exc)

    def _run(
        self, command: Sequence[str], cancel: threading.Event | None
    ) -> InvocationResult:
        logger.info("Running engine: %s", " ".join(command))
        try:
            process = subprocess.Popen(
                list(command),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.error("Engine could not be started: %s", exc)
            return InvocationResult(
                status=InvocationStatus.START_FAILED,
                output="",
                error=f"Failed to start {command[0]}: {exc}",
            )

        with process:
            if cancel is None and self._timeout_s is None:
                output, _ = process.communicate()
                return self._finished(process.returncode, output)
            return self._wait(process, cancel)

    def _wait(
        self, process: subprocess.Popen, cancel: threading.Event | None
    ) -> InvocationResult:
        deadline = (
            time.monotonic() + self._timeout_s if self._timeout_s is not None else None
        )
        while True:
            wait_s = self._poll_interval_s
            if deadline is not None:
                wait_s = max(0.0, min(wait_s, deadline - time.monotonic()))
            try:
                output, _ = process.communicate(timeout=wait_s)
            except subprocess.TimeoutExpired:
                pass
            else:
                return self._finished(process.returncode, output)

            if cancel is not None and cancel.is_set():
                return self._stop(process, InvocationStatus.CANCELLED, "Engine run cancelled")
            if deadline is not None and time.monotonic() >= deadline:
                return self._stop(
                    process,
                    InvocationStatus.TIMED_OUT,
                    f"Engine timed out after {self._timeout_s:g}s",
                )

    def _stop(
        self, process: subprocess.Popen, status: InvocationStatus, reason: str
    ) -> InvocationResult:
        logger.warning("%s; killing pid %s", reason, process.pid)
        process.kill()
        output, _ = process.communicate()
        return InvocationResult(
            status=status,
            output=output or "",
            exit_code=process.returncode,
            error=reason,
        )

    def _finished(self, returncode: int, output: str | None) -> InvocationResult:
        status = (
            InvocationStatus.EXITED_OK
            if returncode == 0
            else InvocationStatus.EXITED_FAILURE
        )
        return InvocationResult(status=status, output=output or "", exit_code=returncode)
