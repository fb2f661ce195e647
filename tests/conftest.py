"""Shared test fixtures for model-service."""

from __future__ import annotations

import os
import stat
import sys
import threading
from pathlib import Path
from typing import Callable

import pytest

from model_service.models.pipeline import (
    InvocationResult,
    InvocationStatus,
    RenderedScript,
)
from model_service.pipeline.renderer import ScriptRenderer

# Plain-Python stand-in for the Blender template: the fragment runs as-is
# and can write to OUTPUT_PATH itself.
PLAIN_TEMPLATE = "OUTPUT_PATH = {{ Filename | tojson }}\n{{ ModelCode }}\n"


class FakeInvoker:
    """Records calls and optionally writes an artifact where the script would."""

    def __init__(
        self,
        result: InvocationResult | None = None,
        artifact: bytes | None = None,
    ) -> None:
        self.result = result or InvocationResult(
            status=InvocationStatus.EXITED_OK, output="", exit_code=0
        )
        self.artifact = artifact
        self.calls: list[RenderedScript] = []

    def invoke(
        self,
        script: RenderedScript,
        cancel: threading.Event | None = None,
    ) -> InvocationResult:
        self.calls.append(script)
        if self.artifact is not None:
            Path(script.output_path).write_bytes(self.artifact)
        return self.result


@pytest.fixture
def plain_template(tmp_path: Path) -> Path:
    path = tmp_path / "templates" / "plain.py.j2"
    path.parent.mkdir()
    path.write_text(PLAIN_TEMPLATE, encoding="utf-8")
    return path


@pytest.fixture
def plain_renderer(plain_template: Path) -> ScriptRenderer:
    return ScriptRenderer(str(plain_template))


@pytest.fixture
def fake_engine(tmp_path: Path) -> str:
    """An executable that accepts ``-b --python <script>`` and runs the script with Python."""
    if sys.platform == "win32":
        pytest.skip("fake engine is a POSIX shell script")
    path = tmp_path / "bin" / "fake-blender"
    path.parent.mkdir()
    path.write_text(f'#!/bin/sh\nexec "{sys.executable}" "$3"\n', encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def script_dir(tmp_path: Path) -> Path:
    path = tmp_path / "scripts"
    path.mkdir()
    return path


@pytest.fixture
def make_invoker() -> Callable[..., FakeInvoker]:
    return FakeInvoker


@pytest.fixture
def leftover_scripts(script_dir: Path) -> Callable[[], list[str]]:
    """Names of engine scripts still present in ``script_dir``."""

    def _list() -> list[str]:
        return sorted(name for name in os.listdir(script_dir) if name.startswith("blender_"))

    return _list
