from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from model_service.errors import RequestDecodeError
from model_service.models.pipeline import STL, InvocationResult, InvocationStatus
from model_service.pipeline.handler import ModelPipeline, decode_request
from model_service.pipeline.renderer import ScriptRenderer
from model_service.providers.engine import BlenderInvoker


def _body(code: str) -> bytes:
    return json.dumps({"model_code": code}).encode()


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


def test_decode_request_ignores_extra_keys() -> None:
    request = decode_request(b'{"model_code": "cube()", "extra": 1}')
    assert request.model_code == "cube()"


@pytest.mark.parametrize(
    "body",
    [b'{"model_code": "cube(', b"", b"[]", b'{"code": "x"}', b'{"model_code": 5}', b"\xff\xfe"],
)
def test_decode_request_rejects(body: bytes) -> None:
    with pytest.raises(RequestDecodeError):
        decode_request(body)


def test_malformed_body_never_invokes_engine(plain_renderer: ScriptRenderer, make_invoker) -> None:
    invoker = make_invoker()
    pipeline = ModelPipeline(plain_renderer, invoker)

    payload = pipeline.handle(b'{"model_code": "cube(size=2)"')

    assert payload.status_code == 400
    assert payload.body.startswith(b"Invalid request body")
    assert invoker.calls == []


def test_output_path_is_unique_and_cleaned_up(plain_renderer: ScriptRenderer, work_dir: Path, make_invoker) -> None:
    invoker = make_invoker(artifact=b"x" * 8)
    pipeline = ModelPipeline(plain_renderer, invoker, temp_dir=str(work_dir))

    first = pipeline.handle(_body("cube()"))
    second = pipeline.handle(_body("cube()"))

    assert first.status_code == second.status_code == 200
    paths = [call.output_path for call in invoker.calls]
    assert paths[0] != paths[1]
    assert all(os.path.isabs(p) and p.endswith(".glb") for p in paths)
    assert os.listdir(work_dir) == []


def test_output_format_controls_extension(plain_renderer: ScriptRenderer, make_invoker) -> None:
    invoker = make_invoker(artifact=b"solid")
    payload = ModelPipeline(plain_renderer, invoker, output_format=STL).handle(_body("x"))

    assert invoker.calls[0].output_path.endswith(".stl")
    assert payload.headers["Content-Disposition"] == "attachment; filename=model.stl"


def test_render_error_is_500(tmp_path: Path, make_invoker) -> None:
    invoker = make_invoker()
    pipeline = ModelPipeline(ScriptRenderer(str(tmp_path / "missing.j2")), invoker)

    payload = pipeline.handle(_body("cube()"))

    assert payload.status_code == 500
    assert json.loads(payload.body)["error"] == "Internal server error"
    assert invoker.calls == []


def test_workspace_failure_is_500(plain_renderer: ScriptRenderer, tmp_path: Path, make_invoker) -> None:
    invoker = make_invoker()
    pipeline = ModelPipeline(plain_renderer, invoker, temp_dir=str(tmp_path / "missing"))

    payload = pipeline.handle(_body("cube()"))

    assert payload.status_code == 500
    assert invoker.calls == []


def test_engine_error_in_log_is_422(plain_renderer: ScriptRenderer, make_invoker) -> None:
    log = "Traceback (most recent call last):\nException: bad\n"
    invoker = make_invoker(
        result=InvocationResult(status=InvocationStatus.EXITED_OK, output=log, exit_code=0),
        artifact=b"not used",
    )

    payload = ModelPipeline(plain_renderer, invoker).handle(_body("raise Exception('bad')"))

    assert payload.status_code == 422
    assert json.loads(payload.body)["log"] == log


def test_end_to_end_with_fake_engine(
    fake_engine: str, plain_renderer: ScriptRenderer, work_dir: Path, script_dir: Path, leftover_scripts
) -> None:
    invoker = BlenderInvoker(binary=fake_engine, temp_dir=str(script_dir))
    pipeline = ModelPipeline(plain_renderer, invoker, temp_dir=str(work_dir))
    code = "with open(OUTPUT_PATH, 'wb') as fh:\n    fh.write(b'\\x01' * 1024)"

    first = pipeline.handle(_body(code))
    second = pipeline.handle(_body(code))

    assert first.status_code == 200
    assert first.headers["Content-Length"] == "1024"
    assert first.body == b"\x01" * 1024
    assert len(first.body) == len(second.body)
    assert leftover_scripts() == []
    assert os.listdir(work_dir) == []


@pytest.mark.parametrize(
    "code, kind",
    [
        ("raise Exception('bad')", "process_failed"),
        ("print('Error: engine complained')", "engine_reported_error"),
        ("print('nothing written')", "artifact_missing"),
        ("open(OUTPUT_PATH, 'wb').close()", "artifact_empty"),
    ],
)
def test_failures_with_fake_engine(
    fake_engine: str, plain_renderer: ScriptRenderer, script_dir: Path, code: str, kind: str, leftover_scripts
) -> None:
    invoker = BlenderInvoker(binary=fake_engine, temp_dir=str(script_dir))

    payload = ModelPipeline(plain_renderer, invoker).handle(_body(code))

    assert payload.status_code == 422
    assert json.loads(payload.body)["outcome"] == kind
    assert leftover_scripts() == []
