"""Script renderer: binds a code fragment and an output path into the engine script."""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from model_service.errors import RenderError
from model_service.models.pipeline import RenderContext, RenderedScript

logger = logging.getLogger(__name__)

TEMPLATE_FILE = "main.py.j2"
TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"


class ScriptRenderer:
    """Renders the engine script from a Jinja2 template.

    The template sees two variables: ``ModelCode``, the caller's fragment
    inserted as-is, and ``Filename``, the absolute artifact path. Any other
    variable the template references fails the render.
    """

    def __init__(self, template_path: str | None = None) -> None:
        path = Path(template_path) if template_path else TEMPLATE_DIR / TEMPLATE_FILE
        self._template_path = path
        self._env = Environment(
            loader=FileSystemLoader(str(path.parent)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    @property
    def template_path(self) -> Path:
        return self._template_path

    def render(self, context: RenderContext) -> RenderedScript:
        try:
            template = self._env.get_template(self._template_path.name)
            text = template.render(
                ModelCode=context.model_code,
                Filename=context.output_path,
            )
        except TemplateNotFound as exc:
            logger.error("Script template not found: %s", self._template_path)
            raise RenderError(f"Template not found: {self._template_path}") from exc
        except TemplateError as exc:
            logger.error("Error rendering script template: %s", exc)
            raise RenderError(f"Error rendering template: {exc}") from exc
        except OSError as exc:
            logger.error("Error reading script template: %s", exc)
            raise RenderError(f"Error reading template: {exc}") from exc
        return RenderedScript(text=text, output_path=context.output_path)


def render(model_code: str, output_path: str) -> RenderedScript:
    """Render with the packaged template."""
    return ScriptRenderer().render(RenderContext(model_code=model_code, output_path=output_path))
