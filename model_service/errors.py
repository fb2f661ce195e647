"""Exceptions raised inside the pipeline.

Engine failures are not exceptions: they come back as an ``Outcome``. The
classes here cover the faults that stop a request before or around the
engine run, and each maps to one HTTP status.
"""

from __future__ import annotations


class ModelServiceError(Exception):
    """Base class for pipeline faults."""

    status_code = 500


class RequestDecodeError(ModelServiceError):
    """The request body is not a valid model request."""

    status_code = 400


class RenderError(ModelServiceError):
    """The script template is unavailable or failed to render."""


class WorkspaceError(ModelServiceError):
    """A temporary file or directory could not be allocated."""


class ArtifactReadError(ModelServiceError):
    """The artifact exists but could not be read back."""
