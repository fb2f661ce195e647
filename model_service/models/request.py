"""Inbound request body."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr


class ModelRequest(BaseModel):
    """Body of ``POST /create_model``."""

    model_config = ConfigDict(extra="ignore", frozen=True, protected_namespaces=())

    model_code: StrictStr
