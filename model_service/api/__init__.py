"""HTTP surface for the model service."""

from model_service.api.main import create_app

__all__ = ["create_app"]
