"""Provider package for external engine integrations."""

from model_service.providers.engine import BlenderInvoker, EngineInvoker

__all__ = [
    "BlenderInvoker",
    "EngineInvoker",
]
