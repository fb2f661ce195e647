"""Engine invoker implementations and interfaces."""

from model_service.providers.engine.base import EngineInvoker
from model_service.providers.engine.local import BlenderInvoker

__all__ = ["BlenderInvoker", "EngineInvoker"]
