"""Container engine provider implementations and interfaces."""

from app.providers.engine.base import EngineClient
from app.providers.engine.docker_engine import DockerEngineClient

__all__ = ["DockerEngineClient", "EngineClient"]
