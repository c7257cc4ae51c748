"""Provider package for container engine and command runner integrations."""

from app.providers.engine import DockerEngineClient, EngineClient
from app.providers.process import CommandRunner, LocalCommandRunner

__all__ = [
    "CommandRunner",
    "DockerEngineClient",
    "EngineClient",
    "LocalCommandRunner",
]
