"""Command runner implementations and interfaces."""

from app.providers.process.base import CommandRunner
from app.providers.process.local import LocalCommandRunner

__all__ = ["CommandRunner", "LocalCommandRunner"]
