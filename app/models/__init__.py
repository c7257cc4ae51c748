"""Shared data models for the container gateway."""

from app.models.operations import (
    CommandSpec,
    ComposeFileItem,
    ContainerStats,
    FileRecord,
    OperationResult,
)

__all__ = [
    "CommandSpec",
    "ComposeFileItem",
    "ContainerStats",
    "FileRecord",
    "OperationResult",
]
