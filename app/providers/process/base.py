"""Command runner interface."""

from __future__ import annotations

from typing import Protocol

from app.models.operations import CommandSpec, OperationResult


class CommandRunner(Protocol):
    def run(self, spec: CommandSpec) -> OperationResult:
        ...
