"""Value objects passed between the facade, the runners and the HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class CommandSpec:
    executable: str
    args: tuple[str, ...] = ()
    work_dir: Optional[str] = None
    env: Mapping[str, str] = field(default_factory=dict)
    timeout_s: Optional[float] = None

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]


@dataclass(frozen=True)
class OperationResult:
    success: bool
    output: str
    error: Optional[str] = None
    exit_code: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": self.success, "output": self.output}
        if self.error is not None:
            body["error"] = self.error
        return body


@dataclass(frozen=True)
class FileRecord:
    name: str
    path: str
    is_dir: bool
    size: int
    mode: str
    mod_time: datetime
    permissions: str


@dataclass(frozen=True)
class ComposeFileItem:
    name: str
    path: str


@dataclass(frozen=True)
class ContainerStats:
    cpu_percent: float
    mem_usage: float
    mem_limit: float
    mem_percent: float
    pids: Optional[int]
    net: Optional[dict[str, Any]]
    blkio: Optional[dict[str, Any]]
