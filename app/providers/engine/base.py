"""Container engine provider interface."""

from __future__ import annotations

from typing import Any, Protocol, Sequence


class EngineClient(Protocol):
    def list_containers(self, all: bool = False) -> list[dict[str, Any]]:
        ...

    def create_container(
        self,
        image: str,
        name: str | None = None,
        command: Sequence[str] | None = None,
        env: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        ...

    def start_container(self, container_id: str) -> None:
        ...

    def stop_container(self, container_id: str, timeout_s: int = 10) -> None:
        ...

    def restart_container(self, container_id: str) -> None:
        ...

    def remove_container(self, container_id: str, force: bool = True) -> None:
        ...

    def inspect_container(self, container_id: str) -> dict[str, Any]:
        ...

    def container_logs(
        self,
        container_id: str,
        tail: str = "200",
        stdout: bool = True,
        stderr: bool = True,
    ) -> str:
        ...

    def exec_in_container(self, container_id: str, command: Sequence[str]) -> str:
        ...

    def container_stats(self, container_id: str) -> dict[str, Any]:
        ...

    def prune_containers(self) -> dict[str, Any]:
        ...

    def list_images(self, reference: str | None = None) -> list[dict[str, Any]]:
        ...

    def pull_image(self, reference: str, platform: str | None = None) -> None:
        ...

    def remove_image(
        self, reference: str, force: bool = False, prune_children: bool = False
    ) -> list[dict[str, Any]]:
        ...

    def prune_images(self) -> dict[str, Any]:
        ...

    def list_volumes(self) -> dict[str, Any]:
        ...

    def create_volume(
        self,
        name: str | None = None,
        driver: str | None = None,
        labels: dict[str, str] | None = None,
        driver_opts: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        ...

    def inspect_volume(self, name: str) -> dict[str, Any]:
        ...

    def remove_volume(self, name: str, force: bool = True) -> None:
        ...

    def prune_volumes(self) -> dict[str, Any]:
        ...
