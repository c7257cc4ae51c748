"""One entry point per container, image, volume and compose intent."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import posixpath
import tempfile
from typing import Any, Mapping, Sequence

from app.config import Settings
from app.core.commands import DockerCommands
from app.core.images import ImageResolver
from app.core.listing import parse_long_listing
from app.core.paths import PathSandbox
from app.errors import BadRequestError, GatewayError, SubprocessFailure
from app.models.operations import (
    CommandSpec,
    ComposeFileItem,
    ContainerStats,
    FileRecord,
    OperationResult,
)
from app.providers.engine.base import EngineClient
from app.providers.process.base import CommandRunner

logger = logging.getLogger(__name__)

PRACTICE_FILES = {
    "compose": ("docker-compose.yml", (".yml", ".yaml"), ".yml"),
    "nginx": ("nginx.conf", (".conf",), ".conf"),
}


class OperationFacade:
    def __init__(
        self,
        engine: EngineClient,
        runner: CommandRunner,
        sandbox: PathSandbox,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self._engine = engine
        self._runner = runner
        self._sandbox = sandbox
        self._images = ImageResolver(engine)
        self._commands = DockerCommands(
            docker_binary=settings.docker_binary,
            browse_image=settings.browse_image,
            browse_mount=settings.browse_mount,
        )

    # Containers

    def list_containers(self, all: bool = False) -> list[dict[str, Any]]:
        return self._engine.list_containers(all=all)

    def create_container(
        self,
        image: str,
        name: str | None = None,
        command: Sequence[str] | None = None,
        env: Sequence[str] | None = None,
        platform: str | None = None,
    ) -> dict[str, Any]:
        if not image:
            raise BadRequestError("image is required")
        reference = self._images.ensure_available(image, platform=platform or None)
        logger.info("Creating container from %s", reference)
        return self._engine.create_container(reference, name=name, command=command, env=env)

    def start_container(self, container_id: str) -> dict[str, str]:
        self._engine.start_container(container_id)
        return {"status": "started", "id": container_id}

    def stop_container(self, container_id: str) -> dict[str, str]:
        self._engine.stop_container(container_id, timeout_s=10)
        return {"status": "stopped", "id": container_id}

    def restart_container(self, container_id: str) -> dict[str, str]:
        self._engine.restart_container(container_id)
        return {"status": "restarted", "id": container_id}

    def delete_container(self, container_id: str) -> dict[str, str]:
        self._engine.remove_container(container_id, force=True)
        return {"status": "deleted", "id": container_id}

    def inspect_container(self, container_id: str) -> dict[str, Any]:
        return self._engine.inspect_container(container_id)

    def container_logs(
        self,
        container_id: str,
        tail: str | None = None,
        stdout: bool = True,
        stderr: bool = True,
    ) -> str:
        tail = tail or "200"
        if tail != "all" and not tail.isdigit():
            raise BadRequestError("tail must be a non-negative integer or 'all'")
        return self._engine.container_logs(
            container_id, tail=tail, stdout=stdout, stderr=stderr
        )

    def exec_in_container(self, container_id: str, command: Sequence[str]) -> dict[str, str]:
        if not command:
            raise BadRequestError("cmd required")
        return {"output": self._engine.exec_in_container(container_id, command)}

    def container_stats(self, container_id: str) -> ContainerStats:
        return summarize_stats(self._engine.container_stats(container_id))

    def prune_containers(self) -> dict[str, Any]:
        return self._engine.prune_containers()

    # Images

    def list_images(self) -> list[dict[str, Any]]:
        return self._engine.list_images()

    def build_image(
        self,
        image_name: str,
        dockerfile: str,
        context_path: str | None = None,
        platform: str | None = None,
    ) -> OperationResult:
        if not image_name or not dockerfile:
            raise BadRequestError("image_name and dockerfile are required")
        handle = tempfile.NamedTemporaryFile(
            "w", prefix="Dockerfile_", suffix=".tmp", delete=False, encoding="utf-8"
        )
        try:
            with handle:
                handle.write(dockerfile)
            spec = self._commands.build(image_name, handle.name, context_path, platform)
            return self._runner.run(spec)
        finally:
            os.remove(handle.name)

    def delete_image(
        self, reference: str, force: bool = False, prune_children: bool = False
    ) -> dict[str, str]:
        if not reference:
            raise BadRequestError("image ref required")
        self._engine.remove_image(reference, force=force, prune_children=prune_children)
        return {"status": "deleted", "ref": reference}

    def prune_images(self) -> dict[str, Any]:
        return self._engine.prune_images()

    # Compose

    def list_compose_files(self, recursive: bool = False) -> list[ComposeFileItem]:
        base = self._sandbox.ensure()
        items: list[ComposeFileItem] = []
        self._scan(base, recursive, items)
        return items

    def upload_compose_file(self, name: str, content: str) -> dict[str, str]:
        if not name or not content:
            raise BadRequestError("name and content required")
        self._sandbox.ensure()
        destination = self._sandbox.resolve(name)
        self._write(destination, content)
        return {"path": str(destination)}

    def read_compose_file(self, path: str) -> dict[str, str]:
        if not path:
            raise BadRequestError("path required")
        target = self._sandbox.resolve(path)
        try:
            content = target.read_text(encoding="utf-8")
        except OSError as exc:
            raise GatewayError(str(exc)) from exc
        return {"name": target.name, "content": content}

    def compose_up(
        self,
        file_path: str,
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
        args: Sequence[str] = (),
    ) -> OperationResult:
        file_path, work_dir = self._compose_paths(file_path, work_dir)
        return self._run(self._commands.compose_up(file_path, args, work_dir, env))

    def compose_down(
        self,
        file_path: str,
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
        args: Sequence[str] = (),
    ) -> OperationResult:
        file_path, work_dir = self._compose_paths(file_path, work_dir)
        return self._run(self._commands.compose_down(file_path, args, work_dir, env))

    def compose_ps(
        self,
        file_path: str,
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
        args: Sequence[str] = (),
    ) -> OperationResult:
        file_path, work_dir = self._compose_paths(file_path, work_dir)
        return self._run(self._commands.compose_ps(file_path, args, work_dir, env))

    def compose_logs(
        self,
        file_path: str,
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
        args: Sequence[str] = (),
    ) -> OperationResult:
        file_path, work_dir = self._compose_paths(file_path, work_dir)
        return self._run(self._commands.compose_logs(file_path, args, work_dir, env))

    def compose_scale(
        self,
        file_path: str,
        service: str,
        replicas: int,
        work_dir: str | None = None,
    ) -> OperationResult:
        file_path, work_dir = self._compose_paths(file_path, work_dir)
        return self._run(
            self._commands.compose_scale(file_path, service, replicas, work_dir)
        )

    def save_practice_file(
        self, kind: str, file_name: str | None, content: str
    ) -> dict[str, str]:
        if kind not in PRACTICE_FILES:
            raise BadRequestError(f"unknown file kind: {kind}")
        default_name, suffixes, extension = PRACTICE_FILES[kind]
        file_name = file_name or default_name
        if not file_name.endswith(suffixes):
            file_name += extension
        self._sandbox.ensure()
        destination = self._sandbox.resolve(file_name)
        self._write(destination, content)
        return {
            "message": f"File saved successfully: {file_name}",
            "path": str(destination),
        }

    # Volumes

    def list_volumes(self) -> dict[str, Any]:
        return self._engine.list_volumes()

    def create_volume(
        self,
        name: str | None = None,
        driver: str | None = None,
        labels: dict[str, str] | None = None,
        driver_opts: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return self._engine.create_volume(
            name=name or None, driver=driver or None, labels=labels, driver_opts=driver_opts
        )

    def inspect_volume(self, name: str) -> dict[str, Any]:
        return self._engine.inspect_volume(name)

    def delete_volume(self, name: str) -> dict[str, str]:
        self._engine.remove_volume(name, force=True)
        return {"status": "deleted", "name": name}

    def prune_volumes(self) -> dict[str, Any]:
        return self._engine.prune_volumes()

    def browse_volume(self, name: str, path: str | None = None) -> dict[str, Any]:
        if not name:
            raise BadRequestError("volume name required")
        path = posixpath.normpath("/" + (path or "/").lstrip("/"))
        logger.info("Browsing volume %s at path %s", name, path)
        result = self._runner.run(self._commands.browse(name, path))
        if not result.success:
            raise SubprocessFailure(f"Failed to browse volume: {result.error}", result)
        files: list[FileRecord] = parse_long_listing(result.output, path)
        logger.debug("Parsed %d entries from %s:%s", len(files), name, path)
        return {"path": path, "files": files}

    def _compose_paths(
        self, file_path: str, work_dir: str | None
    ) -> tuple[str, str | None]:
        if not file_path:
            raise BadRequestError("file_path required")
        resolved = str(self._sandbox.resolve(file_path))
        if work_dir:
            work_dir = str(self._sandbox.resolve(work_dir))
        return resolved, work_dir

    def _run(self, spec: CommandSpec) -> OperationResult:
        result = self._runner.run(spec)
        if not result.success:
            logger.warning("%s failed: %s", " ".join(spec.argv[:4]), result.error)
        return result

    def _scan(self, directory: Path, recursive: bool, items: list[ComposeFileItem]) -> None:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            # Symlinks are listed as entries, never followed.
            if entry.is_dir() and not entry.is_symlink():
                if recursive:
                    self._scan(entry, recursive, items)
                continue
            items.append(
                ComposeFileItem(name=self._sandbox.relative(entry), path=str(entry))
            )

    @staticmethod
    def _write(destination: Path, content: str) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise GatewayError(str(exc)) from exc


def summarize_stats(raw: dict[str, Any]) -> ContainerStats:
    """Reduce one raw stats sample to the figures the dashboard shows."""
    cpu = raw.get("cpu_stats") or {}
    precpu = raw.get("precpu_stats") or {}
    cpu_usage = cpu.get("cpu_usage") or {}
    cpu_delta = float(cpu_usage.get("total_usage", 0)) - float(
        (precpu.get("cpu_usage") or {}).get("total_usage", 0)
    )
    system_delta = float(cpu.get("system_cpu_usage", 0)) - float(
        precpu.get("system_cpu_usage", 0)
    )
    online = cpu.get("online_cpus") or len(cpu_usage.get("percpu_usage") or [])
    cpu_percent = 0.0
    if system_delta > 0 and cpu_delta > 0:
        cpu_percent = (cpu_delta / system_delta) * online * 100.0

    memory = raw.get("memory_stats") or {}
    mem_usage = float(memory.get("usage", 0))
    mem_limit = float(memory.get("limit", 0))
    mem_percent = (mem_usage / mem_limit) * 100.0 if mem_limit > 0 else 0.0

    return ContainerStats(
        cpu_percent=cpu_percent,
        mem_usage=mem_usage,
        mem_limit=mem_limit,
        mem_percent=mem_percent,
        pids=(raw.get("pids_stats") or {}).get("current"),
        net=raw.get("networks"),
        blkio=raw.get("blkio_stats"),
    )
