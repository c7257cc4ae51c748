"""Builders for the docker CLI invocations the gateway runs."""

from __future__ import annotations

import os
from typing import Mapping, Sequence

from app.errors import BadRequestError
from app.models.operations import CommandSpec

DEFAULT_LOG_ARGS = ("--no-color", "--tail", "200")


class DockerCommands:
    def __init__(
        self,
        docker_binary: str = "docker",
        browse_image: str = "alpine:latest",
        browse_mount: str = "/volume",
    ) -> None:
        self._docker = docker_binary
        self._browse_image = browse_image
        self._browse_mount = browse_mount

    def compose(
        self,
        file_path: str,
        subcommand: str,
        args: Sequence[str] = (),
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandSpec:
        if not file_path:
            raise BadRequestError("file_path required")
        return CommandSpec(
            executable=self._docker,
            args=("compose", "-f", file_path, subcommand, *args),
            work_dir=work_dir or os.path.dirname(file_path),
            env=dict(env or {}),
        )

    def compose_up(
        self,
        file_path: str,
        args: Sequence[str] = (),
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandSpec:
        return self.compose(file_path, "up", [*args, "-d"], work_dir, env)

    def compose_down(
        self,
        file_path: str,
        args: Sequence[str] = (),
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandSpec:
        return self.compose(file_path, "down", args, work_dir, env)

    def compose_ps(
        self,
        file_path: str,
        args: Sequence[str] = (),
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandSpec:
        return self.compose(file_path, "ps", args, work_dir, env)

    def compose_logs(
        self,
        file_path: str,
        args: Sequence[str] = (),
        work_dir: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandSpec:
        return self.compose(file_path, "logs", args or DEFAULT_LOG_ARGS, work_dir, env)

    def compose_scale(
        self,
        file_path: str,
        service: str,
        replicas: int,
        work_dir: str | None = None,
    ) -> CommandSpec:
        if not service or replicas < 0:
            raise BadRequestError("service and replicas required")
        args = ["--no-recreate", "--detach", "--scale", f"{service}={replicas}"]
        return self.compose(file_path, "up", args, work_dir)

    def build(
        self,
        image_name: str,
        dockerfile_path: str,
        context_path: str | None = None,
        platform: str | None = None,
    ) -> CommandSpec:
        args = ["build"]
        if platform:
            args.extend(["--platform", platform])
        args.extend(["-t", image_name, "-f", dockerfile_path, context_path or "."])
        return CommandSpec(executable=self._docker, args=tuple(args))

    def browse(self, volume: str, path: str = "/") -> CommandSpec:
        """List ``path`` inside ``volume`` from a throwaway container."""
        target = f"{self._browse_mount}{path}"
        return CommandSpec(
            executable=self._docker,
            args=(
                "run",
                "--rm",
                "-v",
                f"{volume}:{self._browse_mount}",
                self._browse_image,
                "ls",
                "-la",
                target,
            ),
        )
