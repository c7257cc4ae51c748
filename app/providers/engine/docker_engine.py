"""Docker engine provider backed by the docker SDK."""

from __future__ import annotations

from contextlib import contextmanager
import logging
import time
from typing import Any, Callable, Iterable, Iterator, Sequence

import docker
from docker.errors import APIError, DockerException
import requests

from app.errors import EngineError, EngineTimeoutError
from app.providers.engine.base import EngineClient

logger = logging.getLogger(__name__)

# Per-operation deadlines in seconds. Each one is the client socket timeout and,
# for streamed responses, the wall-clock budget for draining the stream.
LIST_TIMEOUT = 10
INSPECT_TIMEOUT = 15
START_TIMEOUT = 20
MUTATE_TIMEOUT = 30
LONG_TIMEOUT = 60
EXEC_TIMEOUT = 120
PULL_TIMEOUT = 120

ClientFactory = Callable[[float], "docker.DockerClient"]


def _from_env(timeout: float) -> docker.DockerClient:
    return docker.from_env(timeout=timeout)


class DockerEngineClient(EngineClient):
    def __init__(self, client_factory: ClientFactory | None = None) -> None:
        self._client_factory = client_factory or _from_env

    def list_containers(self, all: bool = False) -> list[dict[str, Any]]:
        with self._api("list containers", LIST_TIMEOUT) as api:
            return api.containers(all=all)

    def create_container(
        self,
        image: str,
        name: str | None = None,
        command: Sequence[str] | None = None,
        env: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        with self._api("create container", LONG_TIMEOUT) as api:
            return api.create_container(
                image,
                command=list(command) if command else None,
                environment=list(env) if env else None,
                name=name or None,
                tty=False,
            )

    def start_container(self, container_id: str) -> None:
        with self._api("start container", START_TIMEOUT) as api:
            api.start(container_id)

    def stop_container(self, container_id: str, timeout_s: int = 10) -> None:
        with self._api("stop container", MUTATE_TIMEOUT) as api:
            api.stop(container_id, timeout=timeout_s)

    def restart_container(self, container_id: str) -> None:
        with self._api("restart container", LONG_TIMEOUT) as api:
            api.restart(container_id)

    def remove_container(self, container_id: str, force: bool = True) -> None:
        with self._api("remove container", START_TIMEOUT) as api:
            api.remove_container(container_id, force=force)

    def inspect_container(self, container_id: str) -> dict[str, Any]:
        with self._api("inspect container", INSPECT_TIMEOUT) as api:
            return api.inspect_container(container_id)

    def container_logs(
        self,
        container_id: str,
        tail: str = "200",
        stdout: bool = True,
        stderr: bool = True,
    ) -> str:
        deadline = time.monotonic() + LONG_TIMEOUT
        with self._api("container logs", LONG_TIMEOUT) as api:
            chunks = api.logs(
                container_id,
                stdout=stdout,
                stderr=stderr,
                stream=True,
                follow=False,
                tail=tail if tail == "all" else int(tail),
            )
            return _drain(chunks, deadline, "container logs", LONG_TIMEOUT)

    def exec_in_container(self, container_id: str, command: Sequence[str]) -> str:
        deadline = time.monotonic() + EXEC_TIMEOUT
        with self._api("exec", EXEC_TIMEOUT) as api:
            created = api.exec_create(container_id, list(command), stdout=True, stderr=True)
            chunks = api.exec_start(created["Id"], stream=True)
            return _drain(chunks, deadline, "exec", EXEC_TIMEOUT)

    def container_stats(self, container_id: str) -> dict[str, Any]:
        with self._api("container stats", LIST_TIMEOUT) as api:
            return api.stats(container_id, stream=False)

    def prune_containers(self) -> dict[str, Any]:
        with self._api("prune containers", LONG_TIMEOUT) as api:
            return api.prune_containers()

    def list_images(self, reference: str | None = None) -> list[dict[str, Any]]:
        filters = {"reference": reference} if reference else None
        with self._api("list images", INSPECT_TIMEOUT) as api:
            return api.images(filters=filters)

    def pull_image(self, reference: str, platform: str | None = None) -> None:
        logger.info("Pulling image %s", reference)
        deadline = time.monotonic() + PULL_TIMEOUT
        with self._api("pull image", PULL_TIMEOUT) as api:
            for event in api.pull(reference, stream=True, decode=True, platform=platform):
                _check_deadline(deadline, "pull image", PULL_TIMEOUT)
                if isinstance(event, dict) and event.get("error"):
                    raise EngineError(str(event["error"]))

    def remove_image(
        self, reference: str, force: bool = False, prune_children: bool = False
    ) -> list[dict[str, Any]]:
        with self._api("remove image", MUTATE_TIMEOUT) as api:
            return api.remove_image(reference, force=force, noprune=not prune_children)

    def prune_images(self) -> dict[str, Any]:
        with self._api("prune images", LONG_TIMEOUT) as api:
            return api.prune_images()

    def list_volumes(self) -> dict[str, Any]:
        with self._api("list volumes", INSPECT_TIMEOUT) as api:
            return api.volumes()

    def create_volume(
        self,
        name: str | None = None,
        driver: str | None = None,
        labels: dict[str, str] | None = None,
        driver_opts: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        with self._api("create volume", MUTATE_TIMEOUT) as api:
            return api.create_volume(
                name=name, driver=driver, driver_opts=driver_opts, labels=labels
            )

    def inspect_volume(self, name: str) -> dict[str, Any]:
        with self._api("inspect volume", INSPECT_TIMEOUT) as api:
            return api.inspect_volume(name)

    def remove_volume(self, name: str, force: bool = True) -> None:
        with self._api("remove volume", MUTATE_TIMEOUT) as api:
            api.remove_volume(name, force=force)

    def prune_volumes(self) -> dict[str, Any]:
        with self._api("prune volumes", LONG_TIMEOUT) as api:
            return api.prune_volumes()

    @contextmanager
    def _api(self, operation: str, timeout: float) -> Iterator[Any]:
        client = None
        try:
            client = self._client_factory(timeout)
            yield client.api
        except requests.exceptions.Timeout as exc:
            logger.warning("Engine call %r exceeded %ss", operation, timeout)
            raise EngineTimeoutError(operation, timeout) from exc
        except APIError as exc:
            raise EngineError(exc.explanation or str(exc)) from exc
        except (DockerException, requests.exceptions.RequestException) as exc:
            raise EngineError(str(exc)) from exc
        finally:
            if client is not None:
                client.close()


def _check_deadline(deadline: float, operation: str, timeout: float) -> None:
    if time.monotonic() > deadline:
        logger.warning("Engine call %r exceeded %ss", operation, timeout)
        raise EngineTimeoutError(operation, timeout)


def _drain(
    chunks: Iterable[bytes | str], deadline: float, operation: str, timeout: float
) -> str:
    """Collect a streamed response, giving up once ``deadline`` has passed.

    The socket timeout only bounds each read, so a stream that keeps producing
    output is cut off here instead.
    """
    collected: list[bytes] = []
    for chunk in chunks:
        _check_deadline(deadline, operation, timeout)
        collected.append(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
    return _decode(b"".join(collected))


def _decode(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw
