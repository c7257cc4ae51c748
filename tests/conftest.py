"""
Pytest configuration and fixtures.
"""

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.api.main import create_app
from app.config import Settings
from app.core.facade import OperationFacade
from app.core.paths import PathSandbox
from app.errors import EngineError
from app.models.operations import CommandSpec, OperationResult


class FakeEngine:
    """In-memory engine that records calls and serves canned answers."""

    def __init__(self) -> None:
        self.local_images: set[str] = set()
        self.pullable: set[str] = set()
        self.pull_errors: dict[str, str] = {}
        self.calls: list[tuple[str, tuple, dict]] = []
        self.stats: dict[str, Any] = {}
        self.logs = "line one\nline two\n"
        self.fail_with: str | None = None

    def _record(self, name: str, /, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))
        if self.fail_with is not None:
            raise EngineError(self.fail_with)

    def calls_to(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]

    def list_containers(self, all=False):
        self._record("list_containers", all=all)
        return [{"Id": "abc123", "Names": ["/web"], "State": "running"}]

    def create_container(self, image, name=None, command=None, env=None):
        self._record("create_container", image, name=name, command=command, env=env)
        return {"Id": "new123", "Warnings": []}

    def start_container(self, container_id):
        self._record("start_container", container_id)

    def stop_container(self, container_id, timeout_s=10):
        self._record("stop_container", container_id, timeout_s=timeout_s)

    def restart_container(self, container_id):
        self._record("restart_container", container_id)

    def remove_container(self, container_id, force=True):
        self._record("remove_container", container_id, force=force)

    def inspect_container(self, container_id):
        self._record("inspect_container", container_id)
        return {"Id": container_id, "State": {"Running": True}}

    def container_logs(self, container_id, tail="200", stdout=True, stderr=True):
        self._record("container_logs", container_id, tail=tail, stdout=stdout, stderr=stderr)
        return self.logs

    def exec_in_container(self, container_id, command):
        self._record("exec_in_container", container_id, command)
        return "hello\n"

    def container_stats(self, container_id):
        self._record("container_stats", container_id)
        return self.stats

    def prune_containers(self):
        self._record("prune_containers")
        return {"ContainersDeleted": ["old1"], "SpaceReclaimed": 1024}

    def list_images(self, reference=None):
        self._record("list_images", reference=reference)
        if reference is None:
            return [{"Id": f"sha256:{ref}", "RepoTags": [ref]} for ref in sorted(self.local_images)]
        if reference in self.local_images:
            return [{"Id": f"sha256:{reference}", "RepoTags": [reference]}]
        return []

    def pull_image(self, reference, platform=None):
        self._record("pull_image", reference, platform=platform)
        if reference not in self.pullable:
            raise EngineError(self.pull_errors.get(reference, f"pull access denied for {reference}"))
        self.local_images.add(reference)

    def remove_image(self, reference, force=False, prune_children=False):
        self._record("remove_image", reference, force=force, prune_children=prune_children)
        return [{"Untagged": reference}]

    def prune_images(self):
        self._record("prune_images")
        return {"ImagesDeleted": None, "SpaceReclaimed": 0}

    def list_volumes(self):
        self._record("list_volumes")
        return {"Volumes": [{"Name": "data"}], "Warnings": None}

    def create_volume(self, name=None, driver=None, labels=None, driver_opts=None):
        self._record("create_volume", name=name, driver=driver, labels=labels, driver_opts=driver_opts)
        return {"Name": name or "generated", "Driver": driver or "local"}

    def inspect_volume(self, name):
        self._record("inspect_volume", name)
        return {"Name": name, "Mountpoint": f"/var/lib/docker/volumes/{name}/_data"}

    def remove_volume(self, name, force=True):
        self._record("remove_volume", name, force=force)

    def prune_volumes(self):
        self._record("prune_volumes")
        return {"VolumesDeleted": [], "SpaceReclaimed": 0}


class FakeRunner:
    """Records command specs instead of executing them."""

    def __init__(self, result: OperationResult | None = None) -> None:
        self.result = result or OperationResult(success=True, output="ok\n", exit_code=0)
        self.specs: list[CommandSpec] = []
        self.seen_files: dict[str, str] = {}

    def run(self, spec: CommandSpec) -> OperationResult:
        self.specs.append(spec)
        if "-f" in spec.args and spec.args[0] == "build":
            dockerfile = spec.args[spec.args.index("-f") + 1]
            self.seen_files[dockerfile] = Path(dockerfile).read_text(encoding="utf-8")
        return self.result


@pytest.fixture
def compose_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "compose"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(compose_dir: Path) -> Settings:
    return Settings(compose_dir=compose_dir, log_level="WARNING")


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def facade(engine: FakeEngine, runner: FakeRunner, compose_dir: Path, settings: Settings) -> OperationFacade:
    return OperationFacade(engine, runner, PathSandbox(compose_dir), settings)


@pytest.fixture
def test_client(settings: Settings, engine: FakeEngine, runner: FakeRunner) -> TestClient:
    return TestClient(create_app(settings, engine=engine, runner=runner))
