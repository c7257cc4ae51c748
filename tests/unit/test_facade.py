"""Tests for OperationFacade orchestration."""

import os
from pathlib import Path

import pytest

from app.core.facade import OperationFacade, summarize_stats
from app.core.paths import PathSandbox
from app.errors import BadRequestError, GatewayError, PathEscapeError, SubprocessFailure
from app.models.operations import OperationResult


class TestContainers:
    def test_create_requires_image(self, facade, engine):
        with pytest.raises(BadRequestError):
            facade.create_container("")
        assert engine.calls == []

    def test_create_uses_resolved_reference(self, facade, engine):
        engine.local_images.add("nginx:latest")

        facade.create_container("nginx", name="web", command=["nginx", "-g", "daemon off;"])

        (args, kwargs), = engine.calls_to("create_container")
        assert args == ("nginx:latest",)
        assert kwargs["name"] == "web"
        assert kwargs["command"] == ["nginx", "-g", "daemon off;"]

    def test_exec_requires_command(self, facade, engine):
        with pytest.raises(BadRequestError):
            facade.exec_in_container("abc", [])
        assert engine.calls_to("exec_in_container") == []

    def test_logs_validates_tail(self, facade):
        with pytest.raises(BadRequestError):
            facade.container_logs("abc", tail="ten")
        assert facade.container_logs("abc", tail="all") == "line one\nline two\n"

    def test_lifecycle_statuses(self, facade, engine):
        assert facade.start_container("c1") == {"status": "started", "id": "c1"}
        assert facade.stop_container("c1") == {"status": "stopped", "id": "c1"}
        assert facade.restart_container("c1") == {"status": "restarted", "id": "c1"}
        assert facade.delete_container("c1") == {"status": "deleted", "id": "c1"}
        assert engine.calls_to("stop_container") == [(("c1",), {"timeout_s": 10})]
        assert engine.calls_to("remove_container") == [(("c1",), {"force": True})]


def test_summarize_stats():
    raw = {
        "cpu_stats": {
            "cpu_usage": {"total_usage": 400, "percpu_usage": [1, 1]},
            "system_cpu_usage": 2000,
        },
        "precpu_stats": {"cpu_usage": {"total_usage": 200}, "system_cpu_usage": 1000},
        "memory_stats": {"usage": 256, "limit": 1024},
        "pids_stats": {"current": 7},
        "networks": {"eth0": {"rx_bytes": 10}},
        "blkio_stats": {"io_service_bytes_recursive": []},
    }

    stats = summarize_stats(raw)

    assert stats.cpu_percent == pytest.approx(40.0)
    assert stats.mem_percent == pytest.approx(25.0)
    assert stats.pids == 7
    assert stats.net == {"eth0": {"rx_bytes": 10}}


def test_summarize_stats_prefers_online_cpus_and_handles_empty():
    raw = {
        "cpu_stats": {"cpu_usage": {"total_usage": 300}, "system_cpu_usage": 1000, "online_cpus": 4},
        "precpu_stats": {"cpu_usage": {"total_usage": 200}, "system_cpu_usage": 500},
    }

    assert summarize_stats(raw).cpu_percent == pytest.approx(80.0)
    empty = summarize_stats({})
    assert empty.cpu_percent == 0.0
    assert empty.mem_percent == 0.0
    assert empty.pids is None


class TestImages:
    def test_build_stages_and_removes_dockerfile(self, facade, runner):
        result = facade.build_image("demo:1", "FROM alpine\n", platform="linux/amd64")

        assert result.success
        spec = runner.specs[0]
        dockerfile = spec.args[spec.args.index("-f") + 1]
        assert os.path.basename(dockerfile).startswith("Dockerfile_")
        assert runner.seen_files[dockerfile] == "FROM alpine\n"
        assert not os.path.exists(dockerfile)
        assert spec.args[-1] == "."

    def test_build_removes_dockerfile_when_runner_raises(self, engine, compose_dir, settings):
        staged = []

        class ExplodingRunner:
            def run(self, spec):
                staged.append(spec.args[spec.args.index("-f") + 1])
                raise RuntimeError("boom")

        facade = OperationFacade(engine, ExplodingRunner(), PathSandbox(compose_dir), settings)
        with pytest.raises(RuntimeError):
            facade.build_image("demo:1", "FROM alpine\n")

        assert staged and not os.path.exists(staged[0])

    def test_build_requires_name_and_dockerfile(self, facade, runner):
        with pytest.raises(BadRequestError):
            facade.build_image("demo:1", "")
        assert runner.specs == []

    def test_delete_image(self, facade, engine):
        assert facade.delete_image("repo/app:1", force=True) == {"status": "deleted", "ref": "repo/app:1"}
        assert engine.calls_to("remove_image") == [
            (("repo/app:1",), {"force": True, "prune_children": False})
        ]


class TestCompose:
    def test_up_resolves_file_inside_sandbox(self, facade, runner, compose_dir):
        facade.compose_up("stack/app.yml", env={"TAG": "2"}, args=["--build"])

        spec = runner.specs[0]
        assert spec.args[:4] == ("compose", "-f", str(compose_dir / "stack" / "app.yml"), "up")
        assert spec.args[4:] == ("--build", "-d")
        assert spec.work_dir == str(compose_dir / "stack")
        assert dict(spec.env) == {"TAG": "2"}

    def test_up_rejects_escaping_file(self, facade, runner):
        with pytest.raises(PathEscapeError):
            facade.compose_up("../../etc/app.yml")
        assert runner.specs == []

    def test_requires_file_path(self, facade, runner):
        with pytest.raises(BadRequestError):
            facade.compose_ps("")
        assert runner.specs == []

    @pytest.mark.parametrize("service,replicas", [("", 3), ("web", -1)])
    def test_scale_validation_never_runs(self, facade, runner, service, replicas):
        with pytest.raises(BadRequestError):
            facade.compose_scale("app.yml", service, replicas)
        assert runner.specs == []

    def test_failed_run_is_returned_not_raised(self, engine, compose_dir, settings):
        failing = OperationResult(
            success=False, output="open app.yml: no such file or directory\n", error="exit status 1", exit_code=1
        )

        class Runner:
            def run(self, spec):
                return failing

        facade = OperationFacade(engine, Runner(), PathSandbox(compose_dir), settings)
        result = facade.compose_down("missing.yml")

        assert result.success is False
        assert "no such file" in result.output

    def test_upload_list_and_read(self, facade, compose_dir):
        saved = facade.upload_compose_file("web/app.yml", "services: {}\n")
        facade.upload_compose_file("root.yml", "services: {}\n")

        assert saved == {"path": str(compose_dir / "web" / "app.yml")}
        assert [item.name for item in facade.list_compose_files()] == ["root.yml"]
        assert [item.name for item in facade.list_compose_files(recursive=True)] == [
            "root.yml",
            os.path.join("web", "app.yml"),
        ]
        assert facade.read_compose_file("web/app.yml") == {"name": "app.yml", "content": "services: {}\n"}
        assert facade.read_compose_file(str(compose_dir / "root.yml"))["name"] == "root.yml"

    def test_recursive_listing_does_not_follow_symlinks(self, facade, compose_dir, tmp_path):
        (compose_dir / "app.yml").write_text("services: {}\n")
        outside = tmp_path / "host"
        outside.mkdir()
        (outside / "secret.conf").write_text("x")
        (compose_dir / "loop").symlink_to(compose_dir, target_is_directory=True)
        (compose_dir / "host").symlink_to(outside, target_is_directory=True)

        names = [item.name for item in facade.list_compose_files(recursive=True)]

        assert names == ["app.yml", "host", "loop"]

    def test_upload_validation_and_escape(self, facade):
        with pytest.raises(BadRequestError):
            facade.upload_compose_file("app.yml", "")
        with pytest.raises(PathEscapeError):
            facade.upload_compose_file("../app.yml", "x")

    def test_read_missing_file_is_server_error(self, facade):
        with pytest.raises(GatewayError) as excinfo:
            facade.read_compose_file("absent.yml")
        assert excinfo.value.status_code == 500

    def test_read_rejects_outside_absolute_path(self, facade, tmp_path):
        outside = tmp_path / "secret.yml"
        outside.write_text("x")
        with pytest.raises(PathEscapeError):
            facade.read_compose_file(str(outside))

    @pytest.mark.parametrize(
        "kind,name,expected",
        [
            ("compose", "", "docker-compose.yml"),
            ("compose", "lab1", "lab1.yml"),
            ("compose", "lab2.yaml", "lab2.yaml"),
            ("nginx", "", "nginx.conf"),
            ("nginx", "site", "site.conf"),
        ],
    )
    def test_practice_file_names(self, facade, compose_dir, kind, name, expected):
        saved = facade.save_practice_file(kind, name, "content")

        assert saved["path"] == str(compose_dir / expected)
        assert saved["message"] == f"File saved successfully: {expected}"
        assert Path(saved["path"]).read_text() == "content"


class TestVolumes:
    def test_browse_parses_listing(self, facade, runner):
        runner.result = OperationResult(
            success=True,
            output="total 4\ndrwxr-xr-x 2 root root 4096 Jan 5 10:00 logs\n",
            exit_code=0,
        )

        browsed = facade.browse_volume("data", "/var")

        assert runner.specs[0].args[-1] == "/volume/var"
        assert browsed["path"] == "/var"
        assert [(f.name, f.path, f.is_dir) for f in browsed["files"]] == [("logs", "/var/logs", True)]

    def test_browse_defaults_and_normalises_path(self, facade, runner):
        runner.result = OperationResult(success=True, output="total 0\n", exit_code=0)

        assert facade.browse_volume("data")["path"] == "/"
        assert facade.browse_volume("data", "../../etc")["path"] == "/etc"
        assert runner.specs[-1].args[-1] == "/volume/etc"

    def test_browse_failure_keeps_output(self, facade, runner):
        runner.result = OperationResult(
            success=False, output="Unable to find image\n", error="exit status 125", exit_code=125
        )

        with pytest.raises(SubprocessFailure) as excinfo:
            facade.browse_volume("data", "/")

        assert excinfo.value.result.output == "Unable to find image\n"
        assert "exit status 125" in excinfo.value.message

    def test_create_and_delete_volume(self, facade, engine):
        facade.create_volume(name="cache", driver="", labels={"team": "a"})
        assert engine.calls_to("create_volume") == [
            ((), {"name": "cache", "driver": None, "labels": {"team": "a"}, "driver_opts": None})
        ]
        assert facade.delete_volume("cache") == {"status": "deleted", "name": "cache"}
