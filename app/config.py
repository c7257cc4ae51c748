"""Process-wide settings, read once at start-up."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import importlib
import importlib.util
import os
from pathlib import Path
from typing import Any, Mapping

DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")
DEFAULT_CONFIG_PATH = "config/settings.yaml"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8081
    compose_dir: Path = Path("compose")
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    api_prefix: str = "/api"
    subprocess_timeout: float | None = 600.0
    browse_image: str = "alpine:latest"
    browse_mount: str = "/volume"
    docker_binary: str = "docker"


def load_settings(
    environ: Mapping[str, str] | None = None,
    config_path: str | None = None,
) -> Settings:
    """Build settings from an optional YAML file overridden by the environment."""
    env = os.environ if environ is None else environ
    path = Path(config_path or env.get("CONTAINER_GATEWAY_CONFIG", DEFAULT_CONFIG_PATH))
    values = _load_file(path)

    def pick(key: str, default: Any) -> Any:
        if key.upper() in env and env[key.upper()] != "":
            return env[key.upper()]
        return values.get(key, default)

    compose_dir = pick("compose_dir", None)
    if not compose_dir:
        compose_dir = Path.cwd() / "compose"

    origins = pick("cors_origins", None)
    if isinstance(origins, str):
        origins = _split_and_trim(origins, ",")
    if not origins:
        origins = list(DEFAULT_CORS_ORIGINS)

    timeout = float(pick("subprocess_timeout", 600.0))
    prefix = str(pick("api_prefix", "/api") or "").strip("/")

    return Settings(
        host=str(pick("host", "0.0.0.0")),
        port=int(pick("port", 8081)),
        compose_dir=Path(os.path.abspath(str(compose_dir))),
        cors_origins=tuple(origins),
        log_level=str(pick("log_level", "INFO")).upper(),
        api_prefix="/" + prefix if prefix else "",
        subprocess_timeout=timeout if timeout > 0 else None,
        browse_image=str(pick("browse_image", "alpine:latest")),
        browse_mount=str(pick("browse_mount", "/volume")).rstrip("/") or "/volume",
        docker_binary=str(pick("docker_binary", "docker")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    yaml_spec = importlib.util.find_spec("yaml")
    if yaml_spec is None:
        raise RuntimeError("PyYAML is required to load gateway settings.")
    yaml = importlib.import_module("yaml")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")
    return data


def _split_and_trim(value: str, delimiter: str) -> list[str]:
    return [part.strip() for part in value.split(delimiter) if part.strip()]
