"""Local command runner implementation."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Mapping

from app.models.operations import CommandSpec, OperationResult
from app.providers.process.base import CommandRunner

logger = logging.getLogger(__name__)


class LocalCommandRunner(CommandRunner):
    """Runs a command on the host and captures stdout and stderr together.

    A failing command is reported through the returned result, never raised,
    so the caller can relay the tool's own diagnostics.
    """

    def __init__(self, default_timeout_s: float | None = None) -> None:
        self._default_timeout_s = default_timeout_s

    def run(self, spec: CommandSpec) -> OperationResult:
        argv = spec.argv
        timeout = spec.timeout_s if spec.timeout_s is not None else self._default_timeout_s
        logger.info("Running %s (cwd=%s)", " ".join(argv), spec.work_dir or os.getcwd())
        try:
            process = subprocess.run(
                argv,
                cwd=spec.work_dir or None,
                env=self._merge_env(spec.env),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("Command timed out after %ss: %s", timeout, " ".join(argv))
            return OperationResult(
                success=False,
                output=_decode(exc.output),
                error=f"timed out after {timeout:g}s",
            )
        except OSError as exc:
            logger.warning("Command could not start: %s", exc)
            return OperationResult(success=False, output=f"{exc}\n", error=str(exc))

        output = _decode(process.stdout)
        if process.returncode != 0:
            logger.info("Command exited with status %d", process.returncode)
            return OperationResult(
                success=False,
                output=output,
                error=f"exit status {process.returncode}",
                exit_code=process.returncode,
            )
        return OperationResult(success=True, output=output, exit_code=0)

    def _merge_env(self, env: Mapping[str, str] | None) -> dict[str, str] | None:
        if not env:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged


def _decode(raw: bytes | str | None) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw
