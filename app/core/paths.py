"""Lexical containment of user-supplied paths under a base directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from app.errors import PathEscapeError

logger = logging.getLogger(__name__)


def resolve_within(base: str | os.PathLike[str], candidate: str) -> Path:
    """Resolve ``candidate`` against ``base`` and reject anything outside it.

    Absolute candidates are taken as is, relative ones are joined onto the
    base. Both sides are normalised lexically; symlinks are not followed and
    the filesystem is never touched.
    """
    root = os.path.abspath(os.fspath(base))
    if os.path.isabs(candidate):
        joined = candidate
    else:
        joined = os.path.join(root, candidate)
    resolved = os.path.abspath(joined)

    prefix = root if root.endswith(os.sep) else root + os.sep
    if resolved != root and not resolved.startswith(prefix):
        logger.warning("Rejected path %r outside %s", candidate, root)
        raise PathEscapeError(candidate)
    return Path(resolved)


class PathSandbox:
    def __init__(self, base_dir: str | os.PathLike[str]) -> None:
        self._base_dir = Path(os.path.abspath(os.fspath(base_dir)))

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def ensure(self) -> Path:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        return self._base_dir

    def resolve(self, candidate: str) -> Path:
        return resolve_within(self._base_dir, candidate)

    def relative(self, path: Path) -> str:
        return os.path.relpath(path, self._base_dir)
