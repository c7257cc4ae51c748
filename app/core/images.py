"""Local-first image resolution with pull fallbacks."""

from __future__ import annotations

import logging

from app.errors import EngineError, PullFailedError
from app.providers.engine.base import EngineClient

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY_PREFIX = "docker.io/library/"
DEFAULT_TAG = "latest"


def has_tag(reference: str) -> bool:
    """True when a ``:`` appears before any ``@`` in the reference."""
    for char in reference:
        if char == ":":
            return True
        if char == "@":
            return False
    return False


def is_digest(reference: str) -> bool:
    return "@" in reference


def has_path_separator(reference: str) -> bool:
    return "/" in reference


def _with_default_tag(reference: str) -> str:
    return f"{reference}:{DEFAULT_TAG}"


class ImageResolver:
    def __init__(
        self,
        engine: EngineClient,
        library_prefix: str = DEFAULT_LIBRARY_PREFIX,
    ) -> None:
        self._engine = engine
        self._library_prefix = library_prefix

    def ensure_available(self, reference: str, platform: str | None = None) -> str:
        """Make ``reference`` available locally and return the name to create from.

        The returned reference is tag-qualified with ``:latest`` when the
        caller left the tag off and the image was only found under that tag,
        or only pulled through the library namespace.
        """
        if self._is_local(reference):
            return reference

        untagged = not has_tag(reference) and not is_digest(reference)
        if untagged and self._is_local(_with_default_tag(reference)):
            return _with_default_tag(reference)

        try:
            self._engine.pull_image(reference, platform=platform)
        except EngineError as first_error:
            if has_path_separator(reference):
                raise PullFailedError(reference, first_error.message) from first_error
            fallback = self._library_prefix + reference
            logger.info("Pull of %s failed, retrying as %s", reference, fallback)
            try:
                self._engine.pull_image(fallback, platform=platform)
            except EngineError as second_error:
                logger.warning("Fallback pull of %s failed: %s", fallback, second_error.message)
                raise PullFailedError(reference, first_error.message) from first_error
            return _with_default_tag(reference) if untagged else reference
        return reference

    def _is_local(self, reference: str) -> bool:
        try:
            matches = self._engine.list_images(reference=reference)
        except EngineError as exc:
            logger.warning("Local image lookup for %s failed: %s", reference, exc.message)
            return False
        return len(matches) > 0
