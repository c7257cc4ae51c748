"""Request-to-operation translation for the container gateway."""

from app.core.facade import OperationFacade
from app.core.images import ImageResolver
from app.core.listing import parse_long_listing
from app.core.paths import PathSandbox, resolve_within

__all__ = [
    "ImageResolver",
    "OperationFacade",
    "PathSandbox",
    "parse_long_listing",
    "resolve_within",
]
