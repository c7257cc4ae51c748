"""Image endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from app.api.common import get_facade, result_response
from app.api.schemas import BuildImageRequest
from app.core.facade import OperationFacade

router = APIRouter(prefix="/images", tags=["images"])


@router.get("")
def list_images(facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.list_images()


@router.post("/build")
def build_image(body: BuildImageRequest, facade: OperationFacade = Depends(get_facade)):
    result = facade.build_image(
        body.image_name,
        body.dockerfile,
        context_path=body.context_path,
        platform=body.platform,
    )
    return result_response(result, image=body.image_name)


@router.post("/prune")
def prune_images(facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.prune_images()


@router.delete("/{ref:path}")
def delete_image(
    ref: str,
    force: bool = False,
    prune_children: bool = Query(default=False, alias="pruneChildren"),
    facade: OperationFacade = Depends(get_facade),
) -> dict:
    return facade.delete_image(ref, force=force, prune_children=prune_children)
