"""Volume endpoints, including browsing volume contents."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.api.common import get_facade
from app.api.schemas import CreateVolumeRequest
from app.core.facade import OperationFacade

router = APIRouter(prefix="/volumes", tags=["volumes"])


@router.get("")
def list_volumes(facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.list_volumes()


@router.post("", status_code=201)
def create_volume(
    body: CreateVolumeRequest, facade: OperationFacade = Depends(get_facade)
) -> Any:
    return facade.create_volume(
        name=body.name,
        driver=body.driver,
        labels=body.labels or None,
        driver_opts=body.driver_opts or None,
    )


@router.post("/prune")
def prune_volumes(facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.prune_volumes()


@router.get("/{name}")
def inspect_volume(name: str, facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.inspect_volume(name)


@router.delete("/{name}")
def delete_volume(name: str, facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.delete_volume(name)


@router.get("/{name}/browse")
def browse_volume(
    name: str, path: str = "/", facade: OperationFacade = Depends(get_facade)
) -> Any:
    return facade.browse_volume(name, path)
