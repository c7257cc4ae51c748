"""Container lifecycle endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.api.common import get_facade
from app.api.schemas import CreateContainerRequest, ExecRequest
from app.core.facade import OperationFacade
from app.models.operations import ContainerStats

router = APIRouter(prefix="/containers", tags=["containers"])


@router.get("")
def list_containers(all: bool = False, facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.list_containers(all=all)


@router.post("", status_code=201)
def create_container(
    body: CreateContainerRequest, facade: OperationFacade = Depends(get_facade)
) -> Any:
    return facade.create_container(
        body.image,
        name=body.name,
        command=body.cmd,
        env=body.env,
        platform=body.platform,
    )


@router.post("/prune")
def prune_containers(facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.prune_containers()


@router.post("/{container_id}/start")
def start_container(container_id: str, facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.start_container(container_id)


@router.post("/{container_id}/stop")
def stop_container(container_id: str, facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.stop_container(container_id)


@router.post("/{container_id}/restart")
def restart_container(container_id: str, facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.restart_container(container_id)


@router.delete("/{container_id}")
def delete_container(container_id: str, facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.delete_container(container_id)


@router.get("/{container_id}/inspect")
def inspect_container(container_id: str, facade: OperationFacade = Depends(get_facade)) -> Any:
    return facade.inspect_container(container_id)


@router.get("/{container_id}/logs", response_class=PlainTextResponse)
def container_logs(
    container_id: str,
    tail: str = "200",
    stdout: bool = True,
    stderr: bool = True,
    facade: OperationFacade = Depends(get_facade),
) -> str:
    return facade.container_logs(container_id, tail=tail, stdout=stdout, stderr=stderr)


@router.post("/{container_id}/exec")
def exec_in_container(
    container_id: str, body: ExecRequest, facade: OperationFacade = Depends(get_facade)
) -> dict:
    return facade.exec_in_container(container_id, body.cmd)


@router.get("/{container_id}/stats")
def container_stats(
    container_id: str, facade: OperationFacade = Depends(get_facade)
) -> ContainerStats:
    return facade.container_stats(container_id)
