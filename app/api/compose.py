"""Compose stack endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.common import get_facade, result_response
from app.api.schemas import ComposeFileUploadRequest, ComposeRunRequest, ComposeScaleRequest
from app.core.facade import OperationFacade
from app.models.operations import ComposeFileItem

router = APIRouter(prefix="/compose", tags=["compose"])


@router.get("/files")
def list_files(
    recursive: bool = False, facade: OperationFacade = Depends(get_facade)
) -> list[ComposeFileItem]:
    return facade.list_compose_files(recursive=recursive)


@router.post("/files")
def upload_file(
    body: ComposeFileUploadRequest, facade: OperationFacade = Depends(get_facade)
) -> dict:
    return facade.upload_compose_file(body.name, body.content)


@router.get("/file")
def get_file(path: str = "", facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.read_compose_file(path)


@router.post("/up")
def compose_up(body: ComposeRunRequest, facade: OperationFacade = Depends(get_facade)):
    return result_response(
        facade.compose_up(body.file_path, body.work_dir, body.env, body.args)
    )


@router.post("/down")
def compose_down(body: ComposeRunRequest, facade: OperationFacade = Depends(get_facade)):
    return result_response(
        facade.compose_down(body.file_path, body.work_dir, body.env, body.args)
    )


@router.post("/ps")
def compose_ps(body: ComposeRunRequest, facade: OperationFacade = Depends(get_facade)):
    return result_response(
        facade.compose_ps(body.file_path, body.work_dir, body.env, body.args)
    )


@router.post("/logs")
def compose_logs(body: ComposeRunRequest, facade: OperationFacade = Depends(get_facade)):
    return result_response(
        facade.compose_logs(body.file_path, body.work_dir, body.env, body.args)
    )


@router.post("/scale")
def compose_scale(body: ComposeScaleRequest, facade: OperationFacade = Depends(get_facade)):
    return result_response(
        facade.compose_scale(body.file_path, body.service, body.replicas, body.work_dir)
    )
