"""Save endpoints used by the practice pages."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.common import get_facade
from app.api.schemas import SaveFileRequest
from app.core.facade import OperationFacade

router = APIRouter(prefix="/api", tags=["files"])


@router.post("/save-compose")
def save_compose(body: SaveFileRequest, facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.save_practice_file("compose", body.file_name, body.content)


@router.post("/save-nginx")
def save_nginx(body: SaveFileRequest, facade: OperationFacade = Depends(get_facade)) -> dict:
    return facade.save_practice_file("nginx", body.file_name, body.content)
