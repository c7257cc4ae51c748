"""FastAPI application for the container gateway."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.api import compose, containers, files, images, volumes
from app.config import Settings, get_settings
from app.core.facade import OperationFacade
from app.core.paths import PathSandbox
from app.errors import GatewayError, SubprocessFailure
from app.log import setup_logging
from app.providers.engine import DockerEngineClient, EngineClient
from app.providers.process import CommandRunner, LocalCommandRunner

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    engine: EngineClient | None = None,
    runner: CommandRunner | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    sandbox = PathSandbox(settings.compose_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        sandbox.ensure()
        logger.info("Compose directory: %s", sandbox.base_dir)
        yield

    app = FastAPI(title="container-gateway", lifespan=lifespan)
    app.state.settings = settings
    app.state.facade = OperationFacade(
        engine=engine or DockerEngineClient(),
        runner=runner or LocalCommandRunner(default_timeout_s=settings.subprocess_timeout),
        sandbox=sandbox,
        settings=settings,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    api = APIRouter(prefix=settings.api_prefix)
    for module in (containers, images, compose, volumes, files):
        api.include_router(module.router)
    app.include_router(api)

    @app.get("/health")
    def health_check() -> dict:
        return {"status": "ok"}

    _register_error_handlers(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SubprocessFailure)
    async def subprocess_failure(request: Request, exc: SubprocessFailure) -> JSONResponse:
        body = exc.result.to_dict()
        body["error"] = exc.message
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(GatewayError)
    async def gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        message = "invalid JSON body" + (f": {details}" if details else "")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Container gateway listening on %s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
