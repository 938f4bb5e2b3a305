import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from granian import Granian
from livekit.api.twirp_client import TwirpError
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1.errors import app_error_handler, twirp_error_handler
from app.api.v1.routers import admin, event
from app.app_config import AppEnvironConfig, get_app_environ_config
from app.context import AppContext
from app.shared.api.utils import E_INVALID_PARAMS, api_failure, init_logger
from app.utils.app_errors import AppError, AppErrorCode


class HTTPLoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per request; unhandled errors become a 500 envelope."""

    async def dispatch(self, request: Request, call_next):  # type: ignore
        request_id = uuid.uuid4().hex[:8]
        started = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "[{}] {} {} failed after {:.2f}ms",
                    request_id,
                    request.method,
                    request.url.path,
                    (time.perf_counter() - started) * 1000,
                )
                failure = api_failure(
                    errcode=AppErrorCode.E_INTERNAL_ERROR.value,
                    errmesg=f"Internal server error (request_id: {request_id})",
                )
                return ORJSONResponse(status_code=500, content=failure.model_dump())

            logger.info(
                "[{}] {} {} -> {} ({:.2f}ms)",
                request_id,
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response


async def app_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning("Validation error: path={} errors={}", request.url.path, errors)

    failure = api_failure(E_INVALID_PARAMS, errmesg=str(errors))
    return ORJSONResponse(status_code=422, content=failure.model_dump())


@asynccontextmanager
async def lifespan(server: FastAPI):
    cfg: AppEnvironConfig = server.state.cfg
    init_logger(cfg.LOG_LEVEL)

    logger.info("Application startup (demo_mode={})", cfg.DEMO_MODE)
    server.state.context = await AppContext.open(cfg)

    yield

    logger.info("Application shutdown...")
    server.state.context.close()


def create_app(cfg: AppEnvironConfig | None = None) -> FastAPI:
    cfg = cfg or get_app_environ_config()

    server = FastAPI(
        version="1.0",
        title="Backstage Events API",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    server.state.cfg = cfg

    server.add_middleware(HTTPLoggingMiddleware)
    server.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=cfg.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    server.add_exception_handler(RequestValidationError, app_validation_exception_handler)  # type: ignore
    server.add_exception_handler(AppError, app_error_handler)  # type: ignore
    server.add_exception_handler(TwirpError, twirp_error_handler)  # type: ignore

    server.include_router(event.router, prefix="/api/v1", tags=["event"])
    server.include_router(admin.router, prefix="/api/v1", tags=["admin"])
    return server


app = create_app()


if __name__ == "__main__":
    cfg = get_app_environ_config()
    Granian(
        "app.main:app",
        interface="asgi",
        address=cfg.API_HOST,
        port=cfg.API_PORT,
        workers=cfg.API_WORKERS,
        reload=cfg.DEBUG,
    ).serve()
