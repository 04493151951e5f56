"""FastAPI application setup and lifecycle."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from caretrek.api.http.app_data import ApplicationDependencies
from caretrek.api.http.routers.health import router as health_router
from caretrek.api.utils.app_startup import configure_logging
from caretrek.core.services import DbManageService, DbSessionService, SchedulerService
from caretrek.runtime.context import get_config

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


def create_app() -> FastAPI:
    config = get_config()
    is_production = config.app.environment == "production"

    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    application = FastAPI(
        title="CareTrek",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    application.middleware("http")(log_requests)
    application.include_router(health_router)
    return application


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService()
    db_manage_service = DbManageService(database_service.engine)
    if config.database.create_tables_on_startup:
        db_manage_service.create_all()

    scheduler_service = SchedulerService()
    if config.scheduler.enabled:
        await scheduler_service.start()
    else:
        logger.info("Scheduler disabled by configuration")

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        db_manage_service=db_manage_service,
        scheduler_service=scheduler_service,
    )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is None:
        return

    await app_dependencies.scheduler_service.shutdown(
        drain_timeout=get_config().scheduler.drain_timeout_seconds
    )
    app_dependencies.database_service.dispose()


app = create_app()

__all__ = ["app", "create_app", "startup", "shutdown"]
