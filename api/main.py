import asyncio
import logging
from contextlib import asynccontextmanager

import asyncpg
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import router as auth_router
from codes import router as codes_router
from core import db, settings
from core.errors import ConfigurationError, ServiceError
from core.log import configure_logging
from oauth import router as oauth_router

load_dotenv()
configure_logging()

logger = logging.getLogger(__name__)

SERVICE_NAME = "Referred.space API"
SERVICE_VERSION = "1.0.0"


def _log_config_presence() -> None:
    logger.info("starting port=%s", settings.port())
    for name, value in (
        ("DATABASE_URL", bool(settings.database_url())),
        ("ADMIN_KEY", bool(settings.admin_key())),
        ("IG_CLIENT_ID", bool(settings.instagram_client_id())),
        ("IG_CLIENT_SECRET", bool(settings.instagram_client_secret())),
    ):
        logger.info("config %s=%s", name, "set" if value else "missing")


@asynccontextmanager
async def lifespan(_: FastAPI):
    _log_config_presence()
    # Initialize the DB pool once per process; without it only data routes fail.
    try:
        await db.init_pool()
    except ConfigurationError:
        logger.error("database_not_configured")
    except (asyncpg.PostgresError, OSError) as exc:
        logger.error("database_pool_failed error=%s", exc)
    else:
        await db.check_connection()
    try:
        yield
    finally:
        await db.close_pool()


class LoggingCORSMiddleware(CORSMiddleware):
    """
    Starlette's CORS middleware, plus a log line for rejected origins.
    """

    def is_allowed_origin(self, origin: str) -> bool:
        allowed = super().is_allowed_origin(origin)
        if not allowed:
            logger.warning("cors_blocked origin=%s", origin)
        return allowed


app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION, lifespan=lifespan)

app.add_middleware(
    LoggingCORSMiddleware,
    allow_origins=settings.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Admin-Key"],
    expose_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request body"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first['msg']}" if field else first["msg"]
    return JSONResponse(status_code=422, content={"error": message})


async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("database_error path=%s type=%s error=%s", request.url.path, type(exc).__name__, exc)
    message = str(exc)
    if not message:
        timed_out = isinstance(exc, (TimeoutError, asyncio.TimeoutError))
        message = "Database request timed out" if timed_out else "Database request failed"
    return JSONResponse(status_code=500, content={"error": message})


# asyncio.TimeoutError only aliases TimeoutError from 3.11 on.
for _exc_class in (asyncpg.PostgresError, asyncpg.InterfaceError, TimeoutError, asyncio.TimeoutError):
    app.add_exception_handler(_exc_class, database_error_handler)


app.include_router(auth_router.router, tags=["auth"])
app.include_router(oauth_router.router, tags=["oauth"])
app.include_router(codes_router.router, tags=["codes"])


@app.get("/")
def root() -> dict:
    return {"status": "OK", "service": SERVICE_NAME, "version": SERVICE_VERSION}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port())
