import logging
import os

from dotenv import load_dotenv

load_dotenv()

from contextlib import asynccontextmanager
from typing import AsyncIterator
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .db import DATABASE_URL, engine
from .models import Base
from .utils.config import LOG_LEVEL
from .utils.errors import OrdningError

from .routers.locations import router as locations_router
from .routers.items import router as items_router
from .routers.search import router as search_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Create the schema on startup when DB_AUTO_CREATE is on (default for
    SQLite). Server databases are expected to be migrated with alembic.
    """
    if _env_bool("DB_AUTO_CREATE", DATABASE_URL.startswith("sqlite")):
        logger.info("[Startup] Creating tables if missing")
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Ordning API", lifespan=lifespan)


@app.exception_handler(OrdningError)
async def ordning_error_handler(request: Request, exc: OrdningError):
    logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind.value, exc.message)
    return JSONResponse(status_code=400, content={"detail": exc.message, "kind": exc.kind.value})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "An error occurred while processing your request."},
    )


app.include_router(locations_router)
app.include_router(items_router)
app.include_router(search_router)


@app.get("/health")
def health():
    return {"ok": True, "service": "Ordning API"}
