"""
Homonym Collector API server.

    uv run uvicorn homonyms.server.main:app --port 8000
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from homonyms.core.config import Settings
from homonyms.core.dictionary import build_sources
from homonyms.core.errors import EntityNotFoundError, StoreError, ValidationError
from homonyms.core.logging_config import configure_logging
from homonyms.core.lookup import LookupCache
from homonyms.core.models import utcnow
from homonyms.core.store import CollectionStore, open_store
from homonyms.server.deps import get_store
from homonyms.server.routes import collections, homonyms, words


logger = logging.getLogger(__name__)

settings = Settings.from_env()


def log_routes(app: FastAPI):
    routes = []
    for route in app.routes:
        if isinstance(route, APIRoute):
            methods = ", ".join(route.methods - {"HEAD", "OPTIONS"})
            routes.append((methods, route.path, route.name))

    routes.sort(key=lambda r: (r[1], r[0]))

    logger.info("Homonym Collector API routes:")
    for methods, path, name in routes:
        logger.info("  %-8s %-45s -> %s", methods, path, name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)

    http = httpx.AsyncClient(timeout=settings.lookup_timeout)
    app.state.store = open_store(settings)
    app.state.lookup = LookupCache(build_sources(settings, http), timeout=settings.lookup_timeout)
    logger.info("Using %s store", settings.backend)
    log_routes(app)
    try:
        yield
    finally:
        await http.aclose()
        app.state.store.close()


app = FastAPI(title="Homonym Collector API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(collections.router)
app.include_router(homonyms.router)
app.include_router(words.router)


@app.exception_handler(StoreError)
async def store_error(request: Request, exc: StoreError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(EntityNotFoundError)
async def not_found_error(request: Request, exc: EntityNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"name": "Homonym Collector API", "version": "0.1.0"}


@app.get("/api/health")
async def health(store: CollectionStore = Depends(get_store)):
    try:
        store.list_collections()
        database = "connected"
    except StoreError:
        database = "disconnected"
    return {"status": "ok", "database": database, "timestamp": utcnow()}
