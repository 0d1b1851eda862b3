from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from llmrelay.api.v1.router import v1_router
from llmrelay.config import settings
from llmrelay.core.exceptions import RelayError, relay_error_handler, request_validation_handler
from llmrelay.core.middleware import RequestLoggingMiddleware
from llmrelay.core.store import JsonFileStore
from llmrelay.services.dispatch.defaults import seed_default_providers

_NAME_TO_LEVEL = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "warn": 30,
    "error": 40,
    "critical": 50,
}

structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _NAME_TO_LEVEL.get(settings.relay_log_level.lower(), 20)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    store = JsonFileStore(settings.relay_data_dir)
    store.init_directories()
    if settings.relay_seed_providers:
        seed_default_providers(store)
    app.state.store = store

    # One outbound client for every provider call
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=settings.relay_http_connect_timeout,
            read=settings.relay_http_read_timeout,
            write=5.0,
            pool=5.0,
        )
    )
    app.state.http_client = http_client

    logger.info("relay_backend_starting", data_dir=str(store.data_dir))
    yield

    await http_client.aclose()
    logger.info("relay_backend_stopping")


app = FastAPI(
    title="LLM Relay Backend",
    description="Chat relay between users and external LLM providers",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(RelayError, relay_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

# Starlette: last-added = outermost
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.relay_cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router, prefix="/api")


@app.get("/")
async def root():
    return {"service": "llm-relay-backend", "version": "0.1.0"}
