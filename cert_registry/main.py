import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from markdown import markdown
from starlette.exceptions import HTTPException

from .access.routes import router as access_router
from .certificate.routes import router as certificate_router
from .certificate.services import CertificateRegistry
from .core.error_handling import (
    RegistryError,
    general_exception_handler,
    http_exception_handler,
    registry_exception_handler,
    validation_exception_handler,
)
from .core.models.base import Event, EventTypes, LoggingLevelRequest
from .core.registry import get_registry
from .logging_config import (
    fastapi_logger,
    logger,
    set_logger_and_children_level,
    uvicorn_access_logger,
    uvicorn_logger,
)
from .settings import settings

STATIC_DIR_FP = Path(__file__).parent / "static"

descriptions = {}
for desc in ["api", "certificate", "access"]:
    static_dir = STATIC_DIR_FP / "descriptions" / f"{desc}.md"
    with open(static_dir, "r") as file:
        descriptions[desc] = markdown(file.read())

tags_metadata = [
    {
        "name": "Certificates",
        "description": descriptions["certificate"],
    },
    {
        "name": "Access",
        "description": descriptions["access"],
    },
    {
        "name": "Core",
        "description": "Notification log and runtime configuration.",
    },
]

origins = [
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "http://localhost:3000",
]
origins.extend(settings.cors_origins)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting up application...")
    registry = get_registry()
    logger.info(f"Serving certificate registry owned by {registry.access.owner}")

    yield

    logger.info("Shutting down application...")


app = FastAPI(
    openapi_tags=tags_metadata,
    title="Certificate Registry API",
    description=descriptions["api"],
    version="1.0.0",
    docs_url="/docs",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin"],
)

app.add_exception_handler(RegistryError, registry_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(access_router, prefix="/access")
app.include_router(certificate_router, prefix="/certificate")


@app.get("/events", response_model=list[Event], tags=["Core"])
def read_events(
    from_position: int = Query(default=0, ge=0),
    event_type: EventTypes | None = None,
    registry: CertificateRegistry = Depends(get_registry),
):
    """Poll the notification log from a given position."""
    return registry.notifications.read(from_position, event_type)


@app.post("/change_log_level", tags=["Core"])
async def change_log_level_endpoint(request: LoggingLevelRequest):
    """Change the logging level at runtime for all relevant loggers."""
    numeric_level = getattr(logging, request.level.value)

    loggers_to_update = [
        logger,
        uvicorn_logger,
        uvicorn_access_logger,
        fastapi_logger,
    ]

    logger_status = {}
    for logger_instance in loggers_to_update:
        set_logger_and_children_level(logger_instance, numeric_level)
        logger_status[logger_instance.name] = logging.getLevelName(
            logger_instance.getEffectiveLevel()
        )

    return {
        "message": f"Log level changed to {request.level.value}",
        "logger_status": logger_status,
    }
