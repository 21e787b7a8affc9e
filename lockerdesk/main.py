import logging

import yaml
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from lockerdesk.infrastructure.config import settings
from lockerdesk.infrastructure.database import Base, engine, SessionLocal
from lockerdesk.infrastructure.logging_config import setup_logging
from lockerdesk.infrastructure.models import models  # noqa: F401  registers the tables
from lockerdesk.presentation.event_stream import router as event_stream_router
from lockerdesk.presentation.routers import router
from lockerdesk.services.lockerdesk_service import initialize_pool_service

logger = logging.getLogger("lockerdesk")

app = FastAPI(title="lockerdesk")


# Use the contractual schema
def custom_openapi():
    with open(settings.openapi_path) as f:
        return yaml.safe_load(f)


@app.on_event("startup")
def _initialize_pool_on_startup() -> None:
    """
    On startup configure logging and make sure the locker pool exists. An
    existing pool is never re-seeded.
    """
    setup_logging(settings.log_level, settings.log_json)
    db = SessionLocal()
    try:
        result = initialize_pool_service(db)
    finally:
        db.close()
    logger.info("Locker pool ready: %d storage boxes", result["total_units"])


@app.exception_handler(SQLAlchemyError)
async def _storage_fault_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.openapi = custom_openapi
Base.metadata.create_all(bind=engine)
app.include_router(router)
app.include_router(event_stream_router)
