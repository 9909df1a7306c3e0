import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import app.models  # ensure models are registered
from app.core.config import CORS_ORIGINS, LOG_LEVEL, LOG_FORMAT
from app.core.exceptions import LedgerError
from app.core.logging import setup_logging
from app.utils.database import engine, Base
from app.initial_data import init_seed

from app.routers import (
    capital_router,
    clients_router,
    loans_router,
    payments_router,
    reports_router,
    maintenance_router,
)

setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = logging.getLogger("app")

app = FastAPI(title="Lending Fund Backend API", version="1.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(capital_router.router)
app.include_router(clients_router.router)
app.include_router(loans_router.router)
app.include_router(payments_router.router)
app.include_router(reports_router.router)
app.include_router(maintenance_router.router)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.on_event("startup")
def on_startup():
    # schema bootstrap is idempotent
    Base.metadata.create_all(bind=engine)

    logger.info("Running initial database seeding")
    init_seed()
    logger.info("Seeding complete")


@app.get("/health")
def health():
    return {"status": "ok"}
