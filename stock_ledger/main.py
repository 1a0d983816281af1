import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stock_ledger.api import audit_logs, catalog, inventory
from stock_ledger.config import settings
from stock_ledger.database import init_db
from stock_ledger.exceptions import LedgerError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db()
    yield


app = FastAPI(
    title="Stock Ledger API",
    description="Per-location stock quantities with an append-only movement ledger",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    if exc.status >= 500:
        logger.error("Ledger failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return JSON for unhandled exceptions so clients can parse the error."""
    logger.error("Unhandled error: %s\n%s", exc, traceback.format_exc())
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.include_router(inventory.router, prefix="/api/v1")
app.include_router(catalog.router, prefix="/api/v1")
app.include_router(audit_logs.router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
