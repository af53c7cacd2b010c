import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.exceptions import register_exception_handlers
from .api.routes import router as accounts_router, transfer_router
from .core.config import get_settings
from .core.dependencies import get_ledger

settings = get_settings()
logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # the process-wide ledger starts empty and lives until shutdown
    ledger = get_ledger()
    logger.info("ledger.ready", extra={"accounts": len(ledger)})
    yield
    logger.info("ledger.shutdown", extra={"accounts": len(ledger)})

app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.include_router(accounts_router)
app.include_router(transfer_router)
register_exception_handlers(app)

@app.get("/health")
def read_health() -> dict[str, str]:
    return {"status": "ok"}
