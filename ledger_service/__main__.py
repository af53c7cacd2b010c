import uvicorn

from .core.config import get_settings


def run_server() -> None:
    """Serve the ledger API with the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "ledger_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
