from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    LedgerError,
    MalformedRequestError,
    SameAccountError,
)


logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    AccountNotFoundError: status.HTTP_404_NOT_FOUND,
    AccountAlreadyExistsError: status.HTTP_409_CONFLICT,
    InsufficientFundsError: status.HTTP_409_CONFLICT,
    InvalidAmountError: status.HTTP_400_BAD_REQUEST,
    SameAccountError: status.HTTP_400_BAD_REQUEST,
}


def render_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.debug("'%s' error: %s", request.url.path, exc)
        return render_error(status_code, str(exc))

    @app.exception_handler(MalformedRequestError)
    async def malformed_request_handler(
        request: Request, exc: MalformedRequestError
    ) -> JSONResponse:
        logger.debug("'%s' malformed request: %s", request.url.path, exc)
        return render_error(status.HTTP_400_BAD_REQUEST, str(exc))
