import json
from decimal import Decimal

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from ..core.dependencies import get_ledger
from ..core.errors import MalformedRequestError
from ..models import AmountRequest, BalanceResponse, ErrorResponse, ResultResponse
from ..services import Ledger
from .responses import DecimalResultResponse


OK = ResultResponse(result="OK")
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 404, 409)}

router = APIRouter(tags=["accounts"], responses=ERROR_RESPONSES)


async def read_amount(request: Request) -> Decimal:
    """Parse a ``{"amount": <number>}`` body without going through floats."""
    body = await request.body()
    try:
        data = json.loads(body, parse_float=Decimal)
    except (ValueError, RecursionError) as exc:
        raise MalformedRequestError("json parse error") from exc
    try:
        return AmountRequest.model_validate(data).amount
    except ValidationError as exc:
        raise MalformedRequestError("not a valid json") from exc


@router.post("/create/{account_id}", response_model=ResultResponse)
def create_account(
    account_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> ResultResponse:
    ledger.create(account_id)
    return OK


@router.get(
    "/amount/{account_id}",
    response_model=BalanceResponse,
    response_class=DecimalResultResponse,
)
def get_amount(
    account_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> DecimalResultResponse:
    return DecimalResultResponse(ledger.balance(account_id))


@router.post("/deposit/{account_id}", response_model=ResultResponse)
def deposit(
    account_id: str,
    amount: Decimal = Depends(read_amount),
    ledger: Ledger = Depends(get_ledger),
) -> ResultResponse:
    ledger.deposit(account_id, amount)
    return OK


@router.post("/withdraw/{account_id}", response_model=ResultResponse)
def withdraw(
    account_id: str,
    amount: Decimal = Depends(read_amount),
    ledger: Ledger = Depends(get_ledger),
) -> ResultResponse:
    ledger.withdraw(account_id, amount)
    return OK


transfer_router = APIRouter(tags=["transfers"], responses=ERROR_RESPONSES)


@transfer_router.post("/transfer/{from_account_id}/{to_account_id}", response_model=ResultResponse)
def transfer(
    from_account_id: str,
    to_account_id: str,
    amount: Decimal = Depends(read_amount),
    ledger: Ledger = Depends(get_ledger),
) -> ResultResponse:
    ledger.transfer(from_account_id, to_account_id, amount)
    return OK


__all__ = ["router", "transfer_router", "read_amount"]
