from decimal import Decimal

from pydantic import BaseModel, Field


class AmountRequest(BaseModel):
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Exact decimal amount; sign is checked by the ledger",
    )


class ResultResponse(BaseModel):
    result: str


class BalanceResponse(BaseModel):
    result: Decimal = Field(..., description="Balance, written as a JSON number")


class ErrorResponse(BaseModel):
    error: str
