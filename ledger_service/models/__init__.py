from .schemas import AmountRequest, BalanceResponse, ErrorResponse, ResultResponse

__all__ = [
    "AmountRequest",
    "BalanceResponse",
    "ErrorResponse",
    "ResultResponse",
]
