from functools import lru_cache

from ..services import Ledger


@lru_cache()
def get_ledger() -> Ledger:
    return Ledger()
