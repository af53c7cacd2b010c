from decimal import Decimal

from fastapi.responses import Response


class DecimalResultResponse(Response):
    """Renders ``{"result": <number>}`` with the decimal written out verbatim.

    The stock JSON encoder only knows binary floats, which would round
    balances such as 0.1 + 0.2.
    """

    media_type = "application/json"

    def render(self, content: Decimal) -> bytes:
        if not isinstance(content, Decimal) or not content.is_finite():
            raise ValueError(f"cannot render {content!r} as a JSON number")
        return b'{"result": %s}' % str(content).encode("ascii")
