"""Balance models - per-token balance records from the wallet service.

The wallet service reports balances as integers in minor units together with
the number of decimal places of the token. This module converts those raw
figures into Decimal amounts and formats them for display.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, ValidationError


DEFAULT_DECIMALS = 2
MIN_DISPLAY_DECIMALS = 2


def format_balance(amount: Decimal, decimals: int) -> str:
    """Format an amount with grouping and between 2 and ``decimals`` fraction digits.

    Example:
        ```python
        format_balance(Decimal("15.0000"), 4)    # '15.00'
        format_balance(Decimal("1234.5678"), 6)  # '1,234.5678'
        format_balance(Decimal("0.123456"), 4)   # '0.1235'
        ```
    """
    places = max(decimals, MIN_DISPLAY_DECIMALS)
    with localcontext() as ctx:
        # quantize needs every integer digit plus the fraction digits
        ctx.prec = max(ctx.prec, amount.adjusted() + places + 2)
        rounded = amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    whole, _, fraction = f"{rounded:,.{places}f}".partition(".")
    fraction = fraction.rstrip("0").ljust(MIN_DISPLAY_DECIMALS, "0")
    return f"{whole}.{fraction}"


class TokenBalance(BaseModel):
    """A normalized balance of one token on one chain.

    Attributes:
        token (str): Token symbol as requested
        chain (str): Chain the balance lives on
        amount (Decimal): Balance in whole token units
        decimals (int): Decimal places of the token
    """

    token: str
    chain: str
    amount: Decimal
    decimals: int = DEFAULT_DECIMALS

    @property
    def display(self) -> str:
        return format_balance(self.amount, self.decimals)


class BalanceRecord(BaseModel):
    """Raw balance record for one token, as returned by the wallet service.

    Amounts are kept as the service sends them (integer strings in minor
    units) and are only scaled on read, so no precision is lost.

    Important Design Decisions:
    - ``decimals`` defaults to 2 when the service omits it; 0 is kept.
    - A malformed raw amount reads as "no balance" rather than raising.

    Usage Example:
        ```python
        record = BalanceRecord(token="usdc", decimals=6, balances={"base-sepolia": "2500000"})
        record.amount_on("base-sepolia")      # Decimal('2.5')
        record.amount_on("ethereum-sepolia")  # None
        ```

    Attributes:
        token (str): Token symbol as reported by the service
        decimals (Optional[int]): Decimal places; None when absent upstream
        balances (Dict[str, str]): Chain -> raw integer amount in minor units
    """

    token: str = Field(description="Token symbol")
    decimals: Optional[int] = Field(default=None, ge=0, description="Token decimal places")
    balances: Dict[str, str] = Field(
        default_factory=dict,
        description="Raw minor-unit amounts keyed by chain"
    )

    @classmethod
    def from_payload(cls, item: Any) -> Optional["BalanceRecord"]:
        """Build a record from one element of the balances array, or None if unusable."""
        if not isinstance(item, dict) or not isinstance(item.get("token"), str):
            return None
        raw_balances = item.get("balances")
        balances = {}
        if isinstance(raw_balances, dict):
            balances = {str(chain): str(raw) for chain, raw in raw_balances.items() if raw is not None}
        try:
            return cls(token=item["token"], decimals=item.get("decimals"), balances=balances)
        except ValidationError:
            return None

    @property
    def effective_decimals(self) -> int:
        return DEFAULT_DECIMALS if self.decimals is None else self.decimals

    def amount_on(self, chain: str) -> Optional[Decimal]:
        """Scaled balance on ``chain``: raw / 10^decimals, or None if unavailable."""
        raw = self.balances.get(chain)
        if raw is None:
            return None
        try:
            minor_units = Decimal(raw.strip())
        except (InvalidOperation, ValueError):
            return None
        if not minor_units.is_finite():
            return None
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, len(minor_units.as_tuple().digits))
            return minor_units.scaleb(-self.effective_decimals)

    def token_balance(self, chain: str, token: Optional[str] = None) -> Optional[TokenBalance]:
        amount = self.amount_on(chain)
        if amount is None:
            return None
        return TokenBalance(
            token=token or self.token,
            chain=chain,
            amount=amount,
            decimals=self.effective_decimals,
        )
