"""Payment models - supported tokens, chains and the resolved PaymentConfig.

This module holds the static support matrix that decides which tokens can be
used on which chains, and the immutable PaymentConfig value produced once a
caller's (token, chain) request has been validated against it.
"""

from enum import Enum
from typing import Dict, List, Any
from pydantic import BaseModel, ConfigDict, Field


class SupportedToken(str, Enum):
    """Tokens accepted as a payment method."""
    USDC = "usdc"
    CREDIT = "credit"


class SupportedChain(str, Enum):
    """Chains on which an order can be paid."""
    ETHEREUM_SEPOLIA = "ethereum-sepolia"
    BASE_SEPOLIA = "base-sepolia"


# Chain -> tokens that can be spent on it
SUPPORTED_CHAINS: Dict[SupportedChain, List[SupportedToken]] = {
    SupportedChain.ETHEREUM_SEPOLIA: [SupportedToken.USDC, SupportedToken.CREDIT],
    SupportedChain.BASE_SEPOLIA: [SupportedToken.USDC, SupportedToken.CREDIT],
}

SUPPORTED_PAYMENT_METHODS: List[SupportedToken] = [SupportedToken.CREDIT, SupportedToken.USDC]


class PaymentConfig(BaseModel):
    """A validated (token, chain) pair.

    PaymentConfig is only ever produced by ``resolve_payment_config``, which
    lower-cases both inputs and checks them against ``SUPPORTED_CHAINS``. It is
    frozen: once resolved, the payment method of a purchase cannot change.

    Usage Example:
        ```python
        config = resolve_payment_config("USDC", "Base-Sepolia")
        print(config.token)   # SupportedToken.USDC
        print(config.chain)   # SupportedChain.BASE_SEPOLIA

        # Body fragment sent to the order service
        config.to_payment_payload("0xabc...")
        # {"method": "base-sepolia", "currency": "usdc", "payerAddress": "0xabc..."}
        ```

    Attributes:
        token (SupportedToken): Token the payer spends
        chain (SupportedChain): Chain the payment settles on
    """

    model_config = ConfigDict(frozen=True)

    token: SupportedToken = Field(description="Payment token")
    chain: SupportedChain = Field(description="Settlement chain")

    @property
    def label(self) -> str:
        """Human-readable payment method, e.g. ``USDC on base-sepolia``."""
        return f"{self.token.value.upper()} on {self.chain.value}"

    def to_payment_payload(self, payer_address: str) -> Dict[str, Any]:
        """Build the ``payment`` object of an order/quote request."""
        return {
            "method": self.chain.value,
            "currency": self.token.value,
            "payerAddress": payer_address,
        }
