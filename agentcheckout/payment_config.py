"""Payment config resolution - validates a requested (token, chain) pair."""

from agentcheckout.errors import UnsupportedPaymentMethod, UnsupportedChain, UnsupportedTokenOnChain
from agentcheckout.models.payment import (
    PaymentConfig,
    SupportedChain,
    SupportedToken,
    SUPPORTED_CHAINS,
    SUPPORTED_PAYMENT_METHODS,
)


def resolve_payment_config(token: str, chain: str) -> PaymentConfig:
    """Validate and normalize a (token, chain) pair against the support matrix.

    Both inputs are lower-cased; no whitespace is trimmed. The token is
    checked first, so an unknown token is always reported as an unsupported
    payment method even when the chain is unknown too.

    Args:
        token (str): Requested payment token, e.g. "USDC"
        chain (str): Requested chain, e.g. "Base-Sepolia"

    Returns:
        PaymentConfig: The normalized, immutable configuration

    Raises:
        UnsupportedPaymentMethod: Token is not in the supported set
        UnsupportedChain: Chain is not in the support matrix
        UnsupportedTokenOnChain: Chain exists but does not accept the token

    Example:
        ```python
        resolve_payment_config("USDC", "Base-Sepolia") == resolve_payment_config("usdc", "base-sepolia")
        # True
        ```
    """
    user_token = token.lower()
    user_chain = chain.lower()

    if user_token not in {method.value for method in SUPPORTED_PAYMENT_METHODS}:
        raise UnsupportedPaymentMethod(user_token)

    if user_chain not in {supported.value for supported in SUPPORTED_CHAINS}:
        raise UnsupportedChain(user_chain)

    resolved_token = SupportedToken(user_token)
    resolved_chain = SupportedChain(user_chain)
    if resolved_token not in SUPPORTED_CHAINS[resolved_chain]:
        raise UnsupportedTokenOnChain(user_token, user_chain)

    return PaymentConfig(token=resolved_token, chain=resolved_chain)


def is_supported_token(token: str) -> bool:
    return token.lower() in {method.value for method in SUPPORTED_PAYMENT_METHODS}


def chain_accepts_token(chain: str, token: str) -> bool:
    """True if ``chain`` is in the matrix and lists ``token``."""
    try:
        return SupportedToken(token.lower()) in SUPPORTED_CHAINS[SupportedChain(chain.lower())]
    except ValueError:
        return False
