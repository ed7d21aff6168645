"""Error taxonomy for the checkout core.

Validation and remote-call failures are raised as exceptions from the
components and converted to text at the tool boundary (see ``CheckoutSDK``).
Insufficient funds and poll timeouts are NOT errors: they are ordinary
results returned by the coordinator and the poller.
"""

import json
from typing import Any, Optional


class CheckoutError(Exception):
    """Base class for all checkout errors."""


class ConfigurationError(CheckoutError):
    """Required configuration is missing or invalid."""


# ========== Validation ==========

class PaymentConfigError(CheckoutError, ValueError):
    """A (token, chain) pair failed validation."""


class UnsupportedPaymentMethod(PaymentConfigError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unsupported payment method: {token}")


class UnsupportedChain(PaymentConfigError):
    def __init__(self, chain: str):
        self.chain = chain
        super().__init__(f"Unsupported chain: {chain}")


class UnsupportedTokenOnChain(PaymentConfigError):
    def __init__(self, token: str, chain: str):
        self.token = token
        self.chain = chain
        super().__init__(f"Token '{token}' is not supported on chain '{chain}'")


# ========== Lookups ==========

class NotFoundError(CheckoutError):
    """A remote record (balance, signer, order) could not be located."""


class SignerNotFound(NotFoundError):
    def __init__(self, wallet_address: str):
        self.wallet_address = wallet_address
        super().__init__("Admin signer not found")


# ========== Remote calls ==========

class RemoteCallError(CheckoutError):
    """A remote dependency returned a non-2xx status or an unusable body.

    Attributes:
        status_code (Optional[int]): HTTP status, None for transport failures
        body (Any): Decoded response body when one was available
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SubmissionFailed(RemoteCallError):
    """The transaction endpoint accepted the call but returned no identifier."""


def unwrap_error_message(error: BaseException) -> str:
    """Extract a human message from an error whose text may be a JSON envelope.

    Best effort: when ``str(error)`` parses as a JSON object, its ``message``
    (or ``error``) field is returned; otherwise the raw text is.

    Example:
        ```python
        unwrap_error_message(Exception('{"message": "Out of stock"}'))
        # 'Out of stock'
        unwrap_error_message(Exception("boom"))
        # 'boom'
        ```
    """
    raw = str(error)
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return raw
    if isinstance(payload, dict):
        return str(payload.get("message") or payload.get("error") or raw)
    return raw
