"""Configuration for the checkout core.

All settings live in one ``CheckoutConfig`` value that is handed to each
component at construction. Only ``CheckoutConfig.from_env`` touches the
process environment.
"""

import os
from typing import Optional, Mapping
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from agentcheckout.errors import ConfigurationError
from agentcheckout.models.order import Recipient, PhysicalAddress


DEFAULT_API_BASE_URL = "https://staging.crossmint.com"
DEFAULT_SEARCH_API_BASE_URL = "https://www.searchapi.io"
DEFAULT_USER_AGENT = "crossmint-checkout/1.0"


class CheckoutConfig(BaseModel):
    """Settings shared by every checkout component.

    Usage Example:
        ```python
        # From the environment (and a .env file, if present)
        config = CheckoutConfig.from_env()

        # Explicitly, e.g. in tests
        config = CheckoutConfig(api_key="sk_test", agent_wallet_address="0xabc")
        ```

    Attributes:
        api_key (str): Key for the order and wallet services
        agent_wallet_address (str): Wallet that pays for orders
        api_base_url (str): Base URL of the order and wallet services
        user_agent (str): User-Agent sent with every request
        search_api_key (Optional[str]): Bearer token for product search
        search_api_base_url (str): Base URL of the product search service
        recipient (Optional[Recipient]): Shipping details for orders
        default_token (Optional[str]): Token used when create-order omits one
        default_chain (Optional[str]): Chain used when create-order omits one
        poll_max_attempts (int): Attempt budget of the purchase-flow poller
        poll_max_attempts_extended (int): Attempt budget outside the purchase flow
        poll_interval_ms (int): Delay between status reads
        request_timeout (float): Per-request timeout in seconds
        search_append_balance (bool): Return unfiltered search results with a
            balance line appended instead of filtered results
    """

    api_key: str = Field(min_length=1)
    agent_wallet_address: str = Field(min_length=1)
    api_base_url: str = DEFAULT_API_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    search_api_key: Optional[str] = None
    search_api_base_url: str = DEFAULT_SEARCH_API_BASE_URL
    recipient: Optional[Recipient] = None
    default_token: Optional[str] = None
    default_chain: Optional[str] = None
    poll_max_attempts: int = Field(default=50, gt=0)
    poll_max_attempts_extended: int = Field(default=90, gt=0)
    poll_interval_ms: int = Field(default=2000, ge=0)
    request_timeout: float = Field(default=30, gt=0)
    search_append_balance: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "CheckoutConfig":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            dotenv: Load a ``.env`` file into ``os.environ`` first

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid
        """
        if dotenv:
            load_dotenv()
        env = os.environ if environ is None else environ

        missing = [name for name in ("CROSSMINT_API_KEY", "AGENT_WALLET_ADDRESS") if not env.get(name)]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        values = {
            "api_key": env["CROSSMINT_API_KEY"],
            "agent_wallet_address": env["AGENT_WALLET_ADDRESS"],
            "search_api_key": env.get("SEARCH_API_KEY") or None,
            "recipient": recipient_from_env(env),
            "default_token": env.get("CHECKOUT_PAYMENT_TOKEN") or None,
            "default_chain": env.get("CHECKOUT_PAYMENT_CHAIN") or None,
            "search_append_balance": env.get("CHECKOUT_SEARCH_APPEND_BALANCE", "").lower() in ("1", "true", "yes"),
        }
        optional = {
            "api_base_url": "CROSSMINT_API_BASE",
            "search_api_base_url": "SEARCH_API_BASE",
            "poll_max_attempts": "CHECKOUT_POLL_MAX_ATTEMPTS",
            "poll_interval_ms": "CHECKOUT_POLL_INTERVAL_MS",
        }
        for field_name, var in optional.items():
            if env.get(var):
                values[field_name] = env[var]

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def recipient_from_env(env: Mapping[str, str]) -> Optional[Recipient]:
    """Recipient from RECIPIENT_* variables, or None unless all required ones are set."""
    required = {
        "email": "RECIPIENT_EMAIL",
        "name": "RECIPIENT_NAME",
        "line1": "RECIPIENT_ADDRESS_LINE1",
        "city": "RECIPIENT_CITY",
        "state": "RECIPIENT_STATE",
        "postal_code": "RECIPIENT_POSTAL_CODE",
        "country": "RECIPIENT_COUNTRY",
    }
    if not all(env.get(var) for var in required.values()):
        return None
    return Recipient(
        email=env["RECIPIENT_EMAIL"],
        physical_address=PhysicalAddress(
            name=env["RECIPIENT_NAME"],
            line1=env["RECIPIENT_ADDRESS_LINE1"],
            line2=env.get("RECIPIENT_ADDRESS_LINE2", ""),
            city=env["RECIPIENT_CITY"],
            state=env["RECIPIENT_STATE"],
            postal_code=env["RECIPIENT_POSTAL_CODE"],
            country=env["RECIPIENT_COUNTRY"],
        ),
    )
