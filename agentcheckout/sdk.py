"""Checkout SDK - High-level API exposing the checkout tools.

This module wires every component from one ``CheckoutConfig`` and exposes the
operations a calling agent uses. It is the tool boundary: every method
returns a text result and never raises.
"""

import json
import logging
import time
from typing import Optional, Callable

from agentcheckout.balance_reader import BalanceReader, matches_token
from agentcheckout.config import CheckoutConfig
from agentcheckout.errors import CheckoutError, unwrap_error_message
from agentcheckout.http_client import HTTPClient, AUTH_BEARER
from agentcheckout.models.balance import format_balance
from agentcheckout.models.payment import SUPPORTED_PAYMENT_METHODS
from agentcheckout.order_coordinator import OrderCoordinator, CheckoutOutcome, CheckoutResult
from agentcheckout.payment_config import resolve_payment_config, is_supported_token, chain_accepts_token
from agentcheckout.product_search import ProductSearch
from agentcheckout.quote_service import QuoteService
from agentcheckout.status_poller import StatusPoller
from agentcheckout.transaction_submitter import TransactionSubmitter

logger = logging.getLogger("agentcheckout.sdk")


def _describe_error(error: Exception) -> str:
    if isinstance(error, CheckoutError):
        return unwrap_error_message(error)
    return str(error) or error.__class__.__name__


class CheckoutSDK:
    """High-level SDK for agent checkout operations.

    Key Features:
    - **Search**: Find products and their ASINs
    - **Orders**: Quote, balance-check and submit orders
    - **Transactions**: Submit the client-side payment transaction of an order
    - **Status**: Check or poll order and transaction status
    - **Balances**: Per-chain token balances of a wallet

    Usage Example:
        ```python
        sdk = CheckoutSDK(CheckoutConfig.from_env())

        print(sdk.search("usb-c cable"))
        print(sdk.create_order("B00EXAMPLE", "usdc", "base-sepolia"))
        print(sdk.send_transaction("0x...", "usdc", "base-sepolia"))
        print(sdk.poll_order_status("order-123", "base-sepolia"))
        ```

    Attributes:
        config (CheckoutConfig): Settings the components were built from
        http_client (HTTPClient): Client for the order and wallet services
        product_search (Optional[ProductSearch]): None without a search API key
        balance_reader (BalanceReader): Wallet balance reads
        quote_service (QuoteService): Advisory quotes
        coordinator (OrderCoordinator): Order state machine
        transaction_submitter (TransactionSubmitter): Transaction execution
        poller (StatusPoller): Order and transaction status
    """

    def __init__(
        self,
        config: CheckoutConfig,
        http_client: Optional[HTTPClient] = None,
        search_client: Optional[HTTPClient] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """Initialize the SDK.

        Args:
            config: Checkout settings
            http_client: Client for the order and wallet services (built from
                ``config`` when omitted)
            search_client: Client for the search API (built from
                ``config.search_api_key`` when omitted)
            sleep: Sleep function used between status polls
        """
        self.config = config
        self.http_client = http_client or HTTPClient(
            config.api_key,
            config.api_base_url,
            user_agent=config.user_agent,
            timeout=config.request_timeout,
        )
        if search_client is None and config.search_api_key:
            search_client = HTTPClient(
                config.search_api_key,
                config.search_api_base_url,
                auth_scheme=AUTH_BEARER,
                user_agent=config.user_agent,
                timeout=config.request_timeout,
            )
        self.product_search = ProductSearch(search_client) if search_client else None

        self.balance_reader = BalanceReader(self.http_client)
        self.quote_service = QuoteService(self.http_client)
        self.coordinator = OrderCoordinator(
            self.http_client,
            self.quote_service,
            self.balance_reader,
            payer_address=config.agent_wallet_address,
            recipient=config.recipient,
        )
        self.transaction_submitter = TransactionSubmitter(self.http_client)
        self.poller = StatusPoller(
            self.http_client,
            max_attempts=config.poll_max_attempts,
            interval_ms=config.poll_interval_ms,
            sleep=sleep,
        )

    # ========== Search ==========

    def search(self, query: str) -> str:
        """Search for products. Returns listings as JSON text."""
        if self.product_search is None:
            return "Failed to search Amazon: SEARCH_API_KEY is not configured"
        try:
            products = self.product_search.search(query, filter_listings=not self.config.search_append_balance)
        except Exception as e:
            logger.exception("Search failed")
            return f"Failed to search Amazon: {_describe_error(e)}"

        if not products:
            return "No results found."

        text = json.dumps([p.model_dump() for p in products], indent=2)
        if self.config.search_append_balance:
            balance_line = self._default_balance_line()
            if balance_line:
                text = f"{text}\n\n{balance_line}"
        return text

    def _default_balance_line(self) -> Optional[str]:
        if not (self.config.default_token and self.config.default_chain):
            return None
        try:
            config = resolve_payment_config(self.config.default_token, self.config.default_chain)
            balance = self.balance_reader.get_token_balance(
                self.config.agent_wallet_address, config.token.value, config.chain.value
            )
        except CheckoutError as e:
            logger.error("Could not read balance for search results: %s", e)
            return None
        if balance is None:
            return None
        return f"Your {config.token.value.upper()} balance on {config.chain.value}: {balance.display}"

    # ========== Orders ==========

    def create_order(self, asin: str, token: Optional[str] = None, chain: Optional[str] = None) -> str:
        """Create an order for an Amazon product.

        ``token`` and ``chain`` fall back to the configured defaults.
        """
        token = token or self.config.default_token
        chain = chain or self.config.default_chain
        if not token or not chain:
            return "Failed to create order: Payment token and chain are required (no default configured)"

        try:
            result = self.coordinator.create_order([f"amazon:{asin}"], token, chain)
        except Exception as e:
            logger.exception("Order creation crashed")
            return f"Failed to create order: {_describe_error(e)}"
        return format_checkout_result(result)

    def send_transaction(self, serialized_transaction: str, token: str, chain: str) -> str:
        """Submit the serialized transaction returned by create-order."""
        try:
            config = resolve_payment_config(token, chain)
            transaction = self.transaction_submitter.submit(
                self.config.agent_wallet_address, serialized_transaction, config
            )
        except Exception as e:
            if not isinstance(e, CheckoutError):
                logger.exception("Transaction submission crashed")
            return f"Transaction failed. The purchase process cannot continue. Error: {_describe_error(e)}"
        return f"Transaction sent! Transaction ID: {transaction.transaction_id}, Status: {transaction.raw_status}"

    # ========== Status ==========

    def check_order_status(self, order_id: str, chain: Optional[str] = None) -> str:
        try:
            report = self.poller.check_order_status(order_id, chain)
        except Exception as e:
            return f"Failed to check order status: {_describe_error(e)}"
        return f"Status for order {order_id}: {report.message}"

    def poll_order_status(self, order_id: str, chain: Optional[str] = None, purchase_flow: bool = True) -> str:
        """Poll an order until it settles or the budget runs out.

        The purchase flow uses ``poll_max_attempts``; other callers get the
        longer ``poll_max_attempts_extended`` budget.
        """
        attempts = self.config.poll_max_attempts if purchase_flow else self.config.poll_max_attempts_extended
        try:
            report = self.poller.poll_order(order_id, chain, max_attempts=attempts)
        except Exception as e:
            return f"Failed to poll order: {_describe_error(e)}"
        return f"Polling result for order {order_id}: {report.message}"

    def check_transaction_status(
        self,
        transaction_id: str,
        chain: Optional[str] = None,
        wallet_address: Optional[str] = None
    ) -> str:
        wallet = wallet_address or self.config.agent_wallet_address
        try:
            report = self.poller.check_transaction_status(wallet, transaction_id, chain)
        except Exception as e:
            return f"Failed to check transaction status: {_describe_error(e)}"
        return f"Status for transaction {transaction_id}: {report.message}"

    # ========== Balances ==========

    def get_token_balance(self, token: str, wallet_address: Optional[str] = None) -> str:
        """Per-chain balances of ``token`` for ``wallet_address`` (defaults to the agent wallet)."""
        address = wallet_address or self.config.agent_wallet_address
        token = token.lower()

        if not is_supported_token(token):
            supported = ", ".join(method.value for method in SUPPORTED_PAYMENT_METHODS)
            return f"Unsupported token: {token}. Must be one of: {supported}"

        try:
            records = self.balance_reader.fetch_records(address, token)
        except Exception as e:
            return f"Failed to get balance: {_describe_error(e)}"

        if not records:
            return f"Could not find balance information for token '{token}'"

        record = next((r for r in records if matches_token(r.token, token)), None)
        if record is None or not record.balances:
            return f"No balance information found for token '{token}'"

        lines = []
        for chain in record.balances:
            if not chain_accepts_token(chain, token):
                continue
            amount = record.amount_on(chain)
            if amount is None:
                continue
            lines.append(
                f"{token.upper()} balance on {chain}: {format_balance(amount, record.effective_decimals)}"
            )

        if not lines:
            return f"No supported chains found for token '{token}'"

        return f"{token.upper()} balances for {address}:\n" + "\n".join(lines)

    def close(self):
        """Close the HTTP sessions."""
        self.http_client.close()
        if self.product_search is not None:
            self.product_search.http_client.close()


def format_checkout_result(result: CheckoutResult) -> str:
    """Text shown to the caller for a checkout result."""
    if result.outcome == CheckoutOutcome.FAILED:
        return f"Failed to create order: {result.error_message}"

    quote = result.quote
    if result.outcome == CheckoutOutcome.INSUFFICIENT_FUNDS:
        if result.from_submission:
            total = quote.total_amount if quote else None
            currency = quote.currency if quote else None
            return (
                f"Insufficient funds: The total amount including fees is {total} {currency}.\n"
                f"Please choose a different payment method or top up your wallet."
            )
        config = result.payment_config
        return (
            f"Insufficient balance: The total amount including fees is {quote.total_amount} {quote.currency}.\n"
            f"Your current balance is {result.balance} {config.token.value.upper()} on {config.chain.value}.\n"
            f"You are short {result.shortfall} {quote.currency}.\n\n"
            f"Would you like to try again with a different payment method?"
        )

    summary = result.order_summary()
    return (
        f"Order created! Order ID: {summary['orderId']}, Price: {summary['price']} {summary['currency']}\n"
        f"Details: {json.dumps(summary, indent=2)}"
    )
