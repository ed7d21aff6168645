"""Order Coordinator - drives a purchase from product locator to submitted order.

The OrderCoordinator runs the checkout state machine:

    Init -> ConfigResolved -> Quoted -> BalanceChecked -> Submitted
         -> {InsufficientFunds, AwaitingSettlement, Failed}

It resolves the payment configuration, gets an advisory quote, checks the
payer's balance against it, submits the order and interprets the payment
outcome. It never signs or submits on-chain transactions and never retries
an order submission.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Dict, Any

from agentcheckout.balance_reader import BalanceReader
from agentcheckout.errors import CheckoutError, ConfigurationError, RemoteCallError, unwrap_error_message
from agentcheckout.http_client import HTTPClient
from agentcheckout.models.order import Order, Quote, Recipient
from agentcheckout.models.payment import PaymentConfig
from agentcheckout.payment_config import resolve_payment_config
from agentcheckout.quote_service import QuoteService, ORDERS_ENDPOINT, line_items

logger = logging.getLogger("agentcheckout.coordinator")


class CheckoutStage(str, Enum):
    """States of the checkout state machine."""
    INIT = "init"
    CONFIG_RESOLVED = "config_resolved"
    QUOTED = "quoted"
    BALANCE_CHECKED = "balance_checked"
    SUBMITTED = "submitted"


class CheckoutOutcome(str, Enum):
    """Where a checkout attempt ended."""
    AWAITING_SETTLEMENT = "awaiting_settlement"  # Order submitted, payment pending
    INSUFFICIENT_FUNDS = "insufficient_funds"    # Valid outcome, not an error
    FAILED = "failed"                            # A step raised


_STEP_DESCRIPTIONS = {
    CheckoutStage.INIT: "Invalid payment method",
    CheckoutStage.CONFIG_RESOLVED: "Quote request failed",
    CheckoutStage.QUOTED: "Balance check failed",
    CheckoutStage.BALANCE_CHECKED: "Order submission failed",
    CheckoutStage.SUBMITTED: "Unexpected order response",
}


class CheckoutResult:
    """Result of a checkout attempt.

    Attributes:
        outcome (CheckoutOutcome): Terminal state reached
        stage (CheckoutStage): Last state reached before the outcome
        payment_config (Optional[PaymentConfig]): Resolved payment method
        quote (Optional[Quote]): Pre-check quote, or the order's authoritative
            quote once an order was submitted
        balance (Optional[Decimal]): Balance seen by the pre-check
        order (Optional[Order]): Submitted order, if any
        error_message (Optional[str]): Description of the failed step
        from_submission (bool): True when an insufficient-funds outcome was
            reported by the order service rather than the pre-check
    """

    def __init__(
        self,
        outcome: CheckoutOutcome,
        stage: CheckoutStage,
        payment_config: Optional[PaymentConfig] = None,
        quote: Optional[Quote] = None,
        balance: Optional[Decimal] = None,
        order: Optional[Order] = None,
        error_message: Optional[str] = None,
        from_submission: bool = False
    ):
        self.outcome = outcome
        self.stage = stage
        self.payment_config = payment_config
        self.quote = quote
        self.balance = balance
        self.order = order
        self.error_message = error_message
        self.from_submission = from_submission

    @property
    def success(self) -> bool:
        return self.outcome == CheckoutOutcome.AWAITING_SETTLEMENT

    @property
    def shortfall(self) -> Optional[Decimal]:
        """How much the pre-check balance falls short of the pre-check quote.

        None when either figure is missing, or when the order service reported
        the shortage: its total and the pre-check balance come from different reads.
        """
        if self.from_submission or self.quote is None or self.balance is None:
            return None
        return max(self.quote.total_amount - self.balance, Decimal(0))

    @property
    def requires_transaction(self) -> bool:
        """True when the payer must submit ``order.serialized_transaction`` next."""
        return self.order is not None and bool(self.order.serialized_transaction)

    def order_summary(self) -> Dict[str, Any]:
        """Details the caller needs to continue: order ID, price and transaction."""
        if self.order is None:
            return {}
        return {
            "orderId": self.order.order_id,
            "price": None if self.quote is None else str(self.quote.total_amount),
            "currency": None if self.quote is None else self.quote.currency,
            "serializedTransaction": self.order.serialized_transaction,
        }

    def __repr__(self) -> str:
        if self.outcome == CheckoutOutcome.FAILED:
            return f"CheckoutResult(outcome=failed, stage={self.stage.value}, error={self.error_message!r})"
        order_id = self.order.order_id if self.order else None
        return f"CheckoutResult(outcome={self.outcome.value}, order_id={order_id})"


class OrderCoordinator:
    """Coordinates one purchase against the remote order and wallet services.

    The balance pre-check only short-circuits orders that would obviously
    fail. The order service's own answer decides whether funds are
    insufficient.

    Usage Example:
        ```python
        coordinator = OrderCoordinator(http_client, quote_service, balance_reader,
                                       payer_address="0xabc", recipient=recipient)

        result = coordinator.create_order(["amazon:B00EXAMPLE"], "usdc", "base-sepolia")
        if result.outcome == CheckoutOutcome.INSUFFICIENT_FUNDS:
            print(f"Short by {result.shortfall}")
        elif result.success:
            print(result.order_summary())
        else:
            print(result.error_message)
        ```
    """

    def __init__(
        self,
        http_client: HTTPClient,
        quote_service: QuoteService,
        balance_reader: BalanceReader,
        payer_address: str,
        recipient: Optional[Recipient] = None
    ):
        """Initialize the coordinator.

        Args:
            http_client (HTTPClient): Client for the order service
            quote_service (QuoteService): Source of advisory quotes
            balance_reader (BalanceReader): Source of wallet balances
            payer_address (str): Wallet that pays for orders
            recipient (Optional[Recipient]): Shipping details; orders cannot be
                submitted without them
        """
        self.http_client = http_client
        self.quote_service = quote_service
        self.balance_reader = balance_reader
        self.payer_address = payer_address
        self.recipient = recipient

    def create_order(self, product_locators: List[str], token: str, chain: str) -> CheckoutResult:
        """Run the checkout state machine for ``product_locators``.

        Never raises for remote or validation failures: those end in a
        FAILED result naming the step that failed.

        Args:
            product_locators (List[str]): Items to buy, e.g. ["amazon:B00EXAMPLE"]
            token (str): Requested payment token (any case)
            chain (str): Requested payment chain (any case)

        Returns:
            CheckoutResult: AWAITING_SETTLEMENT, INSUFFICIENT_FUNDS or FAILED
        """
        stage = CheckoutStage.INIT
        config = quote = balance = None
        logger.info(
            "Order creation start: items=%s payment=%s on %s wallet=%s",
            product_locators, token.upper(), chain, self.payer_address
        )

        try:
            config = resolve_payment_config(token, chain)
            stage = CheckoutStage.CONFIG_RESOLVED

            logger.info("Order creation: getting quote")
            quote = self.quote_service.quote(product_locators, config, self.payer_address)
            stage = CheckoutStage.QUOTED

            logger.info("Order creation: checking %s balance", config.label)
            balance = self.balance_reader.get_balance(self.payer_address, config.token.value, config.chain.value)
            if balance is None:
                logger.info("No %s balance found, treating as zero", config.label)
                balance = Decimal(0)
            stage = CheckoutStage.BALANCE_CHECKED

            logger.info(
                "Balance analysis: balance=%s required=%s %s difference=%s",
                balance, quote.total_amount, quote.currency, balance - quote.total_amount
            )
            if balance < quote.total_amount:
                logger.info(
                    "Insufficient balance: balance=%s required=%s shortage=%s",
                    balance, quote.total_amount, quote.total_amount - balance
                )
                return CheckoutResult(
                    CheckoutOutcome.INSUFFICIENT_FUNDS,
                    stage,
                    payment_config=config,
                    quote=quote,
                    balance=balance,
                )

            order = self._submit(product_locators, config)
            stage = CheckoutStage.SUBMITTED
            return self._interpret(order, config, quote, balance)

        except CheckoutError as e:
            message = f"{_STEP_DESCRIPTIONS[stage]}: {unwrap_error_message(e)}"
            logger.error("Order creation failed: %s", message)
            return CheckoutResult(
                CheckoutOutcome.FAILED,
                stage,
                payment_config=config,
                quote=quote,
                balance=balance,
                error_message=message,
            )

    def build_order_request(self, product_locators: List[str], config: PaymentConfig) -> Dict[str, Any]:
        """Order submission body. Requires a configured recipient."""
        if self.recipient is None:
            raise ConfigurationError("Recipient details are not configured")
        return {
            "recipient": self.recipient.to_payload(),
            "payment": config.to_payment_payload(self.payer_address),
            "lineItems": line_items(product_locators),
        }

    def _submit(self, product_locators: List[str], config: PaymentConfig) -> Order:
        request = self.build_order_request(product_locators, config)
        logger.info("Order creation: submitting order for %s", product_locators)
        response = self.http_client.post(ORDERS_ENDPOINT, data=request)
        return Order.from_response(response)

    def _interpret(self, order: Order, config: PaymentConfig, quote: Quote, balance: Decimal) -> CheckoutResult:
        # The order's own quote is authoritative from here on
        authoritative = order.quote or quote

        if order.is_insufficient_funds:
            logger.info("Order service reported insufficient funds for %s", config.label)
            return CheckoutResult(
                CheckoutOutcome.INSUFFICIENT_FUNDS,
                CheckoutStage.SUBMITTED,
                payment_config=config,
                quote=authoritative,
                balance=balance,
                order=order,
                from_submission=True,
            )

        if not order.order_id:
            raise RemoteCallError("Order response did not include an order ID")

        logger.info(
            "Order creation complete: order=%s price=%s %s transaction=%s phase=%s payment=%s",
            order.order_id, authoritative.total_amount, authoritative.currency,
            bool(order.serialized_transaction), order.phase, order.payment_status
        )
        return CheckoutResult(
            CheckoutOutcome.AWAITING_SETTLEMENT,
            CheckoutStage.SUBMITTED,
            payment_config=config,
            quote=authoritative,
            balance=balance,
            order=order,
        )
