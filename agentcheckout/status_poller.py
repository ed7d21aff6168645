"""Status Poller - samples remote order and transaction status until terminal.

Remote records are eventually consistent, so a single read right after a
write may be stale. The poller reads repeatedly with a fixed delay between
samples until the record reaches a terminal status or the attempt budget
runs out. Running out of attempts is a normal result (TIMED_OUT), not an
error.

Terminal detection works on explicit status codes (``OrderStatus`` and
``TransactionStatus``), never on the wording of the messages shown to users.
"""

import logging
import time
from typing import Callable, Optional, Dict

from agentcheckout.http_client import HTTPClient
from agentcheckout.models.order import Order, OrderStatus, OrderStatusReport
from agentcheckout.models.transaction import Transaction, TransactionStatus, TransactionStatusReport

logger = logging.getLogger("agentcheckout.poller")

ORDER_ENDPOINT = "/api/2022-06-09/orders/{order_id}"
TRANSACTION_ENDPOINT = "/api/2022-06-09/wallets/{wallet}/transactions/{transaction_id}"

ORDER_TIMEOUT_MESSAGE = "Timed out waiting for order completion."
TRANSACTION_TIMEOUT_MESSAGE = "Timed out waiting for transaction completion."

_ORDER_MESSAGES = {
    OrderStatus.INSUFFICIENT_FUNDS: "Insufficient funds: Please add credits to your wallet and try again.",
    OrderStatus.COMPLETED: "Order completed! Your item(s) are on the way.",
    OrderStatus.FAILED: "Order failed. All items could not be delivered. Refunds are automatic.",
    OrderStatus.AWAITING_PAYMENT: "Order is awaiting payment. Please complete payment to proceed.",
}


def describe_order(order: Order) -> str:
    """Sentence describing an order's status."""
    return _ORDER_MESSAGES.get(order.status, f"Order is in phase: {order.phase}")


def _chain_headers(chain: Optional[str]) -> Optional[Dict[str, str]]:
    return {"X-Chain": chain} if chain else None


class StatusPoller:
    """Reads and polls order and transaction status.

    Usage Example:
        ```python
        poller = StatusPoller(http_client, max_attempts=50, interval_ms=2000)

        report = poller.check_order_status("order-123", "base-sepolia")
        print(report.message)

        report = poller.poll_order("order-123", "base-sepolia")
        if report.status == OrderStatus.TIMED_OUT:
            print("Still not settled")
        ```

    Attributes:
        http_client (HTTPClient): Client for the order and wallet services
        max_attempts (int): Default attempt budget
        interval_ms (int): Default delay between reads, in milliseconds
        sleep (Callable[[float], None]): Sleep function taking seconds
    """

    def __init__(
        self,
        http_client: HTTPClient,
        max_attempts: int = 50,
        interval_ms: int = 2000,
        sleep: Callable[[float], None] = time.sleep
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if interval_ms < 0:
            raise ValueError("interval_ms must be non-negative")
        self.http_client = http_client
        self.max_attempts = max_attempts
        self.interval_ms = interval_ms
        self.sleep = sleep

    # ========== Orders ==========

    def fetch_order(self, order_id: str, chain: Optional[str] = None) -> Order:
        data = self.http_client.get(ORDER_ENDPOINT.format(order_id=order_id), headers=_chain_headers(chain))
        return Order.from_response(data)

    def check_order_status(self, order_id: str, chain: Optional[str] = None) -> OrderStatusReport:
        """Single status read of ``order_id``.

        Raises:
            RemoteCallError: If the order cannot be read
        """
        order = self.fetch_order(order_id, chain)
        return OrderStatusReport(order_id=order_id, status=order.status, message=describe_order(order))

    def poll_order(
        self,
        order_id: str,
        chain: Optional[str] = None,
        max_attempts: Optional[int] = None,
        interval_ms: Optional[int] = None
    ) -> OrderStatusReport:
        """Poll ``order_id`` until completed, failed or insufficient funds.

        Returns:
            OrderStatusReport: The terminal report, or a TIMED_OUT report once
                ``max_attempts`` reads found no terminal status
        """
        attempts = self._attempts(max_attempts)
        for attempt in range(1, attempts + 1):
            report = self.check_order_status(order_id, chain)
            if report.is_terminal:
                logger.info("Order %s reached %s after %d attempt(s)", order_id, report.status.value, attempt)
                return report.model_copy(update={"attempts": attempt})
            logger.info("Order %s is %s (attempt %d/%d)", order_id, report.status.value, attempt, attempts)
            if attempt < attempts:
                self._wait(interval_ms)

        logger.info("Gave up polling order %s after %d attempts", order_id, attempts)
        return OrderStatusReport(
            order_id=order_id,
            status=OrderStatus.TIMED_OUT,
            message=ORDER_TIMEOUT_MESSAGE,
            attempts=attempts,
        )

    # ========== Transactions ==========

    def check_transaction_status(
        self,
        wallet_address: str,
        transaction_id: str,
        chain: Optional[str] = None
    ) -> TransactionStatusReport:
        """Single status read of a wallet transaction."""
        data = self.http_client.get(
            TRANSACTION_ENDPOINT.format(wallet=wallet_address, transaction_id=transaction_id),
            headers=_chain_headers(chain)
        )
        transaction = Transaction.from_response(data)
        if transaction is None:
            status = data.get("status") if isinstance(data, dict) else None
            transaction = Transaction(transaction_id=transaction_id, raw_status=None if status is None else str(status))
        return TransactionStatusReport(
            transaction_id=transaction_id,
            status=transaction.status,
            message=transaction.describe(),
        )

    def poll_transaction(
        self,
        wallet_address: str,
        transaction_id: str,
        chain: Optional[str] = None,
        max_attempts: Optional[int] = None,
        interval_ms: Optional[int] = None
    ) -> TransactionStatusReport:
        """Poll a transaction until completed, expired, failed or refunded."""
        attempts = self._attempts(max_attempts)
        report = None
        for attempt in range(1, attempts + 1):
            report = self.check_transaction_status(wallet_address, transaction_id, chain)
            if report.is_terminal:
                return report.model_copy(update={"attempts": attempt})
            if attempt < attempts:
                self._wait(interval_ms)

        return TransactionStatusReport(
            transaction_id=transaction_id,
            status=report.status if report else TransactionStatus.OTHER,
            message=TRANSACTION_TIMEOUT_MESSAGE,
            attempts=attempts,
            timed_out=True,
        )

    # ========== Helpers ==========

    def _attempts(self, max_attempts: Optional[int]) -> int:
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        return attempts

    def _wait(self, interval_ms: Optional[int]) -> None:
        delay = self.interval_ms if interval_ms is None else interval_ms
        if delay > 0:
            self.sleep(delay / 1000)
