"""Order models - quotes, remote order records and their status codes.

Orders are owned by the remote order service. This module only parses what
that service returns; nothing here is persisted locally.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


INSUFFICIENT_FUNDS_STATUS = "crypto-payer-insufficient-funds"


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_amount(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


class Quote(BaseModel):
    """Price of a set of line items under one payment configuration.

    Attributes:
        total_amount (Decimal): Total including fees, in whole token units
        currency (str): Currency the total is expressed in
    """

    total_amount: Decimal = Field(description="Total including fees")
    currency: str = Field(default="", description="Currency of the total")

    @classmethod
    def from_response(cls, data: Any) -> Optional["Quote"]:
        """Parse a quote out of an order-service response.

        Accepts both the nested form ``{"quote": {"totalPrice": {"amount", "currency"}}}``
        and the flat forms ``{"quote": {"totalPrice": "1.00", "currency": "usdc"}}``
        and ``{"totalAmount": "1.00", "currency": "usdc"}``. Looks in the top
        level of the response first, then inside ``order``.

        Returns:
            Optional[Quote]: The quote, or None if no parseable total exists
        """
        if not isinstance(data, dict):
            return None

        candidates = [data]
        if isinstance(data.get("order"), dict):
            candidates.append(data["order"])

        for candidate in candidates:
            quote = candidate.get("quote")
            if isinstance(quote, dict):
                total = quote.get("totalPrice")
                currency = quote.get("currency")
                if isinstance(total, dict):
                    currency = total.get("currency", currency)
                    total = total.get("amount")
                amount = _parse_amount(total)
                if amount is not None:
                    return cls(total_amount=amount, currency=str(currency or ""))

            amount = _parse_amount(candidate.get("totalAmount"))
            if amount is not None:
                return cls(total_amount=amount, currency=str(candidate.get("currency") or ""))

        return None


class OrderPhase(str, Enum):
    """Coarse lifecycle stage of a remote order."""
    QUOTE = "quote"
    PAYMENT = "payment"
    AWAITING_PAYMENT = "awaiting-payment"
    DELIVERY = "delivery"
    COMPLETED = "completed"
    FAILED = "failed"
    OTHER = "other"


class OrderStatus(str, Enum):
    """Status code the poller classifies an order into.

    COMPLETED, FAILED and INSUFFICIENT_FUNDS are terminal; TIMED_OUT is what
    the poller reports when its attempt budget runs out.
    """
    COMPLETED = "completed"
    FAILED = "failed"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    AWAITING_PAYMENT = "awaiting_payment"
    IN_PROGRESS = "in_progress"
    TIMED_OUT = "timed_out"


TERMINAL_ORDER_STATUSES = frozenset({
    OrderStatus.COMPLETED,
    OrderStatus.FAILED,
    OrderStatus.INSUFFICIENT_FUNDS,
})


class Order(BaseModel):
    """Snapshot of a remote order record.

    Attributes:
        order_id (Optional[str]): Remote order identifier
        phase (str): Raw phase text as sent by the service
        payment_status (Optional[str]): Payment leg status, may be the
            insufficient-funds sentinel
        quote (Optional[Quote]): Authoritative quote attached to the order
        serialized_transaction (Optional[str]): Transaction the payer must
            submit before the order can settle
    """

    order_id: Optional[str] = Field(default=None, description="Remote order ID")
    phase: str = Field(default="", description="Raw order phase")
    payment_status: Optional[str] = Field(default=None, description="Payment leg status")
    quote: Optional[Quote] = Field(default=None, description="Authoritative quote")
    serialized_transaction: Optional[str] = Field(
        default=None,
        description="Client-side transaction required to pay"
    )

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "Order":
        """Parse either a submission response (``{"order": {...}, ...}``) or a bare order."""
        if not isinstance(data, dict):
            data = {}
        order = data.get("order") if isinstance(data.get("order"), dict) else data

        order_payment = order.get("payment") if isinstance(order.get("payment"), dict) else {}
        # The payment status may be reported next to the order or inside it
        payment = data.get("payment") if isinstance(data.get("payment"), dict) else {}
        if "status" not in payment:
            payment = order_payment
        preparation = order_payment.get("preparation")
        if not isinstance(preparation, dict):
            preparation = {}

        return cls(
            order_id=_text(order.get("orderId")),
            phase=str(order.get("phase") or ""),
            payment_status=_text(payment.get("status")),
            quote=Quote.from_response(data),
            serialized_transaction=_text(preparation.get("serializedTransaction")),
        )

    @property
    def order_phase(self) -> OrderPhase:
        try:
            return OrderPhase(self.phase)
        except ValueError:
            return OrderPhase.OTHER

    @property
    def is_insufficient_funds(self) -> bool:
        return self.payment_status == INSUFFICIENT_FUNDS_STATUS

    @property
    def status(self) -> OrderStatus:
        """Classify this order. Insufficient funds wins over any phase."""
        if self.is_insufficient_funds:
            return OrderStatus.INSUFFICIENT_FUNDS
        phase = self.order_phase
        if phase == OrderPhase.COMPLETED:
            return OrderStatus.COMPLETED
        if phase == OrderPhase.FAILED:
            return OrderStatus.FAILED
        if phase == OrderPhase.AWAITING_PAYMENT:
            return OrderStatus.AWAITING_PAYMENT
        return OrderStatus.IN_PROGRESS


class OrderStatusReport(BaseModel):
    """Result of a status read or a polling run.

    Attributes:
        order_id (str): Order that was checked
        status (OrderStatus): Classified status
        message (str): Human-readable sentence for the caller
        attempts (int): Number of status reads performed
    """

    order_id: str
    status: OrderStatus
    message: str
    attempts: int = 1

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_ORDER_STATUSES


class PhysicalAddress(BaseModel):
    """Shipping address. ``line2`` is the only optional field."""
    name: str
    line1: str
    line2: str = ""
    city: str
    state: str
    postal_code: str
    country: str

    def to_payload(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "line1": self.line1,
            "line2": self.line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
        }


class Recipient(BaseModel):
    """Who receives the goods. Passed through to the order service as-is."""
    email: str
    physical_address: PhysicalAddress

    def to_payload(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "physicalAddress": self.physical_address.to_payload(),
        }
