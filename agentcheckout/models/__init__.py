"""Core data models for the checkout core."""

from agentcheckout.models.payment import (
    PaymentConfig,
    SupportedChain,
    SupportedToken,
    SUPPORTED_CHAINS,
    SUPPORTED_PAYMENT_METHODS,
)
from agentcheckout.models.balance import BalanceRecord, TokenBalance, format_balance
from agentcheckout.models.order import (
    Quote,
    Order,
    OrderPhase,
    OrderStatus,
    OrderStatusReport,
    Recipient,
    PhysicalAddress,
    INSUFFICIENT_FUNDS_STATUS,
)
from agentcheckout.models.transaction import (
    Transaction,
    TransactionStatus,
    TransactionStatusReport,
)
from agentcheckout.models.product import Product

__all__ = [
    "PaymentConfig",
    "SupportedChain",
    "SupportedToken",
    "SUPPORTED_CHAINS",
    "SUPPORTED_PAYMENT_METHODS",
    "BalanceRecord",
    "TokenBalance",
    "format_balance",
    "Quote",
    "Order",
    "OrderPhase",
    "OrderStatus",
    "OrderStatusReport",
    "Recipient",
    "PhysicalAddress",
    "INSUFFICIENT_FUNDS_STATUS",
    "Transaction",
    "TransactionStatus",
    "TransactionStatusReport",
    "Product",
]
