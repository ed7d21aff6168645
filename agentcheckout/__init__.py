"""Agent Checkout - Order and payment orchestration for AI purchasing agents."""

__version__ = "0.1.0"

# Main SDK interface
from agentcheckout.sdk import CheckoutSDK
from agentcheckout.config import CheckoutConfig

# Core models (for advanced usage)
from agentcheckout.models import (
    PaymentConfig,
    SupportedToken,
    SupportedChain,
    Quote,
    Order,
    OrderStatus,
    Transaction,
    TransactionStatus,
)

# Components (for advanced usage)
from agentcheckout.payment_config import resolve_payment_config
from agentcheckout.balance_reader import BalanceReader
from agentcheckout.quote_service import QuoteService
from agentcheckout.order_coordinator import OrderCoordinator, CheckoutResult, CheckoutOutcome
from agentcheckout.transaction_submitter import TransactionSubmitter
from agentcheckout.status_poller import StatusPoller

__all__ = [
    # Main SDK
    "CheckoutSDK",
    "CheckoutConfig",
    # Models
    "PaymentConfig",
    "SupportedToken",
    "SupportedChain",
    "Quote",
    "Order",
    "OrderStatus",
    "Transaction",
    "TransactionStatus",
    # Components
    "resolve_payment_config",
    "BalanceReader",
    "QuoteService",
    "OrderCoordinator",
    "CheckoutResult",
    "CheckoutOutcome",
    "TransactionSubmitter",
    "StatusPoller",
]
