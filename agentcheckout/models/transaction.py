"""Transaction models - on-chain transactions submitted through a wallet.

A Transaction is created by the wallet service when the TransactionSubmitter
hands it a serialized payload; afterwards its status is only ever read.
"""

from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class TransactionStatus(str, Enum):
    """Status of a wallet transaction."""
    COMPLETED = "completed"          # Executed on chain
    IN_PROGRESS = "in_progress"      # Submitted, not yet final
    EXPIRED = "expired"              # Never executed before its deadline
    FAILED = "failed"                # Execution failed
    REFUND = "refund"                # Refunded
    OTHER = "other"                  # Anything the service adds later


TERMINAL_TRANSACTION_STATUSES = frozenset({
    TransactionStatus.COMPLETED,
    TransactionStatus.EXPIRED,
    TransactionStatus.FAILED,
    TransactionStatus.REFUND,
})

_STATUS_MESSAGES = {
    TransactionStatus.COMPLETED: "Transaction completed!",
    TransactionStatus.IN_PROGRESS: "Transaction is still in progress.",
    TransactionStatus.EXPIRED: "Transaction expired.",
    TransactionStatus.FAILED: "Transaction failed.",
    TransactionStatus.REFUND: "Transaction refunded.",
}


class Transaction(BaseModel):
    """A transaction as reported by the wallet service.

    Attributes:
        transaction_id (str): Remote transaction ID
        raw_status (Optional[str]): Status text exactly as the service sent it
    """

    transaction_id: str = Field(description="Remote transaction ID")
    raw_status: Optional[str] = Field(default=None, description="Status as reported")

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> Optional["Transaction"]:
        """Parse a transaction response; None when it carries no ID."""
        if not isinstance(data, dict) or not data.get("id"):
            return None
        status = data.get("status")
        return cls(transaction_id=str(data["id"]), raw_status=None if status is None else str(status))

    @property
    def status(self) -> TransactionStatus:
        try:
            return TransactionStatus(self.raw_status)
        except ValueError:
            return TransactionStatus.OTHER

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_TRANSACTION_STATUSES

    def describe(self) -> str:
        """Fixed sentence for known statuses, raw status passthrough otherwise."""
        return _STATUS_MESSAGES.get(self.status, f"Transaction status: {self.raw_status}")


class TransactionStatusReport(BaseModel):
    """Result of a transaction status read or a polling run."""

    transaction_id: str
    status: TransactionStatus
    message: str
    attempts: int = 1
    timed_out: bool = False

    @property
    def is_terminal(self) -> bool:
        return not self.timed_out and self.status in TERMINAL_TRANSACTION_STATUSES
