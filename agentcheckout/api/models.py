"""Pydantic models for the checkout HTTP API."""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field


# -------- Common --------

class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    content: List[TextContent]

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=[TextContent(text=text)])


class ToolInfo(BaseModel):
    name: str
    description: str


# -------- Tools --------

class SearchRequest(BaseModel):
    query: str = Field(description="Search query for Amazon products")


class CreateOrderRequest(BaseModel):
    asin: str = Field(description="Amazon ASIN of the product to order")
    token: Optional[str] = Field(default=None, description="Token to use for payment (usdc or credit)")
    chain: Optional[str] = Field(
        default=None,
        description="Chain to use for payment (ethereum-sepolia or base-sepolia)"
    )


class SendTransactionRequest(BaseModel):
    serializedTransaction: str = Field(description="Serialized transaction data from create-order")
    token: str = Field(description="Token to use for payment (usdc or credit)")
    chain: str = Field(description="Chain to use for payment (ethereum-sepolia or base-sepolia)")


class OrderStatusRequest(BaseModel):
    orderId: str = Field(description="Order ID to check status for")
    chain: Optional[str] = Field(default=None, description="Chain the order was created on")


class PollOrderStatusRequest(OrderStatusRequest):
    purchaseFlow: bool = Field(
        default=True,
        description="Use the purchase-flow attempt budget instead of the extended one"
    )


class TokenBalanceRequest(BaseModel):
    token: str = Field(description="Token to check balance for (must be one of: usdc, credit)")
    walletAddress: Optional[str] = Field(
        default=None,
        description="Wallet address to check balance for (defaults to agent wallet)"
    )


class TransactionStatusRequest(BaseModel):
    transactionId: str = Field(description="Transaction ID to check status for")
    chain: Optional[str] = Field(default=None, description="Chain the transaction was sent on")
    walletAddress: Optional[str] = Field(
        default=None,
        description="Wallet that sent the transaction (defaults to agent wallet)"
    )
