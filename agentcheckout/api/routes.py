"""HTTP routes exposing the checkout tools."""

from typing import List
from fastapi import APIRouter, Depends, Request

from agentcheckout.api.models import (
    ToolResponse,
    ToolInfo,
    SearchRequest,
    CreateOrderRequest,
    SendTransactionRequest,
    OrderStatusRequest,
    PollOrderStatusRequest,
    TokenBalanceRequest,
    TransactionStatusRequest,
)
from agentcheckout.sdk import CheckoutSDK


router = APIRouter()

TOOLS = [
    ToolInfo(name="search", description="Search for products on Amazon"),
    ToolInfo(name="create-order", description="Create an order for an Amazon product"),
    ToolInfo(name="send-transaction", description="Send a transaction to complete the order"),
    ToolInfo(name="check-order-status", description="Check the current status of an order"),
    ToolInfo(
        name="poll-order-status",
        description="Poll an order until it is completed, failed, or times out (max ~100 seconds). "
                    "Only use this during the purchase flow."
    ),
    ToolInfo(
        name="get-token-balance",
        description="Get the balance for a specific token (usdc, or credit) on all supported chains"
    ),
    ToolInfo(name="check-transaction-status", description="Check the current status of a wallet transaction"),
]


def get_sdk(req: Request) -> CheckoutSDK:
    sdk = getattr(req.app.state, "sdk", None)
    if sdk is None:
        raise RuntimeError("SDK not initialized")
    return sdk


@router.get("/tools", response_model=List[ToolInfo])
def list_tools() -> List[ToolInfo]:
    return TOOLS


@router.post("/tools/search", response_model=ToolResponse)
def search(payload: SearchRequest, sdk: CheckoutSDK = Depends(get_sdk)) -> ToolResponse:
    return ToolResponse.text(sdk.search(payload.query))


@router.post("/tools/create-order", response_model=ToolResponse)
def create_order(payload: CreateOrderRequest, sdk: CheckoutSDK = Depends(get_sdk)) -> ToolResponse:
    return ToolResponse.text(sdk.create_order(payload.asin, payload.token, payload.chain))


@router.post("/tools/send-transaction", response_model=ToolResponse)
def send_transaction(payload: SendTransactionRequest, sdk: CheckoutSDK = Depends(get_sdk)) -> ToolResponse:
    return ToolResponse.text(sdk.send_transaction(payload.serializedTransaction, payload.token, payload.chain))


@router.post("/tools/check-order-status", response_model=ToolResponse)
def check_order_status(payload: OrderStatusRequest, sdk: CheckoutSDK = Depends(get_sdk)) -> ToolResponse:
    return ToolResponse.text(sdk.check_order_status(payload.orderId, payload.chain))


@router.post("/tools/poll-order-status", response_model=ToolResponse)
def poll_order_status(payload: PollOrderStatusRequest, sdk: CheckoutSDK = Depends(get_sdk)) -> ToolResponse:
    return ToolResponse.text(sdk.poll_order_status(payload.orderId, payload.chain, purchase_flow=payload.purchaseFlow))


@router.post("/tools/get-token-balance", response_model=ToolResponse)
def get_token_balance(payload: TokenBalanceRequest, sdk: CheckoutSDK = Depends(get_sdk)) -> ToolResponse:
    return ToolResponse.text(sdk.get_token_balance(payload.token, wallet_address=payload.walletAddress))


@router.post("/tools/check-transaction-status", response_model=ToolResponse)
def check_transaction_status(payload: TransactionStatusRequest, sdk: CheckoutSDK = Depends(get_sdk)) -> ToolResponse:
    return ToolResponse.text(
        sdk.check_transaction_status(payload.transactionId, payload.chain, wallet_address=payload.walletAddress)
    )
