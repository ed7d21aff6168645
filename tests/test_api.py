"""API tests for the checkout tools FastAPI layer."""

import pytest
from fastapi.testclient import TestClient

from agentcheckout import CheckoutSDK
from agentcheckout.api import create_app

from conftest import FakeHTTPClient

WALLET = "0xagentwallet"
ORDERS = "/api/2022-06-09/orders"


@pytest.fixture
def search_http():
    return FakeHTTPClient()


@pytest.fixture
def client(config, fake_http, search_http):
    sdk = CheckoutSDK(config, http_client=fake_http, search_client=search_http)
    return TestClient(create_app(sdk))


def text_of(response):
    content = response.json()["content"]
    assert len(content) == 1
    assert content[0]["type"] == "text"
    return content[0]["text"]


class TestMeta:
    def test_health(self, client: TestClient):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_list_tools(self, client: TestClient):
        r = client.get("/v1/tools")
        assert r.status_code == 200
        names = [tool["name"] for tool in r.json()]
        assert names == [
            "search",
            "create-order",
            "send-transaction",
            "check-order-status",
            "poll-order-status",
            "get-token-balance",
            "check-transaction-status",
        ]


class TestOrderTools:
    def test_create_order(self, client: TestClient, fake_http):
        fake_http.add("POST", ORDERS, {"quote": {"totalPrice": {"amount": "10.00", "currency": "usdc"}}})
        fake_http.add("GET", f"/api/v1-alpha2/wallets/{WALLET}/balances",
                      [{"token": "usdc", "decimals": 6, "balances": {"base-sepolia": "1000000"}}])

        r = client.post("/v1/tools/create-order", json={"asin": "B00TEST123", "token": "usdc", "chain": "base-sepolia"})

        assert r.status_code == 200
        assert text_of(r).startswith("Insufficient balance:")

    def test_create_order_failure_is_still_200(self, client: TestClient):
        r = client.post("/v1/tools/create-order", json={"asin": "B00TEST123", "token": "doge", "chain": "base-sepolia"})
        assert r.status_code == 200
        assert text_of(r) == "Failed to create order: Invalid payment method: Unsupported payment method: doge"

    def test_missing_field_rejected(self, client: TestClient):
        r = client.post("/v1/tools/create-order", json={"token": "usdc"})
        assert r.status_code == 422

    def test_poll_order_status(self, client: TestClient, fake_http):
        fake_http.add("GET", f"{ORDERS}/order-123", {"orderId": "order-123", "phase": "failed"})

        r = client.post("/v1/tools/poll-order-status", json={"orderId": "order-123", "chain": "base-sepolia"})

        assert r.status_code == 200
        assert text_of(r) == (
            "Polling result for order order-123: "
            "Order failed. All items could not be delivered. Refunds are automatic."
        )
        assert fake_http.calls[0]["headers"] == {"X-Chain": "base-sepolia"}

    def test_check_order_status(self, client: TestClient, fake_http):
        fake_http.add("GET", f"{ORDERS}/order-123", {"orderId": "order-123", "phase": "completed"})
        r = client.post("/v1/tools/check-order-status", json={"orderId": "order-123"})
        assert text_of(r) == "Status for order order-123: Order completed! Your item(s) are on the way."


class TestWalletTools:
    def test_send_transaction(self, client: TestClient, fake_http):
        fake_http.add("GET", f"/api/2022-06-09/wallets/{WALLET}", {"config": {"adminSigner": {"locator": "signer-1"}}})
        fake_http.add("POST", f"/api/2022-06-09/wallets/{WALLET}/transactions", {"id": "tx-9", "status": "pending"})

        r = client.post("/v1/tools/send-transaction", json={
            "serializedTransaction": "0xserialized",
            "token": "usdc",
            "chain": "base-sepolia",
        })

        assert text_of(r) == "Transaction sent! Transaction ID: tx-9, Status: pending"

    def test_get_token_balance(self, client: TestClient, fake_http):
        fake_http.add("GET", f"/api/v1-alpha2/wallets/{WALLET}/balances",
                      [{"token": "credit", "balances": {"ethereum-sepolia": "1999"}}])

        r = client.post("/v1/tools/get-token-balance", json={"token": "credit"})

        assert text_of(r) == f"CREDIT balances for {WALLET}:\nCREDIT balance on ethereum-sepolia: 19.99"

    def test_check_transaction_status(self, client: TestClient, fake_http):
        fake_http.add("GET", f"/api/2022-06-09/wallets/{WALLET}/transactions/tx-9", {"id": "tx-9", "status": "completed"})
        r = client.post("/v1/tools/check-transaction-status", json={"transactionId": "tx-9"})
        assert text_of(r) == "Status for transaction tx-9: Transaction completed!"


class TestSearchTool:
    def test_search(self, client: TestClient, search_http):
        search_http.add("GET", "/api/v1/search", {"organic_results": []})
        r = client.post("/v1/tools/search", json={"query": "cable"})
        assert text_of(r) == "No results found."
