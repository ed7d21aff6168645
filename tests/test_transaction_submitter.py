"""Tests for TransactionSubmitter."""

import pytest

from agentcheckout.errors import SignerNotFound, SubmissionFailed, RemoteCallError
from agentcheckout.models import TransactionStatus
from agentcheckout.payment_config import resolve_payment_config
from agentcheckout.transaction_submitter import TransactionSubmitter

WALLET = "0xagentwallet"
WALLET_URL = f"/api/2022-06-09/wallets/{WALLET}"
TRANSACTIONS_URL = f"/api/2022-06-09/wallets/{WALLET}/transactions"


@pytest.fixture
def submitter(fake_http):
    return TransactionSubmitter(fake_http)


@pytest.fixture
def base_usdc():
    return resolve_payment_config("usdc", "base-sepolia")


def wallet_with_signer(locator="evm-keypair:0xsigner"):
    return {"address": WALLET, "config": {"adminSigner": {"type": "evm-keypair", "locator": locator}}}


class TestSubmit:
    """Tests for the two-step submission protocol."""

    def test_submit_success(self, submitter, fake_http, base_usdc):
        fake_http.add("GET", WALLET_URL, wallet_with_signer())
        fake_http.add("POST", TRANSACTIONS_URL, {"id": "tx-1", "status": "pending"})

        txn = submitter.submit(WALLET, "0xserialized", base_usdc)

        assert txn.transaction_id == "tx-1"
        assert txn.raw_status == "pending"
        assert txn.status == TransactionStatus.OTHER
        body = fake_http.calls_to("POST", TRANSACTIONS_URL)[0]["data"]
        assert body == {
            "params": {
                "calls": [{"transaction": "0xserialized"}],
                "chain": "base-sepolia",
                "signer": "evm-keypair:0xsigner",
            }
        }

    def test_signer_fetched_every_time(self, submitter, fake_http, base_usdc):
        """Signers may rotate, so the wallet is read before every submission."""
        fake_http.add("GET", WALLET_URL, wallet_with_signer("signer-a"), wallet_with_signer("signer-b"))
        fake_http.add("POST", TRANSACTIONS_URL, {"id": "tx-1", "status": "in_progress"})

        submitter.submit(WALLET, "0x1", base_usdc)
        submitter.submit(WALLET, "0x2", base_usdc)

        signers = [c["data"]["params"]["signer"] for c in fake_http.calls_to("POST", TRANSACTIONS_URL)]
        assert signers == ["signer-a", "signer-b"]
        assert len(fake_http.calls_to("GET", WALLET_URL)) == 2

    @pytest.mark.parametrize("wallet", [
        {"address": WALLET},
        {"config": {}},
        {"config": {"adminSigner": {}}},
        {"config": "not-a-dict"},
    ])
    def test_missing_signer(self, submitter, fake_http, base_usdc, wallet):
        fake_http.add("GET", WALLET_URL, wallet)

        with pytest.raises(SignerNotFound, match="Admin signer not found"):
            submitter.submit(WALLET, "0xserialized", base_usdc)
        assert fake_http.calls_to("POST", TRANSACTIONS_URL) == []

    def test_missing_transaction_id(self, submitter, fake_http, base_usdc):
        fake_http.add("GET", WALLET_URL, wallet_with_signer())
        fake_http.add("POST", TRANSACTIONS_URL, {"status": "pending"})

        with pytest.raises(SubmissionFailed, match="No transaction ID returned"):
            submitter.submit(WALLET, "0xserialized", base_usdc)

    def test_remote_failure_not_retried(self, submitter, fake_http, base_usdc):
        fake_http.add("GET", WALLET_URL, wallet_with_signer())
        fake_http.add("POST", TRANSACTIONS_URL, RemoteCallError("HTTP error! status: 500, message: boom"))

        with pytest.raises(RemoteCallError):
            submitter.submit(WALLET, "0xserialized", base_usdc)
        assert len(fake_http.calls_to("POST", TRANSACTIONS_URL)) == 1
