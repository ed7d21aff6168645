"""Transaction Submitter - executes a prepared transaction through a wallet.

Submission is a two-step protocol against the wallet service:

1. Fetch the wallet and read the locator of its admin (delegated) signer.
   The signer is looked up on every call because it may rotate.
2. Post a single-call transaction batch that references that signer.

Nothing is retried.
"""

import logging
from typing import Optional

from agentcheckout.errors import SignerNotFound, SubmissionFailed
from agentcheckout.http_client import HTTPClient
from agentcheckout.models.payment import PaymentConfig
from agentcheckout.models.transaction import Transaction

logger = logging.getLogger("agentcheckout.transaction")

WALLET_ENDPOINT = "/api/2022-06-09/wallets/{wallet}"
TRANSACTIONS_ENDPOINT = "/api/2022-06-09/wallets/{wallet}/transactions"


class TransactionSubmitter:
    """Submits serialized transactions on behalf of a wallet.

    Usage Example:
        ```python
        submitter = TransactionSubmitter(http_client)
        config = resolve_payment_config("usdc", "base-sepolia")
        txn = submitter.submit("0xabc", order.serialized_transaction, config)
        print(txn.transaction_id, txn.raw_status)
        ```
    """

    def __init__(self, http_client: HTTPClient):
        self.http_client = http_client

    def get_admin_signer(self, wallet_address: str) -> str:
        """Locator of the wallet's admin signer.

        Raises:
            SignerNotFound: If the wallet config has no admin signer locator
            RemoteCallError: If the wallet lookup fails
        """
        wallet = self.http_client.get(WALLET_ENDPOINT.format(wallet=wallet_address))
        locator = _admin_signer_locator(wallet)
        if not locator:
            logger.error("No admin signer configured for wallet %s", wallet_address)
            raise SignerNotFound(wallet_address)
        return locator

    def submit(self, wallet_address: str, serialized_transaction: str, config: PaymentConfig) -> Transaction:
        """Submit ``serialized_transaction`` from ``wallet_address`` on ``config.chain``.

        Returns:
            Transaction: The created transaction with its initial status

        Raises:
            SignerNotFound: If the wallet has no admin signer
            SubmissionFailed: If the response carries no transaction ID
            RemoteCallError: If either call fails
        """
        signer = self.get_admin_signer(wallet_address)
        logger.info("Submitting transaction from %s on %s via %s", wallet_address, config.chain.value, signer)

        response = self.http_client.post(
            TRANSACTIONS_ENDPOINT.format(wallet=wallet_address),
            data={
                "params": {
                    "calls": [
                        {"transaction": serialized_transaction}
                    ],
                    "chain": config.chain.value,
                    "signer": signer,
                }
            }
        )

        transaction = Transaction.from_response(response)
        if transaction is None:
            raise SubmissionFailed("Failed to send transaction: No transaction ID returned", body=response)

        logger.info("Transaction %s submitted, status %s", transaction.transaction_id, transaction.raw_status)
        return transaction


def _admin_signer_locator(wallet) -> Optional[str]:
    if not isinstance(wallet, dict):
        return None
    wallet_config = wallet.get("config")
    if not isinstance(wallet_config, dict):
        return None
    signer = wallet_config.get("adminSigner")
    return signer.get("locator") if isinstance(signer, dict) else None
