"""Balance Reader - fetches and normalizes wallet token balances.

The wallet service answers with an array of per-token records whose amounts
are raw integers in minor units. The reader picks the record for the
requested token and scales it to a Decimal amount. A payload it cannot use
is reported as "not found" (None), never as an exception; only transport
and HTTP failures propagate, as RemoteCallError.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from agentcheckout.http_client import HTTPClient
from agentcheckout.models.balance import BalanceRecord, TokenBalance
from agentcheckout.models.payment import SupportedToken

logger = logging.getLogger("agentcheckout.balance")

BALANCES_ENDPOINT = "/api/v1-alpha2/wallets/{wallet}/balances"


def matches_token(record_token: str, token: str) -> bool:
    """Decide whether a balance record belongs to ``token``.

    Credits are matched by keyword: the service may report them under a
    decorated symbol, so any record whose token mentions "credit" matches.
    Every other token needs a case-insensitive exact match.
    """
    requested = token.lower()
    if requested == SupportedToken.CREDIT.value:
        return SupportedToken.CREDIT.value in record_token.lower()
    return record_token.lower() == requested


class BalanceReader:
    """Reads a wallet's balance of one token on one chain.

    Usage Example:
        ```python
        reader = BalanceReader(http_client)
        balance = reader.get_balance("0xabc", "usdc", "base-sepolia")
        if balance is None:
            print("No balance found")
        else:
            print(f"Balance: {balance}")
        ```

    Attributes:
        http_client (HTTPClient): Client for the wallet service
    """

    def __init__(self, http_client: HTTPClient):
        self.http_client = http_client

    def fetch_records(
        self,
        wallet_address: str,
        token: str,
        chains: Optional[Sequence[str]] = None
    ) -> Optional[List[BalanceRecord]]:
        """Fetch raw balance records, or None if the payload is not a non-empty array."""
        params = {"tokens": token.lower()}
        if chains:
            params["chains"] = ",".join(chains)

        data = self.http_client.get(BALANCES_ENDPOINT.format(wallet=wallet_address), params=params)
        if not isinstance(data, list) or not data:
            logger.info("Balance payload for %s is not a non-empty array", wallet_address)
            return None

        return [record for record in (BalanceRecord.from_payload(item) for item in data) if record]

    def find_record(
        self,
        wallet_address: str,
        token: str,
        chains: Optional[Sequence[str]] = None
    ) -> Optional[BalanceRecord]:
        """The balance record for ``token``, or None if there is none."""
        records = self.fetch_records(wallet_address, token, chains)
        if not records:
            return None
        return next((record for record in records if matches_token(record.token, token)), None)

    def get_token_balance(self, wallet_address: str, token: str, chain: str) -> Optional[TokenBalance]:
        record = self.find_record(wallet_address, token)
        if record is None:
            logger.info("No %s balance record for %s", token, wallet_address)
            return None
        balance = record.token_balance(chain, token=token.lower())
        if balance is None:
            logger.info("No %s balance on %s for %s", token, chain, wallet_address)
        return balance

    def get_balance(self, wallet_address: str, token: str, chain: str) -> Optional[Decimal]:
        """Balance of ``token`` on ``chain`` in whole units, or None when not found.

        Returns:
            Optional[Decimal]: raw / 10^decimals (decimals defaults to 2)

        Raises:
            RemoteCallError: If the wallet service call itself fails
        """
        balance = self.get_token_balance(wallet_address, token, chain)
        return None if balance is None else balance.amount
