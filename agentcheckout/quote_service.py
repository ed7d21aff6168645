"""Quote Service - prices line items under a payment configuration."""

import logging
from typing import List, Dict

from agentcheckout.errors import RemoteCallError
from agentcheckout.http_client import HTTPClient
from agentcheckout.models.order import Quote
from agentcheckout.models.payment import PaymentConfig

logger = logging.getLogger("agentcheckout.quote")

ORDERS_ENDPOINT = "/api/2022-06-09/orders"


def line_items(product_locators: List[str]) -> List[Dict[str, str]]:
    return [{"productLocator": locator} for locator in product_locators]


class QuoteService:
    """Requests advisory price quotes from the order service.

    A quote is only a pre-check: the total that is actually charged comes
    from the order submission response and may differ.
    """

    def __init__(self, http_client: HTTPClient):
        self.http_client = http_client

    def quote(self, product_locators: List[str], config: PaymentConfig, payer_address: str) -> Quote:
        """Quote ``product_locators`` paid with ``config`` by ``payer_address``.

        Raises:
            RemoteCallError: If the call fails or the response carries no total
        """
        request = {
            "lineItems": line_items(product_locators),
            "payment": config.to_payment_payload(payer_address),
        }
        logger.info("Quote request for %s (%s)", product_locators, config.label)

        response = self.http_client.post(ORDERS_ENDPOINT, data=request)
        quote = Quote.from_response(response)
        if quote is None:
            raise RemoteCallError("Quote response did not include a total amount", body=response)

        logger.info("Quote: %s %s", quote.total_amount, quote.currency)
        return quote
