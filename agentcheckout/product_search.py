"""Product search - thin adapter over the third-party Amazon search API."""

import logging
from typing import List, Dict, Any

from pydantic import ValidationError

from agentcheckout.http_client import HTTPClient
from agentcheckout.models.product import Product

logger = logging.getLogger("agentcheckout.search")

SEARCH_ENDPOINT = "/api/v1/search"
UNIT_PRICE_KEYS = ("ounce", "lb", "gram")


def is_purchasable(listing: Dict[str, Any]) -> bool:
    """False for fresh-grocery listings and listings priced per unit of weight."""
    if listing.get("is_amazon_fresh") is True:
        return False
    if listing.get("is_whole_foods_market") is True:
        return False
    price_per = listing.get("price_per")
    if isinstance(price_per, dict) and any(price_per.get(key) for key in UNIT_PRICE_KEYS):
        return False
    return True


class ProductSearch:
    """Searches Amazon listings through the search API.

    Attributes:
        http_client (HTTPClient): Bearer-authenticated client for the search API
    """

    def __init__(self, http_client: HTTPClient):
        self.http_client = http_client

    def search(self, query: str, filter_listings: bool = True) -> List[Product]:
        """Search for ``query`` and return the listings as Products.

        Args:
            query: Free-text query
            filter_listings: Drop fresh-grocery and unit-priced listings

        Raises:
            RemoteCallError: If the search API call fails
        """
        data = self.http_client.get(SEARCH_ENDPOINT, params={
            "engine": "amazon_search",
            "q": query,
            "amazon_domain": "amazon.com",
            "page": "1",
        })
        listings = data.get("organic_results") if isinstance(data, dict) else None
        if not isinstance(listings, list):
            return []

        products = []
        for listing in listings:
            if not isinstance(listing, dict):
                continue
            if filter_listings and not is_purchasable(listing):
                continue
            try:
                products.append(Product.from_listing(listing))
            except ValidationError:
                logger.info("Skipping malformed listing %s", listing.get("asin"))
        logger.info("Search %r returned %d of %d listings", query, len(products), len(listings))
        return products
