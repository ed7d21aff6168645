"""Product model - a listing returned by the product search integration."""

from typing import Optional, Dict, Any
from pydantic import BaseModel


class Product(BaseModel):
    """One search listing, trimmed to the fields a purchasing agent needs."""
    title: Optional[str] = None
    price: Optional[str] = None
    asin: Optional[str] = None
    # passed through as the search API reports them
    rating: Any = None
    reviews: Any = None
    url: Optional[str] = None

    @classmethod
    def from_listing(cls, listing: Dict[str, Any]) -> "Product":
        return cls(
            title=listing.get("title"),
            price=None if listing.get("price") is None else str(listing.get("price")),
            asin=listing.get("asin"),
            rating=listing.get("rating"),
            reviews=listing.get("reviews"),
            url=listing.get("url") or listing.get("link"),
        )

    @property
    def locator(self) -> Optional[str]:
        """Product locator understood by the order service."""
        return f"amazon:{self.asin}" if self.asin else None
