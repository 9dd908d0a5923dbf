"""Server-side listing scrape through an Apify actor (url_only intake)."""

from typing import Optional
import httpx
from src.models.payloads import ScrapedListing
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

APIFY_RUN_SYNC_URL = "https://api.apify.com/v2/acts/{actor_id}/run-sync-get-dataset-items"
MAX_SCRAPED_IMAGES = 20


def map_apify_item(url: str, item: dict) -> ScrapedListing:
    """Map one Zillow-actor dataset item onto the capture fields."""
    address = item.get("address") or {}
    if not isinstance(address, dict):
        address = {"streetAddress": str(address)}

    street = address.get("streetAddress")
    title = f"{street}, {address.get('city')}, {address.get('state')}" if street else None
    full_address = ", ".join(
        str(part) for part in (street, address.get("city"), address.get("state"), address.get("zipcode")) if part
    )

    photos = item.get("photos") or []
    image_urls = [photo.get("url") for photo in photos if isinstance(photo, dict) and photo.get("url")]

    return ScrapedListing(
        source_url=url,
        external_id=str(item["zpid"]) if item.get("zpid") else None,
        title=title,
        price=item.get("price") or None,
        address=full_address,
        beds=item.get("bedrooms") or None,
        baths=item.get("bathrooms") or None,
        sqft=item.get("livingArea") or None,
        year_built=item.get("yearBuilt") or None,
        property_type=item.get("homeType") or None,
        description=item.get("description") or None,
        image_urls=image_urls[:MAX_SCRAPED_IMAGES],
    )


class ApifyListingScraper:
    """Best-effort scraper: None when unconfigured, blocked, or empty."""

    def __init__(
        self,
        api_key: Optional[str],
        actor_id: str = "maxcopell~zillow-scraper",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.actor_id = actor_id
        self.timeout = timeout
        self.transport = transport

    @property
    def provider_name(self) -> str:
        return "apify" if self.api_key else "none"

    async def scrape(self, url: str) -> Optional[ScrapedListing]:
        if not self.api_key:
            logger.debug("Scrape skipped: no APIFY_API_KEY")
            return None

        try:
            with log_timing("listing_scrape", logger=logger, scrape_provider=self.provider_name):
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    response = await client.post(
                        APIFY_RUN_SYNC_URL.format(actor_id=self.actor_id),
                        params={"token": self.api_key, "timeout": 30},
                        json={"startUrls": [{"url": url}], "maxItems": 1},
                    )
                    if response.status_code >= 400:
                        logger.warning("Scrape rejected", status_code=response.status_code)
                        return None
                    items = response.json()
        except Exception as e:
            logger.warning("Scrape failed", error=str(e))
            return None

        if not isinstance(items, list) or not items:
            logger.info("Scrape returned no items")
            return None

        try:
            listing = map_apify_item(url, items[0])
        except Exception as e:
            logger.warning("Scrape item could not be mapped", error=str(e))
            return None

        logger.info(
            "Scrape completed",
            has_address=listing.has_address,
            image_count=len(listing.image_urls)
        )
        return listing
