"""
ads/service.py -- Listing operations.

ListingService is stateless: the AdStore it is constructed with is the sole
owner of persisted listings.
"""

import logging
from typing import Optional

from ads.models import Ad
from ads.store import AdStore

logger = logging.getLogger("classifieds.ads")


class ListingService:
    def __init__(self, ads: AdStore) -> None:
        self.ads = ads

    def create_listing(
        self,
        caller_user_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Ad:
        """Store a listing owned by the verified caller and return the stored record.

        Content is accepted verbatim -- empty strings and missing fields included.
        """
        ad_id = self.ads.create_ad(
            Ad(user_id=caller_user_id, title=title, description=description, location=location)
        )
        logger.info("Listing %d created by user %d", ad_id, caller_user_id)
        created = self.ads.get_ad(ad_id)
        if created is None:
            raise RuntimeError(f"Listing {ad_id} not found after write")
        return created

    def list_all(self, city: Optional[str] = None) -> list[Ad]:
        """Every listing, newest first. A non-empty city keeps exact location matches only."""
        return self.ads.list_ads(location=city or None)

    def list_mine(self, caller_user_id: int) -> list[Ad]:
        return self.ads.list_by_owner(caller_user_id)
