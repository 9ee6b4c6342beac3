"""
ads/models.py -- Domain dataclass for a classified listing.

Pure data container. Every field but the owner is optional and free-form;
the listing layer applies no content or length rules.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Ad:
    """A user-submitted listing.

    user_id always comes from the verified session token, never from the
    request body. id and created_at are assigned by the store on insert.
    """

    user_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None  # exact-match key for the city filter
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601 UTC, set by store on insert
