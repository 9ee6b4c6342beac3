"""
ads/store.py -- SQLAlchemy-backed persistence for listings.

Uses SQLAlchemy Core (not ORM) so the Ad dataclass in ads/models.py remains
the authoritative domain representation.

Pattern: Repository + Data Mapper. AdStore is the repository; _row_to_ad is
the mapper. Services never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = AdStore("sqlite:///classifieds.db")
    ad_id = store.create_ad(Ad(user_id=1, title="Bike", location="Austin"))
    store.list_ads(location="Austin")   # newest first
    store.list_by_owner(1)              # insertion order
    store.close()
"""

from typing import Optional

from sqlalchemy import Column, Index, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from ads.models import Ad
from core.db import make_engine, now_iso

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_ads = Table(
    "ads",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text),
    Column("description", Text),
    Column("location", Text),
    Column("user_id", Integer, nullable=False),  # users.id; no FK, users live in auth's store
    Column("created_at", String(32), nullable=False),
    Index("ix_ads_location", "location"),
    Index("ix_ads_user_id", "user_id"),
)


class AdStore:
    """Repository for Ad entities."""

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    def create_ad(self, ad: Ad) -> int:
        """Insert a listing and return its id. created_at is stamped here."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _ads.insert().values(
                    title=ad.title,
                    description=ad.description,
                    location=ad.location,
                    user_id=ad.user_id,
                    created_at=now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_ad(self, ad_id: int) -> Optional[Ad]:
        with self.engine.connect() as conn:
            row = conn.execute(_ads.select().where(_ads.c.id == ad_id)).fetchone()
        return _row_to_ad(row) if row is not None else None

    def list_ads(self, location: Optional[str] = None) -> list[Ad]:
        """Return listings newest first, optionally limited to one exact location.

        id breaks ties between listings stamped in the same microsecond, so the
        order is total.
        """
        query = _ads.select()
        if location is not None:
            query = query.where(_ads.c.location == location)
        query = query.order_by(_ads.c.created_at.desc(), _ads.c.id.desc())
        with self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_ad(r) for r in rows]

    def list_by_owner(self, user_id: int) -> list[Ad]:
        """Return every listing owned by user_id in storage order."""
        with self.engine.connect() as conn:
            rows = conn.execute(_ads.select().where(_ads.c.user_id == user_id).order_by(_ads.c.id)).fetchall()
        return [_row_to_ad(r) for r in rows]

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_ad(row) -> Ad:
    return Ad(
        id=row.id,
        title=row.title,
        description=row.description,
        location=row.location,
        user_id=row.user_id,
        created_at=row.created_at,
    )
