"""SQLAlchemy 2.0 ORM model for summoners (Rich Domain Model pattern).

Combines the persisted identity fields with the staleness rules that decide
whether a cached row can be served without contacting upstream.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import (
    BigInteger,
    DateTime as SQLDateTime,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from summoner_sync.core.models import Base
from summoner_sync.features.masteries.orm_models import ChampionMasteryORM
from summoner_sync.features.matches.orm_models import SummonerMatchORM


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps read from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SummonerORM(Base):
    """Summoner identity record.

    Rows are either fully-profiled summoners (looked up by name and
    refreshed from upstream) or stubs discovered as co-players in a match,
    which carry identity fields only and no level or revision date.
    """

    __tablename__ = "summoners"

    # ========================================================================
    # DATABASE FIELDS
    # ========================================================================

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Encrypted summoner id from Riot API",
    )

    account_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="Encrypted account id, used for match list lookups",
    )

    name: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, index=True, comment="Display name as returned upstream"
    )

    summoner_level: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, index=True
    )

    profile_icon_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    revision_date: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        nullable=True,
        comment="Upstream profile revision, milliseconds since epoch",
    )

    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
        comment="When this row was last refreshed locally",
    )

    # ========================================================================
    # RELATIONSHIPS
    # ========================================================================

    masteries: Mapped[List[ChampionMasteryORM]] = relationship(
        ChampionMasteryORM,
        order_by=ChampionMasteryORM.champion_points.desc(),
        cascade="all, delete-orphan",
        lazy="raise",
    )

    match_participations: Mapped[List[SummonerMatchORM]] = relationship(
        SummonerMatchORM,
        order_by=SummonerMatchORM.created_at.desc(),
        cascade="all, delete-orphan",
        lazy="raise",
    )

    # ========================================================================
    # DOMAIN LOGIC
    # ========================================================================

    def is_stale(self, now: datetime, window: timedelta) -> bool:
        """Whether this cached row must be re-fetched from upstream.

        Rows without a revision date (stubs) are always stale, otherwise the
        row is stale once it is older than ``window``.
        """
        if not self.revision_date:
            return True
        return as_utc(now) - as_utc(self.updated_at) > window

    def has_newer_revision(self, revision_date: Optional[int]) -> bool:
        """Whether upstream ``revision_date`` is later than our last refresh."""
        if revision_date is None:
            return False
        refreshed_ms = int(as_utc(self.updated_at).timestamp() * 1000)
        return revision_date > refreshed_ms

    def __repr__(self) -> str:
        return f"<Summoner(id='{self.id}', name='{self.name}', level={self.summoner_level})>"
