"""SQLAlchemy 2.0 ORM models for matches and per-summoner match participation.

Match rows are written once on first observation and never changed;
participation rows are immutable history as well.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime as SQLDateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from summoner_sync.core.models import Base


class MatchORM(Base):
    """Global match metadata, one row per upstream game id."""

    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="Upstream game id",
    )

    timestamp: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Game creation timestamp in milliseconds since epoch",
    )

    season: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    queue: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, comment="Queue id (e.g. 420=Ranked Solo)"
    )

    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Match(id={self.id}, queue={self.queue}, timestamp={self.timestamp})>"


class SummonerMatchORM(Base):
    """One summoner's performance in one match."""

    __tablename__ = "summoner_matches"
    __table_args__ = (
        UniqueConstraint("game_id", "summoner_id", name="uq_summoner_matches_game_summoner"),
        Index("idx_summoner_matches_summoner_created", "summoner_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    game_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("matches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    summoner_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("summoners.id", ondelete="CASCADE"),
        nullable=False,
    )

    champion_id: Mapped[int] = mapped_column(Integer, nullable=False)
    kills: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deaths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assists: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wards_placed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gold_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    win: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    role: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @property
    def kda(self) -> float:
        """(kills + assists) / deaths, with deaths floored at 1."""
        return (self.kills + self.assists) / max(self.deaths, 1)

    def __repr__(self) -> str:
        return (
            f"<SummonerMatch(game_id={self.game_id}, summoner_id='{self.summoner_id}', "
            f"champion_id={self.champion_id})>"
        )
