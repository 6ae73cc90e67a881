"""SQLAlchemy 2.0 ORM model for champion masteries."""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime as SQLDateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from summoner_sync.core.models import Base


class ChampionMasteryORM(Base):
    """A summoner's standing on one champion.

    Only the top masteries of each summoner are kept; the whole set is
    replaced on every refresh. Aggregated match statistics are attached to
    instances as a transient ``statistics`` attribute when serving reads.
    """

    __tablename__ = "champion_masteries"
    __table_args__ = (
        UniqueConstraint(
            "summoner_id", "champion_id", name="uq_champion_masteries_summoner_champion"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    summoner_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("summoners.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Summoner this mastery belongs to",
    )

    champion_id: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Numeric champion id"
    )

    champion_points: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, comment="Total mastery points"
    )

    champion_points_until_next_level: Mapped[Optional[int]] = mapped_column(
        BigInteger, nullable=True
    )

    champion_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Transient, set by the statistics aggregator on reads
    statistics = None

    def __repr__(self) -> str:
        return (
            f"<ChampionMastery(summoner_id='{self.summoner_id}', "
            f"champion_id={self.champion_id}, points={self.champion_points})>"
        )
