from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Loadout(Base):
    __tablename__ = "loadouts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    # Denormalized copy taken at creation time
    username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[int] = mapped_column(ForeignKey("models.id"), nullable=False)

    muzzle: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    barrel: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    optic: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    stock: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    grip: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    magazine: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    underbarrel: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    laser: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)
    perk: Mapped[int | None] = mapped_column(ForeignKey("attachments.id"), nullable=True)

    # Comma-joined tag list
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class LoadoutRating(Base):
    __tablename__ = "loadout_ratings"

    # Shares its id with the loadout it rates (1:1)
    id: Mapped[int] = mapped_column(ForeignKey("loadouts.id"), primary_key=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
