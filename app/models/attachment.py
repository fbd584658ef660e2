from typing import Any

from sqlalchemy import ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Attachment(Base):
    __tablename__ = "attachments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    model: Mapped[int] = mapped_column(ForeignKey("models.id"), nullable=False, index=True)
    type: Mapped[int] = mapped_column(ForeignKey("attachment_types.id"), nullable=False, index=True)
    # {"pros": [str, ...], "cons": [str, ...]}
    characteristics: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=lambda: {"pros": [], "cons": []}
    )
