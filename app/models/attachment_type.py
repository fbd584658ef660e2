import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class AttachmentSlot(str, enum.Enum):
    muzzle = "muzzle"
    barrel = "barrel"
    optic = "optic"
    stock = "stock"
    grip = "grip"
    magazine = "magazine"
    underbarrel = "underbarrel"
    laser = "laser"
    perk = "perk"


ATTACHMENT_SLOT_LABELS: dict[AttachmentSlot, str] = {
    AttachmentSlot.muzzle: "Muzzle",
    AttachmentSlot.barrel: "Barrel",
    AttachmentSlot.optic: "Optic",
    AttachmentSlot.stock: "Stock",
    AttachmentSlot.grip: "Rear Grip",
    AttachmentSlot.magazine: "Magazine",
    AttachmentSlot.underbarrel: "Underbarrel",
    AttachmentSlot.laser: "Laser",
    AttachmentSlot.perk: "Perk",
}


class AttachmentType(Base):
    __tablename__ = "attachment_types"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    type: Mapped[AttachmentSlot] = mapped_column(
        Enum(AttachmentSlot, validate_strings=True), nullable=False
    )
