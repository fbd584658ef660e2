import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class WeaponCategory(str, enum.Enum):
    assault = "assault"
    sniper = "sniper"
    lmg = "lmg"
    smg = "smg"
    shotgun = "shotgun"
    marksman = "marksman"


WEAPON_CATEGORY_LABELS: dict[WeaponCategory, str] = {
    WeaponCategory.assault: "Assault",
    WeaponCategory.sniper: "Sniper",
    WeaponCategory.lmg: "LMG",
    WeaponCategory.smg: "SMG",
    WeaponCategory.shotgun: "Shotgun",
    WeaponCategory.marksman: "Marksman",
}


class WeaponModel(Base):
    __tablename__ = "models"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    type: Mapped[WeaponCategory] = mapped_column(
        Enum(WeaponCategory, validate_strings=True), nullable=False
    )
