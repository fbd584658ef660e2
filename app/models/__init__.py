from app.models.base import Base  # noqa: F401
from app.models.attachment import Attachment  # noqa: F401
from app.models.attachment_type import AttachmentSlot, AttachmentType  # noqa: F401
from app.models.loadout import Loadout, LoadoutRating  # noqa: F401
from app.models.profile import Profile  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.weapon_model import WeaponCategory, WeaponModel  # noqa: F401
