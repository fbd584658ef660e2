from datetime import datetime

from pydantic import BaseModel


class LoadoutCard(BaseModel):
    id: int
    name: str
    username: str | None
    model: int
    model_name: str | None = None
    attachments: dict[str, int]
    # Slot to attachment type name, for slots whose attachment still resolves
    attachment_names: dict[str, str] = {}
    tags: list[str]
    rating: int
    liked: bool
    created_at: datetime | None = None
