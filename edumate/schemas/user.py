from pydantic import BaseModel, ConfigDict
from edumate.models.user import UserRole


class AdminOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str | None = None
    role: UserRole
    is_active: bool
