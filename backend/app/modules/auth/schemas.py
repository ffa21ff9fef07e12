from pydantic import EmailStr, Field

from app.core.schemas import CamelModel
from app.modules.research.enums import UserRole


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    email: str
    role: UserRole


class MeResponse(CamelModel):
    """Текущий пользователь (GET /me)."""
    id: str
    email: str
    name: str | None = None
    role: UserRole
