from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserRead(BaseModel):
    """Public view of an account; the password hash never leaves the service."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int = Field(alias="usuarioId")
    email: str


class AuthResponse(BaseModel):
    user: UserRead
    token: str
