from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr


def _validate_password_length(value: str) -> str:
    # bcrypt only looks at the first 72 bytes.
    if len(value.encode("utf-8")) > 72:
        raise ValueError("Password too long (max 72 bytes)")
    return value


Password = Annotated[str, AfterValidator(_validate_password_length)]


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: Password


class RefreshRequest(BaseModel):
    refresh_token: str


class Message(BaseModel):
    message: str
