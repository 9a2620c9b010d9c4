from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password_length(v: str) -> str:
    if len(v.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValueError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes')
    return v


class RegisterRequest(BaseModel):
    username: str
    email: EmailStr
    password: str
    phone: str
    full_name: str = Field(alias="fullName")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('username', 'phone', 'full_name')
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('All fields are required')
        return v.strip()

    @field_validator('email', mode='before')
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('All fields are required')
        return _check_password_length(v)


class LoginRequest(BaseModel):
    # Username or email
    username: str
    password: str

    @field_validator('username', 'password')
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Username and password are required')
        return v

    @field_validator('password')
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password_length(v)


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = Field(default=None, serialization_alias="fullName")
    phone: Optional[str] = None
    balance: float = 0.0

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class LoginResponse(BaseModel):
    session_token: str = Field(serialization_alias="sessionToken")
    user: UserOut
