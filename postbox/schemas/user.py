"""User schemas"""

from pydantic import BaseModel, Field, field_validator

# bcrypt only accepts secrets up to this many bytes
MAX_PASSWORD_BYTES = 72


class UserCredentials(BaseModel):
    """Email and password, used for sign-up, login and credential updates"""
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)

    @field_validator('password')
    @classmethod
    def check_password_size(cls, v):
        """Reject passwords bcrypt cannot hash"""
        if len(v.encode('utf-8')) > MAX_PASSWORD_BYTES:
            raise ValueError(f'Password exceeds {MAX_PASSWORD_BYTES} bytes')
        return v


class UserResponse(BaseModel):
    """User response schema"""
    id: int
    email: str
    is_upgraded: bool

    class Config:
        from_attributes = True


class LoginResponse(UserResponse):
    """User info plus access and refresh tokens"""
    token: str
    refresh_token: str


class AccessTokenResponse(BaseModel):
    """Fresh access token"""
    token: str
