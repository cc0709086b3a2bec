"""Account Schemas: registration and login bodies.

Invariants:
    - Passwords accepted on input only, never present in a response model
    - Empty strings rejected (min_length=1) after whitespace stripping
    - A registered password fits bcrypt's 72-byte input once UTF-8 encoded
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

BCRYPT_MAX_BYTES = 72


class RegisterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    nombre: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password exceeds {BCRYPT_MAX_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=1, max_length=255)
    # Over-long passwords reach the service and fail as bad credentials
    password: str = Field(min_length=1, max_length=255)


class AccountPublic(BaseModel):
    """Account as returned by login."""
    id: int
    nombre: str
    email: str
    twofa_enabled: bool


class LoginResponse(BaseModel):
    message: str
    cliente: AccountPublic
