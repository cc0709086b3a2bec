"""Two-Factor Schemas: status, setup and verification bodies."""

from pydantic import BaseModel, Field, field_validator


class TwoFactorAccount(BaseModel):
    clienteId: int


class TwoFactorVerify(BaseModel):
    clienteId: int
    code: str = Field(min_length=1, max_length=10)

    @field_validator("code", mode="before")
    @classmethod
    def coerce_numeric_code(cls, v):
        """Authenticator codes sent as JSON numbers lose leading zeros."""
        if isinstance(v, int) and not isinstance(v, bool):
            return f"{v:06d}"
        return v


class TwoFactorStatus(BaseModel):
    twofa_enabled: bool


class TwoFactorSetup(BaseModel):
    qr: str
    secret: str
