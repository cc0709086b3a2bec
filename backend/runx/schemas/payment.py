"""Payment Schemas: PaymentIntent creation body and response."""

from pydantic import BaseModel, Field


class PaymentIntentCreate(BaseModel):
    monto: float = Field(gt=0)
    moneda: str = Field(min_length=3, max_length=3, pattern=r"^[A-Za-z]{3}$")
    clienteId: int | None = None


class PaymentIntentCreated(BaseModel):
    clientSecret: str
