"""Error Hierarchy: every failure the API reports, with its status and storefront message.

Invariants:
    - Each error class fixes its code, category, severity and HTTP status as
      class attributes; instances only add a message and context
    - 4xx errors are raised before any write; 5xx errors may follow a write
    - to_response() puts the human message at the top level, where the
      storefront reads it
    - Messages are the storefront's Spanish strings and never carry driver detail
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from runx.core.domain_types import OrderStage


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Who and where: surfaced in logs and in the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    account_id: int | None = None
    order_id: int | None = None
    stage: str | None = None
    debug_info: dict[str, Any] | None = None


class RunXError(Exception):
    code: str = "INTERNAL_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    http_status: int = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        ctx = self.context
        return {
            "message": self.message,
            "error": {
                "code": self.code,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {
                    "account_id": ctx.account_id,
                    "order_id": ctx.order_id,
                    "stage": ctx.stage,
                },
            },
        }


# --- Request Errors (400-level) -------------------------------------

class RequestError(RunXError):
    severity = ErrorSeverity.WARNING
    http_status = 400


class ValidationError(RequestError):
    """Missing or malformed request fields."""
    code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION


class ConflictError(RequestError):
    """Duplicate unique key, e.g. an email registered twice."""
    code = "CONFLICT"
    category = ErrorCategory.CONFLICT


class ResourceNotFoundError(RequestError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404


class InvalidCredentialsError(RequestError):
    """Unknown email or wrong password; the two are indistinguishable."""
    code = "INVALID_CREDENTIALS"
    category = ErrorCategory.AUTHENTICATION
    http_status = 401

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Credenciales inválidas", context)


class NotEnrolledError(RequestError):
    code = "TWOFA_NOT_ENROLLED"
    category = ErrorCategory.BUSINESS_RULE

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Cliente no tiene 2FA", context)


class VerificationFailedError(RequestError):
    """TOTP code outside the accepted step window."""
    code = "TWOFA_VERIFICATION_FAILED"
    category = ErrorCategory.BUSINESS_RULE

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Código inválido o expirado", context)


# --- Order Placement Stage Failures (500-level) ---------------------

class StageFailure(RunXError):
    """A named write stage of order placement did not complete."""
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL

    stage: OrderStage
    stage_message: str

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.code = f"ORDER_{cls.stage.name}_FAILED"

    def __init__(self, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.stage = self.stage.value
        super().__init__(self.stage_message, ctx)


class OrderHeaderError(StageFailure):
    stage = OrderStage.HEADER
    stage_message = "Error crear orden"


class OrderItemsError(StageFailure):
    stage = OrderStage.ITEMS
    stage_message = "Error guardar detalles orden"


class CartClearError(StageFailure):
    stage = OrderStage.CART_CLEAR
    stage_message = "Error limpiar carrito"


class OrderCommitError(StageFailure):
    stage = OrderStage.COMMIT
    stage_message = "Error confirmar orden"


STAGE_ERRORS: dict[OrderStage, type[StageFailure]] = {
    cls.stage: cls
    for cls in (OrderHeaderError, OrderItemsError, CartClearError, OrderCommitError)
}


# --- Upstream Errors (500-level) ------------------------------------

class UpstreamError(RunXError):
    severity = ErrorSeverity.CRITICAL


class DatabaseError(UpstreamError):
    """Store failure outside a named order stage."""
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE

    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(message, context)
        self.operation = operation


class PaymentGatewayError(UpstreamError):
    """Gateway call failed; message is the gateway's own."""
    code = "PAYMENT_GATEWAY_ERROR"
    category = ErrorCategory.EXTERNAL_API
