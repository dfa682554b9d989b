"""Error Hierarchy: typed, categorized exceptions for all custody failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are terminal for the call; infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CustodyError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    deployment_id: str | None = None
    operation: str | None = None
    caller: str | None = None


class CustodyError(Exception):
    """Base exception for all custody errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "deployment_id": self.context.deployment_id,
                    "operation": self.context.operation,
                    "caller": self.context.caller,
                },
            }
        }


# ─── Authorization Errors ───────────────────────────────────────

class NotAdminError(CustodyError):
    """Caller is not the deployment admin."""
    def __init__(self, caller: str, context: ErrorContext | None = None):
        super().__init__(
            "Only the admin may perform this operation",
            "NOT_ADMIN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )
        self.caller = caller


class NotWhitelistedError(CustodyError):
    """Address is not on the whitelist."""
    def __init__(self, address: str, context: ErrorContext | None = None):
        super().__init__(
            f"Address {address} is not whitelisted",
            "NOT_WHITELISTED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )
        self.address = address


# ─── Domain Errors ──────────────────────────────────────────────

class AlreadyWhitelistedError(CustodyError):
    """Address is already on the whitelist."""
    def __init__(self, address: str, context: ErrorContext | None = None):
        super().__init__(
            f"Address {address} is already whitelisted",
            "ALREADY_WHITELISTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.address = address


class InsufficientFundsError(CustodyError):
    """Account balance cannot cover the requested amount."""
    def __init__(
        self, account: str, requested: int, available: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Insufficient funds in {account}: requested {requested}, available {available}",
            "INSUFFICIENT_FUNDS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.account = account
        self.requested = requested
        self.available = available


class BalanceOverflowError(CustodyError):
    """Crediting an account would exceed the largest representable balance."""
    def __init__(
        self, account: str, amount: int, balance: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Crediting {amount} to {account} would overflow its balance of {balance}",
            "BALANCE_OVERFLOW", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.account = account
        self.amount = amount
        self.balance = balance


class InvalidAmountError(CustodyError):
    """Amount is negative or not an integer."""
    def __init__(self, amount: object, context: ErrorContext | None = None):
        super().__init__(
            f"Amount must be a non-negative integer, got {amount!r}",
            "INVALID_AMOUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.amount = amount


class InvalidAddressError(CustodyError):
    """Address is not a 0x-prefixed hex string of at most 64 digits."""
    def __init__(self, raw: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid account address: {raw!r}",
            "INVALID_ADDRESS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.raw = raw


class NotInitializedError(CustodyError):
    """No deployment exists at the configured address."""
    def __init__(self, deployment_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Custody deployment {deployment_id} is not initialized",
            "NOT_INITIALIZED", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.deployment_id = deployment_id


class AlreadyInitializedError(CustodyError):
    """Bootstrap attempted on an existing deployment."""
    def __init__(self, deployment_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Custody deployment {deployment_id} is already initialized",
            "ALREADY_INITIALIZED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.deployment_id = deployment_id


class FaucetDisabledError(CustodyError):
    """Ledger faucet requested while disabled in settings."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Ledger faucet is disabled",
            "FAUCET_DISABLED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CustodyError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
