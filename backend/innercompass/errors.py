"""Exception types shared across InnerCompass services."""

from enum import Enum


class InnerCompassError(Exception):
    """Base class for all application errors."""


class AuthErrorReason(str, Enum):
    """Why an identity operation failed."""

    DUPLICATE_EMAIL = "duplicate_email"
    WEAK_PASSWORD = "weak_password"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHENTICATED = "unauthenticated"
    NETWORK = "network"


# User-facing messages, surfaced verbatim by the API
AUTH_ERROR_MESSAGES: dict[AuthErrorReason, str] = {
    AuthErrorReason.DUPLICATE_EMAIL: "该邮箱已被注册",
    AuthErrorReason.WEAK_PASSWORD: "密码强度不足，至少需要 6 位",
    AuthErrorReason.INVALID_CREDENTIALS: "邮箱或密码错误",
    AuthErrorReason.UNAUTHENTICATED: "请先登录",
    AuthErrorReason.NETWORK: "网络异常，请稍后再试",
}


class AuthError(InnerCompassError):
    """Registration, login or token validation failed."""

    def __init__(self, reason: AuthErrorReason, message: str | None = None) -> None:
        self.reason = reason
        self.message = message or AUTH_ERROR_MESSAGES[reason]
        super().__init__(self.message)


class StoreError(InnerCompassError):
    """Reading from or writing to the document store failed."""


class NotFoundError(StoreError):
    """The requested user record does not exist."""


class ServiceError(InnerCompassError):
    """The language-model service timed out, errored or returned nothing."""


class InvalidTransitionError(InnerCompassError):
    """A conversation operation was attempted from the wrong state."""

    def __init__(self, operation: str, state: str) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while conversation is {state}")


class InputRejectedError(InnerCompassError):
    """User input failed validation (for example, it is too long)."""


class CatalogError(InnerCompassError):
    """The content catalog is inconsistent or a lookup missed."""
