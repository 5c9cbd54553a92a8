from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base for every error this package raises on purpose. `kind` tags the variant."""

    kind = "unknown"

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationError(DomainError):
    kind = "validation"


class NotFoundError(DomainError):
    kind = "not_found"


class DatabaseError(DomainError):
    kind = "database"


class AuthError(DomainError):
    """Credentials rejected by an external collaborator (mail provider, store)."""

    kind = "auth"

    def __init__(self, message: str, *, status: Optional[int] = None, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, cause=cause)
        self.status = status


class DeliveryError(DomainError):
    kind = "delivery"

    def __init__(self, message: str, *, status: Optional[int] = None, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, cause=cause)
        self.status = status


class UnknownError(DomainError):
    kind = "unknown"


# --- boundary conversions ---


def database_error(exc: BaseException) -> DatabaseError:
    return DatabaseError(f"database operation failed: {exc}", cause=exc)


def delivery_error(status: int, body: str) -> DomainError:
    """Map a non-2xx mail provider response to a tagged error."""
    body = (body or "").strip()
    if len(body) > 500:
        body = body[:500] + "..."
    if status in (401, 403):
        return AuthError(f"mail provider rejected credentials (HTTP {status}): {body}", status=status)
    return DeliveryError(f"mail provider returned HTTP {status}: {body}", status=status)


def to_domain_error(exc: BaseException) -> DomainError:
    if isinstance(exc, DomainError):
        return exc
    return UnknownError(f"{type(exc).__name__}: {exc}", cause=exc)
