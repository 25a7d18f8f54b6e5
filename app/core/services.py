"""
Service layer primitives.

- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with logging and transaction helpers

Services hold the business rules. Views deal with HTTP, consumers with the
WebSocket, models with storage; all of them call into services.

Pattern:
    - Expected failures (bad input, missing records, conflicts) come back as
      ``ServiceResult.failure(...)`` with an error code from core.exceptions.
    - Guards deep inside a service may raise a ``BaseApplicationError``; the
      public service method catches it and returns ``ServiceResult.from_exception``.
    - Anything else is a bug and propagates.

Usage:
    from core.services import BaseService, ServiceResult

    class BookingService(BaseService):
        @classmethod
        def cancel(cls, booking_id, actor) -> ServiceResult[Booking]:
            with cls.atomic():
                ...
            cls.get_logger().info(f"Booking {booking_id} cancelled by {actor.id}")
            return ServiceResult.success(booking)

    # In a view
    result = BookingService.cancel(pk, request.user)
    if not result.success:
        return error_response(result)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

    from core.exceptions import BaseApplicationError

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures
        status_code: HTTP status suggested by the originating exception

    Usage:
        result = BookingService.create(...)
        if result.success:
            booking = result.data
        else:
            logger.info(f"Rejected: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)
    status_code: int | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Example:
            return ServiceResult.failure(
                "Rating must be between 1 and 5",
                error_code="VALIDATION_ERROR",
                errors={"rating": ["Must be between 1 and 5."]},
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @classmethod
    def from_exception(cls, exc: BaseApplicationError) -> ServiceResult[T]:
        """
        Create a failed result from an application error.

        Field errors in ``exc.details`` are carried over when they look like
        ``{"field": ["message", ...]}``.
        """
        errors = {
            key: value
            for key, value in exc.details.items()
            if isinstance(value, list)
        } or None
        return cls(
            success=False,
            error=exc.message,
            error_code=exc.error_code,
            errors=errors,
            status_code=exc.status_code,
        )

    def to_response(self) -> dict[str, Any]:
        """Convert to the API error/success body."""
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Services are stateless: expose ``@classmethod`` operations, keep no
    instance state, and receive collaborators (such as a realtime channel)
    as arguments.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named after the concrete service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Run the enclosed block in a database transaction.

        Thin wrapper around ``transaction.atomic()`` that makes transaction
        boundaries explicit in service code.
        """
        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: BaseApplicationError,
        context: str = "",
        log_level: int = logging.WARNING,
    ) -> ServiceResult:
        """
        Log an application error and convert it to a failed result.

        Example:
            except BaseApplicationError as exc:
                return cls.handle_exception(exc, "booking creation")
        """
        message = f"{context}: {exc}" if context else str(exc)
        cls.get_logger().log(log_level, message)
        return ServiceResult.from_exception(exc)

    @classmethod
    def on_commit(cls, func) -> None:
        """
        Defer a side effect until the current transaction commits.

        Side effects (notifications, broadcasts, e-mails) must never see rows
        that end up rolled back, and must never roll the caller back.
        Outside a transaction the callback runs immediately.
        """
        transaction.on_commit(func)
