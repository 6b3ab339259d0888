"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, translate storage failures into
application errors, and enforce business rules.

Usage:
    from todo_miniapp.services.base import BaseService

    class TaskService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = TaskRepository(session)
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from todo_miniapp.core.exceptions import DatabaseError, ValidationError
from todo_miniapp.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session access
    - Error wrapping for database operations
    - Common validation helpers
    - Logging with the service name attached
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a repository call, converting SQLAlchemy failures.

        Args:
            operation: Description of the operation for logging
            coro: Awaitable to execute

        Returns:
            Result of the awaitable

        Raises:
            DatabaseError: For any storage failure. The driver message is
                logged, never returned to the caller.
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _validate_required(self, value: str | None, field_name: str, message: str) -> str:
        """
        Trim ``value`` and reject it when nothing is left.

        Returns:
            The trimmed string

        Raises:
            ValidationError: If the value is missing or blank
        """
        trimmed = value.strip() if isinstance(value, str) else ""
        if not trimmed:
            raise ValidationError(message, details={"field": field_name})
        return trimmed

    def _validate_string_length(
        self,
        value: str,
        field_name: str,
        max_length: int,
    ) -> None:
        """
        Validate an upper bound on string length.

        Raises:
            ValidationError: If the string is too long
        """
        if len(value) > max_length:
            raise ValidationError(
                f"{field_name.capitalize()} is too long",
                details={field_name: f"Maximum length is {max_length}"},
            )

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
