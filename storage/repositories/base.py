"""
Base Repository Class.

============================================================
PURPOSE
============================================================
Provides common functionality for the SQL repositories:
- Session handling
- Error wrapping (every SQLAlchemyError becomes
  StoreUnavailableError)
- Logging setup

============================================================
USAGE
============================================================
class MyRepository(BaseRepository[MyModel]):
    def __init__(self, session: Session):
        super().__init__(session, MyModel, "MyRepository")

============================================================
"""

import logging
from abc import ABC
from typing import Any, Generic, List, NoReturn, Optional, Type, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import StoreUnavailableError
from storage.models.base import Base


T = TypeVar("T", bound=Base)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base class for all repositories.

    Session is injected; the repository never commits. The
    caller's transaction scope owns commit and rollback.
    """

    def __init__(
        self,
        session: Session,
        model_class: Type[T],
        repository_name: str,
    ) -> None:
        self._session = session
        self._model_class = model_class
        self._repository_name = repository_name
        self._logger = logging.getLogger(f"repository.{repository_name}")

    # =========================================================
    # PROTECTED HELPER METHODS
    # =========================================================

    def _handle_db_error(
        self,
        error: Exception,
        operation: str,
        context: Optional[dict] = None,
    ) -> NoReturn:
        """
        Wrap a database error in StoreUnavailableError.

        Raises:
            StoreUnavailableError: Always
        """
        context = context or {}
        self._logger.error(
            f"Database error in {operation}: {error}",
            extra={"context": context},
            exc_info=True,
        )

        kind = "connection" if isinstance(error, OperationalError) else "query"
        raise StoreUnavailableError(
            f"{self._repository_name} {kind} error during {operation}: {error}",
            store=self._repository_name,
            operation=operation,
            context=dict(context),
            cause=error,
        ) from error

    def _add(self, entity: T) -> T:
        try:
            self._session.add(entity)
            self._session.flush()
            self._logger.debug(f"Added entity: {entity}")
            return entity
        except SQLAlchemyError as e:
            self._handle_db_error(e, "add", {"entity": str(entity)})

    def _get(self, key: Any) -> Optional[T]:
        try:
            return self._session.get(self._model_class, key)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "get", {"key": str(key)})

    def _execute_query(self, stmt: Any) -> List[T]:
        try:
            result = self._session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self._handle_db_error(e, "query")

    def _execute(self, stmt: Any, operation: str) -> int:
        """Execute a DML statement and return the affected row count."""
        try:
            result = self._session.execute(stmt)
            return result.rowcount or 0
        except SQLAlchemyError as e:
            self._handle_db_error(e, operation)
