"""
Errors raised by the data-access layer.

Routers never see raw SQLAlchemy exceptions from the analytics engine; they
get one of the types below, which the application maps to a 5xx response.
"""

from typing import Optional, Dict, Any

from sqlalchemy.exc import SQLAlchemyError, OperationalError, InterfaceError, DBAPIError


class StoreError(Exception):
    """Base exception for persistence failures"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class StoreUnavailable(StoreError):
    """Raised when the database cannot be reached"""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Store unavailable during '{operation}': {reason}",
            "STORE_UNAVAILABLE",
            {"operation": operation}
        )


class QueryFailed(StoreError):
    """Raised when a query reaches the database but fails"""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Query '{operation}' failed: {reason}",
            "QUERY_FAILED",
            {"operation": operation}
        )


def translate_store_error(operation: str, exc: SQLAlchemyError) -> StoreError:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return StoreUnavailable(operation, str(exc))
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreUnavailable(operation, str(exc))
    return QueryFailed(operation, str(exc))
