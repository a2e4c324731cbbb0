"""
Exception hierarchy for the data source, the Gemini backend and the database

Every error carries a short machine-readable code next to its message.
"""
from typing import Optional


class NewsDataSourceError(Exception):
    """Base error for anything that goes wrong while reading the news source."""

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


class DataSourceNotFoundError(NewsDataSourceError):
    def __init__(self, location: str):
        super().__init__(f"Data source not found: {location}", "DATA_SOURCE_NOT_FOUND")
        self.location = location


class InvalidDataFormatError(NewsDataSourceError):
    def __init__(self, details: str):
        super().__init__(f"Invalid data format: {details}", "INVALID_DATA_FORMAT")
        self.details = details


class DataSourceAccessError(NewsDataSourceError):
    def __init__(self, location: str, details: Optional[str] = None):
        message = f"Cannot access data source: {location}"
        if details:
            message += f" ({details})"
        super().__init__(message, "DATA_SOURCE_ACCESS_ERROR")
        self.location = location


class GenerationError(Exception):
    """Raised when the language model call fails or returns nothing usable."""

    code = "GENERATION_ERROR"


class DatabaseError(Exception):
    """Base error for database operations."""

    def __init__(self, message: str, code: str, operation: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.operation = operation


class DatabaseConnectionError(DatabaseError):
    def __init__(self, details: str):
        super().__init__(f"Database connection failed: {details}", "DATABASE_CONNECTION_ERROR", "connect")


class DatabaseTransactionError(DatabaseError):
    def __init__(self, operation: str, details: str):
        super().__init__(
            f"Transaction failed during {operation}: {details}",
            "DATABASE_TRANSACTION_ERROR",
            operation,
        )
