"""
Error handling utilities
"""

from pathlib import Path
from typing import Optional, Union
from todo_app.models.response import ErrorResponse
from todo_app.utils.logger import logger


class TodoAppError(Exception):
    """Base exception for todo app errors"""
    pass


class ValidationError(TodoAppError, ValueError):
    """Invalid argument: blank title, search term or category"""
    pass


class PersistenceError(TodoAppError):
    """Failure while saving or loading the task data file"""
    def __init__(
        self,
        message: str,
        path: Union[str, Path],
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.path = Path(path)
        self.cause = cause
        super().__init__(self.message)


def handle_error(error: Exception) -> ErrorResponse:
    """
    Handle error and return user-friendly message
    
    Args:
        error: Exception to handle
        
    Returns:
        ErrorResponse with user-friendly message
    """
    logger.error(f"Error occurred: {error}", exc_info=error)
    
    if isinstance(error, PersistenceError):
        details = {"path": str(error.path)}
        if error.cause is not None:
            details["cause"] = f"{type(error.cause).__name__}: {error.cause}"
        return ErrorResponse(
            message=f"Could not access the task file: {error.message}",
            error_code="persistence_failure",
            details=details,
        )
    
    if isinstance(error, ValidationError):
        return ErrorResponse(
            message=f"Invalid input: {str(error)}",
            error_code="invalid_argument",
        )
    
    # Generic error message
    return ErrorResponse(
        message="Something went wrong. Your changes are kept in memory.",
    )


def format_error_message(error: Exception) -> str:
    """
    Format error message for user
    
    Args:
        error: Exception to format
        
    Returns:
        User-friendly error message
    """
    error_response = handle_error(error)
    return error_response.message
