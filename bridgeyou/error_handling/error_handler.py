"""
Error handler mapping service failures to HTTP responses.

Logs each failure with its diagnostic context before converting it. No
retry is attempted: the client shows a retry affordance instead.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from .exceptions import BridgeYouError, DatabaseError, NotFoundError


logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "An error occurred, please retry."


class ErrorHandler:
    """
    Converts exceptions raised by services into HTTP exceptions.

    Not-found errors keep their message; every other failure is reported
    with a generic detail so internal messages never reach the client.
    """

    def to_http_exception(
        self,
        operation_name: str,
        error: Exception,
        context: Optional[Dict[str, Any]] = None
    ) -> HTTPException:
        """
        Log an error and build the matching HTTP exception.

        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            context: Extra diagnostic values (query parameters, ids)

        Returns:
            HTTPException ready to be raised by a route
        """
        if isinstance(error, HTTPException):
            return error

        if isinstance(error, NotFoundError):
            logger.info(f"{operation_name}: {error}")
            return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))

        self._log_error(operation_name, error, context or {})
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_ERROR_DETAIL
        )

    def _log_error(
        self,
        operation_name: str,
        error: Exception,
        context: Dict[str, Any]
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            context: Extra diagnostic values
        """
        details = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': {k: str(v) for k, v in context.items()},
        }

        if isinstance(error, DatabaseError):
            logger.error(f"Database failure in {operation_name}: {error}")
        elif isinstance(error, BridgeYouError):
            logger.error(f"Operation failed: {operation_name} | {type(error).__name__}: {error}")
        else:
            logger.exception(f"Unexpected error in {operation_name}: {error}")
        logger.debug(f"Full error context: {details}")


error_handler = ErrorHandler()
