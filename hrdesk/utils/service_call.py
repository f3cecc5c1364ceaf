import logging
from typing import List, Optional

from fastapi import status

from config import settings
from hrdesk.utils.response import format_response

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base for domain errors a route turns into an error envelope."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors


def handle_service_call(fn):
    try:
        return fn()
    except ServiceError as exc:
        return format_response(
            success=False,
            msg=exc.message,
            statuscode=exc.status_code,
            errors=exc.errors,
        )
    except Exception as exc:
        logger.exception("Unhandled error in service call")
        extra = {} if settings.is_production else {"error": str(exc)}
        return format_response(
            success=False,
            msg="Internal server error",
            statuscode=status.HTTP_500_INTERNAL_SERVER_ERROR,
            **extra,
        )
