from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from adapters import ConfigurationError, InvalidRequestError
from gateway.normalizer import QueryValidationError
from gateway.registry import NoActiveConnectionError

LOG = logging.getLogger(__name__)

CLIENT_ERRORS = (NoActiveConnectionError, QueryValidationError, ConfigurationError, InvalidRequestError)


class ApiError(Exception):
    def __init__(self, status_code: int, error: str, details: Optional[str] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


def to_api_error(exc: Exception, message: str, context: str = "") -> ApiError:
    """Map a failure raised below the route boundary to an HTTP error.

    Caller faults become 400; everything else, including driver errors,
    becomes 500.
    """
    where = f" ({context})" if context else ""
    if isinstance(exc, NoActiveConnectionError):
        LOG.warning("%s%s: %s", message, where, exc)
        return ApiError(400, str(exc), str(exc))
    if isinstance(exc, CLIENT_ERRORS):
        LOG.warning("%s%s: %s", message, where, exc)
        return ApiError(400, message, str(exc))
    LOG.error("%s%s: %s", message, where, exc, exc_info=exc)
    return ApiError(500, message, str(exc))
