"""HTTP middleware for request correlation and structured logging.

Bind a request ID and the request path to the logging context, so probe,
traffic and load log lines can be matched to the call that caused them.
"""

import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.apitester.core.logging_config import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Manage request correlation IDs for every inbound call.

    Reuse the ``X-Request-ID`` sent by an upstream proxy or ingress, or
    generate one, and echo it on the response.
    """

    async def dispatch(self, request: Request, call_next):
        """Process the request and manage correlation context lifecycle.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler in the chain.

        Returns:
            The HTTP response with the `X-Request-ID` header attached.
        """
        # Context may survive across tasks; start every request clean.
        clear_contextvars()

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        bind_contextvars(request_id=request_id, path=request.url.path)

        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug("Request handled", status_code=response.status_code)

        return response
