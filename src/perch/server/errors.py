"""Final handler — answers requests the middleware chain left unanswered.

Runs after the stack when the response is still open: either an error
travelled past every error middleware, or every middleware passed the
request on. Errors map to their own ``status``/``status_code`` when
those hold a 4xx/5xx code, and to 500 otherwise.
"""

import logging
import traceback

from perch.errors import HTTPError, reason_phrase
from perch.http.request import Request
from perch.http.response import Response

logger = logging.getLogger("perch.server")


def error_status(error: object) -> int:
    """Pick the response status for a forwarded error."""
    for attr in ("status", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and 400 <= value < 600:
            return value
    return 500


def _error_body(error: object, status: int, debug: bool) -> str:
    if not debug:
        return reason_phrase(status)
    if status >= 500 and isinstance(error, BaseException):
        return "".join(traceback.format_exception(error))
    return str(error) or reason_phrase(status)


def finalize_error(error: object, request: Request, response: Response, *, debug: bool) -> None:
    """Write the fallback response for an unhandled *error*."""
    status = error_status(error)
    if status >= 500:
        exc_info = error if isinstance(error, BaseException) else None
        logger.error("%d %s %s", status, request.method, request.path, exc_info=exc_info)
    else:
        logger.debug("%d %s %s — %s", status, request.method, request.path, error)

    if response.finished:
        logger.warning(
            "%s %s: error arrived after the response was sent: %r",
            request.method,
            request.path,
            error,
        )
        return

    for name, _ in response.headers:
        response.remove_header(name)
    if isinstance(error, HTTPError):
        for name, value in error.headers:
            response.append_header(name, value)
    response.set_status(status)
    response.send(_error_body(error, status, debug), content_type="text/plain; charset=utf-8")


def finalize_not_found(request: Request, response: Response, *, debug: bool) -> None:
    """Write the fallback 404 for a request every middleware passed on."""
    logger.debug("404 %s %s — no middleware answered", request.method, request.path)
    body = f"Cannot {request.method} {request.path}" if debug else reason_phrase(404)
    response.set_status(404)
    response.send(body, content_type="text/plain; charset=utf-8")
