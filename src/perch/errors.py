"""perch exception hierarchy.

Shared across views, the middleware stack, and the server so every
module raises and catches the same types.
"""

from dataclasses import dataclass
from http import HTTPStatus


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError, ValueError):
    """Raised when app or view setup is invalid.

    Also raised by :func:`create_error` for status codes that are not
    registered HTTP statuses. That is a programming mistake, so it is
    raised immediately instead of being forwarded down the chain.
    """


class ResponseFinished(PerchError):  # noqa: N818
    """Raised when writing to a response that has already been sent."""


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Passed to ``next()`` by views and middleware. Error middleware and the
    final handler read ``status`` (or ``status_code``) to pick the
    outbound response status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def status_code(self) -> int:
        """Alias of ``status`` for consumers that look for ``status_code``."""
        return self.status

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing in the chain answered the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — the view exists but does not implement the request's verb."""

    def __init__(self, detail: str = "Method Not Allowed") -> None:
        super().__init__(status=405, detail=detail)


def reason_phrase(status: int) -> str:
    """Return the registered reason phrase for *status*.

    Raises:
        ConfigurationError: If *status* is not a registered HTTP status.
    """
    try:
        return HTTPStatus(status).phrase
    except ValueError as exc:
        msg = f"{status!r} is not a registered HTTP status code"
        raise ConfigurationError(msg) from exc


def create_error(
    status: int,
    detail: str = "",
    *,
    headers: tuple[tuple[str, str], ...] = (),
) -> HTTPError:
    """Build the error for *status* — the default view error generator.

    ``create_error(405)`` gives a :class:`MethodNotAllowed` whose
    ``status`` and ``status_code`` are 405 and whose detail is
    ``"Method Not Allowed"``. Unknown status codes raise
    :class:`ConfigurationError`.
    """
    phrase = reason_phrase(status)
    if status == 404 and not headers:
        return NotFound(detail or phrase)
    if status == 405 and not headers:
        return MethodNotAllowed(detail=detail or phrase)
    return HTTPError(status=status, detail=detail or phrase, headers=headers)
