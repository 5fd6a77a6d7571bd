"""Middleware protocols.

A middleware is any callable matching::

    def my_mw(request: Request, response: Response, next: Next) -> None: ...

and an error middleware any callable matching::

    def on_error(error: object, request: Request, response: Response, next: Next) -> None: ...

Either may be ``async def``. No base class required; the stack checks
the shape at call time, not the lineage.
"""

from collections.abc import Awaitable
from typing import Any, Protocol

from perch.http.request import Request
from perch.http.response import Response


class Next(Protocol):
    """The continuation handed to every middleware.

    ``next()`` passes control to the following middleware.
    ``next(error)`` skips ahead to the following error middleware.
    """

    def __call__(self, error: object = None, /) -> Any: ...


class Middleware(Protocol):
    """Protocol for perch middleware.

    Accepts functions, callable objects, and ``View.handler()`` results::

        # Function middleware
        def powered_by(request, response, next):
            response.set_header("X-Powered-By", "perch")
            next()

        # Class middleware
        class RequireJSON:
            async def __call__(self, request, response, next):
                if request.content_type != "application/json":
                    next(create_error(415))
                    return
                next()
    """

    def __call__(
        self, request: Request, response: Response, next: Next, /, *args: Any
    ) -> None | Awaitable[None]: ...


class ErrorMiddleware(Protocol):
    """Protocol for error-handling middleware.

    Only runs while an error is travelling down the chain. Finish the
    response to handle the error, call ``next()`` to clear it, or call
    ``next(error)`` to pass it on::

        def render_errors(error, request, response, next):
            response.set_status(getattr(error, "status", 500)).send("oh no")
    """

    def __call__(
        self, error: object, request: Request, response: Response, next: Next, /
    ) -> None | Awaitable[None]: ...
