"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    (request: Request, response: Response, next: Next) -> None

An error middleware is any callable matching:
    (error: object, request: Request, response: Response, next: Next) -> None

Both may be ``async def``. Class-based views produce middleware through
``View.handler()``.
"""

from perch.middleware.protocol import ErrorMiddleware, Middleware, Next

__all__ = [
    "ErrorMiddleware",
    "Middleware",
    "Next",
]
