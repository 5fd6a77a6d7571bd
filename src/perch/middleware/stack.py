"""Middleware stack — runs a request through mounted layers in order.

Each layer gets the request, the shared response, and a fresh
:class:`NextCall`. After the layer settles (including any awaitable it
returned), the stack looks at what the layer asked for:

- ``next()`` — continue with the next matching middleware,
- ``next(error)`` — continue with the next matching error middleware,
- nothing — the chain ends here.

A layer that raises is treated as if it had called ``next(exc)``.
"""

import logging
from dataclasses import dataclass

from perch._internal.invoke import invoke
from perch._internal.types import Handler
from perch.http.request import Request
from perch.http.response import Response

logger = logging.getLogger("perch.server")


@dataclass(frozen=True, slots=True)
class Layer:
    """A middleware mounted at a path prefix."""

    path: str
    handler: Handler
    handles_errors: bool = False

    def matches(self, request_path: str) -> bool:
        """True if *request_path* is the mount path or below it."""
        prefix = self.path.rstrip("/")
        if not prefix:
            return True
        return request_path == prefix or request_path.startswith(prefix + "/")


class NextCall:
    """The ``next`` continuation for a single layer invocation.

    Only the first call counts. Later calls are logged and ignored so a
    request can never be advanced twice from the same layer.
    """

    __slots__ = ("called", "error", "layer")

    def __init__(self, layer: Layer) -> None:
        self.layer = layer
        self.called = False
        self.error: object = None

    def __call__(self, error: object = None, /) -> None:
        if self.called:
            logger.warning("next() called more than once by %r; ignoring", self.layer.handler)
            return
        self.called = True
        self.error = error


@dataclass(slots=True)
class StackResult:
    """How a request left the stack."""

    error: object = None
    exhausted: bool = False


async def run_stack(
    layers: tuple[Layer, ...],
    request: Request,
    response: Response,
) -> StackResult:
    """Run *request* through *layers*.

    Returns the error still travelling when the chain ended (if any) and
    whether every layer passed the request on.
    """
    error: object = None
    for layer in layers:
        if layer.handles_errors != (error is not None):
            continue
        if not layer.matches(request.path):
            continue

        next_call = NextCall(layer)
        try:
            if layer.handles_errors:
                await invoke(layer.handler, error, request, response, next_call)
            else:
                await invoke(layer.handler, request, response, next_call)
        except Exception as exc:
            if next_call.called:
                logger.exception("%r raised after calling next()", layer.handler)
            else:
                next_call(exc)

        if not next_call.called:
            return StackResult(error=None)
        error = next_call.error
    return StackResult(error=error, exhausted=True)
