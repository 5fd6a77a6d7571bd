"""ASGI handler — translates ASGI scope/messages to perch types.

The only component that touches raw HTTP scopes directly. Builds the
Request and Response, runs the middleware stack, lets the final handler
answer whatever the stack left open, and sends the result.
"""

import logging

from perch._internal.asgi import Receive, Scope, Send
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.stack import Layer, run_stack
from perch.server.errors import finalize_error, finalize_not_found
from perch.server.sender import send_response

logger = logging.getLogger("perch.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    layers: tuple[Layer, ...],
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = Response()

    result = await run_stack(layers, request, response)

    if result.error is not None:
        finalize_error(result.error, request, response, debug=debug)
    elif not response.finished:
        if result.exhausted:
            finalize_not_found(request, response, debug=debug)
        else:
            logger.warning(
                "%s %s: middleware ended the chain without finishing the response",
                request.method,
                request.path,
            )
            response.end()

    await send_response(response, send, method=request.method)
