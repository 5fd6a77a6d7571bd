"""Invoke helpers — call sync or async callables uniformly.

Verb handlers, middleware, error middleware, continuations and lifespan
hooks can all be ``def`` or ``async def``. Anything that calls one of
them goes through this helper so the sync/async check lives in exactly
one place.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(handler, *args, **kwargs)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Exceptions raised by the call itself and exceptions raised while
    awaiting its result both surface here, so a single ``try`` around
    ``await invoke(...)`` sees every failure mode::

        class Users(View):
            # plain function, result used as is
            def get(self, request, response, next):
                response.send("users")

            # coroutine function, result awaited
            async def post(self, request, response, next):
                payload = await request.json()
                response.json(payload)
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
