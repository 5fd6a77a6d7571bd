"""Class-based views — one middleware per class, dispatched by HTTP verb.

Subclass :class:`View`, implement lower-case verb methods, and mount the
middleware returned by :meth:`View.handler`::

    class Users(View):
        def get(self, request, response, next):
            response.json(list_users())

        async def post(self, request, response, next):
            user = await create_user(await request.json())
            response.set_status(201).json(user)

    app.use(Users.handler(), path="/users")

Verbs the view does not implement are answered with a 405 error passed
to ``next``. ``OPTIONS`` is answered automatically with the implemented
verbs in an ``Allowed`` header unless the view overrides ``options``.
Anything a verb method raises, before or after its first ``await``, is
passed to ``next`` as well.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from perch._internal.invoke import invoke
from perch._internal.types import ErrorFactory, Handler
from perch.errors import create_error
from perch.http.methods import METHODS
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Middleware, Next

logger = logging.getLogger("perch.views")


@dataclass(frozen=True, slots=True)
class ViewConfig:
    """Options for :meth:`View.handler`.

    ``errors`` builds the error passed to ``next`` when a request's verb
    has no handler. It receives the status code (405) and overrides any
    ``errors`` defined on the view class::

        Users.handler(ViewConfig(errors=lambda status: MyError(status)))
    """

    errors: ErrorFactory | None = None


class View:
    """Base class for verb-dispatched views.

    The verbs a view implements are found once, when the instance is
    created, by probing :data:`~perch.http.methods.METHODS` in order.
    Attributes added to the instance later are never dispatched to.

    Set ``errors`` on a subclass to change the 405 error for every
    handler built from it; :class:`ViewConfig` wins over it per handler.
    """

    errors: ClassVar[ErrorFactory | None] = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "View":
        instance = super().__new__(cls)
        handlers: dict[str, Handler] = {}
        for method in METHODS:
            verb = method.lower()
            candidate = getattr(instance, verb, None)
            if callable(candidate):
                handlers[verb] = candidate
        instance.__handlers = handlers
        instance.__allowed = tuple(handlers)
        return instance

    def options(self, request: Request, response: Response, next: Next, *args: Any) -> None:
        """Answer ``OPTIONS`` with 204 and the implemented verbs in ``Allowed``."""
        response.set_header("Allowed", ",".join(verb.upper() for verb in self.__allowed))
        response.send_status(204)

    @classmethod
    def handler(cls, config: ViewConfig | None = None) -> Middleware:
        """Create a view instance and return the middleware that dispatches to it.

        The error generator is chosen here, once: ``config.errors``, then
        the class's ``errors``, then :func:`~perch.errors.create_error`.
        The middleware keeps the class as ``view_class`` so tooling such as
        ``perch routes`` can tell views apart from plain middleware.
        """
        instance = cls()
        handlers = instance.__handlers
        errors = _resolve_errors(cls, config)

        async def middleware(request: Any, response: Any, next: Any, *args: Any) -> None:
            method = getattr(request, "method", None)
            verb = method.lower() if isinstance(method, str) else ""
            handler = handlers.get(verb)

            if handler is None:
                logger.debug("%s does not handle %r", cls.__qualname__, method)
                await invoke(next, errors(405))
                return

            try:
                await invoke(handler, request, response, next, *args)
            except Exception as exc:
                logger.debug("%s.%s raised %r", cls.__qualname__, verb, exc)
                await invoke(next, exc)

        middleware.__name__ = f"{cls.__name__}_handler"
        middleware.__qualname__ = f"{cls.__qualname__}.handler.<middleware>"
        middleware.view_class = cls  # type: ignore[attr-defined]
        return middleware


def _resolve_errors(view_cls: type[View], config: ViewConfig | None) -> ErrorFactory:
    """Pick the 405 error generator: per-handler, then per-class, then default."""
    if config is not None and callable(config.errors):
        return config.errors
    if callable(view_cls.errors):
        return view_cls.errors
    return create_error
