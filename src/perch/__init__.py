"""perch — class-based views on an async middleware chain.

A class with verb-named methods becomes one middleware. Unimplemented
verbs become 405 errors, ``OPTIONS`` answers itself, and anything a
verb method raises travels down the chain to error middleware.

Basic usage::

    from perch import App, View

    class Hello(View):
        def get(self, request, response, next):
            response.send("Hello, World!")

    app = App()
    app.use(Hello.handler())

    app.run()

Serving needs the pounce server (``pip install perch[server]``);
testing doesn't::

    from perch.testing import TestClient

    async with TestClient(app) as client:
        response = await client.get("/")
"""

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "METHODS",
    "App",
    "AppConfig",
    "ConfigurationError",
    "ErrorMiddleware",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "PerchError",
    "Request",
    "Response",
    "ResponseFinished",
    "View",
    "ViewConfig",
    "create_error",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name in ("View", "ViewConfig"):
        from perch import views as _views

        return getattr(_views, name)

    if name == "Request":
        from perch.http.request import Request

        return Request

    if name == "Response":
        from perch.http.response import Response

        return Response

    if name == "METHODS":
        from perch.http.methods import METHODS

        return METHODS

    if name in ("ErrorMiddleware", "Middleware", "Next"):
        from perch.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "PerchError",
        "ResponseFinished",
        "create_error",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
