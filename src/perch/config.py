"""Application configuration."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Where ``App.run`` binds, and whether the app runs in debug mode.

    ``debug=True`` turns on reload in the dev server, puts tracebacks in
    500 bodies, and answers unmatched requests with ``Cannot GET /path``::

        app = App(AppConfig(debug=True, port=3000))
    """

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
