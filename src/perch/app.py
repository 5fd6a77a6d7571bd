"""perch application class.

Mutable during setup (middleware, error middleware, lifespan hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import threading

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke
from perch._internal.types import ErrorHandler, Handler, Hook
from perch.config import AppConfig
from perch.errors import ConfigurationError
from perch.middleware.stack import Layer
from perch.server.handler import handle_request


class App:
    """The perch application.

    Middleware runs in registration order::

        app = App()
        app.use(Users.handler(), path="/users")
        app.use_error(render_errors)

    Thread safety:
        The setup phase is single-threaded (module import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread compiles the app, even when several ASGI workers call
        ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        # Compiled state (populated by _freeze)
        "_layers",
        "_pending_layers",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_layers: list[Layer] = []
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._layers: tuple[Layer, ...] = ()
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Middleware --

    def use(self, *middleware: Handler, path: str = "/") -> None:
        """Mount middleware at *path* (default: every request)."""
        self._mount(middleware, path, handles_errors=False)

    def use_error(self, *handlers: ErrorHandler, path: str = "/") -> None:
        """Mount error middleware at *path*.

        Error middleware receives ``(error, request, response, next)`` and
        only runs while an error is travelling down the chain.
        """
        self._mount(handlers, path, handles_errors=True)

    @property
    def layers(self) -> tuple[Layer, ...]:
        """Mounted middleware and error middleware, in registration order."""
        return self._layers if self._frozen else tuple(self._pending_layers)

    # -- Lifespan --

    def on_startup(self, func: Hook) -> Hook:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.

        Usage::

            @app.on_startup
            async def setup():
                await pool.open()
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown,
        after the server stops accepting new requests.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with the pounce development server."""
        self._ensure_frozen()

        from perch.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes
        to the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            layers=self._layers,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self._run_startup_hooks()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self._run_shutdown_hooks()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _run_startup_hooks(self) -> None:
        for hook in self._startup_hooks:
            await invoke(hook)

    async def _run_shutdown_hooks(self) -> None:
        for hook in self._shutdown_hooks:
            await invoke(hook)

    # -- Internal --

    def _mount(self, handlers: tuple[Handler, ...], path: str, *, handles_errors: bool) -> None:
        self._check_not_frozen()
        if not path.startswith("/"):
            msg = f"Mount path must start with '/', got {path!r}"
            raise ConfigurationError(msg)
        if not handlers:
            msg = "use() requires at least one middleware"
            raise ConfigurationError(msg)
        for handler in handlers:
            if not callable(handler):
                msg = f"Middleware must be callable, got {type(handler).__name__}"
                raise ConfigurationError(msg)
            self._pending_layers.append(Layer(path, handler, handles_errors))

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        self._layers = tuple(self._pending_layers)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register middleware and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
