"""Serve a perch App with pounce, single worker.

pounce is an optional dependency (``perch[server]``) and is only imported
when something actually asks to serve.
"""

from perch.errors import ConfigurationError


def run_dev_server(app: object, host: str, port: int, *, reload: bool = False) -> None:
    """Block serving *app* on *host*:*port* until interrupted.

    The live ASGI object is handed to ``pounce.Server`` directly, so
    views mounted at runtime are exactly the ones that get served.

    Raises:
        ConfigurationError: pounce is not installed.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = "Serving requires pounce. Install it with: pip install perch[server]"
        raise ConfigurationError(msg) from exc

    Server(ServerConfig(host=host, port=port, workers=1, reload=reload), app).run()
