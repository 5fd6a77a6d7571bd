"""``perch run`` — print the route table, then serve."""

import argparse
import asyncio
import sys

from perch.cli._resolve import load_app
from perch.cli._routes import describe_routes, format_routes
from perch.errors import ConfigurationError


def run_server(args: argparse.Namespace) -> None:
    """Serve ``args.app`` with pounce after listing what it mounts.

    ``--host`` and ``--port`` win over the app's ``AppConfig``.
    """
    app = load_app(args.app)
    print(format_routes(asyncio.run(describe_routes(app))))

    from perch.server.dev import run_dev_server

    try:
        run_dev_server(
            app,
            args.host or app.config.host,
            args.port or app.config.port,
            reload=app.config.debug,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
