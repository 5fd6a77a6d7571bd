"""The ``perch`` command.

``perch routes myapp:app`` lists every mount point with the verbs each
view answers; ``perch run myapp:app`` prints the same table and serves
the app with pounce.
"""

import argparse


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Inspect and serve perch apps.",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    routes = commands.add_parser("routes", help="List mounted views and the verbs they answer")
    routes.add_argument("app", help="Import string, e.g. myapp:app")

    run = commands.add_parser("run", help="List routes, then start the development server")
    run.add_argument("app", help="Import string, e.g. myapp:app")
    run.add_argument("--host", default=None, help="Bind address (default: AppConfig.host)")
    run.add_argument("--port", type=int, default=None, help="Bind port (default: AppConfig.port)")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``perch`` console script."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "routes":
        from perch.cli._routes import show_routes

        show_routes(args)
    elif args.command == "run":
        from perch.cli._run import run_server

        run_server(args)
    else:
        parser.print_help()
        raise SystemExit(0)
