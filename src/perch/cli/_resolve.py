"""Turn ``"module:attribute"`` strings into perch App instances."""

import pkgutil
import sys

from perch.app import App


def resolve_app(import_string: str) -> App:
    """Import *import_string* and return the App it names.

    ``"pkg.module"`` alone means ``"pkg.module:app"``. Anything callable
    that is not already an App is treated as a factory and called once
    with no arguments.

    Raises:
        ModuleNotFoundError: The module does not exist.
        AttributeError: The module has no such attribute.
        TypeError: The target is not an App, or its factory raised.
    """
    if ":" not in import_string:
        import_string = f"{import_string}:app"
    target = pkgutil.resolve_name(import_string)

    if callable(target) and not isinstance(target, App):
        try:
            target = target()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if isinstance(target, App):
        return target
    msg = f"{import_string!r} is a {type(target).__name__}, expected a perch.App"
    raise TypeError(msg)


def load_app(import_string: str) -> App:
    """:func:`resolve_app` for commands: failures go to stderr, exit status 1."""
    try:
        return resolve_app(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
