"""``perch routes`` — what each mount point of an app answers.

Views are asked directly: the view's own middleware gets a synthetic
``OPTIONS`` request and the ``Allowed`` header it sets is reported, so
the listed verbs are exactly the ones the view would dispatch. A view
that overrides ``options`` is not called, since its answer may have side
effects.
"""

import argparse
import asyncio
from dataclasses import dataclass
from typing import Any

from perch.app import App
from perch.cli._resolve import load_app
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.stack import Layer, NextCall
from perch.views import View


@dataclass(frozen=True, slots=True)
class Mount:
    """One mounted layer as the CLI reports it."""

    path: str
    kind: str
    name: str
    verbs: tuple[str, ...] | None = None


async def _ask_allowed(layer: Layer) -> tuple[str, ...]:
    async def receive() -> dict[str, Any]:
        return {"type": "http.disconnect"}

    scope = {"type": "http", "method": "OPTIONS", "path": layer.path}
    request = Request.from_asgi(scope, receive)
    response = Response()
    await layer.handler(request, response, NextCall(layer))
    allowed = response.get_header("Allowed")
    return tuple(allowed.split(",")) if allowed else ()


async def describe_routes(app: App) -> list[Mount]:
    """Describe every layer of *app* in the order requests meet them.

    ``verbs`` is ``None`` for plain middleware and for views with their
    own ``options``.
    """
    mounts: list[Mount] = []
    for layer in app.layers:
        view_class: type[View] | None = getattr(layer.handler, "view_class", None)
        if layer.handles_errors:
            mounts.append(Mount(layer.path, "error", _name_of(layer.handler)))
        elif view_class is None:
            mounts.append(Mount(layer.path, "middleware", _name_of(layer.handler)))
        elif view_class.options is not View.options:
            mounts.append(Mount(layer.path, "view", view_class.__qualname__))
        else:
            verbs = await _ask_allowed(layer)
            mounts.append(Mount(layer.path, "view", view_class.__qualname__, verbs))
    return mounts


def format_routes(mounts: list[Mount]) -> str:
    """Render *mounts* as an aligned plain-text table."""
    if not mounts:
        return "No middleware mounted."
    rows = [("PATH", "KIND", "NAME", "VERBS")]
    for mount in mounts:
        if mount.verbs is not None:
            verbs = ",".join(mount.verbs)
        elif mount.kind == "view":
            verbs = "(custom OPTIONS)"
        else:
            verbs = "-"
        rows.append((mount.path, mount.kind, mount.name, verbs))
    widths = [max(len(row[i]) for row in rows) for i in range(3)]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row[:3], widths, strict=True))
        + "  "
        + row[3]
        for row in rows
    )


def show_routes(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and print its route table."""
    app = load_app(args.app)
    print(format_routes(asyncio.run(describe_routes(app))))


def _name_of(handler: object) -> str:
    return getattr(handler, "__qualname__", None) or type(handler).__qualname__
