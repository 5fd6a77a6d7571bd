"""Mutable HTTP response writer.

One ``Response`` is created per request and handed to every middleware
in the chain alongside the request. Middleware sets status and headers,
then finishes it with ``send()``, ``json()``, ``send_status()`` or
``end()``. The server transmits it once the chain settles.
"""

from __future__ import annotations

import json as json_module
from typing import Any

from perch.errors import ResponseFinished, reason_phrase


class Response:
    """A response under construction.

    Setters return the response so calls chain::

        response.set_status(201).set_header("Location", "/users/7").send("created")

    Once finished, any further write raises :class:`ResponseFinished`.
    """

    __slots__ = ("_finished", "_headers", "body", "content_type", "status")

    def __init__(self) -> None:
        self.status: int = 200
        self.body: bytes = b""
        self.content_type: str | None = None
        self._headers: list[tuple[str, str]] = []
        self._finished: bool = False

    def __repr__(self) -> str:
        state = "finished" if self._finished else "open"
        return f"<Response {self.status} {state}>"

    # -- State --

    @property
    def finished(self) -> bool:
        """True once the response body has been committed."""
        return self._finished

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Snapshot of the headers set so far, in insertion order."""
        return tuple(self._headers)

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")

    # -- Status and headers --

    def set_status(self, status: int) -> Response:
        """Set the status code."""
        self._check_open()
        self.status = status
        return self

    def set_header(self, name: str, value: str) -> Response:
        """Set a header, replacing any existing values (case-insensitive)."""
        self._check_open()
        self._drop(name)
        self._headers.append((name, value))
        return self

    def append_header(self, name: str, value: str) -> Response:
        """Add another value for a header without replacing existing ones."""
        self._check_open()
        self._headers.append((name, value))
        return self

    def get_header(self, name: str) -> str | None:
        """Return the first value set for *name*, or None."""
        lowered = name.lower()
        for key, value in self._headers:
            if key.lower() == lowered:
                return value
        return None

    def remove_header(self, name: str) -> Response:
        """Remove every value for *name*."""
        self._check_open()
        self._drop(name)
        return self

    # -- Finishing --

    def send(self, body: str | bytes = b"", *, content_type: str | None = None) -> None:
        """Set the body and finish the response.

        ``str`` bodies are encoded as UTF-8 and default to HTML;
        ``bytes`` default to ``application/octet-stream``.
        """
        self._check_open()
        if isinstance(body, str):
            default_type = "text/html; charset=utf-8"
            body = body.encode("utf-8")
        else:
            default_type = "application/octet-stream"
        self.content_type = content_type or self.content_type or default_type
        self.body = body
        self._finished = True

    def json(self, data: Any) -> None:
        """Serialize *data* as JSON and finish the response."""
        self.send(json_module.dumps(data), content_type="application/json")

    def send_status(self, status: int) -> None:
        """Set *status* and finish with its reason phrase as a plain-text body.

        The sender drops the body again for statuses that forbid one
        (1xx, 204, 304).
        """
        phrase = reason_phrase(status)
        self.set_status(status)
        self.send(phrase, content_type="text/plain; charset=utf-8")

    def end(self) -> None:
        """Finish the response with whatever body it already has."""
        self._check_open()
        self._finished = True

    # -- Internal --

    def _drop(self, name: str) -> None:
        lowered = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != lowered]

    def _check_open(self) -> None:
        if self._finished:
            msg = "Cannot modify a response after it has been sent"
            raise ResponseFinished(msg)
