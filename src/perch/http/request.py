"""Immutable HTTP request.

Frozen metadata with async body access. Every middleware in a chain
sees the same request object; per-request state belongs on the response
or in the handler, never on the request.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qs

from perch._internal.asgi import Receive, Scope
from perch.http.headers import Headers


def _parse_query(query_string: bytes) -> Mapping[str, tuple[str, ...]]:
    parsed = parse_qs(query_string.decode("latin-1"), keep_blank_values=True)
    return MappingProxyType({key: tuple(values) for key, values in parsed.items()})


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``method`` is the verb exactly as received (upper-case on the wire);
    views lower-case it themselves. ``query`` maps each name to all of
    its values. The body is read lazily with ``await request.body()``.
    """

    method: str
    path: str
    headers: Headers
    query: Mapping[str, tuple[str, ...]]
    query_string: bytes
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(repr=False, compare=False)

    # Private: body cache (the dict is mutable, the field reference is not)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int, or None if absent or malformed."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls return
        the cached bytes.
        """
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield the request body in the chunks the server delivers."""
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(await self.body())

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        query_string = scope.get("query_string", b"")
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple((bytes(k), bytes(v)) for k, v in scope.get("headers", ()))),
            query=_parse_query(query_string),
            query_string=query_string,
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
