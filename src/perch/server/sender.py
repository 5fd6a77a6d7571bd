"""ASGI response sending — translates a finished Response to ASGI messages."""

from perch._internal.asgi import Send
from perch.http.response import Response


def _status_allows_body(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC 9110: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Send *response* as one ``http.response.start`` and one body message.

    A ``HEAD`` response keeps its headers, including the
    ``content-length`` a ``GET`` would have sent, but no body.
    Statuses that forbid a body get neither a body nor ``content-length``.
    """
    has_body = _status_allows_body(response.status)

    raw_headers: list[tuple[bytes, bytes]] = []
    content_type = response.get_header("content-type") or response.content_type
    if has_body and content_type:
        raw_headers.append((b"content-type", content_type.encode("latin-1")))
    for name, value in response.headers:
        if name.lower() in ("content-length", "content-type"):
            continue
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    # RFC 9110 8.6: no Content-Length on 1xx, 204 or 304.
    if has_body:
        raw_headers.append((b"content-length", str(len(response.body)).encode("latin-1")))

    body = response.body if has_body and method.upper() != "HEAD" else b""

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
