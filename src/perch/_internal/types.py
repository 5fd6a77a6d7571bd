"""Shared type aliases used across perch modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Verb handler or middleware: (request, response, next, *args)
Handler: TypeAlias = Callable[..., Any]

# Error middleware: (error, request, response, next)
ErrorHandler: TypeAlias = Callable[..., Any]

# Error generator: status code in, error-like value out
ErrorFactory: TypeAlias = Callable[[int], Any]

# Lifespan hook: no arguments, sync or async
Hook: TypeAlias = Callable[[], Any]
