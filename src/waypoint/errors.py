"""Waypoint exception hierarchy.

Shared across Dispatcher, Router, resources and error resources so every
module raises and catches the same types.
"""

from collections.abc import Iterable
from dataclasses import dataclass


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when a registration is invalid.

    Typically raised while parsing an endpoint template at registration
    time, before any request is dispatched.
    """


class UndispatchableError(WaypointError):
    """No handler could be found for a key, nor for either default key.

    The only error a ``Dispatcher`` raises on its own. Callers catch it to
    drive their own fallback (the Router turns it into a 404 or moves on to
    the next error resource).
    """

    def __init__(self, message: str = "Key is not dispatchable") -> None:
        super().__init__(message)


class RouterPanic(WaypointError):  # noqa: N818 — this is not a recoverable error
    """The global error resource raised while answering an errored request.

    Global error resources must never fail, so there is nothing left to
    fall back to. Treat this as fatal for the process.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WaypointError):
    """An error that maps directly to an HTTP status code.

    Raised by resources and by the Router. ``reason`` is meant for the
    client, ``detailed_reason`` for the developer reading logs or a debug
    page.
    """

    status: int
    reason: str = "Unknown"
    detailed_reason: str = "Not provided"
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return f"{self.status}: {self.reason}"


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no endpoint template matched (or validated against) the path."""

    def __init__(self, reason: str = "Not Found", detailed_reason: str = "Not provided") -> None:
        super().__init__(status=404, reason=reason, detailed_reason=detailed_reason)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — the resource exists but has no handler for the request method.

    Includes an ``Allow`` header listing the methods the resource does
    support.
    """

    def __init__(self, method: str, allowed: Iterable[str], reason: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            reason=reason or f"This resource does not support the {method} method",
            detailed_reason=f"Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )


class NotAcceptable(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """406 — none of the requested content types can be produced."""

    def __init__(self, reason: str = "Not Acceptable") -> None:
        super().__init__(status=406, reason=reason)


class InternalServerError(HTTPError):
    """500 — something unexpected went wrong while handling the request."""

    def __init__(
        self, reason: str = "Unknown internal error", detailed_reason: str = "Not provided"
    ) -> None:
        super().__init__(status=500, reason=reason, detailed_reason=detailed_reason)


class ResourceNotImplemented(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """501 — the resource has no handlers registered at all."""

    def __init__(self, reason: str = "This resource is currently not implemented") -> None:
        super().__init__(status=501, reason=reason)


class UnsupportedMethod(WaypointError):  # noqa: N818 — mirrors MethodNotAllowed
    """Documentation metadata was requested for a method that has none.

    Either the resource does not support the method, or the method cannot
    carry what was asked for (query parameters on POST, a body on GET).
    """
