"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response: status, ordered headers and an opaque body.

    Headers are name/value pairs; the same name may appear more than once
    (``Set-Cookie``). Construct with a body, then chain ``.with_*()``
    calls::

        Response("created").with_status(201).with_header("Location", "/items/7")
    """

    body: str | bytes = ""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header.

        Never replaces an existing header of the same name.
        """
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> Response:
        """Return a new Response with additional headers."""
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        return replace(self, headers=(*self.headers, *tuple(pairs)))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response whose only Content-Type is *content_type*."""
        kept = tuple((n, v) for n, v in self.headers if n.lower() != "content-type")
        return replace(self, headers=(*kept, ("Content-Type", content_type)))

    # -- Accessors --

    def get_header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        name_lower = name.lower()
        for header, value in self.headers:
            if header.lower() == name_lower:
                return value
        return None

    @property
    def content_type(self) -> str | None:
        return self.get_header("Content-Type")

    @property
    def header_lines(self) -> list[str]:
        """Headers as ``"Name: value"`` lines, in order."""
        return [f"{name}: {value}" for name, value in self.headers]

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
