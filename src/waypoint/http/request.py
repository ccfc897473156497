"""HTTP requests as routed by waypoint.

``Request`` is frozen metadata about what the client asked for. The only
things that change after creation are recorded in a private state dict:
the endpoint template it was matched against (bound at most once) and the
status code it is expected to produce.

``ErroredRequest`` is a read-only view of a request whose handling failed,
carrying the ``HTTPError`` and the resource that raised it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from waypoint.errors import HTTPError
from waypoint.http.headers import Headers
from waypoint.http.query import QueryParams
from waypoint.routing.endpoint import match_endpoint

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _parse_accept(accept: str) -> list[str]:
    weighted: list[tuple[float, str]] = []
    for part in accept.split(","):
        media_type, *params = (p.strip() for p in part.split(";"))
        if not media_type:
            continue
        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        weighted.append((quality, media_type))
    # sorted() is stable, so equal qualities keep their header order
    return [media_type for _, media_type in sorted(weighted, key=lambda item: -item[0])]


@dataclass(frozen=True, slots=True)
class Request:
    """A request for a resource at some endpoint.

    Path is the literal server path (``/api/items/42``). ``params`` come
    from the query string, ``private_params`` from a url-encoded body.
    """

    method: str
    path: str
    params: QueryParams = field(default_factory=QueryParams)
    private_params: QueryParams = field(default_factory=QueryParams)
    body: bytes | str | None = None
    fragment: str | None = None
    headers: Headers = field(default_factory=Headers)

    # Private: matched endpoint and expected status
    # (dict contents are mutable even though the field reference is frozen)
    _state: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Endpoint matching --

    def bind_endpoint(self, template: str) -> bool:
        """Match this request's path against *template* and remember the result.

        On success the template and its typed parameters are bound to the
        request for good. Once bound, later calls never re-match: they
        return whether *template* is the bound one.
        """
        if "endpoint_template" in self._state:
            return self._state["endpoint_template"] == template

        params = match_endpoint(template, self.path)
        if params is None:
            return False
        self._state["endpoint_template"] = template
        self._state["endpoint_params"] = params
        return True

    @property
    def endpoint_template(self) -> str | None:
        """The template this request was bound to, if any."""
        return self._state.get("endpoint_template")

    @property
    def endpoint_params(self) -> dict[str, Any]:
        """Parameters extracted from the path by the bound template.

        For ``/items/42`` bound to ``/items/:id<int>`` this is ``{"id": 42}``.
        """
        return dict(self._state.get("endpoint_params", {}))

    def endpoint_param(self, name: str) -> Any:
        return self._state.get("endpoint_params", {}).get(name)

    # -- Expected status --

    @property
    def expected_status(self) -> int:
        """The status code this request should produce, barring further errors."""
        return self._state.get("expected_status", 200)

    def set_expected_status(self, status: int) -> None:
        """Record the status a resource intends to answer with.

        Free for resources to call at any point while handling, any number
        of times; the Router never sets it. Raises ``ValueError`` if
        *status* is not a valid HTTP status code (100-599).
        """
        if not 100 <= status <= 599:
            msg = f"{status!r} is not a valid HTTP status code"
            raise ValueError(msg)
        self._state["expected_status"] = status

    # -- Parameters and headers --

    def param(self, name: str) -> str | None:
        return self.params.get(name)

    def private_param(self, name: str) -> str | None:
        return self.private_params.get(name)

    def header(self, name: str) -> str | None:
        """Value of header *name* (case-insensitive), or ``None``."""
        return self.headers.get(name)

    @property
    def content_type(self) -> str | None:
        """The body's media type, without parameters such as charset."""
        value = self.headers.get("content-type")
        if value is None:
            return None
        return value.split(";", 1)[0].strip().lower()

    @property
    def content_type_charset(self) -> str | None:
        value = self.headers.get("content-type")
        if value is None:
            return None
        for param in value.split(";")[1:]:
            name, _, charset = param.partition("=")
            if name.strip().lower() == "charset":
                return charset.strip().strip('"')
        return None

    @property
    def accepted_content_types(self) -> list[str]:
        """Media types from the Accept header, most preferred first."""
        accept = self.headers.get("accept")
        if not accept:
            return []
        return _parse_accept(accept)

    @property
    def auth_type(self) -> str | None:
        """The scheme of the Authorization header (e.g. ``Bearer``)."""
        auth = self.headers.get("authorization")
        if auth is None:
            return None
        auth_type = auth.split(" ", 1)[0]
        return auth_type or None

    @property
    def auth_value(self) -> str | None:
        """The credentials of the Authorization header, after the scheme."""
        auth = self.headers.get("authorization")
        if auth is None:
            return None
        _, _, value = auth.partition(" ")
        return value or None

    # -- Factory --

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        headers: Headers | dict[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> Request:
        """Build a Request from a method, a request target and optional body.

        The query string becomes ``params`` and the fragment ``fragment``.
        A url-encoded form body is decoded into ``private_params``; other
        bodies are kept as-is.
        """
        if not isinstance(headers, Headers):
            headers = Headers(headers or {})
        parts = urlsplit(url)
        if body in ("", b""):
            body = None

        private_params = QueryParams()
        content_type = headers.get("content-type")
        if body is not None and content_type is not None:
            if content_type.split(";", 1)[0].strip().lower() == FORM_CONTENT_TYPE:
                private_params = QueryParams(body)

        return cls(
            method=method.upper(),
            path=parts.path.rstrip("/") or "/",
            params=QueryParams(parts.query),
            private_params=private_params,
            body=body,
            fragment=parts.fragment or None,
            headers=headers,
        )


@dataclass(frozen=True, slots=True)
class ErroredRequest:
    """A request whose handling raised an ``HTTPError``.

    ``source_resource`` is the resource that raised it, or ``None`` if the
    error happened before any resource ran, because there was no resource,
    or because the resource is unknown. It is a reference only.
    """

    request: Request
    error: HTTPError
    source_resource: Any = None

    @property
    def expected_status(self) -> int:
        """The status code of the error, not the request's default 200."""
        return self.error.status

    # -- Read-only view of the wrapped request --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def params(self) -> QueryParams:
        return self.request.params

    @property
    def private_params(self) -> QueryParams:
        return self.request.private_params

    @property
    def body(self) -> bytes | str | None:
        return self.request.body

    @property
    def fragment(self) -> str | None:
        return self.request.fragment

    @property
    def headers(self) -> Headers:
        return self.request.headers

    @property
    def endpoint_template(self) -> str | None:
        return self.request.endpoint_template

    @property
    def endpoint_params(self) -> dict[str, Any]:
        return self.request.endpoint_params

    @property
    def accepted_content_types(self) -> list[str]:
        return self.request.accepted_content_types

    def header(self, name: str) -> str | None:
        return self.request.header(name)
