"""Per-method resources.

A BasicResource dispatches each request to the handler registered for
its HTTP method::

    items = BasicResource({"GET": list_items}, name="items")
    items.register(
        "POST",
        create_item,
        MethodMetadata(authenticated=True, body_spec="JSON item"),
    )
    router.register("/items", items)

It also implements ``WithMetadata``, documenting each method from the
``MethodMetadata`` it was registered with.
"""

from collections.abc import Callable, Mapping
from typing import Any

from waypoint.dispatch import Dispatcher
from waypoint.errors import MethodNotAllowed, ResourceNotImplemented, UndispatchableError
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.resources.metadata import (
    MethodMetadata,
    ParamInfo,
    check_body_allowed_for,
    check_method_metadata,
    check_params_allowed_for,
    check_supports_method,
)

type RequestHandler = Callable[..., Response]


class BasicResource:
    """A resource that dispatches on the request method.

    Raises ``ResourceNotImplemented`` (501) when no handler is registered
    at all, and ``MethodNotAllowed`` (405) when none is registered for the
    request's method.
    """

    __slots__ = ("_description", "_metadata", "_methods", "_name")

    def __init__(
        self,
        handlers: Mapping[str, RequestHandler] | None = None,
        *,
        name: str = "",
        description: str = "",
        metadata: Mapping[str, MethodMetadata] | None = None,
    ) -> None:
        self._name = name or type(self).__name__
        self._description = description
        self._methods = Dispatcher({m.upper(): h for m, h in (handlers or {}).items()})
        self._metadata: dict[str, MethodMetadata] = {}
        for method, meta in (metadata or {}).items():
            self._set_metadata(method.upper(), meta)

    def register(
        self, method: str, handler: RequestHandler, metadata: MethodMetadata | None = None
    ) -> None:
        """Register *handler* for HTTP *method*, replacing any previous one.

        Raises ``UnsupportedMethod`` if *metadata* documents query
        parameters or a body that *method* cannot carry.
        """
        method = method.upper()
        if metadata is not None:
            check_method_metadata(method, metadata)
        self._methods.register(method, handler)
        if metadata is not None:
            self._metadata[method] = metadata

    def _set_metadata(self, method: str, metadata: MethodMetadata) -> None:
        check_supports_method(self, method)
        check_method_metadata(method, metadata)
        self._metadata[method] = metadata

    def __call__(self, request: Request, *args: Any) -> Response:
        if self._methods.is_empty:
            raise ResourceNotImplemented()

        try:
            handler = self._methods.lookup(request.method)
        except UndispatchableError:
            raise MethodNotAllowed(request.method, self.supported_methods) from None
        return handler(request, *args)

    # -- WithMetadata --

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def supported_methods(self) -> list[str]:
        return self._methods.keys()

    def _metadata_for(self, method: str) -> MethodMetadata:
        check_supports_method(self, method)
        return self._metadata.get(method.upper(), MethodMetadata())

    def is_authenticated(self, method: str) -> bool:
        return self._metadata_for(method).authenticated

    def supported_params_for(self, method: str) -> tuple[ParamInfo, ...]:
        meta = self._metadata_for(method)
        check_params_allowed_for(method)
        return meta.params

    def body_spec_for(self, method: str) -> str:
        meta = self._metadata_for(method)
        check_body_allowed_for(method)
        return meta.body_spec

    def response_description_for(self, method: str) -> str:
        return self._metadata_for(method).response_description

    def example_requests_for(self, method: str) -> tuple[Request, ...]:
        return self._metadata_for(method).examples


def add_headers(headers: Mapping[str, str]) -> Callable[[Response], Response]:
    """Return a pipe stage that adds *headers* to the Response it is given.

    Usually registered last in a ``Dispatcher.handler_for_pipe`` chain.
    """

    def stage(response: Response) -> Response:
        return response.with_headers(headers)

    return stage
