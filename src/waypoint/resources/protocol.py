"""Resource and error-resource protocols.

The Router checks the shape, not the lineage: functions and callable
objects both qualify.
"""

from typing import Any, Protocol, runtime_checkable

from waypoint.http.request import ErroredRequest, Request
from waypoint.http.response import Response
from waypoint.resources.metadata import ParamInfo


class Resource(Protocol):
    """Handles a request routed to one or more endpoint templates.

    May raise ``HTTPError`` to enter the error cascade.
    """

    def __call__(self, request: Request, *args: Any) -> Response: ...


class ErrorResource(Protocol):
    """Answers a request whose handling failed.

    May raise; the Router then moves on to the next error resource.
    """

    def __call__(self, errored_request: ErroredRequest) -> Response: ...


class GlobalErrorResource(ErrorResource, Protocol):
    """The last error resource the Router tries. Must never raise."""


@runtime_checkable
class WithMetadata(Protocol):
    """A resource that documents itself.

    The per-method getters raise ``UnsupportedMethod`` for a method the
    resource does not support. ``supported_params_for`` also raises for
    methods that cannot take query parameters, and ``body_spec_for`` for
    methods that cannot take a body.
    """

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def supported_methods(self) -> list[str]: ...

    def is_authenticated(self, method: str) -> bool: ...

    def supported_params_for(self, method: str) -> tuple[ParamInfo, ...]: ...

    def body_spec_for(self, method: str) -> str: ...

    def response_description_for(self, method: str) -> str: ...

    def example_requests_for(self, method: str) -> tuple[Request, ...]: ...
