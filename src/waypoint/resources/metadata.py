"""Documentation metadata for resources.

A resource that implements ``WithMetadata`` can describe itself per HTTP
method: whether it needs authentication, which query parameters it takes,
what body it expects, what it answers with and some example requests.
``Router.aggregate_resource`` factories (``ApiDocsResource``) read it.

HTTP restricts what each method may carry. Only GET, HEAD and DELETE take
documented query parameters, and only POST, PUT, PATCH and DELETE take a
body. The ``check_*`` helpers raise ``UnsupportedMethod`` when a
resource is asked, or told, otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from waypoint.errors import UnsupportedMethod
from waypoint.http.request import Request

if TYPE_CHECKING:
    from waypoint.resources.protocol import WithMetadata

ALL_METHODS: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

_PARAM_METHODS = frozenset({"GET", "HEAD", "DELETE"})
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True, slots=True)
class ParamInfo:
    """One documented query parameter."""

    name: str
    type: str = "string"
    description: str = ""


@dataclass(frozen=True, slots=True)
class MethodMetadata:
    """Everything a resource documents about one of its methods.

    ``examples`` must be safe to dispatch repeatedly: idempotent in effect,
    even for POST.
    """

    authenticated: bool = False
    params: tuple[ParamInfo, ...] = ()
    body_spec: str = ""
    response_description: str = ""
    examples: tuple[Request, ...] = ()


def method_allows_params(method: str) -> bool:
    return method.upper() in _PARAM_METHODS


def method_allows_body(method: str) -> bool:
    return method.upper() in _BODY_METHODS


def check_params_allowed_for(method: str) -> None:
    if not method_allows_params(method):
        msg = f"{method.upper()} method cannot have query parameters"
        raise UnsupportedMethod(msg)


def check_body_allowed_for(method: str) -> None:
    if not method_allows_body(method):
        msg = f"{method.upper()} method cannot have a body"
        raise UnsupportedMethod(msg)


def check_supports_method(resource: WithMetadata, method: str) -> None:
    """Raise ``UnsupportedMethod`` unless *resource* lists *method*."""
    supported = resource.supported_methods
    if method.upper() not in supported:
        msg = (
            f"Resource '{resource.name}' does not support HTTP method "
            f"'{method.upper()}', only: {', '.join(supported)}"
        )
        raise UnsupportedMethod(msg)


def check_method_metadata(method: str, metadata: MethodMetadata) -> None:
    """Reject metadata that documents params or a body *method* cannot carry."""
    if metadata.params:
        check_params_allowed_for(method)
    if metadata.body_spec:
        check_body_allowed_for(method)
