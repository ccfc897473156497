"""Waypoint — key-based dispatch and endpoint-template HTTP routing.

Route one request to its resource, with an error cascade that always
produces a response.

Basic usage::

    from waypoint import BasicResource, Request, Response, Router

    def show_item(request):
        return Response(f"item {request.endpoint_param('id')}")

    request = Request.from_url("GET", "/items/42")
    router = Router(request)
    router.register("/items/:id<int>", BasicResource({"GET": show_item}))
    response = router.dispatch()

The dispatcher underneath is usable on its own::

    from waypoint import Dispatcher

    formats = Dispatcher({"text/html": render_html, "application/json": render_json})
    formats.dispatch_to_first(request.accepted_content_types, [request])
"""

__version__ = "0.1.0"
__all__ = [
    "AUTO",
    "ApiDocsResource",
    "BasicResource",
    "Computed",
    "ConfigurationError",
    "ContentTypeSelector",
    "DefaultGlobalErrorResource",
    "DefaultPolicy",
    "Dispatcher",
    "ErroredRequest",
    "HTMLErrorResource",
    "HTTPError",
    "InternalServerError",
    "MethodMetadata",
    "MethodNotAllowed",
    "NotAcceptable",
    "NotFound",
    "ParamInfo",
    "Request",
    "ResourceNotImplemented",
    "Response",
    "Router",
    "RouterConfig",
    "RouterPanic",
    "UndispatchableError",
    "UnsupportedMethod",
    "WaypointError",
    "WithMetadata",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "AUTO": "waypoint.dispatch",
    "Computed": "waypoint.dispatch",
    "DefaultPolicy": "waypoint.dispatch",
    "Dispatcher": "waypoint.dispatch",
    "ApiDocsResource": "waypoint.resources",
    "BasicResource": "waypoint.resources",
    "ContentTypeSelector": "waypoint.resources",
    "DefaultGlobalErrorResource": "waypoint.resources",
    "HTMLErrorResource": "waypoint.resources",
    "MethodMetadata": "waypoint.resources",
    "ParamInfo": "waypoint.resources",
    "WithMetadata": "waypoint.resources",
    "ErroredRequest": "waypoint.http.request",
    "Request": "waypoint.http.request",
    "Response": "waypoint.http.response",
    "Router": "waypoint.routing.router",
    "RouterConfig": "waypoint.config",
    "ConfigurationError": "waypoint.errors",
    "HTTPError": "waypoint.errors",
    "InternalServerError": "waypoint.errors",
    "MethodNotAllowed": "waypoint.errors",
    "NotAcceptable": "waypoint.errors",
    "NotFound": "waypoint.errors",
    "ResourceNotImplemented": "waypoint.errors",
    "RouterPanic": "waypoint.errors",
    "UndispatchableError": "waypoint.errors",
    "UnsupportedMethod": "waypoint.errors",
    "WaypointError": "waypoint.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
