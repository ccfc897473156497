"""Resources — ready-made request handlers and error resources.

A resource is any callable matching::

    def resource(request: Request, *args) -> Response: ...

and an error resource any callable matching::

    def error_resource(errored_request: ErroredRequest) -> Response: ...

No base class required. Resources that also implement ``WithMetadata``
show up with their documentation in ``ApiDocsResource``.
"""

from waypoint.resources.basic import BasicResource, add_headers
from waypoint.resources.content_type import ContentTypeSelector
from waypoint.resources.docs import ApiDocsResource
from waypoint.resources.errors import DefaultGlobalErrorResource, HTMLErrorResource
from waypoint.resources.metadata import ALL_METHODS, MethodMetadata, ParamInfo
from waypoint.resources.protocol import ErrorResource, GlobalErrorResource, Resource, WithMetadata

__all__ = [
    "ALL_METHODS",
    "ApiDocsResource",
    "BasicResource",
    "ContentTypeSelector",
    "DefaultGlobalErrorResource",
    "ErrorResource",
    "GlobalErrorResource",
    "HTMLErrorResource",
    "MethodMetadata",
    "ParamInfo",
    "Resource",
    "WithMetadata",
    "add_headers",
]
