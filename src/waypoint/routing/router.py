"""Router — dispatch one request to its resource, then cascade on errors.

Normal operation
----------------

Register resources against endpoint templates, then dispatch::

    router = Router(request)
    router.register("/items/:id<int>", BasicResource({"GET": show_item}))
    response = router.dispatch()

The request path is matched against the registered templates in
registration order. The winning template is bound to the request (its
typed parameters become ``request.endpoint_params``) and the resource
registered for it is called with the request.

Error handling
--------------

If no template matches, or the resource raises ``HTTPError``, an
``ErroredRequest`` is built and offered, in turn, to the stages below.
An ``UndispatchableError`` escaping the resource (from its own
dispatcher, say) counts as a 404 with no source resource.

1. the error resource registered for the endpoint template,
2. the error resource registered for the error's status code,
3. the global error resource.

A step that is not registered, or that raises anything at all, passes the
errored request on to the next. The global error resource must not raise;
if it does the Router raises ``RouterPanic`` and gives up.

Unexpected exceptions from a resource are logged and answered as a 500 by
the global error resource directly (see ``handle_exception``).

A Router routes exactly one request. Register everything before calling
``dispatch``; registries must not change while it runs.
"""

import logging
import traceback
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from waypoint.config import RouterConfig
from waypoint.dispatch import DefaultPolicy, Dispatcher
from waypoint.dispatch.resolution import first_or_default
from waypoint.errors import (
    ConfigurationError,
    HTTPError,
    InternalServerError,
    NotFound,
    RouterPanic,
    UndispatchableError,
)
from waypoint.http.request import ErroredRequest, Request
from waypoint.http.response import Response
from waypoint.resources.errors import DefaultGlobalErrorResource
from waypoint.resources.protocol import ErrorResource, GlobalErrorResource, Resource
from waypoint.routing.endpoint import matching_templates, parse_endpoint
from waypoint.routing.paths import app_path_for

logger = logging.getLogger("waypoint.router")


class _CatchAll:
    __slots__ = ()

    def __repr__(self) -> str:
        return "CATCH_ALL"


# Key of the resource used when no endpoint template matches
CATCH_ALL = _CatchAll()


@dataclass(frozen=True, slots=True)
class ResourceInfo:
    """What ``Router.aggregate_resource`` hands to the aggregate's factory."""

    resources: dict[str, Resource]
    endpoint_error_resources: dict[str, ErrorResource]
    code_error_resources: Dispatcher
    global_error_resource: GlobalErrorResource


class Router:
    """Routes one request to the resource registered for its endpoint.

    Holds three independent dispatchers (resources by template, error
    resources by template, error resources by status code) and exactly one
    global error resource, which starts out as ``DefaultGlobalErrorResource``.
    """

    __slots__ = ("_code_errors", "_endpoint_errors", "_global_error", "_resources", "config", "request")

    def __init__(self, request: Request, config: RouterConfig | None = None) -> None:
        self.request = request
        self.config = config or RouterConfig()

        self._resources = Dispatcher(default=DefaultPolicy.fixed(CATCH_ALL))
        self._endpoint_errors = Dispatcher()
        self._code_errors = Dispatcher()
        self._global_error: GlobalErrorResource = DefaultGlobalErrorResource(
            self.config.error_content_type
        )

    # -- Registration --

    def _template_for(self, template: str) -> str:
        template = app_path_for(self.config.app_root, template)
        parse_endpoint(template)
        return template

    def register(
        self,
        template: str,
        resource: Resource,
        error_resource: ErrorResource | None = None,
    ) -> None:
        """Register *resource* for *template*, and optionally its error resource.

        *template* is relative to ``config.app_root``. Registering a
        template again replaces its resource (and error resource, if one
        is given).

        Raises ``ConfigurationError`` if *template* is malformed.
        """
        template = self._template_for(template)
        self._resources.register(template, resource)
        if error_resource is not None:
            self._endpoint_errors.register(template, error_resource)

    def register_endpoint_error(self, template: str, error_resource: ErrorResource) -> None:
        """Register the error resource tried first for errors at *template*.

        Works whether or not a resource is registered for *template* yet.
        """
        self._endpoint_errors.register(self._template_for(template), error_resource)

    def register_code_error(self, code: int, error_resource: ErrorResource) -> None:
        """Register the error resource for ``HTTPError``s with status *code*."""
        self._code_errors.register(code, error_resource)

    def register_global_error(self, global_error_resource: GlobalErrorResource) -> None:
        """Replace the global error resource. It can be replaced but never unset."""
        if global_error_resource is None:
            msg = "A Router must always have a global error resource"
            raise ConfigurationError(msg)
        self._global_error = global_error_resource

    def register_fallback(self, resource: Resource) -> None:
        """Register a resource for requests that match no endpoint template."""
        self._resources.register(CATCH_ALL, resource)

    # -- Introspection --

    @property
    def templates(self) -> list[str]:
        """Registered endpoint templates, in registration order."""
        return [key for key in self._resources.keys() if isinstance(key, str)]

    @property
    def global_error_resource(self) -> GlobalErrorResource:
        return self._global_error

    # -- Dispatch --

    def find_template(self) -> str | None:
        """The first registered template whose shape fits the request path."""
        return self._resources.resolve(
            self.request.path,
            [matching_templates(self._resources.keys), first_or_default(None)],
        )

    def dispatch(self) -> Response:
        """Dispatch the request and return the response to send.

        Always returns a response, unless the global error resource breaks
        its contract, in which case ``RouterPanic`` is raised.
        """
        request = self.request
        template = self.find_template()

        if template is not None and not request.bind_endpoint(template):
            error = NotFound(
                f"Resource at '{request.path}' not found: validation against "
                f"resource endpoint template '{template}' failed"
            )
            return self._cascade(ErroredRequest(request, error), template)

        try:
            resource = self._resources.lookup(template, [request])
        except UndispatchableError:
            error = NotFound(f"Resource at '{request.path}' not found")
            return self._cascade(ErroredRequest(request, error), template)

        try:
            return resource(request)
        except HTTPError as exc:
            return self._cascade(ErroredRequest(request, exc, resource), template)
        except UndispatchableError:
            error = NotFound(f"Resource at '{request.path}' not found")
            return self._cascade(ErroredRequest(request, error), template)
        except Exception as exc:
            return self.handle_exception(exc)

    def _cascade(self, errored: ErroredRequest, template: str | None) -> Response:
        error = errored.error
        logger.debug(
            "%d %s %s: %s", error.status, errored.method, errored.path, error.reason
        )

        endpoint = template if template is not None else errored.path
        try:
            return self._endpoint_errors.dispatch_to_key(endpoint, [errored])
        except UndispatchableError:
            pass
        except Exception:
            logger.debug("Error resource for endpoint %r failed", endpoint, exc_info=True)

        try:
            return self._code_errors.dispatch_to_key(error.status, [errored])
        except UndispatchableError:
            pass
        except Exception:
            logger.debug("Error resource for status %d failed", error.status, exc_info=True)

        return self._respond_globally(errored)

    def _respond_globally(self, errored: ErroredRequest) -> Response:
        try:
            return self._global_error(errored)
        except Exception as exc:
            logger.critical(
                "Global error resource %r raised while answering %d %s %s",
                self._global_error,
                errored.error.status,
                errored.method,
                errored.path,
                exc_info=True,
            )
            msg = "The global error resource must not raise"
            raise RouterPanic(msg) from exc

    def handle_exception(self, exc: BaseException) -> Response:
        """Answer an unexpected exception with a 500 from the global error resource.

        The source resource is unknown (``None``). The endpoint and status
        error resources are not consulted.
        """
        logger.error(
            "500 %s %s", self.request.method, self.request.path, exc_info=exc
        )
        details = "".join(traceback.format_exception(exc))
        error = InternalServerError("Unknown internal error", f"{exc}\n{details}")
        return self._respond_globally(ErroredRequest(self.request, error))

    # -- Support tools --

    def aggregate_resource(
        self,
        endpoint_regex: str,
        factory: Callable[..., Any],
        *args: Any,
    ) -> Any:
        """Build a resource from every registered resource matching *endpoint_regex*.

        *endpoint_regex* is relative to ``config.app_root`` and must match
        whole templates (``"/items.*"``). *factory* is called with a
        ``ResourceInfo`` followed by *args*. Useful for API documentation
        pages that describe a group of endpoints.
        """
        pattern = app_path_for(self.config.app_root, endpoint_regex)
        matched: list[Hashable] = self._resources.resolve(
            pattern,
            [
                self._resources.computed_key_mutator(),
                self._resources.registered_matching_mutator(),
            ],
        )
        templates = [key for key in matched if isinstance(key, str)]

        info = ResourceInfo(
            resources=self._resources.mapping(templates),
            endpoint_error_resources=self._endpoint_errors.mapping(templates),
            code_error_resources=self._code_errors,
            global_error_resource=self._global_error,
        )
        return factory(info, *args)
