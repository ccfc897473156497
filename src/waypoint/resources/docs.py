"""API documentation page built from resource metadata.

Pass ``ApiDocsResource`` to ``Router.aggregate_resource`` and register the
result like any other resource::

    docs = router.aggregate_resource("/items.*", ApiDocsResource, "Items API")
    router.register("/docs", docs)

Resources that do not implement ``WithMetadata`` are listed by template
only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kida import Environment

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.resources.metadata import ParamInfo, method_allows_body, method_allows_params
from waypoint.resources.protocol import WithMetadata

if TYPE_CHECKING:
    from waypoint.routing.router import ResourceInfo

DOCS_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
</head>
<body>
  <h1>{{ title }}</h1>
  {% for endpoint in endpoints %}
  <section>
    <h2>{{ endpoint.template }}</h2>
    {% if endpoint.name %}<h3>{{ endpoint.name }}</h3>{% end %}
    {% if endpoint.description %}<p>{{ endpoint.description }}</p>{% end %}
    {% for method in endpoint.methods %}
    <article>
      <h4>{{ method.method }}{% if method.authenticated %} (authenticated){% end %}</h4>
      {% if method.params %}
      <ul>
        {% for param in method.params %}
        <li><code>{{ param.name }}</code> {{ param.type }}: {{ param.description }}</li>
        {% end %}
      </ul>
      {% end %}
      {% if method.body_spec %}<pre>{{ method.body_spec }}</pre>{% end %}
      {% if method.response_description %}<p>{{ method.response_description }}</p>{% end %}
    </article>
    {% end %}
  </section>
  {% end %}
</body>
</html>
"""


@dataclass(frozen=True, slots=True)
class MethodDoc:
    method: str
    authenticated: bool
    params: tuple[ParamInfo, ...]
    body_spec: str
    response_description: str


@dataclass(frozen=True, slots=True)
class EndpointDoc:
    template: str
    name: str = ""
    description: str = ""
    methods: tuple[MethodDoc, ...] = ()


def describe(template: str, resource: Any) -> EndpointDoc:
    """Collect what *resource* documents about itself."""
    if not isinstance(resource, WithMetadata):
        return EndpointDoc(template)

    methods = tuple(
        MethodDoc(
            method=method,
            authenticated=resource.is_authenticated(method),
            params=resource.supported_params_for(method) if method_allows_params(method) else (),
            body_spec=resource.body_spec_for(method) if method_allows_body(method) else "",
            response_description=resource.response_description_for(method),
        )
        for method in resource.supported_methods
    )
    return EndpointDoc(template, resource.name, resource.description, methods)


class ApiDocsResource:
    """Serve an HTML page documenting the resources in a ``ResourceInfo``."""

    __slots__ = ("_template", "default_content_type", "endpoints", "title")

    def __init__(
        self,
        info: ResourceInfo,
        title: str = "API",
        *,
        template: str = DOCS_TEMPLATE,
        content_type: str = "text/html; charset=utf-8",
        env: Environment | None = None,
    ) -> None:
        env = env or Environment(autoescape=True)
        self._template = env.from_string(template)
        self.title = title
        self.default_content_type = content_type
        self.endpoints = [describe(t, r) for t, r in info.resources.items()]

    def __call__(self, request: Request, *args: Any) -> Response:
        html = self._template.render({"title": self.title, "endpoints": self.endpoints})
        return Response(body=html, headers=(("Content-Type", self.default_content_type),))
