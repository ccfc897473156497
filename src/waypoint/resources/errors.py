"""Built-in error resources.

``DefaultGlobalErrorResource`` is what every Router starts with: a plain
text body naming the status code. It cannot fail, so it is safe as the
last step of the error cascade.

``HTMLErrorResource`` renders a small kida template. Rendering can fail,
so register it per endpoint or per status code, not as the global one.
"""

from kida import Environment

from waypoint.config import DEFAULT_ERROR_TEMPLATE, RouterConfig
from waypoint.http.request import ErroredRequest
from waypoint.http.response import Response


class DefaultGlobalErrorResource:
    """Plain-text ``HTTP <code> Error`` response with the error's status."""

    __slots__ = ("default_content_type",)

    def __init__(self, content_type: str = "text/plain; charset=utf-8") -> None:
        self.default_content_type = content_type

    def __call__(self, errored_request: ErroredRequest) -> Response:
        code = errored_request.expected_status
        return Response(
            body=f"HTTP {code} Error",
            status=code,
            headers=(("Content-Type", self.default_content_type), *errored_request.error.headers),
        )


class HTMLErrorResource:
    """Render an HTML error page from a kida template.

    The template receives ``status``, ``reason``, ``detailed_reason``
    (only when *debug* is on, otherwise ``None``), ``method`` and
    ``path``. Output is autoescaped.
    """

    __slots__ = ("_template", "debug", "default_content_type")

    def __init__(
        self,
        template: str = DEFAULT_ERROR_TEMPLATE,
        *,
        debug: bool = False,
        content_type: str = "text/html; charset=utf-8",
        env: Environment | None = None,
    ) -> None:
        env = env or Environment(autoescape=True)
        self._template = env.from_string(template)
        self.debug = debug
        self.default_content_type = content_type

    @classmethod
    def from_config(cls, config: RouterConfig) -> "HTMLErrorResource":
        return cls(
            config.error_template,
            debug=config.debug,
            content_type=config.html_error_content_type,
        )

    def __call__(self, errored_request: ErroredRequest) -> Response:
        error = errored_request.error
        html = self._template.render(
            {
                "status": error.status,
                "reason": error.reason,
                "detailed_reason": error.detailed_reason if self.debug else None,
                "method": errored_request.method,
                "path": errored_request.path,
            }
        )
        return Response(
            body=html,
            status=error.status,
            headers=(("Content-Type", self.default_content_type), *error.headers),
        )
