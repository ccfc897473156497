"""Content negotiation on the Accept header.

A ContentTypeSelector picks the response generator registered for the
client's most preferred media type::

    show = ContentTypeSelector(
        {"text/html": render_html, "application/json": render_json},
        default_content_type="text/html",
    )
    items = BasicResource({"GET": show})
"""

from collections.abc import Callable, Mapping
from typing import Any

from waypoint.dispatch import DefaultPolicy, Dispatcher
from waypoint.errors import NotAcceptable, UndispatchableError
from waypoint.http.request import Request
from waypoint.http.response import Response


class ContentTypeSelector:
    """Dispatch a request to the generator for the best accepted media type.

    With a ``default_content_type`` the selector falls back to that
    generator when nothing in the Accept header is registered; without
    one it raises ``NotAcceptable`` (406).
    """

    __slots__ = ("_default_content_type", "_types")

    def __init__(
        self,
        generators: Mapping[str, Callable[..., Response]] | None = None,
        default_content_type: str | None = None,
    ) -> None:
        policy = (
            DefaultPolicy.fixed(default_content_type)
            if default_content_type is not None
            else DefaultPolicy.none()
        )
        self._types = Dispatcher(generators, policy)
        self._default_content_type = default_content_type

    @property
    def default_content_type(self) -> str | None:
        return self._default_content_type

    @property
    def supported_types(self) -> list[str]:
        return self._types.keys()

    def register(self, content_type: str, generator: Callable[..., Response]) -> None:
        self._types.register(content_type, generator)

    def __call__(self, request: Request, *args: Any) -> Response:
        accepted = request.accepted_content_types
        try:
            generator = self._types.lookup_first(accepted)
        except UndispatchableError:
            raise NotAcceptable(self._not_acceptable_reason(accepted)) from None
        return generator(request, *args)

    def _not_acceptable_reason(self, accepted: list[str]) -> str:
        if accepted:
            return (
                f"None of the content types in '{', '.join(accepted)}' are "
                "supported by this resource"
            )
        if self._default_content_type is not None:
            return (
                "No content type(s) requested, and the default of "
                f"'{self._default_content_type}' was not found"
            )
        return "No content type(s) requested, and the resource has no default content type"
