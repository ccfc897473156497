"""Tests for waypoint.resources.errors — built-in error resources."""

from waypoint.config import RouterConfig
from waypoint.errors import HTTPError, MethodNotAllowed, NotFound
from waypoint.http.request import ErroredRequest, Request
from waypoint.resources import DefaultGlobalErrorResource, HTMLErrorResource


def _errored(error: HTTPError, path: str = "/items/1") -> ErroredRequest:
    return ErroredRequest(Request.from_url("GET", path), error)


class TestDefaultGlobalErrorResource:
    def test_body_and_status(self) -> None:
        response = DefaultGlobalErrorResource()(_errored(HTTPError(status=422)))
        assert response.status == 422
        assert response.text == "HTTP 422 Error"
        assert response.content_type == "text/plain; charset=utf-8"

    def test_custom_content_type(self) -> None:
        resource = DefaultGlobalErrorResource("text/plain")
        assert resource(_errored(NotFound())).content_type == "text/plain"

    def test_error_headers_copied(self) -> None:
        response = DefaultGlobalErrorResource()(_errored(MethodNotAllowed("PUT", ["GET"])))
        assert response.status == 405
        assert response.get_header("Allow") == "GET"


class TestHTMLErrorResource:
    def test_renders_status_and_reason(self) -> None:
        response = HTMLErrorResource()(_errored(NotFound("Resource at '/items/1' not found")))
        assert response.status == 404
        assert response.content_type == "text/html; charset=utf-8"
        assert "HTTP 404 Error" in response.text
        assert "not found" in response.text

    def test_detailed_reason_hidden_by_default(self) -> None:
        error = HTTPError(status=500, reason="Oops", detailed_reason="secret stack trace")
        assert "secret stack trace" not in HTMLErrorResource()(_errored(error)).text

    def test_detailed_reason_shown_in_debug(self) -> None:
        error = HTTPError(status=500, reason="Oops", detailed_reason="secret stack trace")
        assert "secret stack trace" in HTMLErrorResource(debug=True)(_errored(error)).text

    def test_autoescape(self) -> None:
        error = HTTPError(status=400, reason="<script>alert(1)</script>")
        text = HTMLErrorResource()(_errored(error)).text
        assert "<script>" not in text
        assert "&lt;script&gt;" in text

    def test_custom_template(self) -> None:
        resource = HTMLErrorResource("{{ status }} {{ method }} {{ path }}")
        assert resource(_errored(NotFound(), "/x")).text == "404 GET /x"

    def test_from_config(self) -> None:
        config = RouterConfig(debug=True, error_template="{{ detailed_reason }}")
        resource = HTMLErrorResource.from_config(config)
        error = HTTPError(status=500, detailed_reason="details")
        assert resource(_errored(error)).text == "details"
        assert resource.debug is True

    def test_error_headers_copied(self) -> None:
        response = HTMLErrorResource()(_errored(MethodNotAllowed("PUT", ["GET"])))
        assert response.get_header("Allow") == "GET"
