"""Tests for waypoint.errors — exception hierarchy and error messages."""

import pytest

from waypoint.errors import (
    ConfigurationError,
    HTTPError,
    InternalServerError,
    MethodNotAllowed,
    NotAcceptable,
    NotFound,
    ResourceNotImplemented,
    RouterPanic,
    UndispatchableError,
    UnsupportedMethod,
    WaypointError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ConfigurationError, HTTPError, RouterPanic, UndispatchableError, UnsupportedMethod],
    )
    def test_waypoint_errors(self, cls: type) -> None:
        assert issubclass(cls, WaypointError)

    @pytest.mark.parametrize(
        "cls",
        [NotFound, MethodNotAllowed, NotAcceptable, InternalServerError, ResourceNotImplemented],
    )
    def test_http_errors(self, cls: type) -> None:
        assert issubclass(cls, HTTPError)


class TestHTTPError:
    def test_defaults(self) -> None:
        err = HTTPError(status=418)
        assert err.reason == "Unknown"
        assert err.detailed_reason == "Not provided"
        assert err.headers == ()

    def test_str(self) -> None:
        assert str(HTTPError(status=422, reason="Bad widget")) == "422: Bad widget"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]

    def test_raisable(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise HTTPError(status=422, reason="Bad widget", detailed_reason="id must be even")
        assert exc_info.value.status == 422
        assert exc_info.value.detailed_reason == "id must be even"


class TestStatusErrors:
    def test_not_found(self) -> None:
        err = NotFound("Resource at '/x' not found")
        assert err.status == 404
        assert err.reason == "Resource at '/x' not found"

    def test_not_found_default(self) -> None:
        assert NotFound().reason == "Not Found"

    def test_method_not_allowed(self) -> None:
        err = MethodNotAllowed("DELETE", ["POST", "GET"])
        assert err.status == 405
        assert err.reason == "This resource does not support the DELETE method"
        assert err.detailed_reason == "Allowed methods: GET, POST"
        assert dict(err.headers) == {"Allow": "GET, POST"}

    def test_method_not_allowed_custom_reason(self) -> None:
        assert MethodNotAllowed("PUT", ["GET"], reason="Read only").reason == "Read only"

    def test_not_acceptable(self) -> None:
        assert NotAcceptable().status == 406

    def test_internal_server_error(self) -> None:
        err = InternalServerError()
        assert err.status == 500
        assert err.reason == "Unknown internal error"

    def test_not_implemented(self) -> None:
        err = ResourceNotImplemented()
        assert err.status == 501
        assert err.reason == "This resource is currently not implemented"


class TestUndispatchableError:
    def test_default_message(self) -> None:
        assert str(UndispatchableError()) == "Key is not dispatchable"
