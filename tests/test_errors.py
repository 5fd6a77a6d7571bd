"""Tests for perch.errors — exception hierarchy and the default error generator."""

import pytest

from perch.errors import (
    ConfigurationError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    PerchError,
    ResponseFinished,
    create_error,
    reason_phrase,
)


class TestHierarchy:
    def test_http_error_is_perch_error(self) -> None:
        assert issubclass(HTTPError, PerchError)

    def test_not_found_is_http_error(self) -> None:
        assert issubclass(NotFound, HTTPError)

    def test_method_not_allowed_is_http_error(self) -> None:
        assert issubclass(MethodNotAllowed, HTTPError)

    def test_configuration_error_is_value_error(self) -> None:
        assert issubclass(ConfigurationError, PerchError)
        assert issubclass(ConfigurationError, ValueError)

    def test_response_finished_is_perch_error(self) -> None:
        assert issubclass(ResponseFinished, PerchError)


class TestHTTPError:
    def test_status_and_detail(self) -> None:
        err = HTTPError(status=400, detail="Bad request body")
        assert err.status == 400
        assert err.status_code == 400
        assert err.detail == "Bad request body"

    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request body")) == "400: Bad request body"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]

    def test_raisable(self) -> None:
        with pytest.raises(HTTPError) as info:
            raise HTTPError(status=418)
        assert info.value.status == 418


class TestMethodNotAllowed:
    def test_defaults(self) -> None:
        err = MethodNotAllowed()
        assert err.status == 405
        assert err.detail == "Method Not Allowed"
        assert err.headers == ()

    def test_custom_detail(self) -> None:
        assert MethodNotAllowed(detail="Nope").detail == "Nope"


class TestNotFound:
    def test_defaults(self) -> None:
        err = NotFound()
        assert err.status == 404
        assert err.detail == "Not Found"


class TestCreateError:
    def test_405(self) -> None:
        err = create_error(405)
        assert isinstance(err, MethodNotAllowed)
        assert err.status == 405
        assert err.status_code == 405
        assert err.detail == "Method Not Allowed"

    def test_404(self) -> None:
        assert isinstance(create_error(404), NotFound)

    def test_other_status_uses_reason_phrase(self) -> None:
        err = create_error(503)
        assert type(err) is HTTPError
        assert err.detail == "Service Unavailable"

    def test_custom_detail_and_headers(self) -> None:
        err = create_error(429, "slow down", headers=(("Retry-After", "5"),))
        assert err.detail == "slow down"
        assert err.headers == (("Retry-After", "5"),)

    @pytest.mark.parametrize("status", [0, 99, 299, 999])
    def test_unknown_status_raises(self, status: int) -> None:
        with pytest.raises(ConfigurationError, match="not a registered HTTP status"):
            create_error(status)


class TestReasonPhrase:
    def test_known(self) -> None:
        assert reason_phrase(204) == "No Content"
        assert reason_phrase(418) == "I'm a Teapot"

    def test_unknown(self) -> None:
        with pytest.raises(ConfigurationError):
            reason_phrase(600)
