"""Unit tests for the HTTP client wrapper."""

import pytest
import requests

from api_client import AuthenticationRequired, TransportError
from controllers import handle_session_expiry

from fakes import FakeResponse, failed, ok


class TestRequests:
    def test_anonymous_get_has_no_authorization(self, api, http):
        http.on("GET", "/api/v1/roles", ok([]))
        api.list_roles()
        assert "Authorization" not in http.calls[0]["headers"]

    def test_bearer_token_attached_when_logged_in(self, logged_in, api, http):
        http.on("GET", "/api/v1/profile", ok({}))
        api.get_profile()
        assert http.calls[0]["headers"]["Authorization"] == "Bearer tok-123"

    def test_post_sends_json_body(self, api, http):
        http.on("POST", "/api/v1/auth/login", ok({}))
        api.login("jane@example.com", "secret")
        call = http.calls[0]
        assert call["json"] == {"email": "jane@example.com", "password": "secret"}
        assert call["headers"]["Content-Type"] == "application/json"
        assert call["timeout"] == 5

    def test_delete_sends_no_body(self, admin_session, api, http):
        http.on("DELETE", "/api/v1/admin/users/4", ok())
        api.delete_user(4)
        assert http.calls[0]["json"] is None

    def test_error_status_returns_envelope_verbatim(self, api, http):
        http.on("POST", "/api/v1/auth/register",
                failed("Validation failed", errors=[{"field": "email", "message": "taken"}]))
        envelope = api.register({})
        assert envelope.success is False
        assert envelope.message == "Validation failed"
        assert envelope.field_errors() == {"email": "taken"}


class TestFailures:
    def test_connection_error_is_transport_error(self, api, http):
        http.on("GET", "/api/v1/roles", requests.ConnectionError("refused"))
        with pytest.raises(TransportError):
            api.list_roles()

    def test_non_json_body_is_transport_error(self, api, http):
        http.on("GET", "/api/v1/roles", FakeResponse(502, text="<html>Bad gateway</html>"))
        with pytest.raises(TransportError):
            api.list_roles()

    def test_unauthorized_is_distinct_from_transport_error(self, logged_in, api, http):
        http.on("GET", "/api/v1/profile", FakeResponse(401, {"success": False}))
        with pytest.raises(AuthenticationRequired) as exc:
            api.get_profile()
        assert not isinstance(exc.value, TransportError)

    def test_unauthorized_carries_response_body(self, logged_in, api, http):
        http.on("GET", "/api/v1/profile", failed("Token expired", status=401))
        with pytest.raises(AuthenticationRequired) as exc:
            api.get_profile()
        assert exc.value.envelope.message == "Token expired"
        assert exc.value.envelope.success is False

    @pytest.mark.parametrize("call, method, path", [
        (lambda api: api.get_profile(), "GET", "/api/v1/profile"),
        (lambda api: api.update_profile({}), "PUT", "/api/v1/profile"),
        (lambda api: api.list_users(), "GET", "/api/v1/admin/users"),
        (lambda api: api.delete_role(3), "DELETE", "/api/v1/admin/roles/3"),
        (lambda api: api.create_role("x", ""), "POST", "/api/v1/admin/roles"),
    ])
    def test_any_401_clears_session_and_redirects_to_login(
            self, admin_session, api, http, call, method, path):
        http.on(method, path, FakeResponse(401, {"success": False}))

        with pytest.raises(AuthenticationRequired) as exc:
            call(api)
        assert exc.value.path == path

        target = handle_session_expiry(admin_session)
        assert target == "login"
        assert len(admin_session.storage) == 0
        assert not admin_session.is_logged_in()
