"""Tests for the login and registration page controllers."""

import requests

from controllers import INVALID_CREDENTIALS, NETWORK_ERROR, LoginController, RegisterController

from fakes import FakeResponse, failed, ok, role_json

LOGIN_DATA = {
    "token": "jwt-abc",
    "tokenType": "Bearer",
    "userId": 42,
    "email": "john@example.com",
    "firstName": "John",
    "lastName": "Smith",
    "roles": ["Admin", "Professional"],
}


def _fill_login(c, email="john@example.com", password="Secret1!"):
    c.change("email", email)
    c.change("password", password)


class TestLoginController:
    def test_success_stores_session_and_goes_to_dashboard(self, api, http, session):
        http.on("POST", "/api/v1/auth/login", ok(LOGIN_DATA))
        c = LoginController(api, session)
        _fill_login(c)

        c.submit()

        assert session.storage["token"] == "jwt-abc"
        assert session.roles == ["Admin", "Professional"]
        assert session.is_admin()
        assert c.redirect == "dashboard"
        assert c.form.success.startswith("Login successful")

    def test_server_failure_shows_message_and_writes_nothing(self, api, http, session):
        http.on("POST", "/api/v1/auth/login", failed("Invalid credentials", status=400))
        c = LoginController(api, session)
        _fill_login(c)

        c.submit()

        assert c.form.error == "Invalid credentials"
        assert len(session.storage) == 0
        assert c.redirect is None
        assert c.form.submitting is False

    def test_rejected_credentials_401_is_a_failed_login(self, api, http, session):
        http.on("POST", "/api/v1/auth/login", failed("Invalid email or password", status=401))
        c = LoginController(api, session)
        _fill_login(c)

        c.submit()

        assert c.form.error == "Invalid email or password"
        assert c.form.submitting is False
        assert c.redirect is None
        assert len(session.storage) == 0

    def test_401_without_body_uses_fallback_message(self, api, http, session):
        http.on("POST", "/api/v1/auth/login", FakeResponse(401, text=""))
        c = LoginController(api, session)
        _fill_login(c)

        c.submit()

        assert c.form.error == INVALID_CREDENTIALS
        assert not session.is_logged_in()

    def test_invalid_fields_never_reach_network(self, api, http, session):
        c = LoginController(api, session)
        _fill_login(c, email="not-an-email", password="")

        c.submit()

        assert http.calls == []
        assert set(c.form.errors) == {"email", "password"}

    def test_network_failure_shows_generic_banner(self, api, http, session):
        http.on("POST", "/api/v1/auth/login", requests.ConnectionError("refused"))
        c = LoginController(api, session)
        _fill_login(c)

        c.submit()

        assert c.form.error == NETWORK_ERROR
        assert not session.is_logged_in()

    def test_typing_clears_banner_and_field_error(self, api, http, session):
        http.on("POST", "/api/v1/auth/login", failed("Invalid credentials"))
        c = LoginController(api, session)
        _fill_login(c, email="bad")
        c.submit()
        assert c.form.error_for("email")

        c.change("email", "john@example.com")
        assert c.form.error_for("email") is None

        c.submit()
        assert c.form.error == "Invalid credentials"
        c.change("password", "Other1!x")
        assert c.form.error == ""

    def test_logged_in_user_is_sent_to_dashboard(self, logged_in, api):
        assert LoginController(api, logged_in).guard() == "dashboard"


REGISTRATION = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane@example.com",
    "password": "Abcdefg1!",
    "confirmPassword": "Abcdefg1!",
    "phoneNumber": "+14155551234",
    "country": "US",
}


class TestRegisterController:
    def _filled(self, api, session):
        c = RegisterController(api, session)
        for name, value in REGISTRATION.items():
            c.change(name, value)
        c.change("roles", ["General User"])
        return c

    def test_load_roles(self, api, http, session):
        http.on("GET", "/api/v1/roles", ok([role_json(1, "Admin"), role_json(2, "General User")]))
        c = RegisterController(api, session)
        c.load()
        assert [r.name for r in c.roles] == ["Admin", "General User"]

    def test_roles_load_failure_is_quiet(self, api, http, session):
        http.on("GET", "/api/v1/roles", requests.Timeout("slow"))
        c = RegisterController(api, session)
        c.load()
        assert c.roles == []
        assert c.form.error == ""

    def test_role_selection_replaces_list_and_clears_error(self, api, http, session):
        c = RegisterController(api, session)
        c.submit()
        assert c.form.error_for("roles") == "Please select at least one role"

        assert c.change("roles", ["Professional", "Business Owner"]) is True
        assert c.change("roles", ["Professional", "Business Owner"]) is False
        c.change("roles", ["Business Owner"])

        assert c.form.values["roles"] == ["Business Owner"]
        assert c.form.error_for("roles") is None
        assert http.calls == []

    def test_success_posts_form_and_goes_to_login(self, api, http, session):
        http.on("POST", "/api/v1/auth/register", ok(None, "Registered"))
        c = self._filled(api, session)

        c.submit()

        body = http.calls_to("POST", "/api/v1/auth/register")[0]["json"]
        assert body["email"] == "jane@example.com"
        assert body["roles"] == ["General User"]
        assert c.redirect == "login"
        assert c.form.values["email"] == ""

    def test_structured_errors_map_to_fields(self, api, http, session):
        http.on("POST", "/api/v1/auth/register", failed(
            "Validation failed",
            errors=[{"field": "email", "message": "Email already registered"}],
        ))
        c = self._filled(api, session)

        c.submit()

        assert c.form.error_for("email") == "Email already registered"
        assert c.form.error == ""
        assert c.redirect is None

    def test_unstructured_failure_uses_fallback(self, api, http, session):
        http.on("POST", "/api/v1/auth/register", failed(""))
        c = self._filled(api, session)

        c.submit()

        assert c.form.error == "Registration failed"

    def test_missing_role_blocks_submission(self, api, http, session):
        c = self._filled(api, session)
        c.change("roles", [])

        c.submit()

        assert http.calls == []
        assert c.form.error_for("roles") == "Please select at least one role"
