# api_client.py
import logging

import requests

import config
from models import Envelope

logger = logging.getLogger(__name__)


# -------------------- Errors --------------------
class ApiError(Exception):
    pass


class TransportError(ApiError):
    """Backend unreachable, timed out, or answered with something other than JSON."""


class AuthenticationRequired(ApiError):
    """Backend answered 401; the session is no longer valid."""

    def __init__(self, method, path, envelope=None):
        super().__init__(f"Authentication required ({method} {path})")
        self.method = method
        self.path = path
        self.envelope = envelope or Envelope(success=False)


def _envelope_or_none(response):
    try:
        payload = response.json()
    except ValueError:
        return None
    return Envelope.from_json(payload) if isinstance(payload, dict) else None


# -------------------- Client --------------------
class ApiClient:
    def __init__(self, session, base_url=None, timeout=None, http=None):
        self.session = session
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.API_TIMEOUT
        self.http = http if http is not None else requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _headers(self, with_body: bool) -> dict:
        headers = {}
        if with_body:
            headers["Content-Type"] = "application/json"
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method: str, path: str, body=None) -> Envelope:
        with_body = method in ("POST", "PUT")
        kwargs = {"headers": self._headers(with_body), "timeout": self.timeout}
        if with_body:
            kwargs["json"] = body if body is not None else {}

        try:
            response = self.http.request(method, self.url(path), **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(str(e)) from e

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.status_code == 401:
            logger.info("%s %s returned 401", method, path)
            raise AuthenticationRequired(method, path, _envelope_or_none(response))

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body (status %s)",
                           method, path, response.status_code)
            raise TransportError(f"Invalid JSON response from {path}") from e

        return Envelope.from_json(payload)

    def get(self, path):
        return self.request("GET", path)

    def post(self, path, body):
        return self.request("POST", path, body)

    def put(self, path, body):
        return self.request("PUT", path, body)

    def delete(self, path):
        return self.request("DELETE", path)

    # -------------------- Auth --------------------
    def login(self, email, password):
        return self.post("/api/v1/auth/login", {"email": email, "password": password})

    def register(self, data: dict):
        return self.post("/api/v1/auth/register", data)

    # -------------------- Profile --------------------
    def get_profile(self):
        return self.get("/api/v1/profile")

    def update_profile(self, data: dict):
        return self.put("/api/v1/profile", data)

    def change_password(self, data: dict):
        return self.put("/api/v1/profile/change-password", data)

    # -------------------- Roles --------------------
    def list_roles(self):
        return self.get("/api/v1/roles")

    def create_role(self, name, description):
        return self.post("/api/v1/admin/roles", {"name": name, "description": description})

    def update_role(self, role_id, name, description):
        return self.put(f"/api/v1/admin/roles/{role_id}",
                        {"name": name, "description": description})

    def delete_role(self, role_id):
        return self.delete(f"/api/v1/admin/roles/{role_id}")

    # -------------------- Admin --------------------
    def list_users(self):
        return self.get("/api/v1/admin/users")

    def delete_user(self, user_id):
        return self.delete(f"/api/v1/admin/users/{user_id}")
