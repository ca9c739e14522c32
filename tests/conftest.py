import pytest

from api_client import ApiClient
from fakes import BASE_URL, FakeHttp
from session import MemoryStorage, SessionContext


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def session(storage):
    return SessionContext(storage).hydrate()


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def api(session, http):
    return ApiClient(session, base_url=BASE_URL, timeout=5, http=http)


@pytest.fixture
def logged_in(session):
    storage = session.storage
    storage.update({
        "token": "tok-123",
        "userId": "7",
        "email": "jane@example.com",
        "firstName": "Jane",
        "lastName": "Doe",
        "roles": '["General User"]',
    })
    return session.hydrate()


@pytest.fixture
def admin_session(session):
    session.storage.update({
        "token": "tok-admin",
        "userId": "1",
        "email": "admin@example.com",
        "firstName": "Ada",
        "lastName": "Admin",
        "roles": '["Admin"]',
    })
    return session.hydrate()
