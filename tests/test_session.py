"""Unit tests for session storage and the session context."""

import importlib
import json
import os

import pytest

import config
from models import LoginResult, User
from session import JsonFileStorage, MemoryStorage, SessionContext, default_storage


def _login_result(roles=("General User",)):
    return LoginResult(
        token="tok-1",
        user_id=12,
        email="jane@example.com",
        first_name="Jane",
        last_name="Doe",
        roles=list(roles),
    )


class TestSessionContext:
    def test_empty_storage_is_logged_out(self):
        session = SessionContext(MemoryStorage()).hydrate()
        assert not session.is_logged_in()
        assert not session.is_admin()
        assert session.get_current_user()["roles"] == []

    def test_save_login_writes_every_field(self):
        storage = MemoryStorage()
        session = SessionContext(storage).hydrate()
        session.save_login(_login_result(["Admin"]))

        assert storage["token"] == "tok-1"
        assert storage["userId"] == "12"
        assert json.loads(storage["roles"]) == ["Admin"]
        assert session.is_logged_in()
        assert session.is_admin()

    def test_corrupt_roles_do_not_raise(self):
        storage = MemoryStorage(token="t", roles="{not json")
        session = SessionContext(storage).hydrate()
        assert session.is_logged_in()
        assert session.is_admin() is False
        assert session.get_current_user()["roles"] == []

    def test_roles_that_are_not_a_list_are_ignored(self):
        session = SessionContext(MemoryStorage(roles='"Admin"')).hydrate()
        assert session.is_admin() is False

    def test_update_profile_refreshes_identity(self):
        session = SessionContext(MemoryStorage()).hydrate()
        session.save_login(_login_result())
        user = User(user_id=12, first_name="Janet", last_name="Doe",
                    email="janet@example.com", roles=["Professional"])
        session.update_profile(user)

        current = session.get_current_user()
        assert current["firstName"] == "Janet"
        assert current["email"] == "janet@example.com"
        assert current["roles"] == ["Professional"]
        assert session.token == "tok-1"

    def test_logout_clears_memory_and_storage(self):
        storage = MemoryStorage(unrelated="x")
        session = SessionContext(storage).hydrate()
        session.save_login(_login_result())
        session.logout()

        assert len(storage) == 0
        assert not session.is_logged_in()
        assert session.get_current_user()["email"] is None


class TestJsonFileStorage:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        first = SessionContext(JsonFileStorage(str(path))).hydrate()
        first.save_login(_login_result())

        second = SessionContext(JsonFileStorage(str(path))).hydrate()
        assert second.token == "tok-1"
        assert second.get_current_user()["lastName"] == "Doe"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{{{ broken", encoding="utf-8")
        session = SessionContext(JsonFileStorage(str(path))).hydrate()
        assert not session.is_logged_in()

    def test_clear_empties_file(self, tmp_path):
        path = tmp_path / "session.json"
        storage = JsonFileStorage(str(path))
        storage["token"] = "abc"
        storage.clear()
        assert json.loads(path.read_text(encoding="utf-8")) == {}

    def test_failed_write_leaves_no_temp_file(self, tmp_path, monkeypatch):
        path = tmp_path / "session.json"
        storage = JsonFileStorage(str(path))
        storage["token"] = "abc"

        def boom(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", boom)
        with pytest.raises(OSError):
            storage["token"] = "def"

        assert [p.name for p in tmp_path.iterdir()] == ["session.json"]
        assert json.loads(path.read_text(encoding="utf-8")) == {"token": "abc"}


class TestDefaultStorage:
    def test_default_is_per_browser_memory(self, monkeypatch):
        monkeypatch.delenv("SESSION_STORE", raising=False)
        importlib.reload(config)

        assert config.SESSION_STORE == "memory"
        assert isinstance(default_storage(), MemoryStorage)

    def test_two_browsers_do_not_share_a_login(self, monkeypatch):
        monkeypatch.delenv("SESSION_STORE", raising=False)
        importlib.reload(config)

        browser_a = SessionContext(default_storage()).hydrate()
        browser_a.save_login(_login_result(["Admin"]))
        browser_b = SessionContext(default_storage()).hydrate()

        assert browser_a.is_admin()
        assert not browser_b.is_logged_in()
        assert not browser_b.is_admin()
        assert browser_b.token is None

    def test_file_store_is_opt_in(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "SESSION_STORE", "file")
        monkeypatch.setattr(config, "SESSION_FILE", str(tmp_path / "session.json"))

        storage = default_storage()

        assert isinstance(storage, JsonFileStorage)
        assert storage.path == str(tmp_path / "session.json")
