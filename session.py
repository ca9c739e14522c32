# session.py
import json
import logging
import os
import tempfile
from collections.abc import MutableMapping

import config

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_ID_KEY = "userId"
EMAIL_KEY = "email"
FIRST_NAME_KEY = "firstName"
LAST_NAME_KEY = "lastName"
ROLES_KEY = "roles"

SESSION_KEYS = (TOKEN_KEY, USER_ID_KEY, EMAIL_KEY, FIRST_NAME_KEY, LAST_NAME_KEY, ROLES_KEY)


# -------------------- Storage --------------------
class MemoryStorage(dict):
    """Non-persistent store, one per Streamlit browser session."""


class JsonFileStorage(MutableMapping):
    """String key/value store persisted as a single JSON object on disk."""

    def __init__(self, path):
        self.path = path
        self._data = self._read()

    def _read(self):
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self):
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self._data[key] = str(value)
        self._write()

    def __delitem__(self, key):
        del self._data[key]
        self._write()

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def clear(self):
        self._data = {}
        self._write()


def default_storage():
    """A fresh store for one browser session.

    ``memory`` (the default) lives inside ``st.session_state``. ``file`` keeps a
    single JSON file on the server, so every browser talking to this server
    sees the same login; only use it for a single-user local install.
    """
    if config.SESSION_STORE == "file":
        logger.warning("Session file %s is shared by every browser session", config.SESSION_FILE)
        return JsonFileStorage(config.SESSION_FILE)
    return MemoryStorage()


def _parse_roles(raw):
    if not raw:
        return []
    try:
        roles = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(roles, list):
        return []
    return [str(r) for r in roles]


# -------------------- Session --------------------
class SessionContext:
    """Client-held token plus cached identity.

    Lives in memory for the page lifetime and mirrors every change into
    ``storage`` so it survives reloads. None of the accessors raise on
    empty or corrupted storage.
    """

    def __init__(self, storage=None):
        self.storage = storage if storage is not None else MemoryStorage()
        self._fields = {}

    def hydrate(self):
        self._fields = {}
        for key in SESSION_KEYS:
            value = self.storage.get(key)
            if value:
                self._fields[key] = value
        return self

    def _set(self, key, value):
        value = "" if value is None else str(value)
        self._fields[key] = value
        self.storage[key] = value

    @property
    def token(self):
        return self._fields.get(TOKEN_KEY) or None

    @property
    def roles(self):
        return _parse_roles(self._fields.get(ROLES_KEY))

    def is_logged_in(self) -> bool:
        return bool(self.token)

    def is_admin(self) -> bool:
        return "Admin" in self.roles

    def get_current_user(self) -> dict:
        return {
            "userId": self._fields.get(USER_ID_KEY),
            "email": self._fields.get(EMAIL_KEY),
            "firstName": self._fields.get(FIRST_NAME_KEY),
            "lastName": self._fields.get(LAST_NAME_KEY),
            "roles": self.roles,
        }

    def save_login(self, result):
        self._set(TOKEN_KEY, result.token)
        self._set(USER_ID_KEY, result.user_id)
        self._set(EMAIL_KEY, result.email)
        self._set(FIRST_NAME_KEY, result.first_name)
        self._set(LAST_NAME_KEY, result.last_name)
        self._set(ROLES_KEY, json.dumps(list(result.roles)))
        logger.info("Session started for user %s", result.user_id)

    def update_profile(self, user):
        self._set(EMAIL_KEY, user.email)
        self._set(FIRST_NAME_KEY, user.first_name)
        self._set(LAST_NAME_KEY, user.last_name)
        self._set(ROLES_KEY, json.dumps(list(user.roles)))

    def logout(self):
        self._fields = {}
        self.storage.clear()
