# controllers.py
import logging
import time
from concurrent.futures import ThreadPoolExecutor

import config
from api_client import ApiError, AuthenticationRequired, TransportError
from models import DELETE_ROLE, DELETE_USER, ConfirmationRequest, LoginResult, Role, User
from validation import (
    login_errors,
    password_change_errors,
    profile_errors,
    registration_errors,
    role_form_error,
)
from viewmodel import (
    BannerShown,
    BannersCleared,
    FieldChanged,
    FieldErrorsReceived,
    FormLoaded,
    FormReset,
    FormState,
    SubmitFailed,
    SubmitStarted,
    SubmitSucceeded,
    ValidationFailed,
    expire_banners,
    update,
)

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please try again."
INVALID_CREDENTIALS = "Invalid email or password"

LOGIN_FIELDS = {"email": "", "password": ""}
REGISTER_FIELDS = {
    "firstName": "",
    "lastName": "",
    "email": "",
    "password": "",
    "confirmPassword": "",
    "phoneNumber": "",
    "country": "",
    "roles": [],
}
PASSWORD_FIELDS = {"currentPassword": "", "newPassword": "", "confirmNewPassword": ""}
ROLE_FIELDS = {"name": "", "description": ""}


# -------------------- Coordination --------------------
def handle_session_expiry(session):
    """Single place that reacts to a 401: drop the session, send the user to login."""
    session.logout()
    logger.info("Session expired; cleared local session")
    return "login"


def load_concurrently(*calls):
    """Run independent GETs in parallel and wait for all of them.

    Returns one ``(envelope, error)`` pair per call. A failing call does not
    cancel the others; a 401 from any of them is re-raised once all are done.
    """
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(call) for call in calls]

    outcomes = []
    for future in futures:
        error = future.exception()
        if error is not None and not isinstance(error, ApiError):
            raise error
        outcomes.append((None, error) if error else (future.result(), None))

    for _, error in outcomes:
        if isinstance(error, AuthenticationRequired):
            raise error
    return outcomes


def _ok(outcome):
    envelope, error = outcome
    return error is None and envelope is not None and envelope.success


# -------------------- Base --------------------
class PageController:
    banner_seconds = config.DASHBOARD_BANNER_SECONDS

    def __init__(self, api, session):
        self.api = api
        self.session = session
        self.redirect = None
        self.form = FormState()

    def guard(self):
        return None

    def dispatch(self, event):
        self.form = update(self.form, event)

    def tick(self, now=None):
        now = time.monotonic() if now is None else now
        self.form = expire_banners(self.form, now, self.banner_seconds)

    def change(self, name, value):
        """Record a field edit; returns False when the value did not change."""
        if self.form.values.get(name) == value:
            return False
        self.dispatch(FieldChanged(name, value))
        return True

    def _fail(self, envelope, fallback):
        if envelope.errors:
            self.dispatch(FieldErrorsReceived(envelope.field_errors()))
        else:
            self.dispatch(SubmitFailed(envelope.message or fallback))


# -------------------- Login --------------------
class LoginController(PageController):
    def __init__(self, api, session):
        super().__init__(api, session)
        self.form = FormState(values=dict(LOGIN_FIELDS))

    def guard(self):
        return "dashboard" if self.session.is_logged_in() else None

    def change(self, name, value):
        changed = super().change(name, value)
        if changed and self.form.has_banner:
            self.dispatch(BannersCleared())
        return changed

    def submit(self):
        if self.form.submitting:
            return
        self.dispatch(BannersCleared())

        errors = login_errors(self.form.values)
        if errors:
            self.dispatch(ValidationFailed(errors))
            return

        self.dispatch(SubmitStarted())
        try:
            envelope = self.api.login(self.form.values["email"], self.form.values["password"])
        except TransportError:
            self.dispatch(SubmitFailed(NETWORK_ERROR))
            return
        except AuthenticationRequired as e:
            # login is sent without a token, so a 401 is a rejected password
            self._fail(e.envelope, INVALID_CREDENTIALS)
            return

        if envelope.success and envelope.data:
            self.session.save_login(LoginResult.from_json(envelope.data))
            self.dispatch(SubmitSucceeded("Login successful! Redirecting to dashboard..."))
            self.redirect = "dashboard"
        else:
            self._fail(envelope, "Login failed")


# -------------------- Register --------------------
class RegisterController(PageController):
    def __init__(self, api, session):
        super().__init__(api, session)
        self.form = FormState(values=dict(REGISTER_FIELDS))
        self.roles = []
        self.loaded = False

    def guard(self):
        return "dashboard" if self.session.is_logged_in() else None

    def load(self):
        self.loaded = True
        try:
            envelope = self.api.list_roles()
        except TransportError as e:
            logger.warning("Failed to fetch roles: %s", e)
            return
        if envelope.success:
            self.roles = [Role.from_json(r) for r in envelope.data or []]

    def submit(self):
        if self.form.submitting:
            return
        self.dispatch(BannersCleared())

        errors = registration_errors(self.form.values)
        if errors:
            self.dispatch(ValidationFailed(errors))
            return

        self.dispatch(SubmitStarted())
        try:
            envelope = self.api.register(dict(self.form.values))
        except TransportError:
            self.dispatch(SubmitFailed(NETWORK_ERROR))
            return

        if envelope.success:
            self.dispatch(FormReset(dict(REGISTER_FIELDS)))
            self.dispatch(SubmitSucceeded("Registration successful! Redirecting to login..."))
            self.redirect = "login"
        else:
            self._fail(envelope, "Registration failed")


# -------------------- Dashboard --------------------
class DashboardController(PageController):
    banner_seconds = config.DASHBOARD_BANNER_SECONDS

    def __init__(self, api, session):
        super().__init__(api, session)
        self.user = None
        self.roles = []
        self.loading = True
        self.editing = False
        self.show_password_change = False
        self.password_form = FormState(values=dict(PASSWORD_FIELDS))

    def guard(self):
        return None if self.session.is_logged_in() else "login"

    def is_admin(self):
        return self.session.is_admin()

    def load(self):
        self.loading = True
        profile, roles = load_concurrently(self.api.get_profile, self.api.list_roles)
        failed = False

        if _ok(profile) and profile[0].data:
            self.user = User.from_json(profile[0].data)
            self.dispatch(FormLoaded(self.user.form_values()))
        else:
            logger.warning("Profile load failed: %s", profile[1] or profile[0].message)
            failed = True

        if _ok(roles):
            self.roles = [Role.from_json(r) for r in roles[0].data or []]
        else:
            logger.warning("Roles load failed: %s", roles[1] or roles[0].message)
            failed = True

        if failed:
            self.dispatch(BannerShown("error", "Failed to load profile data"))
        self.loading = False

    def tick(self, now=None):
        now = time.monotonic() if now is None else now
        super().tick(now)
        self.password_form = expire_banners(self.password_form, now, self.banner_seconds)

    # ---------- profile ----------
    def start_edit(self):
        if self.user is None:
            return
        self.editing = True
        self.dispatch(FormLoaded(self.user.form_values()))

    def cancel_edit(self):
        self.editing = False
        if self.user is not None:
            self.dispatch(FormReset(self.user.form_values()))

    def save_profile(self):
        if self.form.submitting:
            return
        self.dispatch(BannersCleared())

        errors = profile_errors(self.form.values)
        if errors:
            self.dispatch(ValidationFailed(errors))
            return

        self.dispatch(SubmitStarted())
        try:
            envelope = self.api.update_profile(dict(self.form.values))
        except TransportError:
            self.dispatch(SubmitFailed(NETWORK_ERROR))
            return

        if envelope.success and envelope.data:
            self.user = User.from_json(envelope.data)
            self.session.update_profile(self.user)
            self.editing = False
            self.dispatch(FormLoaded(self.user.form_values()))
            self.dispatch(SubmitSucceeded("Profile updated successfully!"))
        else:
            self._fail(envelope, "Update failed")

    # ---------- password ----------
    def open_password_change(self):
        self.show_password_change = True

    def close_password_change(self):
        self.show_password_change = False
        self.password_form = update(self.password_form, FormReset(dict(PASSWORD_FIELDS)))
        self.password_form = update(self.password_form, BannersCleared())

    def change_password_field(self, name, value):
        if self.password_form.values.get(name) != value:
            self.password_form = update(self.password_form, FieldChanged(name, value))

    def change_password(self):
        form = self.password_form
        if form.submitting:
            return
        form = update(form, BannersCleared())

        errors = password_change_errors(form.values)
        if errors:
            self.password_form = update(form, ValidationFailed(errors))
            return

        self.password_form = update(form, SubmitStarted())
        try:
            envelope = self.api.change_password(dict(form.values))
        except TransportError:
            self.password_form = update(self.password_form, SubmitFailed(NETWORK_ERROR))
            return

        if envelope.success:
            self.show_password_change = False
            form = update(self.password_form, FormReset(dict(PASSWORD_FIELDS)))
            self.password_form = update(form, SubmitSucceeded("Password changed successfully!"))
        elif envelope.errors:
            self.password_form = update(
                self.password_form, FieldErrorsReceived(envelope.field_errors()))
        else:
            self.password_form = update(
                self.password_form, SubmitFailed(envelope.message or "Password change failed"))

    def logout(self):
        self.session.logout()
        self.redirect = "home"


# -------------------- Admin --------------------
class AdminController(PageController):
    banner_seconds = config.ADMIN_BANNER_SECONDS
    tabs = ("users", "roles", "overview")

    def __init__(self, api, session):
        super().__init__(api, session)
        self.users = []
        self.roles = []
        self.loading = True
        self.tab = "users"

        self.confirmation = None
        self.deleting_user_id = None
        self.deleting_role_id = None

        self.show_create_role = False
        self.create_form = FormState(values=dict(ROLE_FIELDS))
        self.creating_role = False

        self.editing_role = None
        self.edit_form = FormState(values=dict(ROLE_FIELDS))
        self.updating_role = False

    def guard(self):
        if not self.session.is_logged_in() or not self.session.is_admin():
            return "dashboard"
        return None

    def set_tab(self, tab):
        if tab in self.tabs:
            self.tab = tab

    def _banner(self, kind, message):
        self.dispatch(BannerShown(kind, message))

    def _clear_banners(self):
        self.dispatch(BannersCleared())

    # ---------- loading ----------
    def load(self):
        self.loading = True
        users, roles = load_concurrently(self.api.list_users, self.api.list_roles)

        if _ok(users):
            self.users = [User.from_json(u) for u in users[0].data or []]
        if _ok(roles):
            self.roles = [Role.from_json(r) for r in roles[0].data or []]
        if not (_ok(users) and _ok(roles)):
            logger.warning("Admin data load incomplete: users=%s roles=%s",
                           users[1] or users[0].success, roles[1] or roles[0].success)
            self._banner("error", "Failed to load admin data")
        self.loading = False

    def _reload_users(self):
        try:
            envelope = self.api.list_users()
        except TransportError as e:
            logger.warning("Failed to reload users: %s", e)
            return
        if envelope.success:
            self.users = [User.from_json(u) for u in envelope.data or []]

    def _reload_roles(self):
        try:
            envelope = self.api.list_roles()
        except TransportError as e:
            logger.warning("Failed to reload roles: %s", e)
            return
        if envelope.success:
            self.roles = [Role.from_json(r) for r in envelope.data or []]

    # ---------- row state ----------
    def is_user_deletion_in_progress(self, user_id):
        pending = (self.confirmation is not None
                   and self.confirmation.kind == DELETE_USER
                   and self.confirmation.target_id == user_id)
        return self.deleting_user_id == user_id or pending

    def is_role_deletion_in_progress(self, role_id):
        pending = (self.confirmation is not None
                   and self.confirmation.kind == DELETE_ROLE
                   and self.confirmation.target_id == role_id)
        return self.deleting_role_id == role_id or pending

    def can_delete_user(self, user):
        return not user.is_admin and not self.is_user_deletion_in_progress(user.user_id)

    def can_edit_role(self, role):
        return not role.is_system

    def can_delete_role(self, role):
        return not role.is_system and not self.is_role_deletion_in_progress(role.role_id)

    @property
    def deleting(self):
        return self.deleting_user_id is not None or self.deleting_role_id is not None

    # ---------- confirmation ----------
    def request_delete_user(self, user):
        if not self.can_delete_user(user):
            logger.debug("Delete refused for user %s", user.user_id)
            return False
        self.confirmation = ConfirmationRequest.for_user(user)
        self._clear_banners()
        return True

    def request_delete_role(self, role):
        if not self.can_delete_role(role):
            logger.debug("Delete refused for role %s", role.name)
            return False
        self.confirmation = ConfirmationRequest.for_role(role)
        self._clear_banners()
        return True

    def cancel_confirmation(self):
        if not self.deleting:
            self.confirmation = None

    def confirm(self):
        request = self.confirmation
        if request is None or self.deleting:
            return
        if request.kind == DELETE_USER:
            self._delete_user(request)
        elif request.kind == DELETE_ROLE:
            self._delete_role(request)

    def _delete_user(self, request):
        self.deleting_user_id = request.target_id
        try:
            envelope = self.api.delete_user(request.target_id)
            if envelope.success:
                self._banner("success", f'User "{request.target_name}" deleted successfully')
                self._reload_users()
            else:
                self._banner("error", envelope.message or "Failed to delete user")
        except TransportError:
            self._banner("error", NETWORK_ERROR)
        finally:
            self.deleting_user_id = None
            self.confirmation = None

    def _delete_role(self, request):
        self.deleting_role_id = request.target_id
        try:
            envelope = self.api.delete_role(request.target_id)
            if envelope.success:
                self._banner("success", f'Role "{request.target_name}" deleted successfully')
                self._reload_roles()
            else:
                self._banner("error", envelope.message or "Failed to delete role")
        except TransportError:
            self._banner("error", NETWORK_ERROR)
        finally:
            self.deleting_role_id = None
            self.confirmation = None

    # ---------- role forms ----------
    def open_create_role(self):
        self.show_create_role = True
        self._clear_banners()

    def close_create_role(self):
        self.show_create_role = False
        self.create_form = update(self.create_form, FormReset(dict(ROLE_FIELDS)))
        self._clear_banners()

    def change_create_field(self, name, value):
        if self.create_form.values.get(name) != value:
            self.create_form = update(self.create_form, FieldChanged(name, value))

    def create_role(self):
        if self.creating_role:
            return
        self._clear_banners()
        error = role_form_error(self.create_form.values)
        if error:
            self._banner("error", error)
            return

        self.creating_role = True
        try:
            envelope = self.api.create_role(
                self.create_form.values["name"].strip(),
                (self.create_form.values.get("description") or "").strip(),
            )
            if envelope.success:
                self._banner("success", "Role created successfully")
                self.show_create_role = False
                self.create_form = update(self.create_form, FormReset(dict(ROLE_FIELDS)))
                self._reload_roles()
            else:
                self._banner("error", envelope.message or "Failed to create role")
        except TransportError:
            self._banner("error", NETWORK_ERROR)
        finally:
            self.creating_role = False

    def edit_role(self, role):
        if not self.can_edit_role(role):
            return False
        self.editing_role = role
        self.edit_form = update(
            self.edit_form, FormLoaded({"name": role.name, "description": role.description or ""}))
        self._clear_banners()
        return True

    def close_edit_role(self):
        self.editing_role = None
        self.edit_form = update(self.edit_form, FormReset(dict(ROLE_FIELDS)))
        self._clear_banners()

    def change_edit_field(self, name, value):
        if self.edit_form.values.get(name) != value:
            self.edit_form = update(self.edit_form, FieldChanged(name, value))

    def update_role(self):
        if self.updating_role:
            return
        self._clear_banners()
        role = self.editing_role
        error = role_form_error(self.edit_form.values)
        if role is None or error:
            self._banner("error", error or "Role name is required")
            return

        self.updating_role = True
        try:
            envelope = self.api.update_role(
                role.role_id,
                self.edit_form.values["name"].strip(),
                (self.edit_form.values.get("description") or "").strip(),
            )
            if envelope.success:
                self._banner("success", "Role updated successfully")
                self.editing_role = None
                self.edit_form = update(self.edit_form, FormReset(dict(ROLE_FIELDS)))
                self._reload_roles()
            else:
                self._banner("error", envelope.message or "Failed to update role")
        except TransportError:
            self._banner("error", NETWORK_ERROR)
        finally:
            self.updating_role = False

    # ---------- overview ----------
    def role_distribution(self):
        """(role name, user count) pairs, counted from loaded users when the backend omits counts."""
        rows = []
        for role in self.roles:
            if role.user_count is not None:
                count = role.user_count
            else:
                count = sum(1 for u in self.users if role.name in u.roles)
            rows.append((role.name, count))
        return rows

    def logout(self):
        self.session.logout()
        self.redirect = "home"
