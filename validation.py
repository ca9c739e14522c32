# validation.py
import re

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_RE = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&_#])[A-Za-z\d@$!%*?&_#]+$"
)
PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")

MIN_PASSWORD_LENGTH = 8


# -------------------- Field validators --------------------
def validate_required(value, field_name):
    if not value or not value.strip():
        return f"{field_name} is required"
    return None


def validate_email(email):
    if not email:
        return "Email is required"
    if not EMAIL_RE.match(email):
        return "Please enter a valid email address"
    return None


def validate_password(password):
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return "Password must be at least 8 characters long"
    if not PASSWORD_RE.match(password):
        return "Password must contain uppercase, lowercase, number, and special character"
    return None


def validate_phone(phone):
    if not phone:
        return None  # optional
    if not PHONE_RE.match(phone):
        return "Please enter a valid phone number with country code"
    return None


def validate_password_confirmation(password, confirmation):
    if not confirmation:
        return "Please confirm your password"
    if password != confirmation:
        return "Passwords do not match"
    return None


def validate_roles(roles):
    if not roles:
        return "Please select at least one role"
    return None


# -------------------- Form validators --------------------
def _collect(checks):
    return {name: message for name, message in checks if message}


def login_errors(values: dict) -> dict:
    return _collect([
        ("email", validate_email(values.get("email", ""))),
        ("password", validate_required(values.get("password", ""), "Password")),
    ])


def registration_errors(values: dict) -> dict:
    return _collect([
        ("firstName", validate_required(values.get("firstName", ""), "First name")),
        ("lastName", validate_required(values.get("lastName", ""), "Last name")),
        ("email", validate_email(values.get("email", ""))),
        ("password", validate_password(values.get("password", ""))),
        ("confirmPassword", validate_password_confirmation(
            values.get("password", ""), values.get("confirmPassword", ""))),
        ("phoneNumber", validate_phone(values.get("phoneNumber", ""))),
        ("country", validate_required(values.get("country", ""), "Country")),
        ("roles", validate_roles(values.get("roles"))),
    ])


def profile_errors(values: dict) -> dict:
    return _collect([
        ("firstName", validate_required(values.get("firstName", ""), "First name")),
        ("lastName", validate_required(values.get("lastName", ""), "Last name")),
        ("email", validate_email(values.get("email", ""))),
        ("phoneNumber", validate_phone(values.get("phoneNumber", ""))),
        ("country", validate_required(values.get("country", ""), "Country")),
        ("roles", validate_roles(values.get("roles"))),
    ])


def password_change_errors(values: dict) -> dict:
    current = values.get("currentPassword", "")
    new = values.get("newPassword", "")
    confirm = values.get("confirmNewPassword", "")

    errors = _collect([
        ("currentPassword", validate_required(current, "Current password")),
        ("newPassword", validate_password(new)),
    ])
    confirm_error = validate_required(confirm, "Confirm new password")
    if not confirm_error and new != confirm:
        confirm_error = "Passwords do not match"
    if confirm_error:
        errors["confirmNewPassword"] = confirm_error
    if current and current == new:
        errors["newPassword"] = "New password must be different from current password"
    return errors


def role_form_error(values: dict):
    """Role forms report a single banner error rather than a field map."""
    if validate_required(values.get("name", ""), "Role name"):
        return "Role name is required"
    return None
