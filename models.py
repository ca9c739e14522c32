# models.py
from dataclasses import dataclass, field
from typing import Any

SYSTEM_ROLES = ("Admin", "General User", "Professional", "Business Owner")
ADMIN_ROLE = "Admin"

DELETE_USER = "delete-user"
DELETE_ROLE = "delete-role"


# -------------------- Envelope --------------------
@dataclass
class FieldError:
    field: str
    message: str


@dataclass
class Envelope:
    """Uniform backend response: {success, message, data, errors}."""

    success: bool
    message: str = ""
    data: Any = None
    errors: list[FieldError] = field(default_factory=list)

    @classmethod
    def from_json(cls, payload):
        if not isinstance(payload, dict):
            return cls(success=False, message="Unexpected response from server")
        errors = []
        for entry in payload.get("errors") or []:
            if isinstance(entry, dict) and entry.get("field"):
                errors.append(FieldError(entry["field"], entry.get("message") or ""))
        return cls(
            success=bool(payload.get("success")),
            message=payload.get("message") or "",
            data=payload.get("data"),
            errors=errors,
        )

    def field_errors(self) -> dict[str, str]:
        return {e.field: e.message for e in self.errors}


# -------------------- Entities --------------------
@dataclass
class User:
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone_number: str = ""
    country: str = ""
    roles: list[str] = field(default_factory=list)
    created_at: str | None = None

    @classmethod
    def from_json(cls, data: dict):
        return cls(
            user_id=data.get("userId"),
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            email=data.get("email") or "",
            phone_number=data.get("phoneNumber") or "",
            country=data.get("country") or "",
            roles=list(data.get("roles") or []),
            created_at=data.get("createdAt"),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    def form_values(self) -> dict:
        """Editable copy of the profile, keyed the way the backend expects."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "country": self.country,
            "roles": list(self.roles),
        }


@dataclass
class Role:
    role_id: int
    name: str
    description: str = ""
    user_count: int | None = None

    @classmethod
    def from_json(cls, data: dict):
        return cls(
            role_id=data.get("roleId"),
            name=data.get("name") or "",
            description=data.get("description") or "",
            user_count=data.get("userCount"),
        )

    @property
    def is_system(self) -> bool:
        return self.name in SYSTEM_ROLES


@dataclass
class LoginResult:
    token: str
    user_id: int
    email: str
    first_name: str
    last_name: str
    roles: list[str] = field(default_factory=list)
    token_type: str = "Bearer"

    @classmethod
    def from_json(cls, data: dict):
        return cls(
            token=data.get("token") or "",
            user_id=data.get("userId"),
            email=data.get("email") or "",
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            roles=list(data.get("roles") or []),
            token_type=data.get("tokenType") or "Bearer",
        )


# -------------------- Confirmation --------------------
@dataclass(frozen=True)
class ConfirmationRequest:
    kind: str  # DELETE_USER | DELETE_ROLE
    target_id: int
    target_name: str
    title: str
    message: str

    @classmethod
    def for_user(cls, user: User):
        return cls(
            kind=DELETE_USER,
            target_id=user.user_id,
            target_name=user.full_name,
            title="Delete User",
            message=(
                f'Are you sure you want to delete "{user.full_name}"? This action '
                "cannot be undone and will permanently remove all user data."
            ),
        )

    @classmethod
    def for_role(cls, role: Role):
        return cls(
            kind=DELETE_ROLE,
            target_id=role.role_id,
            target_name=role.name,
            title="Delete Role",
            message=(
                f'Are you sure you want to delete the role "{role.name}"? This action '
                "cannot be undone and may affect users who have this role assigned."
            ),
        )
