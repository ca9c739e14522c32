# viewmodel.py
"""Form state and the pure update function driving every page.

Controllers never mutate a ``FormState``; they feed it events through
``update`` and keep the returned state. Rendering reads the state only.
"""
import time
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class FormState:
    values: dict = field(default_factory=dict)
    errors: dict = field(default_factory=dict)
    submitting: bool = False
    error: str = ""
    success: str = ""
    banner_at: float | None = None
    # bumped whenever values are replaced wholesale so widgets pick them up
    revision: int = 0

    def error_for(self, name):
        return self.errors.get(name) or None

    @property
    def has_banner(self):
        return bool(self.error or self.success)


# -------------------- Events --------------------
@dataclass(frozen=True)
class FieldChanged:
    name: str
    value: Any


@dataclass(frozen=True)
class FormLoaded:
    values: dict


@dataclass(frozen=True)
class FormReset:
    values: dict


@dataclass(frozen=True)
class SubmitStarted:
    pass


@dataclass(frozen=True)
class ValidationFailed:
    errors: dict


@dataclass(frozen=True)
class SubmitSucceeded:
    message: str
    at: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class FieldErrorsReceived:
    errors: dict


@dataclass(frozen=True)
class SubmitFailed:
    message: str
    at: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class BannerShown:
    kind: str  # success | error
    message: str
    at: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class BannersCleared:
    pass


# -------------------- Update --------------------
def update(state: FormState, event) -> FormState:
    if isinstance(event, FieldChanged):
        values = {**state.values, event.name: event.value}
        errors = {k: v for k, v in state.errors.items() if k != event.name}
        return replace(state, values=values, errors=errors)

    if isinstance(event, (FormLoaded, FormReset)):
        return replace(
            state,
            values=dict(event.values),
            errors={},
            submitting=False,
            revision=state.revision + 1,
        )

    if isinstance(event, SubmitStarted):
        return replace(state, submitting=True, error="", success="", banner_at=None)

    if isinstance(event, ValidationFailed):
        return replace(state, errors=dict(event.errors), submitting=False)

    if isinstance(event, FieldErrorsReceived):
        return replace(state, errors={**state.errors, **event.errors}, submitting=False)

    if isinstance(event, SubmitSucceeded):
        return replace(state, submitting=False, success=event.message, error="",
                       banner_at=event.at)

    if isinstance(event, SubmitFailed):
        return replace(state, submitting=False, error=event.message, success="",
                       banner_at=event.at)

    if isinstance(event, BannerShown):
        if event.kind == "success":
            return replace(state, success=event.message, error="", banner_at=event.at)
        return replace(state, error=event.message, success="", banner_at=event.at)

    if isinstance(event, BannersCleared):
        return replace(state, error="", success="", banner_at=None)

    raise TypeError(f"Unknown form event: {event!r}")


def expire_banners(state: FormState, now: float, ttl: float) -> FormState:
    if state.banner_at is None or not state.has_banner:
        return state
    if now - state.banner_at >= ttl:
        return update(state, BannersCleared())
    return state
