"""Input validation for account creation profiles."""
from __future__ import annotations

from typing import Any, Mapping

from .exceptions import PreconditionError
from .sumologic.models import UserRequest

REQUIRED_PROFILE_FIELDS = ("first_name", "last_name", "email", "default_role_id")


def _require_text(profile: Mapping[str, Any], field: str) -> str:
    value = profile.get(field)
    if value is None or not isinstance(value, str) or not value.strip():
        raise PreconditionError(f"{field} is required")
    return value.strip()


def validate_account_profile(profile: Mapping[str, Any]) -> UserRequest:
    """Turn an account-creation profile into a create-user request.

    Every field in ``REQUIRED_PROFILE_FIELDS`` must be a non-empty string.
    Values are only trimmed; the API judges the email address itself.

    Raises:
        PreconditionError: On the first missing field
    """
    if profile is None:
        raise PreconditionError("account profile is required")

    values = {field: _require_text(profile, field) for field in REQUIRED_PROFILE_FIELDS}
    return UserRequest(
        first_name=values["first_name"],
        last_name=values["last_name"],
        email=values["email"],
        role_ids=[values["default_role_id"]],
    )
