"""Wire records returned by the Sumo Logic API.

Accounts come in exactly two shapes, human users and service accounts, which
share the fields of ``BaseAccount``. Optional fields stay ``None`` when the
API omits them; nothing is synthesized here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an RFC3339 timestamp (``YYYY-MM-DDTHH:MM:SSZ``) into an aware datetime."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        # fromisoformat on older interpreters rejects fractional seconds other than 3 or 6 digits
        head, _, tail = text.partition(".")
        offset = ""
        for sign in ("+", "-"):
            if sign in tail:
                idx = tail.index(sign)
                offset = tail[idx:]
                break
        parsed = datetime.fromisoformat(head + offset)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class ErrorResponse:
    """Structured error body: ``{code, message, target?}``."""

    code: str
    message: str
    target: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorResponse":
        # Sumo Logic wraps errors as {"id": ..., "errors": [{code, message}]}
        errors = data.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            data = errors[0]
        return cls(
            code=str(data.get("code", "")),
            message=str(data.get("message", "")),
            target=data.get("target"),
        )

    def describe(self) -> str:
        target = self.target if self.target is not None else "none"
        return f"code: {self.code}, message: {self.message}, target: {target}"


@dataclass
class BaseAccount:
    """Fields shared by human users and service accounts."""

    id: str
    email: str = ""
    created_at: Optional[datetime] = None
    created_by: str = ""
    modified_at: Optional[datetime] = None
    modified_by: str = ""
    role_ids: List[str] = field(default_factory=list)
    is_active: Optional[bool] = None

    @staticmethod
    def _base_fields(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": str(data["id"]),
            "email": data.get("email") or "",
            "created_at": parse_timestamp(data.get("createdAt")),
            "created_by": data.get("createdBy") or "",
            "modified_at": parse_timestamp(data.get("modifiedAt")),
            "modified_by": data.get("modifiedBy") or "",
            "role_ids": list(data.get("roleIds") or []),
            "is_active": data.get("isActive"),
        }


@dataclass
class HumanUser(BaseAccount):
    first_name: str = ""
    last_name: str = ""
    # True when the account was locked after repeated failed logins.
    is_locked: Optional[bool] = None
    is_mfa_enabled: Optional[bool] = None
    last_login_timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HumanUser":
        return cls(
            **cls._base_fields(data),
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            is_locked=data.get("isLocked"),
            is_mfa_enabled=data.get("isMfaEnabled"),
            last_login_timestamp=parse_timestamp(data.get("lastLoginTimestamp")),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class ServiceAccount(BaseAccount):
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceAccount":
        return cls(**cls._base_fields(data), name=data.get("name") or "")


Account = Union[HumanUser, ServiceAccount]


@dataclass
class Role:
    id: str
    name: str
    description: Optional[str] = None
    filter_predicate: Optional[str] = None
    # None means the API sent no member list at all.
    users: Optional[List[str]] = None
    capabilities: Optional[List[str]] = None
    autofill_dependencies: Optional[bool] = None
    created_at: str = ""
    created_by: str = ""
    modified_at: str = ""
    modified_by: str = ""
    # System-defined roles cannot be deleted or modified.
    system_defined: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Role":
        users = data.get("users")
        capabilities = data.get("capabilities")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            description=data.get("description"),
            filter_predicate=data.get("filterPredicate"),
            users=[str(u) for u in users] if users is not None else None,
            capabilities=list(capabilities) if capabilities is not None else None,
            autofill_dependencies=data.get("autofillDependencies"),
            created_at=data.get("createdAt") or "",
            created_by=data.get("createdBy") or "",
            modified_at=data.get("modifiedAt") or "",
            modified_by=data.get("modifiedBy") or "",
            system_defined=data.get("systemDefined"),
        )


@dataclass
class UserRequest:
    """Payload for creating a human user."""

    first_name: str
    last_name: str
    email: str
    role_ids: List[str]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "roleIds": list(self.role_ids),
        }


@dataclass
class ApiPage:
    """List envelope: ``{data: [...], next?: str}``."""

    data: List[Dict[str, Any]]
    next: Optional[str] = None

    @classmethod
    def from_dict(cls, body: Optional[Dict[str, Any]]) -> "ApiPage":
        body = body or {}
        next_token = body.get("next") or None
        return cls(data=list(body.get("data") or []), next=next_token)
