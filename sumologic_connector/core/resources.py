"""Host-facing resource graph: resource types, resources, entitlements, grants.

These mirror the shapes the host serializes; this package only populates
them. Resource types are plain constants handed to the syncers at
construction rather than looked up globally.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .sumologic.ratelimit import RateLimitDescription


class ResourceTrait(str, enum.Enum):
    USER = "user"
    ROLE = "role"


class UserStatus(str, enum.Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class AccountType(str, enum.Enum):
    HUMAN = "human"
    SERVICE = "service"


@dataclass(frozen=True)
class ResourceType:
    id: str
    display_name: str
    traits: Tuple[ResourceTrait, ...] = ()
    description: str = ""


USER_RESOURCE_TYPE = ResourceType(
    id="user",
    display_name="User",
    traits=(ResourceTrait.USER,),
    description="Human users and service accounts",
)
ROLE_RESOURCE_TYPE = ResourceType(
    id="role",
    display_name="Role",
    traits=(ResourceTrait.ROLE,),
    description="Sumo Logic roles",
)

# Slug of the single membership entitlement every role exposes.
ROLE_ASSIGNMENT_ENTITLEMENT = "assigned"


@dataclass(frozen=True)
class ResourceId:
    resource_type: str
    resource: str

    def __str__(self) -> str:
        return f"{self.resource_type}:{self.resource}"


@dataclass
class UserTrait:
    login: str
    emails: List[str]
    status: UserStatus
    account_type: AccountType
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    mfa_enabled: Optional[bool] = None
    profile: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RoleTrait:
    profile: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Resource:
    id: ResourceId
    display_name: str = ""
    description: str = ""
    user_trait: Optional[UserTrait] = None
    role_trait: Optional[RoleTrait] = None

    @property
    def resource_type(self) -> str:
        return self.id.resource_type


@dataclass
class Entitlement:
    id: str
    resource: Resource
    slug: str
    display_name: str = ""
    description: str = ""
    grantable_to: Tuple[str, ...] = ()
    purpose: str = "assignment"


@dataclass
class Grant:
    id: str
    entitlement: Entitlement
    principal: Resource


def entitlement_id(resource: Resource, slug: str) -> str:
    return f"{resource.id.resource_type}:{resource.id.resource}:{slug}"


def new_assignment_entitlement(
    resource: Resource,
    slug: str,
    *,
    grantable_to: Tuple[ResourceType, ...] = (),
    display_name: str = "",
    description: str = "",
) -> Entitlement:
    return Entitlement(
        id=entitlement_id(resource, slug),
        resource=resource,
        slug=slug,
        display_name=display_name,
        description=description,
        grantable_to=tuple(rt.id for rt in grantable_to),
    )


def new_grant(resource: Resource, slug: str, principal: Resource) -> Grant:
    """Build a grant of ``resource``'s ``slug`` entitlement to ``principal``."""
    entitlement = Entitlement(id=entitlement_id(resource, slug), resource=resource, slug=slug)
    return Grant(
        id=f"{entitlement.id}:{principal.id.resource_type}:{principal.id.resource}",
        entitlement=entitlement,
        principal=principal,
    )


class Annotations(list):
    """Side-channel metadata attached to every host-facing result."""

    def with_rate_limiting(self, rate_limit: Optional[RateLimitDescription]) -> "Annotations":
        """Record the most recent rate limit, replacing any earlier one."""
        if rate_limit is None:
            return self
        for idx, item in enumerate(self):
            if isinstance(item, RateLimitDescription):
                self[idx] = rate_limit
                return self
        self.append(rate_limit)
        return self

    @property
    def rate_limit(self) -> Optional[RateLimitDescription]:
        return next((item for item in self if isinstance(item, RateLimitDescription)), None)


@dataclass
class ListPage:
    """One page of a host listing call."""

    resources: List[Resource]
    next_page_token: str = ""
    annotations: Annotations = field(default_factory=Annotations)


@dataclass
class EntitlementPage:
    entitlements: List[Entitlement]
    next_page_token: str = ""
    annotations: Annotations = field(default_factory=Annotations)


@dataclass
class GrantPage:
    grants: List[Grant]
    next_page_token: str = ""
    annotations: Annotations = field(default_factory=Annotations)
