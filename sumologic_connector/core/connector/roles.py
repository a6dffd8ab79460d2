"""Role syncer: roles, their membership entitlement and grants."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from ... import audit
from ..exceptions import InvalidPrincipalError
from ..resource_mapper import ResourceMapper
from ..resources import (
    ROLE_ASSIGNMENT_ENTITLEMENT,
    ROLE_RESOURCE_TYPE,
    USER_RESOURCE_TYPE,
    Annotations,
    Entitlement,
    EntitlementPage,
    Grant,
    GrantPage,
    ListPage,
    Resource,
    ResourceType,
    new_assignment_entitlement,
    new_grant,
)
from ..sumologic.api import SumoLogicAPI
from ..sumologic.exceptions import SumoLogicError
from .helpers import next_page_token, parse_page_token, upstream_error

logger = logging.getLogger(__name__)


class RoleSyncer:
    """Lists roles and translates role membership into grants."""

    def __init__(
        self,
        api: SumoLogicAPI,
        *,
        resource_type: ResourceType = ROLE_RESOURCE_TYPE,
        user_resource_type: ResourceType = USER_RESOURCE_TYPE,
        audit_enabled: bool = False,
    ):
        self.api = api
        self.resource_type = resource_type
        self.user_resource_type = user_resource_type
        self.audit_enabled = audit_enabled

    def list(
        self,
        page_token: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> ListPage:
        """Return one page of role resources.

        Raises:
            SyncError: If the roles call fails
        """
        annotations = Annotations()
        try:
            roles, next_token, rate_limit = self.api.roles.get_roles(
                parse_page_token(page_token), cancel_event=cancel_event
            )
        except SumoLogicError as exc:
            raise upstream_error("failed to list roles", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)

        resources = [ResourceMapper.role_to_resource(role, self.resource_type) for role in roles]
        return ListPage(resources=resources, next_page_token=next_page_token(next_token), annotations=annotations)

    def entitlements(self, resource: Resource, page_token: Optional[str] = None) -> EntitlementPage:
        """Every role exposes exactly one membership entitlement, grantable to users."""
        entitlement = new_assignment_entitlement(
            resource,
            ROLE_ASSIGNMENT_ENTITLEMENT,
            grantable_to=(self.user_resource_type,),
            display_name=f"{resource.display_name} Role Member",
            description=f"Has the {resource.display_name} role in Sumo Logic",
        )
        return EntitlementPage(entitlements=[entitlement])

    def grants(
        self,
        resource: Resource,
        page_token: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> GrantPage:
        """One grant per member id of the role; a role without members has none.

        Raises:
            SyncError: If the role lookup fails
        """
        annotations = Annotations()
        try:
            role, rate_limit = self.api.roles.get_role(resource.id.resource, cancel_event=cancel_event)
        except SumoLogicError as exc:
            raise upstream_error("failed to get role", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)

        if role.users is None:
            return GrantPage(grants=[], annotations=annotations)

        grants = [
            new_grant(
                resource,
                ROLE_ASSIGNMENT_ENTITLEMENT,
                ResourceMapper.principal_for_member(user_id, self.user_resource_type),
            )
            for user_id in role.users
        ]
        return GrantPage(grants=grants, annotations=annotations)

    def grant(
        self,
        principal: Resource,
        entitlement: Entitlement,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Annotations:
        """Assign the entitlement's role to a user.

        No check is made for an existing assignment; the API does not tell
        "already granted" apart from other failures, so errors surface as is.

        Raises:
            InvalidPrincipalError: If the principal is not a user or the entitlement
                is not on a role (no API call made)
            SyncError: If the assign call fails
        """
        self._require_user_principal(principal, "assigned to")
        self._require_role_entitlement(entitlement)
        role_id = entitlement.resource.id.resource
        user_id = principal.id.resource

        annotations = Annotations()
        try:
            _, rate_limit = self.api.roles.assign_role_to_user(role_id, user_id, cancel_event=cancel_event)
        except SumoLogicError as exc:
            self._audit("role_grant", role_id, user_id, False, str(exc))
            raise upstream_error("failed to assign role to user", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)

        logger.info(f"Assigned role {role_id} to user {user_id}")
        self._audit("role_grant", role_id, user_id, True)
        return annotations

    def revoke(
        self,
        grant: Grant,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Annotations:
        """Remove the grant's role from its user principal.

        As with ``grant``, an already-revoked membership is not detected.

        Raises:
            InvalidPrincipalError: If the principal is not a user or the entitlement
                is not on a role (no API call made)
            SyncError: If the remove call fails
        """
        self._require_user_principal(grant.principal, "revoked from")
        self._require_role_entitlement(grant.entitlement)
        role_id = grant.entitlement.resource.id.resource
        user_id = grant.principal.id.resource

        annotations = Annotations()
        try:
            rate_limit = self.api.roles.remove_role_from_user(role_id, user_id, cancel_event=cancel_event)
        except SumoLogicError as exc:
            self._audit("role_revoke", role_id, user_id, False, str(exc))
            raise upstream_error("failed to revoke role from user", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)

        logger.info(f"Removed role {role_id} from user {user_id}")
        self._audit("role_revoke", role_id, user_id, True)
        return annotations

    def _require_user_principal(self, principal: Resource, verb: str) -> None:
        if principal.id.resource_type != self.user_resource_type.id:
            logger.error(
                f"Only users can be {verb} a role: principal_type={principal.id.resource_type} "
                f"principal_id={principal.id.resource}"
            )
            raise InvalidPrincipalError(f"only users can be {verb} a role")

    def _require_role_entitlement(self, entitlement: Entitlement) -> None:
        resource_id = entitlement.resource.id
        if resource_id.resource_type != self.resource_type.id:
            logger.error(
                f"Entitlement is not on a role: resource_type={resource_id.resource_type} "
                f"resource_id={resource_id.resource}"
            )
            raise InvalidPrincipalError(f"entitlement must belong to a {self.resource_type.id} resource")

    def _audit(
        self,
        event_type: audit.EventType,
        role_id: str,
        user_id: str,
        success: bool,
        error: Optional[str] = None,
    ) -> None:
        if not self.audit_enabled:
            return
        details = {"role_id": role_id}
        if error:
            details["error"] = error
        target = f"{self.user_resource_type.id}:{user_id}"
        audit.safe_log_provisioning_event(event_type, target, details=details, success=success)
