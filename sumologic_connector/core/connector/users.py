"""User syncer: human users plus service accounts, and account provisioning."""
from __future__ import annotations

import logging
import threading
from typing import Any, List, Mapping, Optional, Tuple

from ... import audit
from ..exceptions import DeletionVerificationError, InvalidPrincipalError
from ..resource_mapper import ResourceMapper
from ..resources import (
    USER_RESOURCE_TYPE,
    Annotations,
    EntitlementPage,
    GrantPage,
    ListPage,
    Resource,
    ResourceId,
    ResourceType,
)
from ..sumologic.api import SumoLogicAPI
from ..sumologic.exceptions import NotFoundError, SumoLogicError
from ..validators import validate_account_profile
from .helpers import next_page_token, parse_page_token, upstream_error

logger = logging.getLogger(__name__)


class UserSyncer:
    """Lists every account (human and service) as a user resource.

    Service accounts have no pagination upstream, so they are fetched in
    full on the first page of a listing pass only; human users are paged.
    """

    def __init__(
        self,
        api: SumoLogicAPI,
        *,
        resource_type: ResourceType = USER_RESOURCE_TYPE,
        include_service_accounts: bool = True,
        audit_enabled: bool = False,
    ):
        self.api = api
        self.resource_type = resource_type
        self.include_service_accounts = include_service_accounts
        self.audit_enabled = audit_enabled

    def list(
        self,
        page_token: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> ListPage:
        """Return one page of user resources.

        Raises:
            SyncError: If any upstream call fails; no partial page is returned
        """
        annotations = Annotations()
        resources: List[Resource] = []
        token = parse_page_token(page_token)

        if token is None and self.include_service_accounts:
            try:
                accounts, rate_limit = self.api.service_accounts.get_service_accounts(cancel_event=cancel_event)
            except SumoLogicError as exc:
                raise upstream_error("failed to get service accounts", exc, annotations) from exc
            annotations.with_rate_limiting(rate_limit)
            resources.extend(ResourceMapper.account_to_resource(a, self.resource_type) for a in accounts)

        try:
            users, next_token, rate_limit = self.api.users.get_users(token, cancel_event=cancel_event)
        except SumoLogicError as exc:
            raise upstream_error("failed to get human accounts", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)
        resources.extend(ResourceMapper.account_to_resource(u, self.resource_type) for u in users)

        return ListPage(resources=resources, next_page_token=next_page_token(next_token), annotations=annotations)

    def entitlements(self, resource: Resource, page_token: Optional[str] = None) -> EntitlementPage:
        """Users expose no entitlements."""
        return EntitlementPage(entitlements=[])

    def grants(
        self,
        resource: Resource,
        page_token: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> GrantPage:
        """Users hold no grantable entitlements, so they have no grants."""
        return GrantPage(grants=[])

    def create_account(
        self,
        profile: Mapping[str, Any],
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[Resource, Annotations]:
        """Create a human user from an account-creation profile.

        Args:
            profile: Mapping with first_name, last_name, email and default_role_id

        Returns:
            Tuple of (created user resource, annotations)

        Raises:
            PreconditionError: If a required field is missing (no API call made)
            SyncError: If the create call fails
        """
        user_request = validate_account_profile(profile)
        annotations = Annotations()

        try:
            user, rate_limit = self.api.users.create_user(user_request, cancel_event=cancel_event)
        except SumoLogicError as exc:
            self._audit("account_create", user_request.email, False, {"error": str(exc)})
            raise upstream_error("failed to create user", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)

        resource = ResourceMapper.account_to_resource(user, self.resource_type)
        logger.info(f"Created user {user.id} ({user.email})")
        self._audit("account_create", str(resource.id), True, {"email": user.email, "role_ids": user_request.role_ids})
        return resource, annotations

    def delete_account(
        self,
        resource_id: ResourceId,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Annotations:
        """Delete a human user and confirm it is gone.

        The account is looked up first, deleted by the confirmed id, then
        looked up again. Only a "not found" on the final lookup counts as
        success; the API may acknowledge a delete that has not yet applied.

        Raises:
            InvalidPrincipalError: If ``resource_id`` is not a user
            SyncError: If the lookup or the delete call fails
            DeletionVerificationError: If the account is still resolvable afterwards
        """
        if resource_id.resource_type != self.resource_type.id:
            raise InvalidPrincipalError(f"only {self.resource_type.id} resources can be deleted, got {resource_id}")

        annotations = Annotations()

        try:
            user, rate_limit = self.api.users.get_user_by_id(resource_id.resource, cancel_event=cancel_event)
        except SumoLogicError as exc:
            raise upstream_error(f"failed to find user {resource_id.resource}", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)

        try:
            rate_limit = self.api.users.delete_user(user.id, cancel_event=cancel_event)
        except SumoLogicError as exc:
            self._audit("account_delete", str(resource_id), False, {"error": str(exc)})
            raise upstream_error(f"failed to delete user {user.id}", exc, annotations) from exc
        annotations.with_rate_limiting(rate_limit)

        try:
            _, rate_limit = self.api.users.get_user_by_id(user.id, cancel_event=cancel_event)
        except NotFoundError as exc:
            annotations.with_rate_limiting(exc.rate_limit)
            logger.info(f"Deleted user {user.id}")
            self._audit("account_delete", str(resource_id), True, {"email": user.email})
            return annotations
        except SumoLogicError as exc:
            annotations.with_rate_limiting(exc.rate_limit)
            logger.warning(f"Could not verify deletion of user {user.id}: {exc}")
            self._audit("account_delete", str(resource_id), False, {"error": str(exc)})
            raise DeletionVerificationError(
                f"could not verify deletion of user {user.id}: {exc}", annotations=annotations
            ) from exc

        annotations.with_rate_limiting(rate_limit)
        logger.warning(f"User {user.id} still exists after delete")
        self._audit("account_delete", str(resource_id), False, {"error": "still exists after delete"})
        raise DeletionVerificationError(f"user {user.id} still exists after delete", annotations=annotations)

    def _audit(self, event_type: audit.EventType, target: str, success: bool, details: dict) -> None:
        if self.audit_enabled:
            audit.safe_log_provisioning_event(event_type, target, details=details, success=success)
