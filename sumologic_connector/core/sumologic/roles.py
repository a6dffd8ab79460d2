"""Sumo Logic role operations and role membership management."""
from __future__ import annotations

import threading
from typing import List, Optional, Tuple

from .client import SumoLogicClient, operation_context
from .models import Role
from .ratelimit import RateLimitDescription
from .urls import API_VERSION, RESOURCE_PAGE_SIZE
from .users import decode_page, decode_record

ROLES_PATH = "/api/{api-version}/roles"
ROLE_PATH = "/api/{api-version}/roles/{role-id}"
ROLE_USER_PATH = "/api/{api-version}/roles/{role-id}/users/{user-id}"


class RoleService:
    """Service for Sumo Logic roles."""

    def __init__(self, client: SumoLogicClient):
        """Initialize role service.

        Args:
            client: Configured Sumo Logic client
        """
        self.client = client

    def get_roles(
        self,
        page_token: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[List[Role], Optional[str], RateLimitDescription]:
        """Return one page of roles.

        Returns:
            Tuple of (roles, next page token or None, rate limit)
        """
        with operation_context("list roles"):
            url = self.client.url(
                ROLES_PATH,
                {"api-version": API_VERSION},
                page_token=page_token,
                page_size=RESOURCE_PAGE_SIZE,
            )
            body, rate_limit = self.client.get(url, cancel_event=cancel_event)
            roles, next_token = decode_page(Role.from_dict, body, rate_limit)
        return roles, next_token, rate_limit

    def get_role(
        self,
        role_id: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[Role, RateLimitDescription]:
        """Fetch a single role including its member list."""
        with operation_context("get role"):
            url = self.client.url(ROLE_PATH, {"api-version": API_VERSION, "role-id": role_id})
            body, rate_limit = self.client.get(url, cancel_event=cancel_event)
            role = decode_record(Role.from_dict, body, rate_limit)
        return role, rate_limit

    def assign_role_to_user(
        self,
        role_id: str,
        user_id: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[Optional[Role], RateLimitDescription]:
        """Assign a role to a user.

        Returns:
            Tuple of (updated role when the API returns one, rate limit)
        """
        with operation_context("assign role to user"):
            url = self.client.url(
                ROLE_USER_PATH,
                {"api-version": API_VERSION, "role-id": role_id, "user-id": user_id},
            )
            body, rate_limit = self.client.put(url, cancel_event=cancel_event)
            role = decode_record(Role.from_dict, body, rate_limit) if body is not None else None
        return role, rate_limit

    def remove_role_from_user(
        self,
        role_id: str,
        user_id: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> RateLimitDescription:
        """Remove a role from a user."""
        with operation_context("remove role from user"):
            url = self.client.url(
                ROLE_USER_PATH,
                {"api-version": API_VERSION, "role-id": role_id, "user-id": user_id},
            )
            _, rate_limit = self.client.delete(url, cancel_event=cancel_event)
        return rate_limit
