"""Sumo Logic user and service account operations."""
from __future__ import annotations

import threading
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from .client import SumoLogicClient, operation_context
from .exceptions import TransportError
from .models import ApiPage, HumanUser, ServiceAccount, UserRequest
from .ratelimit import RateLimitDescription
from .urls import API_VERSION, RESOURCE_PAGE_SIZE

T = TypeVar("T")

USERS_PATH = "/api/{api-version}/users"
USER_PATH = "/api/{api-version}/users/{user-id}"
SERVICE_ACCOUNTS_PATH = "/api/{api-version}/serviceAccounts"


def decode_record(factory: Callable[[Any], T], data: Any, rate_limit: RateLimitDescription) -> T:
    """Build a model from a decoded JSON object, reporting malformed payloads as transport errors."""
    if not isinstance(data, dict):
        raise TransportError(f"unexpected response payload: {type(data).__name__}", rate_limit=rate_limit)
    try:
        return factory(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise TransportError(f"malformed record in response: {exc!r}", rate_limit=rate_limit) from exc


def decode_page(
    factory: Callable[[Any], T],
    body: Any,
    rate_limit: RateLimitDescription,
) -> Tuple[List[T], Optional[str]]:
    if body is not None and not isinstance(body, dict):
        raise TransportError(f"unexpected list payload: {type(body).__name__}", rate_limit=rate_limit)
    page = ApiPage.from_dict(body)
    return [decode_record(factory, item, rate_limit) for item in page.data], page.next


class UserService:
    """Service for human user accounts."""

    def __init__(self, client: SumoLogicClient):
        """Initialize user service.

        Args:
            client: Configured Sumo Logic client
        """
        self.client = client

    def get_users(
        self,
        page_token: Optional[str] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[List[HumanUser], Optional[str], RateLimitDescription]:
        """Return one page of human users.

        Args:
            page_token: Continuation token from the previous page (None/"" = first page)

        Returns:
            Tuple of (users, next page token or None, rate limit)
        """
        with operation_context("list users"):
            url = self.client.url(
                USERS_PATH,
                {"api-version": API_VERSION},
                page_token=page_token,
                page_size=RESOURCE_PAGE_SIZE,
            )
            body, rate_limit = self.client.get(url, cancel_event=cancel_event)
            users, next_token = decode_page(HumanUser.from_dict, body, rate_limit)
        return users, next_token, rate_limit

    def get_user_by_id(
        self,
        user_id: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[HumanUser, RateLimitDescription]:
        """Fetch a single human user.

        Raises:
            NotFoundError: If the user does not exist
        """
        with operation_context("get user"):
            url = self.client.url(USER_PATH, {"api-version": API_VERSION, "user-id": user_id})
            body, rate_limit = self.client.get(url, cancel_event=cancel_event)
            user = decode_record(HumanUser.from_dict, body, rate_limit)
        return user, rate_limit

    def create_user(
        self,
        user_request: UserRequest,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[HumanUser, RateLimitDescription]:
        """Create a human user and return the created record."""
        with operation_context("create user"):
            url = self.client.url(USERS_PATH, {"api-version": API_VERSION})
            body, rate_limit = self.client.post(url, user_request.to_payload(), cancel_event=cancel_event)
            user = decode_record(HumanUser.from_dict, body, rate_limit)
        return user, rate_limit

    def delete_user(
        self,
        user_id: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> RateLimitDescription:
        """Delete a human user."""
        with operation_context("delete user"):
            url = self.client.url(USER_PATH, {"api-version": API_VERSION, "user-id": user_id})
            _, rate_limit = self.client.delete(url, cancel_event=cancel_event)
        return rate_limit


class ServiceAccountService:
    """Service for service accounts. The endpoint has no pagination."""

    def __init__(self, client: SumoLogicClient):
        self.client = client

    def get_service_accounts(
        self,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[List[ServiceAccount], RateLimitDescription]:
        """Return every service account in a single call."""
        with operation_context("list service accounts"):
            url = self.client.url(SERVICE_ACCOUNTS_PATH, {"api-version": API_VERSION})
            body, rate_limit = self.client.get(url, cancel_event=cancel_event)
            if isinstance(body, list):
                # Some deployments return a bare array instead of the {data: [...]} envelope
                body = {"data": body}
            accounts, _ = decode_page(ServiceAccount.from_dict, body, rate_limit)
        return accounts, rate_limit
