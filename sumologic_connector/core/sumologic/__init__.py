"""Sumo Logic API client library.

This package provides a modular, testable interface to the Sumo Logic
user, service account and role endpoints.

Architecture:
- client.py: HTTP client with basic auth, JSON decoding and error decoding
- urls.py: Path template rendering and query assembly
- ratelimit.py: Rate-limit descriptor extracted from every response
- models.py: Wire records (accounts, roles, error bodies, list pages)
- users.py: User and service account operations
- roles.py: Role listing and role membership operations
- api.py: Bundle of the services over one client
- exceptions.py: Typed exceptions for error handling

Usage:
    from sumologic_connector.core.sumologic import SumoLogicClient, SumoLogicAPI

    client = SumoLogicClient("https://api.sumologic.com", access_id, access_key)
    api = SumoLogicAPI.from_client(client)
    roles, next_token, rate_limit = api.roles.get_roles()
"""
from .api import SumoLogicAPI
from .client import (
    DEFAULT_BASE_URL,
    SumoLogicClient,
    encode_basic_credentials,
    operation_context,
)
from .exceptions import (
    NotFoundError,
    RequestCancelledError,
    SumoLogicAPIError,
    SumoLogicError,
    TransportError,
    URLConstructionError,
)
from .models import (
    Account,
    ApiPage,
    BaseAccount,
    ErrorResponse,
    HumanUser,
    Role,
    ServiceAccount,
    UserRequest,
)
from .ratelimit import RateLimitDescription, RateLimitStatus, extract_rate_limit
from .roles import RoleService
from .urls import API_VERSION, RESOURCE_PAGE_SIZE, build_url, render_path
from .users import ServiceAccountService, UserService

__all__ = [
    # Client
    "SumoLogicClient",
    "SumoLogicAPI",
    "DEFAULT_BASE_URL",
    "encode_basic_credentials",
    "operation_context",

    # URLs
    "API_VERSION",
    "RESOURCE_PAGE_SIZE",
    "build_url",
    "render_path",

    # Rate limiting
    "RateLimitDescription",
    "RateLimitStatus",
    "extract_rate_limit",

    # Exceptions
    "SumoLogicError",
    "SumoLogicAPIError",
    "NotFoundError",
    "TransportError",
    "RequestCancelledError",
    "URLConstructionError",

    # Models
    "Account",
    "ApiPage",
    "BaseAccount",
    "ErrorResponse",
    "HumanUser",
    "Role",
    "ServiceAccount",
    "UserRequest",

    # Services
    "UserService",
    "ServiceAccountService",
    "RoleService",
]
