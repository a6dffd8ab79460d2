"""Connector entry point: wires the API bundle into the syncers."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import requests

from ..exceptions import SyncError
from ..resources import ROLE_RESOURCE_TYPE, USER_RESOURCE_TYPE, Annotations, ResourceType
from ..sumologic.api import SumoLogicAPI
from ..sumologic.client import SumoLogicClient
from ..sumologic.exceptions import SumoLogicError
from .roles import RoleSyncer
from .users import UserSyncer

logger = logging.getLogger(__name__)

CONNECTOR_DISPLAY_NAME = "Sumo Logic Connector"
CONNECTOR_DESCRIPTION = (
    "Sumo Logic Connector is a connector for Sumo Logic that allows you to "
    "manage users and roles in Sumo Logic."
)


@dataclass(frozen=True)
class AccountCreationField:
    name: str
    display_name: str
    description: str
    placeholder: str = ""
    required: bool = True
    order: int = 0


ACCOUNT_CREATION_FIELDS: Tuple[AccountCreationField, ...] = (
    AccountCreationField("first_name", "First name", "This first name will be used for the user.", "Ada", order=1),
    AccountCreationField("last_name", "Last name", "This last name will be used for the user.", "Lovelace", order=2),
    AccountCreationField("email", "Email", "This email will be used as the login for the user.", "ada@example.com", order=3),
    AccountCreationField(
        "default_role_id", "Default role ID", "The role assigned to the user on creation.", "00000000001", order=4
    ),
)


@dataclass
class ConnectorMetadata:
    display_name: str = CONNECTOR_DISPLAY_NAME
    description: str = CONNECTOR_DESCRIPTION
    resource_types: List[ResourceType] = field(default_factory=lambda: [USER_RESOURCE_TYPE, ROLE_RESOURCE_TYPE])
    account_creation_fields: List[AccountCreationField] = field(
        default_factory=lambda: list(ACCOUNT_CREATION_FIELDS)
    )


class Connector:
    """Sumo Logic connector.

    Holds one API bundle (over one shared HTTP client) and hands it to a
    user syncer and a role syncer. Nothing is cached between calls.
    """

    def __init__(
        self,
        api: SumoLogicAPI,
        *,
        include_service_accounts: bool = True,
        audit_enabled: bool = False,
    ):
        self.api = api
        self.include_service_accounts = include_service_accounts
        self.audit_enabled = audit_enabled
        self.users = UserSyncer(
            api,
            resource_type=USER_RESOURCE_TYPE,
            include_service_accounts=include_service_accounts,
            audit_enabled=audit_enabled,
        )
        self.roles = RoleSyncer(
            api,
            resource_type=ROLE_RESOURCE_TYPE,
            user_resource_type=USER_RESOURCE_TYPE,
            audit_enabled=audit_enabled,
        )

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "Connector":
        """Build a connector from a ``ConnectorConfig``."""
        client = SumoLogicClient(
            config.api_base_url,
            config.api_access_id,
            config.api_access_key,
            timeout=config.request_timeout,
            session=session,
        )
        logger.info(
            f"Connector configured: base_url={config.api_base_url} "
            f"include_service_accounts={config.include_service_accounts}"
        )
        return cls(
            SumoLogicAPI.from_client(client),
            include_service_accounts=config.include_service_accounts,
            audit_enabled=config.audit_enabled,
        )

    def resource_syncers(self) -> list:
        return [self.users, self.roles]

    def metadata(self) -> ConnectorMetadata:
        return ConnectorMetadata()

    def validate(self, *, cancel_event: Optional[threading.Event] = None) -> Annotations:
        """Check that the credentials can read roles.

        Raises:
            SyncError: If the roles call fails
        """
        annotations = Annotations()
        try:
            _, _, rate_limit = self.api.roles.get_roles(cancel_event=cancel_event)
        except SumoLogicError as exc:
            annotations.with_rate_limiting(exc.rate_limit)
            raise SyncError(f"failed to validate credentials: {exc}", annotations=annotations) from exc
        return annotations.with_rate_limiting(rate_limit)
