"""Resource synchronization engine.

Architecture:
- users.py: UserSyncer (human users + service accounts, create/delete)
- roles.py: RoleSyncer (roles, membership entitlement, grants, grant/revoke)
- pagination.py: Drive a listing to completion with cycle detection
- connector.py: Connector wiring, metadata and credential validation
- helpers.py: Page-token translation and upstream error wrapping

Usage:
    from sumologic_connector.core.connector import Connector, collect_resources

    connector = Connector.from_config(load_settings())
    users = collect_resources(connector.users.list)
"""
from .connector import (
    ACCOUNT_CREATION_FIELDS,
    AccountCreationField,
    Connector,
    ConnectorMetadata,
)
from .pagination import collect_resources, paginate
from .roles import RoleSyncer
from .users import UserSyncer

__all__ = [
    "ACCOUNT_CREATION_FIELDS",
    "AccountCreationField",
    "Connector",
    "ConnectorMetadata",
    "RoleSyncer",
    "UserSyncer",
    "collect_resources",
    "paginate",
]
