"""Bundle of the per-resource services sharing one client."""
from __future__ import annotations

from dataclasses import dataclass

from .client import SumoLogicClient
from .roles import RoleService
from .users import ServiceAccountService, UserService


@dataclass(frozen=True)
class SumoLogicAPI:
    users: UserService
    service_accounts: ServiceAccountService
    roles: RoleService

    @classmethod
    def from_client(cls, client: SumoLogicClient) -> "SumoLogicAPI":
        return cls(
            users=UserService(client),
            service_accounts=ServiceAccountService(client),
            roles=RoleService(client),
        )
