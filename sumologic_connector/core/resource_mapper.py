"""Sumo Logic record → resource transformations.

Usage:
    resource = ResourceMapper.account_to_resource(human_user)
    resource = ResourceMapper.role_to_resource(role)
"""
from __future__ import annotations

from typing import Any, Dict

from .exceptions import UnsupportedAccountTypeError
from .resources import (
    ROLE_RESOURCE_TYPE,
    USER_RESOURCE_TYPE,
    AccountType,
    Resource,
    ResourceId,
    ResourceType,
    RoleTrait,
    UserStatus,
    UserTrait,
)
from .sumologic.models import Account, BaseAccount, HumanUser, Role, ServiceAccount, format_timestamp


class ResourceMapper:
    """Maps API records onto the uniform resource representation. No I/O."""

    @staticmethod
    def account_status(account: BaseAccount) -> UserStatus:
        """Disabled only when ``is_active`` is explicitly false.

        An absent flag is reported as enabled, so an account whose state
        the API did not disclose is treated as active.
        """
        if account.is_active is False:
            return UserStatus.DISABLED
        return UserStatus.ENABLED

    @staticmethod
    def account_to_resource(
        account: Account,
        resource_type: ResourceType = USER_RESOURCE_TYPE,
    ) -> Resource:
        """Convert a human user or service account into a user resource.

        Args:
            account: HumanUser or ServiceAccount record
            resource_type: Resource type descriptor for users

        Returns:
            Resource with a user trait tagged with the account type

        Raises:
            UnsupportedAccountTypeError: For any other record type

        Example:
            >>> user = HumanUser(id="2", email="ada@example.com", first_name="Ada", last_name="Lovelace")
            >>> ResourceMapper.account_to_resource(user).display_name
            'Ada Lovelace'
        """
        if isinstance(account, HumanUser):
            full_name = account.full_name
            account_type = AccountType.HUMAN
        elif isinstance(account, ServiceAccount):
            full_name = account.name
            account_type = AccountType.SERVICE
        else:
            raise UnsupportedAccountTypeError(f"unsupported account type: {type(account).__name__}")

        profile: Dict[str, Any] = {
            "id": account.id,
            "email": account.email,
            "created_at": format_timestamp(account.created_at),
            "created_by": account.created_by,
            "modified_at": format_timestamp(account.modified_at),
            "modified_by": account.modified_by,
            "full_name": full_name,
            "account_type": account_type.value,
        }

        trait = UserTrait(
            login=account.email,
            emails=[account.email] if account.email else [],
            status=ResourceMapper.account_status(account),
            account_type=account_type,
            created_at=account.created_at,
            profile=profile,
        )

        if isinstance(account, HumanUser):
            if account.is_locked is not None:
                profile["is_locked"] = account.is_locked
            if account.is_mfa_enabled is not None:
                trait.mfa_enabled = account.is_mfa_enabled
            if account.last_login_timestamp is not None:
                trait.last_login = account.last_login_timestamp

        return Resource(
            id=ResourceId(resource_type=resource_type.id, resource=account.id),
            display_name=full_name,
            user_trait=trait,
        )

    @staticmethod
    def role_to_resource(role: Role, resource_type: ResourceType = ROLE_RESOURCE_TYPE) -> Resource:
        """Convert a role into a role resource; a missing description becomes ''."""
        description = role.description or ""
        profile: Dict[str, Any] = {
            "role_id": role.id,
            "role_name": role.name,
            "description": description,
            "modified_by": role.modified_by,
            "modified_at": role.modified_at,
            "created_by": role.created_by,
            "created_at": role.created_at,
        }
        if role.system_defined is not None:
            profile["system_defined"] = role.system_defined
        if role.capabilities is not None:
            profile["capabilities"] = ",".join(role.capabilities)

        return Resource(
            id=ResourceId(resource_type=resource_type.id, resource=role.id),
            display_name=role.name,
            description=description,
            role_trait=RoleTrait(profile=profile),
        )

    @staticmethod
    def principal_for_member(user_id: str, resource_type: ResourceType = USER_RESOURCE_TYPE) -> Resource:
        """Bare user resource referenced by a role's member list."""
        return Resource(id=ResourceId(resource_type=resource_type.id, resource=user_id))
