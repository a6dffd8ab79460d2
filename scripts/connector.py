"""Command-line wrapper around the Sumo Logic connector.

This module serves as a CLI wrapper around sumologic_connector.core.connector.
Every command prints JSON on stdout; failures print to stderr and exit 1.
"""
from __future__ import annotations
import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sumologic_connector import audit
from sumologic_connector.config import ConfigurationError, ConnectorConfig, load_settings
from sumologic_connector.core.connector import Connector, collect_resources
from sumologic_connector.core.exceptions import ConnectorError
from sumologic_connector.core.resource_mapper import ResourceMapper
from sumologic_connector.core.resources import (
    ROLE_ASSIGNMENT_ENTITLEMENT,
    ROLE_RESOURCE_TYPE,
    USER_RESOURCE_TYPE,
    Resource,
    ResourceId,
    new_assignment_entitlement,
    new_grant,
)
from sumologic_connector.core.sumologic.exceptions import SumoLogicError


def build_connector(config: ConnectorConfig) -> Connector:
    return Connector.from_config(config)


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def _emit(payload: Any) -> None:
    print(json.dumps(_to_jsonable(payload), indent=2, default=str))


def _role_resource(role_id: str) -> Resource:
    return Resource(id=ResourceId(resource_type=ROLE_RESOURCE_TYPE.id, resource=role_id))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sumo Logic connector helper")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (default: from settings)")

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("validate", help="Check credentials by listing one page of roles")
    sub.add_parser("list-users", help="List all human users and service accounts")
    sub.add_parser("list-roles", help="List all roles")

    rg = sub.add_parser("role-grants", help="List members of a role")
    rg.add_argument("--role-id", required=True)

    cu = sub.add_parser("create-user")
    cu.add_argument("--first-name", required=True)
    cu.add_argument("--last-name", required=True)
    cu.add_argument("--email", required=True)
    cu.add_argument("--default-role-id", required=True)

    du = sub.add_parser("delete-user")
    du.add_argument("--user-id", required=True)

    for name in ("grant", "revoke"):
        sp = sub.add_parser(name)
        sp.add_argument("--role-id", required=True)
        sp.add_argument("--user-id", required=True)

    sub.add_parser("verify-audit", help="Check the signatures in the provisioning audit log")

    return parser


def _run(args: argparse.Namespace, connector: Connector) -> Any:
    if args.cmd == "validate":
        annotations = connector.validate()
        rate_limit = annotations.rate_limit
        return {"valid": True, "rate_limit": rate_limit.to_dict() if rate_limit else None}

    if args.cmd == "list-users":
        return collect_resources(connector.users.list)

    if args.cmd == "list-roles":
        return collect_resources(connector.roles.list)

    if args.cmd == "role-grants":
        return connector.roles.grants(_role_resource(args.role_id)).grants

    if args.cmd == "create-user":
        resource, _ = connector.users.create_account({
            "first_name": args.first_name,
            "last_name": args.last_name,
            "email": args.email,
            "default_role_id": args.default_role_id,
        })
        return resource

    if args.cmd == "delete-user":
        connector.users.delete_account(ResourceId(resource_type=USER_RESOURCE_TYPE.id, resource=args.user_id))
        return {"deleted": args.user_id}

    principal = ResourceMapper.principal_for_member(args.user_id)
    role = _role_resource(args.role_id)
    if args.cmd == "grant":
        entitlement = new_assignment_entitlement(role, ROLE_ASSIGNMENT_ENTITLEMENT, grantable_to=(USER_RESOURCE_TYPE,))
        connector.roles.grant(principal, entitlement)
        return {"granted": args.role_id, "user_id": args.user_id}

    connector.roles.revoke(new_grant(role, ROLE_ASSIGNMENT_ENTITLEMENT, principal))
    return {"revoked": args.role_id, "user_id": args.user_id}


def main() -> None:
    """Command-line entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    if args.cmd == "verify-audit":
        total, valid = audit.verify_audit_log()
        _emit({"total": total, "valid": valid})
        if total != valid:
            sys.exit(1)
        return

    try:
        config = load_settings()
    except ConfigurationError as e:
        print(f"[config] Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        connector = build_connector(config)
        result = _run(args, connector)
    except (ConnectorError, SumoLogicError) as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)

    _emit(result)


if __name__ == "__main__":
    main()
