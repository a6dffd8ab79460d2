"""Connector-level exceptions raised by the mapper and the syncers."""
from __future__ import annotations

from typing import Optional

from .resources import Annotations


class ConnectorError(Exception):
    """Base exception for connector operations.

    Attributes:
        annotations: Rate-limit and other metadata gathered before the failure
    """

    def __init__(self, message: str, *, annotations: Optional[Annotations] = None):
        self.annotations = annotations if annotations is not None else Annotations()
        super().__init__(message)


class UnsupportedAccountTypeError(ConnectorError, TypeError):
    """An account record was neither a human user nor a service account."""
    pass


class PreconditionError(ConnectorError, ValueError):
    """Required input was missing or invalid; no API call was made."""
    pass


class InvalidPrincipalError(ConnectorError):
    """Grant/revoke principal is not a user resource; no API call was made."""
    pass


class SyncError(ConnectorError):
    """A listing or provisioning call failed upstream."""
    pass


class DeletionVerificationError(SyncError):
    """The delete call succeeded but the account is still resolvable."""
    pass


class PaginationCycleError(ConnectorError):
    """A listing returned a page token that was already visited."""
    pass
