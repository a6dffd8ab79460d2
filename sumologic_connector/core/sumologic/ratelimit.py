"""Rate-limit metadata carried alongside every API outcome.

The descriptor is extracted from response headers on success and failure
alike. Extraction never raises: unknown or malformed headers simply leave
the corresponding field unset.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Mapping, Optional

from requests.structures import CaseInsensitiveDict

logger = logging.getLogger(__name__)

LIMIT_HEADERS = ("X-Ratelimit-Limit", "Ratelimit-Limit", "X-RateLimit-Requests-Limit")
REMAINING_HEADERS = ("X-Ratelimit-Remaining", "Ratelimit-Remaining", "X-RateLimit-Requests-Remaining")
RESET_HEADERS = ("X-Ratelimit-Reset", "Ratelimit-Reset", "X-RateLimit-Requests-Reset", "Retry-After")

# Reset values above this are unix timestamps, below it are relative seconds.
_EPOCH_THRESHOLD = 1_000_000_000


class RateLimitStatus(str, enum.Enum):
    UNSPECIFIED = "unspecified"
    OK = "ok"
    OVERLIMIT = "overlimit"
    ERROR = "error"


@dataclass(frozen=True)
class RateLimitDescription:
    """Remaining quota and reset time reported with a request."""

    status: RateLimitStatus = RateLimitStatus.UNSPECIFIED
    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self == RateLimitDescription()

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "limit": self.limit,
            "remaining": self.remaining,
            "reset_at": self.reset_at.isoformat() if self.reset_at else None,
        }


def _first_header(headers: Mapping[str, str], names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = headers.get(name)
        if value not in (None, ""):
            return str(value).strip()
    return None


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None


def _parse_reset(value: Optional[str], now: datetime) -> Optional[datetime]:
    if value is None:
        return None
    seconds = _parse_int(value)
    if seconds is not None:
        if seconds >= _EPOCH_THRESHOLD:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        return now + timedelta(seconds=max(seconds, 0))
    # Retry-After may carry an HTTP date
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None


def extract_rate_limit(
    headers: Optional[Mapping[str, str]],
    status_code: Optional[int] = None,
    now: Optional[datetime] = None,
) -> RateLimitDescription:
    """Build a descriptor from response headers; returns the zero value on any problem."""
    if not headers:
        if status_code == 429:
            return RateLimitDescription(status=RateLimitStatus.OVERLIMIT)
        return RateLimitDescription()

    now = now or datetime.now(timezone.utc)
    try:
        headers = CaseInsensitiveDict(headers)
        limit = _parse_int(_first_header(headers, LIMIT_HEADERS))
        remaining = _parse_int(_first_header(headers, REMAINING_HEADERS))
        reset_at = _parse_reset(_first_header(headers, RESET_HEADERS), now)
    except Exception as exc:  # header parsing must never fail the call
        logger.debug(f"Ignoring unparseable rate-limit headers: {exc}")
        return RateLimitDescription()

    if status_code == 429:
        status = RateLimitStatus.OVERLIMIT
    elif limit is None and remaining is None and reset_at is None:
        status = RateLimitStatus.UNSPECIFIED
    else:
        status = RateLimitStatus.OK

    return RateLimitDescription(status=status, limit=limit, remaining=remaining, reset_at=reset_at)
