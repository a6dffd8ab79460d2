"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.sumologic.client import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

SECRETS_DIR = Path("/run/secrets")

# Regional API endpoints, keyed by deployment code.
REGION_BASE_URLS = {
    "AU": "https://api.au.sumologic.com",
    "CA": "https://api.ca.sumologic.com",
    "DE": "https://api.de.sumologic.com",
    "EU": "https://api.eu.sumologic.com",
    "FED": "https://api.fed.sumologic.com",
    "IN": "https://api.in.sumologic.com",
    "JP": "https://api.jp.sumologic.com",
    "KR": "https://api.kr.sumologic.com",
    "US1": "https://api.sumologic.com",
    "US2": "https://api.us2.sumologic.com",
}


class ConfigurationError(RuntimeError):
    """Required configuration is missing or malformed."""
    pass


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = SECRETS_DIR / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.debug(f"Loaded {secret_name} from {SECRETS_DIR}")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read {secret_file}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug(f"Loaded {env_var} from environment")
            return secret_value

    return None


def _env_bool(var_name: str, default: bool) -> bool:
    value = os.environ.get(var_name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_timeout(var_name: str) -> Optional[float]:
    value = os.environ.get(var_name, "").strip()
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigurationError(f"{var_name} must be a number of seconds, got {value!r}")
    if timeout <= 0:
        raise ConfigurationError(f"{var_name} must be positive, got {value!r}")
    return timeout


def resolve_base_url(value: str) -> str:
    """Accept either a full URL or a region code such as ``EU``."""
    value = value.strip()
    region = REGION_BASE_URLS.get(value.upper())
    if region:
        return region
    return value.rstrip("/")


@dataclass
class ConnectorConfig:
    """Connector configuration container."""
    api_access_id: str
    api_access_key: str
    api_base_url: str = DEFAULT_BASE_URL
    include_service_accounts: bool = True
    request_timeout: Optional[float] = None
    audit_enabled: bool = False
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"ConnectorConfig(api_base_url={self.api_base_url!r}, api_access_id={self.api_access_id!r}, "
            f"api_access_key='***', include_service_accounts={self.include_service_accounts}, "
            f"request_timeout={self.request_timeout}, audit_enabled={self.audit_enabled}, "
            f"log_level={self.log_level!r})"
        )


def load_settings() -> ConnectorConfig:
    """Load connector settings from environment and /run/secrets.

    Raises:
        ConfigurationError: If the access id or key is missing
    """
    access_id = _load_secret_from_file("sumo_api_access_id", "SUMO_API_ACCESS_ID")
    access_key = _load_secret_from_file("sumo_api_access_key", "SUMO_API_ACCESS_KEY")

    missing = [
        name
        for name, value in (("SUMO_API_ACCESS_ID", access_id), ("SUMO_API_ACCESS_KEY", access_key))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"{', '.join(missing)} not found in {SECRETS_DIR} or environment"
        )

    api_base_url = resolve_base_url(os.environ.get("SUMO_API_BASE_URL") or DEFAULT_BASE_URL)
    include_service_accounts = _env_bool("SUMO_INCLUDE_SERVICE_ACCOUNTS", True)
    request_timeout = _env_timeout("SUMO_REQUEST_TIMEOUT")
    audit_enabled = _env_bool("SUMO_AUDIT_ENABLED", False)
    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    logger.info(
        f"Settings loaded: base_url={api_base_url}; "
        f"include_service_accounts={include_service_accounts}"
    )

    return ConnectorConfig(
        api_access_id=access_id,
        api_access_key=access_key,
        api_base_url=api_base_url,
        include_service_accounts=include_service_accounts,
        request_timeout=request_timeout,
        audit_enabled=audit_enabled,
        log_level=log_level,
    )
