"""Loading and validating balance configuration from data, files or HTTP."""

import json
import logging
import os
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from label_sim.config.defaults import DEFAULT_BALANCE
from label_sim.config.exceptions import ConfigurationError
from label_sim.config.models import BalanceConfig
from label_sim.config.service import ConfigurationService

logger = logging.getLogger(__name__)

BALANCE_FILE_ENV = "LABEL_SIM_BALANCE_FILE"


def parse_balance_config(data: dict[str, Any]) -> BalanceConfig:
    """Validate raw balance data.

    Args:
        data: Parsed balance table.

    Returns:
        Validated BalanceConfig.

    Raises:
        ConfigurationError: If any section is missing or malformed.
    """
    try:
        return BalanceConfig.model_validate(data)
    except ValidationError as e:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        logger.error("Balance configuration rejected with %d errors", len(errors))
        raise ConfigurationError(
            f"Invalid balance configuration: {len(errors)} error(s)", errors=errors
        ) from e


def load_balance_config(path: Path) -> BalanceConfig:
    """Load and validate a balance table from a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Validated BalanceConfig.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        logger.exception("Failed to read balance file %s", path)
        raise ConfigurationError(f"Cannot read balance file: {path}") from e
    except json.JSONDecodeError as e:
        logger.exception("Failed to parse balance file %s", path)
        raise ConfigurationError(f"Balance file is not valid JSON: {path}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Balance file must contain a JSON object: {path}")

    config = parse_balance_config(data)
    logger.info("Loaded balance configuration %s from %s", config.version, path)
    return config


async def fetch_balance_config(
    url: str,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = 10.0,
) -> BalanceConfig:
    """Download and validate a balance table over HTTP.

    Args:
        url: URL returning the balance table as JSON.
        transport: Optional transport, used by tests to mock responses.
        timeout: Request timeout in seconds.

    Returns:
        Validated BalanceConfig.

    Raises:
        ConfigurationError: If the request fails or the payload is invalid.
    """
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.exception("HTTP error while fetching balance configuration")
            raise ConfigurationError(f"HTTP error fetching balance: {e}") from e

    if response.status_code != 200:
        logger.error(
            "Balance fetch failed: status=%d url=%s", response.status_code, url
        )
        raise ConfigurationError(
            f"Balance fetch failed with status {response.status_code}"
        )

    try:
        data = response.json()
    except json.JSONDecodeError as e:
        raise ConfigurationError("Balance response is not valid JSON") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Balance response must be a JSON object")

    config = parse_balance_config(data)
    logger.info("Fetched balance configuration %s from %s", config.version, url)
    return config


def default_balance_config() -> BalanceConfig:
    """Validate and return the built-in balance table."""
    return parse_balance_config(DEFAULT_BALANCE)


# Shared instance
_configuration_service: ConfigurationService | None = None


def get_configuration_service() -> ConfigurationService:
    """Get or create the shared configuration service.

    Uses the file named by LABEL_SIM_BALANCE_FILE when set, otherwise the
    built-in defaults.
    """
    global _configuration_service
    if _configuration_service is None:
        balance_file = os.environ.get(BALANCE_FILE_ENV)
        if balance_file:
            config = load_balance_config(Path(balance_file))
        else:
            config = default_balance_config()
        _configuration_service = ConfigurationService(config)
    return _configuration_service
