"""Balance configuration: validated tables and typed accessors."""

from label_sim.config.defaults import DEFAULT_BALANCE
from label_sim.config.exceptions import ConfigurationError
from label_sim.config.loader import (
    default_balance_config,
    fetch_balance_config,
    get_configuration_service,
    load_balance_config,
    parse_balance_config,
)
from label_sim.config.models import BalanceConfig
from label_sim.config.service import (
    ACCESS_KINDS,
    ConfigurationService,
    RoleNotFound,
    RoleSalary,
)

__all__ = [
    "ACCESS_KINDS",
    "DEFAULT_BALANCE",
    "BalanceConfig",
    "ConfigurationError",
    "ConfigurationService",
    "RoleNotFound",
    "RoleSalary",
    "default_balance_config",
    "fetch_balance_config",
    "get_configuration_service",
    "load_balance_config",
    "parse_balance_config",
]
