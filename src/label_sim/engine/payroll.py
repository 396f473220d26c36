"""Executive payroll calculation."""

import logging
from typing import Protocol

from label_sim.config import ConfigurationError, RoleNotFound, RoleSalary
from label_sim.models import PayrollEntry, PayrollResult
from label_sim.storage import Storage, StorageError

logger = logging.getLogger(__name__)


class RoleSalaryResolver(Protocol):
    """Protocol for resolving an executive role to a salary."""

    def resolve_role_salary(self, role: str) -> RoleSalary | RoleNotFound:
        """Return the role's salary or an explicit not-found value."""
        ...


def calculate_executive_salaries(
    storage: Storage,
    resolver: RoleSalaryResolver,
    game_id: str,
) -> PayrollResult:
    """Sum the salaries of every executive of a game.

    Unknown roles cost nothing and are logged. A storage or configuration
    failure yields an empty payroll instead of failing the caller.

    Args:
        storage: Storage to read executives from.
        resolver: Role-to-salary resolver (the configuration service).
        game_id: Game identifier.

    Returns:
        PayrollResult with the total and one entry per executive.
    """
    try:
        executives = storage.list_executives(game_id)
    except StorageError:
        logger.warning("Could not load executives for game %s", game_id, exc_info=True)
        return PayrollResult()

    breakdown: list[PayrollEntry] = []
    for executive in executives:
        try:
            lookup = resolver.resolve_role_salary(executive.role)
        except ConfigurationError:
            logger.warning("Salary lookup failed for game %s", game_id, exc_info=True)
            return PayrollResult()

        if isinstance(lookup, RoleNotFound):
            logger.warning(
                "Unknown executive role '%s' for executive %s; salary is 0",
                executive.role,
                executive.id,
            )
            salary = 0
        else:
            salary = lookup.salary

        breakdown.append(
            PayrollEntry(
                executive_id=executive.id,
                role=executive.role,
                name=executive.name,
                salary=salary,
                resolved=not isinstance(lookup, RoleNotFound),
            )
        )

    return PayrollResult(total=sum(entry.salary for entry in breakdown), breakdown=breakdown)
