"""Typed, read-only access to the validated balance table."""

import logging
from typing import Literal

from pydantic import BaseModel

from label_sim.config.exceptions import ConfigurationError
from label_sim.config.models import (
    AccessTier,
    BalanceConfig,
    EconomyConfig,
    PressConfig,
    ProducerTier,
    ProgressionConfig,
    ProjectCostRange,
    QualitySystemConfig,
    ReleaseConfig,
    StreamingConfig,
    TimeInvestmentTier,
    TourConfig,
)

logger = logging.getLogger(__name__)

AccessKind = Literal["playlist", "press", "venue"]
ACCESS_KINDS: tuple[AccessKind, ...] = ("playlist", "press", "venue")


class RoleSalary(BaseModel):
    """Salary resolved for an executive role."""

    role: str
    salary: int
    found: Literal[True] = True


class RoleNotFound(BaseModel):
    """Role has no salary entry in the balance table."""

    role: str
    found: Literal[False] = False


class ConfigurationService:
    """Accessors over a BalanceConfig.

    The wrapped config is immutable. Lookups of unknown keys raise
    ConfigurationError, except role salaries which return RoleNotFound.
    """

    def __init__(self, config: BalanceConfig) -> None:
        self._config = config

    @property
    def config(self) -> BalanceConfig:
        return self._config

    @property
    def version(self) -> str:
        return self._config.version

    @property
    def economy(self) -> EconomyConfig:
        return self._config.economy

    @property
    def streaming(self) -> StreamingConfig:
        return self._config.streaming

    @property
    def tour(self) -> TourConfig:
        return self._config.tour

    @property
    def press(self) -> PressConfig:
        return self._config.press

    @property
    def quality(self) -> QualitySystemConfig:
        return self._config.quality

    @property
    def releases(self) -> ReleaseConfig:
        return self._config.releases

    @property
    def progression(self) -> ProgressionConfig:
        return self._config.progression

    def producer_tier(self, tier: str) -> ProducerTier:
        """Get a producer tier.

        Raises:
            ConfigurationError: If the tier is not configured.
        """
        try:
            return self._config.producer_tiers[tier]
        except KeyError:
            raise ConfigurationError(f"Unknown producer tier: {tier}") from None

    def time_investment(self, tier: str) -> TimeInvestmentTier:
        """Get a time investment tier.

        Raises:
            ConfigurationError: If the tier is not configured.
        """
        try:
            return self._config.time_investment[tier]
        except KeyError:
            raise ConfigurationError(f"Unknown time investment tier: {tier}") from None

    def _tier_table(self, kind: str) -> dict[str, AccessTier]:
        if kind not in ACCESS_KINDS:
            raise ConfigurationError(f"Unknown access tier kind: {kind}")
        return getattr(self._config.access_tiers, kind)

    def access_tiers(self, kind: str) -> list[tuple[str, AccessTier]]:
        """List the tiers of one access kind, lowest threshold first."""
        table = self._tier_table(kind)
        return sorted(table.items(), key=lambda item: item[1].threshold)

    def access_tier(self, kind: str, tier: str) -> AccessTier:
        """Get one access tier.

        Raises:
            ConfigurationError: If the kind or tier is not configured.
        """
        table = self._tier_table(kind)
        try:
            return table[tier]
        except KeyError:
            raise ConfigurationError(f"Unknown {kind} access tier: {tier}") from None

    def access_tier_multiplier(self, kind: str, tier: str) -> float:
        """Reach multiplier of an access tier."""
        return self.access_tier(kind, tier).multiplier

    def project_cost_range(self, project_type: str) -> ProjectCostRange:
        """Get the cost range for a project type.

        Raises:
            ConfigurationError: If the project type has no cost range.
        """
        try:
            return self._config.economy.project_costs[project_type]
        except KeyError:
            raise ConfigurationError(f"No project cost range for: {project_type}") from None

    def base_per_song_cost(self, project_type: str) -> int:
        """Per-song base cost, falling back to the configured default."""
        system = self._config.economy.song_count_cost_system
        return system.base_per_song_cost.get(project_type, system.default_per_song_cost)

    def release_type_multiplier(self, release_type: str) -> float:
        """Revenue multiplier for a release type.

        Raises:
            ConfigurationError: If the release type is not configured.
        """
        try:
            return self._config.releases.type_multipliers[release_type]
        except KeyError:
            raise ConfigurationError(f"Unknown release type: {release_type}") from None

    def marketing_channel_effectiveness(self, channel: str) -> float:
        """Effectiveness weight of a marketing channel.

        Raises:
            ConfigurationError: If the channel is not configured.
        """
        try:
            return self._config.releases.marketing_channels[channel].effectiveness
        except KeyError:
            raise ConfigurationError(f"Unknown marketing channel: {channel}") from None

    def seasonal_revenue_multiplier(self, season: str) -> float:
        try:
            return self._config.releases.seasonal_revenue_multipliers[season]
        except KeyError:
            raise ConfigurationError(f"Unknown season: {season}") from None

    def seasonal_cost_multiplier(self, season: str) -> float:
        try:
            return self._config.releases.seasonal_cost_multipliers[season]
        except KeyError:
            raise ConfigurationError(f"Unknown season: {season}") from None

    def songs_per_turn(self, project_type: str) -> int:
        """Number of songs a recording project produces per turn.

        Raises:
            ConfigurationError: If the project type does not record songs.
        """
        try:
            return self._config.quality.generation.songs_per_turn[project_type]
        except KeyError:
            raise ConfigurationError(f"No songs_per_turn entry for: {project_type}") from None

    def resolve_role_salary(self, role: str) -> RoleSalary | RoleNotFound:
        """Resolve the salary of an executive role without raising."""
        role_config = self._config.executives.roles.get(role)
        if role_config is None:
            return RoleNotFound(role=role)
        return RoleSalary(role=role, salary=role_config.base_salary)
