"""Tests for balance configuration loading and lookups."""

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from label_sim.config import (
    DEFAULT_BALANCE,
    ConfigurationError,
    ConfigurationService,
    RoleNotFound,
    RoleSalary,
    fetch_balance_config,
    load_balance_config,
    parse_balance_config,
)
from label_sim.config import loader
from tests.conftest import balance_with, create_mock_transport


class TestParseBalanceConfig:
    """Tests for validation of raw balance tables."""

    def test_default_table_is_valid(self) -> None:
        """The built-in table passes validation."""
        config = parse_balance_config(DEFAULT_BALANCE)
        assert config.version == "2025.1"
        assert config.economy.starting_money == 75000

    def test_unknown_key_rejected(self) -> None:
        """Unexpected keys are errors, not silently ignored."""
        data = balance_with(**{"economy.surprise": 1})

        with pytest.raises(ConfigurationError) as exc_info:
            parse_balance_config(data)

        assert exc_info.value.errors
        assert any("economy" in err["loc"] for err in exc_info.value.errors)

    def test_breakpoints_must_increase(self) -> None:
        """Budget breakpoints out of order are rejected."""
        data = balance_with(**{"quality.budget.breakpoints.optimal_efficiency": 0.9})

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_segment_multipliers_must_not_decrease(self) -> None:
        """A falling budget curve is rejected."""
        data = balance_with(**{"quality.budget.segment_multipliers.luxury_threshold": 1.0})

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_decay_rate_bounds(self) -> None:
        """Monthly decay rate must lie in (0, 1]."""
        data = balance_with(**{"streaming.ongoing.monthly_decay_rate": 1.5})

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_access_tiers_need_none_tier(self) -> None:
        """Every access tier table needs a zero-threshold "none" tier."""
        data = balance_with()
        del data["access_tiers"]["playlist"]["none"]

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_quality_floor_below_song_minimum(self) -> None:
        """Generated quality can never fall below the lowest valid song quality."""
        data = balance_with(**{"quality.generation.quality_floor": 5})

        with pytest.raises(ConfigurationError) as exc_info:
            parse_balance_config(data)

        assert any("quality_floor" in err["loc"] for err in exc_info.value.errors)

    def test_starting_reputation_capped(self) -> None:
        """Reputation starts inside 0-100."""
        data = balance_with(**{"economy.starting_reputation": 120})

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_seasonal_table_needs_every_quarter(self) -> None:
        """Seasonal multipliers must cover q1 through q4."""
        data = balance_with()
        del data["releases"]["seasonal_cost_multipliers"]["q4"]

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_synergy_with_unknown_channel(self) -> None:
        """Channel synergies may only name configured channels."""
        data = balance_with(
            **{"releases.channel_synergies": [{"channels": ["radio", "tv"], "bonus": 0.1}]}
        )

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_diversity_cap_below_base(self) -> None:
        """The diversity bonus cap cannot be lower than its base."""
        data = balance_with(
            **{
                "releases.diversity_bonus": {
                    "base": 1.0,
                    "per_additional_channel": 0.08,
                    "maximum": 0.9,
                }
            }
        )

        with pytest.raises(ConfigurationError):
            parse_balance_config(data)

    def test_missing_section_rejected(self) -> None:
        """A table without a required section is rejected."""
        data = balance_with()
        del data["progression"]

        with pytest.raises(ConfigurationError) as exc_info:
            parse_balance_config(data)

        assert any(err["loc"] == "progression" for err in exc_info.value.errors)


class TestLoadBalanceConfig:
    """Tests for loading balance tables from disk."""

    def test_load_from_file(self, tmp_path: Path) -> None:
        """A valid JSON file loads into a BalanceConfig."""
        path = tmp_path / "balance.json"
        path.write_text(json.dumps(balance_with(version="test-1")))

        config = load_balance_config(path)

        assert config.version == "test-1"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_balance_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON is a configuration error."""
        path = tmp_path / "balance.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_balance_config(path)

    def test_non_object(self, tmp_path: Path) -> None:
        """A JSON array is not a balance table."""
        path = tmp_path / "balance.json"
        path.write_text("[]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_balance_config(path)

    def test_service_uses_env_file(self, tmp_path: Path) -> None:
        """LABEL_SIM_BALANCE_FILE selects the balance file."""
        path = tmp_path / "balance.json"
        path.write_text(json.dumps(balance_with(version="from-env")))

        with (
            patch.object(loader, "_configuration_service", None),
            patch.dict("os.environ", {"LABEL_SIM_BALANCE_FILE": str(path)}),
        ):
            service = loader.get_configuration_service()
            assert service.version == "from-env"
            assert loader.get_configuration_service() is service


@pytest.mark.anyio
class TestFetchBalanceConfig:
    """Tests for downloading balance tables over HTTP."""

    async def test_fetch_success(self) -> None:
        """A 200 response with a valid table is parsed."""
        transport = create_mock_transport(
            {"/balance.json": httpx.Response(200, json=balance_with(version="remote"))}
        )

        config = await fetch_balance_config(
            "https://config.example/balance.json", transport=transport
        )

        assert config.version == "remote"

    async def test_fetch_http_error(self) -> None:
        """Non-200 responses become configuration errors."""
        transport = create_mock_transport(
            {"/balance.json": httpx.Response(500, text="Internal Server Error")}
        )

        with pytest.raises(ConfigurationError, match="status 500"):
            await fetch_balance_config(
                "https://config.example/balance.json", transport=transport
            )

    async def test_fetch_invalid_table(self) -> None:
        """A downloaded table still goes through validation."""
        data = balance_with()
        del data["tour"]
        transport = create_mock_transport({"/balance.json": httpx.Response(200, json=data)})

        with pytest.raises(ConfigurationError, match="Invalid balance configuration"):
            await fetch_balance_config(
                "https://config.example/balance.json", transport=transport
            )


class TestConfigurationService:
    """Tests for typed configuration lookups."""

    def test_producer_tier(self, config: ConfigurationService) -> None:
        """Known producer tiers resolve; unknown ones raise."""
        assert config.producer_tier("national").skill == 75

        with pytest.raises(ConfigurationError, match="producer"):
            config.producer_tier("mythical")

    def test_access_tiers_sorted(self, config: ConfigurationService) -> None:
        """Access tiers are listed lowest threshold first."""
        names = [name for name, _ in config.access_tiers("playlist")]
        assert names == ["none", "niche", "mid", "flagship"]

    def test_unknown_access_kind(self, config: ConfigurationService) -> None:
        """Only playlist, press and venue are access kinds."""
        with pytest.raises(ConfigurationError, match="kind"):
            config.access_tiers("radio")

    def test_release_type_multiplier(self, config: ConfigurationService) -> None:
        """Release types carry revenue multipliers."""
        assert config.release_type_multiplier("ep") == 1.15

        with pytest.raises(ConfigurationError):
            config.release_type_multiplier("mixtape")

    def test_songs_per_turn(self, config: ConfigurationService) -> None:
        """Tours do not record songs."""
        assert config.songs_per_turn("ep") == 3

        with pytest.raises(ConfigurationError):
            config.songs_per_turn("tour")

    def test_role_salary_lookup(self, config: ConfigurationService) -> None:
        """Role lookups return a salary or an explicit not-found value."""
        found = config.resolve_role_salary("cmo")
        missing = config.resolve_role_salary("intern")

        assert isinstance(found, RoleSalary)
        assert found.salary == 5500
        assert isinstance(missing, RoleNotFound)
        assert missing.found is False

    def test_marketing_channel_effectiveness(self, config: ConfigurationService) -> None:
        """Configured channels carry an effectiveness weight."""
        assert config.marketing_channel_effectiveness("digital") == 0.92

        with pytest.raises(ConfigurationError, match="channel"):
            config.marketing_channel_effectiveness("billboards")

    def test_seasonal_multipliers(self, config: ConfigurationService) -> None:
        """Each quarter has revenue and cost multipliers."""
        assert config.seasonal_revenue_multiplier("q4") == 1.4
        assert config.seasonal_cost_multiplier("q1") == 0.85

        with pytest.raises(ConfigurationError, match="season"):
            config.seasonal_cost_multiplier("q5")
