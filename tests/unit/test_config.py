"""Unit tests for settings and layout configuration."""

import pytest
from pydantic import ValidationError

from forcegraph.config import Settings, get_test_settings
from forcegraph.layout import LayoutConfig


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self, test_settings: Settings) -> None:
        assert test_settings.canvas_width == 960
        assert test_settings.canvas_height == 540
        assert test_settings.link_distance == 220
        assert test_settings.publish_every == 2
        assert not test_settings.explorer_autoload

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINK_DISTANCE", "150")
        monkeypatch.setenv("NEO4J_URI", "bolt://graph:7687")

        settings = Settings()

        assert settings.link_distance == 150
        assert settings.neo4j_uri == "bolt://graph:7687"

    def test_damping_must_bleed_energy(self) -> None:
        with pytest.raises(ValidationError):
            Settings(damping=1.0)

    def test_test_settings(self) -> None:
        assert get_test_settings().tick_interval == 0.0


class TestLayoutConfig:
    """Tests for LayoutConfig."""

    def test_center(self, layout_config: LayoutConfig) -> None:
        assert layout_config.center == (480.0, 270.0)

    def test_from_settings(self, test_settings: Settings) -> None:
        settings = test_settings.model_copy(update={"canvas_width": 800, "repel_strength": 900})

        config = LayoutConfig.from_settings(settings)

        assert config.width == 800
        assert config.height == 540
        assert config.repel_strength == 900
        assert config.tick_interval == 0.0
        assert config.center == (400, 270)
