"""Tests for health check validator."""
from unittest.mock import patch

from spider.adapters.driven.config.health_check import main
from spider.adapters.driven.config.settings import Settings, TargetConfig

__all__ = []


def make_settings(n_targets: int) -> Settings:
    return Settings(
        config_file="spider.yml",
        targets={
            f"t{i}": TargetConfig(url=f"http://t{i}.example.test/") for i in range(n_targets)
        },
    )


def test_health_check_success() -> None:
    """Health check should return 0 when configuration loads with targets."""
    with (
        patch("spider.adapters.driven.config.health_check.load_settings") as mock_load,
        patch("spider.adapters.driven.config.health_check.logger") as mock_logger,
    ):
        mock_load.return_value = make_settings(2)
        result = main()

    assert result == 0
    mock_logger.info.assert_called_once_with(
        "Spider healthcheck OK: targets=2, timeout=<default>, spider=<default>, listen=:8080"
    )


def test_health_check_failure_on_config_error() -> None:
    """Health check should return 1 when configuration fails to load."""
    with patch("spider.adapters.driven.config.health_check.load_settings") as mock_load:
        mock_load.side_effect = ValueError("invalid target 'api': unsupported scheme")
        result = main()

    assert result == 1


def test_health_check_failure_without_targets() -> None:
    """Health check should return 1 when no target is configured."""
    with (
        patch("spider.adapters.driven.config.health_check.load_settings") as mock_load,
        patch("spider.adapters.driven.config.health_check.logger") as mock_logger,
    ):
        mock_load.return_value = make_settings(0)
        result = main()

    assert result == 1
    assert "no targets in spider.yml" in mock_logger.error.call_args.args[0]
