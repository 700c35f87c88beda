"""Tests for ConfigLoader."""

import pytest

from ec2ctl.core.config import ConfigLoader


@pytest.fixture
def loader() -> ConfigLoader:
    return ConfigLoader()


def test_missing_file_yields_empty_defaults(loader) -> None:
    assert loader.load_config() == {"defaults": {}}


def test_built_in_defaults(loader) -> None:
    settings = loader.get_settings(loader.load_config())

    assert settings["region"] is None
    assert settings["timeout"] == 300
    assert settings["poll_interval"] == 5.0
    assert settings["case_sensitive"] is False
    assert settings["log_level"] == "WARNING"


def test_env_var_selects_file(loader, write_config) -> None:
    write_config({"defaults": {"region": "eu-central-1", "timeout": 60}})

    settings = loader.get_settings(loader.load_config())

    assert settings["region"] == "eu-central-1"
    assert settings["timeout"] == 60
    assert settings["poll_interval"] == 5.0


def test_explicit_path(loader, tmp_path) -> None:
    path = tmp_path / "other.yaml"
    path.write_text("defaults:\n  poll_interval: 1.5\n")

    config = loader.load_config(str(path))

    assert config == {"defaults": {"poll_interval": 1.5}}


def test_empty_file(loader, config_file) -> None:
    config_file.write_text("")

    assert loader.load_config() == {"defaults": {}}


def test_overrides_win_over_file(loader, write_config) -> None:
    write_config({"defaults": {"region": "eu-central-1", "timeout": 60}})

    settings = loader.get_settings(
        loader.load_config(), {"region": "us-west-2", "timeout": None}
    )

    assert settings["region"] == "us-west-2"
    assert settings["timeout"] == 60


def test_interpolation_is_resolved(loader, config_file) -> None:
    config_file.write_text(
        "vars:\n  home_region: ap-south-1\n"
        "defaults:\n  region: ${vars.home_region}\n"
    )

    settings = loader.get_settings(loader.load_config())

    assert settings["region"] == "ap-south-1"


def test_invalid_yaml(loader, config_file) -> None:
    config_file.write_text("defaults: [unclosed\n")

    with pytest.raises(ValueError, match="Invalid YAML"):
        loader.load_config()


def test_unresolvable_interpolation(loader, config_file) -> None:
    config_file.write_text("defaults:\n  region: ${vars.missing}\n")

    with pytest.raises(ValueError, match="resolution"):
        loader.load_config()


def test_top_level_must_be_mapping(loader, config_file) -> None:
    config_file.write_text("- a\n- b\n")

    with pytest.raises(ValueError, match="mapping"):
        loader.load_config()


@pytest.mark.parametrize(
    "defaults, message",
    [
        ({"colour": "red"}, "Unknown configuration keys: colour"),
        ({"region": 42}, "region must be a string"),
        ({"timeout": "soon"}, "timeout must be a number"),
        ({"poll_interval": -1}, "poll_interval must not be negative"),
        ({"poll_interval": 0}, "poll_interval must be greater than zero"),
        ({"waiter_max_attempts": 0}, "waiter_max_attempts must be a positive integer"),
        ({"case_sensitive": "yes"}, "case_sensitive must be a boolean"),
        ({"log_level": "LOUD"}, "log_level must be one of"),
    ],
)
def test_validation(loader, defaults, message) -> None:
    with pytest.raises(ValueError, match=message):
        loader.get_settings({"defaults": defaults})


def test_zero_timeout_is_valid(loader) -> None:
    assert loader.get_settings({"defaults": {"timeout": 0}})["timeout"] == 0
