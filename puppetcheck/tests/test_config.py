import json
import pytest
from puppetcheck.shared.config import ConfigError, load_check_config, validate_settings


def test_load_config_from_file(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({
        "critical": 10800,
        "warning": 5400,
        "statefile": "/opt/puppetlabs/puppet/cache/state/last_run_summary.yaml",
    }))
    config = load_check_config(str(config_file))
    assert config["critical"] == 10800
    assert config["statefile"].endswith("last_run_summary.yaml")


def test_load_config_with_defaults(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"daemon": 0}))
    defaults = {"critical": 7200, "daemon": 1}
    config = load_check_config(str(config_file), defaults=defaults)
    assert config["daemon"] == 0
    assert config["critical"] == 7200


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        load_check_config("/nonexistent/config.json")


def test_load_config_invalid_json(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")
    with pytest.raises(ValueError):
        load_check_config(str(config_file))


def test_load_config_rejects_json_array(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("[]")
    with pytest.raises(ConfigError):
        load_check_config(str(config_file), defaults={"critical": 7200})


def test_load_config_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"critical": 7200, "crit": 100}))
    with pytest.raises(ConfigError, match="crit"):
        load_check_config(str(config_file), defaults={"critical": 7200})


def test_load_config_rejects_non_string_paths(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"lockfile": 5}))
    with pytest.raises(ConfigError, match="lockfile"):
        load_check_config(str(config_file), defaults={"lockfile": None})


def test_load_config_accepts_null_paths(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"statefile": None}))
    config = load_check_config(str(config_file), defaults={"statefile": "/tmp/x", "critical": 7200})
    assert config == {"statefile": None, "critical": 7200}


def test_load_config_directory(tmp_path):
    with pytest.raises(OSError):
        load_check_config(str(tmp_path))


def test_validate_settings_rejects_scalar():
    with pytest.raises(ConfigError):
        validate_settings(7200)
