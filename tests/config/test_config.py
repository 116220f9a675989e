import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from config.config import (
    DiscoveredServers,
    ExplicitServers,
    MessagingConfig,
    MetricsConfig,
    NatsConfig,
    _cli_main,
    _deep_merge,
    _expand_env_vars,
    get_config,
    get_config_value,
    load_config,
    load_yaml,
    reset_config,
    set_config,
)
from core.errors.exceptions import ConfigurationError
from core.security.tls import TLSConfig

NATS_ENV_VARS = ("NATS_SERVERS", "NATS_DISCOVERY_NAME", "NATS_LOG_SUBJECT")


@pytest.fixture(autouse=True)
def clean_nats_env(monkeypatch):
    for var in NATS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


def _write_config(tmp_path, text):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(text)
    return config_file


# =========================================================================
# load_yaml / helpers
# =========================================================================


class TestLoadYaml:
    def test_returns_empty_dict_for_nonexistent_file(self):
        assert load_yaml(Path("/nonexistent/path/config.yaml")) == {}

    def test_loads_yaml_file(self, tmp_path):
        config_file = _write_config(tmp_path, "key: value\nnested:\n  a: 1\n")
        assert load_yaml(config_file) == {"key": "value", "nested": {"a": 1}}

    def test_returns_empty_dict_for_empty_file(self, tmp_path):
        assert load_yaml(_write_config(tmp_path, "")) == {}


class TestGetConfigValue:
    def test_prefers_env_var_over_yaml(self):
        with patch.dict(os.environ, {"MY_VAR": "from_env"}):
            assert get_config_value("MY_VAR", "from_yaml", "default") == "from_env"

    def test_falls_back_to_yaml_value(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_config_value("MY_VAR", "from_yaml", "default") == "from_yaml"

    def test_falls_back_to_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_config_value("MY_VAR", "", "default") == "default"
            assert get_config_value("MY_VAR", None, "default") == "default"


class TestExpandEnvVars:
    def test_expands_nested_values(self):
        with patch.dict(os.environ, {"HOST": "nats.internal"}):
            result = _expand_env_vars({"servers": ["nats://${HOST}:4222"]})
        assert result == {"servers": ["nats://nats.internal:4222"]}

    def test_uses_default_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _expand_env_vars("${NATS_URL:-nats://localhost:4222}") == "nats://localhost:4222"

    def test_leaves_unset_without_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _expand_env_vars("${MISSING}") == "${MISSING}"

    def test_non_strings_untouched(self):
        assert _expand_env_vars({"port": 4222, "on": True}) == {"port": 4222, "on": True}


class TestDeepMerge:
    def test_merges_nested_dicts(self):
        base = {"nats": {"servers": ["a"], "log_subject": "x"}}
        result = _deep_merge(base, {"nats": {"log_subject": "y"}})
        assert result == {"nats": {"servers": ["a"], "log_subject": "y"}}
        assert base["nats"]["log_subject"] == "x"


# =========================================================================
# NatsConfig
# =========================================================================


class TestNatsConfig:
    def test_from_dict(self):
        config = NatsConfig.from_dict(
            {
                "servers": ["nats://a:4222", "nats://b:4222"],
                "log_subject": "logs.app",
                "tls_conf": {"ca_files": ["/ca.pem"]},
            }
        )
        assert config.servers == ("nats://a:4222", "nats://b:4222")
        assert config.discovery_name == ""
        assert config.log_subject == "logs.app"
        assert config.tls == TLSConfig(ca_files=("/ca.pem",))

    def test_from_dict_without_tls(self):
        assert NatsConfig.from_dict({"servers": ["nats://a:4222"]}).tls is None

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("NATS_SERVERS", "nats://x:1, nats://y:2")
        monkeypatch.setenv("NATS_DISCOVERY_NAME", "_nats._tcp.example.com")
        monkeypatch.setenv("NATS_LOG_SUBJECT", "logs.env")

        config = NatsConfig.from_dict({"servers": ["nats://a:4222"], "log_subject": "logs.yaml"})

        assert config.servers == ("nats://x:1", "nats://y:2")
        assert config.discovery_name == "_nats._tcp.example.com"
        assert config.log_subject == "logs.env"

    def test_server_source_explicit(self):
        config = NatsConfig(servers=("nats://a:4222",))
        assert config.server_source == ExplicitServers(("nats://a:4222",))

    def test_server_source_discovery_wins(self):
        config = NatsConfig(servers=("nats://a:4222",), discovery_name="_nats._tcp.example.com")
        assert config.server_source == DiscoveredServers("_nats._tcp.example.com")

    def test_server_string(self):
        config = NatsConfig(servers=("nats://a:4222", "nats://b:4222", "nats://a:4222"))
        assert config.server_string() == "nats://a:4222,nats://b:4222,nats://a:4222"
        assert NatsConfig().server_string() == ""

    def test_log_fields_without_tls(self):
        config = NatsConfig(servers=("nats://a:4222",), log_subject="logs.app")
        assert config.log_fields() == {"logs_subject": "logs.app", "servers": "nats://a:4222"}

    def test_log_fields_with_tls(self):
        config = NatsConfig(
            servers=("nats://a:4222",),
            tls=TLSConfig(
                ca_files=("/ca1.pem", "/ca2.pem"),
                cert_file="/client.pem",
                key_file="/client-key.pem",
            ),
        )
        fields = config.log_fields()
        assert fields["ca_files"] == "/ca1.pem,/ca2.pem"
        assert fields["cert_file"] == "/client.pem"
        assert fields["key_file"] == "/client-key.pem"

    def test_validate_rejects_empty_server(self):
        with pytest.raises(ConfigurationError, match="non-empty"):
            NatsConfig(servers=("nats://a:4222", " ")).validate()

    def test_validate_rejects_whitespace_subject(self):
        with pytest.raises(ConfigurationError, match="whitespace"):
            NatsConfig(log_subject="logs app").validate()

    def test_validate_rejects_cert_without_key(self):
        with pytest.raises(ConfigurationError, match="together"):
            NatsConfig(tls=TLSConfig(cert_file="/client.pem")).validate()

    def test_validate_accepts_empty_config(self):
        NatsConfig().validate()


class TestMetricsConfig:
    def test_from_dict(self):
        config = MetricsConfig.from_dict({"subject": "metrics", "default_dims": {"env": "dev"}})
        assert config.subject == "metrics"
        assert config.default_dims == {"env": "dev"}

    def test_validate_rejects_non_mapping_dims(self):
        with pytest.raises(ConfigurationError):
            MetricsConfig(default_dims=["env"]).validate()


# =========================================================================
# load_config
# =========================================================================


class TestLoadConfig:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "missing.yaml")

    def test_missing_nats_section_disables_connection(self, tmp_path):
        config = load_config(config_path=_write_config(tmp_path, "logging:\n  level: DEBUG\n"))
        assert config.nats is None
        assert config.metrics is None
        assert config.logging_config == {"level": "DEBUG"}

    def test_loads_nats_section(self, tmp_path):
        config_file = _write_config(
            tmp_path,
            "nats:\n"
            "  servers: [nats://a:4222, nats://b:4222]\n"
            "  log_subject: logs.app\n"
            "metrics:\n"
            "  subject: metrics.app\n",
        )
        config = load_config(config_path=config_file)

        assert config.nats.servers == ("nats://a:4222", "nats://b:4222")
        assert config.nats.log_subject == "logs.app"
        assert config.metrics.subject == "metrics.app"

    def test_expands_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NATS_URL", "nats://from-env:4222")
        config_file = _write_config(tmp_path, "nats:\n  servers: ['${NATS_URL}']\n")

        assert load_config(config_path=config_file).nats.servers == ("nats://from-env:4222",)

    def test_overrides_are_merged(self, tmp_path):
        config_file = _write_config(tmp_path, "nats:\n  servers: [nats://a:4222]\n")
        config = load_config(
            config_path=config_file, overrides={"nats": {"log_subject": "logs.override"}}
        )
        assert config.nats.servers == ("nats://a:4222",)
        assert config.nats.log_subject == "logs.override"

    def test_invalid_config_raises(self, tmp_path):
        config_file = _write_config(tmp_path, "nats:\n  log_subject: 'bad subject'\n")
        with pytest.raises(ConfigurationError):
            load_config(config_path=config_file)

    def test_default_config_file_loads(self):
        config = load_config()
        assert config.nats is not None
        assert config.nats.log_subject == ""


class TestSingleton:
    def test_set_and_get(self):
        config = MessagingConfig()
        set_config(config)
        assert get_config() is config

    def test_reset_forces_reload(self):
        set_config(MessagingConfig())
        reset_config()
        with patch("config.config.load_config", return_value=MessagingConfig()) as loader:
            get_config()
        loader.assert_called_once()


# =========================================================================
# CLI
# =========================================================================


class TestCli:
    def test_no_action_prints_help(self, capsys):
        assert _cli_main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_validate_human_output(self, tmp_path, capsys):
        config_file = _write_config(
            tmp_path, "nats:\n  discovery_name: _nats._tcp.example.com\n"
        )

        assert _cli_main(["--validate", "--config", str(config_file)]) == 0

        out = capsys.readouterr().out
        assert "validation passed" in out
        assert "discovered from _nats._tcp.example.com" in out

    def test_validate_json_output(self, tmp_path, capsys):
        config_file = _write_config(tmp_path, "nats:\n  servers: [nats://a:4222]\n")

        assert _cli_main(["--validate", "--show-merged", "--json", "--config", str(config_file)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["validation"]["passed"] is True
        assert output["merged_config"]["nats"]["servers"] == ["nats://a:4222"]

    def test_missing_file_returns_error(self, tmp_path, capsys):
        assert _cli_main(["--validate", "--json", "--config", str(tmp_path / "nope.yaml")]) == 1
        assert "error" in json.loads(capsys.readouterr().out)

    def test_invalid_config_returns_error(self, tmp_path, capsys):
        config_file = _write_config(tmp_path, "nats:\n  log_subject: 'a b'\n")
        assert _cli_main(["--validate", "--config", str(config_file)]) == 1
        assert "Validation error" in capsys.readouterr().err
