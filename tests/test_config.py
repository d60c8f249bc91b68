"""Tests for revstamp.config: models and YAML loader."""

import pytest
from pydantic import ValidationError

from revstamp.config.loader import DEFAULT_CONFIG_TEMPLATE, expand_env_vars, load_config
from revstamp.config.models import OutputConfig, RevstampConfig


# ── RevstampConfig defaults ─────────────────────────────────────────


class TestRevstampConfigDefaults:
    def test_default_repo_path(self):
        assert RevstampConfig().repo_path == "."

    def test_default_cache_path(self):
        assert RevstampConfig().cache_path == ".revstamp.cache"

    def test_default_backends(self):
        assert RevstampConfig().backends == ["git", "hg"]

    def test_default_log_level(self):
        assert RevstampConfig().log_level == "info"

    def test_separate_backend_lists(self):
        a = RevstampConfig()
        b = RevstampConfig()
        assert a.backends is not b.backends


class TestOutputConfig:
    def test_defaults(self):
        cfg = OutputConfig()
        assert cfg.machine_header == "revision.h"
        assert cfg.machine_format == "h"
        assert cfg.display_header == "revision-display.h"
        assert cfg.display_cache is None

    def test_invalid_format_rejected(self):
        with pytest.raises(ValidationError):
            OutputConfig(machine_format="xml")

    def test_invalid_backend_rejected(self):
        with pytest.raises(ValidationError):
            RevstampConfig(backends=["svn"])


# ── load_config ─────────────────────────────────────────────────────


class TestLoadConfig:
    def test_returns_defaults_when_no_file_exists(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config == RevstampConfig()

    def test_loads_valid_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "revstamp.yaml").write_text(
            "cache_path: rev.cache\noutput:\n  machine_format: json\nlog_level: debug\n"
        )
        config = load_config()
        assert config.cache_path == "rev.cache"
        assert config.output.machine_format == "json"
        assert config.log_level == "debug"

    def test_raises_on_invalid_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "revstamp.yaml").write_text("  bad:\nyaml: [unterminated")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_raises_on_invalid_config_values(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "revstamp.yaml").write_text("backends: [cvs]\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_raises_on_non_mapping(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "revstamp.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_cli_path_takes_priority(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "revstamp.yaml").write_text("cache_path: project.cache\n")
        cli_file = tmp_path / "custom.yaml"
        cli_file.write_text("cache_path: custom.cache\n")
        assert load_config(cli_path=str(cli_file)).cache_path == "custom.cache"

    def test_missing_cli_path(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            load_config(cli_path=str(tmp_path / "nope.yaml"))

    def test_home_directory_config_ignored(self, tmp_path, monkeypatch):
        project = tmp_path / "project"
        project.mkdir()
        monkeypatch.chdir(project)
        fake_home = tmp_path / "home"
        (fake_home / ".revstamp").mkdir(parents=True)
        (fake_home / ".revstamp" / "config.yaml").write_text("log_level: debug\n")
        monkeypatch.setenv("HOME", str(fake_home))
        assert load_config() == RevstampConfig()

    def test_directory_is_not_a_config_file(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            load_config(cli_path=str(tmp_path))

    def test_env_vars_expanded(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SRCROOT", "/work/app")
        (tmp_path / "revstamp.yaml").write_text("repo_path: ${SRCROOT}\n")
        assert load_config().repo_path == "/work/app"

    def test_empty_yaml_file_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "revstamp.yaml").write_text("")
        assert load_config() == RevstampConfig()

    def test_default_template_is_valid(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "revstamp.yaml").write_text(DEFAULT_CONFIG_TEMPLATE)
        assert load_config() == RevstampConfig()


class TestExpandEnvVars:
    def test_nested(self, monkeypatch):
        monkeypatch.setenv("OUT", "/derived")
        raw = {"output": {"machine_header": "${OUT}/revision.h"}, "backends": ["${OUT}"]}
        assert expand_env_vars(raw) == {
            "output": {"machine_header": "/derived/revision.h"},
            "backends": ["/derived"],
        }

    def test_unset_variable_is_empty(self, monkeypatch):
        monkeypatch.delenv("REVSTAMP_UNSET_VAR", raising=False)
        assert expand_env_vars("a${REVSTAMP_UNSET_VAR}b") == "ab"

    def test_non_strings_untouched(self):
        assert expand_env_vars(3) == 3
