"""Tests for the revstamp CLI."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from revstamp.cache import dump_cache
from revstamp.cli import _lookup_symbol, app

runner = CliRunner()


def _write_config(root: Path) -> Path:
    cfg = {
        "repo_path": str(root),
        "cache_path": ".revstamp.cache",
        "output": {
            "machine_header": "revision.h",
            "display_header": "revision-display.h",
        },
        "log_level": "error",
    }
    path = root / "revstamp.yaml"
    path.write_text(yaml.safe_dump(cfg))
    return path


# ── revstamp generate ────────────────────────────────────────────────


def test_generate_ci_output(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state))
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "generate", "--ci"])
    assert result.exit_code == 0, result.output
    assert "WRITTEN machine_header" in result.stdout
    assert "WRITTEN display_header" in result.stdout
    assert "source=fake" in result.stdout
    assert (tmp_path / "revision.h").is_file()


def test_generate_twice_reports_unchanged(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state))
    config = _write_config(tmp_path)
    runner.invoke(app, ["--config", str(config), "generate", "--ci"])
    result = runner.invoke(app, ["--config", str(config), "generate", "--ci"])
    assert result.exit_code == 0
    assert "UNCHANGED machine_header" in result.stdout
    assert "WRITTEN display_header" in result.stdout


def test_generate_table_output(tmp_path, branch_state, use_backend, fake_backend):
    use_backend(fake_backend(branch_state))
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "generate"])
    assert result.exit_code == 0, result.output
    assert "machine_header" in result.stdout
    assert "remote/origin/Master" in result.stdout


def test_generate_overrides(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state))
    config = _write_config(tmp_path)
    result = runner.invoke(
        app,
        [
            "--config", str(config),
            "generate", "--ci",
            "--machine-header", "gen/revision.json",
            "--format", "json",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads((tmp_path / "gen" / "revision.json").read_text())
    assert data["VCS_TAG"] == "v1.0_beta6"


def test_generate_bad_format(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state))
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "generate", "--format", "xml"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_generate_no_repository_fails(tmp_path, use_backend):
    use_backend()
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "generate"])
    assert result.exit_code == 1
    assert "No repository" in result.output
    assert not (tmp_path / "revision.h").exists()


def test_generate_inconsistent_state_fails(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state.model_copy(update={"tag": None})))
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "generate"])
    assert result.exit_code == 1
    assert not (tmp_path / "revision.h").exists()


def test_invalid_config_fails(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("backends: [cvs]\n")
    result = runner.invoke(app, ["--config", str(bad), "generate"])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


# ── revstamp show ────────────────────────────────────────────────────


def test_show_symbol(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state))
    config = _write_config(tmp_path)
    for name in ("tag", "VCS_TAG"):
        result = runner.invoke(app, ["--config", str(config), "show", "--symbol", name])
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "v1.0_beta6"


def test_show_symbol_display(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state))
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "show", "-s", "tag", "--display"])
    assert result.stdout.strip() == "1.0 Beta 6"


def test_show_json_from_cache(tmp_path, branch_state, use_backend):
    use_backend()
    config = _write_config(tmp_path)
    (tmp_path / ".revstamp.cache").write_bytes(dump_cache(branch_state))
    result = runner.invoke(app, ["--config", str(config), "show", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["source"] == "cache"
    assert data["full_hash"] == branch_state.full_hash
    assert data["tick"] == 3


def test_show_unknown_symbol(tmp_path, tagged_state, use_backend, fake_backend):
    use_backend(fake_backend(tagged_state))
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "show", "-s", "bogus"])
    assert result.exit_code == 1
    assert "Unknown symbol" in result.output


def test_lookup_symbol_forms():
    assert _lookup_symbol("short_hash") == "short_hash"
    assert _lookup_symbol("shortHash") == "short_hash"
    assert _lookup_symbol("VCS_SHORT_HASH") == "short_hash"
    assert _lookup_symbol("vcs_wc_modified") == "dirty"


# ── revstamp freeze / config ─────────────────────────────────────────


def test_freeze(tmp_path, untagged_state, use_backend, fake_backend):
    use_backend(fake_backend(untagged_state))
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["--config", str(config), "freeze"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / ".revstamp.cache").read_bytes() == dump_cache(untagged_state)


def test_config_init_and_show(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "revstamp.yaml").is_file()

    again = runner.invoke(app, ["config", "init"])
    assert again.exit_code == 1

    shown = runner.invoke(app, ["config", "show"])
    assert shown.exit_code == 0
    assert "machine_format" in shown.stdout
