"""Tests for config file support."""
import argparse
from pathlib import Path

from feedscout.config import (
    apply_config_defaults,
    generate_starter_config,
    load_config,
    load_env_config,
    options_from_config,
)
from feedscout.models import DEFAULT_TIMEOUT


def _parser():
    parser = argparse.ArgumentParser()
    parser.add_argument("-f", "--format", default="console")
    parser.add_argument("--timeout", type=float, default=10.0)
    parser.add_argument("--verify", action="store_true")
    parser.add_argument("--user-agent", dest="user_agent", default=None)
    return parser


class TestConfigLoad:
    def test_load_empty_when_no_file(self, tmp_path):
        assert load_config([tmp_path / "missing.yaml"]) == {}

    def test_load_yaml_config(self, tmp_path):
        path = tmp_path / "feedscout.yaml"
        path.write_text("format: markdown\ntimeout: 5\nverify: true\n", encoding="utf-8")
        assert load_config([path]) == {"format": "markdown", "timeout": 5, "verify": True}

    def test_dashes_converted_to_underscores(self, tmp_path):
        path = tmp_path / "feedscout.yaml"
        path.write_text("user-agent: MyReader/2.0\nno-follow-redirects: true\n", encoding="utf-8")
        config = load_config([path])
        assert config["user_agent"] == "MyReader/2.0"
        assert config["no_follow_redirects"] is True

    def test_later_files_override(self, tmp_path):
        user = tmp_path / "user.yaml"
        project = tmp_path / "project.yaml"
        user.write_text("format: json\ntimeout: 3\n", encoding="utf-8")
        project.write_text("format: opml\n", encoding="utf-8")
        assert load_config([user, project]) == {"format": "opml", "timeout": 3}

    def test_invalid_yaml_ignored(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("format: [unclosed\n", encoding="utf-8")
        assert load_config([path]) == {}

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert load_config([path]) == {}

    def test_default_paths_used(self, no_config, monkeypatch):
        (no_config / "feedscout.yaml").write_text("format: json\n", encoding="utf-8")
        monkeypatch.setattr("feedscout.config.CONFIG_PATHS", (Path("feedscout.yaml"),))
        assert load_config() == {"format": "json"}


class TestEnvConfig:
    def test_typed_values(self, monkeypatch):
        monkeypatch.setenv("FEEDSCOUT_TIMEOUT", "2.5")
        monkeypatch.setenv("FEEDSCOUT_VERIFY", "yes")
        monkeypatch.setenv("FEEDSCOUT_QUIET", "0")
        monkeypatch.setenv("FEEDSCOUT_FORMAT", "json")
        config = load_env_config()
        assert config["timeout"] == 2.5
        assert config["verify"] is True
        assert config["quiet"] is False
        assert config["format"] == "json"

    def test_bad_number_and_unknown_keys_ignored(self, monkeypatch):
        monkeypatch.setenv("FEEDSCOUT_TIMEOUT", "soon")
        monkeypatch.setenv("FEEDSCOUT_COLOUR", "blue")
        config = load_env_config()
        assert "timeout" not in config
        assert "colour" not in config


class TestApplyConfigDefaults:
    def test_config_fills_unset_args(self, no_config, monkeypatch):
        (no_config / "feedscout.yaml").write_text("format: markdown\nverify: true\n", encoding="utf-8")
        monkeypatch.setattr("feedscout.config.CONFIG_PATHS", (Path("feedscout.yaml"),))
        parser = _parser()
        args = apply_config_defaults(parser, parser.parse_args([]))
        assert args.format == "markdown"
        assert args.verify is True

    def test_cli_wins(self, no_config, monkeypatch):
        monkeypatch.setenv("FEEDSCOUT_FORMAT", "markdown")
        parser = _parser()
        args = apply_config_defaults(parser, parser.parse_args(["-f", "json"]))
        assert args.format == "json"

    def test_env_overrides_files(self, no_config, monkeypatch):
        (no_config / "feedscout.yaml").write_text("timeout: 30\n", encoding="utf-8")
        monkeypatch.setattr("feedscout.config.CONFIG_PATHS", (Path("feedscout.yaml"),))
        monkeypatch.setenv("FEEDSCOUT_TIMEOUT", "4")
        parser = _parser()
        args = apply_config_defaults(parser, parser.parse_args([]))
        assert args.timeout == 4.0

    def test_wrong_type_ignored(self, no_config, monkeypatch):
        (no_config / "feedscout.yaml").write_text("timeout: forever\n", encoding="utf-8")
        monkeypatch.setattr("feedscout.config.CONFIG_PATHS", (Path("feedscout.yaml"),))
        parser = _parser()
        args = apply_config_defaults(parser, parser.parse_args([]))
        assert args.timeout == 10.0


class TestOptionsFromConfig:
    def test_defaults(self):
        options = options_from_config({})
        assert options.timeout == DEFAULT_TIMEOUT
        assert options.follow_redirects is True
        assert options.verify is False
        assert options.user_agent.startswith("feedscout/")

    def test_values(self):
        options = options_from_config({"timeout": 3, "no_follow_redirects": True,
                                       "user_agent": "Bot/1", "verify": True})
        assert options.timeout == 3.0
        assert options.follow_redirects is False
        assert options.headers == {"User-Agent": "Bot/1"}
        assert options.verify is True


class TestStarterConfig:
    def test_writes_home_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        path = generate_starter_config()
        assert path == tmp_path / ".feedscout.yaml"
        assert "timeout" in path.read_text(encoding="utf-8")

    def test_never_overwrites(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        existing = tmp_path / ".feedscout.yaml"
        existing.write_text("format: json\n", encoding="utf-8")
        path = generate_starter_config()
        assert path == tmp_path / ".feedscout.yaml.new"
        assert existing.read_text(encoding="utf-8") == "format: json\n"
