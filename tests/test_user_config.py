import json

import pytest

pytestmark = pytest.mark.fast

from rulescout.exceptions import ConfigError
from rulescout.schemas import LintConfig
from rulescout.user_config import DEFAULT_CONFIG, UserConfig, get_user_config


class TestUserConfig:

    def test_defaults(self, tmp_path):
        config = UserConfig(tmp_path, global_config_path=tmp_path / "missing.json")
        assert config.get("discovery.extensions") == [".py", ".pyi"]
        assert config.get("discovery.timeout") is None
        assert config.get("discovery.nope", "fallback") == "fallback"
        assert config.get_all() == DEFAULT_CONFIG

    def test_local_overrides_global(self, tmp_path):
        global_path = tmp_path / "global.json"
        global_path.write_text(json.dumps({"discovery": {"max_bytes": 10, "timeout": 5}}))
        local_dir = tmp_path / ".rulescout"
        local_dir.mkdir()
        (local_dir / "config.json").write_text(json.dumps({"discovery": {"timeout": 30}}))

        config = UserConfig(tmp_path, global_config_path=global_path)
        assert config.get("discovery.max_bytes") == 10
        assert config.get("discovery.timeout") == 30
        # Keys not overridden keep their defaults
        assert config.get("discovery.respect_gitignore") is True

    def test_invalid_json_is_ignored(self, tmp_path):
        global_path = tmp_path / "global.json"
        global_path.write_text("{not json")
        config = UserConfig(tmp_path, global_config_path=global_path)
        assert config.get_all() == DEFAULT_CONFIG

    def test_discovery_settings(self, tmp_path):
        global_path = tmp_path / "global.json"
        global_path.write_text(json.dumps({"discovery": {"extensions": [".py"], "respect_gitignore": False}}))
        settings = UserConfig(tmp_path, global_config_path=global_path).discovery_settings()
        assert settings == {"extensions": [".py"], "respect_gitignore": False, "max_bytes": 1024 * 1024}

    @pytest.mark.parametrize("discovery", [
        {"extensions": 5},
        {"extensions": ["py"]},
        {"max_bytes": "lots"},
    ])
    def test_discovery_settings_rejects_bad_values(self, tmp_path, discovery):
        global_path = tmp_path / "global.json"
        global_path.write_text(json.dumps({"discovery": discovery}))
        config = UserConfig(tmp_path, global_config_path=global_path)
        with pytest.raises(ConfigError):
            config.discovery_settings()

    def test_reload(self, tmp_path):
        global_path = tmp_path / "global.json"
        config = UserConfig(tmp_path, global_config_path=global_path)
        assert config.get("discovery.timeout") is None

        global_path.write_text(json.dumps({"discovery": {"timeout": 12}}))
        config.reload()
        assert config.get("discovery.timeout") == 12

    def test_singleton(self):
        assert get_user_config() is get_user_config()


class TestLintConfigFiles:

    def test_from_file_round_trips_aliases(self, tmp_path):
        path = tmp_path / "base.json"
        path.write_text(json.dumps({"rules": {"semi": 2}, "parserOptions": {"feature_version": [3, 11]}}))
        config = LintConfig.from_file(path)
        assert config.parser_options == {"feature_version": [3, 11]}
        assert config.to_dict() == {
            "rules": {"semi": 2},
            "env": {},
            "parserOptions": {"feature_version": [3, 11]},
        }

    def test_from_file_rejects_non_objects(self, tmp_path):
        path = tmp_path / "base.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            LintConfig.from_file(path)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(ConfigError):
            LintConfig.from_file(tmp_path / "absent.json")

    def test_with_rules_copies(self):
        rules = {"quotes": [2, "double", {"avoidEscape": True}]}
        config = LintConfig().with_rules(rules)
        rules["quotes"][2]["avoidEscape"] = False
        assert config.rules["quotes"][2] == {"avoidEscape": True}
