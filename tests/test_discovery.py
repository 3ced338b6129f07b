"""
End-to-end discovery tests: corpus in, final configuration out.
"""

import time

import pytest

pytestmark = pytest.mark.integration

from rulescout import (
    CancellationToken,
    ConfigError,
    DiscoveryCancelled,
    EmptyCorpusError,
    LintConfig,
    Linter,
    ParseError,
    RuleCatalog,
    discover,
    extend_from_recommended,
    load_corpus,
    run_discovery,
)
from rulescout.progress import PROGRESS_TOTAL


class RecordingSink:
    def __init__(self):
        self.increments = []

    def report(self, increment):
        self.increments.append(increment)


class ExplodingSink:
    def report(self, increment):
        raise RuntimeError("display went away")


class TestScenarios:

    def test_semicolons_everywhere(self, write_corpus):
        root = write_corpus({"a.py": "x = 1;\n"})
        config = discover(None, str(root))
        assert config.rules["semi"] == [2, "always"]

    def test_double_quotes(self, write_corpus):
        root = write_corpus({"a.py": 'x = "a"\ny = "b"\n'})
        config = discover(None, str(root))
        assert config.rules["quotes"] == [2, "double"]

    def test_failing_recommended_rule_stays_at_error(self, write_corpus):
        root = write_corpus({"a.py": "import os\n\nx = 1\n"})
        result = run_discovery(None, str(root))

        assert result.config.rules["no-unused-vars"] == 2
        assert "no-unused-vars" in result.failing_rules

    def test_tab_indentation(self, write_corpus):
        root = write_corpus({"a.py": "def f():\n\tif True:\n\t\treturn 1\n"})
        config = discover(None, str(root))
        assert config.rules["indent"] == [2, "tab"]

    def test_same_tier_tie_breaks_by_declaration_order(self, write_corpus):
        # Nothing is indented, so every indent candidate comes out clean
        root = write_corpus({"a.py": "x = 1\ny = 2\n"})
        result = run_discovery(None, str(root))
        assert result.config.rules["indent"] == [2, "tab"]

    def test_failing_optional_rule_is_turned_off(self, write_corpus):
        root = write_corpus({"a.py": "print('a')\n"})
        config = discover(None, str(root))
        assert config.rules["no-print"] == 0


class TestDiscoveryProperties:

    def test_every_cataloged_rule_in_catalog_order(self, temp_project):
        config = discover(None, str(temp_project))
        assert tuple(config.rules) == RuleCatalog.builtin().rule_ids

    def test_enabled_rules_are_clean_on_the_corpus(self, temp_project):
        result = run_discovery(None, str(temp_project))
        linter = Linter(RuleCatalog.builtin())

        reported = set()
        for unit in load_corpus(str(temp_project)).values():
            reported.update(message.rule_id for message in linter.verify(unit, result.config))

        assert reported <= result.failing_rules
        assert reported == {"no-unused-vars"}

    def test_deterministic(self, temp_project):
        first = discover(None, str(temp_project))
        second = discover(None, [str(temp_project)])
        assert first.to_dict() == second.to_dict()

    def test_base_config_fields_are_kept(self, temp_project):
        base = {
            "rules": {"semi": [2, "always"]},
            "env": {"py3": True},
            "parserOptions": {"feature_version": [3, 10]},
        }
        config = discover(base, str(temp_project))

        assert config.env == {"py3": True}
        assert config.parser_options == {"feature_version": [3, 10]}
        # Base rules do not bias the search
        assert config.rules["semi"] in (2, [2, "never"])
        assert base["rules"] == {"semi": [2, "always"]}

    def test_base_config_object_is_not_mutated(self, temp_project):
        base = LintConfig(rules={"quotes": 2}, plugins=["local"])
        before = base.to_dict()
        discover(base, str(temp_project))
        assert base.to_dict() == before

    def test_summary(self, temp_project):
        result = run_discovery(None, str(temp_project))
        summary = result.summary

        assert summary.file_count == 2
        assert summary.total_rules == len(RuleCatalog.builtin())
        assert summary.enabled_rules == sum(
            1 for setting in result.config.rules.values() if setting != 0
        )
        assert summary.message.startswith(f"Enabled {summary.enabled_rules} out of")

    def test_trial_count(self, temp_project):
        from rulescout.autoconfig import build_registry

        result = run_discovery(None, str(temp_project))
        registry = build_registry(RuleCatalog.builtin())
        assert result.trial_count == sum(len(entry.candidates) for entry in registry)

    def test_custom_catalog(self, temp_project):
        full = RuleCatalog.builtin()
        catalog = RuleCatalog([full.get("quotes"), full.get("semi")])
        config = discover(None, str(temp_project), catalog=catalog)
        assert list(config.rules) == ["quotes", "semi"]
        assert config.rules["quotes"] == [2, "single"]

    def test_extend_from_recommended(self, write_corpus):
        root = write_corpus({"a.py": "import os\n\nx = 1\n"})
        config = extend_from_recommended(discover(None, str(root)), RuleCatalog.builtin())

        assert config.extends == "rulescout:recommended"
        assert "no-unused-vars" not in config.rules
        assert "semi" in config.rules


class TestProgress:

    def test_increments_add_up_to_total(self, temp_project):
        sink = RecordingSink()
        discover(None, str(temp_project), sink)

        assert all(increment > 0 for increment in sink.increments)
        assert sum(sink.increments) == pytest.approx(PROGRESS_TOTAL)

    def test_sink_cannot_change_the_result(self, temp_project):
        quiet = discover(None, str(temp_project))
        noisy = discover(None, str(temp_project), ExplodingSink())
        assert quiet.to_dict() == noisy.to_dict()


class TestFailures:

    def test_parse_error_aborts(self, write_corpus):
        root = write_corpus({"good.py": "x = 1\n", "broken.py": "def broken(:\n"})
        with pytest.raises(ParseError) as exc_info:
            discover(None, str(root))
        assert exc_info.value.file_path.endswith("broken.py")

    def test_empty_corpus(self, temp_dir):
        with pytest.raises(EmptyCorpusError):
            discover(None, f"{temp_dir}/nothing/*.py")

    def test_invalid_base_config(self, temp_project):
        with pytest.raises(ConfigError):
            discover({"rules": {"semi": "sometimes"}}, str(temp_project))

    def test_unknown_base_config_key(self, temp_project):
        with pytest.raises(ConfigError):
            discover({"globals": {}}, str(temp_project))

    def test_cancelled(self, temp_project):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(DiscoveryCancelled, match="cancelled"):
            discover(None, str(temp_project), cancellation=token)

    def test_timeout(self, temp_project):
        token = CancellationToken(timeout=0.001)
        time.sleep(0.01)
        with pytest.raises(DiscoveryCancelled) as exc_info:
            discover(None, str(temp_project), cancellation=token)
        assert exc_info.value.reason == "timed out"

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigError):
            CancellationToken(timeout=0)

    def test_non_numeric_timeout(self):
        with pytest.raises(ConfigError):
            CancellationToken(timeout="soon")
