"""
Trial runner and failure classifier tests.
"""

import pytest

pytestmark = pytest.mark.fast

from rulescout.autoconfig import SurvivorSet, TrialResult, TrialRunner, build_registry, classify
from rulescout.cancellation import CancellationToken
from rulescout.corpus import parse_source
from rulescout.exceptions import DiscoveryCancelled
from rulescout.linter import Linter, RuleCatalog
from rulescout.schemas import LintConfig


def make_corpus(files):
    return {path: parse_source(path, text) for path, text in files.items()}


class RecordingSink:
    def __init__(self):
        self.increments = []

    def report(self, increment):
        self.increments.append(increment)


@pytest.fixture
def catalog():
    full = RuleCatalog.builtin()
    return RuleCatalog([full.get("semi"), full.get("quotes"), full.get("no-print")])


class TestTrialRunner:

    def test_survivors_keep_canonical_order(self, catalog):
        corpus = make_corpus({"a.py": "x = 'a'\nprint(x)\n"})
        registry = build_registry(catalog)
        survivors = TrialRunner(Linter(catalog)).run(registry, corpus, LintConfig())

        assert [c.setting for c in survivors.for_rule("semi")] == [2, [2, "never"]]
        assert [c.setting for c in survivors.for_rule("quotes")] == [
            [2, "single"],
            [2, "single", {"avoidEscape": True}],
        ]
        assert survivors.for_rule("no-print") == ()

    def test_one_trial_per_candidate(self, catalog):
        corpus = make_corpus({"a.py": "x = 1\n", "b.py": "y = 2\n"})
        registry = build_registry(catalog)
        survivors = TrialRunner(Linter(catalog)).run(registry, corpus, LintConfig())

        assert survivors.trial_count == sum(len(e.candidates) for e in registry)
        assert all(result.files_checked == 2 for result in survivors.results)

    def test_base_rules_do_not_leak_into_trials(self, catalog):
        corpus = make_corpus({"a.py": "x = 'a';\n"})
        registry = build_registry(catalog)
        # semi at "always" would pass here; quotes at double would fail
        base = LintConfig(rules={"quotes": [2, "double"]})
        survivors = TrialRunner(Linter(catalog)).run(registry, corpus, base)

        semi = {tuple(c.options) for c in survivors.for_rule("semi")}
        assert semi == {("always",)}
        assert base.rules == {"quotes": [2, "double"]}

    def test_progress_adds_up_to_weight(self, catalog):
        corpus = make_corpus({"a.py": "x = 1\n", "b.py": "y = 2\n"})
        registry = build_registry(catalog)
        sink = RecordingSink()
        TrialRunner(Linter(catalog)).run(registry, corpus, LintConfig(), sink, 16)

        assert len(sink.increments) == 2 * sum(len(e.candidates) for e in registry)
        assert sum(sink.increments) == pytest.approx(16)

    def test_cancellation_between_trials(self, catalog):
        corpus = make_corpus({"a.py": "x = 1\n"})
        registry = build_registry(catalog)
        token = CancellationToken()
        token.cancel()

        with pytest.raises(DiscoveryCancelled) as exc_info:
            TrialRunner(Linter(catalog), token).run(registry, corpus, LintConfig())
        assert exc_info.value.completed_trials == 0
        assert exc_info.value.reason == "cancelled"

    def test_cancel_midway_reports_completed_trials(self, catalog):
        corpus = make_corpus({"a.py": "x = 1\n"})
        registry = build_registry(catalog)
        token = CancellationToken()

        class CancelAfterThree:
            calls = 0

            def report(self, increment):
                self.calls += 1
                if self.calls == 3:
                    token.cancel()

        with pytest.raises(DiscoveryCancelled) as exc_info:
            TrialRunner(Linter(catalog), token).run(registry, corpus, LintConfig(), CancelAfterThree())
        assert exc_info.value.completed_trials == 3


class TestSurvivorSet:

    def test_from_results_groups_clean_candidates(self, catalog):
        registry = build_registry(catalog)
        semi = registry[0]
        results = [
            TrialResult(semi.candidates[0], 0, 1),
            TrialResult(semi.candidates[1], 4, 1),
            TrialResult(semi.candidates[2], 0, 1),
        ]
        survivors = SurvivorSet.from_results(registry, results)

        assert survivors.for_rule("semi") == (semi.candidates[0], semi.candidates[2])
        assert survivors.for_rule("quotes") == ()
        assert survivors.trial_count == 3

    def test_trial_result_properties(self, catalog):
        candidate = build_registry(catalog)[0].default
        result = TrialResult(candidate, 0, 2)
        assert result.clean
        assert result.rule_id == "semi"
        assert not TrialResult(candidate, 1, 2).clean


class TestClassify:

    def test_rules_without_survivors_fail(self, catalog):
        corpus = make_corpus({"a.py": "print('x');\n"})
        registry = build_registry(catalog)
        survivors = TrialRunner(Linter(catalog)).run(registry, corpus, LintConfig())

        assert classify(survivors, registry) == {"no-print"}

    def test_everything_passing(self, catalog):
        corpus = make_corpus({"a.py": "x = 1\n"})
        registry = build_registry(catalog)
        survivors = TrialRunner(Linter(catalog)).run(registry, corpus, LintConfig())

        assert classify(survivors, registry) == frozenset()
