"""
Trial runner: lints the whole corpus once per candidate configuration.

Each trial activates exactly one rule, the candidate's, on a fresh deep copy
of the base configuration, so neither the base rules nor an earlier trial can
influence a measurement. A candidate survives when that rule reports nothing
on any file.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from rulescout.cancellation import CancellationToken
from rulescout.linter import Linter
from rulescout.logging_config import logger
from rulescout.progress import NullProgressSink, ProgressSink
from rulescout.schemas import LintConfig
from .registry import CandidateConfig, RuleEntry


@dataclass(frozen=True)
class TrialResult:
    """Outcome of linting the corpus with one candidate."""
    candidate: CandidateConfig
    finding_count: int
    files_checked: int

    @property
    def rule_id(self) -> str:
        return self.candidate.rule_id

    @property
    def clean(self) -> bool:
        return self.finding_count == 0


@dataclass(frozen=True)
class SurvivorSet:
    """
    All trial results of a run and, per rule, the candidates that came out
    clean (canonical order preserved).
    """
    results: Tuple[TrialResult, ...]
    survivors: Mapping[str, Tuple[CandidateConfig, ...]]

    @classmethod
    def from_results(cls, registry: Sequence[RuleEntry], results: Sequence[TrialResult]) -> "SurvivorSet":
        clean: Dict[str, List[CandidateConfig]] = {entry.rule_id: [] for entry in registry}
        for result in results:
            if result.clean:
                clean.setdefault(result.rule_id, []).append(result.candidate)
        survivors = MappingProxyType({rule_id: tuple(c) for rule_id, c in clean.items()})
        return cls(results=tuple(results), survivors=survivors)

    def for_rule(self, rule_id: str) -> Tuple[CandidateConfig, ...]:
        return self.survivors.get(rule_id, ())

    @property
    def trial_count(self) -> int:
        return len(self.results)


class TrialRunner:
    """
    Runs every (rule, candidate) trial against a corpus, one after another.

    Args:
        linter: Linter used for every trial
        cancellation: Optional token checked before each trial
    """

    def __init__(self, linter: Linter, cancellation: Optional[CancellationToken] = None):
        self.linter = linter
        self.cancellation = cancellation

    def run(
        self,
        registry: Sequence[RuleEntry],
        corpus: Mapping[str, object],
        base_config: LintConfig,
        progress: Optional[ProgressSink] = None,
        weight: float = 1.0,
    ) -> SurvivorSet:
        """
        Evaluate every candidate against the full corpus.

        Args:
            registry: Rule entries from build_registry()
            corpus: Mapping of path to SourceUnit
            base_config: Configuration each trial is derived from
            progress: Receives ``weight / (trials * files)`` after each file
            weight: Total progress this run reports

        Returns:
            SurvivorSet for the run

        Raises:
            DiscoveryCancelled: If the cancellation token fires between trials
        """
        progress = progress if progress is not None else NullProgressSink()
        units = list(corpus.values())
        total_trials = sum(len(entry.candidates) for entry in registry)
        total_units = total_trials * len(units)
        increment = weight / total_units if total_units else 0.0

        logger.info(f"Running {total_trials} trials over {len(units)} file(s)")

        results: List[TrialResult] = []
        for entry in registry:
            for candidate in entry.candidates:
                if self.cancellation is not None:
                    self.cancellation.raise_if_cancelled(completed_trials=len(results))
                results.append(self._run_trial(candidate, units, base_config, progress, increment))

        survivor_set = SurvivorSet.from_results(registry, results)
        clean_count = sum(1 for r in results if r.clean)
        logger.info(f"Trials complete: {clean_count}/{len(results)} candidates produced no findings")
        return survivor_set

    def _run_trial(
        self,
        candidate: CandidateConfig,
        units: Sequence[object],
        base_config: LintConfig,
        progress: ProgressSink,
        increment: float,
    ) -> TrialResult:
        # Fresh copy per trial; only the candidate's rule is active
        trial_config = base_config.with_rules({candidate.rule_id: candidate.setting})

        findings = 0
        for unit in units:
            findings += self.linter.count_findings(unit, trial_config, candidate.rule_id)
            progress.report(increment)

        logger.debug(f"Trial {candidate.describe()}: {findings} finding(s)")
        return TrialResult(candidate=candidate, finding_count=findings, files_checked=len(units))
