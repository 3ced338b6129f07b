"""
Discovery orchestrator: wires corpus loading, candidate registry, trials,
classification and merging into one call. It holds no policy of its own.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from rulescout.cancellation import CancellationToken
from rulescout.corpus import load_corpus
from rulescout.corpus.config import DEFAULT_MAX_BYTES
from rulescout.corpus.loader import Patterns
from rulescout.linter import Linter, RuleCatalog
from rulescout.logging_config import logger
from rulescout.progress import CORPUS_PROGRESS_SHARE, PROGRESS_TOTAL, ProgressMeter, ProgressSink
from rulescout.schemas import DiscoverySummary, LintConfig
from rulescout.tracing import trace
from .classifier import classify
from .merger import merge, summarize
from .registry import build_registry
from .trials import TrialRunner


@dataclass(frozen=True)
class DiscoveryResult:
    """Final configuration plus the statistics of the run that produced it."""
    config: LintConfig
    summary: DiscoverySummary
    trial_count: int
    failing_rules: frozenset


@trace
def run_discovery(
    base_config: Union[LintConfig, Mapping[str, Any], None],
    file_patterns: Patterns,
    progress: Optional[ProgressSink] = None,
    *,
    catalog: Optional[RuleCatalog] = None,
    cancellation: Optional[CancellationToken] = None,
    extensions: Optional[Sequence[str]] = None,
    respect_gitignore: bool = True,
    max_bytes: Optional[int] = DEFAULT_MAX_BYTES,
) -> DiscoveryResult:
    """
    Discover a zero-finding configuration for every cataloged rule.

    Args:
        base_config: Starting configuration (env, parserOptions, ...). Its
            rules are replaced by the discovered ones.
        file_patterns: Whitespace-separated string or iterable of paths/globs
        progress: Sink receiving increments that add up to PROGRESS_TOTAL
        catalog: Rules to configure (defaults to the built-in catalog)
        cancellation: Token checked between trials
        extensions, respect_gitignore, max_bytes: Corpus loader settings

    Returns:
        DiscoveryResult

    Raises:
        ParseError: A corpus file could not be parsed
        EmptyCorpusError: No files matched
        DiscoveryCancelled: The cancellation token fired
        ConfigError: Invalid base configuration or loader settings
    """
    if base_config is None:
        base_config = LintConfig()
    elif not isinstance(base_config, LintConfig):
        base_config = LintConfig.from_dict(base_config)
    catalog = catalog if catalog is not None else RuleCatalog.builtin()
    meter = ProgressMeter(progress, PROGRESS_TOTAL)

    corpus = load_corpus(
        file_patterns,
        base_config,
        meter,
        CORPUS_PROGRESS_SHARE,
        extensions=extensions,
        respect_gitignore=respect_gitignore,
        max_bytes=max_bytes,
        cancellation=cancellation,
    )

    registry = build_registry(catalog)
    runner = TrialRunner(Linter(catalog), cancellation)
    survivors = runner.run(
        registry,
        corpus,
        base_config,
        meter,
        PROGRESS_TOTAL - CORPUS_PROGRESS_SHARE,
    )

    failing = classify(survivors, registry)
    final_config = merge(registry, survivors, failing, catalog.recommended_ids(), base_config)
    meter.finish()

    summary = summarize(final_config, len(corpus))
    logger.info(summary.message)

    return DiscoveryResult(
        config=final_config,
        summary=summary,
        trial_count=survivors.trial_count,
        failing_rules=failing,
    )


def discover(
    base_config: Union[LintConfig, Mapping[str, Any], None],
    file_patterns: Patterns,
    progress: Optional[ProgressSink] = None,
    **options: Any,
) -> LintConfig:
    """
    Discover the final configuration; see run_discovery() for arguments.
    """
    return run_discovery(base_config, file_patterns, progress, **options).config
