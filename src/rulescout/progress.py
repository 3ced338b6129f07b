"""
Progress reporting for long-running discovery.

Discovery reports a fixed total of progress units over a run, so a caller can
drive a progress bar without knowing the corpus size up front. Sinks only
observe; nothing a sink does can alter the search.
"""

from typing import Optional, Protocol, runtime_checkable

from rulescout.logging_config import logger

# Fixed budget of progress units for one discovery run
PROGRESS_TOTAL = 20
# Units spent on loading the corpus; the rest goes to the trials
CORPUS_PROGRESS_SHARE = 4


@runtime_checkable
class ProgressSink(Protocol):
    """Receives positive progress increments."""

    def report(self, increment: float) -> None:
        ...


class NullProgressSink:
    """Sink that discards every increment (the default)."""

    def report(self, increment: float) -> None:
        pass


class ProgressMeter:
    """
    Forwards increments to a sink while tracking how much has been reported.

    A failing sink is logged once and then ignored so the run continues.
    ``finish()`` reports whatever remains of the budget, which absorbs
    floating-point drift so the increments add up to ``total``.
    """

    def __init__(self, sink: Optional[ProgressSink] = None, total: float = PROGRESS_TOTAL):
        self.sink = sink if sink is not None else NullProgressSink()
        self.total = total
        self.reported = 0.0
        self._sink_failed = False

    def report(self, increment: float) -> None:
        if increment <= 0:
            return
        self.reported += increment
        try:
            self.sink.report(increment)
        except Exception as e:
            if not self._sink_failed:
                logger.warning(f"Progress sink raised {type(e).__name__}: {e}; further errors are ignored")
            self._sink_failed = True

    def finish(self) -> None:
        remainder = self.total - self.reported
        if remainder > 0:
            self.report(remainder)
