import time
from typing import Callable, Optional

STEP = 10
CEILING = 90
INTERVAL_SECONDS = 1.0
COMPLETE = 100


def progress_for_ticks(ticks: int, step: int = STEP, ceiling: int = CEILING) -> int:
    """Simulated progress after ``ticks`` timer intervals; never passes ``ceiling``."""
    return min(max(ticks, 0) * step, ceiling)


def caption_for(progress: int) -> str:
    if progress < 30:
        return "Fetching video information..."
    if progress < 60:
        return "Extracting video transcript..."
    if progress < 90:
        return "Generating summaries..."
    return "Finalizing results..."


class ProgressSimulation:
    """
    Cosmetic progress bar state for a single request.

    Nothing runs in the background: the value is recomputed from the clock
    whenever it is read, so stopping it can never leave a timer behind.
    """

    def __init__(
        self,
        interval_seconds: float = INTERVAL_SECONDS,
        step: int = STEP,
        ceiling: int = CEILING,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval_seconds = interval_seconds
        self.step = step
        self.ceiling = ceiling
        self.clock = clock
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None
        self._completed = False

    @property
    def running(self) -> bool:
        return self._started_at is not None and self._stopped_at is None

    def start(self) -> None:
        self._started_at = self.clock()
        self._stopped_at = None
        self._completed = False

    def stop(self) -> None:
        if self.running:
            self._stopped_at = self.clock()

    def complete(self) -> None:
        self.stop()
        self._completed = True

    def ticks(self) -> int:
        if self._started_at is None:
            return 0
        now = self._stopped_at if self._stopped_at is not None else self.clock()
        return int((now - self._started_at) // self.interval_seconds)

    def value(self) -> int:
        if self._completed:
            return COMPLETE
        return progress_for_ticks(self.ticks(), self.step, self.ceiling)

    def caption(self) -> str:
        return caption_for(self.value())
