"""
Progress Tracker
================

Per-run progress map for the provider calls. The periodic increments are
cosmetic feedback for the UI and never influence the calls themselves.
"""

import asyncio
import random
from typing import Callable, Dict, Iterable, Optional

ProgressCallback = Callable[[str, float], None]

CAP = 95.0
DONE = 100.0


class ProgressTracker:
    """
    Tracks progress (0-100) keyed by provider id.

    Running entries advance by random 5-15 point steps on every tick and are
    capped at 95 until their call settles, at which point they jump to 100.
    """

    def __init__(
        self,
        keys: Iterable[str],
        on_progress: Optional[ProgressCallback] = None,
        rng: Optional[random.Random] = None,
    ):
        self.progress: Dict[str, float] = {key: 0.0 for key in keys}
        self.completed = set()
        self.on_progress = on_progress
        self.rng = rng or random.Random()

    def update(self, key: str, value: float):
        self.progress[key] = value
        if self.on_progress:
            self.on_progress(key, value)

    def complete(self, key: str):
        """Mark one call as settled."""
        self.completed.add(key)
        self.update(key, DONE)

    def tick(self):
        """Advance every unfinished entry by one random step."""
        for key, current in list(self.progress.items()):
            if key in self.completed or current >= CAP:
                continue
            self.update(key, min(CAP, current + self.rng.random() * 10 + 5))

    async def run(self, interval_seconds: float):
        """Tick forever; cancelled by the orchestrator once all calls settle."""
        while True:
            await asyncio.sleep(interval_seconds)
            self.tick()

    def snapshot(self) -> Dict[str, float]:
        return dict(self.progress)
