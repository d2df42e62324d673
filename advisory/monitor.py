"""Holds the latest advisory output for readers and refreshes it on demand or on a timer."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from advisory.client import AdvisoryClient
from core.models import AdvisoryResult, Snapshot, format_timestamp

logger = logging.getLogger("command_center.advisory.monitor")


class AdvisoryMonitor:
    def __init__(self, client: AdvisoryClient, clock: Optional[Callable[[], datetime]] = None):
        self.client = client
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.result: Optional[AdvisoryResult] = None
        self.prediction: Optional[str] = None
        self.error: Optional[str] = None
        self.last_updated: Optional[datetime] = None
        self._in_flight = 0
        self._closed = False

    @property
    def enabled(self) -> bool:
        return self.client.enabled

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    @property
    def closed(self) -> bool:
        return self._closed

    async def refresh(self, snapshot: Snapshot) -> bool:
        """
        Run analyze() and predict() concurrently against the snapshot.
        Returns True when new results were stored. No-op when the gate is closed.
        """
        if self._closed or not self.enabled:
            return False

        self._in_flight += 1
        try:
            result, prediction = await asyncio.gather(
                self.client.analyze(snapshot),
                self.client.predict(list(snapshot.incidents), snapshot.weather),
            )
        except Exception as e:
            logger.exception("advisory refresh failed: %s", e)
            if not self._closed:
                self.error = str(e) or type(e).__name__
            return False
        finally:
            self._in_flight -= 1

        if self._closed:
            logger.info("advisory refresh finished after close; result discarded")
            return False
        self.result = result
        self.prediction = prediction
        self.error = None
        self.last_updated = self._clock()
        return True

    async def run_periodic(self, snapshot_provider: Callable[[], Snapshot], interval: float) -> None:
        while not self._closed:
            await self.refresh(snapshot_provider())
            await asyncio.sleep(interval)

    def close(self) -> None:
        self._closed = True

    def to_dict(self):
        return {
            "enabled": self.enabled,
            "in_flight": self.in_flight,
            "result": self.result.to_dict() if self.result else None,
            "prediction": self.prediction,
            "error": self.error,
            "last_updated": format_timestamp(self.last_updated) if self.last_updated else None,
        }
