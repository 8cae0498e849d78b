"""Periodic fetch, parse and reconcile cycle for the VATSIM feed."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging

from vatfeed.config import settings
from vatfeed.domain.status import DEFAULT_STATUS, FeedStatus, status_to_info
from vatfeed.errors import FeedParseError, FeedTransportError
from vatfeed.ingestors.vatsim import VatsimFeedReader
from vatfeed.ingestors.vatsim_parser import RecordParser
from vatfeed.services.tracker import TrafficTracker

logger = logging.getLogger("vatfeed.services.poller")


class PollCycleController:
    """Run one poll at a time and remember how the last one went."""

    def __init__(
        self,
        *,
        reader: VatsimFeedReader | None = None,
        parser: RecordParser | None = None,
        tracker: TrafficTracker | None = None,
        interval: float | None = None,
    ) -> None:
        self.reader = reader if reader is not None else VatsimFeedReader()
        self.parser = parser if parser is not None else RecordParser()
        self.tracker = tracker if tracker is not None else TrafficTracker()
        self.interval = interval if interval is not None else settings.poll_interval
        self.loading = False
        self.last_status: FeedStatus = DEFAULT_STATUS
        self.last_poll: datetime | None = None
        self.last_error: str | None = None

    @property
    def status_info(self) -> str:
        return status_to_info(self.last_status)

    async def poll_once(self) -> FeedStatus | None:
        """Fetch, parse and apply one payload.

        Returns ``None`` without doing anything when a poll is already in
        flight. Parsing and reconciliation never await, so the tracked
        collections change in a single step.
        """

        if self.loading:
            logger.error("VATSIM already loading, poll request ignored")
            return None

        self.loading = True
        try:
            status = await self._cycle()
        finally:
            self.loading = False

        self.last_status = status
        self.last_poll = datetime.now(timezone.utc)
        logger.info("VATSIM poll finished: %s", status_to_info(status))
        return status

    async def _cycle(self) -> FeedStatus:
        try:
            raw = await self.reader.fetch()
        except FeedTransportError as exc:
            self.last_error = str(exc)
            return FeedStatus.READ_FAILED

        try:
            parsed = self.parser.parse(raw)
            if parsed is None:
                return FeedStatus.NO_NEW_DATA
            self.tracker.apply(parsed)
            self.parser.commit(parsed.update)
        except FeedParseError as exc:
            logger.warning("VATSIM feed rejected: %s", exc)
            self.last_error = str(exc)
            return FeedStatus.PARSING_FAILED
        except Exception as exc:
            logger.exception("Applying VATSIM feed failed")
            self.last_error = str(exc)
            return FeedStatus.PARSING_FAILED

        self.last_error = None
        return FeedStatus.OK

    async def run(self) -> None:
        """Poll until cancelled, sleeping the interval between cycles."""

        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                logger.info("VATSIM poller cancelled")
                raise
            await asyncio.sleep(self.interval)


__all__ = ["PollCycleController"]
