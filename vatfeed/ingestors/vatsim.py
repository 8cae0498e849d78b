"""Fetch the raw VATSIM data feed over HTTP."""

from __future__ import annotations

import logging

import httpx

from vatfeed.config import settings
from vatfeed.errors import FeedTransportError

logger = logging.getLogger("vatfeed.ingestors.vatsim")


class VatsimFeedReader:
    """Download the text data file from a VATSIM data server."""

    def __init__(
        self,
        *,
        feed_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.feed_url = feed_url or settings.feed_url
        self.timeout = timeout or settings.feed_timeout
        self.transport = transport

    async def fetch(self) -> str:
        """Return the payload text, raising FeedTransportError on failure."""

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.feed_url)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("VATSIM feed request timed out: %s", exc)
            raise FeedTransportError("VATSIM feed timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "VATSIM feed returned HTTP %s: %s", exc.response.status_code, self.feed_url
            )
            raise FeedTransportError(
                f"VATSIM feed returned HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("VATSIM feed request failed: %s", exc)
            raise FeedTransportError("VATSIM feed request failed") from exc

        logger.debug("Fetched %s bytes from %s", len(response.content), self.feed_url)
        return response.text


__all__ = ["VatsimFeedReader"]
