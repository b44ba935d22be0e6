"""Spreadsheet mirror webhook client with exponential backoff retry logic"""

import asyncio
import logging
import httpx
from typing import Dict, Any
from ptz_gateway.config import settings
from ptz_gateway.infrastructure.observability.metrics import webhook_latency_histogram, notification_failure_counter

logger = logging.getLogger(__name__)


class SheetsClient:
    """Client for mirroring stored submissions to a spreadsheet endpoint"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = settings.sheets_webhook_url if webhook_url is None else webhook_url
        self.max_retries = settings.webhook_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.webhook_backoff_base if backoff_base is None else backoff_base
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_submission(self, record: Dict[str, Any]) -> bool:
        """
        Send a stored submission record with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^attempt)
        - Retries on HTTP errors and network failures
        - Final failure is logged and counted, never raised: the submission
          is already stored

        Returns:
            True when the endpoint acknowledged the record
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=record)
                        response.raise_for_status()
                        return True

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1

                    if attempt >= self.max_retries:
                        notification_failure_counter.labels(channel="sheets").inc()
                        logger.error(
                            "Spreadsheet mirror failed",
                            extra={"submission_id": record.get("id"), "attempts": attempt, "error": str(e)},
                        )
                        return False

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
        return False
