"""High-risk alert webhook client with exponential backoff retry logic"""

import asyncio
import httpx
from typing import Optional
from risk_gateway.config import settings
from risk_gateway.domain.exceptions import DeliveryError
from risk_gateway.infrastructure.observability.metrics import alert_latency_histogram, alert_webhook_failure_counter


class WebhookAlertSink:
    """Alert sink that POSTs high-risk approval alerts to the alerts endpoint"""

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url or settings.alert_webhook_url
        self.timeout = settings.http_timeout_seconds if timeout is None else timeout
        self.max_retries = settings.alert_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.alert_backoff_base if backoff_base is None else backoff_base
        self.transport = transport

    async def notify(self, customer_id: str, score: int) -> None:
        """
        Send a high-risk approval alert.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base, ...
        - Retries on 5xx errors and network failures, 4xx fails immediately
        - Tracks latency histogram and failure counter

        Raises:
            DeliveryError: alert was not accepted after all retries
        """
        payload = {"customerId": customer_id, "riskScore": score}
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with alert_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except httpx.HTTPStatusError as e:
                    alert_webhook_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise DeliveryError(
                            f"Alert rejected for customer {customer_id}: {e.response.status_code}"
                        ) from e
                    error: Exception = e

                except httpx.RequestError as e:
                    alert_webhook_failure_counter.inc()
                    error = e

                attempt += 1
                if attempt >= self.max_retries:
                    # Final failure after all retries
                    raise DeliveryError(
                        f"Alert delivery for customer {customer_id} failed after {attempt} attempts: {error}"
                    ) from error

                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)
