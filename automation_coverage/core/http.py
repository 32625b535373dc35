from typing import Any
import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)
from automation_coverage.config.settings import settings

logger = structlog.get_logger()


def _log_retry(retry_state) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying external GET after transport error",
        attempt=retry_state.attempt_number,
        error=str(exc),
    )


@retry(
    stop=stop_after_attempt(settings.http_retry_attempts),
    wait=wait_random_exponential(multiplier=0.5, max=5),
    retry=retry_if_exception_type(httpx.TransportError),
    before_sleep=_log_retry,
    reraise=True,
)
async def get_json(client: httpx.AsyncClient, url: str, **kwargs) -> Any:
    """GET a JSON document; only idempotent reads go through here.

    Transport errors (timeouts, refused connections) are retried with jitter,
    non-2xx responses raise ``httpx.HTTPStatusError`` immediately. An empty
    body yields ``None``.
    """
    response = await client.get(url, **kwargs)
    response.raise_for_status()
    if not response.content:
        return None
    return response.json()


@retry(
    stop=stop_after_attempt(settings.http_retry_attempts),
    wait=wait_random_exponential(multiplier=0.5, max=5),
    retry=retry_if_exception_type(httpx.TransportError),
    before_sleep=_log_retry,
    reraise=True,
)
async def get_text(client: httpx.AsyncClient, url: str, **kwargs) -> str:
    response = await client.get(url, **kwargs)
    response.raise_for_status()
    return response.text
