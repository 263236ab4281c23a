"""Shared upstream fetch helper."""

import asyncio
import logging
from typing import Optional

import httpx

from freelivtv.errors import FetchError

logger = logging.getLogger(__name__)


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[dict[str, str]] = None,
    timeout: float = 10.0,
) -> str:
    """
    GET ``url`` and return its body as text.

    The whole request is bounded by ``timeout`` seconds and cancelled when it
    runs over. Transport errors, timeouts and non-2xx statuses all raise
    ``FetchError``; nothing is retried.
    """
    try:
        response = await asyncio.wait_for(
            client.get(
                url,
                headers=headers,
                timeout=httpx.Timeout(timeout),
                follow_redirects=True,
            ),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise FetchError(f"Timed out after {timeout}s", url=url, original_error=e) from e
    except httpx.HTTPError as e:
        raise FetchError(f"Request failed: {e}", url=url, original_error=e) from e

    if not response.is_success:
        raise FetchError(
            f"HTTP {response.status_code}: {response.reason_phrase}",
            url=url,
            status_code=response.status_code,
        )

    return response.text
