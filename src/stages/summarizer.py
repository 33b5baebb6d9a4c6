# src/stages/summarizer.py - v1
"""HTTP summarization client.

POSTs the text as a form (fields ``key``, ``txt``, ``limit``) and reads the
``summary`` field of the JSON response. The service marks omitted passages
with ``[...]``; those markers become paragraph breaks.
"""

from __future__ import annotations

import logging

import httpx

from corpusdigest.core.errors import SummarizationError

logger = logging.getLogger(__name__)

OMISSION_MARKER = "[...]"
PARAGRAPH_BREAK = "\n\n"


def normalize_summary(raw: str) -> str:
    """Collapse ``"[...] "`` into ``"[...]"``, then turn every marker into a blank line.

    >>> normalize_summary("A[...] [...]B")
    'A\\n\\nB'
    """
    return raw.replace(OMISSION_MARKER + " ", OMISSION_MARKER).replace(
        OMISSION_MARKER, PARAGRAPH_BREAK
    )


class Summarizer:
    """Client for the remote summarization endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        limit: int = 25,
        timeout_s: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: Full URL of the summarization endpoint.
            api_key: Credential sent in the ``key`` form field.
            limit: Maximum number of summary units (``limit`` form field).
            timeout_s: Request timeout when no client is supplied.
            client: Shared AsyncClient; the caller owns its lifecycle.
        """
        self._endpoint = endpoint
        self._api_key = api_key
        self._limit = limit
        self._timeout_s = timeout_s
        self._client = client

    async def summarize(self, text: str) -> str:
        """Summarize text and normalize the omission markers.

        Raises:
            SummarizationError: On transport failure, non-2xx status, or a
                body without a string ``summary`` field.
        """
        form = {"key": self._api_key, "txt": text, "limit": str(self._limit)}
        try:
            if self._client is not None:
                response = await self._client.post(self._endpoint, data=form)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                    response = await client.post(self._endpoint, data=form)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SummarizationError(
                f"HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise SummarizationError(f"Request to summarization service failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SummarizationError(f"Response is not JSON: {response.text[:200]}") from e

        summary = payload.get("summary") if isinstance(payload, dict) else None
        if not isinstance(summary, str):
            raise SummarizationError(
                f"Response has no 'summary' string: {str(payload)[:200]}"
            )

        logger.debug("Summarized %d chars into %d chars", len(text), len(summary))
        return normalize_summary(summary)

    async def __call__(self, text: str) -> str:
        return await self.summarize(text)
