# src/stages/translator.py - v1
"""Google Cloud Translation (v2) client.

The service answers a single input with one result, or with a list of
results when the input was segmented; results are joined in order with a
blank line. Requires 'google-cloud-translate' and application default
credentials.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from corpusdigest.core.errors import TranslationError

logger = logging.getLogger(__name__)

UNIT_SEPARATOR = "\n\n"


def join_translations(result: Any) -> str:
    """Join one or several translation units into a single text.

    Units may be plain strings or v2 result dicts carrying ``translatedText``.

    Raises:
        TranslationError: If a unit has no translated text.
    """
    units = result if isinstance(result, list) else [result]
    texts: list[str] = []
    for unit in units:
        if isinstance(unit, str):
            texts.append(unit)
        elif isinstance(unit, dict) and isinstance(unit.get("translatedText"), str):
            texts.append(unit["translatedText"])
        else:
            raise TranslationError(f"Unexpected translation unit: {unit!r}")
    return UNIT_SEPARATOR.join(texts)


class Translator:
    """Translate text into one configured target language."""

    def __init__(self, target_language: str, client: Any = None) -> None:
        """Initialize the translator.

        Args:
            target_language: ISO-639 code of the output language.
            client: Pre-built ``translate_v2.Client`` (built lazily if None).
        """
        self._target_language = target_language
        self._client = client

    @property
    def target_language(self) -> str:
        return self._target_language

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                from google.cloud import translate_v2 as translate
            except ImportError as e:
                raise ImportError(
                    "google-cloud-translate package required: pip install google-cloud-translate"
                ) from e
            self._client = translate.Client()
        return self._client

    async def translate(self, text: str) -> str:
        """Translate text into the target language.

        Raises:
            TranslationError: If the client cannot be built or the call fails.
        """
        try:
            client = self._get_client()
            # Blocking client. The API defaults to HTML and escapes entities unless format_="text".
            result = await asyncio.to_thread(
                client.translate, text,
                target_language=self._target_language, format_="text",
            )
        except ImportError:
            raise
        except Exception as e:
            raise TranslationError(f"Translation to '{self._target_language}' failed: {e}") from e

        translated = join_translations(result)
        logger.debug("Translated %d chars into '%s'", len(text), self._target_language)
        return translated

    async def __call__(self, text: str) -> str:
        return await self.translate(text)
