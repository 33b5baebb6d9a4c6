# src/stages/extractor.py - v1
"""PDF text extractor using PyMuPDF (fitz).

Returns the document's full plain text, pages joined by newlines. No layout,
table or image information is kept. Requires the 'pymupdf' package.
"""

from __future__ import annotations

import logging
from pathlib import Path

from corpusdigest.core.errors import ExtractionError

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """Extract plain text from PDF files."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    async def extract(self, source: Path) -> str:
        """Extract the full text of a PDF.

        The document handle is closed on every path; nothing is returned
        unless every page was read.

        Raises:
            ExtractionError: If the file is missing, malformed or encrypted.
        """
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        try:
            with fitz.open(str(source), filetype="pdf") as doc:
                if doc.needs_pass:
                    raise ExtractionError(f"{source} is password protected")
                pages = [page.get_text("text") for page in doc]
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"Cannot extract text from {source}: {exc}") from exc

        logger.debug("Extracted %d pages from %s", len(pages), source)
        return "\n".join(pages)

    async def __call__(self, source: Path) -> str:
        return await self.extract(source)
