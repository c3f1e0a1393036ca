import asyncio
import io
from typing import Any

import pdfplumber

from causelist.pdf.base import BasePageExtractor, ProgressCallback
from causelist.pdf.exceptions import DocumentParseError
from causelist.pipeline.models import Document, PageText


class PdfPlumberPageExtractor(BasePageExtractor):
    """Extracts page text from PDF using pdfplumber."""

    async def extract(
        self,
        document: Document,
        on_progress: ProgressCallback,
    ) -> list[PageText]:
        pdf, pdf_pages = self._open(document)
        with pdf:
            total = len(pdf_pages)
            pages: list[PageText] = []
            for index, page in enumerate(pdf_pages, start=1):
                on_progress(index, total)
                text = await asyncio.to_thread(self._page_text, page, index)
                pages.append(PageText(index=index, text=text))
        return pages

    @staticmethod
    def _open(document: Document) -> tuple[Any, list[Any]]:
        try:
            pdf = pdfplumber.open(io.BytesIO(document.content))
        except Exception as exc:
            raise DocumentParseError(
                f"pdfplumber could not open '{document.name}': {exc}"
            ) from exc
        try:
            return pdf, list(pdf.pages)
        except Exception as exc:
            pdf.close()
            raise DocumentParseError(
                f"pdfplumber could not read pages of '{document.name}': {exc}"
            ) from exc

    @staticmethod
    def _page_text(page: Any, index: int) -> str:
        try:
            return (page.extract_text() or "").strip()
        except Exception as exc:
            raise DocumentParseError(
                f"pdfplumber extraction failed on page {index}: {exc}"
            ) from exc
