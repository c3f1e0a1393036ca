import asyncio
from typing import Any

import pymupdf

from causelist.pdf.base import BasePageExtractor, ProgressCallback
from causelist.pdf.exceptions import DocumentParseError
from causelist.pipeline.models import Document, PageText


class PyMuPdfPageExtractor(BasePageExtractor):
    """Extracts page text from PDF using PyMuPDF."""

    async def extract(
        self,
        document: Document,
        on_progress: ProgressCallback,
    ) -> list[PageText]:
        try:
            doc = pymupdf.open(stream=document.content, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise DocumentParseError(
                f"pymupdf could not open '{document.name}': {exc}"
            ) from exc
        with doc:
            total = doc.page_count
            pages: list[PageText] = []
            for index in range(1, total + 1):
                on_progress(index, total)
                text = await asyncio.to_thread(self._page_text, doc, index)
                pages.append(PageText(index=index, text=text))
        return pages

    @staticmethod
    def _page_text(doc: Any, index: int) -> str:
        try:
            return str(doc[index - 1].get_text()).strip()
        except Exception as exc:
            raise DocumentParseError(
                f"pymupdf extraction failed on page {index}: {exc}"
            ) from exc
