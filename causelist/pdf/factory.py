from causelist.config.settings import Settings
from causelist.pdf.base import BasePageExtractor
from causelist.pdf.pdfplumber_adapter import PdfPlumberPageExtractor
from causelist.pdf.pymupdf_adapter import PyMuPdfPageExtractor


class PageExtractorFactory:
    """Creates the correct page extractor based on settings."""

    ADAPTERS: dict[str, type[BasePageExtractor]] = {
        "pdfplumber": PdfPlumberPageExtractor,
        "pymupdf": PyMuPdfPageExtractor,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePageExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
