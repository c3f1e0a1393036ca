import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from causelist.pipeline.models import Document


def _pdf_with_pages(lines: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for line in lines:
        if line:
            c.drawString(72, 720, line)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf_with_pages(["Crl.M. 101/2024 State v. Ahmed"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf_with_pages(["Page one content", "Page two content"])


@pytest.fixture()
def seven_page_pdf_bytes() -> bytes:
    """Generate a seven-page cause list with one line per page."""
    return _pdf_with_pages([f"Cause list page {i}" for i in range(1, 8)])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf_with_pages([""])


@pytest.fixture()
def seven_page_document(seven_page_pdf_bytes: bytes) -> Document:
    return Document(name="cause_list.pdf", content=seven_page_pdf_bytes)
