import io

import docx
import pytest
from PIL import Image, ImageDraw
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _pdf_with_pages(*pages: str | None) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in pages:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf_with_pages("Hello PDF World")


@pytest.fixture()
def invoice_pdf_bytes() -> bytes:
    return _pdf_with_pages("Invoice Total: $42.00")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf_with_pages("Hello", "World")


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf_with_pages(None)


@pytest.fixture()
def docx_bytes() -> bytes:
    document = docx.Document()
    document.add_paragraph("Quarterly report")
    document.add_paragraph("Revenue grew by 12 percent.")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Region"
    table.rows[0].cells[1].text = "North"
    document.add_paragraph("End of report")
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def truncated_docx_bytes(docx_bytes: bytes) -> bytes:
    return docx_bytes[: len(docx_bytes) // 2]


@pytest.fixture()
def png_bytes() -> bytes:
    image = Image.new("RGB", (64, 32), color="white")
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def invoice_png_bytes() -> bytes:
    """White image with large black 'INVOICE #123' text, readable by Tesseract."""
    image = Image.new("RGB", (900, 200), color="white")
    draw = ImageDraw.Draw(image)
    draw.text((40, 60), "INVOICE #123", fill="black", font_size=72)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
