import io

import pdfplumber
from pdfplumber.page import Page

from docchat.pdf.base import BasePdfExtractor
from docchat.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [self._page_text(page) for page in pdf.pages]
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc

    @staticmethod
    def _page_text(page: Page) -> str:
        # use_text_flow keeps the content-stream order instead of re-laying out
        words = page.extract_words(use_text_flow=True)
        return " ".join(word["text"] for word in words).strip()
