import pymupdf

from docchat.pdf.base import BasePdfExtractor
from docchat.pdf.exceptions import PdfExtractionError

_WORD_TEXT_INDEX = 4


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return [
                    " ".join(word[_WORD_TEXT_INDEX] for word in page.get_text("words", sort=False)).strip()
                    for page in doc
                ]
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
