from abc import ABC, abstractmethod

from docchat.pdf.exceptions import PdfExtractionError

PAGE_SEPARATOR = "\n\n"


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the text layer of a PDF, page by page in ascending order.

        Within a page the text items are space-joined in the order the file
        encodes them; pages are joined with PAGE_SEPARATOR.

        Raises:
            PdfExtractionError: if the PDF cannot be parsed, or if no page
                carries any text (e.g. a scanned PDF without an OCR layer).
        """
        pages = self.extract_pages(pdf_bytes)
        text = PAGE_SEPARATOR.join(page for page in pages if page)
        if not text:
            raise PdfExtractionError(
                "No extractable text found in the PDF. "
                "Please use a text-based PDF or check the file."
            )
        return text

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Return one stripped string per page, first page first.

        Raises:
            PdfExtractionError: if the container is not a readable PDF.
        """
