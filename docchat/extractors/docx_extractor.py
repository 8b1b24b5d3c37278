import io

import docx
from docx.table import Table

from docchat.extractors.exceptions import DocxExtractionError


class DocxExtractor:
    """Extracts raw text from a DOCX package using python-docx.

    Paragraphs and tables are read in body order; formatting is discarded.
    Table rows become " | "-joined cell text.
    """

    def extract(self, docx_bytes: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(docx_bytes))
            lines = [self._block_text(block) for block in document.iter_inner_content()]
        except DocxExtractionError:
            raise
        except Exception as exc:
            raise DocxExtractionError(
                f"Failed to extract text from DOCX. File might be corrupted or unsupported: {exc}"
            ) from exc
        return "\n".join(line for line in lines if line).strip()

    @staticmethod
    def _block_text(block: object) -> str:
        if isinstance(block, Table):
            rows = [" | ".join(cell.text.strip() for cell in row.cells) for row in block.rows]
            return "\n".join(rows)
        return getattr(block, "text", "") or ""
