from collections.abc import Callable

from docchat.config.settings import Settings
from docchat.extractors.docx_extractor import DocxExtractor
from docchat.extractors.text_extractor import PlainTextExtractor
from docchat.extractors.unsupported import describe_unsupported
from docchat.ingestion.formats import Format, classify
from docchat.ingestion.models import UploadedArtifact
from docchat.logging.logger import Log, preview
from docchat.pdf.base import BasePdfExtractor
from docchat.pdf.factory import PdfExtractorFactory
from docchat.vision.analyzer import ImageContentAnalyzer
from docchat.vision.factory import VisionClientFactory

ExtractFn = Callable[[UploadedArtifact], str]


class ExtractionDispatcher:
    """Routes an artifact to the extractor registered for its format."""

    def __init__(
        self,
        *,
        pdf_extractor: BasePdfExtractor,
        docx_extractor: DocxExtractor,
        image_analyzer: ImageContentAnalyzer,
    ) -> None:
        self._handlers: dict[Format, ExtractFn] = {
            Format.PDF: lambda a: pdf_extractor.extract(a.content),
            Format.DOCX: lambda a: docx_extractor.extract(a.content),
            Format.PLAIN_TEXT: lambda a: PlainTextExtractor(a.media_type).extract(a.content),
            Format.IMAGE: lambda a: image_analyzer.analyze(a.content, a.media_type),
            Format.UNSUPPORTED: lambda a: describe_unsupported(a.name, a.media_type),
        }

    def extract(self, artifact: UploadedArtifact) -> str:
        """Extract text from *artifact*.

        Raises:
            ExtractionError: propagated from the selected extractor.
        """
        fmt = classify(artifact.media_type, artifact.name)
        Log.info(f"Extracting {artifact.name} as {fmt.value}")
        text = self._handlers[fmt](artifact)
        Log.debug(f"Extracted text from {artifact.name}: {preview(text)}")
        return text


def build_dispatcher(settings: Settings) -> ExtractionDispatcher:
    """Build an ExtractionDispatcher with the configured adapters."""
    return ExtractionDispatcher(
        pdf_extractor=PdfExtractorFactory.create(settings),
        docx_extractor=DocxExtractor(),
        image_analyzer=VisionClientFactory.create_analyzer(settings),
    )
