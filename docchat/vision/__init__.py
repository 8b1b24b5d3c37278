from docchat.vision.analyzer import ImageContentAnalyzer
from docchat.vision.client_base import BaseVisionClient
from docchat.vision.factory import VisionClientFactory

__all__ = ["BaseVisionClient", "ImageContentAnalyzer", "VisionClientFactory"]
