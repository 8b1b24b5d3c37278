class VisionError(Exception):
    """Raised when the vision-description call fails."""


class VisionNetworkError(VisionError):
    """Raised when the vision provider call fails due to network/infrastructure issues."""
