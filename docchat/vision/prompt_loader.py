from pathlib import Path

from docchat.vision.exceptions import VisionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_vision_prompt(path: Path | None = None) -> str:
    """Load the image-description instruction sent with every image.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled vision_prompt.txt.

    Raises:
        VisionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "vision_prompt.txt"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise VisionError(f"Failed to load vision prompt: {exc}") from exc
