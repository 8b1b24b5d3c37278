def describe_unsupported(filename: str, media_type: str) -> str:
    """Placeholder text for files no extractor understands."""
    return (
        f"File: {filename} attached. Type: {media_type or 'unknown'}. "
        "Text extraction not supported."
    )
