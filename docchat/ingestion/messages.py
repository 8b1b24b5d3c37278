"""User-facing texts the ingestion pipeline writes into chats."""

DOCUMENT_PLACEHOLDER = "Processing document... Text extraction in progress."
IMAGE_PLACEHOLDER = "Processing image... Text recognition and visual analysis in progress."

DOCUMENT_UPLOAD_NOTICE = (
    "I can see you've uploaded a document! I'm currently processing it to extract "
    "the text content. This may take a moment. Once processing is complete, you "
    "can ask me questions about the document."
)
IMAGE_UPLOAD_NOTICE = (
    "I can see you've uploaded an image! I'm currently analyzing it to extract any "
    "text and understand the visual content. This may take a moment. Once "
    "processing is complete, you can ask me questions about what's in the image."
)


def placeholder_for(is_image: bool) -> str:
    return IMAGE_PLACEHOLDER if is_image else DOCUMENT_PLACEHOLDER


def upload_notice_for(is_image: bool) -> str:
    return IMAGE_UPLOAD_NOTICE if is_image else DOCUMENT_UPLOAD_NOTICE


def completion_message(filename: str, is_image: bool) -> str:
    if is_image:
        return (
            f"Image analysis of \"{filename}\" is complete! "
            "You can now ask me questions about what's in the image."
        )
    return (
        f"Processing of \"{filename}\" is complete! "
        "You can now ask me questions about the document."
    )


def failure_message(filename: str, cause: str) -> str:
    return (
        f"Sorry, I couldn't process \"{filename}\": {cause} "
        "You can remove the file and try again with a different one."
    )


def failure_full_text(filename: str, cause: str) -> str:
    return f"Error processing {filename}: {cause}"
