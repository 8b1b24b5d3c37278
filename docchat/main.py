import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from docchat.config.settings import Settings
from docchat.database.connection import apply_schema, close_pool, init_pool
from docchat.ingestion.exceptions import UploadValidationError
from docchat.ingestion.models import UploadedArtifact
from docchat.ingestion.orchestrator import IngestionOrchestrator, build_orchestrator
from docchat.ingestion.records import record_to_dict
from docchat.logging.logger import Log


def load_artifact(path: Path, media_type: str | None = None) -> UploadedArtifact:
    """Read a local file into an UploadedArtifact, guessing its type from the name."""
    content = path.read_bytes()
    stat = path.stat()
    return UploadedArtifact(
        name=path.name,
        size_bytes=len(content),
        media_type=media_type or mimetypes.guess_type(path.name)[0] or "",
        content=content,
        last_modified=int(stat.st_mtime * 1000),
    )


async def ingest(orchestrator: IngestionOrchestrator, artifact: UploadedArtifact) -> str:
    chat_id = orchestrator.begin_ingestion(artifact)
    await orchestrator.wait(chat_id)
    return chat_id


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docchat-ingest",
        description="Ingest a document or image into a chat and print the resulting record.",
    )
    parser.add_argument("path", type=Path, help="file to ingest")
    parser.add_argument("--media-type", default=None, help="declared media type (guessed if omitted)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> store -> orchestrator -> ingest one file."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    use_postgres = settings.store_backend.lower() == "postgres"
    if use_postgres:
        init_pool(settings)
        apply_schema()

    try:
        orchestrator = build_orchestrator(settings)
        artifact = load_artifact(args.path, args.media_type)
        try:
            chat_id = asyncio.run(ingest(orchestrator, artifact))
        except UploadValidationError as exc:
            Log.error(f"Upload rejected: {exc}")
            return 1
        record = orchestrator.store.get(chat_id)
        print(json.dumps(record_to_dict(record), indent=2, ensure_ascii=False))
        return 0
    finally:
        if use_postgres:
            close_pool()


if __name__ == "__main__":
    sys.exit(main())
