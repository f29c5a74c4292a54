"""Asset store for uploaded profile images."""
import logging
import uuid
from pathlib import Path

from app.config import Settings, get_settings
from app.services.errors import DependencyError, ValidationError

log = logging.getLogger("uvicorn.error")


class LocalAssetStore:
    """Writes uploads under settings.upload_dir and returns the stored file name as reference."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.root = Path(self.settings.upload_dir)

    def save(self, filename: str, content: bytes) -> str:
        if not content:
            raise ValidationError("No file uploaded.")
        if len(content) > self.settings.max_upload_bytes:
            raise ValidationError("File is too large.")
        # Keep only the extension of the client-supplied name
        suffix = Path(filename or "").suffix.lower()[:10]
        ref = f"{uuid.uuid4().hex}{suffix}"
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / ref).write_bytes(content)
        except OSError:
            log.exception("[Assets] Could not store upload %s", ref)
            raise DependencyError("Could not store the uploaded file.")
        return ref
