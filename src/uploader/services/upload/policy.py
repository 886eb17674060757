from dataclasses import asdict, dataclass
from typing import Iterable

MAX_UPLOAD_MB = 20
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024

ALLOWED_MIME_TYPES = (
    "application/pdf",
    "image/heic",
    "image/heif",
    "audio/mpeg",
    "audio/mp3",
    "audio/mp4",
    "audio/wav",
    "video/quicktime",
    "video/mp4",
)

AUDIO_MIME_TYPES = {"audio/mpeg", "audio/mp3", "audio/mp4", "audio/wav"}

# fallback when the declared type says nothing useful (HEIC often arrives as application/octet-stream)
EXTENSION_CATEGORIES = {
    ".heic": "image",
    ".heif": "image",
    ".mp3": "audio",
}

CATEGORIES = ("image", "video", "audio", "pdf", "other")


@dataclass(frozen=True)
class UploadPolicy:
    max_bytes: int = MAX_UPLOAD_BYTES
    allowed_mime_types: tuple = ALLOWED_MIME_TYPES
    mime_prefixes: tuple = ("image/", "video/")
    # the server never accepted .mp3 by name alone; the browser always did
    server_extensions: tuple = (".heic", ".heif")
    client_extensions: tuple = (".mp3", ".heic", ".heif")

    @property
    def max_mb(self) -> int:
        return self.max_bytes // (1024 * 1024)

    def is_allowed(self, filename: str, mime_type: str, extensions: Iterable[str]) -> bool:
        mime_type = mime_type or ""
        if mime_type.startswith(self.mime_prefixes):
            return True
        if mime_type in self.allowed_mime_types:
            return True
        name = (filename or "").lower()
        return any(name.endswith(ext) for ext in extensions)

    def accepts_on_server(self, filename: str, mime_type: str) -> bool:
        return self.is_allowed(filename, mime_type, self.server_extensions)

    def accepts_on_client(self, filename: str, mime_type: str) -> bool:
        return self.is_allowed(filename, mime_type, self.client_extensions)

    def exceeds_ceiling(self, size: int) -> bool:
        return size > self.max_bytes

    def to_dict(self) -> dict:
        data = asdict(self)
        data["max_mb"] = self.max_mb
        return {k: list(v) if isinstance(v, tuple) else v for k, v in data.items()}


DEFAULT_POLICY = UploadPolicy()


def classify(filename: str, mime_type: str) -> str:
    """
    Coarse media category from the declared type, then the file extension.
    Payload bytes are never inspected, so a mislabeled file keeps its claimed type.
    """
    mime_type = mime_type or ""
    if mime_type.startswith("image/"):
        return "image"
    if mime_type.startswith("video/"):
        return "video"
    if mime_type in AUDIO_MIME_TYPES:
        return "audio"
    if mime_type == "application/pdf":
        return "pdf"

    name = (filename or "").lower()
    for ext, category in EXTENSION_CATEGORIES.items():
        if name.endswith(ext):
            return category
    return "other"
