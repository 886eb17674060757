import mimetypes
import os
from dataclasses import dataclass
from typing import Optional

from uploader.services.upload.policy import DEFAULT_POLICY, UploadPolicy

MSG_INVALID_TYPE = "Invalid file type! Only Image, Video, PDF, and Audio allowed."
MSG_NO_FILE = "Please select a file first! 📁"


def too_large_message(policy: UploadPolicy) -> str:
    return f"File too large! Max {policy.max_mb}MB."


@dataclass(frozen=True)
class FileHandle:
    name: str
    mime_type: str
    size: int
    path: Optional[str] = None

    @classmethod
    def from_path(cls, path: str) -> "FileHandle":
        # same guess a browser makes from the extension; unknown types come through empty
        mime_type, _ = mimetypes.guess_type(path)
        return cls(
            name=os.path.basename(path),
            mime_type=mime_type or "",
            size=os.path.getsize(path),
            path=path,
        )


@dataclass(frozen=True)
class Selection:
    accepted: bool
    reason: Optional[str] = None


def validate_selection(handle: Optional[FileHandle], policy: UploadPolicy = DEFAULT_POLICY) -> Selection:
    """Pre-flight check before anything goes over the network. Not a security boundary."""
    if handle is None:
        return Selection(False, MSG_NO_FILE)
    if not policy.accepts_on_client(handle.name, handle.mime_type):
        return Selection(False, MSG_INVALID_TYPE)
    if policy.exceeds_ceiling(handle.size):
        return Selection(False, too_large_message(policy))
    return Selection(True)
