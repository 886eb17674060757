import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

from werkzeug.datastructures import FileStorage

from uploader.errors import (
    MSG_SINK_FAILED,
    FileTooLargeError,
    NoFileError,
    UnsupportedFormatError,
    UploadValidationError,
)
from uploader.services.upload.policy import DEFAULT_POLICY, UploadPolicy, classify
from uploader.services.upload.sink import UploadSink

logger = logging.getLogger(__name__)

READ_CHUNK = 64 * 1024
DEFAULT_MIME = "application/octet-stream"


@dataclass
class UploadRequest:
    payload: bytes
    filename: str
    mime_type: str
    category: str

    @property
    def size(self) -> int:
        return len(self.payload)


def read_limited(stream: BinaryIO, limit: int, chunk_size: int = READ_CHUNK) -> bytes:
    """Read the whole stream, failing as soon as more than ``limit`` bytes arrive."""
    buf = bytearray()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > limit:
            raise FileTooLargeError()
    return bytes(buf)


def receive(file: Optional[FileStorage], policy: UploadPolicy = DEFAULT_POLICY) -> UploadRequest:
    """
    Buffer, validate and classify one uploaded file.

    The declared content length is checked before reading when the client sent one;
    the buffered size is authoritative either way.
    """
    if file is None or not file.filename:
        raise NoFileError()

    filename = file.filename
    mime_type = file.mimetype or DEFAULT_MIME

    if file.content_length and policy.exceeds_ceiling(file.content_length):
        raise FileTooLargeError()
    payload = read_limited(file.stream, policy.max_bytes)

    if not policy.accepts_on_server(filename, mime_type):
        raise UnsupportedFormatError()

    return UploadRequest(
        payload=payload,
        filename=filename,
        mime_type=mime_type,
        category=classify(filename, mime_type),
    )


def handle_upload(file: Optional[FileStorage], sink: UploadSink, policy: UploadPolicy = DEFAULT_POLICY) -> dict:
    """Run one upload end to end and return the response envelope."""
    try:
        upload = receive(file, policy)
    except UploadValidationError as e:
        logger.info("Upload rejected (%s): %s", type(e).__name__, getattr(file, "filename", None))
        return {"success": False, "error": str(e)}

    logger.info(
        "Upload accepted: %s (%s, %s, %d bytes)",
        upload.filename, upload.mime_type, upload.category, upload.size,
    )

    try:
        url = sink.store(upload.payload, upload.filename, upload.mime_type, category=upload.category)
    except Exception:
        logger.exception("Upload sink failed for %s", upload.filename)
        return {"success": False, "error": MSG_SINK_FAILED}

    return {
        "success": True,
        "url": url,
        "filename": upload.filename,
        "size": upload.size,
        "type": upload.mime_type,
    }
