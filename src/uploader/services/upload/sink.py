import logging
import mimetypes
import os
import uuid
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from uploader.config import Settings
from uploader.errors import SinkError

logger = logging.getLogger(__name__)


class UploadSink(ABC):
    @abstractmethod
    def store(self, payload: bytes, filename: str, mime_type: str, category: Optional[str] = None) -> str:
        """
        Store the file and return a public URL for it.

        Raises SinkError on any failure.
        """


class HttpUploadSink(UploadSink):
    """Forwards the file to a remote storage API as multipart/form-data."""

    def __init__(
        self,
        endpoint: str,
        token: str = "",
        timeout: float = 30.0,
        url_field: str = "url",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not endpoint:
            raise ValueError("HttpUploadSink needs an endpoint URL")
        self.endpoint = endpoint
        self.token = token
        self.timeout = timeout
        self.url_field = url_field
        self._transport = transport

    def store(self, payload, filename, mime_type, category=None):
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        files = {"file": (filename, payload, mime_type)}
        data = {"type": category} if category else None

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.endpoint, files=files, data=data, headers=headers)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            raise SinkError(f"upload sink returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SinkError(f"upload sink unreachable: {e}") from e
        except ValueError as e:
            raise SinkError("upload sink returned a non-JSON body") from e

        url = body.get(self.url_field) if isinstance(body, dict) else None
        if not url or not isinstance(url, str):
            raise SinkError(f"upload sink response has no '{self.url_field}'")
        return url


class LocalDirectorySink(UploadSink):
    """Development sink: keeps files in a directory the app serves under /files/."""

    def __init__(self, directory: str, public_base_url: str):
        self.directory = os.path.abspath(directory)
        self.public_base_url = public_base_url.rstrip("/")

    def store(self, payload, filename, mime_type, category=None):
        # extension follows the declared type, never the client's file name
        # the client picks the file name, so the stored extension follows the validated type instead
        ext = mimetypes.guess_extension(mime_type or "") or ".bin"
        if not ext[1:].isalnum():
            ext = ".bin"
        stored_name = f"{uuid.uuid4().hex}{ext}"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(os.path.join(self.directory, stored_name), "wb") as fh:
                fh.write(payload)
        except OSError as e:
            raise SinkError(f"could not write {stored_name}: {e}") from e

        logger.debug("Stored %s as %s", filename, stored_name)
        return f"{self.public_base_url}/files/{stored_name}"


def build_sink(settings: Settings) -> UploadSink:
    if settings.sink == "http":
        return HttpUploadSink(
            settings.sink_url,
            token=settings.sink_token,
            timeout=settings.sink_timeout,
            url_field=settings.sink_url_field,
        )
    return LocalDirectorySink(settings.upload_dir, settings.public_base_url)
