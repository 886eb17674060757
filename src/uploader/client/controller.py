import logging
from typing import Optional, Protocol

import httpx

from uploader.client.selection import FileHandle, Selection, validate_selection
from uploader.services.upload.policy import DEFAULT_POLICY, UploadPolicy

logger = logging.getLogger(__name__)

MSG_FAILED = "Failed to upload file."
MSG_CONNECTION = "Connection error occurred."
MSG_NOTHING_TO_SEND = "Selected file has no readable content."


class StatusView(Protocol):
    def show_status(self, message: str) -> None: ...

    def set_busy(self, busy: bool) -> None: ...

    def show_result(self, url: str) -> None: ...

    def show_error(self, message: str) -> None: ...


class SubmissionController:
    """
    Drives one upload at a time against ``POST /upload``.

    The view owns presentation; this class owns the selected file and the busy flag.
    A submit while another is in flight is ignored, the same way the page disables its button.
    """

    def __init__(
        self,
        base_url: str,
        view: StatusView,
        policy: UploadPolicy = DEFAULT_POLICY,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 120.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.view = view
        self.policy = policy
        self.transport = transport
        self.timeout = timeout
        self.selected: Optional[FileHandle] = None
        self.busy = False

    def select(self, handle: Optional[FileHandle]) -> Selection:
        result = validate_selection(handle, self.policy)
        if result.accepted:
            self.selected = handle
            self.view.show_status(f"{handle.name} ({format_size(handle.size)})")
        else:
            self.selected = None
            self.view.show_error(result.reason)
        return result

    def submit(self) -> Optional[dict]:
        if self.busy:
            return None

        # selection may be stale, check again
        result = validate_selection(self.selected, self.policy)
        if not result.accepted:
            self.view.show_error(result.reason)
            return {"success": False, "error": result.reason}
        if not self.selected.path:
            self.view.show_error(MSG_NOTHING_TO_SEND)
            return {"success": False, "error": MSG_NOTHING_TO_SEND}

        self.busy = True
        self.view.set_busy(True)
        try:
            data = self._post(self.selected)
        except (httpx.HTTPError, ValueError, OSError) as e:
            logger.warning("Upload of %s failed: %s", self.selected.name, e)
            data = {"success": False, "error": MSG_CONNECTION}
        finally:
            self.busy = False
            self.view.set_busy(False)

        if data.get("success"):
            self.view.show_result(data["url"])
        else:
            self.view.show_error(data.get("error") or MSG_FAILED)
        return data

    def _post(self, handle: FileHandle) -> dict:
        with open(handle.path, "rb") as fh:
            files = {"file": (handle.name, fh, handle.mime_type or "application/octet-stream")}
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(f"{self.base_url}/upload", files=files)
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("unexpected response body")
        return data


def format_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"
