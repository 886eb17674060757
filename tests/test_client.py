import httpx
import pytest

from uploader.client.controller import MSG_CONNECTION, MSG_NOTHING_TO_SEND, SubmissionController, format_size
from uploader.client.selection import MSG_INVALID_TYPE, MSG_NO_FILE, FileHandle, validate_selection

MB = 1024 * 1024


class RecordingView:
    def __init__(self):
        self.events = []

    def show_status(self, message):
        self.events.append(("status", message))

    def set_busy(self, busy):
        self.events.append(("busy", busy))

    def show_result(self, url):
        self.events.append(("result", url))

    def show_error(self, message):
        self.events.append(("error", message))


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"\xff\xd8\xff" + b"\0" * 1021)
    return FileHandle.from_path(str(path))


def test_file_handle_from_path(photo) -> None:
    assert photo.name == "photo.jpg"
    assert photo.mime_type == "image/jpeg"
    assert photo.size == 1024


def test_validate_selection() -> None:
    assert validate_selection(FileHandle("a.png", "image/png", 10)).accepted
    assert validate_selection(FileHandle("song.mp3", "", 10)).accepted
    assert validate_selection(None).reason == MSG_NO_FILE
    assert validate_selection(FileHandle("doc.txt", "text/plain", 10)).reason == MSG_INVALID_TYPE

    too_big = validate_selection(FileHandle("a.png", "image/png", 20 * MB + 1))
    assert not too_big.accepted
    assert too_big.reason == "File too large! Max 20MB."


def test_submit_success(photo) -> None:
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            json={"success": True, "url": "https://cdn/x", "filename": "photo.jpg", "size": 1024, "type": "image/jpeg"},
        )

    view = RecordingView()
    controller = SubmissionController("http://uploader.local/", view, transport=httpx.MockTransport(handler))

    assert controller.select(photo).accepted
    data = controller.submit()

    assert data["url"] == "https://cdn/x"
    assert str(seen[0].url) == "http://uploader.local/upload"
    assert view.events == [
        ("status", "photo.jpg (1 KB)"),
        ("busy", True),
        ("busy", False),
        ("result", "https://cdn/x"),
    ]
    assert controller.busy is False


def test_submit_server_error_message_shown(photo) -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"success": False, "error": "Format file tidak didukung."})
    )
    view = RecordingView()
    controller = SubmissionController("http://uploader.local", view, transport=transport)
    controller.select(photo)

    data = controller.submit()

    assert data["success"] is False
    assert view.events[-1] == ("error", "Format file tidak didukung.")


def test_transport_failure_treated_as_failed_upload(photo) -> None:
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    view = RecordingView()
    controller = SubmissionController("http://uploader.local", view, transport=httpx.MockTransport(handler))
    controller.select(photo)

    data = controller.submit()

    assert data == {"success": False, "error": MSG_CONNECTION}
    assert ("busy", False) in view.events
    assert view.events[-1] == ("error", MSG_CONNECTION)
    assert controller.busy is False


def test_non_json_response_treated_as_failed_upload(photo) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
    view = RecordingView()
    controller = SubmissionController("http://uploader.local", view, transport=transport)
    controller.select(photo)

    assert controller.submit()["error"] == MSG_CONNECTION


def test_rejected_selection_is_cleared_and_never_sent(tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    calls = []
    transport = httpx.MockTransport(lambda request: calls.append(request) or httpx.Response(200, json={}))
    view = RecordingView()
    controller = SubmissionController("http://uploader.local", view, transport=transport)

    result = controller.select(FileHandle.from_path(str(path)))
    data = controller.submit()

    assert not result.accepted
    assert controller.selected is None
    assert data == {"success": False, "error": MSG_NO_FILE}
    assert calls == []


def test_second_submit_while_busy_is_ignored(photo) -> None:
    nested = []

    class ReentrantView(RecordingView):
        def set_busy(self, busy):
            super().set_busy(busy)
            if busy:
                nested.append(controller.submit())

    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"success": True, "url": "u"}))
    controller = SubmissionController("http://uploader.local", ReentrantView(), transport=transport)
    controller.select(photo)

    assert controller.submit()["success"] is True
    assert nested == [None]


@pytest.mark.parametrize(
    "size,expected",
    [(0, "0 Bytes"), (512, "512 Bytes"), (1536, "1.5 KB"), (5 * MB, "5 MB"), (3 * 1024 * MB, "3 GB")],
)
def test_format_size(size, expected) -> None:
    assert format_size(size) == expected


def test_handle_without_path_fails_with_envelope() -> None:
    calls = []
    transport = httpx.MockTransport(lambda request: calls.append(request) or httpx.Response(200, json={}))
    view = RecordingView()
    controller = SubmissionController("http://uploader.local", view, transport=transport)

    assert controller.select(FileHandle("a.png", "image/png", 10)).accepted
    data = controller.submit()

    assert data == {"success": False, "error": MSG_NOTHING_TO_SEND}
    assert view.events[-1] == ("error", MSG_NOTHING_TO_SEND)
    assert controller.busy is False
    assert calls == []
