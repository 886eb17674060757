import io

import pytest

from uploader.app import create_app
from uploader.config import Settings
from uploader.errors import SinkError
from uploader.services.upload.sink import UploadSink


class FakeSink(UploadSink):
    """Records every call; hands out sequential URLs or raises when ``fail`` is set."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def store(self, payload, filename, mime_type, category=None):
        self.calls.append(
            {"payload": payload, "filename": filename, "mime_type": mime_type, "category": category}
        )
        if self.fail:
            raise SinkError("storage backend is down")
        return f"https://cdn.example.com/f/{len(self.calls)}"


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def settings(tmp_path):
    return Settings(upload_dir=str(tmp_path / "uploads"), public_base_url="http://testserver")


@pytest.fixture
def app(settings, sink):
    app = create_app(settings, sink=sink)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload(client):
    def _upload(payload, filename, mime_type):
        return client.post(
            "/upload",
            data={"file": (io.BytesIO(payload), filename, mime_type)},
            content_type="multipart/form-data",
        )

    return _upload
