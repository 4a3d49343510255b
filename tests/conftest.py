import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from ythelper.config import Settings, get_settings
from ythelper.models.analysis import UploadedAsset
from ythelper.services.gemini import get_backend


# --- Canned model output ---

MODEL_JSON = (
    '{"titles": ["I Tried It For 30 Days", "What Nobody Tells You"],'
    ' "description": "00:00 Intro\\n01:30 Setup",'
    ' "tags": ["vlog", "challenge"],'
    ' "thumbnails": ["Shocked face next to a calendar"]}'
)

UPLOADED_ASSET = UploadedAsset(
    name="files/abc123",
    uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
    mime_type="video/mp4",
)


class FakeBackend:
    """Records calls the way the Gemini backend would receive them."""

    def __init__(
        self,
        response_text: str = MODEL_JSON,
        upload_error: Exception | None = None,
        ready_error: Exception | None = None,
    ):
        self.response_text = response_text
        self.upload_error = upload_error
        self.ready_error = ready_error
        self.uploads = []
        self.waited = []
        self.generations = []
        self.deleted = []

    def upload_asset(self, path, mime_type, display_name):
        self.uploads.append({
            "path": path,
            "existed": path.exists(),
            "content": path.read_bytes() if path.exists() else None,
            "mime_type": mime_type,
            "display_name": display_name,
        })
        if self.upload_error:
            raise self.upload_error
        return UPLOADED_ASSET

    def wait_until_ready(self, asset):
        self.waited.append(asset.name)
        if self.ready_error:
            raise self.ready_error
        return asset

    def generate(self, parts, options):
        self.generations.append({"parts": parts, "options": options})
        return self.response_text

    def delete_asset(self, name):
        self.deleted.append(name)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        scratch_dir=tmp_path / "scratch",
    )


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def mock_genai_client(mocker):
    client = MagicMock()
    mocker.patch("ythelper.services.gemini.genai.Client", return_value=client)
    return client


@pytest.fixture
def api_client(settings, fake_backend):
    """FastAPI TestClient with settings and backend overridden."""
    from ythelper.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_backend] = lambda: fake_backend
    yield TestClient(app)
    app.dependency_overrides.clear()
