"""
Pytest Configuration File

This module provides fixtures and configuration for all tests.
"""

import io
import os
import sys

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Add app directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Import app modules
from app.main import create_app
from app.shared.config import UploadSettings

PIL_FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
}


def make_image_bytes(kind: str = "jpeg", size=(64, 64)) -> bytes:
    """Encode a small solid-colour image in the given format"""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(180, 40, 90)).save(buffer, format=PIL_FORMATS[kind])
    return buffer.getvalue()


@pytest.fixture
def upload_root(tmp_path):
    """Fixture for an isolated upload root"""
    return tmp_path / "uploads"


@pytest.fixture
def upload_settings(upload_root):
    """Fixture for settings pointing at the isolated upload root"""
    return UploadSettings(upload_root=upload_root)


@pytest.fixture
def test_app(upload_settings):
    return create_app(upload_settings)


@pytest.fixture
def test_client(test_app):
    """Fixture for FastAPI test client"""
    return TestClient(test_app)


@pytest.fixture
def image_factory():
    """Fixture returning the image encoder"""
    return make_image_bytes


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("jpeg", size=(128, 128))


@pytest.fixture
def png_bytes():
    return make_image_bytes("png")


@pytest.fixture
def pdf_bytes():
    """Minimal PDF document"""
    return (
        b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
        b"2 0 obj\n<< /Type /Pages /Kids [] /Count 0 >>\nendobj\n"
        b"trailer\n<< /Root 1 0 R >>\n%%EOF\n"
    )


@pytest.fixture
def post_upload(test_client):
    """Fixture returning a helper that posts an image/path form"""
    def _post(filename="photo.jpg", data=b"", path="9897/profile",
              content_type="image/jpeg", extra=None):
        form = {} if path is None else {"path": path}
        form.update(extra or {})
        files = None if filename is None else {"image": (filename, data, content_type)}
        return test_client.post("/upload", data=form, files=files)
    return _post
