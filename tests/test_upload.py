import hashlib
from io import BytesIO

import pytest
from PIL import Image

from main import app
from utils.image_host import CloudinaryClient, MAX_BYTES, get_image_host


def png_bytes(size=(8, 8)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


class RecordingHost:
    def __init__(self):
        self.uploads = []

    def upload(self, data, filename, content_type):
        self.uploads.append((data, filename, content_type))
        return f"https://images.example.com/{filename}"


@pytest.fixture
def image_host():
    host = RecordingHost()
    app.dependency_overrides[get_image_host] = lambda: host
    yield host
    app.dependency_overrides.pop(get_image_host, None)


def upload(client, headers, content, content_type="image/png", name="dish.png"):
    return client.post("/api/v1/upload", files={"file": (name, content, content_type)}, headers=headers)


def test_upload_returns_hosted_url(client, admin_headers, image_host):
    resp = upload(client, admin_headers, png_bytes())
    assert resp.status_code == 200
    assert resp.json()["data"] == {"url": "https://images.example.com/dish.png"}
    data, _, content_type = image_host.uploads[0]
    assert content_type == "image/png"
    assert Image.open(BytesIO(data)).size == (8, 8)


def test_upload_rejects_other_types(client, admin_headers, image_host):
    resp = upload(client, admin_headers, b"hello", content_type="text/plain", name="notes.txt")
    assert resp.status_code == 415
    assert image_host.uploads == []


def test_upload_rejects_large_files(client, admin_headers, image_host):
    resp = upload(client, admin_headers, b"\0" * (MAX_BYTES + 1))
    assert resp.status_code == 413


def test_upload_rejects_broken_images(client, admin_headers, image_host):
    resp = upload(client, admin_headers, b"definitely not a png")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid image file"


def test_upload_without_configuration(client, admin_headers):
    resp = upload(client, admin_headers, png_bytes())
    assert resp.status_code == 503
    assert resp.json()["code"] == "SERVICE_UNAVAILABLE"


def test_upload_is_admin_only(client, staff_headers, image_host):
    assert upload(client, staff_headers, png_bytes()).status_code == 403


def test_signature_matches_cloudinary_scheme():
    host = CloudinaryClient(cloud_name="demo", api_key="key", api_secret="abcd")
    expected = hashlib.sha1(b"folder=menu&timestamp=1700000000abcd").hexdigest()
    assert host.sign({"timestamp": 1700000000, "folder": "menu"}) == expected


def test_upload_reads_at_most_one_byte_past_the_limit(client, admin_headers, image_host, monkeypatch):
    from routers import upload_routes
    from utils.exceptions import AppError

    seen = []

    def fake_prepare(contents, content_type):
        seen.append(len(contents))
        raise AppError("Image must be 5MB or smaller", status_code=413, code="FILE_TOO_LARGE")

    monkeypatch.setattr(upload_routes, "prepare_image", fake_prepare)
    resp = upload(client, admin_headers, b"\0" * (MAX_BYTES + 4096))
    assert resp.status_code == 413
    assert seen == [MAX_BYTES + 1]
