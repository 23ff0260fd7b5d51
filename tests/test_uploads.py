import pytest

from app.storage import (
    LocalStorage,
    UnsafePathError,
    content_type_for,
    key_from_url,
    url_for_key,
    validate_key,
)

AUDIO = b"fake-audio"


@pytest.fixture
def stored_document(client, auth_headers):
    response = client.post(
        "/documents",
        headers=auth_headers,
        data={"name": "תוכנית טיפול"},
        files={"file": ("plan.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert response.status_code == 201
    return response.json()


def test_owner_can_download(client, auth_headers, stored_document):
    response = client.get(stored_document["fileUrl"], headers=auth_headers)
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4"
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["cache-control"] == "private, max-age=3600"


def test_other_therapist_is_denied(client, other_headers, stored_document):
    response = client.get(stored_document["fileUrl"], headers=other_headers)
    assert response.status_code == 403


def test_download_requires_auth(client, stored_document):
    assert client.get(stored_document["fileUrl"]).status_code in (401, 403)


def test_missing_file(client, auth_headers):
    response = client.get("/uploads/recordings/does-not-exist.webm", headers=auth_headers)
    assert response.status_code == 404


def test_unreferenced_file_is_denied(client, uploads_dir, auth_headers):
    (uploads_dir / "documents").mkdir(parents=True, exist_ok=True)
    (uploads_dir / "documents" / "orphan.pdf").write_bytes(b"x")
    response = client.get("/uploads/documents/orphan.pdf", headers=auth_headers)
    assert response.status_code == 403


def test_path_traversal_is_blocked(client, auth_headers):
    response = client.get("/uploads/recordings/..%2F..%2Fsecret.txt", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.parametrize(
    "key",
    ["", "/etc/passwd", "recordings/../../secret", "recordings\\..\\secret", "a//b", "./a", "a\x00b"],
)
def test_validate_key_rejects(key):
    with pytest.raises(UnsafePathError):
        validate_key(key)


def test_validate_key_accepts_nested_key():
    assert validate_key("recordings/2f1c.webm") == "recordings/2f1c.webm"


@pytest.mark.parametrize(
    "key,expected",
    [
        ("recordings/a.webm", "audio/webm"),
        ("recordings/a.mp3", "audio/mpeg"),
        ("documents/a.PDF", "application/pdf"),
        ("documents/a.jpg", "image/jpeg"),
        ("documents/a.xyz", "application/octet-stream"),
    ],
)
def test_content_type_for(key, expected):
    assert content_type_for(key) == expected


def test_url_round_trip():
    assert url_for_key("documents/a.pdf") == "/uploads/documents/a.pdf"
    assert key_from_url("/uploads/documents/a.pdf") == "documents/a.pdf"


def test_local_storage(tmp_path):
    storage = LocalStorage(str(tmp_path))
    storage.save("recordings/a.webm", AUDIO, "audio/webm")

    assert storage.exists("recordings/a.webm")
    assert storage.read("recordings/a.webm") == AUDIO
    assert storage.delete("recordings/a.webm") is True
    assert storage.delete("recordings/a.webm") is False
    assert not storage.exists("recordings/a.webm")
