from unittest.mock import patch

import pytest
from fastapi import HTTPException

from app.domain.documents.service import DocumentService, file_extension

PDF = b"%PDF-1.4\n% consent form\n"


def upload(client, headers, client_id=None, filename="consent.pdf", content=PDF, **fields):
    data = {"name": "טופס הסכמה", "type": "CONSENT_FORM", **fields}
    if client_id is not None:
        data["clientId"] = str(client_id)
    return client.post(
        "/documents",
        headers=headers,
        data=data,
        files={"file": (filename, content, "application/pdf")},
    )


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("consent.PDF", "pdf"),
        ("scan.jpeg", "jpeg"),
        ("no-extension", "bin"),
        (None, "bin"),
        ("weird.p@f", "bin"),
        ("C:\\Users\\me\\plan.docx", "docx"),
    ],
)
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_upload_document(client, uploads_dir, auth_headers, patient):
    response = upload(client, auth_headers, patient.id)
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "טופס הסכמה"
    assert body["type"] == "CONSENT_FORM"
    assert body["signed"] is False
    assert body["signedAt"] is None
    assert body["clientName"] == "דנה ישראלי"
    assert body["fileUrl"].startswith("/uploads/documents/")
    assert body["fileUrl"].endswith(".pdf")

    stored = uploads_dir / body["fileUrl"].removeprefix("/uploads/")
    assert stored.read_bytes() == PDF


def test_upload_without_client_defaults_type(client, auth_headers):
    response = client.post(
        "/documents",
        headers=auth_headers,
        data={"name": "דוח"},
        files={"file": ("report.pdf", PDF, "application/pdf")},
    )
    assert response.status_code == 201
    assert response.json()["type"] == "OTHER"
    assert response.json()["clientId"] is None


def test_upload_requires_name(client, auth_headers):
    response = client.post(
        "/documents",
        headers=auth_headers,
        files={"file": ("report.pdf", PDF, "application/pdf")},
    )
    assert response.status_code == 422


def test_upload_too_large(client, auth_headers):
    with patch("app.domain.documents.service.MAX_DOCUMENT_SIZE_BYTES", 10):
        response = upload(client, auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"].startswith("File too large")


def test_oversize_upload_is_not_read_in_full(client, auth_headers):
    received = []

    def reject(self, user, content, **kwargs):
        received.append(len(content))
        raise HTTPException(status_code=400, detail="File too large")

    with patch("app.domain.documents.router.MAX_DOCUMENT_SIZE_BYTES", 10), patch.object(
        DocumentService, "upload_document", autospec=True, side_effect=reject
    ):
        response = upload(client, auth_headers, content=b"x" * 5000)

    assert response.status_code == 400
    assert received == [11]


def test_upload_for_foreign_client(client, other_headers, patient):
    assert upload(client, other_headers, patient.id).status_code == 404


def test_sign_and_unsign_document(client, auth_headers, patient):
    document = upload(client, auth_headers, patient.id).json()

    signed = client.put(f"/documents/{document['id']}", headers=auth_headers, json={"signed": True}).json()
    assert signed["signed"] is True
    assert signed["signedAt"] is not None

    renamed = client.put(f"/documents/{document['id']}", headers=auth_headers, json={"name": "הסכמה חתומה"}).json()
    assert renamed["name"] == "הסכמה חתומה"
    assert renamed["signedAt"] == signed["signedAt"]

    unsigned = client.put(f"/documents/{document['id']}", headers=auth_headers, json={"signed": False}).json()
    assert unsigned["signed"] is False
    assert unsigned["signedAt"] is None


def test_list_documents(client, auth_headers, other_headers, patient):
    upload(client, auth_headers, patient.id)
    upload(client, auth_headers)

    assert len(client.get("/documents", headers=auth_headers).json()) == 2
    assert len(client.get("/documents", headers=auth_headers, params={"clientId": patient.id}).json()) == 1
    assert client.get("/documents", headers=other_headers).json() == []


def test_delete_document_removes_file(client, uploads_dir, auth_headers, other_headers):
    document = upload(client, auth_headers).json()
    stored = uploads_dir / document["fileUrl"].removeprefix("/uploads/")

    assert client.delete(f"/documents/{document['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/documents/{document['id']}", headers=auth_headers).status_code == 200
    assert not stored.exists()
    assert client.get(f"/documents/{document['id']}", headers=auth_headers).status_code == 404
