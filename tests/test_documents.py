from pathlib import Path
from uuid import uuid4

from tathya.core.config import settings

API = "/api/v1"

TRANSCRIPT = ("transcript-scan.pdf", b"%PDF-1.4 grades", "application/pdf")


def _document_files() -> set[Path]:
    return {p for p in Path(settings.DOCUMENT_DIR).rglob("*") if p.is_file()}


async def _upload(client, user, name="Semester 4 transcript", doc_type="pdf", file=TRANSCRIPT):
    response = await client.post(
        f"{API}/documents",
        data={"name": name, "type": doc_type},
        files={"document": file},
        headers=user.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_upload_document(client, alice):
    before = _document_files()
    document = await _upload(client, alice)

    assert document["name"] == "Semester 4 transcript"
    assert document["type"] == "PDF"
    assert document["filename"] == "transcript-scan.pdf"
    assert document["mimetype"] == "application/pdf"
    assert document["size"] == len(TRANSCRIPT[1])
    assert document["size_label"] == "0.00 MB"
    assert document["status"] == "Pending"
    assert "path" not in document
    assert len(_document_files() - before) == 1
    # documents are never stored with the public uploads
    assert not any(Path(settings.UPLOAD_DIR).rglob("*/documents/*"))


async def test_upload_validation(client, alice):
    before = _document_files()
    no_file = await client.post(f"{API}/documents", data={"name": "x", "type": "pdf"}, headers=alice.headers)
    assert no_file.status_code == 400
    assert no_file.json()["detail"] == "Please upload a file"

    no_name = await client.post(
        f"{API}/documents", data={"name": " ", "type": "pdf"}, files={"document": TRANSCRIPT}, headers=alice.headers
    )
    assert no_name.status_code == 400
    assert no_name.json()["detail"] == "Please provide document name and type"

    bad_type = await client.post(
        f"{API}/documents",
        data={"name": "Tool", "type": "exe"},
        files={"document": ("tool.exe", b"MZ", "application/x-msdownload")},
        headers=alice.headers,
    )
    assert bad_type.status_code == 400
    assert _document_files() == before


async def test_my_documents_and_privacy(client, alice, bob, moderator):
    first = await _upload(client, alice, name="ID card", doc_type="png", file=("id.png", b"\x89PNG", "image/png"))
    second = await _upload(client, alice)
    await _upload(client, bob, name="Bob's transcript")

    mine = (await client.get(f"{API}/documents/my-documents", headers=alice.headers)).json()
    assert [d["id"] for d in mine] == [second["id"], first["id"]]

    url = f"{API}/documents/{first['id']}"
    assert (await client.get(url, headers=bob.headers)).status_code == 404
    assert (await client.get(f"{url}/download", headers=bob.headers)).status_code == 404
    assert (await client.delete(url, headers=bob.headers)).status_code == 404
    assert (await client.get(url, headers=moderator.headers)).status_code == 200
    assert (await client.get(f"{API}/documents/{uuid4()}", headers=alice.headers)).status_code == 404


async def test_download_returns_file_with_display_name(client, alice, moderator):
    document = await _upload(client, alice)
    url = f"{API}/documents/{document['id']}/download"

    downloaded = await client.get(url, headers=alice.headers)
    assert downloaded.status_code == 200
    assert downloaded.content == TRANSCRIPT[1]
    assert downloaded.headers["content-type"] == "application/octet-stream"
    assert 'filename="Semester 4 transcript.pdf"' in downloaded.headers["content-disposition"]

    assert (await client.get(url, headers=moderator.headers)).content == TRANSCRIPT[1]


async def test_update_document_metadata(client, alice, moderator):
    document = await _upload(client, alice)
    url = f"{API}/documents/{document['id']}"

    updated = await client.put(url, json={"name": "Final transcript", "type": "docx"}, headers=alice.headers)
    assert updated.status_code == 200
    assert updated.json()["name"] == "Final transcript"
    assert updated.json()["type"] == "DOCX"
    assert updated.json()["filename"] == "transcript-scan.pdf"

    by_moderator = await client.put(url, json={"name": "Renamed"}, headers=moderator.headers)
    assert by_moderator.status_code == 403


async def test_verify_is_moderator_only(client, alice, moderator):
    document = await _upload(client, alice)
    url = f"{API}/documents/{document['id']}/verify"

    assert (await client.put(url, json={"status": "Verified"}, headers=alice.headers)).status_code == 403
    assert (await client.put(url, json={"status": "Lost"}, headers=moderator.headers)).status_code == 422

    verified = await client.put(url, json={"status": "Verified"}, headers=moderator.headers)
    assert verified.status_code == 200
    assert verified.json()["status"] == "Verified"
    mine = (await client.get(f"{API}/documents/my-documents", headers=alice.headers)).json()
    assert mine[0]["status"] == "Verified"


async def test_delete_document_removes_file(client, alice):
    before = _document_files()
    document = await _upload(client, alice)
    assert len(_document_files() - before) == 1

    deleted = await client.delete(f"{API}/documents/{document['id']}", headers=alice.headers)
    assert deleted.status_code == 204
    assert _document_files() == before
    assert (await client.get(f"{API}/documents/{document['id']}", headers=alice.headers)).status_code == 404
