import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from tathya.core.errors import ValidationError
from tathya.services.attachment_service import discard_attachments, read_attachments, store_attachments
from tathya.services.storage_service import LocalStorage


def _upload(name: str, data: bytes, content_type: str) -> UploadFile:
    return UploadFile(io.BytesIO(data), filename=name, headers=Headers({"content-type": content_type}))


def test_local_storage_save_and_delete(tmp_path):
    storage = LocalStorage(base_dir=str(tmp_path), base_url="")
    path = storage.save("user-1", "posts", b"data", ".pdf")

    assert path.startswith("/uploads/users/user-1/posts/")
    stored = tmp_path / path.split("/uploads/", 1)[1]
    assert stored.read_bytes() == b"data"

    assert storage.delete(path) is True
    assert not stored.exists()
    assert storage.delete(path) is False


def test_local_storage_never_deletes_outside_base(tmp_path):
    outside = tmp_path / "secret.txt"
    outside.write_text("keep")
    storage = LocalStorage(base_dir=str(tmp_path / "media"), base_url="")

    assert storage.delete("/uploads/../secret.txt") is False
    assert storage.delete("/somewhere/else.txt") is False
    assert outside.read_text() == "keep"


async def test_read_attachments_validates_type_and_size(monkeypatch):
    from tathya.core.config import settings

    ok = await read_attachments([_upload("a.pdf", b"%PDF", "application/pdf"), _upload("lecture.mov", b"v", "video/quicktime")])
    assert [f.filename for f, _ in ok] == ["a.pdf", "lecture.mov"]

    with pytest.raises(ValidationError):
        await read_attachments([_upload("x.exe", b"MZ", "application/x-msdownload")])

    monkeypatch.setattr(settings, "MAX_ATTACHMENT_MB", 0)
    with pytest.raises(ValidationError, match="too large"):
        await read_attachments([_upload("big.pdf", b"1", "application/pdf")])


async def test_store_attachments_is_all_or_nothing(tmp_path):
    storage = LocalStorage(base_dir=str(tmp_path), base_url="")
    loaded = await read_attachments(
        [_upload("a.pdf", b"%PDF", "application/pdf"), _upload("b.docx", b"PK", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")]
    )
    stored = store_attachments(storage, "user-1", loaded)
    assert [a["path"].rsplit(".", 1)[1] for a in stored] == ["pdf", "docx"]

    discard_attachments(storage, stored)
    assert not any(p.is_file() for p in tmp_path.rglob("*"))

    class FailingStorage(LocalStorage):
        calls = 0

        def save(self, user_id, kind, data, ext):
            self.calls += 1
            if self.calls == 2:
                raise OSError("disk full")
            return super().save(user_id, kind, data, ext)

    with pytest.raises(OSError):
        store_attachments(FailingStorage(base_dir=str(tmp_path), base_url=""), "user-1", loaded)
    assert not any(p.is_file() for p in tmp_path.rglob("*"))
