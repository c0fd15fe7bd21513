from blogchat.routers import upload_router
from blogchat.services import UploadService, upload_service


async def test_upload_and_download(client):
    response = await client.post("/uploads", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 201, response.text
    body = response.json()

    assert body["name"] == "notes.txt"
    assert body["size"] == 5
    assert body["contentType"] == "text/plain"
    assert body["dataUrl"] == "data:text/plain;base64,aGVsbG8="
    assert body["url"].startswith("/uploads/")
    assert body["url"].endswith("_notes.txt")

    download = await client.get(body["url"])
    assert download.status_code == 200
    assert download.content == b"hello"


async def test_upload_without_file_returns_400(client):
    response = await client.post("/uploads", data={"other": "x"})
    assert response.status_code == 400


async def test_upload_too_large_returns_413(client, tmp_path):
    response = await client.post(
        "/uploads", files={"file": ("big.bin", b"x" * (10 * 1024 * 1024 + 1), "application/octet-stream")}
    )
    assert response.status_code == 413
    assert not (tmp_path / "uploads").exists() or not any((tmp_path / "uploads").iterdir())


async def test_upload_reads_at_most_one_byte_over_limit(client, monkeypatch):
    monkeypatch.setattr(upload_router, "MAX_UPLOAD_BYTES", 8)
    monkeypatch.setattr(upload_service, "MAX_UPLOAD_BYTES", 8)
    original = UploadService.save_upload
    sizes = []

    async def save_upload(data, original_name, content_type):
        sizes.append(len(data))
        return await original(data, original_name, content_type)

    monkeypatch.setattr(UploadService, "save_upload", save_upload)

    response = await client.post("/uploads", files={"file": ("big.bin", b"x" * 100, "application/octet-stream")})

    assert response.status_code == 413
    assert sizes == [9]


async def test_download_missing_file_returns_404(client):
    assert (await client.get("/uploads/nothing-here.txt")).status_code == 404
