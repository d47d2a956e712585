from __future__ import annotations

from pathlib import Path

import pytest

from newsshare.errors import StorageError, ValidationError
from newsshare.ingestion import MediaIngestor, MediaUpload, stored_name
from newsshare.object_store import LocalMediaStore, MediaStore, MinioMediaStore
from newsshare.preview import PreviewRenderer
from newsshare.repositories import InMemoryNewsRepository
from newsshare.service import NewsService

IMAGE = MediaUpload(filename="a.jpg", content=b"\xff\xd8\xff\xe0image", content_type="image/jpeg")
VIDEO = MediaUpload(filename="clip.mp4", content=b"\x00\x00\x00\x18ftypmp42", content_type="video/mp4")


class FakeMinio:
    def __init__(self, fail: bool = False) -> None:
        self.buckets = set()
        self.objects = {}
        self.fail = fail

    def bucket_exists(self, bucket_name):
        return bucket_name in self.buckets

    def make_bucket(self, bucket_name):
        self.buckets.add(bucket_name)

    def put_object(self, bucket_name, object_name, data, length, content_type="application/octet-stream"):
        if self.fail:
            raise ConnectionError("media host unreachable")
        self.objects[(bucket_name, object_name)] = (data.read(), length, content_type)

    def remove_object(self, bucket_name, object_name):
        self.objects.pop((bucket_name, object_name), None)


class BrokenStore(MediaStore):
    def save(self, key, content, content_type="application/octet-stream"):
        raise StorageError("Failed to store media: disk full")

    def delete(self, key):
        pass


class FailsOnSecondWrite(LocalMediaStore):
    def save(self, key, content, content_type="application/octet-stream"):
        if any(self.upload_dir.iterdir()):
            raise StorageError("Failed to store media: disk full")
        return super().save(key, content, content_type)


def _files(directory: Path) -> list:
    return sorted(p.name for p in directory.iterdir()) if directory.exists() else []


def test_stored_names_never_collide() -> None:
    names = {stored_name("a.jpg") for _ in range(200)}
    assert len(names) == 200
    assert all(name.endswith("-a.jpg") for name in names)


@pytest.mark.parametrize(
    "filename, suffix",
    [
        ("../../etc/passwd", "-passwd"),
        ("C:\\Users\\me\\photo.png", "-photo.png"),
        ("my summer photo.jpg", "-my_summer_photo.jpg"),
        ("...", "-upload"),
    ],
)
def test_stored_name_sanitizes_client_filename(filename: str, suffix: str) -> None:
    name = stored_name(filename)
    assert name.endswith(suffix)
    assert "/" not in name and "\\" not in name


def test_local_store_writes_under_upload_dir(tmp_path) -> None:
    store = LocalMediaStore(tmp_path / "uploads", "/uploads/")

    ref = store.save("1-a.jpg", b"data")

    assert ref == "/uploads/1-a.jpg"
    assert (tmp_path / "uploads" / "1-a.jpg").read_bytes() == b"data"


def test_local_store_refuses_to_overwrite(tmp_path) -> None:
    store = LocalMediaStore(tmp_path / "uploads")
    store.save("same.jpg", b"first")

    with pytest.raises(StorageError):
        store.save("same.jpg", b"second")
    assert (tmp_path / "uploads" / "same.jpg").read_bytes() == b"first"


def test_minio_store_creates_bucket_and_returns_public_url() -> None:
    client = FakeMinio()
    store = MinioMediaStore(client, "news-media", "https://media.example.com/")

    ref = store.save("1-a.jpg", b"data", "image/jpeg")

    assert ref == "https://media.example.com/news-media/1-a.jpg"
    assert "news-media" in client.buckets
    assert client.objects[("news-media", "1-a.jpg")] == (b"data", 4, "image/jpeg")


def test_minio_store_failure_raises_storage_error() -> None:
    store = MinioMediaStore(FakeMinio(fail=True), "news-media", "https://media.example.com")

    with pytest.raises(StorageError, match="media host unreachable"):
        store.save("1-a.jpg", b"data")


def test_minio_store_delete_removes_object() -> None:
    client = FakeMinio()
    store = MinioMediaStore(client, "news-media", "https://media.example.com")
    store.save("1-a.jpg", b"data", "image/jpeg")

    store.delete("1-a.jpg")

    assert client.objects == {}


def test_local_store_delete_removes_file(tmp_path) -> None:
    store = LocalMediaStore(tmp_path / "uploads")
    store.save("1-a.jpg", b"data")

    store.delete("1-a.jpg")
    store.delete("1-a.jpg")

    assert _files(tmp_path / "uploads") == []


def test_ingest_image_and_video_url(tmp_path) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"))

    image_url, video_url = ingestor.ingest(IMAGE, "  https://youtu.be/abc  ")

    assert image_url.startswith("/uploads/") and image_url.endswith("-a.jpg")
    assert video_url == "https://youtu.be/abc"
    assert len(_files(tmp_path / "uploads")) == 1


def test_ingest_uploaded_video_is_stored_like_image(tmp_path) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"))

    image_url, video_url = ingestor.ingest(IMAGE, VIDEO)

    assert video_url.startswith("/uploads/") and video_url.endswith("-clip.mp4")
    assert image_url != video_url
    assert len(_files(tmp_path / "uploads")) == 2


def test_ingest_blank_video_url_is_dropped(tmp_path) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"))

    _, video_url = ingestor.ingest(IMAGE, "   ")

    assert video_url is None


@pytest.mark.parametrize("image", [None, MediaUpload(filename="a.jpg", content=b"")])
def test_ingest_requires_image(tmp_path, image) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"))

    with pytest.raises(ValidationError, match="Image is required"):
        ingestor.ingest(image, "https://youtu.be/abc")
    assert _files(tmp_path / "uploads") == []


def test_ingest_rejects_wrong_content_type(tmp_path) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"))
    text_file = MediaUpload(filename="notes.txt", content=b"hello", content_type="text/plain")

    with pytest.raises(ValidationError, match="content type"):
        ingestor.ingest(text_file)


def test_ingest_rejects_bad_video_before_writing_image(tmp_path) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"))
    bad_video = MediaUpload(filename="clip.mp4", content=b"x", content_type="image/png")

    with pytest.raises(ValidationError):
        ingestor.ingest(IMAGE, bad_video)
    assert _files(tmp_path / "uploads") == []


def test_ingest_rejects_oversized_upload(tmp_path) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"), max_size=4)

    with pytest.raises(ValidationError, match="exceeds"):
        ingestor.ingest(IMAGE)


@pytest.mark.parametrize("content_type", [None, "application/octet-stream", "binary/octet-stream"])
def test_ingest_accepts_generic_image_content_type(tmp_path, content_type) -> None:
    ingestor = MediaIngestor(LocalMediaStore(tmp_path / "uploads"))
    upload = MediaUpload(filename="photo.png", content=b"\x89PNG\r\n", content_type=content_type)

    image_url, _ = ingestor.ingest(upload)

    assert image_url.endswith("-photo.png")
    assert len(_files(tmp_path / "uploads")) == 1


def test_ingest_removes_image_when_video_write_fails(tmp_path) -> None:
    ingestor = MediaIngestor(FailsOnSecondWrite(tmp_path / "uploads"))

    with pytest.raises(StorageError, match="disk full"):
        ingestor.ingest(IMAGE, VIDEO)
    assert _files(tmp_path / "uploads") == []


def test_service_video_write_failure_leaves_no_record_or_files(tmp_path) -> None:
    service = _service(FailsOnSecondWrite(tmp_path / "uploads"))

    with pytest.raises(StorageError):
        service.create_news(title="t", description="d", image=IMAGE, video=VIDEO)
    assert service.list_news() == []
    assert _files(tmp_path / "uploads") == []


def test_service_rejects_bad_media_before_any_write(tmp_path) -> None:
    service = _service(LocalMediaStore(tmp_path / "uploads"))
    bad_video = MediaUpload(filename="clip.mp4", content=b"x", content_type="text/plain")

    with pytest.raises(ValidationError, match="Unsupported video content type"):
        service.create_news(title="t", description="d", image=IMAGE, video=bad_video)
    assert service.list_news() == []
    assert _files(tmp_path / "uploads") == []


def _service(store: MediaStore) -> NewsService:
    return NewsService(
        repository=InMemoryNewsRepository(),
        ingestor=MediaIngestor(store),
        renderer=PreviewRenderer("http://api.test", "http://front.test/news", "http://api.test/d.png"),
    )


def test_service_storage_failure_persists_nothing() -> None:
    service = _service(BrokenStore())

    with pytest.raises(StorageError):
        service.create_news(title="t", description="d", image=IMAGE)
    assert service.list_news() == []


def test_service_validates_text_before_storing_media(tmp_path) -> None:
    service = _service(LocalMediaStore(tmp_path / "uploads"))

    with pytest.raises(ValidationError, match="Description is required"):
        service.create_news(title="t", description=" ", image=IMAGE)
    assert _files(tmp_path / "uploads") == []


def test_service_create_then_preview(tmp_path) -> None:
    service = _service(LocalMediaStore(tmp_path / "uploads"))

    record = service.create_news(title="Breaking", description="d" * 200, image=IMAGE, video=VIDEO)
    html = service.render_preview(record.id)

    assert service.get_news(record.id) == record
    assert '<meta property="og:title" content="Breaking" />' in html
    assert f'content="http://api.test{record.image_url}"' in html
    assert f'content="http://api.test{record.video_url}"' in html
