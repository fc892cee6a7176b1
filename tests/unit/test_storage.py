"""Unit tests for local upload storage."""

import pytest
from services.shop_service.storage import LocalStorage, sanitize_filename, unique_filename


@pytest.mark.unit
def test_sanitize_replaces_unsafe_characters():
    assert sanitize_filename("brake pad (front).png") == "brake_pad__front_.png"
    assert sanitize_filename("../../etc/passwd") == ".._.._etc_passwd"
    assert sanitize_filename("ok-name_1.jpg") == "ok-name_1.jpg"


@pytest.mark.unit
def test_unique_filename_prefixes_a_hex_id():
    name = unique_filename("a b.txt")
    prefix, rest = name.split("-", 1)

    assert len(prefix) == 32
    assert rest == "a_b.txt"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_save_creates_directory_and_writes_bytes(tmp_path):
    storage = LocalStorage(root=str(tmp_path / "nested" / "uploads"), url_prefix="/uploads/")

    name, url = await storage.save("photo.jpg", b"\x89data")

    assert url == f"/uploads/{name}"
    assert (tmp_path / "nested" / "uploads" / name).read_bytes() == b"\x89data"
