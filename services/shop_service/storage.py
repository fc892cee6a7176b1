"""Local filesystem storage for uploaded files."""

import asyncio
import re
import uuid
from pathlib import Path
from typing import Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with ``_``."""
    return UNSAFE_CHARS.sub("_", filename) or "file"


def unique_filename(filename: str) -> str:
    return f"{uuid.uuid4().hex}-{sanitize_filename(filename)}"


class LocalStorage:
    """Writes files under a directory that the app serves as static files."""

    def __init__(self, root: Optional[str] = None, url_prefix: Optional[str] = None):
        settings = get_settings()
        self.root = Path(root or settings.UPLOAD_DIR)
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")

    def _write(self, name: str, data: bytes) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / name
        path.write_bytes(data)
        return path

    async def save(self, filename: str, data: bytes) -> tuple[str, str]:
        """Store ``data`` under a collision-free name. Returns ``(name, url)``."""
        name = unique_filename(filename)
        path = await asyncio.to_thread(self._write, name, data)
        logger.info("Stored upload %s (%d bytes)", path, len(data))
        return name, f"{self.url_prefix}/{name}"


def get_storage() -> LocalStorage:
    return LocalStorage()
