import logging
import random
import time
from pathlib import Path
from typing import Tuple

from fastapi import UploadFile

logger = logging.getLogger(__name__)


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def photo_filename(original: str) -> str:
    """``<ms>-<original name>``; directory parts of the client name are dropped."""
    return f"{timestamp_ms()}-{Path(original or 'photo').name}"


def pdf_filename() -> str:
    """``uploaded-<ms>-<random>.pdf``"""
    return f"uploaded-{timestamp_ms()}-{random.randint(0, 10**9)}.pdf"


async def save_upload(file: UploadFile, directory: Path, filename: str) -> Tuple[Path, bytes]:
    """Write the uploaded file to ``directory/filename``; returns path and bytes."""
    directory.mkdir(parents=True, exist_ok=True)
    content = await file.read()
    path = directory / filename
    path.write_bytes(content)
    logger.info(f"Stored upload {filename} ({len(content)} bytes)")
    return path, content
