"""Helpers for reading uploaded file streams."""

import hashlib

from fastapi import UploadFile


async def read_upload(
    upload_file: UploadFile,
    chunk_size: int = 1024 * 1024,
) -> tuple[bytes, str]:
    """Read an uploaded file into memory and return it with its SHA-256 digest."""
    hasher = hashlib.sha256()
    buffer = bytearray()
    while True:
        chunk = await upload_file.read(chunk_size)
        if not chunk:
            break
        hasher.update(chunk)
        buffer.extend(chunk)
    return bytes(buffer), hasher.hexdigest()
