"""Uploaded images stored inline as data URLs on the player or club record."""

from __future__ import annotations

import base64

from .errors import ImageUploadError

MAX_IMAGE_BYTES = 512 * 1024
IMAGE_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")


def image_data_url(content: bytes, mime_type: str) -> str:
    mime_type = (mime_type or "").lower()
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"
    if mime_type not in IMAGE_TYPES:
        raise ImageUploadError(f"Unsupported image type {mime_type or 'unknown'!r}")
    if not content:
        raise ImageUploadError("Uploaded image is empty")
    if len(content) > MAX_IMAGE_BYTES:
        raise ImageUploadError(f"Image is {len(content) // 1024} KB; the limit is {MAX_IMAGE_BYTES // 1024} KB")
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
