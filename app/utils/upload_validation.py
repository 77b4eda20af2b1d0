"""
Multipart upload checks: presence, MIME type and size
"""
from dataclasses import dataclass
from typing import Optional, FrozenSet

from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.models.storage import UploadedBlob


@dataclass(frozen=True)
class UploadRule:
    label: str
    content_types: FrozenSet[str]
    max_bytes: int


PROFILE_IMAGE_RULE = UploadRule(
    label="Image",
    content_types=frozenset({"image/jpg", "image/jpeg", "image/png", "image/webp"}),
    max_bytes=settings.PROFILE_IMAGE_MAX_BYTES,
)

CLIP_RULE = UploadRule(
    label="Clip",
    content_types=frozenset({
        "video/mp4", "video/webm", "video/ogg", "video/quicktime",
        "video/x-msvideo", "video/x-matroska", "video/mpeg",
    }),
    max_bytes=settings.CLIP_MAX_BYTES,
)

THUMBNAIL_RULE = UploadRule(
    label="Thumbnail",
    content_types=frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}),
    max_bytes=settings.PROFILE_IMAGE_MAX_BYTES,
)


def _megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):g}MB"


READ_CHUNK_BYTES = 1024 * 1024


def _too_large(rule: UploadRule) -> ValidationError:
    return ValidationError(f"{rule.label} exceeds the maximum size of {_megabytes(rule.max_bytes)}")


def validate_blob(blob: Optional[UploadedBlob], rule: UploadRule) -> UploadedBlob:
    if blob is None or not blob.data:
        raise ValidationError(f"{rule.label} file is required")
    if (blob.content_type or "").lower() not in rule.content_types:
        allowed = ", ".join(sorted(rule.content_types))
        raise ValidationError(f"Invalid {rule.label.lower()} file type {blob.content_type}. Allowed types: {allowed}")
    if blob.size > rule.max_bytes:
        raise _too_large(rule)
    return blob


async def read_upload(file: Optional[UploadFile], rule: UploadRule) -> UploadedBlob:
    """Read an UploadFile into memory and validate it against ``rule``

    Never buffers more than ``rule.max_bytes + 1`` bytes: a declared size over
    the limit is rejected before reading, and reading stops once the limit is passed.
    """
    if file is None:
        raise ValidationError(f"{rule.label} file is required")
    if file.size is not None and file.size > rule.max_bytes:
        raise _too_large(rule)

    chunks = []
    received = 0
    while received <= rule.max_bytes:
        chunk = await file.read(min(READ_CHUNK_BYTES, rule.max_bytes + 1 - received))
        if not chunk:
            break
        chunks.append(chunk)
        received += len(chunk)
    if received > rule.max_bytes:
        raise _too_large(rule)

    blob = UploadedBlob(
        filename=file.filename or "file",
        content_type=file.content_type or "",
        data=b"".join(chunks),
    )
    return validate_blob(blob, rule)
