"""
Blob storage over Supabase Storage buckets
"""
import logging
from typing import Optional, Tuple
from urllib.parse import unquote

from app.core.exceptions import APIException, ForbiddenError, InternalError, NotFoundError
from app.database.supabase_client import SupabaseClientManager, supabase_manager
from app.models.storage import UploadedBlob

logger = logging.getLogger(__name__)

PUBLIC_OBJECT_MARKER = "/object/public/"


def split_public_url(public_url: str) -> Tuple[str, str]:
    """Return (bucket, path) for a Supabase public object URL"""
    parts = public_url.split(PUBLIC_OBJECT_MARKER, 1)
    if len(parts) < 2 or "/" not in parts[1]:
        raise ValueError(f"Invalid storage URL format: {public_url}")
    bucket, path = parts[1].split("?", 1)[0].split("/", 1)
    return bucket, unquote(path)


class StorageService:
    """Upload and delete blobs, classifying storage errors"""

    def __init__(self, clients: SupabaseClientManager = supabase_manager):
        self.clients = clients

    async def upload(
        self,
        blob: UploadedBlob,
        bucket: str,
        path: str,
        user_token: Optional[str] = None,
        upsert: bool = False,
    ) -> str:
        """Upload ``blob`` to ``bucket/path`` and return its public URL"""
        client = self.clients.client_for(user_token)
        try:
            client.storage.from_(bucket).upload(
                path,
                blob.data,
                file_options={
                    "content-type": blob.content_type,
                    "cache-control": "3600",
                    "upsert": "true" if upsert else "false",
                },
            )
        except APIException:
            raise
        except Exception as e:
            logger.error(f"STORAGE: Error uploading {bucket}/{path}: {e}")
            error_str = str(e).lower()
            if "bucket not found" in error_str:
                raise NotFoundError("Resource not found")
            if "permission denied" in error_str or "unauthorized" in error_str or "row-level security" in error_str:
                raise ForbiddenError(f"No permission to upload file to {bucket}")
            raise InternalError("There was an internal server error uploading file")

        public_url = client.storage.from_(bucket).get_public_url(path)
        return public_url.rstrip("?")

    async def delete(self, bucket: str, path: str, user_token: Optional[str] = None) -> None:
        client = self.clients.client_for(user_token)
        try:
            client.storage.from_(bucket).remove([path])
        except APIException:
            raise
        except Exception as e:
            error_str = str(e).lower()
            if "not found" in error_str:
                raise NotFoundError(f"File at {path} not found")
            if "permission denied" in error_str or "unauthorized" in error_str:
                raise ForbiddenError(f"No permission to delete file at {path}")
            logger.error(f"STORAGE: Error deleting {bucket}/{path}: {e}")
            raise InternalError("There was an internal server error deleting file")

    async def delete_by_public_url(self, public_url: str, user_token: Optional[str] = None) -> None:
        try:
            bucket, path = split_public_url(public_url)
        except ValueError as e:
            logger.error(f"STORAGE: {e}")
            raise InternalError("There was an internal server error deleting file")
        await self.delete(bucket, path, user_token)


storage_service = StorageService()
