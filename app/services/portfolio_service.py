"""
Clipper portfolio images: rows in ``portfolio_images`` plus blobs at
``<clipperId>/<imageId>`` in the portfolio bucket
"""
import logging
from typing import Optional, List

from app.core.config import settings
from app.core.exceptions import InternalError
from app.database.supabase_client import SupabaseClientManager, supabase_manager
from app.models.clippers import PortfolioImage
from app.models.storage import UploadedBlob
from app.services.storage_service import StorageService, storage_service

logger = logging.getLogger(__name__)


class PortfolioService:
    table_name = "portfolio_images"

    def __init__(
        self,
        clients: SupabaseClientManager = supabase_manager,
        storage: StorageService = storage_service,
        bucket: Optional[str] = None,
        max_images: Optional[int] = None,
    ):
        self.clients = clients
        self.storage = storage
        self.bucket = bucket or settings.PORTFOLIO_BUCKET
        self.max_images = max_images if max_images is not None else settings.PORTFOLIO_MAX_IMAGES

    def _table(self):
        return self.clients.service_client.table(self.table_name)

    @staticmethod
    def image_path(clipper_id: str, image_id: str) -> str:
        return f"{clipper_id}/{image_id}"

    async def list_by_clipper_id(self, clipper_id: str) -> List[PortfolioImage]:
        try:
            result = self._table().select("*").eq("clipper_id", clipper_id).order("position").execute()
        except Exception as e:
            logger.error(f"PORTFOLIO: Unable to list images for {clipper_id}: {e}")
            raise InternalError("There was an internal server error getting portfolio images")
        return [PortfolioImage.model_validate(row) for row in result.data or []]

    async def find_by_id(self, image_id: str) -> Optional[PortfolioImage]:
        try:
            result = self._table().select("*").eq("id", image_id).limit(1).execute()
        except Exception as e:
            logger.error(f"PORTFOLIO: Unable to find image {image_id}: {e}")
            raise InternalError("There was an internal server error getting portfolio image")
        if not result.data:
            return None
        return PortfolioImage.model_validate(result.data[0])

    async def count_by_clipper_id(self, clipper_id: str) -> int:
        try:
            result = self._table().select("id", count="exact").eq("clipper_id", clipper_id).execute()
        except Exception as e:
            logger.error(f"PORTFOLIO: Unable to count images for {clipper_id}: {e}")
            raise InternalError("There was an internal server error counting portfolio images")
        if result.count is not None:
            return result.count
        return len(result.data or [])

    async def has_reached_max_images(self, clipper_id: str) -> bool:
        return await self.count_by_clipper_id(clipper_id) >= self.max_images

    async def create(self, image_id: str, clipper_id: str, image_url: str) -> PortfolioImage:
        # position comes from the table default
        row = {"id": image_id, "clipper_id": clipper_id, "image_url": image_url}
        try:
            result = self._table().insert(row).execute()
        except Exception as e:
            logger.error(f"PORTFOLIO: Unable to save image {image_id} for {clipper_id}: {e}")
            raise InternalError("There was an internal server error saving portfolio image")
        if not result.data:
            raise InternalError("There was an internal server error saving portfolio image")
        return PortfolioImage.model_validate(result.data[0])

    async def delete(self, image_id: str) -> None:
        try:
            self._table().delete().eq("id", image_id).execute()
        except Exception as e:
            logger.error(f"PORTFOLIO: Unable to delete image row {image_id}: {e}")
            raise InternalError("There was an internal server error deleting portfolio image")

    async def upload_picture(self, blob: UploadedBlob, clipper_id: str, image_id: str) -> str:
        return await self.storage.upload(blob, self.bucket, self.image_path(clipper_id, image_id))

    async def delete_picture(self, clipper_id: str, image_id: str) -> None:
        await self.storage.delete(self.bucket, self.image_path(clipper_id, image_id))


portfolio_service = PortfolioService()
