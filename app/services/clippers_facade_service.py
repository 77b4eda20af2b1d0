"""
Clipper directory, portfolio and guidelines.

Clipper profile pictures and profile edits go through the user facade,
which owns the picture rollback logic for both roles.
"""
import logging
import uuid
from typing import List

from app.core.exceptions import DOMAIN_ERRORS, ForbiddenError, InternalError, NotFoundError, ValidationError
from app.models.clippers import Guideline, PortfolioImage
from app.models.profiles import ClipperProfile
from app.models.storage import UploadedBlob
from app.services.guidelines_service import GuidelinesService, guidelines_service
from app.services.portfolio_service import PortfolioService, portfolio_service
from app.services.profile_service import ProfileService, clipper_profile_service

logger = logging.getLogger(__name__)


class ClippersFacadeService:

    def __init__(
        self,
        clippers: ProfileService = clipper_profile_service,
        portfolio: PortfolioService = portfolio_service,
        guidelines: GuidelinesService = guidelines_service,
    ):
        self.clippers = clippers
        self.portfolio = portfolio
        self.guidelines = guidelines

    # Clippers

    async def get_clippers(self) -> List[ClipperProfile]:
        return await self.clippers.list_all()

    async def get_clipper_by_id(self, clipper_id: str) -> ClipperProfile:
        clipper = await self.clippers.find_by_id(clipper_id)
        if not clipper:
            raise NotFoundError("Clipper not found")
        return clipper

    # Portfolio

    async def get_portfolio_images(self, clipper_id: str) -> List[PortfolioImage]:
        return await self.portfolio.list_by_clipper_id(clipper_id)

    async def upload_portfolio_images(self, blobs: List[UploadedBlob], clipper_id: str) -> List[PortfolioImage]:
        """Upload images one by one; the cap is checked before every upload"""
        if not blobs:
            raise ValidationError("At least one image is required")

        results = []
        for blob in blobs:
            if await self.portfolio.has_reached_max_images(clipper_id):
                raise ValidationError("You have reached the maximum number of portfolio images")

            image_id = str(uuid.uuid4())
            image_url = await self.portfolio.upload_picture(blob, clipper_id, image_id)
            try:
                record = await self.portfolio.create(image_id, clipper_id, image_url)
            except Exception as e:
                logger.error(f"PORTFOLIO: Saving image {image_id} for {clipper_id} failed: {e}")
                try:
                    await self.portfolio.delete_picture(clipper_id, image_id)
                except Exception as cleanup_error:
                    logger.error(f"PORTFOLIO: Removing orphaned blob {clipper_id}/{image_id} failed: {cleanup_error}")
                raise
            results.append(record)

        logger.info(f"PORTFOLIO: Uploaded {len(results)} image(s) for {clipper_id}")
        return results

    async def delete_portfolio_image(self, clipper_id: str, image_id: str) -> None:
        image = await self.portfolio.find_by_id(image_id)
        if not image:
            raise NotFoundError("Portfolio image not found")
        if image.clipper_id != clipper_id:
            raise ForbiddenError("You can only delete your own portfolio images")

        try:
            await self.portfolio.delete_picture(clipper_id, image_id)
            await self.portfolio.delete(image_id)
        except DOMAIN_ERRORS:
            raise
        except Exception as e:
            logger.error(f"PORTFOLIO: Deleting image {image_id} failed: {e}")
            raise InternalError("There was an internal server error deleting the portfolio image") from e

    # Guidelines

    async def get_guidelines(self, clipper_id: str) -> List[str]:
        return await self.guidelines.list_by_clipper_id(clipper_id)

    async def create_guideline(self, clipper_id: str, guideline: str) -> Guideline:
        return await self.guidelines.create(clipper_id, guideline)

    async def _owned_guideline(self, clipper_id: str, guideline_id: str) -> Guideline:
        existing = await self.guidelines.find_by_id(guideline_id)
        if not existing:
            raise NotFoundError("Guideline not found")
        if existing.clipper_id != clipper_id:
            raise ForbiddenError("You can only manage your own guidelines")
        return existing

    async def update_guideline(self, clipper_id: str, guideline_id: str, guideline: str) -> Guideline:
        await self._owned_guideline(clipper_id, guideline_id)
        return await self.guidelines.update(guideline_id, guideline)

    async def delete_guideline(self, clipper_id: str, guideline_id: str) -> None:
        await self._owned_guideline(clipper_id, guideline_id)
        await self.guidelines.delete(guideline_id)


clippers_facade_service = ClippersFacadeService()
