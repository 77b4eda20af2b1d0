"""
Clipper directory, profile, portfolio and guideline routes
"""
from fastapi import APIRouter, Depends, File, UploadFile
from typing import List, Optional
import logging

from app.api.dependencies import get_clippers_facade, get_user_facade
from app.middleware.auth_middleware import get_current_user
from app.models.auth import IdentityRecord, UserRole
from app.models.clippers import GuidelineRequest
from app.models.profiles import UpdateClipperRequest
from app.services.clippers_facade_service import ClippersFacadeService
from app.services.user_facade_service import UserFacadeService
from app.utils.api_response import success_response
from app.utils.upload_validation import PROFILE_IMAGE_RULE, read_upload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/clippers", tags=["Clippers"])


@router.get("")
async def get_clippers(clippers: ClippersFacadeService = Depends(get_clippers_facade)):
    return success_response(await clippers.get_clippers(), "Clippers retrieved successfully")


@router.patch("/me")
async def update_me(
    form: UpdateClipperRequest,
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    profile = await facade.update_profile(
        UserRole.CLIPPER, current_user.id, form.model_dump(exclude_unset=True), requester_id=current_user.id
    )
    return success_response(profile, "Clipper updated successfully")


@router.post("/upload-clipper-image")
async def upload_clipper_image(
    image: Optional[UploadFile] = File(None),
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    blob = await read_upload(image, PROFILE_IMAGE_RULE)
    uploaded = await facade.upload_profile_picture(UserRole.CLIPPER, blob, current_user.id)
    return success_response(uploaded, "Image uploaded successfully")


@router.delete("/delete-clipper-image")
async def delete_clipper_image(
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    await facade.delete_profile_picture(UserRole.CLIPPER, current_user.id)
    return success_response(None, "Profile image deleted successfully")


@router.post("/upload-portfolio-images", status_code=201)
async def upload_portfolio_images(
    images: List[UploadFile] = File(...),
    current_user: IdentityRecord = Depends(get_current_user),
    clippers: ClippersFacadeService = Depends(get_clippers_facade),
):
    blobs = [await read_upload(image, PROFILE_IMAGE_RULE) for image in images]
    records = await clippers.upload_portfolio_images(blobs, current_user.id)
    return success_response(records, "Portfolio images uploaded successfully")


@router.delete("/delete-portfolio-image/{image_id}")
async def delete_portfolio_image(
    image_id: str,
    current_user: IdentityRecord = Depends(get_current_user),
    clippers: ClippersFacadeService = Depends(get_clippers_facade),
):
    await clippers.delete_portfolio_image(current_user.id, image_id)
    return success_response(None, "Portfolio image deleted successfully")


@router.post("/guidelines", status_code=201)
async def create_guideline(
    form: GuidelineRequest,
    current_user: IdentityRecord = Depends(get_current_user),
    clippers: ClippersFacadeService = Depends(get_clippers_facade),
):
    guideline = await clippers.create_guideline(current_user.id, form.guideline)
    return success_response(guideline, "Guideline created successfully")


@router.patch("/guidelines/{guideline_id}")
async def update_guideline(
    guideline_id: str,
    form: GuidelineRequest,
    current_user: IdentityRecord = Depends(get_current_user),
    clippers: ClippersFacadeService = Depends(get_clippers_facade),
):
    guideline = await clippers.update_guideline(current_user.id, guideline_id, form.guideline)
    return success_response(guideline, "Guideline updated successfully")


@router.delete("/guidelines/{guideline_id}")
async def delete_guideline(
    guideline_id: str,
    current_user: IdentityRecord = Depends(get_current_user),
    clippers: ClippersFacadeService = Depends(get_clippers_facade),
):
    await clippers.delete_guideline(current_user.id, guideline_id)
    return success_response(None, "Guideline deleted successfully")


@router.get("/{clipper_id}")
async def get_clipper(clipper_id: str, clippers: ClippersFacadeService = Depends(get_clippers_facade)):
    return success_response(await clippers.get_clipper_by_id(clipper_id), "Clipper retrieved successfully")


@router.get("/{clipper_id}/portfolio")
async def get_portfolio(clipper_id: str, clippers: ClippersFacadeService = Depends(get_clippers_facade)):
    images = await clippers.get_portfolio_images(clipper_id)
    return success_response(images, "Portfolio images retrieved successfully")


@router.get("/{clipper_id}/guidelines")
async def get_guidelines(clipper_id: str, clippers: ClippersFacadeService = Depends(get_clippers_facade)):
    guidelines = await clippers.get_guidelines(clipper_id)
    return success_response(guidelines, "Guidelines retrieved successfully")
