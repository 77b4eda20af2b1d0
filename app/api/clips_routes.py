"""
Clip submission routes
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
import logging

from app.api.dependencies import get_clips_service
from app.middleware.auth_middleware import get_current_user
from app.models.auth import IdentityRecord
from app.models.clips import SubmitClipRequest, UpdateClipStatusRequest
from app.services.clips_service import ClipsService
from app.utils.api_response import success_response
from app.utils.upload_validation import CLIP_RULE, THUMBNAIL_RULE, read_upload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/clips", tags=["Clips"])


@router.post("/submit", status_code=201)
async def submit_clip(
    clipper_id: str = Form(..., alias="clipperId"),
    title: str = Form(...),
    description: str = Form(""),
    clip: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: IdentityRecord = Depends(get_current_user),
    clips: ClipsService = Depends(get_clips_service),
):
    """
    Submit a clip to a clipper. Multipart form with ``clip`` and
    ``thumbnail`` files plus clipperId, title and description fields.
    """
    fields = SubmitClipRequest(clipper_id=clipper_id, title=title, description=description)
    video = await read_upload(clip, CLIP_RULE)
    thumbnail_blob = await read_upload(thumbnail, THUMBNAIL_RULE)
    submission = await clips.submit_clip(video, thumbnail_blob, fields, current_user.id, user_token=current_user.token)
    return success_response(submission, "Clip submitted successfully")


@router.patch("/status")
async def update_clip_status(
    form: UpdateClipStatusRequest,
    current_user: IdentityRecord = Depends(get_current_user),
    clips: ClipsService = Depends(get_clips_service),
):
    submission = await clips.update_clip_status(form.clip_id, form.status, current_user.id, user_token=current_user.token)
    return success_response(submission, "Clip status updated successfully")


@router.get("/get-by-creatorId")
async def get_by_creator(
    current_user: IdentityRecord = Depends(get_current_user),
    clips: ClipsService = Depends(get_clips_service),
):
    submissions = await clips.get_clip_submissions_by_creator_id(current_user.id, user_token=current_user.token)
    return success_response(submissions, "Clip submissions retrieved successfully")


@router.get("/get-by-clipperId")
async def get_by_clipper(
    current_user: IdentityRecord = Depends(get_current_user),
    clips: ClipsService = Depends(get_clips_service),
):
    submissions = await clips.get_clip_submissions_by_clipper_id(current_user.id, user_token=current_user.token)
    return success_response(submissions, "Clip submissions retrieved successfully")


@router.get("/{clip_id}")
async def get_clip(
    clip_id: str,
    current_user: IdentityRecord = Depends(get_current_user),
    clips: ClipsService = Depends(get_clips_service),
):
    submission = await clips.get_clip_submission_by_id(clip_id, current_user.id, user_token=current_user.token)
    return success_response(submission, "Clip submission retrieved successfully")
