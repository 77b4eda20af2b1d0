"""
Authentication API routes
Registration, login and creator account management
"""
from fastapi import APIRouter, Depends, File, UploadFile
from typing import Optional
import logging

from app.api.dependencies import get_registration_saga, get_user_facade
from app.middleware.auth_middleware import get_current_user
from app.models.auth import (
    ChangePasswordRequest, IdentityRecord, RegisterClipperRequest, RegisterCreatorRequest,
    SignInRequest, UserRole,
)
from app.models.profiles import UpdateCreatorRequest
from app.services.registration_saga import RegistrationSaga
from app.services.user_facade_service import UserFacadeService
from app.utils.api_response import success_response
from app.utils.upload_validation import PROFILE_IMAGE_RULE, read_upload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register/creator", status_code=201)
async def register_creator(form: RegisterCreatorRequest, saga: RegistrationSaga = Depends(get_registration_saga)):
    """Create the identity and the creator profile in one step"""
    response = await saga.register_creator(form)
    return success_response(response, "Creator registered successfully")


@router.post("/register/clipper", status_code=201)
async def register_clipper(form: RegisterClipperRequest, saga: RegistrationSaga = Depends(get_registration_saga)):
    response = await saga.register_clipper(form)
    return success_response(response, "Clipper registered successfully")


@router.post("/login/creator")
async def login_creator(form: SignInRequest, facade: UserFacadeService = Depends(get_user_facade)):
    response = await facade.authenticate(UserRole.CREATOR, form.credentials())
    return success_response(response, "Login successful")


@router.post("/login/clipper")
async def login_clipper(form: SignInRequest, facade: UserFacadeService = Depends(get_user_facade)):
    response = await facade.authenticate(UserRole.CLIPPER, form.credentials())
    return success_response(response, "Login successful")


@router.post("/change-password")
async def change_password(
    form: ChangePasswordRequest,
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    await facade.change_password(current_user.id, form.new_password)
    return success_response(None, "Password changed successfully")


@router.post("/upload-creator-image")
async def upload_creator_image(
    image: Optional[UploadFile] = File(None),
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    blob = await read_upload(image, PROFILE_IMAGE_RULE)
    uploaded = await facade.upload_profile_picture(
        UserRole.CREATOR, blob, current_user.id, requester_id=current_user.id
    )
    return success_response(uploaded, "Image uploaded successfully")


@router.delete("/{user_id}/delete-image")
async def delete_creator_image(
    user_id: str,
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    await facade.delete_profile_picture(UserRole.CREATOR, user_id, requester_id=current_user.id)
    return success_response(None, "Profile image deleted successfully")


@router.get("/{user_id}")
async def get_creator(
    user_id: str,
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    profile = await facade.get_profile(UserRole.CREATOR, user_id)
    return success_response(profile, "Creator retrieved successfully")


@router.patch("/{user_id}")
async def update_creator(
    user_id: str,
    form: UpdateCreatorRequest,
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    profile = await facade.update_profile(
        UserRole.CREATOR, user_id, form.model_dump(exclude_unset=True), requester_id=current_user.id
    )
    return success_response(profile, "Creator updated successfully")


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    current_user: IdentityRecord = Depends(get_current_user),
    facade: UserFacadeService = Depends(get_user_facade),
):
    await facade.delete_identity(user_id, requester_id=current_user.id)
    return success_response(None, "Account successfully deleted")
