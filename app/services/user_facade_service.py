"""
Authentication facade: sign-in plus role profile lookup, and the profile
operations behind the /auth routes.

Domain errors classified below this layer pass through unchanged; anything
else becomes an InternalError carrying an operation-specific message.
"""
import logging
from typing import Dict, Any, Optional

from app.core.exceptions import (
    APIException, DOMAIN_ERRORS, ForbiddenError, InternalError, NotFoundError, RollbackFailedError,
)
from app.models.auth import Credentials, UserResponse, UserRole
from app.models.profiles import Profile, UploadFileResponse
from app.models.storage import UploadedBlob
from app.services.identity_service import IdentityService, identity_service
from app.services.profile_service import ProfileService, creator_profile_service, clipper_profile_service

logger = logging.getLogger(__name__)

PICTURE_FIELD = "brand_profile_picture"


class UserFacadeService:

    def __init__(
        self,
        identities: IdentityService = identity_service,
        profile_stores: Optional[Dict[UserRole, ProfileService]] = None,
    ):
        self.identities = identities
        self.profile_stores = profile_stores or {
            UserRole.CREATOR: creator_profile_service,
            UserRole.CLIPPER: clipper_profile_service,
        }

    def profile_store(self, role: UserRole) -> ProfileService:
        return self.profile_stores[UserRole(role)]

    @staticmethod
    def _ensure_owner(profile_id: str, requester_id: Optional[str]):
        if requester_id is not None and requester_id != profile_id:
            raise ForbiddenError("You can only manage your own account")

    async def authenticate(self, role: UserRole, credentials: Credentials) -> UserResponse:
        """Verify credentials, then require a profile for ``role``"""
        role = UserRole(role)
        try:
            identity = await self.identities.verify_credentials(credentials.email, credentials.password)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"AUTH: Sign-in failed for {credentials.email}: {e}")
            raise InternalError("There was an internal server error during login process.") from e

        profile = await self.profile_store(role).find_by_id(identity.id)
        if not profile:
            # Identity without a profile of this role; not a credentials problem
            logger.warning(f"AUTH: {identity.id} authenticated but has no {role.value} profile")
            raise NotFoundError(f"Authentication succeeded but {role.value} profile not found")

        logger.info(f"AUTH: {role.value} {identity.id} signed in")
        return UserResponse(user=profile, role=role, token=identity.token, refresh_token=identity.refresh_token)

    async def get_profile(self, role: UserRole, profile_id: str) -> Profile:
        profile = await self.profile_store(role).find_by_id(profile_id)
        if not profile:
            raise NotFoundError(f"{UserRole(role).value.capitalize()} not found")
        return profile

    async def update_profile(
        self, role: UserRole, profile_id: str, fields: Dict[str, Any], requester_id: Optional[str] = None
    ) -> Profile:
        self._ensure_owner(profile_id, requester_id)
        try:
            return await self.profile_store(role).update(profile_id, fields)
        except DOMAIN_ERRORS:
            raise
        except Exception as e:
            logger.error(f"Updating {UserRole(role).value} profile {profile_id} failed: {e}")
            raise InternalError(f"There was an internal server error updating {UserRole(role).value} profile") from e

    async def delete_identity(self, identity_id: str, requester_id: Optional[str] = None) -> None:
        """Remove every role profile of the identity, then the identity itself"""
        self._ensure_owner(identity_id, requester_id)
        try:
            for role, store in self.profile_stores.items():
                if await store.find_by_id(identity_id):
                    await store.delete(identity_id)
                    logger.info(f"AUTH: Deleted {UserRole(role).value} profile {identity_id}")
            await self.identities.delete_identity(identity_id)
        except DOMAIN_ERRORS:
            raise
        except Exception as e:
            logger.error(f"Deleting user {identity_id} failed: {e}")
            raise InternalError("There was an internal server error deleting user") from e
        logger.info(f"AUTH: Deleted identity {identity_id}")

    async def change_password(self, identity_id: str, new_password: str) -> None:
        try:
            await self.identities.change_password(identity_id, new_password)
        except DOMAIN_ERRORS:
            raise
        except Exception as e:
            logger.error(f"Changing password for {identity_id} failed: {e}")
            raise InternalError("There was an internal server error changing password") from e

    async def upload_profile_picture(
        self,
        role: UserRole,
        blob: UploadedBlob,
        profile_id: str,
        requester_id: Optional[str] = None,
        user_token: Optional[str] = None,
    ) -> UploadFileResponse:
        """Upload the picture, then point the profile row at it"""
        self._ensure_owner(profile_id, requester_id)
        store = self.profile_store(role)
        profile = await self.get_profile(role, profile_id)
        previous_picture = profile.brand_profile_picture

        try:
            uploaded = await store.upload_profile_picture(blob, profile_id, user_token)
        except DOMAIN_ERRORS:
            raise
        except Exception as e:
            logger.error(f"Uploading profile picture for {profile_id} failed: {e}")
            raise InternalError("There was an internal server error uploading the image") from e

        try:
            await store.update(profile_id, {PICTURE_FIELD: uploaded.url})
        except Exception as e:
            logger.error(f"Saving profile picture URL for {profile_id} failed: {e}")
            # The upload overwrote <id>/profilepic; a previous picture lives at the same path
            if previous_picture is None:
                try:
                    await store.delete_profile_picture(profile_id, user_token)
                except Exception as cleanup_error:
                    logger.error(f"Removing uploaded picture {uploaded.path} failed: {cleanup_error}")
            if isinstance(e, DOMAIN_ERRORS):
                raise
            raise InternalError("There was an internal server error uploading or updating the image") from e

        return uploaded

    async def delete_profile_picture(
        self,
        role: UserRole,
        profile_id: str,
        requester_id: Optional[str] = None,
        user_token: Optional[str] = None,
    ) -> None:
        """Clear the picture field, then delete the blob; restore the field if the blob survives"""
        self._ensure_owner(profile_id, requester_id)
        store = self.profile_store(role)
        profile = await self.get_profile(role, profile_id)
        previous_picture = profile.brand_profile_picture

        try:
            await store.update(profile_id, {PICTURE_FIELD: None})
        except DOMAIN_ERRORS:
            raise
        except Exception as e:
            logger.error(f"Clearing profile picture for {profile_id} failed: {e}")
            raise InternalError("There was an internal server error deleting the profile image") from e

        try:
            await store.delete_profile_picture(profile_id, user_token)
        except Exception as blob_error:
            logger.error(f"Deleting profile image blob for {profile_id} failed: {blob_error}")
            try:
                await store.update(profile_id, {PICTURE_FIELD: previous_picture})
            except Exception as restore_error:
                logger.critical(
                    f"Restoring profile picture for {profile_id} failed, row no longer points at "
                    f"{previous_picture}. Blob error: {blob_error}. Restore error: {restore_error}"
                )
                raise RollbackFailedError(
                    "Failed to delete the profile image from storage and rollback also failed"
                ) from restore_error
            logger.warning(f"Restored profile picture for {profile_id} after failed blob delete")
            raise InternalError(
                "There was an internal server error deleting the profile image from storage. "
                "Changes have been rolled back."
            ) from blob_error

        logger.info(f"Deleted profile picture for {profile_id}")


user_facade_service = UserFacadeService()
