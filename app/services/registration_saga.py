"""
Registration saga: identity first, then the role's profile row.

There is no transaction spanning the auth provider and the profile tables,
so a failed profile insert is compensated by deleting the identity that was
just created. Steps run strictly in order; each one is awaited before the
next starts so the compensation always knows how far the saga got.
"""
import logging
from typing import Dict, Any, Optional

from app.core.exceptions import (
    APIException, ConflictError, InternalError, RollbackFailedError, ValidationError,
    is_duplicate_error,
)
from app.models.auth import Credentials, RegisterCreatorRequest, RegisterClipperRequest, UserResponse, UserRole
from app.services.identity_service import IdentityService, identity_service
from app.services.profile_service import ProfileService, creator_profile_service, clipper_profile_service

logger = logging.getLogger(__name__)


class RegistrationSaga:
    """Creates an (identity, profile) pair or leaves neither behind"""

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

    async def register_with_profile(
        self, role: UserRole, credentials: Credentials, profile_fields: Dict[str, Any]
    ) -> UserResponse:
        role = UserRole(role)
        store = self.profile_store(role)

        try:
            identity = await self.identities.create_identity(credentials.email, credentials.password)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"REGISTRATION: Creating identity for {credentials.email} failed: {e}")
            raise InternalError("There was an internal server error during registration") from e

        if not identity.id:
            logger.error(f"REGISTRATION: Identity created for {credentials.email} but no id was returned")
            raise InternalError("Authentication succeeded but no user id was returned")

        # The profile id is always the identity id
        fields = {**profile_fields, "id": identity.id}
        try:
            profile = await store.create(fields)
        except (ConflictError, ValidationError) as e:
            await self._compensate(role, identity.id, e)
            raise
        except Exception as e:
            await self._compensate(role, identity.id, e)
            if is_duplicate_error(e):
                raise ConflictError("User with this email already exists") from e
            raise InternalError(f"There was an internal server error creating {role.value} profile") from e

        logger.info(f"REGISTRATION: Registered {role.value} {identity.id} ({credentials.email})")
        return UserResponse(
            user=profile,
            role=role,
            token=identity.token,
            refresh_token=identity.refresh_token,
        )

    async def _compensate(self, role: UserRole, identity_id: str, cause: Exception) -> None:
        """Delete the identity whose profile could not be created"""
        logger.error(f"REGISTRATION: Creating {role.value} profile for {identity_id} failed: {cause}")
        try:
            await self.identities.delete_identity(identity_id)
        except Exception as rollback_error:
            logger.critical(
                f"REGISTRATION: Rollback failed, identity {identity_id} has no {role.value} profile "
                f"and needs manual cleanup. Profile error: {cause}. Rollback error: {rollback_error}"
            )
            raise RollbackFailedError(
                f"Failed to create {role.value} profile and rollback also failed"
            ) from rollback_error
        logger.warning(f"REGISTRATION: Rolled back identity {identity_id} after failed {role.value} profile creation")

    async def register_creator(self, form: RegisterCreatorRequest) -> UserResponse:
        return await self.register_with_profile(UserRole.CREATOR, form.credentials(), form.profile_fields())

    async def register_clipper(self, form: RegisterClipperRequest) -> UserResponse:
        return await self.register_with_profile(UserRole.CLIPPER, form.credentials(), form.profile_fields())


registration_saga = RegistrationSaga()
