"""
Profile store adapters, one per tenant role.

Rows are snake_case in Supabase; callers may hand in camelCase keys, which
are mapped on the way in. Rows come back as CreatorProfile / ClipperProfile.
"""
import logging
from typing import Optional, List, Dict, Any, Type

from app.core.config import settings
from app.core.exceptions import APIException, ConflictError, InternalError, NotFoundError, is_duplicate_error
from app.database.supabase_client import SupabaseClientManager, supabase_manager
from app.models.auth import UserRole
from app.models.profiles import ProfileBase, CreatorProfile, ClipperProfile, Profile, UploadFileResponse
from app.models.storage import UploadedBlob
from app.services.storage_service import StorageService, storage_service
from app.utils.case_mapping import camel_to_snake

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class ProfileService:
    """Row and picture operations for one profile table"""

    table_name: str = ""
    bucket: str = ""
    role: UserRole
    model: Type[ProfileBase] = ProfileBase
    label: str = "profile"

    def __init__(self, clients: SupabaseClientManager = supabase_manager, storage: StorageService = storage_service):
        self.clients = clients
        self.storage = storage

    def _table(self):
        return self.clients.service_client.table(self.table_name)

    def _to_model(self, row: Dict[str, Any]) -> Profile:
        return self.model.model_validate(row)

    def picture_path(self, profile_id: str) -> str:
        return f"{profile_id}/profilepic"

    async def create(self, profile: Dict[str, Any]) -> Profile:
        data = camel_to_snake(profile)
        try:
            result = self._table().insert(data).execute()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Unable to create {self.label}: {e}")
            if getattr(e, "code", None) == UNIQUE_VIOLATION or is_duplicate_error(e):
                raise ConflictError("User with this email already exists")
            raise InternalError(f"There was an internal server error creating {self.label}")

        if not result.data:
            logger.error(f"Insert into {self.table_name} returned no row")
            raise InternalError(f"There was an internal server error creating {self.label}")
        return self._to_model(result.data[0])

    async def _select_one(self, column: str, value: str) -> Optional[Profile]:
        try:
            result = self._table().select("*").eq(column, value).limit(1).execute()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Unable to find {self.label} by {column}: {e}")
            raise InternalError(f"There was an internal server error finding {self.label}")
        if not result.data:
            return None
        return self._to_model(result.data[0])

    async def find_by_id(self, profile_id: str) -> Optional[Profile]:
        if not profile_id:
            return None
        return await self._select_one("id", profile_id)

    async def list_all(self) -> List[Profile]:
        try:
            result = self._table().select("*").order("created_at", desc=True).execute()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Unable to list {self.table_name}: {e}")
            raise InternalError(f"There was an internal server error getting {self.table_name}")
        return [self._to_model(row) for row in result.data or []]

    async def update(self, profile_id: str, fields: Dict[str, Any]) -> Profile:
        if not await self.find_by_id(profile_id):
            raise NotFoundError(f"{self.label.capitalize()} not found")

        data = camel_to_snake(fields)
        try:
            result = self._table().update(data).eq("id", profile_id).execute()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Unable to update {self.label} {profile_id}: {e}")
            raise InternalError(f"There was an internal server error updating {self.label}")

        if not result.data:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        return self._to_model(result.data[0])

    async def delete(self, profile_id: str) -> None:
        if not await self.find_by_id(profile_id):
            raise NotFoundError(f"{self.label.capitalize()} not found")
        try:
            self._table().delete().eq("id", profile_id).execute()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Unable to delete {self.label} {profile_id}: {e}")
            raise InternalError(f"There was an internal server error deleting {self.label}")

    async def upload_profile_picture(
        self, blob: UploadedBlob, profile_id: str, user_token: Optional[str] = None
    ) -> UploadFileResponse:
        path = self.picture_path(profile_id)
        url = await self.storage.upload(blob, self.bucket, path, user_token=user_token, upsert=True)
        return UploadFileResponse(url=url, path=path)

    async def delete_profile_picture(self, profile_id: str, user_token: Optional[str] = None) -> None:
        await self.storage.delete(self.bucket, self.picture_path(profile_id), user_token=user_token)


class CreatorProfileService(ProfileService):
    table_name = "creator_profiles"
    bucket = settings.CREATOR_PICTURE_BUCKET
    role = UserRole.CREATOR
    model = CreatorProfile
    label = "creator"


class ClipperProfileService(ProfileService):
    table_name = "clippers"
    bucket = settings.CLIPPER_PICTURE_BUCKET
    role = UserRole.CLIPPER
    model = ClipperProfile
    label = "clipper"


creator_profile_service = CreatorProfileService()
clipper_profile_service = ClipperProfileService()
