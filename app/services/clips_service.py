"""
Clip submission workflow.

A submission is two uploads (video, then thumbnail) followed by one row
insert. When a later step fails the blobs already written are removed
best-effort and the original error is re-raised as is.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List

from app.core.config import settings
from app.core.exceptions import APIException, ForbiddenError, InternalError, NotFoundError, ValidationError
from app.database.supabase_client import SupabaseClientManager, supabase_manager
from app.models.clips import ClipStatus, ClipSubmission, SubmitClipRequest
from app.models.storage import UploadedBlob
from app.services.storage_service import StorageService, storage_service

logger = logging.getLogger(__name__)

# Only consulted when CLIP_STATUS_STRICT_TRANSITIONS is on
ALLOWED_TRANSITIONS = {
    ClipStatus.PENDING: {ClipStatus.APPROVED, ClipStatus.REJECTED},
    ClipStatus.APPROVED: set(),
    ClipStatus.REJECTED: set(),
}


class ClipsService:
    table_name = "clip_submissions"

    def __init__(
        self,
        clients: SupabaseClientManager = supabase_manager,
        storage: StorageService = storage_service,
        strict_transitions: Optional[bool] = None,
    ):
        self.clients = clients
        self.storage = storage
        self.clip_bucket = settings.CLIP_BUCKET
        self.thumbnail_bucket = settings.THUMBNAIL_BUCKET
        self.strict_transitions = (
            settings.CLIP_STATUS_STRICT_TRANSITIONS if strict_transitions is None else strict_transitions
        )

    def _table(self, user_token: Optional[str] = None):
        return self.clients.client_for(user_token).table(self.table_name)

    @staticmethod
    def clip_path(clipper_id: str, submission_id: str, blob: UploadedBlob, kind: str) -> str:
        return f"{clipper_id}/{submission_id}-{kind}-{blob.safe_filename}"

    async def _remove_blob(self, bucket: str, path: str) -> None:
        """Best-effort cleanup; failures are logged, never raised"""
        try:
            await self.storage.delete(bucket, path)
            logger.warning(f"CLIPS: Rolled back upload {bucket}/{path}")
        except Exception as e:
            logger.error(f"CLIPS: Rollback of {bucket}/{path} failed, blob is orphaned: {e}")

    async def submit_clip(
        self,
        video: UploadedBlob,
        thumbnail: UploadedBlob,
        fields: SubmitClipRequest,
        creator_id: str,
        user_token: Optional[str] = None,
    ) -> ClipSubmission:
        submission_id = str(uuid.uuid4())
        clip_path = self.clip_path(fields.clipper_id, submission_id, video, "clip")
        thumbnail_path = self.clip_path(fields.clipper_id, submission_id, thumbnail, "thumbnail")

        # Nothing to roll back if the video itself fails
        clip_url = await self.storage.upload(video, self.clip_bucket, clip_path, user_token=user_token)

        thumbnail_uploaded = False
        try:
            thumbnail_url = await self.storage.upload(
                thumbnail, self.thumbnail_bucket, thumbnail_path, user_token=user_token
            )
            thumbnail_uploaded = True
            submission = await self._insert(
                {
                    "id": submission_id,
                    "creator_id": creator_id,
                    "clipper_id": fields.clipper_id,
                    "title": fields.title,
                    "description": fields.description,
                    "clip_url": clip_url,
                    "thumbnail_url": thumbnail_url,
                    "status": ClipStatus.PENDING.value,
                },
                user_token,
            )
        except Exception as e:
            logger.error(f"CLIPS: Submission {submission_id} failed after video upload: {e}")
            await self._remove_blob(self.clip_bucket, clip_path)
            if thumbnail_uploaded:
                await self._remove_blob(self.thumbnail_bucket, thumbnail_path)
            raise

        logger.info(f"CLIPS: Creator {creator_id} submitted clip {submission_id} to {fields.clipper_id}")
        return submission

    async def _insert(self, row: dict, user_token: Optional[str] = None) -> ClipSubmission:
        try:
            result = self._table(user_token).insert(row).execute()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"CLIPS: Failed to create clip submission: {e}")
            raise InternalError("There was an internal server error creating clip submission")
        if not result.data:
            raise InternalError("There was an internal server error creating clip submission")
        return ClipSubmission.model_validate(result.data[0])

    async def _find(self, clip_id: str, user_token: Optional[str] = None) -> Optional[ClipSubmission]:
        try:
            result = self._table(user_token).select("*").eq("id", clip_id).limit(1).execute()
        except APIException:
            raise
        except Exception as e:
            logger.error(f"CLIPS: Failed to get clip submission {clip_id}: {e}")
            raise InternalError("There was an internal server error getting clip submission")
        if not result.data:
            return None
        return ClipSubmission.model_validate(result.data[0])

    async def update_clip_status(
        self, clip_id: str, status: ClipStatus, acting_clipper_id: str, user_token: Optional[str] = None
    ) -> ClipSubmission:
        status = ClipStatus(status)
        if self.strict_transitions:
            current = await self._find(clip_id, user_token)
            if not current or current.clipper_id != acting_clipper_id:
                raise NotFoundError(f"Clip with ID {clip_id} not found")
            if status not in ALLOWED_TRANSITIONS[ClipStatus(current.status)]:
                raise ValidationError(f"Cannot move clip from {ClipStatus(current.status).value} to {status.value}")

        try:
            result = (
                self._table(user_token)
                .update({"status": status.value, "updated_at": datetime.now(timezone.utc).isoformat()})
                .eq("id", clip_id)
                .eq("clipper_id", acting_clipper_id)
                .execute()
            )
        except APIException:
            raise
        except Exception as e:
            logger.error(f"CLIPS: Failed to update clip status for {clip_id}: {e}")
            raise InternalError("There was an internal server error updating clip status")

        if not result.data:
            raise NotFoundError(f"Clip with ID {clip_id} not found")
        logger.info(f"CLIPS: Clipper {acting_clipper_id} set clip {clip_id} to {status.value}")
        return ClipSubmission.model_validate(result.data[0])

    async def _list_by(self, column: str, user_id: str, user_token: Optional[str] = None) -> List[ClipSubmission]:
        try:
            result = (
                self._table(user_token)
                .select("*")
                .eq(column, user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except APIException:
            raise
        except Exception as e:
            logger.error(f"CLIPS: Failed to get clip submissions by {column}: {e}")
            raise InternalError("There was an internal server error getting clip submissions")
        return [ClipSubmission.model_validate(row) for row in result.data or []]

    async def get_clip_submissions_by_creator_id(
        self, creator_id: str, user_token: Optional[str] = None
    ) -> List[ClipSubmission]:
        return await self._list_by("creator_id", creator_id, user_token)

    async def get_clip_submissions_by_clipper_id(
        self, clipper_id: str, user_token: Optional[str] = None
    ) -> List[ClipSubmission]:
        return await self._list_by("clipper_id", clipper_id, user_token)

    async def get_clip_submission_by_id(
        self, clip_id: str, requesting_user_id: str, user_token: Optional[str] = None
    ) -> ClipSubmission:
        clip = await self._find(clip_id, user_token)
        if not clip:
            raise NotFoundError(f"Clip with ID {clip_id} not found")
        # Fetched first, then authorized
        if requesting_user_id not in (clip.creator_id, clip.clipper_id):
            raise ForbiddenError("You do not have permission to access this clip")
        return clip


clips_service = ClipsService()
