"""
Free-text guidelines a clipper publishes for creators
"""
import logging
import uuid
from typing import Optional, List

from app.core.exceptions import InternalError, NotFoundError
from app.database.supabase_client import SupabaseClientManager, supabase_manager
from app.models.clippers import Guideline

logger = logging.getLogger(__name__)


class GuidelinesService:
    table_name = "clipper_guidelines"

    def __init__(self, clients: SupabaseClientManager = supabase_manager):
        self.clients = clients

    def _table(self):
        return self.clients.service_client.table(self.table_name)

    async def list_by_clipper_id(self, clipper_id: str) -> List[str]:
        """Guideline texts only, oldest first"""
        try:
            result = self._table().select("guideline").eq("clipper_id", clipper_id).order("created_at").execute()
        except Exception as e:
            logger.error(f"GUIDELINES: Unable to list guidelines for {clipper_id}: {e}")
            raise InternalError("There was an internal server error getting guidelines")
        return [row["guideline"] for row in result.data or []]

    async def find_by_id(self, guideline_id: str) -> Optional[Guideline]:
        try:
            result = self._table().select("*").eq("id", guideline_id).limit(1).execute()
        except Exception as e:
            logger.error(f"GUIDELINES: Unable to find guideline {guideline_id}: {e}")
            raise InternalError("There was an internal server error getting guideline")
        if not result.data:
            return None
        return Guideline.model_validate(result.data[0])

    async def create(self, clipper_id: str, guideline: str) -> Guideline:
        row = {"id": str(uuid.uuid4()), "clipper_id": clipper_id, "guideline": guideline}
        try:
            result = self._table().insert(row).execute()
        except Exception as e:
            logger.error(f"GUIDELINES: Unable to create guideline for {clipper_id}: {e}")
            raise InternalError("There was an internal server error creating guideline")
        if not result.data:
            raise InternalError("There was an internal server error creating guideline")
        return Guideline.model_validate(result.data[0])

    async def update(self, guideline_id: str, guideline: str) -> Guideline:
        try:
            result = self._table().update({"guideline": guideline}).eq("id", guideline_id).execute()
        except Exception as e:
            logger.error(f"GUIDELINES: Unable to update guideline {guideline_id}: {e}")
            raise InternalError("There was an internal server error updating guideline")
        if not result.data:
            raise NotFoundError("Guideline not found")
        return Guideline.model_validate(result.data[0])

    async def delete(self, guideline_id: str) -> None:
        try:
            self._table().delete().eq("id", guideline_id).execute()
        except Exception as e:
            logger.error(f"GUIDELINES: Unable to delete guideline {guideline_id}: {e}")
            raise InternalError("There was an internal server error deleting guideline")


guidelines_service = GuidelinesService()
