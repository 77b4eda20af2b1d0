"""
Shared fixtures: in-memory identity and profile stores plus sample forms.
"""
import uuid
from typing import Dict, List, Optional

import pytest

from app.core.exceptions import ConflictError, InternalError, NotFoundError, UnauthorizedError
from app.models.auth import IdentityRecord, RegisterClipperRequest, RegisterCreatorRequest, UserRole
from app.models.profiles import ClipperProfile, CreatorProfile, UploadFileResponse
from app.models.storage import UploadedBlob
from app.services.registration_saga import RegistrationSaga
from app.services.user_facade_service import UserFacadeService
from app.utils.case_mapping import camel_to_snake


class FakeIdentityService:
    """Identity provider double keyed by lowercase email"""

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.deleted: List[str] = []
        self.delete_error: Optional[Exception] = None
        self.return_id = True

    async def create_identity(self, email: str, password: str) -> IdentityRecord:
        key = email.lower()
        if key in self.users:
            raise ConflictError("User with this email already exists")
        identity_id = str(uuid.uuid4())
        self.users[key] = {"id": identity_id, "email": email, "password": password}
        return IdentityRecord(
            id=identity_id if self.return_id else None,
            email=email,
            token=f"token-{identity_id}",
            refresh_token=f"refresh-{identity_id}",
        )

    async def verify_credentials(self, email: str, password: str) -> IdentityRecord:
        user = self.users.get(email.lower())
        if not user or user["password"] != password:
            raise UnauthorizedError("Invalid login credentials")
        return IdentityRecord(
            id=user["id"], email=email, token=f"token-{user['id']}", refresh_token=f"refresh-{user['id']}"
        )

    async def delete_identity(self, identity_id: str) -> None:
        if self.delete_error:
            raise self.delete_error
        self.deleted.append(identity_id)
        for key, user in list(self.users.items()):
            if user["id"] == identity_id:
                del self.users[key]

    async def change_password(self, identity_id: str, new_password: str) -> None:
        for user in self.users.values():
            if user["id"] == identity_id:
                user["password"] = new_password
                return
        raise InternalError("There was an internal server error while changing password")

    async def find_identity_by_email(self, email: str) -> Optional[IdentityRecord]:
        user = self.users.get(email.lower())
        if not user:
            return None
        return IdentityRecord(id=user["id"], email=user["email"])

    async def create_session_from_external_token(self, id_token: str, provider: str = "google") -> IdentityRecord:
        return IdentityRecord(token="google-session", refresh_token="google-refresh")


class FakeProfileStore:
    """Profile table double; errors are injected through attributes"""

    def __init__(self, model):
        self.model = model
        self.rows: Dict[str, object] = {}
        self.pictures = set()
        self.create_error: Optional[Exception] = None
        # Consumed in order by update(); None means "succeed"
        self.update_errors: List[Optional[Exception]] = []
        self.delete_picture_error: Optional[Exception] = None
        self.update_calls: List[dict] = []

    async def create(self, profile: dict):
        if self.create_error:
            raise self.create_error
        row = self.model.model_validate(camel_to_snake(profile))
        self.rows[row.id] = row
        return row

    async def find_by_id(self, profile_id: str):
        return self.rows.get(profile_id)

    async def update(self, profile_id: str, fields: dict):
        self.update_calls.append(fields)
        if self.update_errors:
            error = self.update_errors.pop(0)
            if error:
                raise error
        if profile_id not in self.rows:
            raise NotFoundError("Profile not found")
        row = self.rows[profile_id].model_copy(update=camel_to_snake(fields))
        self.rows[profile_id] = row
        return row

    async def delete(self, profile_id: str) -> None:
        if profile_id not in self.rows:
            raise NotFoundError("Profile not found")
        del self.rows[profile_id]

    async def upload_profile_picture(self, blob, profile_id: str, user_token=None) -> UploadFileResponse:
        self.pictures.add(profile_id)
        return UploadFileResponse(url=f"https://cdn.test/{profile_id}/profilepic", path=f"{profile_id}/profilepic")

    async def delete_profile_picture(self, profile_id: str, user_token=None) -> None:
        if self.delete_picture_error:
            raise self.delete_picture_error
        self.pictures.discard(profile_id)


@pytest.fixture
def identities() -> FakeIdentityService:
    return FakeIdentityService()


@pytest.fixture
def creator_store() -> FakeProfileStore:
    return FakeProfileStore(CreatorProfile)


@pytest.fixture
def clipper_store() -> FakeProfileStore:
    return FakeProfileStore(ClipperProfile)


@pytest.fixture
def profile_stores(creator_store, clipper_store):
    return {UserRole.CREATOR: creator_store, UserRole.CLIPPER: clipper_store}


@pytest.fixture
def saga(identities, profile_stores) -> RegistrationSaga:
    return RegistrationSaga(identities=identities, profile_stores=profile_stores)


@pytest.fixture
def facade(identities, profile_stores) -> UserFacadeService:
    return UserFacadeService(identities=identities, profile_stores=profile_stores)


@pytest.fixture
def creator_form() -> RegisterCreatorRequest:
    return RegisterCreatorRequest(
        full_name="Alice Adams",
        brand_name="Brandy",
        email="a@x.com",
        social_media_handle="alice",
        platform="instagram",
        niche="travel",
        country="Canada",
        password="Abcdef12",
    )


@pytest.fixture
def clipper_form() -> RegisterClipperRequest:
    return RegisterClipperRequest(
        full_name="Carl Clipper",
        brand_name="Clips Co",
        email="c@x.com",
        social_media_handle="carl.clips",
        platform="tiktok",
        niche="gaming",
        country="Spain",
        password="Abcdef12",
        follower_count=12000,
        price_per_post=40.5,
    )


@pytest.fixture
def png_blob() -> UploadedBlob:
    return UploadedBlob(filename="my photo.png", content_type="image/png", data=b"\x89PNG fake")
