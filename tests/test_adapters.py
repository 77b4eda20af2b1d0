"""
Error classification in the Supabase-backed adapters, with the SDK mocked out.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.exceptions import (
    ConflictError, ForbiddenError, InternalError, NotFoundError, UnauthorizedError, ValidationError,
)
from app.models.storage import UploadedBlob
from app.services.identity_service import IdentityService
from app.services.portfolio_service import PortfolioService
from app.services.profile_service import CreatorProfileService
from app.services.storage_service import StorageService, split_public_url


class PostgrestError(Exception):
    """Stand-in for the SDK's API error, which carries a Postgres error code"""

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


def auth_response(user_id="user-1", email="a@x.com", access_token="jwt", refresh_token="refresh"):
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email),
        session=SimpleNamespace(access_token=access_token, refresh_token=refresh_token),
    )


def creator_row(**overrides) -> dict:
    row = {
        "id": "user-1",
        "full_name": "Alice Adams",
        "brand_name": "Brandy",
        "email": "a@x.com",
        "social_media_handle": "alice",
        "platform": "instagram",
        "niche": "travel",
        "country": "Canada",
        "brand_profile_picture": None,
    }
    row.update(overrides)
    return row


class TestIdentityService:

    @pytest.fixture
    def clients(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def service(self, clients) -> IdentityService:
        return IdentityService(clients=clients)

    @pytest.mark.asyncio
    async def test_create_identity_returns_tokens(self, service, clients):
        clients.new_auth_client.return_value.auth.sign_up.return_value = auth_response()

        identity = await service.create_identity("a@x.com", "Abcdef12")

        assert identity.id == "user-1"
        assert identity.token == "jwt"
        assert identity.refresh_token == "refresh"

    @pytest.mark.asyncio
    async def test_create_identity_without_session(self, service, clients):
        clients.new_auth_client.return_value.auth.sign_up.return_value = SimpleNamespace(user=None, session=None)

        identity = await service.create_identity("a@x.com", "Abcdef12")

        assert identity.id is None
        assert identity.token is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["User already registered", "duplicate key value", "A user with this email already exists"])
    async def test_duplicate_signup_is_conflict(self, service, clients, message):
        clients.new_auth_client.return_value.auth.sign_up.side_effect = Exception(message)

        with pytest.raises(ConflictError) as exc_info:
            await service.create_identity("a@x.com", "Abcdef12")

        assert exc_info.value.detail == "User with this email already exists"

    @pytest.mark.asyncio
    async def test_other_signup_error_is_internal_and_hides_provider_text(self, service, clients):
        clients.new_auth_client.return_value.auth.sign_up.side_effect = Exception("gotrue 502 upstream")

        with pytest.raises(InternalError) as exc_info:
            await service.create_identity("a@x.com", "Abcdef12")

        assert "gotrue" not in exc_info.value.detail

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message, expected", [
        ("Invalid login credentials", UnauthorizedError),
        ("Email not confirmed", ValidationError),
        ("Database error querying schema", InternalError),
    ])
    async def test_sign_in_errors_are_classified(self, service, clients, message, expected):
        clients.new_auth_client.return_value.auth.sign_in_with_password.side_effect = Exception(message)

        with pytest.raises(expected):
            await service.verify_credentials("a@x.com", "Abcdef12")

    @pytest.mark.asyncio
    async def test_each_sign_in_uses_a_fresh_client(self, service, clients):
        clients.new_auth_client.return_value.auth.sign_in_with_password.return_value = auth_response()

        await service.verify_credentials("a@x.com", "Abcdef12")
        await service.verify_credentials("a@x.com", "Abcdef12")

        assert clients.new_auth_client.call_count == 2

    @pytest.mark.asyncio
    async def test_find_identity_by_email_pages_through_users(self, service, clients):
        first_page = [SimpleNamespace(id=str(i), email=f"user{i}@x.com") for i in range(1000)]
        second_page = [SimpleNamespace(id="target", email="Target@X.com")]
        clients.service_client.auth.admin.list_users.side_effect = [first_page, second_page]

        identity = await service.find_identity_by_email("target@x.com")

        assert identity.id == "target"
        assert clients.service_client.auth.admin.list_users.call_count == 2

    @pytest.mark.asyncio
    async def test_find_identity_by_email_returns_none(self, service, clients):
        clients.service_client.auth.admin.list_users.return_value = []

        assert await service.find_identity_by_email("nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_change_password_uses_admin_update(self, service, clients):
        await service.change_password("user-1", "Newpass99")

        clients.service_client.auth.admin.update_user_by_id.assert_called_once_with("user-1", {"password": "Newpass99"})

    @pytest.mark.asyncio
    async def test_invalid_bearer_token_is_unauthorized(self, service, clients):
        clients.service_client.auth.get_user.return_value = SimpleNamespace(user=None)

        with pytest.raises(UnauthorizedError):
            await service.get_user_from_token("bad")


class TestStorageService:

    @pytest.fixture
    def clients(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def bucket(self, clients) -> MagicMock:
        return clients.client_for.return_value.storage.from_.return_value

    @pytest.fixture
    def service(self, clients) -> StorageService:
        return StorageService(clients=clients)

    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self, service, bucket, png_blob):
        bucket.get_public_url.return_value = "https://x.supabase.co/storage/v1/object/public/pics/u1/profilepic?"

        url = await service.upload(png_blob, "pics", "u1/profilepic", upsert=True)

        assert url == "https://x.supabase.co/storage/v1/object/public/pics/u1/profilepic"
        options = bucket.upload.call_args.kwargs["file_options"]
        assert options["content-type"] == "image/png"
        assert options["upsert"] == "true"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message, expected", [
        ("Bucket not found", NotFoundError),
        ("new row violates row-level security policy", ForbiddenError),
        ("Unauthorized", ForbiddenError),
        ("payload too large", InternalError),
    ])
    async def test_upload_errors_are_classified(self, service, bucket, png_blob, message, expected):
        bucket.upload.side_effect = Exception(message)

        with pytest.raises(expected):
            await service.upload(png_blob, "pics", "u1/profilepic")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message, expected", [
        ("Object not found", NotFoundError),
        ("permission denied", ForbiddenError),
        ("timeout", InternalError),
    ])
    async def test_delete_errors_are_classified(self, service, bucket, message, expected):
        bucket.remove.side_effect = Exception(message)

        with pytest.raises(expected):
            await service.delete("pics", "u1/profilepic")

    @pytest.mark.asyncio
    async def test_user_token_selects_scoped_client(self, service, clients):
        await service.delete("pics", "u1/profilepic", user_token="jwt")

        clients.client_for.assert_called_with("jwt")

    @pytest.mark.asyncio
    async def test_delete_by_public_url(self, service, bucket):
        await service.delete_by_public_url("https://x.supabase.co/storage/v1/object/public/clip-submissions/c1/a%20b.mp4")

        bucket.remove.assert_called_once_with(["c1/a b.mp4"])

    def test_split_public_url_rejects_foreign_urls(self):
        with pytest.raises(ValueError):
            split_public_url("https://example.com/file.png")

    def test_split_public_url(self):
        assert split_public_url("https://x.co/storage/v1/object/public/b/dir/file.png") == ("b", "dir/file.png")


class TestProfileService:

    @pytest.fixture
    def clients(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def table(self, clients) -> MagicMock:
        return clients.service_client.table.return_value

    @pytest.fixture
    def storage(self) -> AsyncMock:
        return AsyncMock(spec=StorageService)

    @pytest.fixture
    def service(self, clients, storage) -> CreatorProfileService:
        return CreatorProfileService(clients=clients, storage=storage)

    @pytest.mark.asyncio
    async def test_create_maps_camel_case_keys(self, service, table, clients):
        table.insert.return_value.execute.return_value = MagicMock(data=[creator_row()])

        profile = await service.create({"id": "user-1", "fullName": "Alice Adams", "brandProfilePicture": None})

        clients.service_client.table.assert_called_with("creator_profiles")
        assert table.insert.call_args.args[0] == {"id": "user-1", "full_name": "Alice Adams", "brand_profile_picture": None}
        assert profile.role == "creator"

    @pytest.mark.asyncio
    async def test_unique_violation_is_conflict(self, service, table):
        table.insert.return_value.execute.side_effect = PostgrestError("conflict", code="23505")

        with pytest.raises(ConflictError):
            await service.create(creator_row())

    @pytest.mark.asyncio
    async def test_other_insert_failure_is_internal(self, service, table):
        table.insert.return_value.execute.side_effect = PostgrestError("violates not-null constraint", code="23502")

        with pytest.raises(InternalError):
            await service.create(creator_row())

    @pytest.mark.asyncio
    async def test_find_by_id_returns_none_when_absent(self, service, table):
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = MagicMock(data=[])

        assert await service.find_by_id("ghost") is None

    @pytest.mark.asyncio
    async def test_update_missing_profile_is_not_found(self, service, table):
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = MagicMock(data=[])

        with pytest.raises(NotFoundError):
            await service.update("ghost", {"country": "France"})

        table.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_profile_picture_upserts_fixed_path(self, service, storage, png_blob):
        storage.upload.return_value = "https://cdn.test/brand-profile-pic/user-1/profilepic"

        uploaded = await service.upload_profile_picture(png_blob, "user-1")

        assert uploaded.path == "user-1/profilepic"
        assert storage.upload.await_args.kwargs["upsert"] is True


class TestPortfolioService:

    @pytest.fixture
    def clients(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def table(self, clients) -> MagicMock:
        return clients.service_client.table.return_value

    @pytest.mark.asyncio
    async def test_count_and_cap(self, clients, table):
        service = PortfolioService(clients=clients, storage=AsyncMock(spec=StorageService), max_images=3)
        table.select.return_value.eq.return_value.execute.return_value = MagicMock(count=3, data=[])

        assert await service.count_by_clipper_id("clipper-1") == 3
        assert await service.has_reached_max_images("clipper-1") is True
        table.select.assert_called_with("id", count="exact")

    @pytest.mark.asyncio
    async def test_blob_path_is_clipper_scoped(self, clients):
        storage = AsyncMock(spec=StorageService)
        service = PortfolioService(clients=clients, storage=storage, bucket="portfolio-images")
        blob = UploadedBlob(filename="a.png", content_type="image/png", data=b"png")

        await service.upload_picture(blob, "clipper-1", "img-1")

        storage.upload.assert_awaited_once_with(blob, "portfolio-images", "clipper-1/img-1")

    @pytest.mark.asyncio
    async def test_create_leaves_position_to_the_table(self, clients, table):
        service = PortfolioService(clients=clients, storage=AsyncMock(spec=StorageService))
        table.insert.return_value.execute.return_value = MagicMock(data=[
            {"id": "img-1", "clipper_id": "clipper-1", "image_url": "https://cdn.test/img-1", "position": 2}
        ])

        image = await service.create("img-1", "clipper-1", "https://cdn.test/img-1")

        table.insert.assert_called_once_with(
            {"id": "img-1", "clipper_id": "clipper-1", "image_url": "https://cdn.test/img-1"}
        )
        assert image.position == 2
