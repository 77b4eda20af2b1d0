"""
Tests for the registration saga and its compensating rollback.
"""
import logging

import pytest

from app.core.exceptions import ConflictError, InternalError, RollbackFailedError, ValidationError
from app.models.auth import Credentials, UserRole


class TestRegisterWithProfile:

    @pytest.mark.asyncio
    async def test_register_creator_creates_identity_and_profile(self, saga, identities, creator_store, creator_form):
        response = await saga.register_creator(creator_form)

        identity = await identities.find_identity_by_email("a@x.com")
        assert identity is not None
        assert response.user.id == identity.id
        assert creator_store.rows[identity.id].brand_name == "Brandy"
        assert response.role == "creator"
        assert response.token == f"token-{identity.id}"
        assert response.refresh_token == f"refresh-{identity.id}"

    @pytest.mark.asyncio
    async def test_register_clipper_keeps_clipper_fields(self, saga, clipper_store, clipper_form):
        response = await saga.register_clipper(clipper_form)

        assert response.role == "clipper"
        assert response.user.role == "clipper"
        stored = clipper_store.rows[response.user.id]
        assert stored.follower_count == 12000
        assert stored.price_per_post == 40.5

    @pytest.mark.asyncio
    async def test_duplicate_key_on_profile_rolls_back_identity(self, saga, identities, creator_store, creator_form):
        creator_store.create_error = Exception('duplicate key value violates unique constraint "creator_profiles_pkey"')

        with pytest.raises(ConflictError) as exc_info:
            await saga.register_creator(creator_form)

        assert exc_info.value.detail == "User with this email already exists"
        assert len(identities.deleted) == 1
        assert await identities.find_identity_by_email("a@x.com") is None

    @pytest.mark.asyncio
    async def test_unexpected_profile_error_becomes_internal_error(self, saga, identities, creator_store, creator_form):
        creator_store.create_error = RuntimeError("connection reset by peer")

        with pytest.raises(InternalError) as exc_info:
            await saga.register_creator(creator_form)

        assert not isinstance(exc_info.value, RollbackFailedError)
        assert "connection reset" not in exc_info.value.detail
        assert await identities.find_identity_by_email("a@x.com") is None

    @pytest.mark.asyncio
    async def test_validation_error_passes_through_after_rollback(self, saga, identities, creator_store, creator_form):
        error = ValidationError("Invalid niche")
        creator_store.create_error = error

        with pytest.raises(ValidationError) as exc_info:
            await saga.register_creator(creator_form)

        assert exc_info.value is error
        assert identities.deleted

    @pytest.mark.asyncio
    async def test_rollback_failure_is_reported_and_logged_critical(
        self, saga, identities, creator_store, creator_form, caplog
    ):
        creator_store.create_error = RuntimeError("insert failed")
        identities.delete_error = InternalError("admin api down")

        with caplog.at_level(logging.CRITICAL, logger="app.services.registration_saga"):
            with pytest.raises(RollbackFailedError) as exc_info:
                await saga.register_creator(creator_form)

        assert "rollback also failed" in exc_info.value.detail
        assert exc_info.value.status_code == 500
        assert any(record.levelno == logging.CRITICAL for record in caplog.records)

    @pytest.mark.asyncio
    async def test_missing_identity_id_stops_before_profile_creation(self, saga, identities, creator_store, creator_form):
        identities.return_id = False

        with pytest.raises(InternalError):
            await saga.register_creator(creator_form)

        assert creator_store.rows == {}
        assert identities.deleted == []

    @pytest.mark.asyncio
    async def test_identity_conflict_ends_saga_without_rollback(self, saga, identities, creator_store, creator_form):
        await saga.register_creator(creator_form)
        rows_before = dict(creator_store.rows)

        with pytest.raises(ConflictError):
            await saga.register_creator(creator_form)

        assert creator_store.rows == rows_before
        assert identities.deleted == []


class TestRoleSeparation:

    @pytest.mark.asyncio
    async def test_same_email_cannot_register_as_both_roles(self, saga, clipper_store, creator_form):
        await saga.register_creator(creator_form)

        with pytest.raises(ConflictError):
            await saga.register_with_profile(
                UserRole.CLIPPER,
                Credentials(email="a@x.com", password="Abcdef12"),
                {
                    "full_name": "Alice Adams", "brand_name": "Brandy", "email": "a@x.com",
                    "platform": "instagram", "niche": "travel", "country": "Canada",
                    "follower_count": 1, "price_per_post": 1,
                },
            )

        assert clipper_store.rows == {}

    @pytest.mark.asyncio
    async def test_clipper_then_creator_conflicts(self, saga, creator_store, clipper_form):
        await saga.register_clipper(clipper_form)

        with pytest.raises(ConflictError):
            await saga.register_with_profile(
                UserRole.CREATOR,
                Credentials(email="C@X.com", password="Abcdef12"),
                {"full_name": "Carl", "brand_name": "Clips", "email": "c@x.com",
                 "platform": "tiktok", "niche": "gaming", "country": "Spain"},
            )

        assert creator_store.rows == {}
