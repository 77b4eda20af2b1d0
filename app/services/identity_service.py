"""
Identity store adapter over Supabase Auth.

Classifies provider errors at the origin: duplicate sign-ups become
ConflictError, bad credentials UnauthorizedError, everything else
InternalError. Raw provider text is logged, never returned.
"""
import logging
from typing import Optional

from app.core.exceptions import (
    APIException, ConflictError, InternalError, UnauthorizedError, ValidationError,
    is_duplicate_error,
)
from app.database.supabase_client import SupabaseClientManager, supabase_manager
from app.models.auth import IdentityRecord

logger = logging.getLogger(__name__)

LIST_USERS_PAGE_SIZE = 1000


def _session_tokens(response) -> tuple:
    session = getattr(response, "session", None)
    if not session:
        return None, None
    return session.access_token, session.refresh_token


class IdentityService:
    """Create, verify and remove identities held by the auth provider"""

    def __init__(self, clients: SupabaseClientManager = supabase_manager):
        self.clients = clients

    async def create_identity(self, email: str, password: str) -> IdentityRecord:
        try:
            response = self.clients.new_auth_client().auth.sign_up({
                "email": email,
                "password": password,
            })
        except APIException:
            raise
        except Exception as e:
            logger.error(f"AUTH: Registration failed for {email}: {e}")
            if is_duplicate_error(e):
                raise ConflictError("User with this email already exists")
            raise InternalError("There was an internal server error during registration")

        user = getattr(response, "user", None)
        token, refresh_token = _session_tokens(response)
        return IdentityRecord(
            id=user.id if user else None,
            email=user.email if user else email,
            token=token,
            refresh_token=refresh_token,
        )

    async def verify_credentials(self, email: str, password: str) -> IdentityRecord:
        try:
            response = self.clients.new_auth_client().auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except APIException:
            raise
        except Exception as e:
            logger.error(f"AUTH: Supabase authentication failed for {email}: {e}")
            error_str = str(e).lower()
            if "invalid login credentials" in error_str:
                raise UnauthorizedError("Invalid login credentials")
            if "email not confirmed" in error_str:
                raise ValidationError("Email not confirmed. Please check your email for the confirmation link.")
            raise InternalError("There was an internal server error during login process.")

        user = getattr(response, "user", None)
        token, refresh_token = _session_tokens(response)
        if not user or not token:
            logger.error(f"AUTH: Login response for {email} is missing user or session data")
            raise InternalError("Invalid login response from authentication service.")

        return IdentityRecord(id=user.id, email=user.email, token=token, refresh_token=refresh_token)

    async def delete_identity(self, identity_id: str) -> None:
        try:
            self.clients.service_client.auth.admin.delete_user(identity_id)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"AUTH: Deleting identity {identity_id} failed: {e}")
            raise InternalError("There was an internal server error while deleting user")

    async def change_password(self, identity_id: str, new_password: str) -> None:
        try:
            self.clients.service_client.auth.admin.update_user_by_id(identity_id, {"password": new_password})
        except APIException:
            raise
        except Exception as e:
            logger.error(f"AUTH: Changing password for {identity_id} failed: {e}")
            raise InternalError("There was an internal server error while changing password")

    async def find_identity_by_email(self, email: str) -> Optional[IdentityRecord]:
        wanted = email.strip().lower()
        page = 1
        try:
            while True:
                users = self.clients.service_client.auth.admin.list_users(page=page, per_page=LIST_USERS_PAGE_SIZE)
                for user in users or []:
                    if (user.email or "").lower() == wanted:
                        return IdentityRecord(id=user.id, email=user.email)
                if not users or len(users) < LIST_USERS_PAGE_SIZE:
                    return None
                page += 1
        except APIException:
            raise
        except Exception as e:
            logger.error(f"AUTH: Looking up identity for {email} failed: {e}")
            raise InternalError("There was an internal server error looking up user")

    async def create_session_from_external_token(self, id_token: str, provider: str = "google") -> IdentityRecord:
        try:
            response = self.clients.new_auth_client().auth.sign_in_with_id_token({
                "provider": provider,
                "token": id_token,
            })
        except APIException:
            raise
        except Exception as e:
            logger.error(f"AUTH: Creating session from {provider} token failed: {e}")
            raise UnauthorizedError(f"Unable to create session from {provider} token")

        user = getattr(response, "user", None)
        token, refresh_token = _session_tokens(response)
        if not token:
            raise InternalError("Invalid session response from authentication service.")
        return IdentityRecord(
            id=user.id if user else None,
            email=user.email if user else None,
            token=token,
            refresh_token=refresh_token,
        )

    async def get_user_from_token(self, access_token: str) -> IdentityRecord:
        """Resolve a bearer token to the identity it was issued for"""
        try:
            response = self.clients.service_client.auth.get_user(access_token)
        except APIException:
            raise
        except Exception as e:
            logger.warning(f"AUTH: Token validation error: {e}")
            raise UnauthorizedError("Invalid token")

        user = getattr(response, "user", None) if response else None
        if not user:
            logger.warning("AUTH: Token validation returned no user data")
            raise UnauthorizedError("Invalid token, no user data found.")
        return IdentityRecord(id=user.id, email=user.email, token=access_token)


identity_service = IdentityService()
