"""
Google sign-in and onboarding.

A verified Google identity either signs straight in (identity and profile
both exist) or is parked in the onboarding store under a fresh token until
the user supplies the profile fields. Completing onboarding goes through the
same registration saga as direct sign-up.
"""
import logging
import secrets
from typing import Optional, Tuple

from app.core.exceptions import UnauthorizedError, ValidationError
from app.models.auth import Credentials, UserResponse, UserRole
from app.models.onboarding import (
    CompleteOnboardingRequest, GoogleAuthResponse, GoogleUserInfo, OnboardingSession, OnboardingStatus,
)
from app.models.profiles import Profile
from app.services.google_oauth_service import GoogleOAuthService, google_oauth_service
from app.services.identity_service import IdentityService, identity_service
from app.services.onboarding_store import OnboardingStore, build_onboarding_store
from app.services.registration_saga import RegistrationSaga, registration_saga

logger = logging.getLogger(__name__)

ONBOARDING_TOTAL_STEPS = {UserRole.CREATOR: 4, UserRole.CLIPPER: 5}


class GoogleOnboardingService:

    def __init__(
        self,
        store: Optional[OnboardingStore] = None,
        google: GoogleOAuthService = google_oauth_service,
        identities: IdentityService = identity_service,
        saga: RegistrationSaga = registration_saga,
    ):
        self.store = store if store is not None else build_onboarding_store()
        self.google = google
        self.identities = identities
        self.saga = saga

    async def _find_profile(self, identity_id: str) -> Tuple[Optional[UserRole], Optional[Profile]]:
        for role in (UserRole.CREATOR, UserRole.CLIPPER):
            profile = await self.saga.profile_store(role).find_by_id(identity_id)
            if profile:
                return role, profile
        return None, None

    async def google_login(self, id_token: str) -> GoogleAuthResponse:
        user_info = await self.google.verify_token(id_token)
        if not user_info.email_verified or not user_info.email:
            logger.warning(f"GOOGLE: Rejected login for unverified email {user_info.email}")
            raise ValidationError("Google account email is not verified")

        identity = await self.identities.find_identity_by_email(user_info.email)
        if identity and identity.id:
            role, profile = await self._find_profile(identity.id)
            if profile:
                session = await self.identities.create_session_from_external_token(id_token)
                logger.info(f"GOOGLE: {role.value} {identity.id} signed in with Google")
                return GoogleAuthResponse(
                    requires_onboarding=False,
                    user={
                        "id": identity.id,
                        "email": identity.email,
                        "role": role.value,
                        "profile": profile.model_dump(by_alias=True, mode="json"),
                    },
                    token=session.token,
                    refresh_token=session.refresh_token,
                )
            logger.warning(f"GOOGLE: Identity {identity.id} has no profile, sending to onboarding")

        token = await self.generate_onboarding_token(user_info)
        return GoogleAuthResponse(requires_onboarding=True, onboarding_token=token)

    async def google_callback(self, code: str) -> GoogleAuthResponse:
        tokens = await self.google.get_token_from_code(code)
        return await self.google_login(tokens.id_token)

    async def generate_onboarding_token(self, user_info: GoogleUserInfo, role: UserRole = UserRole.CREATOR) -> str:
        token = secrets.token_urlsafe(32)
        session = OnboardingSession(
            email=user_info.email,
            name=user_info.name or "",
            picture=user_info.picture,
            role=role,
        )
        await self.store.put(token, session)
        return token

    async def _resolve(self, token: str) -> OnboardingSession:
        session = await self.store.get(token)
        if not session:
            raise UnauthorizedError("Invalid or expired onboarding token")
        return session

    async def complete_onboarding(self, request: CompleteOnboardingRequest) -> UserResponse:
        session = await self._resolve(request.onboarding_token)
        role = UserRole(request.role)

        profile_fields = {
            "full_name": session.name,
            "brand_name": request.brand_name,
            "email": session.email,
            "social_media_handle": request.social_media_handle,
            "platform": request.platform,
            "niche": request.niche,
            "country": request.country,
            "brand_profile_picture": None,
        }
        if role == UserRole.CLIPPER:
            if request.follower_count is None or request.price_per_post is None:
                raise ValidationError("followerCount and pricePerPost are required for clippers")
            profile_fields["follower_count"] = request.follower_count
            profile_fields["price_per_post"] = request.price_per_post

        credentials = Credentials(email=session.email, password=request.password)
        try:
            response = await self.saga.register_with_profile(role, credentials, profile_fields)
        except Exception as e:
            logger.error(f"GOOGLE: Onboarding completion failed for {session.email}: {e}")
            raise

        await self.store.delete(request.onboarding_token)
        return response

    async def get_onboarding_status(self, token: str) -> OnboardingStatus:
        session = await self._resolve(token)
        role = UserRole(session.role)
        return OnboardingStatus(
            current_step=session.completed_steps,
            total_steps=ONBOARDING_TOTAL_STEPS[role],
            role=role,
        )


google_onboarding_service = GoogleOnboardingService()
