"""
Service providers for route dependencies.

Routes depend on these getters rather than on the module singletons so that
tests can swap any service through ``app.dependency_overrides``.
"""
from app.services.clippers_facade_service import ClippersFacadeService, clippers_facade_service
from app.services.clips_service import ClipsService, clips_service
from app.services.google_onboarding_service import GoogleOnboardingService, google_onboarding_service
from app.services.google_oauth_service import GoogleOAuthService, google_oauth_service
from app.services.identity_service import IdentityService, identity_service
from app.services.registration_saga import RegistrationSaga, registration_saga
from app.services.user_facade_service import UserFacadeService, user_facade_service


def get_identity_service() -> IdentityService:
    return identity_service


def get_registration_saga() -> RegistrationSaga:
    return registration_saga


def get_user_facade() -> UserFacadeService:
    return user_facade_service


def get_google_oauth() -> GoogleOAuthService:
    return google_oauth_service


def get_google_onboarding() -> GoogleOnboardingService:
    return google_onboarding_service


def get_clippers_facade() -> ClippersFacadeService:
    return clippers_facade_service


def get_clips_service() -> ClipsService:
    return clips_service
