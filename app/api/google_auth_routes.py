"""
Google sign-in and onboarding routes
"""
from fastapi import APIRouter, Depends
import logging

from app.api.dependencies import get_google_oauth, get_google_onboarding
from app.models.onboarding import CompleteOnboardingRequest, GoogleAuthRequest, GoogleCallbackRequest
from app.services.google_oauth_service import GoogleOAuthService
from app.services.google_onboarding_service import GoogleOnboardingService
from app.utils.api_response import success_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth/google", tags=["Google Authentication"])


@router.get("/url")
async def google_auth_url(google: GoogleOAuthService = Depends(get_google_oauth)):
    return success_response({"url": google.generate_auth_url()}, "Google auth URL generated")


@router.post("/login")
async def google_login(form: GoogleAuthRequest, onboarding: GoogleOnboardingService = Depends(get_google_onboarding)):
    """
    Sign in with a Google ID token.

    Returns tokens when the account is complete, otherwise an onboarding token
    to pass to /complete-onboarding.
    """
    response = await onboarding.google_login(form.id_token)
    message = "Onboarding required" if response.requires_onboarding else "Login successful"
    return success_response(response, message)


@router.post("/callback")
async def google_callback(
    form: GoogleCallbackRequest, onboarding: GoogleOnboardingService = Depends(get_google_onboarding)
):
    response = await onboarding.google_callback(form.code)
    message = "Onboarding required" if response.requires_onboarding else "Login successful"
    return success_response(response, message)


@router.post("/complete-onboarding", status_code=201)
async def complete_onboarding(
    form: CompleteOnboardingRequest, onboarding: GoogleOnboardingService = Depends(get_google_onboarding)
):
    response = await onboarding.complete_onboarding(form)
    return success_response(response, "Onboarding completed successfully")


@router.get("/onboarding-status/{token}")
async def onboarding_status(token: str, onboarding: GoogleOnboardingService = Depends(get_google_onboarding)):
    status = await onboarding.get_onboarding_status(token)
    return success_response(status, "Onboarding status retrieved")
