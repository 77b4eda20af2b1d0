"""
Supabase client management.

Three flavours of client are handed out:
- the service client (service-role key) for admin auth calls, rows and storage
- a fresh anon client per sign-up/sign-in so a session never leaks between requests
- a user-scoped client carrying the caller's JWT so row-level security applies
"""
import logging
from typing import Optional
from supabase import create_client, Client, ClientOptions

from app.core.config import settings
from app.core.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


class SupabaseClientManager:
    """Creates and caches Supabase clients"""

    def __init__(self, url: Optional[str] = None, anon_key: Optional[str] = None, service_key: Optional[str] = None):
        self.url = url if url is not None else settings.SUPABASE_URL
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_KEY
        self.service_key = service_key if service_key is not None else (settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_KEY)
        self._service_client: Optional[Client] = None

    def _check_configured(self, key: str, key_name: str):
        if not self.url:
            logger.error("ERROR: SUPABASE_URL environment variable not set")
            raise ConfigurationException("SUPABASE_URL is required")
        if not key:
            logger.error(f"ERROR: {key_name} environment variable not set")
            raise ConfigurationException(f"{key_name} is required")

    @staticmethod
    def _options(**kwargs) -> ClientOptions:
        return ClientOptions(persist_session=False, auto_refresh_token=False, **kwargs)

    def init(self) -> bool:
        """Eagerly create the service client; False when credentials are missing"""
        try:
            _ = self.service_client
            return True
        except ConfigurationException as e:
            logger.warning(f"Supabase client not initialized: {e.detail}")
            return False

    @property
    def service_client(self) -> Client:
        if self._service_client is None:
            self._check_configured(self.service_key, "SUPABASE_SERVICE_KEY")
            self._service_client = create_client(self.url, self.service_key, options=self._options())
            logger.info("SUCCESS: Supabase service client initialized")
        return self._service_client

    def new_auth_client(self) -> Client:
        """Anon-key client used for one sign-up or sign-in"""
        self._check_configured(self.anon_key, "SUPABASE_KEY")
        return create_client(self.url, self.anon_key, options=self._options())

    def user_client(self, access_token: str) -> Client:
        """Anon-key client acting as the user behind ``access_token``"""
        self._check_configured(self.anon_key, "SUPABASE_KEY")
        client = create_client(
            self.url,
            self.anon_key,
            options=self._options(headers={"Authorization": f"Bearer {access_token}"}),
        )
        client.postgrest.auth(access_token)
        return client

    def client_for(self, user_token: Optional[str] = None) -> Client:
        return self.user_client(user_token) if user_token else self.service_client


supabase_manager = SupabaseClientManager()
