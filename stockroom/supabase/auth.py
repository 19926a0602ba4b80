from typing import Optional, Tuple
from supabase import Client
from stockroom.config import get_config
from stockroom.logging import get_logger

class SupabaseAuthentication:
    """Handles Supabase authentication and client creation using AppConfig singleton."""
    def __init__(self) -> None:
        """Initializes the authentication handler using the singleton AppConfig."""
        self.config = get_config()
        self.logger = get_logger(__name__)
        self._client: Optional[Client] = None

    def get_supabase_credentials(self) -> Tuple[str, str]:
        """Picks the project URL and API key from AppConfig values.

        Returns:
            tuple[str, str]: The project URL and the key to authenticate with.
        Raises:
            RuntimeError: If required configuration is missing.
        """
        if self.config.supabase_url and self.config.supabase_service_role_key:
            self.logger.info("Configuring Supabase authentication with service role key")
            return self.config.supabase_url, self.config.supabase_service_role_key
        elif self.config.supabase_url and self.config.supabase_anon_key:
            self.logger.info("Configuring Supabase authentication with anon key")
            return self.config.supabase_url, self.config.supabase_anon_key
        else:
            self.logger.error("Missing Supabase configuration values.")
            raise RuntimeError("Missing Supabase configuration values.")

    def get_client(self) -> Client:
        """Returns an authenticated Supabase client, created on first use.

        Returns:
            Client: The Supabase client instance.
        """
        if self._client is None:
            from supabase import create_client
            url, key = self.get_supabase_credentials()
            self.logger.info(f"Instantiating Supabase client for project: {url}")
            self._client = create_client(url, key)
        return self._client

    def sign_in(self, email: str, password: str):
        """Signs a user in with email and password.

        Returns:
            Session: The session of the signed-in user.
        """
        response = self.get_client().auth.sign_in_with_password({"email": email, "password": password})
        self.logger.info(f"Signed in {email}")
        return response.session

    def sign_out(self) -> None:
        """Signs the current user out."""
        self.get_client().auth.sign_out()
        self.logger.info("Signed out")

def get_supabase_auth() -> SupabaseAuthentication:
    """Returns a new SupabaseAuthentication instance using the latest config."""
    return SupabaseAuthentication()
