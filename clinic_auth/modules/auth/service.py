import logging
from supabase import AsyncClient
from clinic_auth.core.ports import AuthListener
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SupabaseIdentityProvider:
    """
    Identity provider backed by Supabase Auth.

    Errors from Supabase (AuthApiError and friends) are left to propagate; the
    session operations translate them for the user.
    """

    def __init__(self, supabase: AsyncClient):
        self.supabase = supabase

    async def get_persisted_session(self) -> Optional[Any]:
        """Session restored from the client's storage, if any"""
        return await self.supabase.auth.get_session()

    async def sign_in_with_password(self, email: str, password: str) -> Any:
        auth_response = await self.supabase.auth.sign_in_with_password({
            "email": email,
            "password": password
        })
        return auth_response.session

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> Any:
        """Register a new user; the backend creates the profile row from metadata"""
        return await self.supabase.auth.sign_up({
            "email": email,
            "password": password,
            "options": {
                "data": metadata
            }
        })

    async def sign_out(self) -> None:
        await self.supabase.auth.sign_out()

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        await self.supabase.auth.reset_password_for_email(email, {"redirect_to": redirect_to})

    def subscribe(self, listener: AuthListener):
        """Register listener for auth state changes; returns the Supabase subscription"""
        subscription = self.supabase.auth.on_auth_state_change(listener)
        logger.debug("Subscribed to Supabase auth state changes")
        return subscription
