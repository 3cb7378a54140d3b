"""
Wiring of the session context for the HTTP bridge
"""

from fastapi import HTTPException, Request, status
from clinic_auth.database.supabase_client import get_supabase
from clinic_auth.modules.auth.service import SupabaseIdentityProvider
from clinic_auth.modules.profiles.service import SupabaseProfileStore
from clinic_auth.modules.session.context import SessionContext
import logging

logger = logging.getLogger(__name__)


async def build_supabase_session_context() -> SessionContext:
    """Session context talking to Supabase Auth and the profile tables through one client"""
    supabase = await get_supabase()
    return SessionContext(
        provider=SupabaseIdentityProvider(supabase),
        profile_store=SupabaseProfileStore(supabase),
    )


def get_session_context(request: Request) -> SessionContext:
    """Context created by the app lifespan"""
    context = getattr(request.app.state, "session_context", None)
    if context is None:
        logger.error("Session context requested before application startup")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session not available"
        )
    return context
