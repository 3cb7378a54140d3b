from supabase import AsyncClient
from clinic_auth.config import settings
from clinic_auth.core.exceptions import ProfileFetchFailure, ProfileWriteFailure
from clinic_auth.modules.profiles.schemas import Profile, ProfessionalProfile
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class SupabaseProfileStore:
    """Reads and updates the `profiles` / `professional_profiles` tables."""

    def __init__(self, supabase: AsyncClient):
        self.supabase = supabase
        self.profiles_table = settings.profiles_table
        self.professional_profiles_table = settings.professional_profiles_table

    async def read_profile(self, user_id: str) -> Profile:
        """Exactly one row must match; zero or several is a failure."""
        try:
            result = await self.supabase.table(self.profiles_table)\
                .select("*")\
                .eq("id", user_id)\
                .single()\
                .execute()
        except Exception as e:
            raise ProfileFetchFailure(f"Failed to read profile {user_id}: {e}") from e

        if not result.data:
            raise ProfileFetchFailure(f"Profile {user_id} not found")
        return Profile(**result.data)

    async def read_professional_profile(self, user_id: str) -> Optional[ProfessionalProfile]:
        """Zero or one row; absence is not an error."""
        try:
            result = await self.supabase.table(self.professional_profiles_table)\
                .select("*")\
                .eq("profile_id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise ProfileFetchFailure(f"Failed to read professional profile {user_id}: {e}") from e

        # postgrest returns no response at all for maybe_single() with zero rows
        if result is None or not result.data:
            return None
        return ProfessionalProfile(**result.data)

    async def write_profile(self, user_id: str, fields: Dict[str, Any]) -> Profile:
        try:
            result = await self.supabase.table(self.profiles_table)\
                .update(fields)\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise ProfileWriteFailure(getattr(e, "message", None) or str(e)) from e

        if not result.data:
            raise ProfileWriteFailure(f"Profile {user_id} not found")
        logger.debug(f"Updated profile {user_id}: {sorted(fields)}")
        return Profile(**result.data[0])
