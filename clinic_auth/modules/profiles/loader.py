import asyncio
import logging
from typing import NamedTuple, Optional

from clinic_auth.core.ports import ProfileStore
from clinic_auth.modules.profiles.schemas import ProfessionalProfile, Profile, UserRole

logger = logging.getLogger(__name__)


class LoadedProfiles(NamedTuple):
    profile: Optional[Profile]
    professional_profile: Optional[ProfessionalProfile]


class ProfileLoader:
    """
    Fetches the primary and professional profile of a user.

    Both reads run concurrently and degrade independently: a failing read is
    logged and its slot comes back as None. `load` never raises.
    """

    def __init__(self, store: ProfileStore):
        self.store = store

    async def load(self, user_id: str) -> LoadedProfiles:
        profile_result, professional_result = await asyncio.gather(
            self.store.read_profile(user_id),
            self.store.read_professional_profile(user_id),
            return_exceptions=True,
        )

        profile = self._unwrap(profile_result, "profile", user_id)
        professional_profile = self._unwrap(professional_result, "professional profile", user_id)

        if (
            profile is not None
            and professional_profile is not None
            and profile.role != UserRole.PROFESSIONAL.value
        ):
            logger.warning(
                f"Discarding professional profile of user {user_id} with role {profile.role}"
            )
            professional_profile = None

        return LoadedProfiles(profile, professional_profile)

    async def load_profile(self, user_id: str) -> Optional[Profile]:
        try:
            return await self.store.read_profile(user_id)
        except Exception as e:
            logger.error(f"Error fetching profile for user {user_id}: {e}")
            return None

    @staticmethod
    def _unwrap(result, label: str, user_id: str):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                # CancelledError and friends must not be swallowed
                raise result
            logger.error(f"Error fetching {label} for user {user_id}: {result}")
            return None
        return result
