from pydantic import BaseModel, ConfigDict
from typing import Any, Optional

from clinic_auth.modules.profiles.schemas import ProfessionalProfile, Profile


class Snapshot(BaseModel):
    """Complete observable session state. Frozen: every change is a new Snapshot."""
    user: Optional[Any] = None
    profile: Optional[Profile] = None
    professional_profile: Optional[ProfessionalProfile] = None
    loading: bool = True
    error: Optional[str] = None
    initialized: bool = False

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_ready(self) -> bool:
        return self.initialized and not self.loading


# Fields reset on sign-out / SIGNED_OUT
ANONYMOUS = {
    "user": None,
    "profile": None,
    "professional_profile": None,
    "loading": False,
}


class SessionUser(BaseModel):
    id: str
    email: Optional[str] = None


class SnapshotResponse(BaseModel):
    user: Optional[SessionUser] = None
    profile: Optional[Profile] = None
    professional_profile: Optional[ProfessionalProfile] = None
    loading: bool
    error: Optional[str] = None
    initialized: bool

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotResponse":
        user = None
        if snapshot.user is not None:
            user = SessionUser(id=snapshot.user.id, email=getattr(snapshot.user, "email", None))
        return cls(
            user=user,
            profile=snapshot.profile,
            professional_profile=snapshot.professional_profile,
            loading=snapshot.loading,
            error=snapshot.error,
            initialized=snapshot.initialized,
        )
