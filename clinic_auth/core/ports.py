from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Protocol

from clinic_auth.modules.profiles.schemas import ProfessionalProfile, Profile

# (event_name, session | None)
AuthListener = Callable[[str, Optional[Any]], None]


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


class IdentityProvider(Protocol):
    async def get_persisted_session(self) -> Optional[Any]: ...

    async def sign_in_with_password(self, email: str, password: str) -> Any: ...

    async def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> Any: ...

    async def sign_out(self) -> None: ...

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None: ...

    def subscribe(self, listener: AuthListener) -> Subscription: ...


class ProfileStore(Protocol):
    async def read_profile(self, user_id: str) -> Profile: ...

    async def read_professional_profile(self, user_id: str) -> Optional[ProfessionalProfile]: ...

    async def write_profile(self, user_id: str, fields: Dict[str, Any]) -> Profile: ...
