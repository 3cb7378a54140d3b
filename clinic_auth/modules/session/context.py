import logging
from typing import Any, Callable, Dict, Optional, Union

from clinic_auth.core.ports import IdentityProvider, ProfileStore
from clinic_auth.modules.auth.translator import ErrorTranslator
from clinic_auth.modules.profiles.loader import ProfileLoader
from clinic_auth.modules.profiles.schemas import ProfileUpdate, UserRole
from clinic_auth.modules.session.initializer import SessionInitializer, Teardown
from clinic_auth.modules.session.operations import SessionOperations
from clinic_auth.modules.session.schemas import Snapshot
from clinic_auth.modules.session.store import SessionStore, SnapshotListener

logger = logging.getLogger(__name__)


class SessionContext:
    """
    Single source of truth for who is signed in.

    Owns the Snapshot store and wires the operations and the initializer to
    the injected identity provider and profile store. Use one context per
    client process:

        async with SessionContext(provider, profile_store) as session:
            await session.wait_until_ready()
            await session.sign_in(email, password)
    """

    def __init__(
        self,
        provider: IdentityProvider,
        profile_store: ProfileStore,
        translator: Optional[ErrorTranslator] = None,
    ):
        self.store = SessionStore()
        self.translator = translator or ErrorTranslator()
        self.loader = ProfileLoader(profile_store)
        self.operations = SessionOperations(self.store, provider, profile_store, self.translator)
        self.initializer = SessionInitializer(self.store, provider, self.loader)
        self._teardown: Optional[Teardown] = None

    @property
    def snapshot(self) -> Snapshot:
        return self.store.snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    async def initialize(self) -> Teardown:
        teardown = await self.initializer.initialize()
        if self._teardown is None:
            self._teardown = teardown
        return teardown

    async def wait_until_ready(self) -> None:
        await self.initializer.wait_until_ready()

    @property
    def bootstrapped(self) -> bool:
        return self.initializer.bootstrapped

    def close(self) -> None:
        if self._teardown is not None:
            self._teardown()

    async def aclose(self) -> None:
        await self.initializer.aclose()

    async def sign_in(self, email: str, password: str) -> None:
        await self.operations.sign_in(email, password)

    async def sign_up(self, email: str, password: str, full_name: str, role: Union[UserRole, str]) -> None:
        await self.operations.sign_up(email, password, full_name, role)

    async def sign_out(self) -> None:
        await self.operations.sign_out()

    async def update_profile(self, updates: Union[ProfileUpdate, Dict[str, Any]]) -> None:
        await self.operations.update_profile(updates)

    def clear_error(self) -> None:
        self.operations.clear_error()

    async def request_password_reset(self, email: str) -> None:
        await self.operations.request_password_reset(email)

    async def __aenter__(self) -> "SessionContext":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
