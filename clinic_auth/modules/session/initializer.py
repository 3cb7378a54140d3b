"""
One-shot session bootstrap.

`initialize()` starts two things side by side:

- a bootstrap task that restores the persisted session (if any) and its
  profiles;
- a consumer task draining the provider's auth events from a queue.

Nothing orders the two: whichever publishes last wins.

Teardown only stops new events from arriving. The bootstrap still runs to
completion and events already queued are still handled.
"""
import asyncio
import logging
from typing import Callable, Optional

from clinic_auth.core.ports import IdentityProvider, Subscription
from clinic_auth.modules.auth.schemas import AuthEvent, AuthEventName
from clinic_auth.modules.profiles.loader import ProfileLoader
from clinic_auth.modules.session.schemas import ANONYMOUS
from clinic_auth.modules.session.store import SessionStore

logger = logging.getLogger(__name__)

Teardown = Callable[[], None]

# Queued by teardown; the consumer exits once it reaches it
_STOP = object()


def _noop_teardown() -> None:
    return None


class SessionInitializer:
    def __init__(self, store: SessionStore, provider: IdentityProvider, loader: ProfileLoader):
        self.store = store
        self.provider = provider
        self.loader = loader
        self.events: asyncio.Queue = asyncio.Queue()
        self._subscription: Optional[Subscription] = None
        self._consumer: Optional[asyncio.Task] = None
        self._bootstrap: Optional[asyncio.Task] = None
        self._torn_down = False

    async def initialize(self) -> Teardown:
        # Check and set happen with no await in between, so a second caller
        # on the same loop always sees initialized=True.
        if self.store.snapshot.initialized:
            return _noop_teardown
        self.store.publish(initialized=True)
        logger.info("Initializing session")

        self._subscription = self.provider.subscribe(self._on_auth_event)
        self._consumer = asyncio.create_task(self._consume_events(), name="session-auth-events")
        self._bootstrap = asyncio.create_task(self._restore_session(), name="session-bootstrap")
        return self.teardown

    def teardown(self) -> None:
        if self._torn_down:
            return
        self._torn_down = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
        if self._consumer is not None:
            self.events.put_nowait(_STOP)
        logger.info("Session event subscription closed")

    async def aclose(self) -> None:
        """Teardown, then wait for the bootstrap and the queued events to finish."""
        self.teardown()
        tasks = [t for t in (self._consumer, self._bootstrap) if t is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def wait_until_ready(self) -> None:
        """Wait for the persisted-session lookup to finish."""
        if self._bootstrap is not None:
            await asyncio.shield(self._bootstrap)

    @property
    def bootstrapped(self) -> bool:
        """True once the persisted-session lookup has published its result."""
        return self._bootstrap is not None and self._bootstrap.done()

    def _on_auth_event(self, event: str, session) -> None:
        name = getattr(event, "value", event)
        self.events.put_nowait(AuthEvent(name=str(name), session=session))

    async def _restore_session(self) -> None:
        try:
            session = await self.provider.get_persisted_session()
        except Exception as e:
            logger.error(f"Error restoring persisted session: {e}")
            session = None

        if session is not None and session.user is not None:
            profiles = await self.loader.load(session.user.id)
            self.store.publish(
                user=session.user,
                profile=profiles.profile,
                professional_profile=profiles.professional_profile,
                loading=False,
            )
            logger.info(f"Restored session for user {session.user.id}")
        else:
            self.store.publish(loading=False)

    async def _consume_events(self) -> None:
        while True:
            event = await self.events.get()
            if event is _STOP:
                self.events.task_done()
                break
            try:
                await self.handle_event(event)
            except Exception as e:
                logger.exception(f"Error handling auth event {event.name}: {e}")
            finally:
                self.events.task_done()

    async def handle_event(self, event: AuthEvent) -> None:
        session = event.session
        user = session.user if session is not None else None

        if event.name == AuthEventName.SIGNED_OUT.value:
            self.store.publish(**ANONYMOUS)
            return

        if user is None:
            logger.debug(f"Ignoring auth event {event.name} without session")
            return

        if event.name == AuthEventName.SIGNED_IN.value:
            profiles = await self.loader.load(user.id)
            self.store.publish(
                user=user,
                profile=profiles.profile,
                professional_profile=profiles.professional_profile,
                loading=False,
                error=None,
            )
        elif event.name == AuthEventName.TOKEN_REFRESHED.value:
            self.store.publish(user=user)
        elif event.name == AuthEventName.USER_UPDATED.value:
            profile = await self.loader.load_profile(user.id)
            self.store.publish(user=user, profile=profile)
        else:
            logger.debug(f"Ignoring auth event {event.name}")
