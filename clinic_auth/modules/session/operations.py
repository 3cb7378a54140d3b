import logging
from datetime import datetime, timezone
from typing import Any, Dict, Union

from clinic_auth.config import settings
from clinic_auth.core.exceptions import (
    AuthenticationFailure,
    NotAuthenticated,
    ProfileWriteFailure,
)
from clinic_auth.core.ports import IdentityProvider, ProfileStore
from clinic_auth.modules.auth.translator import ErrorTranslator, NOT_AUTHENTICATED_MESSAGE
from clinic_auth.modules.profiles.schemas import ProfileUpdate, UserRole
from clinic_auth.modules.session.schemas import ANONYMOUS
from clinic_auth.modules.session.store import SessionStore

logger = logging.getLogger(__name__)


class SessionOperations:
    """
    Imperative session transitions.

    Each operation clears `error` and raises `loading` before its first
    network call, and publishes its outcome before returning or raising.
    Overlapping calls are not serialized; the last one to finish wins.
    """

    def __init__(
        self,
        store: SessionStore,
        provider: IdentityProvider,
        profile_store: ProfileStore,
        translator: ErrorTranslator,
    ):
        self.store = store
        self.provider = provider
        self.profile_store = profile_store
        self.translator = translator

    async def sign_in(self, email: str, password: str) -> None:
        """Sign in with e-mail and password.

        User and profiles are not published here: the provider follows a
        successful sign-in with a SIGNED_IN event, and the event handler
        loads and publishes them.
        """
        self.store.publish(loading=True, error=None)
        try:
            await self.provider.sign_in_with_password(email, password)
        except Exception as e:
            raise self._auth_failure("Sign-in", e) from e
        logger.info("Sign-in accepted, waiting for SIGNED_IN event")

    async def sign_up(self, email: str, password: str, full_name: str, role: Union[UserRole, str]) -> None:
        """Register an account. Does not sign in; confirmation may be pending."""
        metadata = {"full_name": full_name, "role": UserRole(role).value}
        self.store.publish(loading=True, error=None)
        try:
            await self.provider.sign_up(email, password, metadata)
        except Exception as e:
            raise self._auth_failure("Sign-up", e) from e
        self.store.publish(loading=False)
        logger.info("Sign-up accepted")

    async def sign_out(self) -> None:
        self.store.publish(loading=True, error=None)
        try:
            await self.provider.sign_out()
        except Exception as e:
            # The provider may still have dropped the session server-side;
            # the local user is kept until a SIGNED_OUT event says otherwise.
            raise self._auth_failure("Sign-out", e) from e
        self.store.publish(**ANONYMOUS)
        logger.info("Signed out")

    async def update_profile(self, updates: Union[ProfileUpdate, Dict[str, Any]]) -> None:
        """Write the given profile fields for the signed-in user.

        Dict input is validated as a ProfileUpdate first; an invalid dict
        raises pydantic.ValidationError without touching the snapshot or the
        store. Field validation belongs to the caller's forms.
        """
        if not isinstance(updates, ProfileUpdate):
            updates = ProfileUpdate(**updates)

        user = self.store.snapshot.user
        if user is None:
            self.store.publish(error=NOT_AUTHENTICATED_MESSAGE)
            raise NotAuthenticated(NOT_AUTHENTICATED_MESSAGE)

        fields = updates.model_dump(exclude_unset=True)
        fields["updated_at"] = datetime.now(timezone.utc).isoformat()

        self.store.publish(loading=True, error=None)
        try:
            profile = await self.profile_store.write_profile(user.id, fields)
        except Exception as e:
            message = self.translator.translate_exception(e)
            logger.error(f"Profile update failed for user {user.id}: {e}")
            self.store.publish(error=message, loading=False)
            raise ProfileWriteFailure(message) from e
        self.store.publish(profile=profile, loading=False)

    def clear_error(self) -> None:
        self.store.publish(error=None)

    async def request_password_reset(self, email: str) -> None:
        """Ask the provider to e-mail a password recovery link."""
        self.store.publish(loading=True, error=None)
        try:
            await self.provider.reset_password_for_email(email, settings.password_reset_redirect_url)
        except Exception as e:
            raise self._auth_failure("Password reset request", e) from e
        self.store.publish(loading=False)

    def _auth_failure(self, action: str, exc: Exception) -> AuthenticationFailure:
        message = self.translator.translate_exception(exc)
        logger.warning(f"{action} failed: {exc}")
        self.store.publish(error=message, loading=False)
        return AuthenticationFailure(message)
