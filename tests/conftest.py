from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from clinic_auth.core.exceptions import ProfileFetchFailure
from clinic_auth.modules.profiles.schemas import ProfessionalProfile, Profile
from clinic_auth.modules.session.context import SessionContext

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeAuthError(Exception):
    """Mimics supabase_auth.errors.AuthApiError (message attribute)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def make_session(user_id: str, email: str = None, token: str = "token-1"):
    user = SimpleNamespace(id=user_id, email=email or f"{user_id}@example.com")
    return SimpleNamespace(user=user, access_token=token)


def make_profile(user_id: str, role: str = "patient", **overrides) -> Profile:
    data = {
        "id": user_id,
        "full_name": "Maria Souza",
        "email": f"{user_id}@example.com",
        "role": role,
        "avatar_url": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return Profile(**data)


def make_professional_profile(user_id: str, **overrides) -> ProfessionalProfile:
    data = {
        "id": f"pro-{user_id}",
        "profile_id": user_id,
        "display_name": "Dra. Maria Souza",
        "registration_type": "CRP",
        "registration_number": "06/123456",
        "registration_state": "SP",
        "specialty": "Psicologia",
        "consultation_price_cents": 25000,
        "consultation_duration_minutes": 50,
        "rating_average": 4.8,
        "rating_count": 12,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return ProfessionalProfile(**data)


class FakeSubscription:
    def __init__(self, provider, listener):
        self.provider = provider
        self.listener = listener
        self.unsubscribe_calls = 0

    def unsubscribe(self):
        self.unsubscribe_calls += 1
        if self.listener in self.provider.listeners:
            self.provider.listeners.remove(self.listener)


class FakeIdentityProvider:
    """In-memory Supabase Auth: accounts, persisted session, event stream."""

    def __init__(self):
        self.accounts = {}
        self.persisted_session = None
        self.listeners = []
        self.subscriptions = []
        self.calls = []
        self.sign_out_error = None
        self.reset_error = None

    def add_account(self, email, password, user_id, confirmed=True):
        self.accounts[email] = {
            "password": password,
            "user_id": user_id,
            "confirmed": confirmed,
            "metadata": {},
        }

    def emit(self, event, session=None):
        for listener in list(self.listeners):
            listener(event, session)

    async def get_persisted_session(self):
        self.calls.append("get_persisted_session")
        return self.persisted_session

    async def sign_in_with_password(self, email, password):
        self.calls.append("sign_in_with_password")
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise FakeAuthError("Invalid login credentials")
        if not account["confirmed"]:
            raise FakeAuthError("Email not confirmed")
        session = make_session(account["user_id"], email)
        # Supabase notifies subscribers before sign_in_with_password returns
        self.emit("SIGNED_IN", session)
        return session

    async def sign_up(self, email, password, metadata):
        self.calls.append("sign_up")
        if email in self.accounts:
            raise FakeAuthError("User already registered")
        if len(password) < 6:
            raise FakeAuthError("Password should be at least 6 characters")
        self.add_account(email, password, f"user-{len(self.accounts) + 1}", confirmed=False)
        self.accounts[email]["metadata"] = metadata
        return SimpleNamespace(user=None, session=None)

    async def sign_out(self):
        self.calls.append("sign_out")
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.emit("SIGNED_OUT", None)

    async def reset_password_for_email(self, email, redirect_to):
        self.calls.append(("reset_password_for_email", email, redirect_to))
        if self.reset_error is not None:
            raise self.reset_error

    def subscribe(self, listener):
        self.listeners.append(listener)
        subscription = FakeSubscription(self, listener)
        self.subscriptions.append(subscription)
        return subscription


class FakeProfileStore:
    def __init__(self):
        self.profiles = {}
        self.professional_profiles = {}
        self.calls = []
        self.profile_error = None
        self.professional_error = None
        self.write_error = None

    def add(self, profile, professional_profile=None):
        self.profiles[profile.id] = profile
        if professional_profile is not None:
            self.professional_profiles[professional_profile.profile_id] = professional_profile

    async def read_profile(self, user_id):
        self.calls.append(("read_profile", user_id))
        if self.profile_error is not None:
            raise self.profile_error
        if user_id not in self.profiles:
            raise ProfileFetchFailure(f"Profile {user_id} not found")
        return self.profiles[user_id]

    async def read_professional_profile(self, user_id):
        self.calls.append(("read_professional_profile", user_id))
        if self.professional_error is not None:
            raise self.professional_error
        return self.professional_profiles.get(user_id)

    async def write_profile(self, user_id, fields):
        self.calls.append(("write_profile", user_id, fields))
        if self.write_error is not None:
            raise self.write_error
        updated = Profile(**{**self.profiles[user_id].model_dump(), **fields})
        self.profiles[user_id] = updated
        return updated


@pytest.fixture()
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture()
def profile_store() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture()
def context(provider, profile_store) -> SessionContext:
    # not initialized; tests enter it with `async with`
    return SessionContext(provider, profile_store)
