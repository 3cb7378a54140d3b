import pytest
from fastapi.testclient import TestClient

from clinic_auth.main import create_app
from clinic_auth.modules.session.context import SessionContext
from conftest import FakeAuthError, make_profile, make_session


@pytest.fixture()
def app_and_context(provider, profile_store):
    holder = {}

    async def factory():
        holder["context"] = SessionContext(provider, profile_store)
        return holder["context"]

    return create_app(context_factory=factory), holder


@pytest.fixture()
def client(app_and_context):
    app, holder = app_and_context
    with TestClient(app) as test_client:
        test_client.portal.call(holder["context"].wait_until_ready)
        yield test_client


def drain(client, app_and_context):
    _, holder = app_and_context
    client.portal.call(holder["context"].initializer.events.join)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy"}
    assert r.headers["X-Content-Type-Options"] == "nosniff"


def test_ready_after_bootstrap(client):
    r = client.get("/ready")
    assert r.status_code == 200


def test_ready_while_an_operation_is_loading(client, app_and_context):
    _, holder = app_and_context
    client.portal.call(lambda: holder["context"].store.publish(loading=True))

    r = client.get("/ready")
    assert r.status_code == 200


def test_anonymous_session(client):
    r = client.get("/api/v1/session")
    assert r.status_code == 200
    data = r.json()
    assert data["user"] is None
    assert data["initialized"] is True
    assert data["loading"] is False


def test_sign_in_flow(client, app_and_context, provider, profile_store):
    provider.add_account("maria@example.com", "secret123", "maria")
    profile_store.add(make_profile("maria", role="patient"))

    r = client.post("/api/v1/session/sign-in", json={"email": "maria@example.com", "password": "secret123"})
    assert r.status_code == 200, r.text

    drain(client, app_and_context)
    data = client.get("/api/v1/session").json()
    assert data["user"] == {"id": "maria", "email": "maria@example.com"}
    assert data["profile"]["role"] == "patient"
    assert data["professional_profile"] is None


def test_sign_in_invalid_credentials(client):
    r = client.post("/api/v1/session/sign-in", json={"email": "nobody@example.com", "password": "x"})
    assert r.status_code == 401
    assert r.json()["detail"] == "E-mail ou senha incorretos"

    data = client.get("/api/v1/session").json()
    assert data["error"] == "E-mail ou senha incorretos"

    r = client.delete("/api/v1/session/error")
    assert r.status_code == 200
    assert r.json()["error"] is None


def test_sign_up(client, provider):
    body = {"email": "joao@example.com", "password": "secret123", "full_name": "João Lima", "role": "professional"}
    r = client.post("/api/v1/session/sign-up", json=body)
    assert r.status_code == 201
    assert provider.accounts["joao@example.com"]["metadata"]["role"] == "professional"

    r = client.post("/api/v1/session/sign-up", json=body)
    assert r.status_code == 400
    assert r.json()["detail"] == "Este e-mail já está cadastrado"


def test_sign_up_validation_error(client):
    r = client.post("/api/v1/session/sign-up", json={"email": "not-an-email", "password": "x", "full_name": "A"})
    assert r.status_code == 422


def test_update_profile_requires_user(client, profile_store):
    r = client.patch("/api/v1/session/profile", json={"full_name": "Nobody"})
    assert r.status_code == 401
    assert profile_store.calls == []


def test_update_profile_rejects_unknown_fields(client):
    r = client.patch("/api/v1/session/profile", json={"is_admin": True})
    assert r.status_code == 422


def test_sign_out_and_failure(client, app_and_context, provider, profile_store):
    profile_store.add(make_profile("u1"))
    # events must be pushed from the app's event loop thread
    client.portal.call(provider.emit, "SIGNED_IN", make_session("u1"))
    drain(client, app_and_context)

    provider.sign_out_error = FakeAuthError("Network request failed")
    r = client.post("/api/v1/session/sign-out")
    assert r.status_code == 400
    assert client.get("/api/v1/session").json()["user"]["id"] == "u1"

    provider.sign_out_error = None
    r = client.post("/api/v1/session/sign-out")
    assert r.status_code == 200
    assert r.json()["user"] is None


def test_password_reset(client, provider):
    r = client.post("/api/v1/session/password-reset", json={"email": "maria@example.com"})
    assert r.status_code == 200
    assert provider.calls[-1][0] == "reset_password_for_email"
