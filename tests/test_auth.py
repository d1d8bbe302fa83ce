# tests/test_auth.py
from datetime import timedelta

import pytest
from bson import ObjectId

from app.core.security import TokenIssuer


@pytest.mark.asyncio
async def test_register_login_and_me(client, settings):
    r = await client.post("/api/auth/register", json={"name": "A", "email": "a@x.com", "password": "secret1"})
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["user"]["email"] == "a@x.com"
    assert "password" not in body["user"]

    issuer = TokenIssuer(settings.JWT_SECRET, expires=timedelta(days=30))
    assert issuer.verify(body["token"]).user_id == body["user"]["id"]

    client.cookies.clear()
    r2 = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert r2.status_code == 200
    token = r2.json()["token"]
    client.cookies.clear()

    r3 = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r3.status_code == 200
    assert r3.json()["user"]["email"] == "a@x.com"
    assert r3.json()["user"]["joinedCommunities"] == []


@pytest.mark.asyncio
async def test_register_sets_cookie_auth(client):
    r = await client.post("/api/auth/register", json={"name": "A", "email": "a@x.com", "password": "secret1"})
    assert r.status_code == 201
    assert "token" in r.cookies
    assert "auth_token" in r.cookies

    # the client jar now carries the cookie
    me = await client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["name"] == "A"


@pytest.mark.asyncio
async def test_duplicate_register_rejected(client, register_user):
    await register_user(email="a@x.com")
    r = await client.post("/api/auth/register", json={"name": "B", "email": "A@X.com", "password": "secret1"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "User already exists"}


@pytest.mark.asyncio
async def test_register_validation_error(client):
    r = await client.post("/api/auth/register", json={"name": "A", "email": "not-an-email", "password": "123"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    fields = {e["field"] for e in body["error"]}
    assert {"email", "password"} <= fields


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_look_the_same(client, register_user):
    await register_user(email="a@x.com", password="secret1")
    wrong = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope123"})
    unknown = await client.post("/api/auth/login", json={"email": "ghost@x.com", "password": "secret1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"success": False, "message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_me_requires_token(client):
    r = await client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["message"] == "Authentication required"
    assert r.json()["error"] == "No token provided"


@pytest.mark.asyncio
async def test_expired_and_malformed_tokens(client, settings, register_user):
    user_id, _ = await register_user()
    issuer = TokenIssuer(settings.JWT_SECRET, expires=timedelta(days=30))
    expired = issuer.issue(user_id, expires_delta=timedelta(seconds=-10))

    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Authentication expired"

    r = await client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid authentication"

    forged = TokenIssuer("other-secret", expires=timedelta(days=1)).issue(user_id)
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid authentication"


@pytest.mark.asyncio
async def test_token_for_missing_user(client, settings):
    token = TokenIssuer(settings.JWT_SECRET, expires=timedelta(days=1)).issue(str(ObjectId()))
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "User not found", "error": "Account may have been deleted"}


@pytest.mark.asyncio
async def test_logout_clears_cookies(client):
    await client.post("/api/auth/register", json={"name": "A", "email": "a@x.com", "password": "secret1"})
    r = await client.get("/api/auth/logout")
    assert r.status_code == 200
    assert r.json()["message"] == "Logged out successfully"

    r2 = await client.get("/api/auth/me")
    assert r2.status_code == 401


@pytest.mark.asyncio
async def test_password_reset_flow(client, register_user):
    await register_user(email="a@x.com", password="secret1")

    r = await client.post("/api/auth/forgotpassword", json={"email": "a@x.com"})
    assert r.status_code == 200
    reset_token = r.json()["resetToken"]

    r2 = await client.post(f"/api/auth/resetpassword/{reset_token}", json={"password": "newpass1"})
    assert r2.status_code == 200
    assert r2.json()["token"]
    client.cookies.clear()

    old = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert old.status_code == 401
    new = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "newpass1"})
    assert new.status_code == 200

    # single use
    again = await client.post(f"/api/auth/resetpassword/{reset_token}", json={"password": "another1"})
    assert again.status_code == 400
    assert again.json()["message"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_forgot_password_unknown_email(client):
    r = await client.post("/api/auth/forgotpassword", json={"email": "ghost@x.com"})
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_password_whitespace_is_significant(client, register_user):
    await register_user(email="a@x.com", password="  secret1  ")

    stripped = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert stripped.status_code == 401

    exact = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "  secret1  "})
    assert exact.status_code == 200


@pytest.mark.asyncio
async def test_auth_token_cookie_is_accepted(client, register_user):
    _, headers = await register_user()
    token = headers["Authorization"].split(" ", 1)[1]

    r = await client.get("/api/auth/me", headers={"Cookie": f"auth_token={token}"})
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Alice"


@pytest.mark.asyncio
async def test_cookie_takes_precedence_over_header(client, register_user):
    _, alice = await register_user()
    _, bob = await register_user(name="Bob", email="bob@example.com")
    alice_token = alice["Authorization"].split(" ", 1)[1]
    bob_token = bob["Authorization"].split(" ", 1)[1]

    r = await client.get("/api/auth/me", headers={"Cookie": f"token={alice_token}", **bob})
    assert r.json()["user"]["name"] == "Alice"

    # token is checked before auth_token
    r = await client.get("/api/auth/me", headers={"Cookie": f"auth_token={bob_token}; token={alice_token}"})
    assert r.json()["user"]["name"] == "Alice"
