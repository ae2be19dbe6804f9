"""Access gate over HTTP: authentication, stored user lookup and roles."""

from datetime import timedelta

from jose import jwt

from app.core.security import create_access_token

SECRET = "test-secret-key"


async def test_missing_token(client):
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_malformed_token(client):
    response = await client.get(
        "/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_token_signed_with_another_key(client, users):
    token = create_access_token(users["customer"].email, secret_key="some-other-key")
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_expired_token(client, users):
    token = create_access_token(
        users["customer"].email, expires_delta=timedelta(minutes=-5), secret_key=SECRET
    )
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert "expired" in response.json()["detail"]


async def test_token_without_email(client):
    token = jwt.encode({"sub": "uid-123"}, SECRET, algorithm="HS256")
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_verified_identity_without_user_record(client, users, auth_headers):
    response = await client.get("/api/v1/users/me", headers=auth_headers("ghost@example.com"))
    assert response.status_code == 404
    assert "ghost@example.com" in response.json()["detail"]


async def test_identity_email_is_case_insensitive(client, users, auth_headers):
    response = await client.get("/api/v1/users/me", headers=auth_headers("Traveler@Example.com"))
    assert response.status_code == 200
    assert response.json()["email"] == "traveler@example.com"


async def test_user_is_refused_admin_route(client, users, auth_headers):
    response = await client.get("/api/v1/bookings", headers=auth_headers(users["customer"].email))
    assert response.status_code == 403


async def test_guide_is_refused_admin_route(client, users, auth_headers):
    response = await client.get("/api/v1/users", headers=auth_headers(users["guide"].email))
    assert response.status_code == 403


async def test_admin_passes_guide_route(client, users, auth_headers):
    response = await client.get("/api/v1/bookings/assigned", headers=auth_headers(users["admin"].email))
    assert response.status_code == 200
    assert response.json()["total"] == 0


async def test_sign_in_creates_then_refreshes(client, auth_headers):
    headers = auth_headers("newcomer@example.com")
    body = {"email": "newcomer@example.com", "name": "New Comer"}

    first = await client.post("/api/v1/users", json=body, headers=headers)
    assert first.status_code == 201
    assert first.json()["inserted"] is True
    assert first.json()["user"]["role"] == "user"

    second = await client.post("/api/v1/users", json=body, headers=headers)
    assert second.status_code == 200
    assert second.json()["inserted"] is False
    assert second.json()["user"]["last_login_at"] is not None


async def test_sign_in_for_someone_else(client, auth_headers):
    response = await client.post(
        "/api/v1/users",
        json={"email": "victim@example.com"},
        headers=auth_headers("attacker@example.com"),
    )
    assert response.status_code == 403


async def test_role_lookup(client, users, auth_headers):
    own = await client.get(
        "/api/v1/users/guide@example.com/role", headers=auth_headers(users["guide"].email)
    )
    assert own.status_code == 200
    assert own.json() == {"email": "guide@example.com", "role": "guide"}

    other = await client.get(
        "/api/v1/users/admin@example.com/role", headers=auth_headers(users["customer"].email)
    )
    assert other.status_code == 403

    by_admin = await client.get(
        "/api/v1/users/traveler@example.com/role", headers=auth_headers(users["admin"].email)
    )
    assert by_admin.json()["role"] == "user"


async def test_admin_changes_role(client, users, auth_headers):
    admin = auth_headers(users["admin"].email)
    response = await client.patch(
        "/api/v1/users/other@example.com/role", json={"role": "guide"}, headers=admin
    )
    assert response.status_code == 200
    assert response.json()["role"] == "guide"

    listing = await client.get("/api/v1/users", params={"role": "guide"}, headers=admin)
    assert {u["email"] for u in listing.json()["users"]} == {
        "guide@example.com",
        "guide2@example.com",
        "other@example.com",
    }


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
