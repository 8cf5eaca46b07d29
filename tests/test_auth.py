from tathya.core.security import create_access_token, decode_token

API = "/api/v1"


async def test_register_returns_tokens_and_profile(client):
    response = await client.post(
        f"{API}/auth/register",
        json={"full_name": "Nia", "email": "Nia@Example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "nia@example.com"
    assert body["user"]["role"] == "user"


async def test_register_duplicate_and_invalid(client, alice):
    duplicate = await client.post(
        f"{API}/auth/register",
        json={"full_name": "Again", "email": alice.email, "password": "secret123"},
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Email already registered"

    short_password = await client.post(
        f"{API}/auth/register", json={"full_name": "X", "email": "x@example.com", "password": "123"}
    )
    assert short_password.status_code == 422


async def test_login(client, alice):
    ok = await client.post(f"{API}/auth/login", json={"email": alice.email, "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["user"]["id"] == str(alice.id)

    bad = await client.post(f"{API}/auth/login", json={"email": alice.email, "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid email or password"


async def test_me_and_refresh(client, alice):
    me = await client.get(f"{API}/auth/me", headers=alice.headers)
    assert me.json()["full_name"] == "Alice Rao"

    refreshed = await client.post(f"{API}/auth/refresh", json={"refresh_token": alice.token["refresh_token"]})
    assert refreshed.status_code == 200
    assert decode_token(refreshed.json()["access_token"]) == alice.id

    # an access token is not a refresh token
    wrong_type = await client.post(f"{API}/auth/refresh", json={"refresh_token": alice.token["access_token"]})
    assert wrong_type.status_code == 401


async def test_invalid_token_is_anonymous_on_public_routes(client, alice):
    headers = {"Authorization": "Bearer not-a-jwt"}
    assert (await client.get(f"{API}/posts", headers=headers)).status_code == 200
    assert (await client.get(f"{API}/auth/me", headers=headers)).status_code == 401

    refresh_as_access = {"Authorization": f"Bearer {alice.token['refresh_token']}"}
    assert (await client.get(f"{API}/auth/me", headers=refresh_as_access)).status_code == 401


def test_decode_token_roundtrip_and_garbage():
    token = create_access_token("2b1b6f0e-8c59-4d0e-9a4c-8f1c3c2d0b11")
    assert str(decode_token(token)) == "2b1b6f0e-8c59-4d0e-9a4c-8f1c3c2d0b11"
    assert decode_token(token, expected_type="refresh") is None
    assert decode_token("garbage") is None
    assert decode_token(create_access_token("not-a-uuid")) is None
