import pytest

REGISTER_URL = "/api/users/register"
LOGIN_URL = "/api/users/login"


def _registration(username="frank", email="frank@example.com", password="ValidPass1!"):
    return {"username": username, "email": email, "password": password}


@pytest.mark.asyncio
async def test_register_login_and_me(client):
    response = await client.post(REGISTER_URL, json=_registration())
    assert response.status_code == 201
    assert response.json() == {"message": "User registered successfully."}

    response = await client.post(
        LOGIN_URL, json={"username": "frank", "password": "ValidPass1!"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"

    response = await client.get(
        "/api/users/me", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert response.status_code == 200
    me = response.json()
    assert me["username"] == "frank"
    assert me["email"] == "frank@example.com"
    assert "hashed_password" not in me


@pytest.mark.asyncio
async def test_login_with_email(client):
    await client.post(REGISTER_URL, json=_registration())

    response = await client.post(
        LOGIN_URL, json={"username": "frank@example.com", "password": "ValidPass1!"}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_weak_password_is_rejected_with_reason(client):
    response = await client.post(REGISTER_URL, json=_registration(password="short1!"))

    assert response.status_code == 400
    assert response.json()["detail"] == "Password must be at least 8 characters long."


@pytest.mark.asyncio
async def test_duplicate_username_or_email_is_rejected(client):
    await client.post(REGISTER_URL, json=_registration())

    same_name = await client.post(
        REGISTER_URL, json=_registration(email="other@example.com")
    )
    same_email = await client.post(REGISTER_URL, json=_registration(username="other"))

    assert same_name.status_code == 400
    assert same_email.status_code == 400
    assert same_name.json()["detail"] == "Username or Email already exists."


@pytest.mark.asyncio
async def test_bad_credentials_give_uniform_401(client):
    await client.post(REGISTER_URL, json=_registration())

    unknown = await client.post(LOGIN_URL, json={"username": "nouser", "password": "anypass"})
    wrong = await client.post(LOGIN_URL, json={"username": "frank", "password": "wrongpass"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


@pytest.mark.asyncio
async def test_me_requires_valid_token(client):
    missing = await client.get("/api/users/me")
    garbage = await client.get(
        "/api/users/me", headers={"Authorization": "Bearer not-a-token"}
    )

    assert missing.status_code == 401
    assert garbage.status_code == 401
