from tests.conftest import TEST_PASSWORD


class TestUsersEndpoint:
    async def test_create_user_hides_hash(self, app_client):
        response = await app_client.post(
            "/api/users",
            json={"username": "dave", "email": "dave@example.com", "password": "dave-password-123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "dave"
        assert "passwordHash" not in data
        assert "password" not in data

    async def test_short_password_rejected(self, app_client):
        response = await app_client.post(
            "/api/users", json={"username": "eve", "email": "eve@example.com", "password": "short"}
        )
        assert response.status_code == 400

    async def test_bad_email_rejected(self, app_client):
        response = await app_client.post(
            "/api/users", json={"username": "eve", "email": "not-an-email", "password": "long-enough-pass"}
        )
        assert response.status_code == 400

    async def test_duplicate_username(self, app_client):
        response = await app_client.post(
            "/api/users", json={"username": "alice", "email": "a2@example.com", "password": "long-enough-pass"}
        )
        assert response.status_code == 409

    async def test_get_update_delete(self, app_client, relay_world):
        url = f"/api/users/{relay_world.user_id}"
        assert (await app_client.get(url)).json()["username"] == "alice"

        updated = await app_client.put(url, json={"email": "alice@new.example.com"})
        assert updated.json()["email"] == "alice@new.example.com"

        assert (await app_client.delete(url)).status_code == 204
        assert (await app_client.get(url)).status_code == 404


class TestLogin:
    async def test_login_success(self, app_client, relay_world):
        response = await app_client.post("/api/login", json={"username": "alice", "password": TEST_PASSWORD})
        assert response.status_code == 200
        assert response.json() == {"userId": relay_world.user_id}

    async def test_login_wrong_password(self, app_client):
        response = await app_client.post("/api/login", json={"username": "alice", "password": "wrong-password"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "authentication_failed"

    async def test_login_unknown_user(self, app_client):
        response = await app_client.post("/api/login", json={"username": "mallory", "password": TEST_PASSWORD})
        assert response.status_code == 401
