class TestConversationsEndpoint:
    async def test_create_and_list_by_user(self, app_client, relay_world):
        response = await app_client.post("/api/conversations", json={"title": "Trip plans", "userId": "u2"})
        assert response.status_code == 201
        created = response.json()
        assert created["userId"] == "u2"
        assert isinstance(created["timestamp"], int)

        mine = await app_client.get("/api/conversations", params={"userId": "u2"})
        assert [c["title"] for c in mine.json()] == ["Trip plans"]

        everything = await app_client.get("/api/conversations")
        assert len(everything.json()) == 2

    async def test_default_title(self, app_client):
        response = await app_client.post("/api/conversations", json={"userId": "u2"})
        assert response.json()["title"] == "New Conversation"

    async def test_get_update_delete(self, app_client, relay_world):
        url = f"/api/conversations/{relay_world.conversation_id}"
        await app_client.post(
            "/api/messages",
            json={"conversationId": relay_world.conversation_id, "message": "hi", "role": "user"},
        )

        updated = await app_client.put(url, json={"title": "Renamed"})
        assert updated.status_code == 200
        assert updated.json()["title"] == "Renamed"

        deleted = await app_client.delete(url)
        assert deleted.status_code == 204

        missing = await app_client.get(url)
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "conversation_not_found"

        messages = await app_client.get(f"/api/messages/{relay_world.conversation_id}")
        assert messages.json() == []

    async def test_missing_user_id(self, app_client):
        response = await app_client.post("/api/conversations", json={"title": "x"})
        assert response.status_code == 400
