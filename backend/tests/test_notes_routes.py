"""
Jotter Backend: Notes API Tests
================================

What:  End-to-end tests for /notes through the auth gate and the database.

What we test:
    ✅ No Authorization header → 401; bad, expired, or foreign-key tokens → 403
    ✅ Create → list round trip with id, owner and created_at
    ✅ Update and delete by the owner
    ✅ Another user's note: 404 on update/delete, invisible in list
    ✅ Non-integer note id → 400
"""

from datetime import datetime, timedelta, timezone

import pytest

from jotter.services.token_service import TokenService


class TestNotesAuthGate:

    @pytest.mark.asyncio
    async def test_missing_header(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 401
        assert response.json()["message"] == "Missing token"

    @pytest.mark.asyncio
    async def test_garbage_token(self, test_client):
        response = await test_client.get("/notes", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_scheme_without_token(self, test_client):
        response = await test_client.get("/notes", headers={"Authorization": "Bearer"})
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_expired_token(self, test_client, token_service):
        token = token_service.issue(1, now=datetime.now(timezone.utc) - timedelta(hours=2))

        response = await test_client.get("/notes", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret(self, test_client):
        token = TokenService(secret="not-the-server-secret").issue(1)

        response = await test_client.get("/notes", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_every_route_is_guarded(self, test_client):
        calls = [
            test_client.post("/notes", json={"title": "t"}),
            test_client.get("/notes"),
            test_client.put("/notes/1", json={"title": "t"}),
            test_client.delete("/notes/1"),
        ]
        for call in calls:
            assert (await call).status_code == 401


class TestNotesCrud:

    @pytest.mark.asyncio
    async def test_create_and_list(self, test_client, auth_header):
        created = await test_client.post("/notes", json={"title": "T", "content": "C"}, headers=auth_header)

        assert created.status_code == 201
        assert created.json()["message"] == "Note added successfully"
        note_id = created.json()["noteId"]

        listed = await test_client.get("/notes", headers=auth_header)

        assert listed.status_code == 200
        [note] = listed.json()["notes"]
        assert note["id"] == note_id
        assert note["title"] == "T"
        assert note["content"] == "C"
        assert note["created_at"]
        assert set(note) == {"id", "owner_id", "title", "content", "created_at"}

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client, auth_header):
        response = await test_client.get("/notes", headers=auth_header)
        assert response.json() == {"notes": []}

    @pytest.mark.asyncio
    async def test_create_without_fields(self, test_client, auth_header):
        created = await test_client.post("/notes", json={}, headers=auth_header)
        assert created.status_code == 201

        [note] = (await test_client.get("/notes", headers=auth_header)).json()["notes"]
        assert note["title"] is None
        assert note["content"] is None

    @pytest.mark.asyncio
    async def test_update(self, test_client, auth_header):
        note_id = (await test_client.post("/notes", json={"title": "a", "content": "b"}, headers=auth_header)).json()["noteId"]

        response = await test_client.put(f"/notes/{note_id}", json={"title": "x", "content": "y"}, headers=auth_header)

        assert response.status_code == 200
        assert response.json() == {"message": "Note updated successfully"}
        [note] = (await test_client.get("/notes", headers=auth_header)).json()["notes"]
        assert (note["title"], note["content"]) == ("x", "y")

    @pytest.mark.asyncio
    async def test_delete(self, test_client, auth_header):
        note_id = (await test_client.post("/notes", json={"title": "bye"}, headers=auth_header)).json()["noteId"]

        response = await test_client.delete(f"/notes/{note_id}", headers=auth_header)

        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully"}
        assert (await test_client.get("/notes", headers=auth_header)).json()["notes"] == []

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, test_client, auth_header):
        response = await test_client.put("/notes/999", json={"title": "x"}, headers=auth_header)

        assert response.status_code == 404
        assert response.json()["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_non_integer_id(self, test_client, auth_header):
        response = await test_client.delete("/notes/abc", headers=auth_header)
        assert response.status_code == 400


class TestNotesOwnership:

    @pytest.mark.asyncio
    async def test_notes_are_private(self, test_client, auth_header, second_auth_header):
        await test_client.post("/notes", json={"title": "alice's"}, headers=auth_header)

        response = await test_client.get("/notes", headers=second_auth_header)

        assert response.json()["notes"] == []

    @pytest.mark.asyncio
    async def test_other_user_cannot_update(self, test_client, auth_header, second_auth_header):
        note_id = (await test_client.post("/notes", json={"title": "mine", "content": "secret"}, headers=auth_header)).json()["noteId"]

        response = await test_client.put(f"/notes/{note_id}", json={"title": "pwned"}, headers=second_auth_header)

        assert response.status_code == 404
        [note] = (await test_client.get("/notes", headers=auth_header)).json()["notes"]
        assert (note["title"], note["content"]) == ("mine", "secret")

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, test_client, auth_header, second_auth_header):
        note_id = (await test_client.post("/notes", json={"title": "mine"}, headers=auth_header)).json()["noteId"]

        response = await test_client.delete(f"/notes/{note_id}", headers=second_auth_header)

        assert response.status_code == 404
        assert len((await test_client.get("/notes", headers=auth_header)).json()["notes"]) == 1

    @pytest.mark.asyncio
    async def test_owner_id_matches_token(self, test_client, auth_header, token_service):
        await test_client.post("/notes", json={"title": "t"}, headers=auth_header)
        user_id = token_service.verify(auth_header["Authorization"].split()[1])

        [note] = (await test_client.get("/notes", headers=auth_header)).json()["notes"]

        assert note["owner_id"] == user_id


class TestNotesBodyHandling:

    @pytest.mark.asyncio
    async def test_create_without_body(self, test_client, auth_header):
        created = await test_client.post("/notes", headers=auth_header)

        assert created.status_code == 201
        [note] = (await test_client.get("/notes", headers=auth_header)).json()["notes"]
        assert note["id"] == created.json()["noteId"]
        assert note["title"] is None
        assert note["content"] is None

    @pytest.mark.asyncio
    async def test_update_without_body_clears_note(self, test_client, auth_header):
        note_id = (await test_client.post("/notes", json={"title": "a", "content": "b"}, headers=auth_header)).json()["noteId"]

        response = await test_client.put(f"/notes/{note_id}", headers=auth_header)

        assert response.status_code == 200
        [note] = (await test_client.get("/notes", headers=auth_header)).json()["notes"]
        assert (note["title"], note["content"]) == (None, None)

    @pytest.mark.asyncio
    async def test_long_title_round_trips(self, test_client, auth_header):
        title = "t" * 300

        created = await test_client.post("/notes", json={"title": title, "content": "c"}, headers=auth_header)

        assert created.status_code == 201
        [note] = (await test_client.get("/notes", headers=auth_header)).json()["notes"]
        assert note["title"] == title
