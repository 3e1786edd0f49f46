"""
Tests for playlist API endpoints
"""

from httpx import AsyncClient


class TestPlaylistAPI:

    async def test_add_playlist(self, client: AsyncClient, viewer, auth_headers):
        response = await client.post(
            "/playlists",
            json={"title": "Road trip", "description": "Songs for the road"},
            headers=await auth_headers(viewer),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Road trip"
        assert data["user_id"] == viewer.id

    async def test_description_length_bounds(self, client: AsyncClient, viewer, auth_headers):
        headers = await auth_headers(viewer)

        too_short = await client.post("/playlists", json={"title": "A", "description": "abc"}, headers=headers)
        too_long = await client.post("/playlists", json={"title": "B", "description": "x" * 51}, headers=headers)

        assert too_short.status_code == 422
        assert too_long.status_code == 422

    async def test_reserved_title_rejected(self, client: AsyncClient, viewer, auth_headers):
        response = await client.post(
            "/playlists", json={"title": "Liked Videos"}, headers=await auth_headers(viewer)
        )

        assert response.status_code == 422
        assert response.json()["details"] == {"field": "title"}

    async def test_toggle_video_in_playlist(self, client: AsyncClient, video, viewer, auth_headers):
        headers = await auth_headers(viewer)
        playlist_id = (await client.post("/playlists", json={"title": "Later"}, headers=headers)).json()["id"]

        response = await client.post(f"/playlists/{playlist_id}/videos/{video.id}", headers=headers)
        assert response.json() == {"active": True, "conflict_ignored": False}

        detail = (await client.get(f"/playlists/{playlist_id}")).json()
        assert detail["playlist"]["video_count"] == 1
        assert detail["playlist"]["playlist_thumbnail"] == video.thumbnail_url
        assert detail["videos"][0]["id"] == video.id
        assert detail["authors"][0]["id"] == video.user_id
        assert detail["user"]["id"] == viewer.id

        response = await client.post(f"/playlists/{playlist_id}/videos/{video.id}", headers=headers)
        assert response.json()["active"] is False

    async def test_toggle_in_someone_elses_playlist(self, client: AsyncClient, video, owner, viewer, auth_headers):
        playlist_id = (await client.post(
            "/playlists", json={"title": "Mine"}, headers=await auth_headers(owner)
        )).json()["id"]

        response = await client.post(
            f"/playlists/{playlist_id}/videos/{video.id}", headers=await auth_headers(viewer)
        )

        assert response.status_code == 403

    async def test_toggle_in_missing_playlist(self, client: AsyncClient, video, viewer, auth_headers):
        response = await client.post(f"/playlists/missing/videos/{video.id}", headers=await auth_headers(viewer))
        assert response.status_code == 404

    async def test_by_title_is_idempotent(self, client: AsyncClient, viewer):
        params = {"user_id": viewer.id, "title": "Liked Videos"}

        first = (await client.get("/playlists/by-title", params=params)).json()
        second = (await client.get("/playlists/by-title", params=params)).json()

        assert first["playlist"]["id"] == second["playlist"]["id"]
        playlists = (await client.get(f"/playlists/by-user/{viewer.id}")).json()
        assert [p["title"] for p in playlists] == ["Liked Videos"]

    async def test_by_user(self, client: AsyncClient, make_video, owner, viewer, auth_headers):
        headers = await auth_headers(viewer)
        first = await make_video(owner, title="one")
        second = await make_video(owner, title="two")
        playlist_id = (await client.post("/playlists", json={"title": "Both"}, headers=headers)).json()["id"]
        await client.post("/playlists", json={"title": "Empty"}, headers=headers)
        await client.post(f"/playlists/{playlist_id}/videos/{first.id}", headers=headers)
        await client.post(f"/playlists/{playlist_id}/videos/{second.id}", headers=headers)

        playlists = (await client.get(f"/playlists/by-user/{viewer.id}")).json()

        summary = {p["title"]: p for p in playlists}
        assert summary["Both"]["video_count"] == 2
        assert summary["Both"]["playlist_thumbnail"] == first.thumbnail_url
        assert summary["Empty"]["video_count"] == 0
        assert summary["Empty"]["playlist_thumbnail"] is None

    async def test_save_data(self, client: AsyncClient, video, viewer, auth_headers):
        headers = await auth_headers(viewer)
        await client.post(f"/engagements/videos/{video.id}/like", headers=headers)
        playlist_id = (await client.post("/playlists", json={"title": "Keep"}, headers=headers)).json()["id"]
        await client.post(f"/playlists/{playlist_id}/videos/{video.id}", headers=headers)

        response = await client.get("/playlists/save-data", headers=headers)

        data = response.json()
        assert [entry["title"] for entry in data] == ["Keep"]
        assert data[0]["video_ids"] == [video.id]

    async def test_missing_playlist(self, client: AsyncClient):
        response = await client.get("/playlists/nope")
        assert response.status_code == 404
