"""
Tests for user, channel, comment and announcement API endpoints
"""

from httpx import AsyncClient


class TestChannel:

    async def test_channel_without_viewer(self, client: AsyncClient, owner):
        response = await client.get(f"/users/{owner.id}/channel")

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == owner.id
        assert (data["user"]["followers"], data["user"]["followings"]) == (0, 0)
        assert data["viewer"] == {"has_followed": False}

    async def test_missing_channel(self, client: AsyncClient):
        response = await client.get("/users/ghost/channel")
        assert response.status_code == 404

    async def test_followings(self, client: AsyncClient, make_user, owner, viewer, auth_headers):
        third = await make_user("third")
        await client.post(f"/engagements/users/{owner.id}/follow", headers=await auth_headers(viewer))
        await client.post(f"/engagements/users/{third.id}/follow", headers=await auth_headers(viewer))
        await client.post(f"/engagements/users/{third.id}/follow", headers=await auth_headers(owner))

        response = await client.get(f"/users/{viewer.id}/followings", params={"viewer_id": owner.id})

        data = response.json()
        assert data["user"]["id"] == viewer.id
        entries = {entry["user"]["id"]: entry for entry in data["followings"]}
        assert set(entries) == {owner.id, third.id}
        assert entries[third.id]["user"]["followers"] == 2
        assert entries[third.id]["viewer_has_followed"] is True
        assert entries[owner.id]["viewer_has_followed"] is False


class TestDashboard:

    async def test_dashboard_totals(self, client: AsyncClient, make_video, owner, viewer, auth_headers):
        draft = await make_video(owner, title="draft", publish=False)
        live = await make_video(owner, title="live")
        viewer_headers = await auth_headers(viewer)
        await client.post(f"/engagements/videos/{live.id}/like", headers=viewer_headers)
        await client.post(f"/engagements/videos/{live.id}/view", headers=viewer_headers)
        await client.post(f"/engagements/videos/{draft.id}/view")
        await client.post(f"/engagements/users/{owner.id}/follow", headers=viewer_headers)

        response = await client.get("/users/me/dashboard", headers=await auth_headers(owner))

        data = response.json()
        assert data["user"]["id"] == owner.id
        assert data["total_followers"] == 1
        assert data["total_likes"] == 1
        assert data["total_views"] == 2
        assert {v["id"] for v in data["videos"]} == {draft.id, live.id}

    async def test_dashboard_requires_auth(self, client: AsyncClient):
        response = await client.get("/users/me/dashboard")
        assert response.status_code == 401


class TestUpdateUser:

    async def test_update_profile(self, client: AsyncClient, owner, auth_headers):
        response = await client.patch(
            "/users/me",
            json={"description": "I make videos", "handle": "maker"},
            headers=await auth_headers(owner),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "I make videos"
        assert data["handle"] == "maker"
        assert data["name"] == "owner"

    async def test_duplicate_email(self, client: AsyncClient, owner, viewer, auth_headers):
        response = await client.patch(
            "/users/me",
            json={"email": viewer.email},
            headers=await auth_headers(owner),
        )

        assert response.status_code == 422


class TestCommentsAndAnnouncements:

    async def test_add_comment(self, client: AsyncClient, video, viewer, auth_headers):
        response = await client.post(
            "/comments",
            json={"video_id": video.id, "message": "Great video"},
            headers=await auth_headers(viewer),
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == viewer.id
        assert response.json()["video_id"] == video.id

    async def test_comment_on_missing_video(self, client: AsyncClient, viewer, auth_headers):
        response = await client.post(
            "/comments",
            json={"video_id": "missing", "message": "Hello?"},
            headers=await auth_headers(viewer),
        )
        assert response.status_code == 404

    async def test_empty_comment_rejected(self, client: AsyncClient, video, viewer, auth_headers):
        response = await client.post(
            "/comments",
            json={"video_id": video.id, "message": ""},
            headers=await auth_headers(viewer),
        )
        assert response.status_code == 422

    async def test_announcements_empty(self, client: AsyncClient, owner):
        response = await client.get(f"/announcements/by-user/{owner.id}")

        assert response.status_code == 200
        assert response.json()["announcements"] == []

    async def test_announcements_missing_user(self, client: AsyncClient):
        response = await client.get("/announcements/by-user/ghost")
        assert response.status_code == 404
