"""End-to-end tests for the HTTP API through an in-process ASGI transport."""

import io

import httpx
import pytest
from starlette.datastructures import Headers, UploadFile

from sports_tracker.api import create_app
from sports_tracker.api.routes.activities import _read_photo

PASSWORD = "secret1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestHealthAndErrors:
    """Tests for unauthenticated plumbing and the error envelope."""

    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "timestamp" in body

    async def test_unknown_route(self, client):
        response = await client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Route not found: /api/nope"}

    async def test_malformed_json(self, client):
        response = await client.post(
            "/api/login", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Bearer bogus"}, {"Authorization": "Token abc"}],
    )
    async def test_protected_routes_require_token(self, client, headers):
        response = await client.get("/api/activities", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized."}

    async def test_unexpected_errors_are_hidden(self, database):
        app = create_app()

        @app.get("/api/explode")
        async def explode():
            raise RuntimeError("secret internals")

        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
            response = await c.get("/api/explode")

        assert response.status_code == 500
        assert response.json() == {"error": "Unexpected server error."}


class TestAuthRoutes:
    """Tests for register, login, logout and username checks."""

    async def test_register(self, client):
        response = await client.post(
            "/api/register",
            json={"username": " carol ", "password": PASSWORD, "displayName": "Carol"},
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["message"] == "Registration successful. Please log in."
        assert data["user"]["username"] == "carol"
        assert data["user"]["displayName"] == "Carol"
        assert "passwordHash" not in data["user"]

    async def test_register_validation(self, client):
        response = await client.post("/api/register", json={"username": "carol"})
        assert response.status_code == 400
        assert response.json()["error"] == "username and password are required fields."

        response = await client.post("/api/register", json={"username": "carol", "password": "123"})
        assert response.status_code == 400

    async def test_register_duplicate(self, client, alice_headers):
        response = await client.post("/api/register", json={"username": "alice", "password": PASSWORD})
        assert response.status_code == 409
        assert response.json() == {"error": "Username already exists."}

    async def test_numeric_password_is_accepted(self, client):
        response = await client.post("/api/register", json={"username": "dave", "password": 123456})
        assert response.status_code == 201
        response = await client.post("/api/login", json={"username": "dave", "password": "123456"})
        assert response.status_code == 200

    async def test_check_username(self, client, alice_headers):
        response = await client.get("/api/check-username", params={"username": " alice "})
        assert response.json()["data"] == {"username": "alice", "available": False}

        response = await client.get("/api/check-username", params={"username": "zed"})
        assert response.json()["data"] == {"username": "zed", "available": True}

        response = await client.get("/api/check-username")
        assert response.status_code == 400

    async def test_login_failures_are_uniform(self, client, alice_headers):
        unknown = await client.post("/api/login", json={"username": "nobody", "password": PASSWORD})
        wrong = await client.post("/api/login", json={"username": "alice", "password": "nope-nope"})
        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json() == {"error": "Invalid username or password."}

    async def test_logout_revokes_only_that_token(self, client, login_as):
        first = await login_as("erin")
        response = await client.post("/api/login", json={"username": "erin", "password": PASSWORD})
        second = {"Authorization": f"Bearer {response.json()['data']['token']}"}

        response = await client.post("/api/logout", headers=first)
        assert response.status_code == 200

        assert (await client.get("/api/activities", headers=first)).status_code == 401
        assert (await client.get("/api/activities", headers=second)).status_code == 200


class TestActivityRoutes:
    """Tests for activity CRUD over HTTP."""

    async def test_create_json(self, client, alice_headers):
        response = await client.post(
            "/api/activities",
            json={"date": "2024-03-10T23:45:00-08:00", "sport": "Run", "durationMinutes": "42"},
            headers=alice_headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["date"] == "2024-03-10"
        assert data["durationMinutes"] == 42
        assert data["intensity"] == "moderate"
        assert data["isPublic"] is False
        assert data["photoUrl"] is None
        assert data["ownerName"] == "Alice"

    async def test_create_multipart_with_photo(self, client, alice_headers):
        response = await client.post(
            "/api/activities",
            data={"date": "2024-03-11", "sport": "Climb", "durationMinutes": "90", "isPublic": "on"},
            files={"photo": ("wall.png", PNG_BYTES, "image/png")},
            headers=alice_headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["isPublic"] is True
        assert data["photoUrl"].startswith("data:image/png;base64,")

    async def test_create_rejects_non_image(self, client, alice_headers):
        response = await client.post(
            "/api/activities",
            data={"date": "2024-03-11", "sport": "Climb", "durationMinutes": "90"},
            files={"photo": ("notes.txt", b"hello", "text/plain")},
            headers=alice_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Only image uploads are allowed."}

    async def test_create_rejects_oversized_photo(self, client, alice_headers):
        response = await client.post(
            "/api/activities",
            data={"date": "2024-03-11", "sport": "Climb", "durationMinutes": "90"},
            files={"photo": ("big.jpg", b"x" * (5 * 1024 * 1024 + 1), "image/jpeg")},
            headers=alice_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Photo must be smaller than 5 MB."}

    async def test_create_missing_fields(self, client, alice_headers):
        response = await client.post("/api/activities", json={"sport": "Run"}, headers=alice_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "date, sport, and durationMinutes are required fields."

    async def test_update_keeps_photo_and_clears_visibility(self, client, alice_headers):
        created = await client.post(
            "/api/activities",
            data={"date": "2024-03-11", "sport": "Climb", "durationMinutes": "90", "isPublic": "true"},
            files={"photo": ("wall.png", PNG_BYTES, "image/png")},
            headers=alice_headers,
        )
        activity = created.json()["data"]

        response = await client.put(
            f"/api/activities/{activity['id']}",
            json={"date": "2024-03-12", "sport": "Boulder", "durationMinutes": 60},
            headers=alice_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["sport"] == "Boulder"
        assert data["photoUrl"] == activity["photoUrl"]
        assert data["isPublic"] is False

        response = await client.put(
            f"/api/activities/{activity['id']}",
            json={"date": "2024-03-12", "sport": "Boulder", "durationMinutes": 60, "removePhoto": True},
            headers=alice_headers,
        )
        assert response.json()["data"]["photoUrl"] is None

    async def test_get_own_activity(self, client, alice_headers, bob_headers):
        created = await client.post(
            "/api/activities",
            json={"date": "2024-03-10", "sport": "Run", "durationMinutes": 30},
            headers=alice_headers,
        )
        activity_id = created.json()["data"]["id"]

        assert (await client.get(f"/api/activities/{activity_id}", headers=alice_headers)).status_code == 200
        assert (await client.get(f"/api/activities/{activity_id}", headers=bob_headers)).status_code == 404

    async def test_invalid_id_is_not_found(self, client, alice_headers):
        response = await client.delete("/api/activities/not-a-uuid", headers=alice_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Activity not found."}


class TestAccountRoutes:
    """Tests for password change and account deletion."""

    async def test_change_password_revokes_tokens(self, client, alice_headers):
        response = await client.put(
            "/api/user/password",
            json={"currentPassword": PASSWORD, "newPassword": "brand-new"},
            headers=alice_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Password updated successfully. Please log in again."

        assert (await client.get("/api/activities", headers=alice_headers)).status_code == 401
        old = await client.post("/api/login", json={"username": "alice", "password": PASSWORD})
        assert old.status_code == 401
        new = await client.post("/api/login", json={"username": "alice", "password": "brand-new"})
        assert new.status_code == 200

    async def test_change_password_wrong_current(self, client, alice_headers):
        response = await client.put(
            "/api/user/password",
            json={"currentPassword": "wrong-one", "newPassword": "brand-new"},
            headers=alice_headers,
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Current password is incorrect."}
        assert (await client.get("/api/activities", headers=alice_headers)).status_code == 200

    async def test_delete_account(self, client, alice_headers):
        response = await client.request(
            "DELETE", "/api/user", json={"password": "wrong-one"}, headers=alice_headers
        )
        assert response.status_code == 401

        response = await client.request(
            "DELETE", "/api/user", json={"password": PASSWORD}, headers=alice_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Account deleted successfully."

        assert (await client.get("/api/activities", headers=alice_headers)).status_code == 401
        login = await client.post("/api/login", json={"username": "alice", "password": PASSWORD})
        assert login.status_code == 401


class TestWeatherRoute:
    """Tests for the weather endpoint without a configured provider."""

    async def test_degrades_without_api_key(self, client, alice_headers):
        response = await client.get(
            "/api/weather", params={"lat": "22.62", "lon": "120.30"}, headers=alice_headers
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["available"] is False
        assert data["condition"] == "Weather data unavailable"
        assert data["stationName"] == "高雄"
        assert data["temperatureC"] is None

    async def test_requires_token(self, client):
        assert (await client.get("/api/weather")).status_code == 401


class TestSocialScenario:
    """Alice shares an activity; Bob engages with it; ownership holds throughout."""

    async def test_full_flow(self, client, alice_headers, bob_headers):
        # Alice logs a public and a private activity
        response = await client.post(
            "/api/activities",
            json={"date": "2024-01-01", "sport": "Run", "durationMinutes": 30, "isPublic": True},
            headers=alice_headers,
        )
        public_id = response.json()["data"]["id"]
        await client.post(
            "/api/activities",
            json={"date": "2024-01-02", "sport": "Secret", "durationMinutes": 10},
            headers=alice_headers,
        )

        # Bob sees only the public one, flagged as not his
        feed = (await client.get("/api/activities/public", headers=bob_headers)).json()["data"]
        assert [a["id"] for a in feed] == [public_id]
        assert feed[0]["isOwner"] is False
        assert feed[0]["ownerName"] == "Alice"

        # Bob cannot edit or delete it, and gets 404 rather than 403
        response = await client.put(
            f"/api/activities/{public_id}",
            json={"date": "2024-01-01", "sport": "Hacked", "durationMinutes": 1},
            headers=bob_headers,
        )
        assert response.status_code == 404
        assert (await client.delete(f"/api/activities/{public_id}", headers=bob_headers)).status_code == 404

        # Bob likes it once
        response = await client.post(f"/api/activities/{public_id}/like", headers=bob_headers)
        assert response.status_code == 200
        assert response.json()["data"]["likeCount"] == 1
        assert "likeId" in response.json()["data"]

        response = await client.post(f"/api/activities/{public_id}/like", headers=bob_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Already liked this activity."}

        status = (await client.get(f"/api/activities/{public_id}/likes", headers=bob_headers)).json()
        assert status["data"] == {"likeCount": 1, "userLiked": True}
        status = (await client.get(f"/api/activities/{public_id}/likes", headers=alice_headers)).json()
        assert status["data"] == {"likeCount": 1, "userLiked": False}

        # Bob comments; Alice cannot delete his comment
        response = await client.post(
            f"/api/activities/{public_id}/comments", json={"content": " Nice run! "}, headers=bob_headers
        )
        assert response.status_code == 201
        comment = response.json()["data"]
        assert comment["content"] == "Nice run!"
        assert comment["userName"] == "bob"
        assert comment["userDisplayName"] == "Bob"

        response = await client.post(
            f"/api/activities/{public_id}/comments", json={"content": "   "}, headers=bob_headers
        )
        assert response.status_code == 400

        response = await client.delete(f"/api/comments/{comment['id']}", headers=alice_headers)
        assert response.status_code == 403
        assert response.json() == {"error": "You can only delete your own comments."}

        comments = (await client.get(f"/api/activities/{public_id}/comments", headers=alice_headers)).json()
        assert [c["id"] for c in comments["data"]] == [comment["id"]]

        # Bob unlikes; unliking again is a 404
        response = await client.delete(f"/api/activities/{public_id}/like", headers=bob_headers)
        assert response.json()["data"] == {"likeCount": 0}
        response = await client.delete(f"/api/activities/{public_id}/like", headers=bob_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Like not found."}

        # Alice deletes the activity; engagement goes with it
        await client.post(f"/api/activities/{public_id}/like", headers=bob_headers)
        response = await client.delete(f"/api/activities/{public_id}", headers=alice_headers)
        assert response.status_code == 200
        assert response.json()["data"] == {"id": public_id}

        comments = (await client.get(f"/api/activities/{public_id}/comments", headers=bob_headers)).json()
        assert comments["data"] == []
        status = (await client.get(f"/api/activities/{public_id}/likes", headers=bob_headers)).json()
        assert status["data"] == {"likeCount": 0, "userLiked": False}
        assert (await client.post(f"/api/activities/{public_id}/like", headers=bob_headers)).status_code == 404
        assert (await client.get("/api/activities/public", headers=bob_headers)).json()["data"] == []

    async def test_private_activity_shared_later(self, client, alice_headers, bob_headers):
        response = await client.post(
            "/api/activities",
            json={"date": "2024-03-05", "sport": "Swim", "durationMinutes": 40},
            headers=alice_headers,
        )
        assert response.status_code == 201
        activity = response.json()["data"]

        own = (await client.get("/api/activities", headers=alice_headers)).json()["data"]
        assert [a["id"] for a in own] == [activity["id"]]
        assert own[0]["isPublic"] is False
        assert own[0]["date"] == "2024-03-05"
        assert (await client.get("/api/activities/public", headers=bob_headers)).json()["data"] == []

        response = await client.put(
            f"/api/activities/{activity['id']}",
            json={"date": "2024-03-05", "sport": "Swim", "durationMinutes": 40, "isPublic": "true"},
            headers=alice_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["isPublic"] is True

        feed = (await client.get("/api/activities/public", headers=bob_headers)).json()["data"]
        assert [a["id"] for a in feed] == [activity["id"]]
        assert feed[0]["isOwner"] is False
        assert feed[0]["ownerName"] == "Alice"
        assert feed[0]["date"] == "2024-03-05"


class TestPhotoUpload:
    """Tests for reading multipart photo uploads."""

    async def test_read_stops_past_the_size_ceiling(self):
        upload = UploadFile(
            file=io.BytesIO(b"x" * (12 * 1024 * 1024)),
            filename="huge.jpg",
            headers=Headers({"content-type": "image/jpeg"}),
        )

        photo = await _read_photo(upload)

        assert photo.media_type == "image/jpeg"
        assert len(photo.data) == 5 * 1024 * 1024 + 1

    async def test_empty_upload_is_no_photo(self):
        upload = UploadFile(file=io.BytesIO(b""), filename="empty.png")
        assert await _read_photo(upload) is None
