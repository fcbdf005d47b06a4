"""API tests: auth, profile, tasks, events, items, messages and health."""
from __future__ import annotations

import jwt

from conftest import TEST_SECRET, register_and_login


# =============================================================================
# Auth
# =============================================================================

class TestAuth:
    """Registration, login cookie and logout."""

    def test_register_returns_user_without_password(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "Alice@Example.com", "password": "secret123"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "alice@example.com"
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]
        assert "set-cookie" not in resp.headers

    def test_register_missing_field(self, client):
        resp = client.post("/api/auth/register", json={"name": "Alice", "email": "a@example.com"})
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "All fields are required"}

    def test_register_short_password(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "a@example.com", "password": "123"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Password must be at least 6 characters"

    def test_register_long_password(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "a@example.com", "password": "x" * 80},
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Password cannot exceed 72 bytes"}

    def test_register_duplicate_email(self, client):
        payload = {"name": "Alice", "email": "a@example.com", "password": "secret123"}
        client.post("/api/auth/register", json=payload)
        resp = client.post("/api/auth/register", json=dict(payload, email="A@EXAMPLE.COM"))
        assert resp.status_code == 400
        assert resp.json()["error"] == "User with this email already exists"

    def test_login_sets_cookie_and_token(self, client):
        client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret123"},
        )
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Login successful"

        cookie = resp.headers["set-cookie"]
        assert cookie.startswith("auth-token=")
        assert "HttpOnly" in cookie
        assert "samesite=lax" in cookie.lower()

        claims = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])
        assert claims["userId"] == body["user"]["id"]
        assert claims["email"] == "alice@example.com"

    def test_login_wrong_password(self, client):
        client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret123"},
        )
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "Invalid email or password"}
        assert "set-cookie" not in resp.headers

    def test_login_unknown_email_same_message(self, client):
        resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid email or password"

    def test_cookie_authenticates_later_requests(self, client):
        register_and_login(client)
        # No header: the cookie jar carries the token
        resp = client.get("/api/profile")
        assert resp.status_code == 200
        assert resp.json()["user"]["name"] == "Alice"

    def test_logout_clears_cookie(self, client):
        register_and_login(client)
        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert 'auth-token=""' in resp.headers["set-cookie"] or "Max-Age=0" in resp.headers["set-cookie"]

    def test_forged_token_rejected(self, client):
        register_and_login(client)
        client.cookies.clear()
        forged = jwt.encode({"userId": "someone"}, "other-secret", algorithm="HS256")
        resp = client.get("/api/tasks", headers={"Authorization": f"Bearer {forged}"})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "Unauthorized"}

    def test_missing_token_rejected(self, client):
        resp = client.get("/api/tasks")
        assert resp.status_code == 401


# =============================================================================
# Profile
# =============================================================================

class TestProfile:
    def test_update_name_and_preferences(self, client):
        _, headers = register_and_login(client)
        resp = client.put(
            "/api/profile",
            json={"name": "Alice B", "bio": "Hi", "preferences": {"theme": "dark"}},
            headers=headers,
        )
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["name"] == "Alice B"
        assert user["bio"] == "Hi"
        assert user["preferences"]["theme"] == "dark"
        # Untouched preferences are kept
        assert user["preferences"]["language"] == "en"

    def test_password_change(self, client):
        _, headers = register_and_login(client)
        resp = client.put(
            "/api/profile",
            json={"currentPassword": "secret123", "newPassword": "newsecret"},
            headers=headers,
        )
        assert resp.status_code == 200

        old = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        assert old.status_code == 401
        new = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "newsecret"})
        assert new.status_code == 200

    def test_password_change_wrong_current(self, client):
        _, headers = register_and_login(client)
        resp = client.put(
            "/api/profile",
            json={"currentPassword": "nope-nope", "newPassword": "newsecret"},
            headers=headers,
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Current password is incorrect"

    def test_password_change_too_long(self, client):
        _, headers = register_and_login(client)
        resp = client.put(
            "/api/profile",
            json={"currentPassword": "secret123", "newPassword": "x" * 80},
            headers=headers,
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "New password cannot exceed 72 bytes"


# =============================================================================
# Tasks
# =============================================================================

class TestTasks:
    def test_create_and_list(self, client):
        _, headers = register_and_login(client)
        resp = client.post(
            "/api/tasks",
            json={"title": "Write report", "dueDate": "2024-03-10", "priority": "high", "tags": ["work"]},
            headers=headers,
        )
        assert resp.status_code == 201
        task = resp.json()["data"]
        assert task["title"] == "Write report"
        assert task["status"] == "pending"
        assert task["dueDate"].startswith("2024-03-10")

        listed = client.get("/api/tasks", headers=headers).json()["data"]
        assert [t["id"] for t in listed] == [task["id"]]

    def test_missing_title(self, client):
        _, headers = register_and_login(client)
        resp = client.post("/api/tasks", json={"description": "no title"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_invalid_status(self, client):
        _, headers = register_and_login(client)
        resp = client.post("/api/tasks", json={"title": "x", "status": "done"}, headers=headers)
        assert resp.status_code == 400

    def test_other_users_task_is_not_found(self, client):
        _, alice = register_and_login(client)
        task_id = client.post("/api/tasks", json={"title": "Private"}, headers=alice).json()["data"]["id"]

        _, bob = register_and_login(client, name="Bob", email="bob@example.com")
        assert client.get(f"/api/tasks/{task_id}", headers=bob).status_code == 404
        assert client.put(f"/api/tasks/{task_id}", json={"title": "Mine"}, headers=bob).status_code == 404
        assert client.delete(f"/api/tasks/{task_id}", headers=bob).status_code == 404
        assert client.get("/api/tasks", headers=bob).json()["data"] == []

        # Still intact for its owner
        assert client.get(f"/api/tasks/{task_id}", headers=alice).json()["data"]["title"] == "Private"

    def test_update_keeps_owner_and_created(self, client):
        _, headers = register_and_login(client)
        created = client.post("/api/tasks", json={"title": "Draft"}, headers=headers).json()["data"]
        resp = client.put(
            f"/api/tasks/{created['id']}",
            json={"status": "completed", "userId": "someone-else"},
            headers=headers,
        )
        updated = resp.json()["data"]
        assert updated["status"] == "completed"
        assert updated["userId"] == created["userId"]
        assert updated["createdAt"] == created["createdAt"]

    def test_delete(self, client):
        _, headers = register_and_login(client)
        task_id = client.post("/api/tasks", json={"title": "Temp"}, headers=headers).json()["data"]["id"]
        resp = client.delete(f"/api/tasks/{task_id}", headers=headers)
        assert resp.json() == {"success": True, "message": "Task deleted successfully"}
        assert client.get(f"/api/tasks/{task_id}", headers=headers).status_code == 404

    def test_filters_and_sort(self, client):
        _, headers = register_and_login(client)
        client.post("/api/tasks", json={"title": "Low", "priority": "low", "dueDate": "2024-03-01"}, headers=headers)
        client.post("/api/tasks", json={"title": "High", "priority": "high", "dueDate": "2024-03-20"}, headers=headers)
        client.post("/api/tasks", json={"title": "Undated", "priority": "medium"}, headers=headers)

        by_priority = client.get("/api/tasks?sort=priority", headers=headers).json()["data"]
        assert [t["title"] for t in by_priority] == ["High", "Undated", "Low"]

        in_range = client.get("/api/tasks?start=2024-03-01&end=2024-03-10", headers=headers).json()["data"]
        assert [t["title"] for t in in_range] == ["Low"]

        high = client.get("/api/tasks?priority=high", headers=headers).json()["data"]
        assert [t["title"] for t in high] == ["High"]

    def test_half_open_range_rejected(self, client):
        _, headers = register_and_login(client)
        resp = client.get("/api/tasks?start=2024-03-01", headers=headers)
        assert resp.status_code == 400

    def test_comment(self, client):
        _, headers = register_and_login(client)
        task_id = client.post("/api/tasks", json={"title": "Discuss"}, headers=headers).json()["data"]["id"]
        resp = client.post(f"/api/tasks/{task_id}/comments", json={"content": "Looks good"}, headers=headers)
        assert resp.status_code == 201
        comments = resp.json()["data"]["comments"]
        assert len(comments) == 1
        assert comments[0]["author"] == "Alice"
        assert comments[0]["content"] == "Looks good"


# =============================================================================
# Events and Items
# =============================================================================

class TestEvents:
    """Events are shared; a token only stamps the creator."""

    def test_anonymous_create_and_list(self, client):
        resp = client.post(
            "/api/events",
            json={"title": "Standup", "startDate": "2024-03-10", "endDate": "2024-03-10", "startTime": "09:00"},
        )
        assert resp.status_code == 201
        event = resp.json()["data"]
        assert event["userId"] is None
        assert event["status"] == "upcoming"

        listed = client.get("/api/events").json()["data"]
        assert [e["id"] for e in listed] == [event["id"]]

    def test_authenticated_create_records_user(self, client):
        user, headers = register_and_login(client)
        resp = client.post(
            "/api/events",
            json={"title": "Review", "startDate": "2024-03-10", "endDate": "2024-03-11"},
            headers=headers,
        )
        assert resp.json()["data"]["userId"] == user["id"]

    def test_missing_dates(self, client):
        resp = client.post("/api/events", json={"title": "No dates"})
        assert resp.status_code == 400

    def test_update_and_delete(self, client):
        event_id = client.post(
            "/api/events", json={"title": "Retro", "startDate": "2024-03-10", "endDate": "2024-03-10"}
        ).json()["data"]["id"]
        updated = client.put(f"/api/events/{event_id}", json={"status": "cancelled"}).json()["data"]
        assert updated["status"] == "cancelled"
        assert client.delete(f"/api/events/{event_id}").json()["message"] == "Event deleted successfully"
        assert client.get(f"/api/events/{event_id}").status_code == 404

    def test_anonymous_comment(self, client):
        event_id = client.post(
            "/api/events", json={"title": "Demo", "startDate": "2024-03-10", "endDate": "2024-03-10"}
        ).json()["data"]["id"]
        resp = client.post(f"/api/events/{event_id}/comments", json={"content": "See you"})
        assert resp.json()["data"]["comments"][0]["author"] == "Anonymous"


class TestItems:
    def test_event_kind(self, client):
        resp = client.post(
            "/api/items",
            json={"kind": "event", "title": "Launch", "startDate": "2024-04-01", "endDate": "2024-04-02"},
        )
        assert resp.status_code == 201
        assert resp.json()["kind"] == "event"
        assert resp.json()["data"]["title"] == "Launch"

    def test_task_kind_needs_user(self, client):
        resp = client.post("/api/items", json={"kind": "task", "title": "Solo"})
        assert resp.status_code == 401

        _, headers = register_and_login(client)
        resp = client.post("/api/items", json={"kind": "task", "title": "Solo"}, headers=headers)
        assert resp.status_code == 201
        assert resp.json()["kind"] == "task"

    def test_unknown_kind(self, client):
        resp = client.post("/api/items", json={"kind": "note", "title": "?"})
        assert resp.status_code == 400


# =============================================================================
# Messages
# =============================================================================

class TestMessages:
    def test_draft_send_and_folders(self, client):
        _, headers = register_and_login(client)
        draft = client.post(
            "/api/messages",
            json={"to": ["bob@example.com"], "subject": "Hello", "body": "Draft body"},
            headers=headers,
        ).json()["data"]
        assert draft["status"] == "draft"
        assert draft["from"] == "alice@example.com"
        assert draft["threadId"]

        drafts = client.get("/api/messages?folder=drafts", headers=headers).json()
        assert [m["id"] for m in drafts["data"]] == [draft["id"]]

        sent = client.post("/api/messages/send", json={"id": draft["id"]}, headers=headers).json()
        assert sent["message"] == "Message sent successfully"
        assert sent["data"]["status"] == "sent"
        assert sent["data"]["sentAt"]

        folder = client.get("/api/messages?folder=sent", headers=headers).json()
        assert folder["pagination"] == {"page": 1, "limit": 50, "total": 1, "pages": 1}

    def test_send_unknown_draft(self, client):
        _, headers = register_and_login(client)
        resp = client.post("/api/messages/send", json={"id": "missing"}, headers=headers)
        assert resp.status_code == 404

    def test_recipient_required(self, client):
        _, headers = register_and_login(client)
        resp = client.post("/api/messages", json={"subject": "Nobody"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "At least one recipient is required"

    def test_soft_delete(self, client):
        _, headers = register_and_login(client)
        message = client.post(
            "/api/messages/send", json={"to": ["bob@example.com"], "subject": "Bye"}, headers=headers
        ).json()["data"]

        resp = client.delete(f"/api/messages/{message['id']}", headers=headers)
        assert resp.json() == {"success": True, "message": "Message moved to trash"}

        for folder in ("inbox", "sent"):
            listed = client.get(f"/api/messages?folder={folder}", headers=headers).json()["data"]
            assert listed == []
        trash = client.get("/api/messages?folder=trash", headers=headers).json()["data"]
        assert [m["id"] for m in trash] == [message["id"]]

        fetched = client.get(f"/api/messages/{message['id']}", headers=headers).json()["data"]
        assert fetched["status"] == "deleted"

    def test_get_marks_read(self, client):
        _, headers = register_and_login(client)
        message = client.post("/api/messages", json={"to": ["bob@example.com"]}, headers=headers).json()["data"]
        assert message["isRead"] is False
        fetched = client.get(f"/api/messages/{message['id']}", headers=headers).json()["data"]
        assert fetched["isRead"] is True

    def test_other_users_message_is_not_found(self, client):
        _, alice = register_and_login(client)
        message = client.post("/api/messages", json={"to": ["x@example.com"]}, headers=alice).json()["data"]
        _, bob = register_and_login(client, name="Bob", email="bob@example.com")
        assert client.get(f"/api/messages/{message['id']}", headers=bob).status_code == 404

    def test_unknown_folder(self, client):
        _, headers = register_and_login(client)
        assert client.get("/api/messages?folder=spam", headers=headers).status_code == 400


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    def test_healthy(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["database"]["status"] == "connected"
        assert body["database"]["backend"] == "file"

    def test_missing_secret(self, client, settings):
        settings.jwt_secret_configured = False
        resp = client.get("/api/health")
        assert resp.status_code == 500
        assert resp.json()["missing"] == ["TASKSAVER_JWT_SECRET"]

    def test_test_db(self, client):
        resp = client.get("/api/test-db")
        assert resp.status_code == 200
        results = resp.json()["results"]
        assert results["writeTest"] is True
        assert "totalTime" in results

    def test_store_down(self, client, store, monkeypatch):
        from tasksaver.errors import StoreUnavailableError

        def broken():
            raise StoreUnavailableError("disk gone")

        monkeypatch.setattr(store, "probe", broken)
        resp = client.get("/api/health")
        assert resp.status_code == 503
        assert resp.json()["database"] == {"status": "disconnected", "backend": "file", "error": "disk gone"}
