from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from taskshare.models import User
from taskshare.models.base import MAX_ID
from taskshare.result import INTERNAL_ERROR_MESSAGE
from taskshare.security import create_access_token

from tests.conftest import register_and_login


def _create_task(client, headers, **body):
    r = client.post("/tasks", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


class TestAuth:
    def test_register_login_flow(self, client):
        r = client.post("/auth/register", json={"email": "alice@x.com", "password": "pw123", "nome": "Alice"})
        assert r.status_code == 201
        user = r.json()["user"]
        assert user["email"] == "alice@x.com"
        assert "password" not in user and "hashed_password" not in user

        r = client.post("/auth/register", json={"email": "alice@x.com", "password": "other"})
        assert r.status_code == 409

        r = client.post("/auth/register", json={"email": "bob@x.com"})
        assert r.status_code == 400

        r = client.post("/auth/login", json={"email": "alice@x.com", "password": "nope"})
        assert r.status_code == 401

        r = client.post("/auth/login", json={"email": "alice@x.com", "password": "pw123"})
        assert r.status_code == 200
        assert r.json()["token"]
        assert r.json()["user"] == {"id": user["id"], "email": "alice@x.com", "nome": "Alice"}

    def test_token_checks(self, client):
        assert client.get("/tasks").status_code == 401
        assert client.get("/tasks", headers={"Authorization": "Bearer not-a-token"}).status_code == 403

        register_and_login(client, "alice@x.com")
        expired = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-5))
        r = client.get("/tasks", headers={"Authorization": f"Bearer {expired}"})
        assert r.status_code == 403

        huge_subject = create_access_token({"sub": str(MAX_ID + 1)})
        assert client.get("/tasks", headers={"Authorization": f"Bearer {huge_subject}"}).status_code == 403

    def test_authorization_header_shapes(self, client):
        headers = register_and_login(client, "alice@x.com")
        token = headers["Authorization"].split()[1]

        assert client.get("/tasks", headers={"Authorization": f"Token {token}"}).status_code == 200
        assert client.get("/tasks", headers={"Authorization": "Token abc"}).status_code == 403
        assert client.get("/tasks", headers={"Authorization": "Bearer"}).status_code == 401
        assert client.get("/tasks", headers={"Authorization": token}).status_code == 401

    def test_token_of_deleted_user_is_forbidden(self, client, app):
        headers = register_and_login(client, "alice@x.com")
        assert client.get("/tasks", headers=headers).status_code == 200

        user_id = client.get("/auth/users", headers=headers).json()[0]["id"]
        with app.state.database.session() as db:
            db.delete(db.get(User, user_id))
            db.commit()

        assert client.get("/tasks", headers=headers).status_code == 403

    def test_users_listing(self, client):
        headers = register_and_login(client, "alice@x.com", nome="Alice")
        register_and_login(client, "bob@x.com")

        r = client.get("/auth/users", headers=headers)
        assert r.status_code == 200
        assert [u["email"] for u in r.json()] == ["alice@x.com", "bob@x.com"]

        bob_id = r.json()[1]["id"]
        assert client.get(f"/auth/users/{bob_id}", headers=headers).json()["email"] == "bob@x.com"
        assert client.get("/auth/users/999", headers=headers).status_code == 404
        assert client.get("/auth/users/abc", headers=headers).status_code == 400
        assert client.get(f"/auth/users/{MAX_ID + 1}", headers=headers).status_code == 400
        assert client.get("/auth/users").status_code == 401


class TestTasks:
    def test_create_defaults(self, client):
        headers = register_and_login(client, "alice@x.com")
        task = _create_task(client, headers, title="Buy milk")
        assert task["priority"] == "Normal"
        assert task["dueDate"] is None

    def test_create_validation(self, client):
        headers = register_and_login(client, "alice@x.com")
        assert client.post("/tasks", json={}, headers=headers).status_code == 400
        assert client.post("/tasks", json={"title": "x", "dueDate": "whenever"}, headers=headers).status_code == 400
        assert client.get("/tasks/abc", headers=headers).status_code == 400
        assert client.get(f"/tasks/{MAX_ID + 1}", headers=headers).status_code == 400
        assert client.get("/attachments/99999999999999999999", headers=headers).status_code == 400

    @pytest.mark.parametrize("path", ["/tasks", "/categories", "/attachments"])
    def test_out_of_range_path_ids_are_bad_input(self, client, path):
        headers = register_and_login(client, "alice@x.com")
        for record_id in (MAX_ID + 1, 99999999999999999999, 0):
            assert client.delete(f"{path}/{record_id}", headers=headers).status_code == 400

    def test_out_of_range_body_ids_are_bad_input(self, client):
        headers = register_and_login(client, "alice@x.com")
        r = client.post("/tasks", json={"title": "x", "categoryId": MAX_ID + 1}, headers=headers)
        assert r.status_code == 400
        share = {"taskId": MAX_ID + 1, "targetUserEmail": "bob@x.com"}
        assert client.post("/sharing", json=share, headers=headers).status_code == 400
        unshare = {"taskId": 1, "targetUserId": MAX_ID + 1}
        assert client.request("DELETE", "/sharing", json=unshare, headers=headers).status_code == 400

    def test_due_date_is_displayed_in_input_format(self, client):
        headers = register_and_login(client, "alice@x.com")
        task = _create_task(client, headers, title="Dentist", dueDate="15-09-2026 16:45")
        assert task["dueDate"] == "15-09-2026 16:45"

        r = client.put(f"/tasks/{task['id']}", json={"dueDate": "16-09-2026 08:00:30"}, headers=headers)
        assert r.status_code == 200
        assert r.json()["dueDate"] == "16-09-2026 08:00"

        for blank in (None, ""):
            r = client.put(f"/tasks/{task['id']}", json={"dueDate": blank, "priority": "High"}, headers=headers)
            assert r.status_code == 200
            assert r.json()["dueDate"] == "16-09-2026 08:00"
            assert r.json()["priority"] == "High"

    def test_written_dates_are_accepted(self, client):
        headers = register_and_login(client, "alice@x.com")
        task = _create_task(client, headers, title="Dentist", dueDate="2026/09/15 16:45")
        assert task["dueDate"] == "15-09-2026 16:45"
        task = _create_task(client, headers, title="Call", dueDate="September 15, 2026 16:45")
        assert task["dueDate"] == "15-09-2026 16:45"

    def test_other_user_gets_not_found(self, client):
        alice = register_and_login(client, "alice@x.com")
        bob = register_and_login(client, "bob@x.com")
        task = _create_task(client, alice, title="private")

        assert client.get(f"/tasks/{task['id']}", headers=bob).status_code == 404
        assert client.put(f"/tasks/{task['id']}", json={"title": "mine now"}, headers=bob).status_code == 404
        assert client.delete(f"/tasks/{task['id']}", headers=bob).status_code == 404

        r = client.get(f"/tasks/{task['id']}", headers=alice)
        assert r.status_code == 200
        assert r.json()["title"] == "private"

    def test_category_nested_in_listing(self, client):
        alice = register_and_login(client, "alice@x.com")
        bob = register_and_login(client, "bob@x.com")

        r = client.post("/categories", json={"name": "Work"}, headers=alice)
        assert r.status_code == 201
        work = r.json()
        _create_task(client, alice, title="Report", categoryId=work["id"])

        listed = client.get("/tasks", headers=alice).json()
        assert listed[0]["category"] == {"id": work["id"], "name": "Work", "userId": work["userId"]}
        assert client.get("/tasks", headers=bob).json() == []

    def test_delete(self, client):
        headers = register_and_login(client, "alice@x.com")
        task = _create_task(client, headers, title="temp")

        r = client.delete(f"/tasks/{task['id']}", headers=headers)
        assert r.status_code == 200
        assert r.json()["deletedTask"]["id"] == task["id"]
        assert client.get(f"/tasks/{task['id']}", headers=headers).status_code == 404


class TestCategories:
    def test_crud(self, client):
        alice = register_and_login(client, "alice@x.com")
        bob = register_and_login(client, "bob@x.com")

        assert client.post("/categories", json={}, headers=alice).status_code == 400
        home = client.post("/categories", json={"name": "Home"}, headers=alice).json()
        client.post("/categories", json={"name": "Errands"}, headers=alice)
        task = _create_task(client, alice, title="Clean", categoryId=home["id"])

        names = [c["name"] for c in client.get("/categories", headers=alice).json()]
        assert names == ["Errands", "Home"]

        assert client.put(f"/categories/{home['id']}", json={"name": "X"}, headers=bob).status_code == 404
        r = client.put(f"/categories/{home['id']}", json={"name": "House"}, headers=alice)
        assert r.json()["name"] == "House"

        assert client.delete(f"/categories/{home['id']}", headers=bob).status_code == 404
        assert client.delete(f"/categories/{home['id']}", headers=alice).status_code == 200
        assert client.get(f"/tasks/{task['id']}", headers=alice).json()["categoryId"] is None


class TestAttachments:
    def test_upload_list_serve_delete(self, client, upload_dir):
        headers = register_and_login(client, "alice@x.com")
        task = _create_task(client, headers, title="with file")

        r = client.post(
            "/attachments",
            files={"file": ("notes.txt", b"hello world", "text/plain")},
            data={"taskId": str(task["id"])},
            headers=headers,
        )
        assert r.status_code == 201, r.text
        attachment = r.json()
        assert attachment["fileName"] == "notes.txt"
        assert attachment["url"].startswith("/uploads/") and attachment["url"].endswith(".txt")

        assert client.get(attachment["url"]).content == b"hello world"

        listed = client.get(f"/attachments/{task['id']}", headers=headers).json()
        assert [a["id"] for a in listed] == [attachment["id"]]
        assert client.get("/tasks", headers=headers).json()[0]["attachments"][0]["id"] == attachment["id"]

        r = client.delete(f"/attachments/{attachment['id']}", headers=headers)
        assert r.status_code == 200
        assert list(upload_dir.iterdir()) == []

    def test_rejected_uploads_leave_no_files(self, client, app, upload_dir):
        alice = register_and_login(client, "alice@x.com")
        bob = register_and_login(client, "bob@x.com")
        task = _create_task(client, alice, title="t")
        file = {"file": ("a.png", b"data", "image/png")}

        r = client.post("/attachments", files=file, data={"taskId": str(task["id"])}, headers=bob)
        assert r.status_code == 404
        r = client.post("/attachments", files=file, headers=alice)
        assert r.status_code == 400
        r = client.post("/attachments", data={"taskId": str(task["id"])}, headers=alice)
        assert r.status_code == 400
        r = client.post("/attachments", files=file, data={"taskId": "99999999999999999999"}, headers=alice)
        assert r.status_code == 400

        app.state.storage.max_size = 3
        r = client.post("/attachments", files=file, data={"taskId": str(task["id"])}, headers=alice)
        assert r.status_code == 413

        assert list(upload_dir.iterdir()) == []

    def test_other_user_cannot_list_or_delete(self, client):
        alice = register_and_login(client, "alice@x.com")
        bob = register_and_login(client, "bob@x.com")
        task = _create_task(client, alice, title="t")
        attachment = client.post(
            "/attachments",
            files={"file": ("a.txt", b"x", "text/plain")},
            data={"taskId": str(task["id"])},
            headers=alice,
        ).json()

        assert client.get(f"/attachments/{task['id']}", headers=bob).status_code == 404
        assert client.delete(f"/attachments/{attachment['id']}", headers=bob).status_code == 404

    def test_task_delete_removes_files(self, client, upload_dir):
        headers = register_and_login(client, "alice@x.com")
        task = _create_task(client, headers, title="t")
        client.post(
            "/attachments",
            files={"file": ("a.txt", b"x", "text/plain")},
            data={"taskId": str(task["id"])},
            headers=headers,
        )
        assert len(list(upload_dir.iterdir())) == 1

        client.delete(f"/tasks/{task['id']}", headers=headers)
        assert list(upload_dir.iterdir()) == []
        assert client.get(f"/attachments/{task['id']}", headers=headers).status_code == 404


class TestSharing:
    def test_share_scenario(self, client):
        alice = register_and_login(client, "alice@x.com", nome="Alice")
        bob = register_and_login(client, "bob@x.com")
        task = _create_task(client, alice, title="Plan trip")

        r = client.post("/sharing", json={"taskId": task["id"], "targetUserEmail": "bob@x.com"}, headers=alice)
        assert r.status_code == 201

        received = client.get("/sharing/received", headers=bob).json()
        assert len(received) == 1
        assert received[0]["id"] == task["id"]
        assert received[0]["sharedBy"] == {"nome": "Alice", "email": "alice@x.com"}

        # a share grants reading through the listing only
        assert client.get(f"/tasks/{task['id']}", headers=bob).status_code == 404

        shared_with = client.get(f"/tasks/{task['id']}", headers=alice).json()["sharedWith"]
        assert [s["user"]["email"] for s in shared_with] == ["bob@x.com"]

    def test_share_errors(self, client):
        alice = register_and_login(client, "alice@x.com")
        register_and_login(client, "bob@x.com")
        task = _create_task(client, alice, title="t")
        body = {"taskId": task["id"], "targetUserEmail": "bob@x.com"}

        assert client.post("/sharing", json={"taskId": task["id"]}, headers=alice).status_code == 400
        self_share = {"taskId": task["id"], "targetUserEmail": "alice@x.com"}
        assert client.post("/sharing", json=self_share, headers=alice).status_code == 400
        unknown = {"taskId": task["id"], "targetUserEmail": "ghost@x.com"}
        assert client.post("/sharing", json=unknown, headers=alice).status_code == 404
        assert client.post("/sharing", json=body, headers=alice).status_code == 201
        assert client.post("/sharing", json=body, headers=alice).status_code == 409

    def test_remove_share(self, client):
        alice = register_and_login(client, "alice@x.com")
        bob = register_and_login(client, "bob@x.com")
        task = _create_task(client, alice, title="t")
        client.post("/sharing", json={"taskId": task["id"], "targetUserEmail": "bob@x.com"}, headers=alice)
        bob_id = client.get("/auth/users", headers=alice).json()[1]["id"]
        body = {"taskId": task["id"], "targetUserId": bob_id}

        assert client.request("DELETE", "/sharing", json=body, headers=bob).status_code == 404
        assert client.request("DELETE", "/sharing", json=body, headers=alice).status_code == 200
        assert client.request("DELETE", "/sharing", json=body, headers=alice).status_code == 404
        assert client.get("/sharing/received", headers=bob).json() == []


class TestErrors:
    def test_unexpected_errors_become_generic_500(self, app):
        @app.get("/explode")
        def explode():
            raise RuntimeError("secret detail")

        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.get("/explode")
            assert r.status_code == 500
            assert r.json() == {"detail": INTERNAL_ERROR_MESSAGE}
            # HTTP errors keep their own status
            assert c.get("/tasks").status_code == 401
