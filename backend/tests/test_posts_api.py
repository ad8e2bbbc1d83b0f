"""
Post endpoints: public projections and admin writes.
"""
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from blog_api.services import posts as post_service

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def create_category(client, name):
    response = client.post("/api/admin/categories", json={"name": name})
    assert response.status_code == 200
    return response.json()["id"]


def post_body(title="Hello", category_ids=()):
    return {
        "title": title,
        "content": "<b>Hi</b><script>alert(1)</script>",
        "coverImageURL": "https://example.com/cover.png",
        "categoryIds": list(category_ids),
    }


def test_create_returns_post_scalars(client):
    a = create_category(client, "News")

    response = client.post("/api/admin/posts", json=post_body(category_ids=[a]))

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Hello"
    assert data["coverImageURL"] == "https://example.com/cover.png"
    assert set(data) == {"id", "title", "content", "coverImageURL", "createdAt", "updatedAt"}


def test_create_with_unknown_category_is_rejected(client):
    a = create_category(client, "News")

    response = client.post("/api/admin/posts", json=post_body(title="Ghost", category_ids=[a, MISSING_ID]))

    assert response.status_code == 400
    assert response.json() == {"error": "one or more referenced categories do not exist"}
    assert client.get("/api/posts").json() == []


def test_list_projection_shape(client):
    a = create_category(client, "News")
    client.post("/api/admin/posts", json=post_body(category_ids=[a]))

    response = client.get("/api/posts")

    assert response.status_code == 200
    [item] = response.json()
    assert set(item) == {"id", "title", "content", "createdAt", "categories"}
    assert item["categories"] == [{"category": {"id": a, "name": "News"}}]


def test_list_is_newest_first(client):
    client.post("/api/admin/posts", json=post_body(title="first"))
    client.post("/api/admin/posts", json=post_body(title="second"))

    titles = [item["title"] for item in client.get("/api/posts").json()]

    assert titles == ["second", "first"]


def test_detail_projection_includes_sanitized_content(client):
    a = create_category(client, "News")
    post_id = client.post("/api/admin/posts", json=post_body(category_ids=[a])).json()["id"]

    response = client.get(f"/api/posts/{post_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["content"] == "<b>Hi</b><script>alert(1)</script>"
    assert data["safeContent"] == "<b>Hi</b>"
    assert data["coverImageURL"] == "https://example.com/cover.png"
    assert data["categories"] == [{"category": {"id": a, "name": "News"}}]


def test_detail_of_missing_post_is_404(client):
    response = client.get(f"/api/posts/{MISSING_ID}")

    assert response.status_code == 404
    assert response.json() == {"error": "post not found"}


def test_update_replaces_categories(client):
    a = create_category(client, "a")
    b = create_category(client, "b")
    c = create_category(client, "c")
    post_id = client.post("/api/admin/posts", json=post_body(category_ids=[a, b])).json()["id"]

    response = client.put(f"/api/admin/posts/{post_id}", json=post_body(title="Edited", category_ids=[c, c]))

    assert response.status_code == 200
    assert response.json()["title"] == "Edited"
    detail = client.get(f"/api/posts/{post_id}").json()
    assert detail["categories"] == [{"category": {"id": c, "name": "c"}}]


def test_update_with_unknown_category_keeps_previous_state(client):
    a = create_category(client, "a")
    b = create_category(client, "b")
    post_id = client.post("/api/admin/posts", json=post_body(category_ids=[a, b])).json()["id"]

    response = client.put(f"/api/admin/posts/{post_id}", json=post_body(title="Edited", category_ids=[a, MISSING_ID]))

    assert response.status_code == 400
    detail = client.get(f"/api/posts/{post_id}").json()
    assert detail["title"] == "Hello"
    assert {link["category"]["id"] for link in detail["categories"]} == {a, b}


def test_update_missing_post_is_404(client):
    response = client.put(f"/api/admin/posts/{MISSING_ID}", json=post_body())

    assert response.status_code == 404
    assert response.json() == {"error": "post not found"}


def test_delete_post(client):
    a = create_category(client, "a")
    post_id = client.post("/api/admin/posts", json=post_body(title="Bye", category_ids=[a])).json()["id"]

    response = client.delete(f"/api/admin/posts/{post_id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Bye deleted"}
    assert client.get(f"/api/posts/{post_id}").status_code == 404
    # The category itself survives, with no links left
    assert client.get(f"/api/categories/{a}").json()["postCount"] == 0


def test_delete_missing_post_is_404(client):
    response = client.delete(f"/api/admin/posts/{MISSING_ID}")

    assert response.status_code == 404


def test_blank_title_is_rejected(client):
    response = client.post("/api/admin/posts", json=post_body(title="   "))

    assert response.status_code == 422
    assert response.json()["error"] == "invalid request body"


def test_storage_failure_is_500_and_rolled_back(client, monkeypatch):
    def broken_reconcile(db, post, category_ids):
        raise OperationalError("DELETE FROM post_categories ...", {}, Exception("disk I/O error"))

    monkeypatch.setattr(post_service, "reconcile_post_categories", broken_reconcile)

    response = client.post("/api/admin/posts", json=post_body(title="Half"))

    assert response.status_code == 500
    assert response.json() == {"error": "failed to create post"}
    assert client.get("/api/posts").json() == []


def test_long_title_is_stored_as_sent(client):
    title = "  " + "A very long headline " * 20

    response = client.post("/api/admin/posts", json=post_body(title=title))

    assert response.status_code == 200
    assert client.get(f"/api/posts/{response.json()['id']}").json()["title"] == title


def test_failure_reloading_updated_post_is_500(client, monkeypatch):
    post_id = client.post("/api/admin/posts", json=post_body(title="Before")).json()["id"]

    def locked_refresh(self, instance, *args, **kwargs):
        raise OperationalError("SELECT posts ...", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "refresh", locked_refresh)

    response = client.put(f"/api/admin/posts/{post_id}", json=post_body(title="After"))

    assert response.status_code == 500
    assert response.json() == {"error": "failed to update post"}
    monkeypatch.undo()
    assert client.get(f"/api/posts/{post_id}").json()["title"] == "Before"
