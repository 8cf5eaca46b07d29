import pytest

from tathya.core.errors import NotFoundError, ValidationError
from tathya.models.user import ROLE_MODERATOR, User
from tathya.services.moderation_service import set_role

API = "/api/v1"


async def test_moderator_routes_reject_regular_users(client, alice, make_post):
    post = await make_post(alice, approve=False)
    checks = [
        client.get(f"{API}/moderator/posts", headers=alice.headers),
        client.put(f"{API}/moderator/posts/{post['id']}/approve", headers=alice.headers),
        client.put(f"{API}/moderator/posts/{post['id']}/visibility", json={"is_visible": False}, headers=alice.headers),
        client.delete(f"{API}/moderator/posts/{post['id']}", headers=alice.headers),
        client.get(f"{API}/moderator/users", headers=alice.headers),
    ]
    for request in checks:
        response = await request
        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied. Moderators only."

    assert (await client.get(f"{API}/moderator/posts")).status_code == 401


async def test_queue_lists_unapproved_posts(client, alice, moderator, make_post):
    pending = await make_post(alice, title="pending", approve=False)
    approved = await make_post(alice, title="approved")

    queue = (await client.get(f"{API}/moderator/posts", headers=moderator.headers)).json()
    assert [p["id"] for p in queue["items"]] == [approved["id"], pending["id"]]
    assert [p["approved"] for p in queue["items"]] == [True, False]


async def test_approve_publishes_post(client, alice, bob, moderator, make_post):
    post = await make_post(alice, approve=False)
    assert (await client.get(f"{API}/posts")).json()["total_count"] == 0

    response = await client.put(f"{API}/moderator/posts/{post['id']}/approve", headers=moderator.headers)
    assert response.status_code == 200
    assert response.json()["approved"] is True
    assert (await client.get(f"{API}/posts/{post['id']}", headers=bob.headers)).status_code == 200


async def test_visibility_hides_and_restores(client, alice, moderator, make_post):
    post = await make_post(alice)
    url = f"{API}/moderator/posts/{post['id']}/visibility"

    hidden = await client.put(url, json={"is_visible": False}, headers=moderator.headers)
    assert hidden.json()["is_visible"] is False
    assert (await client.get(f"{API}/posts")).json()["items"] == []

    await client.put(url, json={"is_visible": True}, headers=moderator.headers)
    assert len((await client.get(f"{API}/posts")).json()["items"]) == 1


async def test_moderator_delete_and_missing_post(client, alice, moderator, make_post):
    post = await make_post(alice)
    url = f"{API}/moderator/posts/{post['id']}"
    assert (await client.delete(url, headers=moderator.headers)).status_code == 204
    assert (await client.delete(url, headers=moderator.headers)).status_code == 404


async def test_list_users_excludes_caller(client, alice, bob, moderator):
    users = (await client.get(f"{API}/moderator/users", headers=moderator.headers)).json()
    ids = {u["id"] for u in users}
    assert ids == {str(alice.id), str(bob.id)}
    assert all(u["email"] for u in users)


async def test_set_role(db):
    user = User(full_name="Ravi", email="ravi@example.com", password_hash="x")
    db.add(user)
    await db.flush()

    promoted = await set_role(db, "RAVI@example.com", ROLE_MODERATOR)
    assert promoted.id == user.id
    assert promoted.is_moderator

    with pytest.raises(NotFoundError):
        await set_role(db, "nobody@example.com", ROLE_MODERATOR)
    with pytest.raises(ValidationError):
        await set_role(db, "ravi@example.com", "admin")
