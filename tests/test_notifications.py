from unittest.mock import patch
from uuid import uuid4

API = "/api/v1"


async def _notifications(client, user, **params):
    response = await client.get(f"{API}/notifications", params=params, headers=user.headers)
    assert response.status_code == 200, response.text
    return response.json()


async def test_unread_count_and_mark_read(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    await add_comment(bob, post["id"], "first")
    await client.post(f"{API}/posts/{post['id']}/like", headers=bob.headers)

    count = (await client.get(f"{API}/notifications/unread-count", headers=alice.headers)).json()
    assert count == {"count": 2}

    page = await _notifications(client, alice)
    assert page["total_count"] == 2
    assert page["unread_count"] == 2
    notes = page["items"]
    assert [n["kind"] for n in notes] == ["like", "comment"]
    assert notes[0]["target"]["post_id"] == post["id"]
    assert notes[0]["actor"]["full_name"] == "Bob Iyer"
    assert notes[1]["text"] == 'Bob Iyer commented: "first"'

    one = await client.put(f"{API}/notifications/{notes[0]['id']}/read", headers=alice.headers)
    assert one.status_code == 200
    assert one.json()["is_read"] is True
    assert one.json()["id"] == notes[0]["id"]

    unread = await _notifications(client, alice, unreadOnly="true")
    assert [n["id"] for n in unread["items"]] == [notes[1]["id"]]

    rest = await client.post(f"{API}/notifications/mark-all-read", headers=alice.headers)
    assert rest.json() == {"updated": 1}
    count = (await client.get(f"{API}/notifications/unread-count", headers=alice.headers)).json()
    assert count == {"count": 0}


async def test_reply_notification_names_parent_comment(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    top = await add_comment(alice, post["id"], "question for the class")
    reply = await add_comment(bob, post["id"], "here is my answer", reply_to=top["id"])

    [note] = (await _notifications(client, alice))["items"]
    assert note["kind"] == "reply"
    assert note["target"]["post_id"] == post["id"]
    assert note["target"]["comment_id"] == reply["id"]
    assert note["target"]["parent_comment_id"] == top["id"]


async def test_top_level_comment_has_no_parent(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    comment = await add_comment(bob, post["id"])

    [note] = (await _notifications(client, alice))["items"]
    assert note["kind"] == "comment"
    assert note["target"]["comment_id"] == comment["id"]
    assert note["target"]["parent_comment_id"] is None


async def test_delete_notification(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    await add_comment(bob, post["id"])
    [note] = (await _notifications(client, alice))["items"]

    deleted = await client.delete(f"{API}/notifications/{note['id']}", headers=alice.headers)
    assert deleted.status_code == 204
    assert (await _notifications(client, alice))["items"] == []

    again = await client.delete(f"{API}/notifications/{note['id']}", headers=alice.headers)
    assert again.status_code == 404
    missing = await client.delete(f"{API}/notifications/{uuid4()}", headers=alice.headers)
    assert missing.status_code == 404


async def test_notifications_are_private(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    await add_comment(bob, post["id"])
    [note] = (await _notifications(client, alice))["items"]

    stolen = await client.put(f"{API}/notifications/{note['id']}/read", headers=bob.headers)
    assert stolen.status_code == 404
    removed = await client.delete(f"{API}/notifications/{note['id']}", headers=bob.headers)
    assert removed.status_code == 404
    assert (await client.get(f"{API}/notifications/unread-count", headers=bob.headers)).json() == {"count": 0}
    assert (await client.get(f"{API}/notifications/unread-count", headers=alice.headers)).json() == {"count": 1}


async def test_push_task_queued_for_new_notification(client, alice, bob, make_post):
    post = await make_post(alice)
    with patch("tathya.workers.notifications.send_push_notification") as task:
        await client.post(f"{API}/posts/{post['id']}/like", headers=bob.headers)
        await client.post(f"{API}/posts/{post['id']}/like", headers=alice.headers)
    task.delay.assert_called_once()
    user_id, title, body = task.delay.call_args.args
    assert user_id == str(alice.id)
    assert title == "New like"
    assert body == "Bob Iyer liked your post"
