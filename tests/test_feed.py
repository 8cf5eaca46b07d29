from uuid import uuid4

API = "/api/v1"


async def test_feed_only_lists_visible_and_approved(client, alice, bob, moderator, make_post):
    approved = await make_post(alice, title="approved")
    await make_post(alice, title="pending", approve=False)
    hidden = await make_post(bob, title="hidden")
    await client.put(
        f"{API}/moderator/posts/{hidden['id']}/visibility", json={"is_visible": False}, headers=moderator.headers
    )

    for headers in ({}, alice.headers, moderator.headers):
        page = (await client.get(f"{API}/posts", params={"pageNumber": 1}, headers=headers)).json()
        assert [p["id"] for p in page["items"]] == [approved["id"]]
        assert page["total_count"] == 1


async def test_feed_newest_first_with_offset_paging(client, alice, make_post):
    created = [await make_post(alice, title=f"post {i}") for i in range(5)]

    first = (await client.get(f"{API}/posts", params={"pageNumber": 1, "pageSize": 2})).json()
    second = (await client.get(f"{API}/posts", params={"pageNumber": 2, "pageSize": 2})).json()
    last = (await client.get(f"{API}/posts", params={"pageNumber": 3, "pageSize": 2})).json()

    assert [p["title"] for p in first["items"]] == ["post 4", "post 3"]
    assert [p["title"] for p in second["items"]] == ["post 2", "post 1"]
    assert [p["id"] for p in last["items"]] == [created[0]["id"]]
    assert first["page"] == 1
    assert first["total_pages"] == 3
    assert first["total_count"] == 5


async def test_feed_default_page_size(client, alice, make_post):
    for i in range(13):
        await make_post(alice, title=f"post {i}")
    page = (await client.get(f"{API}/posts")).json()
    assert len(page["items"]) == 12
    assert page["total_pages"] == 2


async def test_feed_page_past_end_is_empty(client, alice, make_post):
    await make_post(alice)
    page = (await client.get(f"{API}/posts", params={"pageNumber": 4})).json()
    assert page["items"] == []
    assert page["total_count"] == 1


async def test_feed_rejects_bad_page_number(client):
    response = await client.get(f"{API}/posts", params={"pageNumber": 0})
    assert response.status_code == 422


async def test_feed_marks_viewer_likes(client, alice, bob, make_post):
    post = await make_post(alice)
    await client.post(f"{API}/posts/{post['id']}/like", headers=bob.headers)

    as_bob = (await client.get(f"{API}/posts", headers=bob.headers)).json()["items"][0]
    as_alice = (await client.get(f"{API}/posts", headers=alice.headers)).json()["items"][0]
    assert as_bob["is_liked"] is True
    assert as_alice["is_liked"] is False
    assert as_alice["likes_count"] == 1


async def test_community_feed(client, alice, bob, make_post):
    created = await client.post(
        f"{API}/communities",
        json={"name": "Physics", "region": "Pune", "description": "Physics students"},
        headers=alice.headers,
    )
    community_id = created.json()["id"]
    inside = await make_post(alice, title="inside", community_id=community_id)
    await make_post(alice, title="outside")

    page = (await client.get(f"{API}/posts/community/{community_id}", headers=bob.headers)).json()
    assert [p["id"] for p in page["items"]] == [inside["id"]]
    assert page["total_count"] == 1

    missing = await client.get(f"{API}/posts/community/{uuid4()}")
    assert missing.status_code == 404
