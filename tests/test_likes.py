import asyncio
from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from tathya.db.base import Base
from tathya.db.session import get_db as app_get_db
from tathya.main import app as fastapi_app
from tathya.models.notification import Notification
from tathya.models.user import ROLE_MODERATOR, User

API = "/api/v1"


async def test_like_sequence_matches_membership(client, alice, bob, carol, make_post):
    post = await make_post(alice)
    url = f"{API}/posts/{post['id']}/like"

    first = await client.post(url, headers=bob.headers)
    assert first.status_code == 200
    assert first.json() == {"likes": 1, "liked": True, "liked_by": [str(bob.id)]}

    second = await client.post(url, headers=carol.headers)
    assert second.json()["liked_by"] == [str(bob.id), str(carol.id)]
    assert second.json()["likes"] == 2

    third = await client.post(url, headers=bob.headers)
    assert third.json() == {"likes": 1, "liked": False, "liked_by": [str(carol.id)]}

    fetched = (await client.get(f"{API}/posts/{post['id']}", headers=carol.headers)).json()
    assert fetched["liked_by"] == [str(carol.id)]
    assert fetched["likes_count"] == 1
    assert fetched["is_liked"] is True


async def test_comment_and_reply_like_toggle_twice_restores(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    comment = await add_comment(alice, post["id"], "First!")
    reply = await add_comment(alice, post["id"], "Reply", reply_to=comment["id"])

    comment_url = f"{API}/posts/{post['id']}/comments/{comment['id']}/like"
    reply_url = f"{API}/posts/{post['id']}/comments/{comment['id']}/replies/{reply['id']}/like"

    for url in (comment_url, reply_url):
        on = await client.post(url, headers=bob.headers)
        assert on.json()["liked"] is True and on.json()["likes"] == 1
        off = await client.post(url, headers=bob.headers)
        assert off.json() == {"likes": 0, "liked": False, "liked_by": []}

    fetched = (await client.get(f"{API}/posts/{post['id']}")).json()
    node = fetched["comments"][0]
    assert node["liked_by"] == [] and node["replies"][0]["liked_by"] == []


async def test_reply_like_only_changes_reply(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    comment = await add_comment(alice, post["id"])
    reply = await add_comment(alice, post["id"], "Reply", reply_to=comment["id"])

    await client.post(
        f"{API}/posts/{post['id']}/comments/{comment['id']}/replies/{reply['id']}/like", headers=bob.headers
    )
    fetched = (await client.get(f"{API}/posts/{post['id']}", headers=bob.headers)).json()
    node = fetched["comments"][0]
    assert node["likes_count"] == 0
    assert node["replies"][0]["likes_count"] == 1
    assert node["replies"][0]["is_liked"] is True
    assert fetched["likes_count"] == 0


async def test_like_requires_login(client, alice, make_post):
    post = await make_post(alice)
    response = await client.post(f"{API}/posts/{post['id']}/like")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_like_unknown_targets_are_not_found(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    comment = await add_comment(alice, post["id"])
    reply = await add_comment(alice, post["id"], "Reply", reply_to=comment["id"])
    other = await add_comment(alice, post["id"], "Another")

    missing_post = await client.post(f"{API}/posts/{uuid4()}/like", headers=bob.headers)
    assert missing_post.status_code == 404

    missing_comment = await client.post(f"{API}/posts/{post['id']}/comments/{uuid4()}/like", headers=bob.headers)
    assert missing_comment.status_code == 404

    # a reply id is not a comment
    reply_as_comment = await client.post(
        f"{API}/posts/{post['id']}/comments/{reply['id']}/like", headers=bob.headers
    )
    assert reply_as_comment.status_code == 404

    # the reply must sit under the named comment
    wrong_parent = await client.post(
        f"{API}/posts/{post['id']}/comments/{other['id']}/replies/{reply['id']}/like", headers=bob.headers
    )
    assert wrong_parent.status_code == 404


async def test_cannot_like_unapproved_post_of_someone_else(client, alice, bob, make_post):
    post = await make_post(alice, approve=False)
    response = await client.post(f"{API}/posts/{post['id']}/like", headers=bob.headers)
    assert response.status_code == 404

    own = await client.post(f"{API}/posts/{post['id']}/like", headers=alice.headers)
    assert own.status_code == 200


async def test_new_like_notifies_author_once(client, session_maker, alice, bob, make_post):
    post = await make_post(alice)
    url = f"{API}/posts/{post['id']}/like"
    await client.post(url, headers=bob.headers)
    await client.post(url, headers=bob.headers)  # unlike
    await client.post(url, headers=alice.headers)  # self like

    async with session_maker() as session:
        count = await session.scalar(
            select(func.count()).select_from(Notification).where(Notification.recipient_id == alice.id)
        )
    assert count == 1


async def _updated_at(client, user, post_id):
    response = await client.get(f"{API}/posts/{post_id}", headers=user.headers)
    assert response.status_code == 200, response.text
    return datetime.fromisoformat(response.json()["updated_at"])


async def test_like_comment_and_pin_touch_post(client, alice, bob, make_post, add_comment):
    post = await make_post(alice)
    stamps = [await _updated_at(client, alice, post["id"])]

    await asyncio.sleep(0.01)
    await client.post(f"{API}/posts/{post['id']}/like", headers=bob.headers)
    stamps.append(await _updated_at(client, alice, post["id"]))

    await asyncio.sleep(0.01)
    comment = await add_comment(bob, post["id"], "Second week of May")
    stamps.append(await _updated_at(client, alice, post["id"]))

    await asyncio.sleep(0.01)
    pinned = await client.post(f"{API}/posts/{post['id']}/comments/{comment['id']}/pin", headers=bob.headers)
    assert pinned.json() == {"pinned": True}
    stamps.append(await _updated_at(client, alice, post["id"]))

    assert stamps == sorted(set(stamps))


@pytest.fixture()
async def file_db(tmp_path, override_db_dependency):
    """Requests against an on-disk database, one connection per session."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tathya.db'}",
        connect_args={"timeout": 30},
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def _get_db_override():
        async with maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[app_get_db] = _get_db_override
    try:
        yield maker
    finally:
        await engine.dispose()


async def test_concurrent_likes_from_different_users_all_count(client, file_db, register_user):
    author = await register_user("Alice Rao")
    reviewer = await register_user("Mona Moderator")
    async with file_db() as session:
        await session.execute(update(User).where(User.id == reviewer.id).values(role=ROLE_MODERATOR))
        await session.commit()

    created = await client.post(
        f"{API}/posts", data={"title": "Lab slots", "content": "Who has Thursday?"}, headers=author.headers
    )
    post_id = created.json()["id"]
    approved = await client.put(f"{API}/moderator/posts/{post_id}/approve", headers=reviewer.headers)
    assert approved.status_code == 200

    likers = [await register_user(f"Student {n}") for n in range(5)]
    responses = await asyncio.gather(
        *(client.post(f"{API}/posts/{post_id}/like", headers=user.headers) for user in likers)
    )
    assert [r.status_code for r in responses] == [200] * len(likers)
    assert all(r.json()["liked"] for r in responses)

    fetched = (await client.get(f"{API}/posts/{post_id}", headers=author.headers)).json()
    assert fetched["likes_count"] == len(likers)
    assert sorted(fetched["liked_by"]) == sorted(str(user.id) for user in likers)
