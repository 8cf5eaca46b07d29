# tests/conftest.py
import os
import tempfile
from itertools import count
from types import SimpleNamespace
from uuid import UUID

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="tathya-uploads-"))
os.environ.setdefault("DOCUMENT_DIR", tempfile.mkdtemp(prefix="tathya-documents-"))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tathya.db.base import Base
from tathya.db.session import get_db as app_get_db
from tathya.main import app as fastapi_app
from tathya.models.user import ROLE_MODERATOR, User

API = "/api/v1"

_EMAIL_COUNTER = count(1)


@pytest.fixture()
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture()
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture(autouse=True)
def override_db_dependency(session_maker):
    async def _get_db_override():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[app_get_db] = _get_db_override
    try:
        yield
    finally:
        fastapi_app.dependency_overrides.pop(app_get_db, None)


@pytest.fixture()
def app():
    return fastapi_app


@pytest.fixture()
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def register_user(client):
    """Register through the API; returns id, auth headers and the raw token payload."""

    async def _register(full_name: str = "Test User", email: str | None = None, password: str = "secret123"):
        email = email or f"user{next(_EMAIL_COUNTER)}@example.com"
        response = await client.post(
            f"{API}/auth/register",
            json={"full_name": full_name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        return SimpleNamespace(
            id=UUID(data["user"]["id"]),
            email=email,
            headers={"Authorization": f"Bearer {data['access_token']}"},
            token=data,
        )

    return _register


@pytest.fixture()
def promote(session_maker):
    async def _promote(user_id: UUID) -> None:
        async with session_maker() as session:
            await session.execute(update(User).where(User.id == user_id).values(role=ROLE_MODERATOR))
            await session.commit()

    return _promote


@pytest.fixture()
async def alice(register_user):
    return await register_user("Alice Rao")


@pytest.fixture()
async def bob(register_user):
    return await register_user("Bob Iyer")


@pytest.fixture()
async def carol(register_user):
    return await register_user("Carol Das")


@pytest.fixture()
async def moderator(register_user, promote):
    user = await register_user("Mona Moderator")
    await promote(user.id)
    return user


@pytest.fixture()
def make_post(client, moderator):
    """Create a post as ``author``; approved by the moderator unless ``approve=False``."""

    async def _make_post(author, title: str = "Exam schedule", content: str = "When is the exam?", approve: bool = True, **form):
        data = {"title": title, "content": content, **{k: str(v) for k, v in form.items()}}
        response = await client.post(f"{API}/posts", data=data, headers=author.headers)
        assert response.status_code == 201, response.text
        post = response.json()
        if approve:
            approved = await client.put(f"{API}/moderator/posts/{post['id']}/approve", headers=moderator.headers)
            assert approved.status_code == 200, approved.text
            post = approved.json()
        return post

    return _make_post


@pytest.fixture()
def add_comment(client):
    async def _add_comment(user, post_id, content: str = "Nice post", reply_to=None):
        body = {"content": content}
        if reply_to is not None:
            body["replyTo"] = str(reply_to)
        response = await client.post(f"{API}/posts/{post_id}/comments", json=body, headers=user.headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _add_comment
